"""
Tests for the bounded in-memory session registry.
"""

from unittest.mock import MagicMock

import pytest

from insight_engine.services.session_registry import SessionRegistry


@pytest.fixture
def shared_client():
    return MagicMock()


class TestSessionRegistry:
    def test_get_or_create_reuses_controller(self, shared_client) -> None:
        registry = SessionRegistry(lambda: shared_client, max_sessions=3)

        first = registry.get_or_create("a")

        assert registry.get_or_create("a") is first
        assert registry.get("a") is first
        assert len(registry) == 1

    def test_unknown_or_empty_id_is_none(self, shared_client) -> None:
        registry = SessionRegistry(lambda: shared_client, max_sessions=3)

        assert registry.get(None) is None
        assert registry.get("") is None
        assert registry.get("missing") is None

    def test_oldest_session_is_evicted(self, shared_client) -> None:
        registry = SessionRegistry(lambda: shared_client, max_sessions=2)

        for session_id in ("a", "b", "c"):
            registry.get_or_create(session_id)

        assert len(registry) == 2
        assert "a" not in registry
        assert "b" in registry and "c" in registry

    def test_recent_use_protects_from_eviction(self, shared_client) -> None:
        registry = SessionRegistry(lambda: shared_client, max_sessions=2)
        registry.get_or_create("a")
        registry.get_or_create("b")

        registry.get("a")
        registry.get_or_create("c")

        assert "a" in registry
        assert "b" not in registry

    def test_many_sessions_stay_bounded(self, shared_client) -> None:
        factory = MagicMock(return_value=shared_client)
        registry = SessionRegistry(factory, max_sessions=5)

        for _ in range(50):
            registry.get_or_create(SessionRegistry.new_session_id())

        assert len(registry) == 5
        assert {c.client for c in registry._controllers.values()} == {shared_client}

    def test_limit_must_be_positive(self, shared_client) -> None:
        with pytest.raises(ValueError):
            SessionRegistry(lambda: shared_client, max_sessions=0)
