"""
Shared test fixtures.

Provides: sample report payloads, a scripted summary client, and an
autouse patch that keeps StructuredLogger off Google Cloud Logging.
"""

from unittest.mock import MagicMock, patch

import pytest

from insight_engine.models.summary import SummaryDocument
from insight_engine.services import logging_service


def make_payload(chapter_ids=(1, 2, 3), title="Search Beyond the Bar"):
    return {
        "title": title,
        "authorAlias": "Dr. A. Vance",
        "executiveSummary": "Search dissolves into the tools professionals already use.",
        "chapters": [
            {
                "id": cid,
                "title": f"Chapter {cid}",
                "summary": f"Summary of chapter {cid}.",
                "keyPoints": [f"Point {cid}.{n}" for n in range(1, 6)],
            }
            for cid in chapter_ids
        ],
        "conclusion": "Intelligence becomes ambient.",
    }


class ScriptedClient:
    """Summary client returning queued documents or raising queued errors."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def generate_summary(self, thesis):
        self.calls.append(thesis)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture(autouse=True)
def console_only_logging():
    """Force console-only logging and a fresh global logger per test."""
    logging_service._global_logger = None
    logging_service.reset_cloud_logger()
    with patch.object(
        logging_service.cloud_logging, "Client", MagicMock(side_effect=Exception("no credentials"))
    ):
        yield
    logging_service._global_logger = None
    logging_service.reset_cloud_logger()


@pytest.fixture
def sample_payload():
    return make_payload()


@pytest.fixture
def sample_document(sample_payload) -> SummaryDocument:
    return SummaryDocument.from_dict(sample_payload)


@pytest.fixture
def other_document() -> SummaryDocument:
    return SummaryDocument.from_dict(make_payload(chapter_ids=(10, 20), title="Second Report"))


@pytest.fixture
def payload_factory():
    return make_payload


@pytest.fixture
def scripted_client():
    """Factory: scripted_client(doc_or_error, ...) -> ScriptedClient."""
    return ScriptedClient
