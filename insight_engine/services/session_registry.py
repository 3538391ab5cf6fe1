"""
Session Registry - One ReportController per browser session, in memory.

The registry is bounded: once max_sessions controllers exist, creating a
new one evicts the least recently used session.
"""
import threading
import uuid
from collections import OrderedDict
from typing import Callable, Optional

from insight_engine import config
from insight_engine.services.logging_service import get_logger
from insight_engine.services.report_state import ReportController


class SessionRegistry:
    """Creates and remembers report controllers keyed by session id."""

    def __init__(self, client_factory: Callable[[], object], max_sessions: Optional[int] = None):
        """
        Args:
            client_factory: Returns the summary client handed to new sessions
            max_sessions: Upper bound on live sessions; config.MAX_SESSIONS if omitted
        """
        self.client_factory = client_factory
        self.max_sessions = max_sessions if max_sessions is not None else config.MAX_SESSIONS
        if self.max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self._controllers: "OrderedDict[str, ReportController]" = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def new_session_id() -> str:
        return str(uuid.uuid4())

    def get(self, session_id: Optional[str]) -> Optional[ReportController]:
        if not session_id:
            return None
        with self._lock:
            controller = self._controllers.get(session_id)
            if controller is not None:
                self._controllers.move_to_end(session_id)
            return controller

    def get_or_create(self, session_id: str) -> ReportController:
        evicted = []
        with self._lock:
            controller = self._controllers.get(session_id)
            if controller is not None:
                self._controllers.move_to_end(session_id)
                return controller

            controller = ReportController(self.client_factory(), session_id=session_id)
            self._controllers[session_id] = controller
            while len(self._controllers) > self.max_sessions:
                evicted.append(self._controllers.popitem(last=False)[0])

        for old_id in evicted:
            get_logger().info("Evicted dashboard session", evicted_session=old_id, limit=self.max_sessions)
        return controller

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._controllers

    def __len__(self) -> int:
        with self._lock:
            return len(self._controllers)
