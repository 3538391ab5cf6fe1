"""
Report State Controller - Owns the dashboard state for one session.

All mutations go through named operations (initialize, submit_thesis,
select_chapter, step_chapter). Views receive immutable ReportState
snapshots. Every request cycle is numbered; a completion is applied only
if no newer cycle was started in the meantime, so a slow response can
never overwrite a newer one.
"""
import threading
from dataclasses import dataclass, replace
from typing import Optional, Union

from insight_engine import config
from insight_engine.models.summary import SummaryDocument
from insight_engine.services.gemini_service import GenerationError
from insight_engine.services.logging_service import SessionLogger

GENERATION_ERROR_MESSAGE = (
    "Failed to generate the intelligence report. Please check your API configuration."
)

_DIRECTIONS = {"next": 1, "previous": -1, 1: 1, -1: -1}


@dataclass(frozen=True)
class ReportState:
    thesis_text: str = ""
    document: Optional[SummaryDocument] = None
    is_loading: bool = False
    active_chapter_id: Optional[int] = None
    error_message: Optional[str] = None
    sequence: int = 0

    def to_dict(self) -> dict:
        return {
            "thesisText": self.thesis_text,
            "document": self.document.to_dict() if self.document else None,
            "isLoading": self.is_loading,
            "activeChapterId": self.active_chapter_id,
            "errorMessage": self.error_message,
        }


class ReportController:
    """Drives request cycles against a summary client and tracks navigation."""

    def __init__(self, client, session_id: str = "local", default_thesis: Optional[str] = None):
        """
        Args:
            client: Object exposing generate_summary(thesis) -> SummaryDocument
            session_id: Dashboard session this controller belongs to
            default_thesis: Thesis used by initialize(); config default if omitted
        """
        self.client = client
        self.session_id = session_id
        self.default_thesis = default_thesis if default_thesis is not None else config.DEFAULT_THESIS
        self.logger = SessionLogger(session_id)
        self._lock = threading.Lock()
        self._state = ReportState()
        self._initialized = False

    @property
    def state(self) -> ReportState:
        with self._lock:
            return self._state

    # === Request cycles ===

    def initialize(self) -> bool:
        """Seed the default thesis and run the first cycle. Returns False if already done."""
        seq = self.begin_initialize()
        if seq is None:
            return False
        self.run_cycle(seq, self.default_thesis)
        return True

    def begin_initialize(self) -> Optional[int]:
        with self._lock:
            if self._initialized:
                return None
            self._initialized = True
            self._state = replace(self._state, thesis_text=self.default_thesis)
            seq = self._start_locked()
        self.logger.log_stage("request_cycle", "started", sequence=seq)
        return seq

    def submit_thesis(self, text: str) -> bool:
        """Run a request cycle for text. Blank input is ignored; returns whether a cycle ran."""
        seq = self.begin_cycle(text)
        if seq is None:
            return False
        self.run_cycle(seq, text)
        return True

    def begin_cycle(self, text: str) -> Optional[int]:
        """
        Enter the loading state for a new thesis and return the cycle number.

        Returns None (and leaves state untouched) when text is blank.
        """
        if not text or not text.strip():
            return None
        with self._lock:
            self._initialized = True
            self._state = replace(self._state, thesis_text=text)
            seq = self._start_locked()
        self.logger.log_stage("request_cycle", "started", sequence=seq)
        return seq

    def _start_locked(self) -> int:
        seq = self._state.sequence + 1
        self._state = replace(self._state, is_loading=True, error_message=None, sequence=seq)
        return seq

    def run_cycle(self, seq: int, thesis: str) -> None:
        """
        Call the summary client for cycle seq and apply the outcome if still current.

        Never raises: anything other than a GenerationError is logged as an
        unexpected failure and ends the cycle with the same error message,
        so a session cannot be left loading.
        """
        try:
            document = self.client.generate_summary(thesis)
        except GenerationError as e:
            self.logger.log_error("request_cycle", str(e), sequence=seq, kind=e.kind)
            self._finish(seq, error_message=GENERATION_ERROR_MESSAGE)
            return
        except Exception as e:
            self.logger.log_error(
                "request_cycle", repr(e), sequence=seq, kind="unexpected failure",
            )
            self._finish(seq, error_message=GENERATION_ERROR_MESSAGE)
            return
        self._finish(seq, document=document)

    def _finish(self, seq: int, document: Optional[SummaryDocument] = None,
                error_message: Optional[str] = None) -> None:
        with self._lock:
            latest = self._state.sequence
            if seq != latest:
                status = "discarded"
            elif document is not None:
                first_id = document.chapters[0].id if document.chapters else None
                self._state = replace(
                    self._state,
                    document=document,
                    active_chapter_id=first_id,
                    is_loading=False,
                )
                status = "completed"
            else:
                self._state = replace(self._state, error_message=error_message, is_loading=False)
                status = "failed"

        if status == "discarded":
            self.logger.warning("Discarding stale request cycle", sequence=seq, latest=latest)
        else:
            self.logger.log_stage("request_cycle", status, sequence=seq)

    # === Navigation ===

    def select_chapter(self, chapter_id: int) -> bool:
        """Make chapter_id active if the current document has it."""
        with self._lock:
            document = self._state.document
            if document is None or document.position_of(chapter_id) is None:
                return False
            self._state = replace(self._state, active_chapter_id=chapter_id)
            return True

    def step_chapter(self, direction: Union[str, int]) -> bool:
        """
        Move to the previous or next chapter by array position, clamped at the edges.

        Args:
            direction: "next" / "previous" (or 1 / -1)

        Raises:
            ValueError: For any other direction.
        """
        # True/False hash equal to 1/0 and would otherwise match
        if isinstance(direction, bool) or direction not in _DIRECTIONS:
            raise ValueError(f"Unknown direction: {direction!r}")
        step = _DIRECTIONS[direction]

        with self._lock:
            document = self._state.document
            if document is None or not document.chapters:
                return False

            position = document.position_of(self._state.active_chapter_id)
            if position is None:
                position = 0
            target = min(max(position + step, 0), len(document.chapters) - 1)
            new_id = document.chapters[target].id
            if new_id == self._state.active_chapter_id:
                return False
            self._state = replace(self._state, active_chapter_id=new_id)
            return True
