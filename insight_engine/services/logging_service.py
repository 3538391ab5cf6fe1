"""
Structured Logging Service - Cloud Logging integration.

Request cycles, generation failures and HTTP errors are logged with
structured metadata (session id, stage, failure kind) so a failed report
can be traced back to the browser session that asked for it.

One Cloud Logging handle is shared by the whole process; per-session
loggers only add their session id to each entry.
"""
import json
import sys
import threading
from datetime import datetime
from typing import Optional
from google.cloud import logging as cloud_logging

LOG_NAME = "search-insight-engine"

_cloud_lock = threading.Lock()
_cloud_logger = None
_cloud_checked = False


def get_cloud_logger():
    """Return the shared Cloud Logging logger, or None when it is unavailable."""
    global _cloud_logger, _cloud_checked
    with _cloud_lock:
        if not _cloud_checked:
            _cloud_checked = True
            try:
                _cloud_logger = cloud_logging.Client().logger(LOG_NAME)
            except Exception as e:
                print(f"Warning: Cloud Logging initialization failed: {e}. Using console only.", file=sys.stderr)
                _cloud_logger = None
        return _cloud_logger


def reset_cloud_logger():
    """Forget the shared handle so the next entry re-creates it."""
    global _cloud_logger, _cloud_checked
    with _cloud_lock:
        _cloud_logger = None
        _cloud_checked = False


class StructuredLogger:
    """Writes structured entries to Cloud Logging and the console."""

    def __init__(self, session_id: Optional[str] = None, enable_console: bool = True):
        self.session_id = session_id
        self.enable_console = enable_console

    def info(self, message: str, **kwargs):
        self._log("INFO", message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log("WARNING", message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log("ERROR", message, **kwargs)

    def debug(self, message: str, **kwargs):
        self._log("DEBUG", message, **kwargs)

    def _log(self, severity: str, message: str, **kwargs):
        struct = {
            "message": message,
            "timestamp": datetime.utcnow().isoformat(),
            **kwargs
        }
        if self.session_id:
            struct["session_id"] = self.session_id

        cloud_logger = get_cloud_logger()
        if cloud_logger is not None:
            try:
                cloud_logger.log_struct(struct, severity=severity)
            except Exception as e:
                print(f"Cloud Logging error: {e}", file=sys.stderr)

        if self.enable_console:
            console_msg = f"[{severity}] {message}"
            if self.session_id:
                console_msg = f"[{self.session_id}] {console_msg}"
            if kwargs:
                console_msg += f" | {json.dumps(kwargs, default=str)}"
            print(console_msg, file=sys.stderr if severity == "ERROR" else sys.stdout)


class SessionLogger(StructuredLogger):
    """Session-scoped logger with stage/error helpers for request cycles."""

    def __init__(self, session_id: str):
        super().__init__(session_id=session_id)

    def log_stage(self, stage: str, status: str, **kwargs):
        """
        Log a processing stage.

        Args:
            stage: Stage name (e.g., 'request_cycle')
            status: 'started', 'completed', 'failed' or 'discarded'
        """
        self.info(f"Stage: {stage} - {status}", stage=stage, status=status, **kwargs)

    def log_error(self, stage: str, error: str, **kwargs):
        self.error(f"Error in {stage}: {error}", stage=stage, error=error, **kwargs)


_global_logger = None

def get_logger() -> StructuredLogger:
    """Get the process-wide logger without a session id."""
    global _global_logger
    if _global_logger is None:
        _global_logger = StructuredLogger()
    return _global_logger
