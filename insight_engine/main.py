"""
Main Entry Point - HTTP surface of the Search Insight Engine dashboard.

Routes:
1. GET  /               - Server-rendered dashboard for the caller's session.
2. POST /submit         - Start a request cycle for the submitted thesis.
3. POST /select_chapter - Make a chapter active by id.
4. POST /step_chapter   - Move to the previous/next chapter.
5. GET  /api/state      - JSON snapshot of the session state.
6. GET  /health         - Liveness probe.

Architecture:
- Each browser gets a session cookie and its own ReportController.
- Request cycles run on a background thread; the dashboard shows the
  loading skeleton and refreshes itself until the cycle completes.
"""
import json
import threading

import functions_framework
from flask import Response

from insight_engine.config import SESSION_COOKIE_NAME
from insight_engine.services.gemini_service import GeminiService
from insight_engine.services.logging_service import get_logger
from insight_engine.services.session_registry import SessionRegistry
from insight_engine.views.report_view import render_dashboard

_summary_client = None

def get_summary_client() -> GeminiService:
    """Get or create the GeminiService shared by every session."""
    global _summary_client
    if _summary_client is None:
        _summary_client = GeminiService()
    return _summary_client


_registry = SessionRegistry(get_summary_client)


def _dispatch(target, *args):
    """Run a request cycle off the HTTP thread."""
    thread = threading.Thread(target=target, args=args, daemon=True)
    thread.start()
    return thread


def _json_response(payload: dict, status: int = 200) -> Response:
    return Response(json.dumps(payload, ensure_ascii=False), status=status, mimetype="application/json")


def _redirect_home() -> Response:
    return Response("", status=303, headers={"Location": "/"})


def _resolve_session(request):
    """Return (session_id, controller, is_new) for the caller."""
    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    controller = _registry.get(session_id)
    if controller is not None:
        return session_id, controller, False
    session_id = SessionRegistry.new_session_id()
    return session_id, _registry.get_or_create(session_id), True


@functions_framework.http
def main_http_entry(request):
    """
    Main HTTP entry point that routes requests based on path.
    """
    path = request.path
    logger = get_logger()
    logger.debug("Routing request", method=request.method, path=path)

    if path.endswith("/health"):
        return _json_response({"status": "ok"})

    method = request.method
    if path in ("", "/") and method == "GET":
        handler = show_dashboard
    elif path.endswith("/api/state") and method == "GET":
        handler = get_state
    elif path.endswith("/submit") and method == "POST":
        handler = submit_thesis
    elif path.endswith("/select_chapter") and method == "POST":
        handler = select_chapter
    elif path.endswith("/step_chapter") and method == "POST":
        handler = step_chapter
    else:
        return _json_response({"error": f"Path {path} not found"}, 404)

    try:
        session_id, controller, is_new = _resolve_session(request)
        response = handler(request, controller)
    except Exception as e:
        logger.error("Unhandled error", path=path, error=str(e))
        return _json_response({"error": str(e)}, 500)

    if is_new:
        response.set_cookie(SESSION_COOKIE_NAME, session_id, httponly=True, samesite="Lax")
    return response


def show_dashboard(request, controller) -> Response:
    """Render the dashboard, starting the default-thesis cycle on first visit."""
    seq = controller.begin_initialize()
    if seq is not None:
        _dispatch(controller.run_cycle, seq, controller.default_thesis)
    return Response(render_dashboard(controller.state), mimetype="text/html")


def submit_thesis(request, controller) -> Response:
    thesis = request.form.get("thesis", "")
    seq = controller.begin_cycle(thesis)
    if seq is not None:
        _dispatch(controller.run_cycle, seq, thesis)
    return _redirect_home()


def select_chapter(request, controller) -> Response:
    try:
        chapter_id = int(request.form.get("chapter_id", ""))
    except ValueError:
        return _json_response({"error": "chapter_id must be an integer"}, 400)
    controller.select_chapter(chapter_id)
    return _redirect_home()


def step_chapter(request, controller) -> Response:
    direction = request.form.get("direction", "")
    try:
        controller.step_chapter(direction)
    except ValueError as e:
        return _json_response({"error": str(e)}, 400)
    return _redirect_home()


def get_state(request, controller) -> Response:
    return _json_response(controller.state.to_dict())
