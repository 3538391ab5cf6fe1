"""
Report View - Pure rendering of a ReportState snapshot.

build_view_model() derives every display value (nav highlighting, chapter
position label, prev/next availability, chart coordinates) so the template
only lays them out. Nothing here mutates state.
"""
from typing import Any, Dict, Optional

from jinja2 import Environment, PackageLoader, select_autoescape

from insight_engine import config
from insight_engine.models.trend import SEARCH_MODALITY_TREND, SERIES_LABELS, series_points
from insight_engine.services.report_state import ReportState

SKELETON_ROWS = 6
REPORT_PERIOD = "Q3 2024 Intelligence Report"
THESIS_CONTEXT = "The shift from discovery to intent-based execution within native environments."
CONCLUSION_TAGS = ["#IntelligentSearch", "#SaaSIntegration", "#API-First", "#SemanticWeb", "#ContextAware"]

_env = Environment(
    loader=PackageLoader("insight_engine", "templates"),
    autoescape=select_autoescape(["html"]),
)


def _trend_chart() -> Dict[str, Any]:
    series = []
    for key in ("standalone", "integrated"):
        points = series_points(SEARCH_MODALITY_TREND, key)
        series.append({
            "key": key,
            "label": SERIES_LABELS[key],
            "points": " ".join(f"{x},{y}" for x, y in points),
        })
    return {
        "title": "Market Paradigm Shift: Search Modalities",
        "years": [p.year for p in SEARCH_MODALITY_TREND],
        "series": series,
    }


def _chapter_detail(state: ReportState) -> Optional[Dict[str, Any]]:
    document = state.document
    chapter = document.find_chapter(state.active_chapter_id)
    if chapter is None:
        return None
    position = document.position_of(chapter.id)
    return {
        "id": chapter.id,
        "title": chapter.title,
        "summary": chapter.summary,
        "key_points": list(chapter.key_points),
        "position_label": f"CHAPTER 0{chapter.id} OF 0{len(document.chapters)}",
        "has_previous": position > 0,
        "has_next": position < len(document.chapters) - 1,
    }


def build_view_model(state: ReportState) -> Dict[str, Any]:
    """Derive all display values for one state snapshot."""
    if state.is_loading:
        mode = "loading"
    elif state.document is not None:
        mode = "loaded"
    else:
        mode = "idle"

    model: Dict[str, Any] = {
        "mode": mode,
        "thesis_text": state.thesis_text,
        "error_message": state.error_message,
        "skeleton_rows": list(range(SKELETON_ROWS)) if mode == "loading" else [],
        "refresh_seconds": config.AUTO_REFRESH_SECONDS if mode == "loading" else None,
        "thesis_context": THESIS_CONTEXT,
        "trend_chart": _trend_chart(),
        "nav": [],
        "report": None,
        "active_chapter": None,
    }

    if mode != "loaded":
        return model

    document = state.document
    model["nav"] = [
        {
            "id": ch.id,
            "label": f"0{ch.id}",
            "title": ch.title,
            "active": ch.id == state.active_chapter_id,
        }
        for ch in document.chapters
    ]
    model["report"] = {
        "title": document.title,
        "author_alias": document.author_alias,
        "executive_summary": document.executive_summary,
        "period": REPORT_PERIOD,
        "conclusion": document.conclusion,
        "tags": CONCLUSION_TAGS,
        "chapter_count": len(document.chapters),
    }
    model["active_chapter"] = _chapter_detail(state)
    return model


def render_dashboard(state: ReportState) -> str:
    return _env.get_template("dashboard.html").render(**build_view_model(state))
