"""
Tests for the dashboard view model and its HTML rendering.
"""

from dataclasses import replace

import pytest

from insight_engine.models.summary import SummaryDocument
from insight_engine.services.report_state import GENERATION_ERROR_MESSAGE, ReportState
from insight_engine.views.report_view import (
    CONCLUSION_TAGS,
    SKELETON_ROWS,
    build_view_model,
    render_dashboard,
)


@pytest.fixture
def loaded_state(sample_document) -> ReportState:
    return ReportState(thesis_text="thesis", document=sample_document, active_chapter_id=1, sequence=1)


class TestViewModel:
    def test_idle_when_nothing_loaded(self) -> None:
        model = build_view_model(ReportState())

        assert model["mode"] == "idle"
        assert model["nav"] == []
        assert model["report"] is None
        assert model["refresh_seconds"] is None

    def test_loading_shows_skeleton_even_with_stale_document(self, loaded_state) -> None:
        model = build_view_model(replace(loaded_state, is_loading=True))

        assert model["mode"] == "loading"
        assert len(model["skeleton_rows"]) == SKELETON_ROWS
        assert model["nav"] == []
        assert model["refresh_seconds"]

    def test_nav_highlights_active_chapter(self, loaded_state) -> None:
        model = build_view_model(replace(loaded_state, active_chapter_id=2))

        assert [(item["id"], item["active"]) for item in model["nav"]] == [(1, False), (2, True), (3, False)]
        assert model["nav"][1]["label"] == "02"

    def test_first_chapter_disables_previous(self, loaded_state) -> None:
        detail = build_view_model(loaded_state)["active_chapter"]

        assert detail["has_previous"] is False
        assert detail["has_next"] is True
        assert detail["position_label"] == "CHAPTER 01 OF 03"
        assert len(detail["key_points"]) == 5

    def test_last_chapter_disables_next(self, loaded_state) -> None:
        detail = build_view_model(replace(loaded_state, active_chapter_id=3))["active_chapter"]

        assert detail["has_previous"] is True
        assert detail["has_next"] is False

    def test_report_sections(self, loaded_state) -> None:
        report = build_view_model(loaded_state)["report"]

        assert report["author_alias"] == "Dr. A. Vance"
        assert report["conclusion"] == "Intelligence becomes ambient."
        assert report["tags"] == CONCLUSION_TAGS

    def test_error_shown_alongside_stale_document(self, loaded_state) -> None:
        model = build_view_model(replace(loaded_state, error_message=GENERATION_ERROR_MESSAGE))

        assert model["mode"] == "loaded"
        assert model["error_message"] == GENERATION_ERROR_MESSAGE
        assert model["report"]["title"] == "Search Beyond the Bar"

    def test_zero_chapters_has_no_detail(self) -> None:
        empty = SummaryDocument(title="t", author_alias="a", executive_summary="e", chapters=(), conclusion="c")

        model = build_view_model(ReportState(document=empty))

        assert model["mode"] == "loaded"
        assert model["nav"] == []
        assert model["active_chapter"] is None

    def test_trend_chart_has_both_series(self) -> None:
        chart = build_view_model(ReportState())["trend_chart"]

        assert [s["label"] for s in chart["series"]] == ["Standalone Search", "Integrated OS/SaaS"]
        assert chart["years"][0] == 2010 and chart["years"][-1] == 2030


class TestRenderDashboard:
    def test_loaded_page(self, loaded_state) -> None:
        html = render_dashboard(loaded_state)

        assert "Search Beyond the Bar" in html
        assert "CHAPTER 01 OF 03" in html
        assert "Point 1.5" in html
        assert "#SemanticWeb" in html
        assert 'http-equiv="refresh"' not in html

    def test_loading_page_refreshes(self) -> None:
        html = render_dashboard(ReportState(thesis_text="t", is_loading=True))

        assert 'http-equiv="refresh"' in html
        assert html.count('class="skeleton"') >= SKELETON_ROWS

    def test_idle_page(self) -> None:
        html = render_dashboard(ReportState())

        assert "Awaiting data synthesis..." in html
        assert "Initiate system to synthesize knowledge" in html

    def test_error_banner(self) -> None:
        html = render_dashboard(ReportState(error_message=GENERATION_ERROR_MESSAGE))

        assert GENERATION_ERROR_MESSAGE in html

    def test_model_text_is_escaped(self, payload_factory) -> None:
        payload = payload_factory()
        payload["title"] = "<script>alert(1)</script>"
        state = ReportState(document=SummaryDocument.from_dict(payload), active_chapter_id=1)

        html = render_dashboard(state)

        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;" in html

    def test_zero_chapters_renders_empty_state(self) -> None:
        empty = SummaryDocument(title="t", author_alias="a", executive_summary="e", chapters=(), conclusion="c")

        html = render_dashboard(ReportState(document=empty))

        assert "This report has no chapters to display." in html
