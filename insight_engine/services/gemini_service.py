"""
Gemini Service - Generates a structured intelligence report from a thesis.

One call per thesis: the prompt is sent with a strict response schema, the
returned text is decoded as JSON and validated into a SummaryDocument.
Transport failures and malformed responses are raised as distinct
GenerationError subclasses so callers can log them apart, even though the
dashboard shows a single message for both.
"""
import json
import re
from typing import Any, Optional

import google.generativeai as genai

from insight_engine import config
from insight_engine.models.summary import SummaryDocument
from insight_engine.services.logging_service import get_logger


SUMMARY_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "title": {"type": "STRING"},
        "authorAlias": {"type": "STRING"},
        "executiveSummary": {"type": "STRING"},
        "chapters": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "id": {"type": "INTEGER"},
                    "title": {"type": "STRING"},
                    "summary": {"type": "STRING"},
                    "keyPoints": {
                        "type": "ARRAY",
                        "items": {"type": "STRING"},
                    },
                },
                "required": ["id", "title", "summary", "keyPoints"],
            },
        },
        "conclusion": {"type": "STRING"},
    },
    "required": ["title", "authorAlias", "executiveSummary", "chapters", "conclusion"],
}


class GenerationError(Exception):
    """Base error for a failed report generation."""

    kind = "generation failure"

    def __init__(self, message: Optional[str] = None, cause: Optional[BaseException] = None):
        super().__init__(message or self.kind)
        self.cause = cause


class RequestFailure(GenerationError):
    """The call to Gemini did not complete (network, auth, quota, blocked output)."""

    kind = "request failure"


class ParseFailure(GenerationError):
    """Gemini answered, but the text was not a valid report document."""

    kind = "parse failure"


def build_prompt(thesis: str) -> str:
    """Embed the thesis verbatim in the report-generation instruction."""
    return f"""Generate a comprehensive, academic-style bullet point summary of a conceptual book based on the following thesis: "{thesis}".
The summary should be structured as a seminal business and technology book with 6-8 chapters.
Each chapter must include a title, a high-level summary, and at least 5 deep-dive bullet points exploring specific implications for professional software (e.g., IDEs, CRM, Design tools, Medical software, etc.).
Focus on technical integration, user experience paradigms, and the shift from "Discovery" to "Actionable Intelligence"."""


def parse_summary(text: Optional[str]) -> SummaryDocument:
    """
    Decode a model response into a SummaryDocument.

    Raises:
        ParseFailure: If the text is empty, not JSON, or has the wrong shape.
    """
    if not text or not text.strip():
        raise ParseFailure("parse failure: empty response")

    cleaned_text = text.strip()
    if cleaned_text.startswith("```"):
        cleaned_text = re.sub(r"^```json\s*", "", cleaned_text)
        cleaned_text = re.sub(r"^```\s*", "", cleaned_text)
        cleaned_text = re.sub(r"\s*```$", "", cleaned_text)

    try:
        payload = json.loads(cleaned_text)
    except json.JSONDecodeError as e:
        raise ParseFailure(f"parse failure: {e}", cause=e) from e

    try:
        return SummaryDocument.from_dict(payload)
    except ValueError as e:
        raise ParseFailure(f"parse failure: {e}", cause=e) from e


class GeminiService:
    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        # An empty key is accepted here; Gemini rejects it on the first call.
        genai.configure(api_key=api_key if api_key is not None else config.GEMINI_API_KEY)
        self.model_name = model_name or config.GEMINI_MODEL_ID
        self.logger = get_logger()

    def _build_model(self) -> Any:
        return genai.GenerativeModel(
            model_name=self.model_name,
            generation_config={
                "temperature": config.GEMINI_TEMPERATURE,
                "max_output_tokens": config.GEMINI_MAX_OUTPUT_TOKENS,
                "response_mime_type": "application/json",
                "response_schema": SUMMARY_SCHEMA,
            },
        )

    def generate_summary(self, thesis: str) -> SummaryDocument:
        """
        Generate a report for one thesis. No retry, no caching.

        Raises:
            RequestFailure: The Gemini call itself failed.
            ParseFailure: The response was not a valid report.
        """
        prompt = build_prompt(thesis)
        self.logger.debug("Requesting summary", model=self.model_name, thesis_length=len(thesis))

        try:
            response = self._build_model().generate_content(prompt)
            # .text raises ValueError when the candidate was blocked or empty
            text = response.text
        except Exception as e:
            self.logger.error("Gemini request failed", kind=RequestFailure.kind, error=str(e))
            raise RequestFailure(f"request failure: {e}", cause=e) from e

        try:
            document = parse_summary(text)
        except ParseFailure as e:
            self.logger.error("Failed to parse Gemini response", kind=ParseFailure.kind, error=str(e))
            raise

        self.logger.info("Summary generated", title=document.title, chapter_count=len(document.chapters))
        return document
