#!/usr/bin/env python3
"""
Generate one intelligence report from the command line.

Loads GEMINI_API_KEY from ../.env, runs a single request cycle and prints
the document as JSON (or the failure kind).

Usage:
    python scripts/generate_summary.py "Your thesis here"
"""
import json
import os
import sys

# Load environment variables from .env file before config is imported
from dotenv import load_dotenv
load_dotenv(os.path.join(os.path.dirname(__file__), '..', '.env'))

from insight_engine import config
from insight_engine.services.gemini_service import GeminiService, GenerationError


def main():
    thesis = " ".join(sys.argv[1:]).strip() or config.DEFAULT_THESIS

    print("=" * 60)
    print(f"Thesis: {thesis}")
    print(f"Model:  {config.GEMINI_MODEL_ID}")
    print("=" * 60)

    try:
        document = GeminiService().generate_summary(thesis)
    except GenerationError as e:
        print(f"\nError ({e.kind}): {e}")
        sys.exit(1)

    print(json.dumps(document.to_dict(), indent=2, ensure_ascii=False))
    print(f"\n{len(document.chapters)} chapters generated.")


if __name__ == "__main__":
    main()
