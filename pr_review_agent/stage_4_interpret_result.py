"""
Stage 4: Interpret Result — PR Review Agent

PURPOSE:
    Turn the raw text returned by Stage 3 into an AnalysisResult. Models do
    not always answer with clean JSON, so this stage degrades instead of
    failing: a bad answer lowers the quality of the verdict, it never aborts
    the run.

CALLED BY:
    review_pipeline_main.py passes the raw reply text.

PARSING ORDER:
    1. JSON span. Take everything from the first "{" to the LAST "}" (greedy,
       not brace-balanced) and json.loads it. On success the object is used
       as-is, missing fields included.
    2. Keyword heuristic. When there is no span, or the span does not decode as
       JSON: approved unless the text says "rejected" or "not approved",
       no issues, score 75, summary = the first 200 characters.
    3. Sentinel. Any other error inside this stage yields approved=False with
       a single issue explaining the analysis could not be parsed.

COST:
    $0: pure Python. No API calls.
"""

import json
import re
from typing import Optional

import structlog

from .models import AnalysisResult


logger = structlog.get_logger(__name__)

# Greedy on purpose: first "{" through the last "}" in the text.
_JSON_SPAN = re.compile(r"\{[\s\S]*\}")

HEURISTIC_SCORE = 75
SUMMARY_PREVIEW_CHARS = 200
PARSE_FAILURE_ISSUE = "Failed to parse AI analysis"


def interpret_review_text(raw_text: str) -> AnalysisResult:
    """
    Extract the verdict from the model's reply.

    Never raises: parsing problems fall back to the keyword heuristic, and
    anything unexpected falls back to a conservative rejection.
    """
    try:
        parsed = _parse_json_span(raw_text)
        if parsed is not None:
            return AnalysisResult.from_dict(parsed)
        return _heuristic_result(raw_text)
    except Exception as e:
        logger.warning("Failed to parse analysis result", error=str(e))
        return AnalysisResult(approved=False, issues=(PARSE_FAILURE_ISSUE,))


# ---------------------------------------------------------------------------
# PRIVATE HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def _parse_json_span(raw_text: str) -> Optional[dict]:
    """Return the parsed JSON object, or None when there is nothing usable."""
    match = _JSON_SPAN.search(raw_text)
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except (ValueError, RecursionError) as e:
        # ValueError also covers the integer digit limit
        logger.warning("Model reply contained malformed JSON, using keyword heuristic", error=str(e))
        return None
    # A span starting with "{" can only decode to an object
    return parsed


def _heuristic_result(raw_text: str) -> AnalysisResult:
    lowered = raw_text.lower()
    approved = "rejected" not in lowered and "not approved" not in lowered
    return AnalysisResult(
        approved=approved,
        issues=(),
        score=HEURISTIC_SCORE,
        summary=raw_text[:SUMMARY_PREVIEW_CHARS] + "...",
    )
