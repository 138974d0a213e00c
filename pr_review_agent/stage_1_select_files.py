"""
Stage 1: Select Files — PR Review Agent

PURPOSE:
    Take the full list of changed files GitHub reports for the pull request
    and drop the ones matching the configured exclusion patterns (lock files,
    generated code, docs, ...). Everything that survives is sent to the model
    in Stage 2.

    This stage is pure Python with zero API calls. The listing itself is done
    by review_pipeline_main.py through GitHubAPI.list_pull_request_files.

CALLED BY:
    review_pipeline_main.py passes the listed files, the patterns from
    EXCLUDE_PATTERNS and the optional MAX_FILES cap.

DESIGN DECISIONS:
    - Patterns are glob-like with `*` as the only wildcard. Each one becomes a
      regex with `*` -> `.*` and every other character escaped, and is matched
      anywhere in the path (re.search, no anchors). "*.md" therefore excludes
      "README.md" and "docs/guide.md" but not "src/app.ts".
    - An empty pattern set excludes nothing. We return early instead of
      compiling an empty alternation, which would match every filename.
    - The file cap is off by default. When set it keeps the first N files in
      GitHub's order after exclusion.

RETURNS:
    A new list of ChangedFile, same relative order as the input.
"""

import re
from typing import Iterable, Optional, Sequence

import structlog

from .models import ChangedFile


logger = structlog.get_logger(__name__)


def select_changed_files(
    files: Sequence[ChangedFile],
    exclude_patterns: Iterable[str],
    max_files: Optional[int] = None
) -> list:
    """
    Filter the pull request's changed files for review.

    Args:
        files: Every file GitHub listed for the pull request, in order.
        exclude_patterns: Glob-like patterns; a file matching ANY of them is
                          dropped.
        max_files: Optional cap on the number of files kept.

    Returns:
        The kept files, preserving the original order.
    """
    matcher = compile_exclude_patterns(exclude_patterns)

    if matcher is None:
        selected = list(files)
    else:
        selected = [f for f in files if not matcher.search(f.filename)]

    if max_files is not None:
        selected = selected[:max_files]

    logger.info(
        "Selected files for review",
        analyzed=len(selected),
        total=len(files),
    )
    return selected


def compile_exclude_patterns(exclude_patterns: Iterable[str]):
    """
    Compile the patterns into one regex, or None when there is nothing to exclude.
    """
    parts = [_glob_to_regex(p) for p in exclude_patterns if p]
    if not parts:
        return None
    return re.compile("|".join(f"(?:{p})" for p in parts))


# ---------------------------------------------------------------------------
# PRIVATE HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def _glob_to_regex(pattern: str) -> str:
    return ".*".join(re.escape(chunk) for chunk in pattern.split("*"))
