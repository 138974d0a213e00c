"""
Stage 5: Post Review & Decide — PR Review Agent

PURPOSE:
    This is the final stage of the review pipeline. It takes the verdict from
    Stage 4 and acts on it:

      1. Format the verdict as a readable Markdown comment
      2. Post the comment on the pull request
      3. Optionally mirror the verdict as a commit status on the head commit
      4. Hand the boolean verdict back so review_pipeline_main.py can set the
         job result (exit 0 when approved, 1 otherwise)

CALLED BY:
    review_pipeline_main.py passes the AnalysisResult, the pull request
    metadata and the GitHubAPI wrapper.

DESIGN DECISIONS:
    - The job exit status is the single source of truth. The commit status is
      an optional second channel and always carries the same verdict.
    - A failed comment or status post does NOT change the verdict. We log it
      as an error so the lost feedback is visible in the Actions log.
    - format_review_comment is a pure function. Fields missing from the
      model's answer get their defaults here, not in the data model.
"""

from typing import Optional

import requests
import structlog

from .github_api import GitHubAPI
from .models import AnalysisResult, PullRequestInfo


logger = structlog.get_logger(__name__)

BAR_CELLS = 10
FILLED_CELL = "█"
EMPTY_CELL = "░"


def post_review_and_decide(
    result: AnalysisResult,
    pull_request: PullRequestInfo,
    github: GitHubAPI,
    post_commit_status: bool = False
) -> bool:
    """
    Post the review comment (and optional commit status) and return the verdict.

    Returns:
        True when the pull request is approved.
    """
    comment = format_review_comment(result)

    try:
        github.post_comment(pull_request.number, comment)
        logger.info("Posted review comment", pr_number=pull_request.number)
    except requests.RequestException as e:
        logger.error("Failed to post review comment", pr_number=pull_request.number, error=str(e))

    if post_commit_status:
        set_review_status(
            github,
            pull_request.head_sha,
            commit_state_for(result.approved),
            "PR approved by AI reviewer" if result.approved else "PR rejected by AI reviewer",
        )

    return result.approved


def set_review_status(github: GitHubAPI, sha: Optional[str], state: str, description: str):
    """Set the ai-pr-review commit status, logging instead of raising on failure."""
    if not sha:
        logger.warning("No head commit SHA in event payload, skipping commit status")
        return
    try:
        github.create_commit_status(sha, state, description)
        logger.info("Set commit status", sha=sha[:7], state=state)
    except requests.RequestException as e:
        logger.error("Failed to set commit status", sha=sha[:7], state=state, error=str(e))


def commit_state_for(approved: Optional[bool]) -> str:
    """Map a verdict to a commit status state. None means still reviewing."""
    if approved is None:
        return "pending"
    return "success" if approved else "failure"


def format_review_comment(result: AnalysisResult) -> str:
    """
    Format the verdict as the Markdown comment shown on the pull request.
    """
    status_emoji = "✅" if result.approved else "❌"
    status_label = "APPROVED" if result.approved else "CHANGES REQUESTED"

    lines = [
        f"## {status_emoji} AI Code Review",
        "",
        f"**Status:** {status_label}",
    ]

    if result.score is not None:
        lines.append(f"**Score:** {result.score}/100 {_score_to_bar(result.score)}")

    if result.summary:
        lines.append("")
        lines.append("### Summary")
        lines.append(result.summary)

    if result.issues:
        lines.append("")
        lines.append("### 🔴 Issues to Fix")
        for issue in result.issues:
            lines.append(f"- {issue}")

    if result.suggestions:
        lines.append("")
        lines.append("### 💡 Suggestions")
        for suggestion in result.suggestions:
            lines.append(f"- {suggestion}")

    lines.append("")
    lines.append("---")
    lines.append("*Review generated by AI PR Reviewer*")

    return "\n".join(lines)


def _score_to_bar(score: int) -> str:
    """Convert a 0-100 score to a ten-cell bar."""
    filled = max(0, min(BAR_CELLS, score // 10))
    return FILLED_CELL * filled + EMPTY_CELL * (BAR_CELLS - filled)
