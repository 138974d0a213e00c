"""
Data models for the review pipeline.

Defines the small set of immutable records that flow between the stages:
the validation rules, the changed files returned by GitHub, the pull request
metadata from the event payload, and the final analysis result.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class ValidationRule:
    """A single coding rule the reviewer checks the changes against."""

    name: str
    description: str
    required: bool = False


@dataclass(frozen=True)
class ChangedFile:
    """One entry of the GitHub "list pull request files" response."""

    filename: str
    status: str = "modified"  # added, removed, modified, renamed, ...
    additions: int = 0
    deletions: int = 0
    patch: Optional[str] = None  # absent for binaries and pure renames

    @classmethod
    def from_api(cls, item: dict) -> "ChangedFile":
        return cls(
            filename=item["filename"],
            status=item.get("status", "modified"),
            additions=int(item.get("additions", 0) or 0),
            deletions=int(item.get("deletions", 0) or 0),
            patch=item.get("patch") or None,
        )


@dataclass(frozen=True)
class PullRequestInfo:
    """The parts of the pull_request event payload the pipeline uses."""

    number: int
    title: str
    body: Optional[str] = None
    author: str = "unknown"
    head_sha: Optional[str] = None

    @classmethod
    def from_event(cls, payload: dict) -> "PullRequestInfo":
        """
        Build from a GitHub Actions event payload.

        Raises KeyError when the payload carries no pull_request object; the
        caller turns that into a WrongEventError.
        """
        pr = payload["pull_request"]
        return cls(
            number=int(pr["number"]),
            title=pr.get("title") or "",
            body=pr.get("body") or None,
            author=(pr.get("user") or {}).get("login", "unknown"),
            head_sha=(pr.get("head") or {}).get("sha"),
        )


@dataclass(frozen=True)
class AnalysisResult:
    """
    The reviewer's verdict.

    Only `approved` and `issues` are always meaningful. `score`,
    `suggestions` and `summary` belong to the extended schema and may be
    missing when the model answered with the minimal one; the comment
    renderer supplies the defaults. `raw` keeps the parsed JSON object
    exactly as the model returned it.
    """

    approved: bool
    issues: tuple = ()
    score: Optional[int] = None
    suggestions: tuple = ()
    summary: Optional[str] = None
    raw: Optional[dict] = field(default=None, compare=False)

    @classmethod
    def from_dict(cls, data: dict) -> "AnalysisResult":
        """
        Leniently coerce a parsed model reply.

        Missing fields are tolerated. `issues` and `suggestions` may be a
        list or a single string, the score is clamped to 0-100 and dropped
        when it is not a number.
        """
        summary = data.get("summary")
        return cls(
            approved=_coerce_bool(data.get("approved")),
            issues=_coerce_str_list(data.get("issues")),
            score=_coerce_score(data.get("score")),
            suggestions=_coerce_str_list(data.get("suggestions")),
            summary=str(summary) if summary else None,
            raw=data,
        )


# ---------------------------------------------------------------------------
# PRIVATE HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def _coerce_bool(value) -> bool:
    # A missing verdict is not an approval.
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True


def _coerce_str_list(value) -> tuple:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value.strip() else ()
    if isinstance(value, (list, tuple)):
        return tuple(str(item) for item in value if str(item).strip())
    return (str(value),)


def _coerce_score(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        score = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None
    return max(0, min(100, score))
