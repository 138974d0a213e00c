"""
Stage 2: Build Review Prompt — PR Review Agent

PURPOSE:
    Assemble the two prompts sent to the model in Stage 3:

    1. SYSTEM PROMPT: the reviewer role, one bullet per coding rule (marked
       REQUIRED or OPTIONAL), the exact JSON schema to answer with, and the
       guidelines that tie approval to the required rules.
    2. USER PROMPT: the pull request title, description and author, followed
       by every selected file with its status, line counts and diff.

CALLED BY:
    review_pipeline_main.py passes the rule set, the pull request metadata
    from the event payload and the files kept by Stage 1.

DESIGN DECISIONS:
    - Both prompts are built by a pure function so the same inputs always
      produce the same text. No clock, no environment.
    - The rule set is passed in rather than imported here. The caller hands
      the same tuple to every stage that needs it.
    - The schema asks for the extended result (score, suggestions, summary).
      Stage 4 tolerates answers that only carry approved/issues.
    - We do NOT truncate diffs. If the prompt is too large for the model, the
      model call fails and Stage 3 reports it.

COST:
    $0: pure Python string assembly. No API calls.
"""

from typing import Sequence

from .models import ChangedFile, PullRequestInfo, ValidationRule


OUTPUT_SCHEMA = """{
  "approved": boolean,
  "score": number (0-100),
  "issues": ["list of critical issues that must be fixed"],
  "suggestions": ["list of optional improvements"],
  "summary": "short overall assessment of the changes"
}"""


def build_review_prompts(
    rules: Sequence[ValidationRule],
    pull_request: PullRequestInfo,
    files: Sequence[ChangedFile]
) -> tuple:
    """
    Build the system and user prompts for the review.

    Returns:
        (system_prompt, user_prompt)
    """
    return _build_system_prompt(rules), _build_user_prompt(pull_request, files)


# ---------------------------------------------------------------------------
# PRIVATE HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def _build_system_prompt(rules: Sequence[ValidationRule]) -> str:
    rules_text = "\n".join(
        f"- {rule.name}: {rule.description} ({'REQUIRED' if rule.required else 'OPTIONAL'})"
        for rule in rules
    )

    return f"""You are an expert code reviewer. Analyze the provided pull request changes according to these validation rules:

{rules_text}

Your response must be in the following JSON format:
{OUTPUT_SCHEMA}

Guidelines:
- Set approved=false if any REQUIRED rule is violated
- List the critical issues that prevent approval in "issues"; use an empty list if no issues are found
- Violations of OPTIONAL rules belong in "suggestions", not in "issues"
- Give an overall quality score from 0 (unusable) to 100 (excellent)
- Keep the summary to 2-3 sentences"""


def _build_user_prompt(pull_request: PullRequestInfo, files: Sequence[ChangedFile]) -> str:
    parts = [
        "## Pull Request Information",
        f"Title: {pull_request.title}",
        f"Description: {pull_request.body or 'No description provided'}",
        f"Author: {pull_request.author}",
        f"Files Changed: {len(files)}",
        "",
        "## Code Changes:",
        "",
    ]

    for f in files:
        parts.append(f"### File: {f.filename}")
        parts.append(f"Status: {f.status}")
        parts.append(f"Changes: +{f.additions} -{f.deletions}")
        parts.append("")
        # Renames without content changes and binaries carry no patch
        if f.patch:
            parts.append("```diff")
            parts.append(f.patch)
            parts.append("```")
            parts.append("")

    return "\n".join(parts)
