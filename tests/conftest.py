"""
Shared fixtures for the review pipeline tests.
"""

import json
from pathlib import Path

import pytest

from pr_review_agent.config import ReviewConfig
from pr_review_agent.models import ChangedFile, PullRequestInfo


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def pull_request():
    return PullRequestInfo(
        number=42,
        title="Add login form",
        body="Adds the login form and its validation.",
        author="octocat",
        head_sha="0123456789abcdef0123456789abcdef01234567",
    )


@pytest.fixture
def changed_files():
    return [
        ChangedFile(
            filename="src/app.ts",
            status="modified",
            additions=3,
            deletions=1,
            patch="@@ -1,2 +1,4 @@\n-const a = 1;\n+const a = 2;\n+const b = 3;\n+export { a, b };",
        ),
        ChangedFile(
            filename="yarn.lock",
            status="modified",
            additions=120,
            deletions=80,
            patch="@@ -10,3 +10,3 @@\n-left-pad@1.0.0\n+left-pad@1.3.0",
        ),
    ]


@pytest.fixture
def review_config():
    return ReviewConfig(
        gemini_api_key="test-gemini-key",
        github_token="test-github-token",
        repository="octo-org/webapp",
        exclude_patterns=("*.lock",),
        model_names=("primary-model", "fallback-model"),
        event_name="pull_request",
    )


@pytest.fixture
def event_file(tmp_path: Path):
    """Write a pull_request event payload and return its path."""
    payload = {
        "action": "opened",
        "pull_request": {
            "number": 42,
            "title": "Add login form",
            "body": None,
            "user": {"login": "octocat"},
            "head": {"sha": "0123456789abcdef0123456789abcdef01234567"},
        },
    }
    path = tmp_path / "event.json"
    path.write_text(json.dumps(payload))
    return path


@pytest.fixture
def approved_reply():
    return json.dumps({
        "approved": True,
        "score": 85,
        "issues": [],
        "suggestions": ["Add a unit test for the new export"],
        "summary": "Small, safe change.",
    })
