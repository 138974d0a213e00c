"""Unit tests for the pipeline data models."""

import pytest

from pr_review_agent.models import AnalysisResult, ChangedFile, PullRequestInfo


class TestChangedFile:

    def test_from_api_reads_listing_item(self):
        item = {
            "sha": "abc",
            "filename": "src/app.ts",
            "status": "added",
            "additions": 10,
            "deletions": 0,
            "changes": 10,
            "patch": "@@ -0,0 +1 @@\n+hello",
        }
        f = ChangedFile.from_api(item)
        assert f == ChangedFile("src/app.ts", "added", 10, 0, "@@ -0,0 +1 @@\n+hello")

    def test_from_api_without_patch(self):
        f = ChangedFile.from_api({"filename": "old.txt", "status": "renamed", "additions": 0, "deletions": 0})
        assert f.patch is None

    def test_is_immutable(self):
        f = ChangedFile("a.py")
        with pytest.raises(AttributeError):
            f.filename = "b.py"


class TestPullRequestInfo:

    def test_from_event(self):
        payload = {
            "pull_request": {
                "number": 7,
                "title": "Fix bug",
                "body": "",
                "user": {"login": "alice"},
                "head": {"sha": "deadbeef"},
            }
        }
        pr = PullRequestInfo.from_event(payload)
        assert pr.number == 7
        assert pr.title == "Fix bug"
        assert pr.body is None
        assert pr.author == "alice"
        assert pr.head_sha == "deadbeef"

    def test_from_event_without_pull_request(self):
        with pytest.raises(KeyError):
            PullRequestInfo.from_event({"ref": "refs/heads/main"})


class TestAnalysisResultFromDict:

    def test_extended_schema(self):
        data = {
            "approved": True,
            "score": 91,
            "issues": [],
            "suggestions": ["Rename x"],
            "summary": "Looks good.",
        }
        result = AnalysisResult.from_dict(data)
        assert result.approved is True
        assert result.score == 91
        assert result.suggestions == ("Rename x",)
        assert result.summary == "Looks good."
        assert result.raw is data

    def test_minimal_schema_leaves_extended_fields_unset(self):
        result = AnalysisResult.from_dict({"approved": False, "issues": ["SQL injection in query()"]})
        assert result.approved is False
        assert result.issues == ("SQL injection in query()",)
        assert result.score is None
        assert result.suggestions == ()
        assert result.summary is None

    def test_missing_approved_is_not_an_approval(self):
        assert AnalysisResult.from_dict({"issues": []}).approved is False

    @pytest.mark.parametrize("value,expected", [
        (True, True),
        (False, False),
        ("true", True),
        ("false", False),
        (1, False),
        (None, False),
    ])
    def test_approved_coercion(self, value, expected):
        assert AnalysisResult.from_dict({"approved": value}).approved is expected

    def test_issues_given_as_string(self):
        result = AnalysisResult.from_dict({"approved": True, "issues": "Missing error handling"})
        assert result.issues == ("Missing error handling",)

    @pytest.mark.parametrize("value,expected", [
        (85, 85),
        (85.9, 85),
        ("70", 70),
        (150, 100),
        (-5, 0),
        ("high", None),
        (None, None),
        (True, None),
    ])
    def test_score_coercion(self, value, expected):
        assert AnalysisResult.from_dict({"approved": True, "score": value}).score == expected
