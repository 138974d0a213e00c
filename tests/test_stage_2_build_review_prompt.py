"""Unit tests for Stage 2: prompt construction."""

from pr_review_agent.models import ChangedFile, PullRequestInfo, ValidationRule
from pr_review_agent.rules import CODING_RULES
from pr_review_agent.stage_2_build_review_prompt import OUTPUT_SCHEMA, build_review_prompts


RULES = (
    ValidationRule("Security", "No secrets in code", required=True),
    ValidationRule("Testing", "New features have tests", required=False),
)


class TestSystemPrompt:

    def test_one_bullet_per_rule(self, pull_request):
        system_prompt, _ = build_review_prompts(RULES, pull_request, [])
        assert "- Security: No secrets in code (REQUIRED)" in system_prompt
        assert "- Testing: New features have tests (OPTIONAL)" in system_prompt

    def test_declares_output_schema(self, pull_request):
        system_prompt, _ = build_review_prompts(RULES, pull_request, [])
        assert OUTPUT_SCHEMA in system_prompt
        for key in ('"approved"', '"score"', '"issues"', '"suggestions"', '"summary"'):
            assert key in system_prompt

    def test_ties_approval_to_required_rules(self, pull_request):
        system_prompt, _ = build_review_prompts(RULES, pull_request, [])
        assert "Set approved=false if any REQUIRED rule is violated" in system_prompt

    def test_default_rule_set_is_rendered(self, pull_request):
        system_prompt, _ = build_review_prompts(CODING_RULES, pull_request, [])
        for rule in CODING_RULES:
            assert f"- {rule.name}: " in system_prompt


class TestUserPrompt:

    def test_pull_request_metadata(self, pull_request, changed_files):
        _, user_prompt = build_review_prompts(RULES, pull_request, changed_files)
        assert "Title: Add login form" in user_prompt
        assert "Description: Adds the login form and its validation." in user_prompt
        assert "Author: octocat" in user_prompt
        assert "Files Changed: 2" in user_prompt

    def test_missing_description_placeholder(self):
        pr = PullRequestInfo(number=1, title="Tweak", body=None, author="bob")
        _, user_prompt = build_review_prompts(RULES, pr, [])
        assert "Description: No description provided" in user_prompt

    def test_file_header_and_diff_block(self, pull_request, changed_files):
        _, user_prompt = build_review_prompts(RULES, pull_request, changed_files[:1])
        assert "### File: src/app.ts" in user_prompt
        assert "Status: modified" in user_prompt
        assert "Changes: +3 -1" in user_prompt
        assert "```diff\n" + changed_files[0].patch + "\n```" in user_prompt

    def test_file_without_patch_has_header_only(self, pull_request):
        renamed = ChangedFile("src/new_name.py", status="renamed", additions=0, deletions=0, patch=None)
        _, user_prompt = build_review_prompts(RULES, pull_request, [renamed])
        assert "### File: src/new_name.py" in user_prompt
        assert "Status: renamed" in user_prompt
        assert "```diff" not in user_prompt

    def test_files_keep_their_order(self, pull_request, changed_files):
        _, user_prompt = build_review_prompts(RULES, pull_request, changed_files)
        assert user_prompt.index("src/app.ts") < user_prompt.index("yarn.lock")


def test_is_deterministic(pull_request, changed_files):
    first = build_review_prompts(RULES, pull_request, changed_files)
    second = build_review_prompts(RULES, pull_request, changed_files)
    assert first == second
