"""
Review Pipeline Main — PR Review Agent

PURPOSE:
    Entry point of the GitHub Action. Runs the five stages in strict order,
    once, and turns the verdict into the job result:

      config -> 1. Select Files -> 2. Build Review Prompt -> 3. Model Review
      -> 4. Interpret Result -> 5. Post Review & Decide -> exit code

    Exit code 0 means the PR was approved. Every other outcome (rejection,
    missing secret, wrong event, GitHub or model failure) exits 1 with one
    human-readable message, also emitted as a ::error:: annotation so it
    shows up on the workflow run summary.

CALLED BY:
    action.yml (`pr-review-agent` console script) or `python -m pr_review_agent`.

DESIGN DECISIONS:
    - Nothing runs at import time. main() configures logging, loads the
      config and builds the clients; run_review() takes them as arguments so
      tests can pass fakes.
    - Only two failures abort the run after config: the file listing and the
      model call (after every fallback model failed). A bad model answer only
      degrades the verdict in Stage 4, and a failed comment post is logged in
      Stage 5.
"""

import json
import logging
import os
import sys
from typing import Mapping, Optional, Sequence

import requests
import structlog

from .config import ReviewConfig, load_review_config
from .errors import ConfigurationError, ReviewAgentError, WrongEventError
from .github_api import GitHubAPI
from .models import PullRequestInfo, ValidationRule
from .rules import CODING_RULES
from .stage_1_select_files import select_changed_files
from .stage_2_build_review_prompt import build_review_prompts
from .stage_3_model_review import create_completion_client, run_model_review
from .stage_4_interpret_result import interpret_review_text
from .stage_5_post_review_and_decide import (
    commit_state_for,
    post_review_and_decide,
    set_review_status,
)


logger = structlog.get_logger(__name__)

PULL_REQUEST_EVENT = "pull_request"


def run_review(
    config: ReviewConfig,
    pull_request: PullRequestInfo,
    github: Optional[GitHubAPI] = None,
    completion_client=None,
    rules: Sequence[ValidationRule] = CODING_RULES
) -> bool:
    """
    Run stages 1-5 for one pull request and return True when approved.

    When commit statuses are enabled, a run that raises leaves a failure
    status behind, never a dangling pending one.

    Raises:
        requests.RequestException: listing the changed files failed.
        CompletionError: every candidate model failed.
    """
    if github is None:
        with GitHubAPI(config.repo_owner, config.repo_name, config.github_token) as github:
            return run_review(config, pull_request, github, completion_client, rules)

    if config.post_commit_status:
        set_review_status(
            github, pull_request.head_sha, commit_state_for(None), "AI review in progress"
        )

    try:
        return _run_stages(config, pull_request, github, completion_client, rules)
    except Exception:
        if config.post_commit_status:
            set_review_status(
                github, pull_request.head_sha, commit_state_for(False), "AI review could not complete"
            )
        raise


def _run_stages(config, pull_request, github, completion_client, rules) -> bool:
    # -----------------------------------------------------------------------
    # STAGE 1: List and select files
    # -----------------------------------------------------------------------

    files = github.list_pull_request_files(pull_request.number)
    selected = select_changed_files(files, config.exclude_patterns, config.max_files)

    # -----------------------------------------------------------------------
    # STAGE 2: Build prompts
    # -----------------------------------------------------------------------

    system_prompt, user_prompt = build_review_prompts(rules, pull_request, selected)

    # -----------------------------------------------------------------------
    # STAGE 3: Model review (primary model, then fallbacks)
    # -----------------------------------------------------------------------

    if completion_client is None:
        completion_client = create_completion_client(config.gemini_api_key)

    raw_text = run_model_review(system_prompt, user_prompt, completion_client, config.model_names)

    # -----------------------------------------------------------------------
    # STAGE 4: Interpret the reply
    # -----------------------------------------------------------------------

    result = interpret_review_text(raw_text)

    # -----------------------------------------------------------------------
    # STAGE 5: Post and decide
    # -----------------------------------------------------------------------

    return post_review_and_decide(result, pull_request, github, config.post_commit_status)


def load_pull_request(config: ReviewConfig) -> PullRequestInfo:
    """
    Read the pull request from the Actions event payload.

    Raises:
        WrongEventError: not a pull_request event, or no pull request in it.
        ConfigurationError: the event payload file is missing or unreadable.
    """
    if config.event_name != PULL_REQUEST_EVENT:
        raise WrongEventError("This action only works on pull_request events")

    if not config.event_path:
        raise ConfigurationError("GITHUB_EVENT_PATH is not set")

    try:
        with open(config.event_path, "r") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not read event payload: {e}") from e

    if not isinstance(payload, dict) or not payload.get("pull_request"):
        raise WrongEventError("No pull request found in context")

    try:
        return PullRequestInfo.from_event(payload)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise WrongEventError(f"Malformed pull request in event payload: {e!r}") from e


def configure_logging(level: str = "INFO"):
    """Route structlog output to a human-readable console renderer."""
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
    )


def main(environ: Optional[Mapping[str, str]] = None) -> int:
    """Run the action and return the process exit code."""
    env = os.environ if environ is None else environ
    configure_logging(env.get("LOG_LEVEL", "INFO"))

    try:
        config = load_review_config(env)
        pull_request = load_pull_request(config)
        logger.info("Starting AI review", pr_number=pull_request.number, repository=config.repository)
        approved = run_review(config, pull_request)
    except WrongEventError as e:
        return _set_failed(str(e))
    except ConfigurationError as e:
        return _set_failed(f"Configuration error: {e}")
    except (ReviewAgentError, requests.RequestException) as e:
        return _set_failed(f"Action failed: {e}")

    if approved:
        logger.info("PR approved by AI reviewer")
        return 0
    return _set_failed("PR rejected by AI reviewer")


def _set_failed(message: str) -> int:
    logger.error(message)
    # Workflow command: surfaces the message as an annotation on the run
    print(f"::error::{_escape_workflow_data(message)}")
    return 1


def _escape_workflow_data(value: str) -> str:
    """Escape a workflow command message so it stays on one line."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


if __name__ == "__main__":
    sys.exit(main())
