"""
Configuration — PR Review Agent

PURPOSE:
    Resolve every setting the pipeline needs from the GitHub Actions runner
    environment. Action inputs declared in action.yml arrive as INPUT_<NAME>
    environment variables; for credentials we also accept the plain variable
    name so environment-level secrets work without wiring them as inputs.

CALLED BY:
    review_pipeline_main.py, once per run, before any network call.

DESIGN DECISIONS:
    - The completion-service key is checked here so a missing secret fails
      the job before we list files or spend a model call.
    - EXCLUDE_PATTERNS is split on commas and blank entries are dropped. An
      empty entry would compile to a regex that matches every filename.
    - MAX_FILES is an optional cap. Unset means every non-excluded file is
      reviewed.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigurationError


DEFAULT_MODEL_NAMES = ("gemini-2.5-flash", "gemini-2.5-flash-lite")

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ReviewConfig:
    """Everything the pipeline reads from the environment."""

    gemini_api_key: str
    github_token: str
    repository: str
    exclude_patterns: tuple = ()
    max_files: Optional[int] = None
    model_names: tuple = DEFAULT_MODEL_NAMES
    post_commit_status: bool = False
    event_name: str = ""
    event_path: Optional[str] = None
    log_level: str = "INFO"

    @property
    def repo_owner(self) -> str:
        return self.repository.split("/", 1)[0]

    @property
    def repo_name(self) -> str:
        return self.repository.split("/", 1)[1]


def load_review_config(environ: Optional[Mapping[str, str]] = None) -> ReviewConfig:
    """
    Build a ReviewConfig from the process environment.

    Args:
        environ: Mapping to read from. Defaults to os.environ; tests pass a
                 plain dict.

    Raises:
        ConfigurationError: if a credential or the repository slug is
                            missing, or MAX_FILES is not a positive integer.
    """
    env = os.environ if environ is None else environ

    gemini_api_key = _input(env, "GEMINI_API_KEY") or env.get("GEMINI_API_KEY", "")
    if not gemini_api_key:
        raise ConfigurationError(
            "Missing Gemini API key. Provide via input GEMINI_API_KEY or env GEMINI_API_KEY."
        )

    github_token = _input(env, "GITHUB_TOKEN") or env.get("GITHUB_TOKEN", "")
    if not github_token:
        raise ConfigurationError(
            "Missing GitHub token. Provide via input GITHUB_TOKEN or env GITHUB_TOKEN."
        )

    repository = env.get("GITHUB_REPOSITORY", "").strip()
    owner, _, name = repository.partition("/")
    if not owner or not name:
        raise ConfigurationError(
            f"GITHUB_REPOSITORY must look like 'owner/name' (got '{repository}')"
        )

    model_names = _split_list(_input(env, "MODELS")) or DEFAULT_MODEL_NAMES

    return ReviewConfig(
        gemini_api_key=gemini_api_key,
        github_token=github_token,
        repository=repository,
        exclude_patterns=parse_exclude_patterns(_input(env, "EXCLUDE_PATTERNS")),
        max_files=_parse_max_files(_input(env, "MAX_FILES")),
        model_names=model_names,
        post_commit_status=_input(env, "POST_COMMIT_STATUS").lower() in _TRUTHY,
        event_name=env.get("GITHUB_EVENT_NAME", ""),
        event_path=env.get("GITHUB_EVENT_PATH") or None,
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
    )


def parse_exclude_patterns(raw: Optional[str]) -> tuple:
    """Split a comma-separated pattern list, dropping blank entries."""
    return _split_list(raw)


# ---------------------------------------------------------------------------
# PRIVATE HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def _input(env: Mapping[str, str], name: str) -> str:
    # Actions exposes `with:` inputs as INPUT_<NAME>, upper-cased.
    return env.get(f"INPUT_{name.upper()}", "").strip()


def _split_list(raw: Optional[str]) -> tuple:
    if not raw:
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _parse_max_files(raw: str) -> Optional[int]:
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"MAX_FILES must be an integer (got '{raw}')") from None
    if value <= 0:
        raise ConfigurationError(f"MAX_FILES must be positive (got {value})")
    return value
