"""
Stage 3: Model Review — PR Review Agent

PURPOSE:
    Send the system and user prompts from Stage 2 to Gemini and return the
    raw text of the reply. This is the only stage that costs money.

CALLED BY:
    review_pipeline_main.py passes the two prompts, a google-genai client
    and the ordered list of candidate model names from the config.

EXTERNAL APIS USED:
    - Gemini (google-genai Python SDK)
    - API key stored as GitHub Secret: GEMINI_API_KEY

DESIGN DECISIONS:
    - Model names are an ordered list of candidates. We call the first; if
      that call fails for any reason we log it and call the next one with the
      identical prompts. The first success wins, the last failure is raised.
      With the default two-entry list this is "primary, then one fallback".
      Model names get deprecated or rate-limited now and then, and a stable
      second model keeps every PR from failing during those windows.
    - There is NO other retry: no sleeps, no backoff, no second round.
    - An empty reply counts as a failed call. It moves on to the next model
      and, on the last one, raises instead of handing Stage 4 an empty string.
    - We ask for application/json output and temperature=0.2 for consistent
      reviews. Stage 4 still copes with prose around the JSON.
"""

from typing import Sequence

import structlog
from google import genai
from google.genai import types

from .config import DEFAULT_MODEL_NAMES
from .errors import CompletionError, ConfigurationError


logger = structlog.get_logger(__name__)


def run_model_review(
    system_prompt: str,
    user_prompt: str,
    client,
    model_names: Sequence[str] = DEFAULT_MODEL_NAMES,
    temperature: float = 0.2
) -> str:
    """
    Ask the candidate models in order for a review and return the reply text.

    Args:
        system_prompt: Reviewer instructions, rules and output schema.
        user_prompt: Pull request metadata and diffs.
        client: A genai.Client (or anything exposing models.generate_content).
        model_names: Candidate model names, tried in order.
        temperature: Sampling temperature passed to every call.

    Returns:
        The first candidate's text from the first model that answered.

    Raises:
        CompletionError: every candidate model failed.
    """
    if not model_names:
        raise ConfigurationError("At least one model name is required")

    config = types.GenerateContentConfig(
        system_instruction=system_prompt,
        response_mime_type="application/json",
        temperature=temperature,
    )

    last_error = None

    for index, model_name in enumerate(model_names):
        try:
            response = client.models.generate_content(
                model=model_name,
                contents=user_prompt,
                config=config,
            )
            raw_text = response.text if response is not None else None
            if not raw_text:
                raise CompletionError(f"No response from {model_name}")

            logger.info("Model review received", model=model_name, chars=len(raw_text))
            return raw_text

        except Exception as e:
            last_error = e
            logger.error("Model API error", model=model_name, error=str(e))
            if index < len(model_names) - 1:
                logger.info("Attempting to change the model", model=model_names[index + 1])

    raise CompletionError(
        f"All models failed, last error: {last_error}",
        models=tuple(model_names),
    ) from last_error


def create_completion_client(api_key: str):
    """Build the google-genai client used by run_model_review."""
    return genai.Client(api_key=api_key)
