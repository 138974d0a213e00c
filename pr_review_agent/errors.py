"""Exceptions raised by the review pipeline."""


class ReviewAgentError(Exception):
    """Base exception for all review pipeline errors."""


class ConfigurationError(ReviewAgentError):
    """Raised when a required setting is missing or malformed."""


class WrongEventError(ReviewAgentError):
    """Raised when the action runs outside a pull_request event."""


class CompletionError(ReviewAgentError):
    """Raised when every candidate model failed to produce a review."""

    def __init__(self, message: str, models: tuple = ()) -> None:
        super().__init__(message)
        self.models = models
