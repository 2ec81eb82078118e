"""Exception types surfaced by the generation and import pipelines."""

from __future__ import annotations


class ResumeBuilderError(Exception):
    """Base class for errors the HTTP layer knows how to report."""


class ValidationFailed(ResumeBuilderError):
    """A request is missing required fields or carries malformed input."""


class QuotaExceeded(ResumeBuilderError):
    """Every model tier is rate-limited; the caller should wait and retry."""

    def __init__(self, retry_after_seconds: int, details: str = ""):
        super().__init__(f"Model quota exceeded, retry after {retry_after_seconds}s")
        self.retry_after_seconds = retry_after_seconds
        self.details = details


class GenerationFailed(ResumeBuilderError):
    """A model call failed for a reason other than quota."""

    def __init__(self, details: str):
        super().__init__(details)
        self.details = details


class ExtractionFailed(ResumeBuilderError):
    """An uploaded document could not be parsed at all."""


class ScrapeFailed(ResumeBuilderError):
    """The profile page could not be loaded or the browser failed to start."""


class InvalidSource(ResumeBuilderError):
    """The profile URL does not point at a public LinkedIn profile."""
