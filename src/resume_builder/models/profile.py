"""Pydantic models for LinkedIn profile import."""

from __future__ import annotations

from pydantic import Field

from resume_builder.models.base import CamelModel
from resume_builder.models.resume import ResumeDraft


class ExtractedProfile(CamelModel):
    """Best-effort fields pulled from a profile page or PDF export."""

    name: str = ""
    headline: str = ""
    experience: list[str] = Field(default_factory=list)
    education: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    raw_text: str | None = None


class EnhancedProfile(CamelModel):
    """Model-enhanced profile content.

    ``error`` is set when the record was built from the fallback path; the
    remaining fields are still populated and safe to use.
    """

    summary: str = ""
    enhanced_experience: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    error: str | None = None
    details: str | None = None
    raw_ai_response: str | None = None


class ImportPreview(CamelModel):
    preview: ResumeDraft
    errors: list[str]
    suggestions: list[str]
    is_valid: bool
