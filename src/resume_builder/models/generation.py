"""Pydantic models for AI-generated resume content."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import Field

from resume_builder.models.base import CamelModel
from resume_builder.models.resume import ResumeDraft


class ExperienceContent(CamelModel):
    id: str  # must match an experience id of the input draft
    bullet_points: list[str]
    keywords: list[str]


class SkillSuggestions(CamelModel):
    technical: list[str]
    soft: list[str]


class GeneratedContent(CamelModel):
    summary: str
    experiences: list[ExperienceContent]
    skills: SkillSuggestions
    suggestions: list[str]


class GenerationRequest(CamelModel):
    resume_data: ResumeDraft = Field(default_factory=ResumeDraft)
    job_description: str = ""


class GenerationRecord(CamelModel):
    """Audit entry written after every successful generation."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    original_data: ResumeDraft
    job_description: str
    generated_content: GeneratedContent
    created_at: datetime = Field(default_factory=datetime.now)
