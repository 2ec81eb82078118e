"""Pydantic models for the resume draft built by the form wizard."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from resume_builder.models.base import CamelModel


def dedupe(values: list[str]) -> list[str]:
    """Remove duplicates while keeping first-seen order."""
    seen: set[str] = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


class PersonalInfo(CamelModel):
    full_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    website: str = ""


class EducationEntry(CamelModel):
    id: str
    institution: str = ""
    degree: str = ""
    field: str = ""
    start_date: str = ""
    end_date: str = ""
    gpa: str = ""
    description: str = ""


class ExperienceEntry(CamelModel):
    id: str
    company: str = ""
    position: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    current: bool = False
    description: str = ""

    @property
    def effective_end_date(self) -> str:
        # end_date is stale once the role is marked current
        return "" if self.current else self.end_date


class ProjectEntry(CamelModel):
    id: str
    name: str = ""
    description: str = ""
    technologies: str = ""
    url: str = ""
    github: str = ""


class Skills(CamelModel):
    technical: list[str] = Field(default_factory=list)
    soft: list[str] = Field(default_factory=list)

    @field_validator("technical", "soft")
    @classmethod
    def _dedupe(cls, values: list[str]) -> list[str]:
        return dedupe(values)


class ResumeDraft(CamelModel):
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    education: list[EducationEntry] = Field(default_factory=list)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    projects: list[ProjectEntry] = Field(default_factory=list)
    skills: Skills = Field(default_factory=Skills)
    job_description: str = ""

    @property
    def experience_ids(self) -> set[str]:
        return {entry.id for entry in self.experience}


class SavedResume(CamelModel):
    """A draft persisted under a user's account."""

    id: str
    user_id: str
    title: str
    data: ResumeDraft
    created_at: datetime
    updated_at: datetime


class ResumeSummary(CamelModel):
    id: str
    title: str
    created_at: datetime
    updated_at: datetime


class ResumePayload(CamelModel):
    """Body of the create/update resume requests."""

    title: str
    data: ResumeDraft = Field(default_factory=ResumeDraft)
