"""Data models for the resume builder."""

from resume_builder.models.generation import (
    ExperienceContent,
    GeneratedContent,
    GenerationRecord,
    GenerationRequest,
    SkillSuggestions,
)
from resume_builder.models.jobs import JobDescriptionRecord
from resume_builder.models.profile import EnhancedProfile, ExtractedProfile, ImportPreview
from resume_builder.models.refinement import ChatTurn, RefineRequest, RefineResult
from resume_builder.models.resume import (
    EducationEntry,
    ExperienceEntry,
    PersonalInfo,
    ProjectEntry,
    ResumeDraft,
    SavedResume,
    Skills,
)

__all__ = [
    "ChatTurn",
    "EducationEntry",
    "EnhancedProfile",
    "ExperienceContent",
    "ExperienceEntry",
    "ExtractedProfile",
    "GeneratedContent",
    "GenerationRecord",
    "GenerationRequest",
    "ImportPreview",
    "JobDescriptionRecord",
    "PersonalInfo",
    "ProjectEntry",
    "RefineRequest",
    "RefineResult",
    "ResumeDraft",
    "SavedResume",
    "SkillSuggestions",
    "Skills",
]
