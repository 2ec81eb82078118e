"""Tests for mapping imported profiles onto the resume draft."""

from __future__ import annotations

import pytest

from resume_builder.models.profile import EnhancedProfile, ExtractedProfile
from resume_builder.models.resume import ExperienceEntry, PersonalInfo, ResumeDraft
from resume_builder.pipeline.import_mapper import (
    build_import_preview,
    map_to_resume_draft,
    merge_skills,
    split_name,
    validate_draft,
)


@pytest.fixture
def enhanced() -> EnhancedProfile:
    return EnhancedProfile(
        summary="Engineer focused on reliable systems.",
        enhanced_experience=["Scaled billing to 1M users"],
        keywords=["Python", "Kubernetes"],
        suggestions=["Add certifications"],
    )


class TestSplitName:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Jane Smith", ("Jane", "Smith")),
            ("Mary Ann  van Dyke", ("Mary", "Ann van Dyke")),
            ("Cher", ("Cher", "")),
            ("   ", ("", "")),
            ("", ("", "")),
        ],
    )
    def test_split(self, name, expected):
        assert split_name(name) == expected


class TestMergeSkills:
    def test_union_in_first_seen_order(self):
        assert merge_skills(["Go", "Go", "Rust"], ["Rust", "Zig"]) == ["Go", "Rust", "Zig"]

    def test_ignores_non_strings_and_empties(self):
        assert merge_skills(["Go", "", None, 3], None, ["Go", "SQL"]) == ["Go", "SQL"]


class TestMapToResumeDraft:
    def test_skill_merge_from_profile_and_keywords(self):
        draft = map_to_resume_draft(
            ExtractedProfile(skills=["Go", "Go", "Rust"]),
            EnhancedProfile(keywords=["Rust", "Zig"]),
        )
        assert draft.skills.technical == ["Go", "Rust", "Zig"]
        assert draft.skills.soft == []

    def test_mapping_is_deterministic(self, sample_extracted_profile, enhanced):
        first = map_to_resume_draft(sample_extracted_profile, enhanced)
        second = map_to_resume_draft(sample_extracted_profile, enhanced)
        assert first == second
        assert first.model_dump() == second.model_dump()

    def test_full_name_normalized(self, enhanced):
        draft = map_to_resume_draft(ExtractedProfile(name="  Jane   Q  Smith "), enhanced)
        assert draft.personal_info.full_name == "Jane Q Smith"

    def test_experience_pairing(self, sample_extracted_profile, enhanced):
        draft = map_to_resume_draft(sample_extracted_profile, enhanced)

        first, second = draft.experience
        assert first.id == "exp-0"
        assert first.position == "Senior Engineer"
        assert first.company == "Acme"
        assert first.description == "Scaled billing to 1M users"
        # No enhanced entry at index 1: reuse the first one
        assert second.id == "exp-1"
        assert second.position == "Engineer"
        assert second.company == "Initech"
        assert second.description == "Scaled billing to 1M users"

    def test_experience_without_enhancement_keeps_raw_text(self):
        draft = map_to_resume_draft(
            ExtractedProfile(experience=["Did X"]), EnhancedProfile()
        )
        [entry] = draft.experience
        assert entry.description == "Did X"
        assert entry.position == "Did X"
        assert entry.company == ""

    def test_education_split_by_line(self, sample_extracted_profile, enhanced):
        draft = map_to_resume_draft(sample_extracted_profile, enhanced)
        [entry] = draft.education
        assert entry.id == "edu-0"
        assert entry.degree == "BS Computer Science"
        assert entry.institution == "MIT"
        assert entry.end_date == "2016"

    def test_education_missing_parts_are_empty(self, enhanced):
        draft = map_to_resume_draft(ExtractedProfile(education=["BS CS"]), enhanced)
        [entry] = draft.education
        assert (entry.degree, entry.institution, entry.end_date) == ("BS CS", "", "")

    def test_job_description_prefers_summary(self, sample_extracted_profile, enhanced):
        assert (
            map_to_resume_draft(sample_extracted_profile, enhanced).job_description
            == "Engineer focused on reliable systems."
        )
        assert (
            map_to_resume_draft(sample_extracted_profile, EnhancedProfile()).job_description
            == "Software Engineer at Acme"
        )
        assert map_to_resume_draft(ExtractedProfile(), EnhancedProfile()).job_description == ""


class TestValidateDraft:
    def test_empty_draft_reports_everything(self):
        assert validate_draft(ResumeDraft()) == [
            "Full name is required",
            "Job description is required",
            "At least one work experience entry is required",
        ]

    def test_complete_draft(self):
        draft = ResumeDraft(
            personal_info=PersonalInfo(full_name="Jane Smith"),
            experience=[ExperienceEntry(id="exp-0", position="Engineer")],
            job_description="Backend role",
        )
        assert validate_draft(draft) == []

    def test_whitespace_name_is_missing(self):
        draft = ResumeDraft(
            personal_info=PersonalInfo(full_name="   "),
            experience=[ExperienceEntry(id="exp-0")],
            job_description="Backend role",
        )
        assert validate_draft(draft) == ["Full name is required"]


class TestImportPreview:
    def test_valid_preview(self, sample_extracted_profile, enhanced):
        preview = build_import_preview(sample_extracted_profile, enhanced)
        assert preview.is_valid is True
        assert preview.errors == []
        assert preview.suggestions == ["Add certifications"]
        assert preview.preview.personal_info.full_name == "Jane Smith"

    def test_invalid_preview_is_advisory(self, enhanced):
        preview = build_import_preview(ExtractedProfile(), enhanced)
        assert preview.is_valid is False
        assert "Full name is required" in preview.errors
        assert preview.preview.skills.technical == ["Python", "Kubernetes"]
