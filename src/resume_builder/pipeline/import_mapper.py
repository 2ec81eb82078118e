"""Map an imported LinkedIn profile onto the resume form.

The raw fragments have no schema, so experience and education entries are
built with fixed positional rules:

- experience ``i`` takes its description from ``enhanced_experience[i]``,
  else ``enhanced_experience[0]``, else the raw fragment; the fragment's
  first line is the position and its second line the company;
- education fragments split by line into degree, institution, year;
- ids are ``exp-<i>`` / ``edu-<i>``, so mapping the same input twice gives
  the same draft.
"""

from __future__ import annotations

from resume_builder.models.profile import EnhancedProfile, ExtractedProfile, ImportPreview
from resume_builder.models.resume import (
    EducationEntry,
    ExperienceEntry,
    PersonalInfo,
    ResumeDraft,
    Skills,
)


def split_name(name: str) -> tuple[str, str]:
    """First token is the given name, the rest the family name."""
    parts = (name or "").split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def _fragment_lines(fragment: str) -> list[str]:
    return [line.strip() for line in (fragment or "").split("\n") if line.strip()]


def _part(lines: list[str], index: int) -> str:
    return lines[index] if index < len(lines) else ""


def _map_experience(raw: list[str], enhanced: list[str]) -> list[ExperienceEntry]:
    entries = []
    for index, fragment in enumerate(raw):
        if index < len(enhanced) and enhanced[index]:
            description = enhanced[index]
        elif enhanced and enhanced[0]:
            description = enhanced[0]
        else:
            description = fragment
        lines = _fragment_lines(fragment)
        entries.append(
            ExperienceEntry(
                id=f"exp-{index}",
                position=_part(lines, 0),
                company=_part(lines, 1),
                description=description,
            )
        )
    return entries


def _map_education(raw: list[str]) -> list[EducationEntry]:
    entries = []
    for index, fragment in enumerate(raw):
        lines = _fragment_lines(fragment)
        entries.append(
            EducationEntry(
                id=f"edu-{index}",
                degree=_part(lines, 0),
                institution=_part(lines, 1),
                end_date=_part(lines, 2),
            )
        )
    return entries


def merge_skills(*groups: list) -> list[str]:
    """Union of string skills in first-seen order."""
    merged: list[str] = []
    for group in groups:
        for skill in group or []:
            if isinstance(skill, str) and skill and skill not in merged:
                merged.append(skill)
    return merged


def map_to_resume_draft(extracted: ExtractedProfile, enhanced: EnhancedProfile) -> ResumeDraft:
    first, last = split_name(extracted.name)
    return ResumeDraft(
        personal_info=PersonalInfo(full_name=f"{first} {last}".strip()),
        experience=_map_experience(extracted.experience, enhanced.enhanced_experience),
        education=_map_education(extracted.education),
        skills=Skills(technical=merge_skills(extracted.skills, enhanced.keywords), soft=[]),
        projects=[],
        job_description=enhanced.summary or extracted.headline or "",
    )


def validate_draft(draft: ResumeDraft) -> list[str]:
    """Advisory checks; an empty list means the draft can move on."""
    errors = []
    if not draft.personal_info.full_name.strip():
        errors.append("Full name is required")
    if not draft.job_description.strip():
        errors.append("Job description is required")
    if not draft.experience:
        errors.append("At least one work experience entry is required")
    return errors


def build_import_preview(extracted: ExtractedProfile, enhanced: EnhancedProfile) -> ImportPreview:
    draft = map_to_resume_draft(extracted, enhanced)
    errors = validate_draft(draft)
    return ImportPreview(
        preview=draft,
        errors=errors,
        suggestions=list(enhanced.suggestions),
        is_valid=not errors,
    )
