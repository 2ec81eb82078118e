"""Extract profile fields from a LinkedIn "Save to PDF" export.

This is pattern matching over the export's plain text, not a real parser:
fields that cannot be located come back empty rather than failing.
"""

from __future__ import annotations

import logging
import re

import fitz  # pymupdf

from resume_builder.errors import ExtractionFailed
from resume_builder.models.profile import ExtractedProfile

logger = logging.getLogger(__name__)

# Two or three capitalized words on one line, optionally after "Name:"
NAME_RE = re.compile(
    r"(?:(?i:name)[ \t]*:[ \t]*|^[ \t]*)([A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+){1,2})",
    re.MULTILINE,
)
HEADLINE_RE = re.compile(r"(?:headline|title)[ \t]*:[ \t]*([^\r\n]+)", re.IGNORECASE)

SECTION_HEADINGS = ("Experience", "Education", "Skills")
HEADING_RE = re.compile(
    r"^[ \t]*(" + "|".join(SECTION_HEADINGS) + r")[ \t]*:?[ \t]*$",
    re.IGNORECASE | re.MULTILINE,
)


def read_pdf_text(data: bytes) -> str:
    """Return the text of every page, joined by newlines.

    Raises ExtractionFailed when the bytes are not a readable PDF.
    """
    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            return "\n".join(page.get_text() for page in doc)
    except (RuntimeError, ValueError) as exc:
        logger.error("PDF extraction error: %s", exc)
        raise ExtractionFailed("Failed to extract data from PDF") from exc


def extract_profile_from_pdf(data: bytes) -> ExtractedProfile:
    """Read a PDF export and extract profile fields from its text."""
    return extract_profile_from_text(read_pdf_text(data))


def extract_profile_from_text(text: str) -> ExtractedProfile:
    name_match = NAME_RE.search(text)
    headline_match = HEADLINE_RE.search(text)
    sections = _split_sections(text)

    skills_text = sections.get("skills", "")
    return ExtractedProfile(
        name=name_match.group(1).strip() if name_match else "",
        headline=headline_match.group(1).strip() if headline_match else "",
        experience=_lines(sections.get("experience", "")),
        education=_lines(sections.get("education", "")),
        skills=[s.strip() for s in re.split(r",|\n", skills_text) if s.strip()],
        raw_text=text,
    )


def _split_sections(text: str) -> dict[str, str]:
    """Map each heading (lowercased) to the text beneath it.

    Experience and Education stop at the next heading line; Skills runs to
    the end of the document. The first occurrence of a heading wins.
    """
    headings = list(HEADING_RE.finditer(text))
    sections: dict[str, str] = {}
    for i, match in enumerate(headings):
        key = match.group(1).lower()
        if key in sections:
            continue
        if key == "skills" or i + 1 == len(headings):
            end = len(text)
        else:
            end = headings[i + 1].start()
        sections[key] = text[match.end() : end]
    return sections


def _lines(block: str) -> list[str]:
    return [line.strip() for line in block.splitlines() if line.strip()]
