"""Clean job-description text and pull out obvious keywords and requirements."""

from __future__ import annotations

import re
from pathlib import Path

# Matched case-insensitively as substrings; order is the output order
COMMON_KEYWORDS = (
    "javascript",
    "python",
    "react",
    "node.js",
    "aws",
    "docker",
    "kubernetes",
    "leadership",
    "communication",
    "problem solving",
    "teamwork",
    "agile",
    "scrum",
    "git",
    "sql",
    "mongodb",
    "postgresql",
    "typescript",
    "next.js",
)

REQUIREMENT_MARKERS = ("require", "must have", "experience with", "knowledge of")
MAX_REQUIREMENTS = 10


def parse_jd(text: str) -> str:
    """Clean and normalize job description text."""
    text = re.sub(r"\n{3,}", "\n\n", text)
    text = re.sub(r"[ \t]+", " ", text)
    lines = [line.strip() for line in text.splitlines()]
    return "\n".join(lines).strip()


def load_jd_file(file_path: str | Path) -> str:
    """Load JD from a text file."""
    return parse_jd(Path(file_path).read_text(encoding="utf-8"))


def extract_keywords(text: str) -> list[str]:
    lowered = text.lower()
    return [kw for kw in COMMON_KEYWORDS if kw in lowered]


def extract_requirements(text: str) -> list[str]:
    """Lines that read like requirements, first ten only."""
    found = []
    for line in text.splitlines():
        lowered = line.lower()
        if line.strip() and any(marker in lowered for marker in REQUIREMENT_MARKERS):
            found.append(line.strip())
        if len(found) == MAX_REQUIREMENTS:
            break
    return found
