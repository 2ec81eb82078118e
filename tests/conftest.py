"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from resume_builder.clients.llm_client import LLMClient, LLMResponse
from resume_builder.models.profile import ExtractedProfile
from resume_builder.models.resume import (
    EducationEntry,
    ExperienceEntry,
    PersonalInfo,
    ResumeDraft,
    Skills,
)


class FakeStatusError(Exception):
    """Provider error carrying an HTTP status, body and response headers."""

    def __init__(self, message: str, status_code: int | None = None, body=None, headers=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body
        if headers is not None:
            self.headers = headers


@pytest.fixture
def sample_jd_text() -> str:
    return """Senior Backend Engineer

Responsibilities:
- Design and build Python services on AWS
- Own the REST API for the billing platform

Requirements:
- 5+ years of experience with Python and PostgreSQL
- Experience with Docker and Kubernetes
- Strong communication skills
"""


@pytest.fixture
def sample_draft() -> ResumeDraft:
    return ResumeDraft(
        personal_info=PersonalInfo(full_name="Jane Smith", email="jane@example.com"),
        education=[
            EducationEntry(id="edu-0", institution="MIT", degree="BS Computer Science"),
        ],
        experience=[
            ExperienceEntry(
                id="exp-0",
                company="Acme",
                position="Senior Engineer",
                start_date="2020-01",
                current=True,
                description="Built the billing API",
            ),
            ExperienceEntry(
                id="exp-1",
                company="Initech",
                position="Engineer",
                start_date="2017-06",
                end_date="2019-12",
                description="Maintained reporting jobs",
            ),
        ],
        skills=Skills(technical=["Python", "PostgreSQL"], soft=["Mentoring"]),
        job_description="Senior Backend Engineer",
    )


@pytest.fixture
def sample_extracted_profile() -> ExtractedProfile:
    return ExtractedProfile(
        name="Jane Smith",
        headline="Software Engineer at Acme",
        experience=["Senior Engineer\nAcme\n2020 - Present", "Engineer\nInitech"],
        education=["BS Computer Science\nMIT\n2016"],
        skills=["Python", "Go"],
    )


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text="{}", input_tokens=100, output_tokens=50)
    )
    client.generate_chat = AsyncMock(
        return_value=LLMResponse(text="", input_tokens=40, output_tokens=20)
    )
    client.generate_json = AsyncMock(return_value={})
    return client


@pytest.fixture
def status_error() -> type[FakeStatusError]:
    return FakeStatusError
