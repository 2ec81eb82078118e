"""Generate ATS-optimized resume content with a primary and a fallback model.

The primary model is tried first. Only a quota/rate-limit failure moves the
request to the lighter fallback model; any other failure is reported right
away. Both tiers are asked for the same JSON shape, so callers cannot tell
which model answered.
"""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from resume_builder.clients.llm_client import LLMClient
from resume_builder.errors import GenerationFailed, QuotaExceeded
from resume_builder.models.generation import GeneratedContent, GenerationRecord
from resume_builder.models.resume import ResumeDraft
from resume_builder.pipeline.quota import DEFAULT_RETRY_AFTER, QuotaError, classify_error
from resume_builder.utils.json_parser import extract_json_object

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are an expert resume writer and ATS optimization specialist.

Respond with a single JSON object and nothing else, using exactly this shape:
{
  "summary": "Professional summary tailored to the job description",
  "experiences": [
    {
      "id": "id of an experience entry from the resume data",
      "bulletPoints": ["ATS-optimized bullet point highlighting an achievement"],
      "keywords": ["keyword relevant to this role"]
    }
  ],
  "skills": {
    "technical": ["technical skill relevant to the job"],
    "soft": ["soft skill matching the role requirements"]
  },
  "suggestions": ["specific suggestion to improve ATS compatibility"]
}

Rules:
- Use only experience ids that appear in the resume data; one object per entry.
- At most 3 bullet points per experience.
- Do not invent employers, titles, dates or credentials."""

PROMPT_TEMPLATE = """\
Given this resume data:
{resume}

And this job description:
{job_description}

Generate ATS-optimized content that:
1. Creates a compelling professional summary
2. Enhances experience bullet points with quantified achievements
3. Suggests relevant keywords for each experience
4. Recommends technical and soft skills
5. Provides specific ATS optimization suggestions

Focus on:
- Using action verbs and quantified results
- Including relevant keywords from the job description
- Highlighting transferable skills
- Ensuring ATS compatibility
- Matching the tone and requirements of the target role"""


class _ModelCallFailed(Exception):
    """Internal wrapper pairing a tier failure with its classification."""

    def __init__(self, model: str, cause: BaseException, quota: QuotaError):
        super().__init__(f"{model}: {cause}")
        self.model = model
        self.cause = cause
        self.quota = quota


def build_prompt(resume_data: ResumeDraft, job_description: str) -> str:
    resume_json = json.dumps(resume_data.to_wire(), indent=2, ensure_ascii=False)
    return PROMPT_TEMPLATE.format(resume=resume_json, job_description=job_description)


def build_generation_record(
    user_id: str,
    resume_data: ResumeDraft,
    job_description: str,
    content: GeneratedContent,
) -> GenerationRecord:
    """Audit record the caller persists after a successful generation."""
    return GenerationRecord(
        user_id=user_id,
        original_data=resume_data,
        job_description=job_description,
        generated_content=content,
    )


class ResumeGenerator:
    """Primary→fallback orchestration for resume content generation."""

    def __init__(
        self,
        llm: LLMClient,
        primary_model: str = "claude-sonnet-4-5-20250929",
        fallback_model: str = "claude-haiku-4-5-20251001",
        *,
        default_retry_after: int = DEFAULT_RETRY_AFTER,
    ):
        self.llm = llm
        self.primary_model = primary_model
        self.fallback_model = fallback_model
        self.default_retry_after = default_retry_after

    async def generate(self, resume_data: ResumeDraft, job_description: str) -> GeneratedContent:
        """Generate content for ``resume_data`` targeting ``job_description``.

        Raises QuotaExceeded when every tier tried is rate-limited, and
        GenerationFailed for any other failure.
        """
        prompt = build_prompt(resume_data, job_description)
        allowed_ids = resume_data.experience_ids

        try:
            return await self._call_model(self.primary_model, prompt, allowed_ids)
        except _ModelCallFailed as failure:
            if not failure.quota.is_quota:
                raise GenerationFailed(str(failure.cause)) from failure.cause
            logger.warning(
                "Quota exceeded for %s, trying %s", self.primary_model, self.fallback_model
            )
        return await self._final_tier(prompt, allowed_ids)

    async def _final_tier(self, prompt: str, allowed_ids: set[str]) -> GeneratedContent:
        try:
            return await self._call_model(self.fallback_model, prompt, allowed_ids)
        except _ModelCallFailed as failure:
            logger.error("Fallback model %s failed: %s", self.fallback_model, failure.cause)
            if failure.quota.is_quota:
                raise QuotaExceeded(failure.quota.retry_after_seconds) from failure.cause
            raise GenerationFailed(str(failure.cause)) from failure.cause

    async def _call_model(
        self, model: str, prompt: str, allowed_ids: set[str]
    ) -> GeneratedContent:
        try:
            response = await self.llm.generate(prompt=prompt, system=SYSTEM_PROMPT, model=model)
        except Exception as exc:
            raise _ModelCallFailed(
                model, exc, classify_error(exc, self.default_retry_after)
            ) from exc

        try:
            content = GeneratedContent.model_validate(extract_json_object(response.text))
        except (ValueError, ValidationError) as exc:
            # A malformed structured reply is never a quota condition
            raise _ModelCallFailed(
                model, exc, QuotaError(False, self.default_retry_after)
            ) from exc

        return self._restrict_ids(content, allowed_ids)

    @staticmethod
    def _restrict_ids(content: GeneratedContent, allowed_ids: set[str]) -> GeneratedContent:
        kept = [exp for exp in content.experiences if exp.id in allowed_ids]
        if len(kept) != len(content.experiences):
            dropped = sorted({exp.id for exp in content.experiences} - allowed_ids)
            logger.warning("Dropping generated experiences with unknown ids: %s", dropped)
            return content.model_copy(update={"experiences": kept})
        return content
