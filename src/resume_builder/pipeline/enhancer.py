"""Enhance an imported profile with ATS-oriented wording.

``ProfileEnhancer.enhance`` always returns a usable ``EnhancedProfile``. When
no model is configured, the call fails, or the reply cannot be read, the
record is assembled from the imported fields instead, and ``error`` /
``raw_ai_response`` say why.
"""

from __future__ import annotations

import logging

from pydantic import Field, ValidationError

from resume_builder.clients.llm_client import LLMClient
from resume_builder.models.base import CamelModel
from resume_builder.models.profile import EnhancedProfile, ExtractedProfile
from resume_builder.utils.json_parser import extract_json_object

logger = logging.getLogger(__name__)

DEFAULT_SUMMARY = "Professional with diverse experience"
DEFAULT_SUGGESTIONS = (
    "Consider adding more specific achievements",
    "Quantify your impact where possible",
)

PROMPT_TEMPLATE = """\
You are an expert resume writer. Given the following LinkedIn profile data, generate:
1. An ATS-optimized professional summary (2-3 sentences)
2. Enhanced bullet points for each experience entry
3. Industry-relevant keywords
4. Suggestions for improvement

Profile Data:
Name: {name}
Headline: {headline}
Experience: {experience}
Education: {education}
Skills: {skills}

Please return the response in JSON format with the following structure:
{{
  "summary": "ATS-optimized professional summary",
  "enhancedExperience": ["bullet point 1", "bullet point 2", ...],
  "keywords": ["keyword1", "keyword2", ...],
  "suggestions": ["suggestion1", "suggestion2", ...]
}}"""


class _EnhancementReply(CamelModel):
    summary: str
    enhanced_experience: list[str]
    keywords: list[str]
    suggestions: list[str] = Field(default_factory=list)


def fallback_enhancement(
    profile: ExtractedProfile,
    *,
    summary: str | None = None,
    error: str | None = None,
    details: str | None = None,
    raw_ai_response: str | None = None,
) -> EnhancedProfile:
    """Build an EnhancedProfile straight from the imported fields."""
    return EnhancedProfile(
        summary=summary or profile.headline or DEFAULT_SUMMARY,
        enhanced_experience=list(profile.experience),
        keywords=list(profile.skills),
        suggestions=list(DEFAULT_SUGGESTIONS),
        error=error,
        details=details,
        raw_ai_response=raw_ai_response,
    )


class ProfileEnhancer:
    def __init__(self, llm: LLMClient | None, model: str = "claude-haiku-4-5-20251001"):
        self.llm = llm
        self.model = model

    async def enhance(self, profile: ExtractedProfile) -> EnhancedProfile:
        if self.llm is None:
            logger.warning("No model API key configured, skipping AI enhancement")
            return fallback_enhancement(profile)

        prompt = PROMPT_TEMPLATE.format(
            name=profile.name,
            headline=profile.headline,
            experience=", ".join(profile.experience),
            education=", ".join(profile.education),
            skills=", ".join(profile.skills),
        )

        try:
            response = await self.llm.generate(
                prompt=prompt, model=self.model, temperature=0.7, max_tokens=2048
            )
        except Exception as exc:
            logger.exception("AI enhancement error")
            return fallback_enhancement(
                profile, error="AI enhancement failed", details=str(exc)
            )

        try:
            reply = _EnhancementReply.model_validate(extract_json_object(response.text))
        except (ValueError, ValidationError):
            logger.warning("Enhancement reply was not valid JSON, using raw text as summary")
            return fallback_enhancement(
                profile,
                summary=response.text.strip(),
                raw_ai_response=response.text,
            )

        return EnhancedProfile(
            summary=reply.summary,
            enhanced_experience=reply.enhanced_experience,
            keywords=reply.keywords,
            suggestions=reply.suggestions,
        )
