"""Tests for profile enhancement and its fallback paths."""

from __future__ import annotations

import json

from resume_builder.clients.llm_client import LLMResponse
from resume_builder.models.profile import EnhancedProfile, ExtractedProfile
from resume_builder.pipeline.enhancer import (
    DEFAULT_SUGGESTIONS,
    DEFAULT_SUMMARY,
    ProfileEnhancer,
)


class TestProfileEnhancer:
    async def test_enhance_parses_reply(self, mock_llm_client, sample_extracted_profile):
        mock_llm_client.generate.return_value = LLMResponse(
            text=json.dumps(
                {
                    "summary": "Backend engineer with 8 years of Python.",
                    "enhancedExperience": ["Scaled billing to 1M users", "Cut latency 40%"],
                    "keywords": ["Python", "AWS"],
                    "suggestions": ["Add certifications"],
                }
            ),
            input_tokens=100,
            output_tokens=80,
        )
        enhancer = ProfileEnhancer(mock_llm_client, model="claude-haiku-4-5-20251001")

        result = await enhancer.enhance(sample_extracted_profile)

        assert result.summary == "Backend engineer with 8 years of Python."
        assert result.enhanced_experience == ["Scaled billing to 1M users", "Cut latency 40%"]
        assert result.keywords == ["Python", "AWS"]
        assert result.error is None
        kwargs = mock_llm_client.generate.call_args.kwargs
        assert kwargs["model"] == "claude-haiku-4-5-20251001"
        assert "Name: Jane Smith" in kwargs["prompt"]

    async def test_reply_in_code_fence(self, mock_llm_client, sample_extracted_profile):
        mock_llm_client.generate.return_value = LLMResponse(
            text='```json\n{"summary": "S", "enhancedExperience": [], "keywords": ["Go"]}\n```',
            input_tokens=10,
            output_tokens=10,
        )
        result = await ProfileEnhancer(mock_llm_client).enhance(sample_extracted_profile)

        assert result.summary == "S"
        assert result.suggestions == []


class TestEnhancerFallback:
    async def test_model_exception_never_raises(self, mock_llm_client, sample_extracted_profile):
        mock_llm_client.generate.side_effect = RuntimeError("upstream 503")

        result = await ProfileEnhancer(mock_llm_client).enhance(sample_extracted_profile)

        assert isinstance(result, EnhancedProfile)
        assert result.error == "AI enhancement failed"
        assert result.details == "upstream 503"
        assert result.summary == sample_extracted_profile.headline
        assert result.enhanced_experience == sample_extracted_profile.experience
        assert result.keywords == sample_extracted_profile.skills
        assert result.suggestions == list(DEFAULT_SUGGESTIONS)

    async def test_exception_without_headline_uses_default_summary(self, mock_llm_client):
        mock_llm_client.generate.side_effect = TimeoutError("timed out")

        result = await ProfileEnhancer(mock_llm_client).enhance(ExtractedProfile(name="Jo Doe"))

        assert result.summary == DEFAULT_SUMMARY
        assert result.error == "AI enhancement failed"
        assert result.enhanced_experience == []

    async def test_without_model_client(self, sample_extracted_profile):
        result = await ProfileEnhancer(None).enhance(sample_extracted_profile)

        assert result.error is None
        assert result.summary == "Software Engineer at Acme"
        assert result.keywords == ["Python", "Go"]
        assert result.suggestions == [
            "Consider adding more specific achievements",
            "Quantify your impact where possible",
        ]

    async def test_unparseable_reply_becomes_summary(
        self, mock_llm_client, sample_extracted_profile
    ):
        text = "Seasoned engineer who ships reliable backend systems."
        mock_llm_client.generate.return_value = LLMResponse(
            text=text, input_tokens=10, output_tokens=10
        )

        result = await ProfileEnhancer(mock_llm_client).enhance(sample_extracted_profile)

        assert result.summary == text
        assert result.raw_ai_response == text
        assert result.error is None
        assert result.enhanced_experience == sample_extracted_profile.experience

    async def test_fallback_wire_shape(self, mock_llm_client, sample_extracted_profile):
        mock_llm_client.generate.side_effect = RuntimeError("boom")

        wire = (await ProfileEnhancer(mock_llm_client).enhance(sample_extracted_profile)).to_wire()

        assert wire["error"] == "AI enhancement failed"
        assert wire["details"] == "boom"
        assert "enhancedExperience" in wire
        assert "rawAiResponse" not in wire
