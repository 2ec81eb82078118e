"""Conversational refinement of a single resume section."""

from __future__ import annotations

import logging

from resume_builder.clients.llm_client import LLMClient
from resume_builder.errors import GenerationFailed, QuotaExceeded
from resume_builder.models.refinement import ChatTurn, RefineRequest, RefineResult
from resume_builder.pipeline.quota import DEFAULT_RETRY_AFTER, classify_error

logger = logging.getLogger(__name__)

REFINE_SYSTEM = """\
You are an expert resume writer. You revise one resume section at a time
following the user's requests.

Rules:
1. Keep the facts of the current content; change only wording and structure
2. Prefer action verbs, quantified results and keywords an ATS will match
3. Reply with the revised section content only, no preamble or commentary"""


class SectionRefiner:
    """Revise one section per request; the caller echoes the full history back."""

    def __init__(
        self,
        llm: LLMClient,
        model: str = "claude-haiku-4-5-20251001",
        *,
        default_retry_after: int = DEFAULT_RETRY_AFTER,
    ):
        self.llm = llm
        self.model = model
        self.default_retry_after = default_retry_after

    @staticmethod
    def _build_messages(request: RefineRequest) -> list[dict]:
        context = (
            f"Section Type: {request.section_type}\n"
            f"Current Content: {request.section_content}"
        )
        messages: list[dict] = [{"role": "user", "content": context}]
        for turn in request.chat_history:
            role = "user" if turn.role == "user" else "assistant"
            # The API requires alternating roles; merge consecutive turns
            if messages[-1]["role"] == role:
                messages[-1]["content"] += f"\n\n{turn.content}"
            else:
                messages.append({"role": role, "content": turn.content})

        final = (
            f"{request.user_message}\n\n"
            f"Please provide only the improved/revised content for the "
            f"{request.section_type} section:"
        )
        if messages[-1]["role"] == "user":
            messages[-1]["content"] += f"\n\n{final}"
        else:
            messages.append({"role": "user", "content": final})
        return messages

    async def refine(self, request: RefineRequest) -> RefineResult:
        """Make one model call and return the revision plus updated history.

        Raises QuotaExceeded on rate limits, GenerationFailed otherwise.
        """
        try:
            response = await self.llm.generate_chat(
                messages=self._build_messages(request),
                system=REFINE_SYSTEM,
                model=self.model,
                temperature=0.7,
                max_tokens=512,
            )
        except Exception as exc:
            logger.exception("Section refinement LLM call failed")
            quota = classify_error(exc, self.default_retry_after)
            if quota.is_quota:
                raise QuotaExceeded(quota.retry_after_seconds) from exc
            raise GenerationFailed(str(exc)) from exc

        revised = response.text.strip()
        history = [
            *request.chat_history,
            ChatTurn(role="user", content=request.user_message),
            ChatTurn(role="ai", content=revised),
        ]
        return RefineResult(revised_content=revised, chat_history=history)
