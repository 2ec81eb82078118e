"""Claude API wrapper with async support, call monitoring and retry logic."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import anthropic

from resume_builder.monitoring.api_monitor import APIMonitor
from resume_builder.utils.backoff import retry_with_backoff
from resume_builder.utils.json_parser import extract_json

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-haiku-4-5-20251001"


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    input_tokens: int
    output_tokens: int


class LLMClient:
    """Async Claude API client.

    The SDK's own retries are disabled so that rate-limit errors reach the
    caller on the first occurrence and can be classified there. Only
    connection-level failures are retried here.
    """

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        *,
        monitor: APIMonitor | None = None,
        max_retries: int = 3,
        retry_delay_base_ms: int = 1000,
        retry_delay_max_ms: int = 30000,
    ):
        kwargs: dict = {"max_retries": 0}
        if api_key is not None:
            kwargs["api_key"] = api_key
        if timeout is not None:
            kwargs["timeout"] = timeout
        self.client = anthropic.AsyncAnthropic(**kwargs)
        self.monitor = monitor
        self.max_retries = max_retries
        self.retry_delay_base_ms = retry_delay_base_ms
        self.retry_delay_max_ms = retry_delay_max_ms
        self._token_log: list[tuple[str, int, int]] = []  # (model, input_tokens, output_tokens)

    async def _call_api(
        self,
        messages: list[dict],
        system: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> anthropic.types.Message:
        """Make the actual API call, retrying connection errors with backoff.

        Timeouts are raised on the first occurrence.
        """
        kwargs: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": messages,
        }
        if system:
            kwargs["system"] = system
        return await retry_with_backoff(
            lambda: self.client.messages.create(**kwargs),
            max_retries=self.max_retries,
            base_delay_ms=self.retry_delay_base_ms,
            max_delay_ms=self.retry_delay_max_ms,
            retry_on=(anthropic.APIConnectionError,),
            never_retry=(anthropic.APITimeoutError,),
        )

    async def _complete(
        self,
        messages: list[dict],
        system: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> LLMResponse:
        logger.debug("LLM call: model=%s", model)
        metric = self.monitor.start_call(model) if self.monitor else None
        try:
            message = await self._call_api(
                messages=messages,
                system=system,
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except Exception as exc:
            if metric is not None:
                self.monitor.end_call(metric, success=False, error=str(exc))
            logger.error("LLM call failed: model=%s", model, exc_info=True)
            raise
        input_tokens = message.usage.input_tokens
        output_tokens = message.usage.output_tokens
        if metric is not None:
            self.monitor.end_call(metric, success=True, tokens=input_tokens + output_tokens)
        logger.debug("LLM response: %d input, %d output tokens", input_tokens, output_tokens)
        self._token_log.append((model, input_tokens, output_tokens))
        return LLMResponse(
            text=message.content[0].text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )

    async def generate(
        self,
        prompt: str,
        system: str = "",
        model: str = DEFAULT_MODEL,
        temperature: float = 0.0,
        max_tokens: int = 8192,
    ) -> LLMResponse:
        """Send a prompt to Claude and return the text response with usage."""
        return await self._complete(
            messages=[{"role": "user", "content": prompt}],
            system=system,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )

    async def generate_chat(
        self,
        messages: list[dict],
        system: str = "",
        model: str = DEFAULT_MODEL,
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ) -> LLMResponse:
        """Send a multi-turn conversation (``[{"role", "content"}, ...]``)."""
        return await self._complete(
            messages=messages,
            system=system,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )

    async def generate_json(
        self,
        prompt: str,
        system: str = "",
        model: str = DEFAULT_MODEL,
        temperature: float = 0.0,
        max_tokens: int = 8192,
    ) -> dict | list:
        """Send a prompt and parse JSON from response."""
        response = await self.generate(
            prompt=prompt,
            system=system,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return extract_json(response.text)

    def get_token_summary(self) -> dict:
        """Return accumulated token usage and reset the log."""
        summary = {
            "input": sum(t[1] for t in self._token_log),
            "output": sum(t[2] for t in self._token_log),
            "calls": list(self._token_log),
        }
        self._token_log.clear()
        return summary
