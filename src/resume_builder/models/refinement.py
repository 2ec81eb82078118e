"""Pydantic models for conversational section refinement."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from resume_builder.models.base import CamelModel


class ChatTurn(CamelModel):
    role: Literal["user", "ai"]
    content: str


class RefineRequest(CamelModel):
    section_type: str
    section_content: str = ""
    chat_history: list[ChatTurn] = Field(default_factory=list)
    user_message: str


class RefineResult(CamelModel):
    revised_content: str
    chat_history: list[ChatTurn]
