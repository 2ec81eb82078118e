"""Pydantic model for stored job descriptions."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import Field

from resume_builder.models.base import CamelModel


class JobDescriptionRecord(CamelModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    content: str
    keywords: list[str] = Field(default_factory=list)
    requirements: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)
