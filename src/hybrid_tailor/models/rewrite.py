"""Pydantic models for the rewriter capability."""

from __future__ import annotations

from pydantic import Field

from hybrid_tailor.models.base import CamelModel
from hybrid_tailor.models.rules import RewriteItem, StrategicTone


class RewriteRequest(CamelModel):
    job_title: str
    company_name: str | None = None
    company_context_needed: bool = False
    tone: StrategicTone = "measured"
    missing_keywords: list[str] = Field(default_factory=list)
    items: list[RewriteItem] = Field(default_factory=list)


class RewriteResult(CamelModel):
    fragments: dict[str, str]  # RewriteItem.key -> rewritten text
    input_tokens: int = 0
    output_tokens: int = 0
    model: str = ""

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens
