"""Pydantic model for the target job posting."""

from __future__ import annotations

from hybrid_tailor.models.base import CamelModel


class JobData(CamelModel):
    id: str
    title: str
    company_name: str | None = None
    description: str
    requirements: list[str] | None = None
    skills: list[str] | None = None
