"""Pydantic models for pipeline output."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from hybrid_tailor.models.analysis import PreAnalysisResult, ScoreLabel
from hybrid_tailor.models.base import CamelModel
from hybrid_tailor.models.resume import ResumeContent
from hybrid_tailor.models.rules import RuleEvaluationResult


class TextDiff(CamelModel):
    before: str | None
    after: str | None


class BulletDiff(CamelModel):
    bullet_id: str
    experience_id: str
    before: str
    after: str


class TailoringChanges(CamelModel):
    summary_modified: bool = False
    summary_diff: TextDiff | None = None
    bullets_modified: int = 0
    bullet_diffs: list[BulletDiff] = Field(default_factory=list)
    bullets_removed: int = 0
    skills_reordered: bool = False
    skills_removed: list[str] = Field(default_factory=list)
    sections_reordered: bool = False
    experiences_reordered: bool = False
    why_fit_section_added: bool = False
    why_fit_bullet_count: int = 0


class CriterionScore(CamelModel):
    key: str
    name: str
    weight: int  # weights of all criteria sum to 100
    score: int
    weighted: float
    label: ScoreLabel
    detail: str = ""


class RecruiterReadinessScore(CamelModel):
    overall: int
    label: ScoreLabel
    criteria: list[CriterionScore]
    top_suggestions: list[str] = Field(default_factory=list)

    def criterion(self, key: str) -> CriterionScore:
        for c in self.criteria:
            if c.key == key:
                return c
        raise KeyError(key)


class TokenUsage(CamelModel):
    pre_analysis: int = 0
    rewriting: int = 0
    total: int = 0
    saved_vs_pure_ai: int = 0
    estimated_cost_usd: float = 0.0


class TailorResult(CamelModel):
    tailored_resume: ResumeContent
    quality_score: RecruiterReadinessScore
    changes: TailoringChanges
    pre_analysis: PreAnalysisResult
    applied_rules: list[RuleEvaluationResult]
    token_usage: TokenUsage
    processing_time_ms: int
    tailored_at: datetime

    def to_response(self) -> dict:
        return {
            "tailoredResume": self.tailored_resume.to_wire(),
            "qualityScore": self.quality_score.to_wire(),
            "changes": self.changes.to_wire(),
            "preAnalysis": self.pre_analysis.summarize(),
            "appliedRules": [r.applied() for r in self.applied_rules],
            "tokenUsage": self.token_usage.to_wire(),
            "processingTimeMs": self.processing_time_ms,
            "tailoredAt": self.tailored_at.isoformat(),
        }


class EstimatedChanges(CamelModel):
    bullets_to_improve: int
    unique_differentiators: int
    missing_keywords: int
    soft_skills_detected: int
    rules_that_would_fire: list[str] = Field(default_factory=list)


class TailorPreview(CamelModel):
    """Analysis of an untouched resume, produced without any generative call."""

    pre_analysis: PreAnalysisResult
    quality_score: RecruiterReadinessScore
    estimated_changes: EstimatedChanges
