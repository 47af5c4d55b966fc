"""Pydantic models for pre-analysis output."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from hybrid_tailor.models.base import CamelModel

ScoreLabel = Literal["weak", "moderate", "strong", "exceptional"]
ImprovementLevel = Literal["none", "minor", "major", "transformed"]
MetricCategory = Literal["percentage", "monetary", "time", "scale", "other"]
Rarity = Literal["common", "uncommon", "rare", "very_rare"]
FactorType = Literal[
    "skill_combination",
    "career_transition",
    "unique_experience",
    "domain_expertise",
    "achievement",
    "education",
]


# --- Impact ---


class ImpactBullet(CamelModel):
    bullet_id: str
    experience_id: str
    experience_title: str
    company_name: str
    original: str
    improvement: ImprovementLevel
    metrics: list[str] = Field(default_factory=list)
    metric_category: MetricCategory | None = None  # set when already quantified
    suggested_metric: MetricCategory | None = None  # rewriting hint when not


class MetricCategories(CamelModel):
    percentage: int = 0
    monetary: int = 0
    time: int = 0
    scale: int = 0
    other: int = 0


class ImpactResult(CamelModel):
    score: int
    score_label: ScoreLabel
    summary: str
    total_bullets: int
    bullets_improved: int
    bullets: list[ImpactBullet] = Field(default_factory=list)
    metric_categories: MetricCategories = Field(default_factory=MetricCategories)
    suggestions: list[str] = Field(default_factory=list)


# --- Uniqueness ---


class UniquenessFactor(CamelModel):
    type: FactorType
    description: str
    rarity: Rarity
    evidence: list[str] = Field(default_factory=list)  # verbatim resume text
    suggestion: str | None = None


class UniquenessResult(CamelModel):
    score: int
    score_label: ScoreLabel
    factors: list[UniquenessFactor] = Field(default_factory=list)
    differentiators: list[str] = Field(default_factory=list)
    summary: str = ""
    suggestions: list[str] = Field(default_factory=list)


# --- Context ---


class KeywordMatch(CamelModel):
    keyword: str
    found: bool
    location: str | None = None  # resume section it was found in


class KeywordCoverage(CamelModel):
    matched: int
    total: int
    percentage: int
    keywords: list[KeywordMatch] = Field(default_factory=list)


class MatchedSkill(CamelModel):
    skill: str
    strength: Literal["exact", "related"]


class ExperienceAlignment(CamelModel):
    experience_id: str
    experience_title: str
    relevance: Literal["high", "medium", "low"]
    matched_keywords: list[str] = Field(default_factory=list)


class ContextResult(CamelModel):
    score: int
    score_label: ScoreLabel
    summary: str
    keyword_coverage: KeywordCoverage
    matched_skills: list[MatchedSkill] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    missing_requirements: list[str] = Field(default_factory=list)
    experience_alignments: list[ExperienceAlignment] = Field(default_factory=list)


# --- Soft skills ---


class SoftSkillClaim(CamelModel):
    """A soft skill the resume claims without any supporting bullet."""

    skill: str
    source: Literal["skills", "summary"]
    claimed_text: str
    suggestion: str


class SoftSkillEvidence(CamelModel):
    skill: str
    evidence: list[str] = Field(default_factory=list)
    bullet_ids: list[str] = Field(default_factory=list)
    strength: Literal["strong", "moderate", "weak"]


class SoftSkillReport(CamelModel):
    unevidenced: list[SoftSkillClaim] = Field(default_factory=list)
    evidenced: list[SoftSkillEvidence] = Field(default_factory=list)


# --- Company ---


class CompanyContext(CamelModel):
    company_name: str
    is_well_known: bool | None  # None: lookup unavailable
    source: Literal["catalog", "cache", "lookup", "unknown"]
    context: str = ""

    @property
    def needs_context(self) -> bool:
        return self.is_well_known is False


# --- Aggregate ---


class PreAnalysisResult(CamelModel):
    impact: ImpactResult
    uniqueness: UniquenessResult
    context: ContextResult
    soft_skills: list[SoftSkillClaim] = Field(default_factory=list)
    soft_skill_evidence: list[SoftSkillEvidence] = Field(default_factory=list)
    company: CompanyContext | None = None
    analyzed_at: datetime = Field(default_factory=datetime.now)
    resume_id: str = ""
    job_id: str = ""

    model_config = {"frozen": True}

    def summarize(self) -> dict:
        """Summarized wire shape exposed to callers (not full internal detail)."""
        return {
            "impact": {
                "score": self.impact.score,
                "scoreLabel": self.impact.score_label,
                "bulletsImproved": self.impact.bullets_improved,
            },
            "uniqueness": {
                "score": self.uniqueness.score,
                "scoreLabel": self.uniqueness.score_label,
                "differentiators": list(self.uniqueness.differentiators),
            },
            "context": {
                "score": self.context.score,
                "scoreLabel": self.context.score_label,
                "keywordCoverage": self.context.keyword_coverage.percentage,
            },
            "softSkillsDetected": len(self.soft_skills),
            "companyContextNeeded": bool(self.company and self.company.needs_context),
        }
