"""Data models for the hybrid tailoring pipeline."""

from hybrid_tailor.models.analysis import (
    CompanyContext,
    ContextResult,
    ImpactBullet,
    ImpactResult,
    KeywordCoverage,
    PreAnalysisResult,
    SoftSkillClaim,
    SoftSkillEvidence,
    UniquenessFactor,
    UniquenessResult,
)
from hybrid_tailor.models.job import JobData
from hybrid_tailor.models.result import (
    RecruiterReadinessScore,
    TailoringChanges,
    TailorPreview,
    TailorResult,
    TokenUsage,
)
from hybrid_tailor.models.resume import (
    Bullet,
    Contact,
    Education,
    Experience,
    Project,
    ResumeContent,
    Skills,
    WhyFitBullet,
)
from hybrid_tailor.models.rewrite import RewriteRequest, RewriteResult
from hybrid_tailor.models.rules import RewriteItem, RewritePlan, RuleEvaluationResult

__all__ = [
    "Bullet",
    "CompanyContext",
    "Contact",
    "ContextResult",
    "Education",
    "Experience",
    "ImpactBullet",
    "ImpactResult",
    "JobData",
    "KeywordCoverage",
    "PreAnalysisResult",
    "Project",
    "RecruiterReadinessScore",
    "ResumeContent",
    "RewriteItem",
    "RewritePlan",
    "RewriteRequest",
    "RewriteResult",
    "RuleEvaluationResult",
    "Skills",
    "SoftSkillClaim",
    "SoftSkillEvidence",
    "TailoringChanges",
    "TailorPreview",
    "TailorResult",
    "TokenUsage",
    "UniquenessFactor",
    "UniquenessResult",
    "WhyFitBullet",
]
