"""Pre-analysis: run the five independent analyzers concurrently and join them."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

from hybrid_tailor.analysis.company import CompanyContextChecker
from hybrid_tailor.analysis.context import analyze_context
from hybrid_tailor.analysis.impact import analyze_impact
from hybrid_tailor.analysis.soft_skills import detect_soft_skills
from hybrid_tailor.analysis.uniqueness import analyze_uniqueness
from hybrid_tailor.errors import PreAnalysisError
from hybrid_tailor.models.analysis import (
    ContextResult,
    ImpactResult,
    PreAnalysisResult,
    SoftSkillReport,
    UniquenessResult,
)
from hybrid_tailor.models.job import JobData
from hybrid_tailor.models.resume import ResumeContent

logger = logging.getLogger(__name__)

CRITICAL_ANALYZERS = ("impact", "uniqueness", "context")


class PreAnalyzer:
    """Fan out to every analyzer, then apply one failure policy to all of them.

    A failed critical analyzer aborts the run because both the rule engine
    and the scorer depend on it. Soft-skill and company failures degrade to
    an empty report and no company context.
    """

    def __init__(
        self,
        *,
        impact: Callable[[ResumeContent], ImpactResult] = analyze_impact,
        uniqueness: Callable[[ResumeContent], UniquenessResult] = analyze_uniqueness,
        context: Callable[[ResumeContent, JobData], ContextResult] = analyze_context,
        soft_skills: Callable[[ResumeContent], SoftSkillReport] = detect_soft_skills,
        company: CompanyContextChecker | None = None,
    ):
        self.impact = impact
        self.uniqueness = uniqueness
        self.context = context
        self.soft_skills = soft_skills
        self.company = company or CompanyContextChecker()

    async def run(self, resume: ResumeContent, job: JobData, resume_id: str = "") -> PreAnalysisResult:
        start = time.monotonic()
        outcomes = await asyncio.gather(
            asyncio.to_thread(self.impact, resume),
            asyncio.to_thread(self.uniqueness, resume),
            asyncio.to_thread(self.context, resume, job),
            asyncio.to_thread(self.soft_skills, resume),
            self.company.check(job.company_name),
            return_exceptions=True,
        )
        results = dict(zip(["impact", "uniqueness", "context", "soft_skills", "company"], outcomes))

        for name in CRITICAL_ANALYZERS:
            outcome = results[name]
            if isinstance(outcome, BaseException):
                raise PreAnalysisError(f"{name} analysis failed: {outcome}", analyzer=name) from outcome

        soft = results["soft_skills"]
        if isinstance(soft, BaseException):
            if not isinstance(soft, Exception):
                raise soft
            logger.warning("Soft-skill detection failed, continuing without it: %s", soft)
            soft = SoftSkillReport()

        company = results["company"]
        if isinstance(company, BaseException):
            if not isinstance(company, Exception):
                raise company
            logger.warning("Company context check failed, continuing without it: %s", company)
            company = None

        logger.info("Pre-analysis finished in %d ms", (time.monotonic() - start) * 1000)
        return PreAnalysisResult(
            impact=results["impact"],
            uniqueness=results["uniqueness"],
            context=results["context"],
            soft_skills=soft.unevidenced,
            soft_skill_evidence=soft.evidenced,
            company=company,
            resume_id=resume_id,
            job_id=job.id,
        )
