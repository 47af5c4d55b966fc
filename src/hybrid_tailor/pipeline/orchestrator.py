"""Main pipeline orchestrator - pre-analysis, rules, one rewrite, scoring."""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime
from enum import Enum
from typing import Callable

from hybrid_tailor.analysis.company import CompanyContextChecker, CompanyLookup
from hybrid_tailor.clients.llm_client import LLMClient
from hybrid_tailor.config import AppConfig, PipelineConfig
from hybrid_tailor.errors import (
    ErrorCode,
    InvalidInputError,
    PipelinePhase,
    RewriteError,
    TailorError,
)
from hybrid_tailor.logging.token_usage import TokenAccountant, naive_rewrite_baseline
from hybrid_tailor.models.job import JobData
from hybrid_tailor.models.result import EstimatedChanges, TailorPreview, TailorResult
from hybrid_tailor.models.resume import ResumeContent
from hybrid_tailor.pipeline.changes import diff_resume
from hybrid_tailor.pipeline.pre_analysis import PreAnalyzer
from hybrid_tailor.pipeline.rewriter import AnthropicRewriter, Rewriter, apply_rewrites, build_request
from hybrid_tailor.pipeline.rule_engine import DEFAULT_RULES, Rule, apply_rules
from hybrid_tailor.pipeline.scorer import score_resume

logger = logging.getLogger(__name__)

PhaseCallback = Callable[[str, str], None]

PHASE_ERROR_CODES: dict[PipelinePhase, ErrorCode] = {
    PipelinePhase.PRE_ANALYSIS: ErrorCode.PRE_ANALYSIS_FAILED,
    PipelinePhase.RULES: ErrorCode.RULES_FAILED,
    PipelinePhase.REWRITING: ErrorCode.REWRITING_FAILED,
    PipelinePhase.SCORING: ErrorCode.SCORING_FAILED,
}


class RunStatus(str, Enum):
    PENDING = "pending"
    PRE_ANALYSIS = "pre_analysis"
    RULES = "rules"
    REWRITING = "rewriting"
    SCORING = "scoring"
    DONE = "done"
    FAILED = "failed"


_NEXT: dict[RunStatus, RunStatus] = {
    RunStatus.PENDING: RunStatus.PRE_ANALYSIS,
    RunStatus.PRE_ANALYSIS: RunStatus.RULES,
    RunStatus.RULES: RunStatus.REWRITING,
    RunStatus.REWRITING: RunStatus.SCORING,
    RunStatus.SCORING: RunStatus.DONE,
}


class RunState:
    """Phase bookkeeping for a single run; phases advance strictly in order."""

    def __init__(self, on_phase: PhaseCallback | None = None):
        self.status = RunStatus.PENDING
        self.failed_phase: PipelinePhase | None = None
        self.timings_ms: dict[str, int] = {}
        self._on_phase = on_phase
        self._phase_started = time.monotonic()

    @property
    def phase(self) -> PipelinePhase | None:
        """The phase in progress, or None outside of one."""
        try:
            return PipelinePhase(self.status.value)
        except ValueError:
            return None

    def advance(self, target: RunStatus, detail: str = "") -> None:
        expected = _NEXT.get(self.status)
        if target is not expected:
            raise RuntimeError(f"Cannot move from {self.status.value} to {target.value}")
        now = time.monotonic()
        if self.phase is not None:
            elapsed = int((now - self._phase_started) * 1000)
            self.timings_ms[self.phase.value] = elapsed
            logger.info("Phase %s finished in %d ms", self.phase.value, elapsed)
        self.status = target
        self._phase_started = now
        if self._on_phase:
            self._on_phase(target.value, detail)

    def fail(self) -> PipelinePhase | None:
        phase = self.phase
        self.failed_phase = phase
        self.status = RunStatus.FAILED
        return phase


def validate_inputs(resume: ResumeContent, job: JobData) -> None:
    """Caller-side preconditions, re-checked before any phase starts."""
    if resume.contact is None or not resume.contact.name.strip():
        raise InvalidInputError(ErrorCode.INVALID_RESUME, "Resume has no contact information")
    if not job.description or not job.description.strip():
        raise InvalidInputError(ErrorCode.INVALID_JOB, "Job description is empty")


def to_tailor_error(exc: Exception, phase: PipelinePhase | None) -> TailorError:
    if isinstance(exc, TailorError):
        return exc
    if isinstance(exc, RewriteError):
        code = exc.reason
    elif phase is None:
        code = ErrorCode.UNKNOWN_ERROR
    else:
        code = PHASE_ERROR_CODES[phase]
    return TailorError(code, str(exc) or type(exc).__name__, phase)


class PipelineOrchestrator:
    """Runs one tailoring request end to end, or fails it as a whole."""

    def __init__(
        self,
        rewriter: Rewriter,
        *,
        pre_analyzer: PreAnalyzer | None = None,
        rules: tuple[Rule, ...] | list[Rule] = DEFAULT_RULES,
        pipeline_config: PipelineConfig | None = None,
    ):
        self.rewriter = rewriter
        self.pre_analyzer = pre_analyzer or PreAnalyzer()
        self.rules = rules
        self.config = pipeline_config or PipelineConfig()

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        llm: LLMClient,
        company_lookup: CompanyLookup | None = None,
    ) -> PipelineOrchestrator:
        rewriter = AnthropicRewriter(
            llm,
            model=config.llm.model,
            temperature=config.llm.temperature,
            max_tokens=config.llm.max_tokens,
        )
        checker = CompanyContextChecker(company_lookup, timeout=config.company.lookup_timeout)
        return cls(rewriter, pre_analyzer=PreAnalyzer(company=checker), pipeline_config=config.pipeline)

    async def run(
        self,
        resume: ResumeContent,
        job: JobData,
        resume_id: str = "",
        on_phase: PhaseCallback | None = None,
    ) -> TailorResult:
        """Run the full pipeline within the configured time budget.

        Raises:
            InvalidInputError: the resume has no contact or the job no description.
            TailorError: any phase failed or the budget ran out; ``phase`` names where.
        """
        validate_inputs(resume, job)
        state = RunState(on_phase)
        budget = self.config.time_budget_seconds
        try:
            return await asyncio.wait_for(self._run(resume, job, resume_id, state), timeout=budget)
        except asyncio.TimeoutError as exc:
            phase = state.fail()
            logger.error("Tailoring exceeded %.0fs budget during %s", budget, phase.value if phase else "startup")
            raise TailorError(
                ErrorCode.TIMEOUT, f"Tailoring did not finish within {budget:.0f} seconds", phase
            ) from exc

    async def _run(self, resume: ResumeContent, job: JobData, resume_id: str, state: RunState) -> TailorResult:
        start = time.monotonic()
        try:
            state.advance(RunStatus.PRE_ANALYSIS, "Analyzing resume against the job")
            pre_analysis = await self.pre_analyzer.run(resume, job, resume_id)

            state.advance(RunStatus.RULES, "Applying recruiter rules")
            outcome = apply_rules(resume, job, pre_analysis, self.config, self.rules)

            state.advance(RunStatus.REWRITING, f"Rewriting {len(outcome.plan.items)} fragments")
            request = build_request(outcome.plan, job, pre_analysis)
            rewrite = await self.rewriter.rewrite(request)
            tailored = apply_rewrites(outcome.draft, request, rewrite)

            state.advance(RunStatus.SCORING, "Scoring recruiter readiness")
            quality = score_resume(tailored, job, pre_analysis)
            accountant = TokenAccountant(baseline=naive_rewrite_baseline(resume, job))
            accountant.record_rewrite(rewrite)
            changes = diff_resume(resume, tailored)

            elapsed_ms = int((time.monotonic() - start) * 1000)
            state.advance(RunStatus.DONE, f"Done: score {quality.overall} ({quality.label})")
        except Exception as exc:
            phase = state.fail()
            error = to_tailor_error(exc, phase)
            logger.error("Tailoring failed in %s: %s", phase.value if phase else "startup", error.message)
            if error is exc:
                raise
            raise error from exc

        return TailorResult(
            tailored_resume=tailored,
            quality_score=quality,
            changes=changes,
            pre_analysis=pre_analysis,
            applied_rules=outcome.applied,
            token_usage=accountant.usage(),
            processing_time_ms=elapsed_ms,
            tailored_at=datetime.now(),
        )

    async def preview(self, resume: ResumeContent, job: JobData, resume_id: str = "") -> TailorPreview:
        """Analyze without rewriting: what tailoring would change and how the resume scores now."""
        validate_inputs(resume, job)
        phase = PipelinePhase.PRE_ANALYSIS
        try:
            pre_analysis = await self.pre_analyzer.run(resume, job, resume_id)
            phase = PipelinePhase.RULES
            outcome = apply_rules(resume, job, pre_analysis, self.config, self.rules)
            phase = PipelinePhase.SCORING
            quality = score_resume(resume, job, pre_analysis)
        except TailorError:
            raise
        except Exception as exc:
            raise to_tailor_error(exc, phase) from exc

        return TailorPreview(
            pre_analysis=pre_analysis,
            quality_score=quality,
            estimated_changes=EstimatedChanges(
                bullets_to_improve=pre_analysis.impact.bullets_improved,
                unique_differentiators=len(pre_analysis.uniqueness.differentiators),
                missing_keywords=len(pre_analysis.context.missing_keywords),
                soft_skills_detected=len(pre_analysis.soft_skills),
                rules_that_would_fire=[r.rule_id for r in outcome.applied],
            ),
        )
