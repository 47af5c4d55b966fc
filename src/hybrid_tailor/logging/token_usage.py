"""Token accounting for one pipeline run."""

from __future__ import annotations

import logging
import math

from hybrid_tailor.analysis.keywords import resume_text
from hybrid_tailor.logging.cost_calculator import calculate_cost
from hybrid_tailor.models.job import JobData
from hybrid_tailor.models.result import TokenUsage
from hybrid_tailor.models.resume import ResumeContent
from hybrid_tailor.models.rewrite import RewriteResult

logger = logging.getLogger(__name__)

CHARS_PER_TOKEN = 4

# Prompt a naive single-call tailoring would send along with the whole resume.
NAIVE_SYSTEM_PROMPT = """\
You are an expert resume writer. Rewrite the entire resume below so that it is
tailored to the job description. Quantify achievements, add missing keywords,
reorder sections for a recruiter's six-second scan and return the complete
resume as JSON with the same structure."""


def estimate_tokens(text: str) -> int:
    return math.ceil(len(text or "") / CHARS_PER_TOKEN)


def naive_rewrite_baseline(resume: ResumeContent, job: JobData) -> int:
    """Estimated tokens of rewriting the whole resume in one unguided call."""
    body = resume_text(resume)
    prompt = "\n\n".join([NAIVE_SYSTEM_PROMPT, body, job.description])
    return estimate_tokens(prompt) + estimate_tokens(body)


class TokenAccountant:
    """Collects the rewriter's reported usage; pre-analysis never spends tokens."""

    def __init__(self, baseline: int = 0):
        self.baseline = baseline
        self.pre_analysis = 0
        self.rewriting = 0
        self._calls: list[tuple[str, int, int]] = []

    def record_rewrite(self, result: RewriteResult) -> None:
        self.rewriting += result.total_tokens
        if result.total_tokens:
            self._calls.append((result.model, result.input_tokens, result.output_tokens))
        logger.debug("Rewrite used %d tokens (baseline %d)", result.total_tokens, self.baseline)

    def usage(self) -> TokenUsage:
        total = self.pre_analysis + self.rewriting
        return TokenUsage(
            pre_analysis=self.pre_analysis,
            rewriting=self.rewriting,
            total=total,
            saved_vs_pure_ai=max(0, self.baseline - self.rewriting),
            estimated_cost_usd=calculate_cost(self._calls),
        )
