"""Error taxonomy for the tailoring pipeline.

Everything raised inside the pipeline leaves the orchestrator as a single
``TailorError`` carrying ``code``, ``message`` and the ``phase`` it failed in.
The component-level exceptions below never cross that boundary.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    PRE_ANALYSIS_FAILED = "PRE_ANALYSIS_FAILED"
    RULES_FAILED = "RULES_FAILED"
    REWRITING_FAILED = "REWRITING_FAILED"
    SCORING_FAILED = "SCORING_FAILED"
    AI_NOT_CONFIGURED = "AI_NOT_CONFIGURED"
    AUTH_ERROR = "AUTH_ERROR"
    RATE_LIMIT = "RATE_LIMIT"
    TIMEOUT = "TIMEOUT"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    # Caller contract violations, raised before any phase starts
    INVALID_JOB = "INVALID_JOB"
    INVALID_RESUME = "INVALID_RESUME"


class PipelinePhase(str, Enum):
    PRE_ANALYSIS = "pre_analysis"
    RULES = "rules"
    REWRITING = "rewriting"
    SCORING = "scoring"


STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.PRE_ANALYSIS_FAILED: 500,
    ErrorCode.RULES_FAILED: 500,
    ErrorCode.REWRITING_FAILED: 500,
    ErrorCode.SCORING_FAILED: 500,
    ErrorCode.AI_NOT_CONFIGURED: 503,
    ErrorCode.AUTH_ERROR: 401,
    ErrorCode.RATE_LIMIT: 429,
    ErrorCode.TIMEOUT: 504,
    ErrorCode.UNKNOWN_ERROR: 500,
    ErrorCode.INVALID_JOB: 400,
    ErrorCode.INVALID_RESUME: 400,
}

RETRYABLE_CODES = frozenset({
    ErrorCode.PRE_ANALYSIS_FAILED,
    ErrorCode.REWRITING_FAILED,
    ErrorCode.RATE_LIMIT,
    ErrorCode.TIMEOUT,
})

# Rewriter failure reasons that are surfaced to callers as-is
PASSTHROUGH_REWRITE_CODES = frozenset({
    ErrorCode.AI_NOT_CONFIGURED,
    ErrorCode.AUTH_ERROR,
    ErrorCode.RATE_LIMIT,
    ErrorCode.TIMEOUT,
})


def http_status(code: ErrorCode) -> int:
    """Status a caller should answer with for a given error code."""
    return STATUS_CODES.get(code, 500)


def is_retryable(code: ErrorCode) -> bool:
    """Whether a caller may retry the same request without operator action."""
    return code in RETRYABLE_CODES


class TailorError(Exception):
    """The one typed error that crosses the pipeline boundary."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        phase: PipelinePhase | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.phase = phase

    def to_response(self) -> dict:
        body: dict = {"code": self.code.value, "message": self.message}
        if self.phase is not None:
            body["phase"] = self.phase.value
        return body

    def __repr__(self) -> str:
        phase = self.phase.value if self.phase else None
        return f"TailorError(code={self.code.value!r}, phase={phase!r}, message={self.message!r})"


class InvalidInputError(TailorError):
    """Resume or job record violates the caller-side preconditions."""


class PreAnalysisError(Exception):
    """A critical analyzer failed."""

    def __init__(self, message: str, analyzer: str):
        super().__init__(message)
        self.analyzer = analyzer


class RuleEngineError(Exception):
    """Rule engine hit an invariant violation in its inputs."""


class RewriteError(Exception):
    """The single generative call failed; ``reason`` classifies why."""

    def __init__(self, message: str, reason: ErrorCode = ErrorCode.REWRITING_FAILED):
        super().__init__(message)
        self.reason = reason
