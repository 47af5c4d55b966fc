"""Shared test fixtures."""

from __future__ import annotations

import asyncio

import pytest

from hybrid_tailor.analysis.context import analyze_context
from hybrid_tailor.analysis.impact import analyze_impact
from hybrid_tailor.analysis.soft_skills import detect_soft_skills
from hybrid_tailor.analysis.uniqueness import analyze_uniqueness
from hybrid_tailor.errors import ErrorCode, RewriteError
from hybrid_tailor.models.analysis import CompanyContext, PreAnalysisResult
from hybrid_tailor.models.job import JobData
from hybrid_tailor.models.resume import (
    Bullet,
    Contact,
    Education,
    Experience,
    ResumeContent,
    Skills,
)
from hybrid_tailor.models.rewrite import RewriteRequest, RewriteResult

SCENARIO_KEYWORDS = [
    "Python", "Django", "Docker", "AWS", "Terraform",
    "Kafka", "GraphQL", "Scala", "Airflow", "Snowflake",
]


@pytest.fixture
def sample_resume() -> ResumeContent:
    """Five bullets, two of them quantified; mentions Python, Django, Docker and AWS."""
    return ResumeContent(
        contact=Contact(name="Jane Doe", email="jane@example.com"),
        summary="Backend engineer focused on reliable APIs. Strong communicator and team player.",
        experiences=[
            Experience(
                id="exp-1",
                company="Acme Robotics",
                title="Senior Backend Engineer",
                bullets=[
                    Bullet(id="b1", text="Reduced API latency by 40% by introducing Redis caching"),
                    Bullet(id="b2", text="Led migration of 12 services to Kubernetes"),
                    Bullet(id="b3", text="Responsible for code reviews"),
                    Bullet(id="b4", text="Responsible for on-call rotation"),
                ],
            ),
            Experience(
                id="exp-2",
                company="Globex",
                title="Software Engineer",
                bullets=[Bullet(id="b5", text="Built internal dashboards with Django")],
            ),
        ],
        education=[
            Education(id="edu-1", institution="State University", degree="BSc", field="Computer Science"),
        ],
        skills=Skills(
            technical=["Python", "Django", "Docker", "AWS", "python"],
            soft=["Communication", "Teamwork"],
        ),
    )


@pytest.fixture
def scenario_job() -> JobData:
    """Ten distinct keywords; the sample resume covers four of them."""
    return JobData(
        id="job-1",
        title="Backend Engineer",
        company_name="Tiny Startup Labs",
        description=", ".join(SCENARIO_KEYWORDS),
    )


@pytest.fixture
def pre_analysis(sample_resume, scenario_job) -> PreAnalysisResult:
    report = detect_soft_skills(sample_resume)
    return PreAnalysisResult(
        impact=analyze_impact(sample_resume),
        uniqueness=analyze_uniqueness(sample_resume),
        context=analyze_context(sample_resume, scenario_job),
        soft_skills=report.unevidenced,
        soft_skill_evidence=report.evidenced,
        company=CompanyContext(company_name="Tiny Startup Labs", is_well_known=False, source="unknown"),
        job_id=scenario_job.id,
    )


class StubRewriter:
    """Deterministic rewriter that records every request it receives."""

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.requests: list[RewriteRequest] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    async def rewrite(self, request: RewriteRequest) -> RewriteResult:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        fragments = {
            item.key: f"Tailored: {item.original or request.job_title}" for item in request.items
        }
        return RewriteResult(
            fragments=fragments,
            input_tokens=100,
            output_tokens=50,
            model="claude-sonnet-4-5-20250929",
        )


class FailingRewriter:
    def __init__(self, reason: ErrorCode = ErrorCode.REWRITING_FAILED):
        self.reason = reason
        self.calls = 0

    async def rewrite(self, request: RewriteRequest) -> RewriteResult:
        self.calls += 1
        raise RewriteError("model returned garbage", self.reason)


@pytest.fixture
def stub_rewriter() -> StubRewriter:
    return StubRewriter()


@pytest.fixture
def slow_rewriter() -> StubRewriter:
    return StubRewriter(delay=5.0)


@pytest.fixture
def failing_rewriter():
    """Factory: a rewriter that always fails with the given reason."""
    return FailingRewriter
