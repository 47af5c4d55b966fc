"""Tests for the concurrent pre-analysis stage."""

from unittest.mock import AsyncMock

import pytest

from hybrid_tailor.analysis.company import CompanyContextChecker
from hybrid_tailor.errors import PreAnalysisError
from hybrid_tailor.pipeline.pre_analysis import PreAnalyzer


def _boom(*args):
    raise ValueError("analyzer exploded")


class TestPreAnalyzer:
    @pytest.mark.asyncio
    async def test_joins_all_analyzers(self, sample_resume, scenario_job):
        result = await PreAnalyzer().run(sample_resume, scenario_job, resume_id="r-1")
        assert result.impact.score == 40
        assert result.context.score == 40
        assert result.uniqueness.score == 15
        assert [c.skill for c in result.soft_skills] == ["communication", "collaboration"]
        assert result.company.company_name == "Tiny Startup Labs"
        assert result.company.needs_context
        assert (result.resume_id, result.job_id) == ("r-1", "job-1")

    @pytest.mark.asyncio
    async def test_same_inputs_same_result(self, sample_resume, scenario_job):
        analyzer = PreAnalyzer()
        first = await analyzer.run(sample_resume, scenario_job)
        second = await analyzer.run(sample_resume, scenario_job)
        assert first.summarize() == second.summarize()
        assert first.model_dump(exclude={"analyzed_at"}) == second.model_dump(exclude={"analyzed_at"})

    @pytest.mark.parametrize("name", ["impact", "uniqueness", "context"])
    @pytest.mark.asyncio
    async def test_critical_failure_aborts(self, sample_resume, scenario_job, name):
        analyzer = PreAnalyzer(**{name: _boom})
        with pytest.raises(PreAnalysisError, match="analyzer exploded") as exc_info:
            await analyzer.run(sample_resume, scenario_job)
        assert exc_info.value.analyzer == name
        assert isinstance(exc_info.value.__cause__, ValueError)

    @pytest.mark.asyncio
    async def test_soft_skill_failure_degrades(self, sample_resume, scenario_job):
        result = await PreAnalyzer(soft_skills=_boom).run(sample_resume, scenario_job)
        assert result.soft_skills == []
        assert result.soft_skill_evidence == []
        assert result.impact.score == 40

    @pytest.mark.asyncio
    async def test_company_failure_degrades(self, sample_resume, scenario_job):
        checker = AsyncMock(spec=CompanyContextChecker)
        checker.check.side_effect = RuntimeError("lookup backend down")
        result = await PreAnalyzer(company=checker).run(sample_resume, scenario_job)
        assert result.company is None
        assert result.summarize()["companyContextNeeded"] is False

    @pytest.mark.asyncio
    async def test_no_company_name(self, sample_resume, scenario_job):
        job = scenario_job.model_copy(update={"company_name": None})
        result = await PreAnalyzer().run(sample_resume, job)
        assert result.company is None
