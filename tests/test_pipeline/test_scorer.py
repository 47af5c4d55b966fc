"""Tests for the recruiter readiness scorer."""

from hybrid_tailor.models.resume import Bullet, Experience, ResumeContent, Skills
from hybrid_tailor.pipeline.scorer import CRITERIA, NO_CLAIMS_SCORE, NO_FACTORS_SCORE, score_resume


class TestScoreResume:
    def test_weights_sum_to_100(self):
        assert sum(weight for _, _, weight in CRITERIA) == 100

    def test_pure(self, sample_resume, scenario_job, pre_analysis):
        first = score_resume(sample_resume, scenario_job, pre_analysis)
        second = score_resume(sample_resume, scenario_job, pre_analysis)
        assert first == second

    def test_criteria_in_fixed_order(self, sample_resume, scenario_job, pre_analysis):
        score = score_resume(sample_resume, scenario_job, pre_analysis)
        assert [c.key for c in score.criteria] == [key for key, _, _ in CRITERIA]

    def test_overall_is_weighted_sum(self, sample_resume, scenario_job, pre_analysis):
        score = score_resume(sample_resume, scenario_job, pre_analysis)
        expected = sum(c.score * c.weight for c in score.criteria) / 100
        assert abs(score.overall - expected) <= 0.5
        assert 0 <= score.overall <= 100

    def test_measures_content_not_pre_analysis(self, sample_resume, scenario_job, pre_analysis):
        score = score_resume(sample_resume, scenario_job, pre_analysis)
        assert score.criterion("quantified_impact").score == 40
        assert score.criterion("keyword_alignment").score == 40

        improved = sample_resume.model_copy(deep=True)
        improved.experiences[0].bullets[2].text = "Reviewed 30 pull requests a week"
        rescored = score_resume(improved, scenario_job, pre_analysis)
        assert rescored.criterion("quantified_impact").score == 60

    def test_soft_skills_without_evidence(self, sample_resume, scenario_job, pre_analysis):
        score = score_resume(sample_resume, scenario_job, pre_analysis)
        assert score.criterion("soft_skill_evidence").score == 0

    def test_no_claims_is_neutral(self, scenario_job, pre_analysis):
        content = ResumeContent(summary="Engineer")
        assert score_resume(content, scenario_job, pre_analysis).criterion("soft_skill_evidence").score == NO_CLAIMS_SCORE

    def test_no_factors_is_neutral(self, sample_resume, scenario_job, pre_analysis):
        bare = pre_analysis.model_copy(
            update={"uniqueness": pre_analysis.uniqueness.model_copy(update={"factors": [], "score": 0})}
        )
        score = score_resume(sample_resume, scenario_job, bare)
        assert score.criterion("differentiator_visibility").score == NO_FACTORS_SCORE

    def test_suggestions_for_weakest_criteria(self, sample_resume, scenario_job, pre_analysis):
        score = score_resume(sample_resume, scenario_job, pre_analysis)
        assert 1 <= len(score.top_suggestions) <= 3
        assert any("soft skill" in s for s in score.top_suggestions)


class TestScanability:
    def test_clean_structure(self, sample_resume, scenario_job, pre_analysis):
        resume = sample_resume.model_copy(deep=True)
        resume.skills.technical = ["Python", "Django", "Docker", "AWS"]
        for _, bullet in resume.iter_bullets():
            bullet.text = "Shipped a feature used by many teams"
        score = score_resume(resume, scenario_job, pre_analysis)
        assert score.criterion("structural_scanability").score == 100

    def test_deductions_add_up(self, scenario_job, pre_analysis):
        content = ResumeContent(
            section_order=["education", "experience", "skills"],
            experiences=[Experience(id="e", company="C", title="Dev", bullets=[Bullet(id="x", text="Did it")])],
            skills=Skills(technical=["Go", "go"]),
        )
        criterion = score_resume(content, scenario_job, pre_analysis).criterion("structural_scanability")
        # summary 20, education first 15, one short bullet 5, duplicate skill 10
        assert criterion.score == 50
        assert "education before experience" in criterion.detail

    def test_empty_experience_penalized(self, scenario_job, pre_analysis):
        content = ResumeContent(
            summary="Engineer",
            experiences=[Experience(id="e", company="C", title="Dev")],
        )
        assert score_resume(content, scenario_job, pre_analysis).criterion("structural_scanability").score == 90

    def test_bullet_length_penalty_capped(self, scenario_job, pre_analysis):
        bullets = [Bullet(id=f"x{i}", text="Too short") for i in range(8)]
        bullets += [Bullet(id="y", text="Another")]
        content = ResumeContent(
            summary="Engineer",
            experiences=[Experience(id="e", company="C", title="Dev", bullets=bullets)],
        )
        # nine short bullets cap at 40, more than eight bullets costs 10
        assert score_resume(content, scenario_job, pre_analysis).criterion("structural_scanability").score == 50
