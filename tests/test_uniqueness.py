"""Tests for the uniqueness analyzer."""

from hybrid_tailor.analysis.uniqueness import RARITY_POINTS, analyze_uniqueness
from hybrid_tailor.models.resume import (
    Bullet,
    Education,
    Experience,
    ResumeContent,
    Skills,
)


def _factor(result, factor_type):
    return [f for f in result.factors if f.type == factor_type]


class TestSkillCombination:
    def test_three_domains_is_very_rare(self):
        resume = ResumeContent(skills=Skills(technical=["Python", "Machine Learning", "Figma"]))
        [factor] = _factor(analyze_uniqueness(resume), "skill_combination")
        assert factor.rarity == "very_rare"
        assert factor.evidence == ["Python", "Machine Learning", "Figma"]

    def test_rare_pair(self):
        resume = ResumeContent(skills=Skills(technical=["Python", "Figma"]))
        [factor] = _factor(analyze_uniqueness(resume), "skill_combination")
        assert factor.rarity == "rare"

    def test_single_domain_is_not_a_combination(self):
        resume = ResumeContent(skills=Skills(technical=["Python", "Django"]))
        assert _factor(analyze_uniqueness(resume), "skill_combination") == []


class TestCareerTransition:
    def test_domain_change_is_rare(self):
        resume = ResumeContent(
            experiences=[
                Experience(id="e1", company="DataCo", title="Data Scientist"),
                Experience(id="e2", company="City Hospital", title="Registered Nurse"),
            ]
        )
        [factor] = _factor(analyze_uniqueness(resume), "career_transition")
        assert factor.rarity == "rare"
        assert factor.evidence == ["Registered Nurse", "Data Scientist"]

    def test_promotion_is_not_a_transition(self):
        resume = ResumeContent(
            experiences=[
                Experience(id="e1", company="A", title="Senior Software Engineer"),
                Experience(id="e2", company="A", title="Software Engineer"),
            ]
        )
        assert _factor(analyze_uniqueness(resume), "career_transition") == []


class TestEvidenceFactors:
    def test_patent_is_a_rare_achievement(self):
        resume = ResumeContent(
            experiences=[
                Experience(
                    id="e1",
                    company="A",
                    title="Engineer",
                    bullets=[Bullet(id="b1", text="Awarded a patent for adaptive caching")],
                )
            ]
        )
        [factor] = _factor(analyze_uniqueness(resume), "achievement")
        assert factor.rarity == "rare"
        assert factor.evidence == ["Awarded a patent for adaptive caching"]

    def test_doctorate(self):
        resume = ResumeContent(education=[Education(id="d", institution="MIT", degree="PhD", field="Physics")])
        factors = _factor(analyze_uniqueness(resume), "education")
        assert [f.description for f in factors] == ["Doctoral-level education"]
        assert factors[0].evidence == ["PhD"]

    def test_founder_experience(self):
        resume = ResumeContent(
            experiences=[
                Experience(
                    id="e1",
                    company="A",
                    title="CEO",
                    bullets=[Bullet(id="b1", text="Co-founded a logistics startup")],
                )
            ]
        )
        [factor] = _factor(analyze_uniqueness(resume), "unique_experience")
        assert factor.rarity == "rare"

    def test_multiple_languages(self):
        resume = ResumeContent(skills=Skills(languages=["English", "Korean"]))
        [factor] = _factor(analyze_uniqueness(resume), "unique_experience")
        assert factor.evidence == ["English", "Korean"]


class TestScore:
    def test_sample_resume(self, sample_resume):
        result = analyze_uniqueness(sample_resume)
        assert [f.type for f in result.factors] == ["domain_expertise"]
        assert result.factors[0].rarity == "uncommon"
        assert result.score == 15
        assert result.score_label == "weak"

    def test_score_is_sum_of_rarity_points(self):
        resume = ResumeContent(
            skills=Skills(technical=["Python", "Machine Learning", "Figma"], languages=["English", "Spanish"]),
            education=[Education(id="d", institution="MIT", degree="PhD")],
        )
        result = analyze_uniqueness(resume)
        expected = sum(RARITY_POINTS[f.rarity] for f in result.factors)
        assert result.score == min(100, expected)
        assert result.differentiators[0] == result.factors[0].description

    def test_differentiators_rank_by_rarity(self):
        resume = ResumeContent(
            skills=Skills(technical=["Python", "Machine Learning", "Figma"], languages=["English", "Spanish"]),
            education=[Education(id="d", institution="MIT", degree="PhD")],
        )
        result = analyze_uniqueness(resume)
        assert len(result.differentiators) == 3
        assert result.differentiators[:2] == [
            "Combines software engineering, data and design skills",
            "Doctoral-level education",
        ]

    def test_empty_resume(self):
        result = analyze_uniqueness(ResumeContent())
        assert result.score == 0
        assert result.factors == []
        assert result.differentiators == []
        assert result.suggestions
