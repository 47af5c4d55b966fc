"""Tests for the tailoring change summary."""

from hybrid_tailor.models.resume import WhyFitBullet
from hybrid_tailor.pipeline.changes import diff_resume


class TestDiffResume:
    def test_identical(self, sample_resume):
        changes = diff_resume(sample_resume, sample_resume.model_copy(deep=True))
        assert not changes.summary_modified
        assert changes.summary_diff is None
        assert changes.bullets_modified == 0
        assert changes.skills_removed == []
        assert not changes.skills_reordered
        assert not changes.sections_reordered

    def test_bullet_and_summary_edits(self, sample_resume):
        tailored = sample_resume.model_copy(deep=True)
        tailored.summary = "New summary"
        tailored.experiences[0].bullets[2].text = "Reviewed 30 pull requests a week"
        changes = diff_resume(sample_resume, tailored)
        assert changes.summary_modified
        assert changes.summary_diff.after == "New summary"
        assert changes.bullets_modified == 1
        [diff] = changes.bullet_diffs
        assert (diff.bullet_id, diff.experience_id) == ("b3", "exp-1")
        assert diff.before == "Responsible for code reviews"

    def test_removed_bullets_and_skills(self, sample_resume):
        tailored = sample_resume.model_copy(deep=True)
        tailored.experiences[0].bullets.pop()
        tailored.skills.technical = ["Python", "Django", "Docker", "AWS"]
        changes = diff_resume(sample_resume, tailored)
        assert changes.bullets_removed == 1
        assert changes.skills_removed == ["python"]
        assert not changes.skills_reordered

    def test_reorders(self, sample_resume):
        tailored = sample_resume.model_copy(deep=True)
        tailored.skills.soft = ["Teamwork", "Communication"]
        tailored.section_order = ["summary", "skills", "experience", "education", "projects"]
        tailored.experiences.reverse()
        changes = diff_resume(sample_resume, tailored)
        assert changes.skills_reordered
        assert changes.sections_reordered
        assert changes.experiences_reordered

    def test_why_fit_section_reported(self, sample_resume):
        tailored = sample_resume.model_copy(deep=True)
        tailored.why_fit = [
            WhyFitBullet(id="why-fit-1", label="Proven track record:", text="Holds a patent"),
            WhyFitBullet(id="why-fit-2", label="Deep expertise:", text="Robotics backends"),
        ]
        changes = diff_resume(sample_resume, tailored)
        assert changes.why_fit_section_added
        assert changes.why_fit_bullet_count == 2
        assert changes.to_wire()["whyFitBulletCount"] == 2

        unchanged = diff_resume(tailored, tailored.model_copy(deep=True))
        assert not unchanged.why_fit_section_added
        assert unchanged.why_fit_bullet_count == 2
