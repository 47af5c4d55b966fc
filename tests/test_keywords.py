"""Tests for score bucketing and keyword normalization."""

import pytest

from hybrid_tailor.analysis.keywords import (
    NormalizedText,
    content_tokens,
    extract_job_keywords,
    extract_keywords,
    normalize_phrase,
    normalize_token,
    resume_sections,
    skill_key,
)
from hybrid_tailor.analysis.labels import clamp_score, percentage, score_label
from hybrid_tailor.models.job import JobData


class TestScoreLabel:
    @pytest.mark.parametrize(
        "score,label",
        [
            (0, "weak"),
            (39, "weak"),
            (40, "moderate"),
            (64, "moderate"),
            (65, "strong"),
            (84, "strong"),
            (85, "exceptional"),
            (100, "exceptional"),
        ],
    )
    def test_boundaries_belong_to_higher_bucket(self, score, label):
        assert score_label(score) == label

    def test_clamp_rounds_half_up(self):
        assert clamp_score(39.5) == 40
        assert clamp_score(39.49) == 39
        assert clamp_score(-3) == 0
        assert clamp_score(140) == 100

    def test_percentage(self):
        assert percentage(4, 10) == 40
        assert percentage(1, 3) == 33
        assert percentage(2, 3) == 67
        assert percentage(0, 0) == 0


class TestTokens:
    def test_tech_punctuation_kept(self):
        assert content_tokens("C++, C#, Node.js and CI/CD") == ["C++", "C#", "Node.js", "CI/CD"]

    def test_stopwords_and_numbers_dropped(self):
        assert content_tokens("5+ years of experience with the Python") == ["Python"]

    def test_single_letter_languages_kept(self):
        assert content_tokens("R and C") == ["R", "C"]

    def test_inflections_share_a_stem(self):
        assert normalize_token("Managing") == normalize_token("managed")
        assert normalize_token("deployments") == normalize_token("deployment")

    def test_short_and_symbolic_tokens_not_stemmed(self):
        assert normalize_token("AWS") == "aws"
        assert normalize_token("Node.js") == "node.js"

    def test_skill_key(self):
        assert skill_key("  Machine   Learning ") == "machine learning"


class TestExtraction:
    def test_extract_keywords_first_seen_order(self):
        keywords = extract_keywords("Python and Django; python too")
        assert [k.display for k in keywords] == ["Python", "Django"]

    def test_job_skills_come_first_as_phrases(self):
        job = JobData(
            id="j",
            title="ML Engineer",
            description="Experience with machine learning and Python and SQL",
            skills=["Machine Learning", "Python"],
        )
        keywords = extract_job_keywords(job)
        assert [k.display for k in keywords] == ["Machine Learning", "Python", "SQL"]
        assert keywords[0].is_phrase

    def test_requirements_before_description(self):
        job = JobData(id="j", title="Dev", description="Kafka", requirements=["Terraform"])
        assert [k.display for k in extract_job_keywords(job)] == ["Terraform", "Kafka"]

    def test_empty_job_has_no_keywords(self):
        assert extract_job_keywords(JobData(id="j", title="Dev", description="the and of")) == []


class TestNormalizedText:
    def test_stemmed_containment(self):
        text = NormalizedText("Deployed services and managed deployments")
        assert text.contains(normalize_token("deploying"))
        assert text.contains(normalize_token("manages"))
        assert not text.contains("kafka")

    def test_phrase_must_be_contiguous(self):
        assert NormalizedText("Built machine learning models").contains(normalize_phrase("machine learning"))
        assert not NormalizedText("machine vision and learning").contains(normalize_phrase("machine learning"))

    def test_empty_key_never_matches(self):
        assert not NormalizedText("anything").contains("")


def test_resume_sections_in_document_order(sample_resume):
    sections = resume_sections(sample_resume)
    assert list(sections) == ["summary", "experience", "skills", "education", "projects"]
    assert "Kubernetes" in sections["experience"]
    assert "Teamwork" in sections["skills"]
    assert sections["projects"] == ""
