"""Context aligner: how much of the job's vocabulary the resume already speaks."""

from __future__ import annotations

import logging

from hybrid_tailor.analysis.keywords import (
    Keyword,
    NormalizedText,
    extract_job_keywords,
    extract_keywords,
    resume_sections,
)
from hybrid_tailor.analysis.labels import percentage, score_label
from hybrid_tailor.models.analysis import (
    ContextResult,
    ExperienceAlignment,
    KeywordCoverage,
    KeywordMatch,
    MatchedSkill,
)
from hybrid_tailor.models.job import JobData
from hybrid_tailor.models.resume import ResumeContent

logger = logging.getLogger(__name__)

# A requirement counts as covered once this share of its keywords appears.
REQUIREMENT_COVERAGE = 0.5


def locate_keywords(resume: ResumeContent, keywords: list[Keyword]) -> list[KeywordMatch]:
    """For each keyword, the first resume section (document order) containing it."""
    sections = [(name, NormalizedText(text)) for name, text in resume_sections(resume).items()]
    matches: list[KeywordMatch] = []
    for kw in keywords:
        location = next((name for name, norm in sections if norm.contains(kw.key)), None)
        matches.append(KeywordMatch(keyword=kw.display, found=location is not None, location=location))
    return matches


def _coverage(resume: ResumeContent, keywords: list[Keyword]) -> KeywordCoverage:
    matches = locate_keywords(resume, keywords)
    matched = sum(1 for m in matches if m.found)
    return KeywordCoverage(
        matched=matched,
        total=len(matches),
        percentage=percentage(matched, len(matches)),
        keywords=matches,
    )


def keyword_coverage(resume: ResumeContent, job: JobData) -> KeywordCoverage:
    """Coverage of the job keywords in any resume content, original or tailored."""
    return _coverage(resume, extract_job_keywords(job))


def _missing_requirements(resume_norm: NormalizedText, requirements: list[str]) -> list[str]:
    missing: list[str] = []
    for requirement in requirements:
        keys = [kw.key for kw in extract_keywords(requirement)]
        if not keys:
            continue
        found = sum(1 for k in keys if resume_norm.contains(k))
        if found / len(keys) < REQUIREMENT_COVERAGE:
            missing.append(requirement)
    return missing


def _relevance(count: int) -> str:
    if count >= 3:
        return "high"
    if count >= 1:
        return "medium"
    return "low"


def analyze_context(resume: ResumeContent, job: JobData) -> ContextResult:
    """Match job keywords against the resume with stemmed, case-insensitive containment."""
    keywords = extract_job_keywords(job)
    coverage = _coverage(resume, keywords)
    matches = coverage.keywords
    matched = coverage.matched

    skills_norm = NormalizedText(resume_sections(resume)["skills"])
    matched_skills = [
        MatchedSkill(skill=kw.display, strength="exact" if skills_norm.contains(kw.key) else "related")
        for kw, m in zip(keywords, matches)
        if m.found
    ]
    missing_keywords = [m.keyword for m in matches if not m.found]

    alignments: list[ExperienceAlignment] = []
    for exp in resume.experiences:
        norm = NormalizedText("\n".join([exp.title, *(b.text for b in exp.bullets)]))
        hits = [kw.display for kw in keywords if norm.contains(kw.key)]
        alignments.append(
            ExperienceAlignment(
                experience_id=exp.id,
                experience_title=exp.title,
                relevance=_relevance(len(hits)),
                matched_keywords=hits,
            )
        )

    resume_norm = NormalizedText("\n".join(resume_sections(resume).values()))
    missing_requirements = _missing_requirements(resume_norm, job.requirements or [])

    score = coverage.percentage
    logger.debug("Context: %d/%d job keywords matched", matched, len(matches))
    if not keywords:
        summary = "The job posting yielded no keywords to match."
    else:
        summary = f"Resume covers {matched} of {len(keywords)} job keywords ({score}%)."

    return ContextResult(
        score=score,
        score_label=score_label(score),
        summary=summary,
        keyword_coverage=coverage,
        matched_skills=matched_skills,
        missing_keywords=missing_keywords,
        missing_requirements=missing_requirements,
        experience_alignments=alignments,
    )
