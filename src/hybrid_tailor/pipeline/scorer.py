"""Quality scorer: recruiter readiness of the final content, over five fixed criteria."""

from __future__ import annotations

import logging

from hybrid_tailor.analysis.context import keyword_coverage
from hybrid_tailor.analysis.impact import analyze_impact
from hybrid_tailor.analysis.keywords import NormalizedText, normalize_phrase, skill_key
from hybrid_tailor.analysis.labels import SCORE_THRESHOLDS, clamp_score, score_label
from hybrid_tailor.analysis.soft_skills import extract_evidence, find_claims
from hybrid_tailor.models.analysis import PreAnalysisResult
from hybrid_tailor.models.job import JobData
from hybrid_tailor.models.result import CriterionScore, RecruiterReadinessScore
from hybrid_tailor.models.resume import ResumeContent

logger = logging.getLogger(__name__)

# (key, display name, weight); weights sum to 100
CRITERIA: list[tuple[str, str, int]] = [
    ("quantified_impact", "Quantified impact", 30),
    ("keyword_alignment", "Keyword alignment", 25),
    ("differentiator_visibility", "Differentiator visibility", 20),
    ("soft_skill_evidence", "Soft-skill evidence", 10),
    ("structural_scanability", "Structural scanability", 15),
]

NO_FACTORS_SCORE = 40
NO_CLAIMS_SCORE = 70
MIN_BULLET_WORDS = 5
MAX_BULLET_WORDS = 35
MAX_BULLETS_PER_EXPERIENCE = 8
BULLET_LENGTH_PENALTY_CAP = 40

SUGGESTIONS = {
    "quantified_impact": "Add concrete figures (percentages, money, time, scale) to more bullets.",
    "keyword_alignment": "Use more of the job posting's own terms where they truthfully apply.",
    "differentiator_visibility": "Mention what sets you apart in the summary, the why-fit section or your most recent role.",
    "soft_skill_evidence": "Back each soft skill you claim with a bullet that shows it.",
    "structural_scanability": "Lead with a summary, keep bullets between 5 and 35 words and experience before education.",
}

_STRONG = dict(SCORE_THRESHOLDS)["strong"]


def _impact(content: ResumeContent) -> tuple[int, str]:
    impact = analyze_impact(content)
    quantified = impact.total_bullets - impact.bullets_improved
    return impact.score, f"{quantified}/{impact.total_bullets} bullets quantified"


def _keywords(content: ResumeContent, job: JobData) -> tuple[int, str]:
    coverage = keyword_coverage(content, job)
    return coverage.percentage, f"{coverage.matched}/{coverage.total} job keywords present"


def _differentiators(content: ResumeContent, pre_analysis: PreAnalysisResult) -> tuple[int, str]:
    factors = pre_analysis.uniqueness.factors
    if not factors:
        return NO_FACTORS_SCORE, "No differentiators found"
    prominent = [content.summary or "", *(f"{w.label} {w.text}" for w in content.why_fit)]
    if content.experiences:
        first = content.experiences[0]
        prominent += [first.title, *(b.text for b in first.bullets)]
    visible_text = NormalizedText("\n".join(prominent))
    visible = sum(
        1 for f in factors if any(visible_text.contains(normalize_phrase(e)) for e in f.evidence)
    )
    visible_pct = 100 * visible / len(factors)
    return (
        clamp_score((pre_analysis.uniqueness.score + visible_pct) / 2),
        f"{visible}/{len(factors)} differentiators visible up front",
    )


def _soft_skills(content: ResumeContent) -> tuple[int, str]:
    claims = find_claims(content)
    if not claims:
        return NO_CLAIMS_SCORE, "No soft skills claimed"
    evidenced = {e.skill for e in extract_evidence(content)}
    backed = sum(1 for skill, _, _ in claims if skill in evidenced)
    return clamp_score(100 * backed / len(claims)), f"{backed}/{len(claims)} claimed soft skills backed by bullets"


def _scanability(content: ResumeContent) -> tuple[int, str]:
    deductions: list[tuple[int, str]] = []
    order = content.section_order
    if not (content.summary and content.summary.strip()) or not order or order[0] != "summary":
        deductions.append((20, "summary missing or not first"))
    if content.experiences and "education" in order and "experience" in order:
        if order.index("education") < order.index("experience"):
            deductions.append((15, "education before experience"))

    bad_length = sum(
        1 for _, b in content.iter_bullets() if not MIN_BULLET_WORDS <= len(b.text.split()) <= MAX_BULLET_WORDS
    )
    if bad_length:
        deductions.append((min(BULLET_LENGTH_PENALTY_CAP, 5 * bad_length), f"{bad_length} bullets outside 5-35 words"))
    for exp in content.experiences:
        if not exp.bullets or len(exp.bullets) > MAX_BULLETS_PER_EXPERIENCE:
            deductions.append((10, f"{exp.title} has {len(exp.bullets)} bullets"))

    s = content.skills
    for values in (s.technical, s.soft, s.languages, s.certifications):
        keys = [skill_key(v) for v in values]
        if len(keys) != len(set(keys)):
            deductions.append((10, "duplicate skills"))
            break

    score = clamp_score(100 - sum(points for points, _ in deductions))
    detail = "; ".join(reason for _, reason in deductions) or "No structural issues"
    return score, detail


def score_resume(content: ResumeContent, job: JobData, pre_analysis: PreAnalysisResult) -> RecruiterReadinessScore:
    """Pure: the same content, job and pre-analysis always produce the same score."""
    raw = {
        "quantified_impact": _impact(content),
        "keyword_alignment": _keywords(content, job),
        "differentiator_visibility": _differentiators(content, pre_analysis),
        "soft_skill_evidence": _soft_skills(content),
        "structural_scanability": _scanability(content),
    }
    criteria = []
    for key, name, weight in CRITERIA:
        score, detail = raw[key]
        criteria.append(
            CriterionScore(
                key=key,
                name=name,
                weight=weight,
                score=score,
                weighted=round(score * weight / 100, 2),
                label=score_label(score),
                detail=detail,
            )
        )
    overall = clamp_score(sum(c.score * c.weight for c in criteria) / 100)
    weakest = sorted((c for c in criteria if c.score < _STRONG), key=lambda c: c.score)[:3]
    logger.debug("Quality score %d: %s", overall, {c.key: c.score for c in criteria})
    return RecruiterReadinessScore(
        overall=overall,
        label=score_label(overall),
        criteria=criteria,
        top_suggestions=[SUGGESTIONS[c.key] for c in weakest],
    )
