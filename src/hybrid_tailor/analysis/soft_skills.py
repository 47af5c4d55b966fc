"""Soft-skill detector: which claimed soft skills the bullets actually demonstrate."""

from __future__ import annotations

import logging
import re

from hybrid_tailor.models.analysis import SoftSkillClaim, SoftSkillEvidence, SoftSkillReport
from hybrid_tailor.models.resume import ResumeContent

logger = logging.getLogger(__name__)

# Bullet phrasing that demonstrates a skill. At most one match per group per bullet.
SOFT_SKILL_PATTERNS: dict[str, list[re.Pattern[str]]] = {
    "leadership": [
        re.compile(r"\b(led|leading|lead|managed|mentored|coached|directed|headed|oversaw)\b", re.IGNORECASE),
        re.compile(r"\b(team of|cross-functional|coordinated|facilitated)\b", re.IGNORECASE),
    ],
    "communication": [
        re.compile(r"\b(presented|communicated|collaborated|partnered|liaised|reported)\b", re.IGNORECASE),
        re.compile(r"\b(stakeholders?|executives?|client-facing|articulated|conveyed)\b", re.IGNORECASE),
    ],
    "problem solving": [
        re.compile(r"\b(solved|resolved|troubleshot|debugged|diagnosed|identified|analyzed)\b", re.IGNORECASE),
        re.compile(r"\b(optimized|improved|enhanced|streamlined|automated)\b", re.IGNORECASE),
    ],
    "adaptability": [
        re.compile(r"\b(adapted|pivoted|learned|transitioned|transformed|migrated)\b", re.IGNORECASE),
        re.compile(r"\b(agile|flexible|cross-trained|multi-disciplinary)\b", re.IGNORECASE),
    ],
    "collaboration": [
        re.compile(r"\b(collaborated|partnered|worked with|teamed|joined forces)\b", re.IGNORECASE),
        re.compile(r"\b(cross-team|interdepartmental|cross-functional)\b", re.IGNORECASE),
    ],
    "initiative": [
        re.compile(r"\b(initiated|launched|pioneered|spearheaded|proposed|introduced)\b", re.IGNORECASE),
        re.compile(r"\b(drove|championed|advocated|established)\b", re.IGNORECASE),
    ],
}

# Ways a resume names a soft skill outright.
SOFT_SKILL_ALIASES: dict[str, list[str]] = {
    "leadership": ["leadership", "team leadership", "people management", "team lead"],
    "communication": ["communication", "communicator", "public speaking", "presentation skills"],
    "problem solving": ["problem solving", "problem-solving", "problem solver", "critical thinking", "analytical"],
    "adaptability": ["adaptability", "adaptable", "flexibility", "fast learner", "quick learner"],
    "collaboration": ["collaboration", "collaborative", "teamwork", "team player"],
    "initiative": ["initiative", "self-starter", "self starter", "proactive", "self-motivated"],
}

_ALIAS_PATTERNS: dict[str, re.Pattern[str]] = {
    skill: re.compile(r"\b(" + "|".join(re.escape(a) for a in sorted(aliases, key=len, reverse=True)) + r")\b", re.IGNORECASE)
    for skill, aliases in SOFT_SKILL_ALIASES.items()
}

_STRENGTH_ORDER = {"strong": 0, "moderate": 1, "weak": 2}


def canonical_soft_skill(text: str) -> str | None:
    """Map a claimed soft skill ("Team player") onto its canonical name."""
    for skill, pattern in _ALIAS_PATTERNS.items():
        if pattern.search(text):
            return skill
    return None


def extract_evidence(resume: ResumeContent) -> list[SoftSkillEvidence]:
    """Soft skills the experience bullets demonstrate, strongest first."""
    found: dict[str, tuple[list[str], list[str]]] = {}
    for _, bullet in resume.iter_bullets():
        for skill, patterns in SOFT_SKILL_PATTERNS.items():
            for pattern in patterns:
                match = pattern.search(bullet.text)
                if not match:
                    continue
                evidence, bullet_ids = found.setdefault(skill, ([], []))
                if match.group(0) not in evidence:
                    evidence.append(match.group(0))
                if bullet.id not in bullet_ids:
                    bullet_ids.append(bullet.id)
                break

    results = []
    for skill, (evidence, bullet_ids) in found.items():
        if len(evidence) >= 4:
            strength = "strong"
        elif len(evidence) >= 2:
            strength = "moderate"
        else:
            strength = "weak"
        results.append(SoftSkillEvidence(skill=skill, evidence=evidence, bullet_ids=bullet_ids, strength=strength))
    return sorted(results, key=lambda e: _STRENGTH_ORDER[e.strength])


def find_claims(resume: ResumeContent) -> list[tuple[str, str, str]]:
    """Every soft skill the resume names: (canonical skill, source, claimed text)."""
    claims: list[tuple[str, str, str]] = []
    seen: set[str] = set()
    for entry in resume.skills.soft:
        skill = canonical_soft_skill(entry)
        if skill and skill not in seen:
            seen.add(skill)
            claims.append((skill, "skills", entry))
    if resume.summary:
        for skill, pattern in _ALIAS_PATTERNS.items():
            match = pattern.search(resume.summary)
            if match and skill not in seen:
                seen.add(skill)
                claims.append((skill, "summary", match.group(0)))
    return claims


def detect_soft_skills(resume: ResumeContent) -> SoftSkillReport:
    """Split claimed soft skills into evidenced and unevidenced ones."""
    evidence = extract_evidence(resume)
    evidenced = {e.skill for e in evidence}
    unevidenced = [
        SoftSkillClaim(
            skill=skill,
            source=source,
            claimed_text=text,
            suggestion=f"Show {skill} through a bullet describing what you did instead of listing it.",
        )
        for skill, source, text in find_claims(resume)
        if skill not in evidenced
    ]
    logger.debug("Soft skills: %d evidenced, %d claimed without evidence", len(evidence), len(unevidenced))
    return SoftSkillReport(unevidenced=unevidenced, evidenced=evidence)
