"""Uniqueness analyzer: differentiators that set a resume apart from typical candidates.

Job-independent. Every factor quotes its evidence verbatim from the resume so
later stages can check whether it is visible where recruiters look first.
"""

from __future__ import annotations

import logging
import re

from hybrid_tailor.analysis.keywords import NormalizedText, normalize_phrase
from hybrid_tailor.analysis.labels import clamp_score, score_label
from hybrid_tailor.models.analysis import Rarity, UniquenessFactor, UniquenessResult
from hybrid_tailor.models.resume import ResumeContent

logger = logging.getLogger(__name__)

RARITY_POINTS: dict[Rarity, int] = {
    "common": 8,
    "uncommon": 15,
    "rare": 25,
    "very_rare": 35,
}
_RARITY_RANK = {name: i for i, name in enumerate(RARITY_POINTS)}

DOMAIN_VOCABULARY: dict[str, list[str]] = {
    "software engineering": [
        "python", "java", "javascript", "typescript", "golang", "rust", "c++", "c#", "ruby",
        "react", "node.js", "django", "spring", "kubernetes", "docker", "aws", "gcp", "azure",
        "microservices", "backend", "frontend", "devops", "software engineering",
    ],
    "data": [
        "machine learning", "data science", "deep learning", "statistics", "pandas", "numpy",
        "tensorflow", "pytorch", "spark", "sql", "tableau", "analytics", "nlp",
        "computer vision", "data engineering",
    ],
    "design": [
        "ux", "ui", "figma", "sketch", "user research", "prototyping", "interaction design",
        "visual design", "illustrator", "photoshop", "design systems",
    ],
    "business": [
        "mba", "sales", "marketing", "finance", "accounting", "product management",
        "business development", "strategy", "seo", "operations management", "consulting",
    ],
    "healthcare": [
        "clinical", "healthcare", "medical", "nursing", "patient care", "hipaa", "pharmaceutical",
        "epidemiology", "public health",
    ],
    "law and policy": [
        "law", "legal", "policy", "compliance", "regulatory", "contracts", "gdpr",
    ],
    "science": [
        "biology", "chemistry", "physics", "genomics", "neuroscience", "bioinformatics",
        "laboratory", "materials science",
    ],
    "education": [
        "teaching", "curriculum", "instructional design", "tutoring", "pedagogy",
    ],
}

# Domain pairs that rarely appear on the same resume.
RARE_PAIRS = frozenset(
    frozenset(pair)
    for pair in [
        ("data", "design"),
        ("software engineering", "design"),
        ("data", "healthcare"),
        ("software engineering", "healthcare"),
        ("software engineering", "law and policy"),
        ("data", "law and policy"),
        ("design", "healthcare"),
        ("business", "science"),
        ("software engineering", "education"),
    ]
)

# Title words that place a role in a domain when no vocabulary term does.
TITLE_DOMAINS: dict[str, list[str]] = {
    "software engineering": ["engineer", "developer", "programmer", "architect", "sre"],
    "data": ["analyst", "scientist", "data"],
    "design": ["designer", "ux", "ui"],
    "business": ["sales", "marketing", "account", "consultant", "product", "finance", "accountant"],
    "healthcare": ["nurse", "physician", "clinician", "therapist", "pharmacist"],
    "law and policy": ["attorney", "lawyer", "paralegal", "counsel", "policy"],
    "science": ["researcher", "chemist", "biologist", "physicist"],
    "education": ["teacher", "instructor", "professor", "tutor", "lecturer"],
}

_TITLE_NOISE = frozenset(
    normalize_phrase(w) or w
    for w in "senior junior lead principal staff associate assistant intern head chief sr jr ii iii iv".split()
)

_ACHIEVEMENT_RE = re.compile(
    r"\b(awards?|awarded|winner|won|patents?|patented|published|publications?|keynote|"
    r"ranked|hackathon|recogni[sz]ed|fellowship|scholarship|top \d+%?)\b",
    re.IGNORECASE,
)
_SCHOLARLY_RE = re.compile(r"\b(patents?|patented|published|publications?)\b", re.IGNORECASE)
_DOCTORATE_RE = re.compile(r"\b(ph\.?\s?d|doctorate|doctor of|d\.?phil|m\.?d\.?|j\.?d\.?)\b", re.IGNORECASE)

_EXPERIENCE_SIGNALS: list[tuple[str, Rarity, re.Pattern[str]]] = [
    ("Founded or co-founded a venture", "rare",
     re.compile(r"\b(co-?founded|founded|founder|started (?:my|a|an) own)\b", re.IGNORECASE)),
    ("Open-source contribution", "uncommon",
     re.compile(r"\b(open[- ]source|maintainer|contributor to)\b", re.IGNORECASE)),
    ("International or cross-cultural work", "uncommon",
     re.compile(r"\b(international|abroad|overseas|cross-cultural|multinational|global teams?)\b", re.IGNORECASE)),
]

_DOMAIN_KEYS: dict[str, list[str]] = {
    domain: [normalize_phrase(term) for term in terms] for domain, terms in DOMAIN_VOCABULARY.items()
}


def _domains_of(text: str) -> list[str]:
    norm = NormalizedText(text)
    return [domain for domain, keys in _DOMAIN_KEYS.items() if any(norm.contains(k) for k in keys)]


def _title_domain(title: str) -> str | None:
    domains = _domains_of(title)
    if domains:
        return domains[0]
    words = NormalizedText(title)
    for domain, hints in TITLE_DOMAINS.items():
        if any(words.contains(normalize_phrase(h) or h) for h in hints):
            return domain
    return None


def _skill_combination(resume: ResumeContent) -> UniquenessFactor | None:
    evidence: dict[str, str] = {}
    for skill in [*resume.skills.technical, *resume.skills.certifications]:
        for domain in _domains_of(skill):
            evidence.setdefault(domain, skill)
    domains = [d for d in DOMAIN_VOCABULARY if d in evidence]
    if len(domains) < 2:
        return None

    if len(domains) >= 3:
        rarity: Rarity = "very_rare"
    elif frozenset(domains) in RARE_PAIRS:
        rarity = "rare"
    else:
        rarity = "uncommon"
    return UniquenessFactor(
        type="skill_combination",
        description=f"Combines {', '.join(domains[:-1])} and {domains[-1]} skills",
        rarity=rarity,
        evidence=[evidence[d] for d in domains],
        suggestion="Name this combination in your summary; few candidates bring it.",
    )


def _career_transitions(resume: ResumeContent) -> list[UniquenessFactor]:
    factors: list[UniquenessFactor] = []
    exps = resume.experiences
    for newer, older in zip(exps, exps[1:]):
        newer_words = set(NormalizedText(newer.title).tokens) - _TITLE_NOISE
        older_words = set(NormalizedText(older.title).tokens) - _TITLE_NOISE
        if not newer_words or not older_words or newer_words & older_words:
            continue
        from_domain, to_domain = _title_domain(older.title), _title_domain(newer.title)
        domain_change = from_domain is not None and to_domain is not None and from_domain != to_domain
        factors.append(
            UniquenessFactor(
                type="career_transition",
                description=f"Moved from {older.title} to {newer.title}",
                rarity="rare" if domain_change else "uncommon",
                evidence=[older.title, newer.title],
                suggestion="Frame the move as the source of a perspective other candidates lack.",
            )
        )
    return factors


def _achievements(resume: ResumeContent) -> UniquenessFactor | None:
    texts = [b.text for _, b in resume.iter_bullets()]
    texts += [h for e in resume.education for h in e.honors]
    texts += resume.skills.certifications
    hits = [t for t in texts if _ACHIEVEMENT_RE.search(t)]
    if not hits:
        return None
    scholarly = any(_SCHOLARLY_RE.search(t) for t in hits)
    return UniquenessFactor(
        type="achievement",
        description="Recognized achievements such as awards, patents or publications",
        rarity="rare" if scholarly or len(hits) >= 3 else "uncommon",
        evidence=hits[:3],
        suggestion="Lead with the most recognizable achievement.",
    )


def _domain_expertise(resume: ResumeContent) -> UniquenessFactor | None:
    texts = [*resume.skills.technical, *resume.skills.certifications, *(b.text for _, b in resume.iter_bullets())]
    normalized = [(t, NormalizedText(t)) for t in texts]
    best: tuple[str, list[str], list[str]] | None = None
    for domain, keys in _DOMAIN_KEYS.items():
        signals = [k for k in keys if any(n.contains(k) for _, n in normalized)]
        if len(signals) < 4:
            continue
        if best is None or len(signals) > len(best[1]):
            evidence = [t for t, n in normalized if any(n.contains(k) for k in signals)]
            best = (domain, signals, evidence)
    if best is None:
        return None
    domain, signals, evidence = best
    return UniquenessFactor(
        type="domain_expertise",
        description=f"Deep {domain} expertise",
        rarity="rare" if len(signals) >= 6 else "uncommon",
        evidence=evidence[:3],
    )


def _education(resume: ResumeContent) -> list[UniquenessFactor]:
    factors: list[UniquenessFactor] = []
    doctorates = [e.degree for e in resume.education if _DOCTORATE_RE.search(e.degree)]
    if doctorates:
        factors.append(
            UniquenessFactor(
                type="education",
                description="Doctoral-level education",
                rarity="rare",
                evidence=doctorates[:2],
            )
        )
    honors = [h for e in resume.education for h in e.honors]
    if honors:
        factors.append(
            UniquenessFactor(
                type="education",
                description="Academic honors",
                rarity="uncommon",
                evidence=honors[:3],
            )
        )
    fields: dict[str, str] = {}
    for e in resume.education:
        if e.field:
            fields.setdefault(normalize_phrase(e.field), e.field)
    if len(fields) >= 2:
        factors.append(
            UniquenessFactor(
                type="education",
                description=f"Studied across fields: {', '.join(fields.values())}",
                rarity="uncommon",
                evidence=list(fields.values()),
                suggestion="Connect the fields to the role's problem space.",
            )
        )
    return factors


def _unique_experience(resume: ResumeContent) -> list[UniquenessFactor]:
    texts = [b.text for _, b in resume.iter_bullets()]
    texts += [p.description for p in resume.projects if p.description]
    if resume.summary:
        texts.append(resume.summary)
    factors: list[UniquenessFactor] = []
    for description, rarity, pattern in _EXPERIENCE_SIGNALS:
        hits = [t for t in texts if pattern.search(t)]
        if hits:
            factors.append(
                UniquenessFactor(type="unique_experience", description=description, rarity=rarity, evidence=hits[:3])
            )
    if len(resume.skills.languages) >= 2 and not any(f.description.startswith("International") for f in factors):
        factors.append(
            UniquenessFactor(
                type="unique_experience",
                description="Works in multiple languages",
                rarity="uncommon",
                evidence=list(resume.skills.languages),
            )
        )
    return factors


def analyze_uniqueness(resume: ResumeContent) -> UniquenessResult:
    factors: list[UniquenessFactor] = []
    combination = _skill_combination(resume)
    if combination:
        factors.append(combination)
    factors.extend(_career_transitions(resume))
    for factor in (_achievements(resume), _domain_expertise(resume)):
        if factor:
            factors.append(factor)
    factors.extend(_education(resume))
    factors.extend(_unique_experience(resume))

    score = clamp_score(min(100, sum(RARITY_POINTS[f.rarity] for f in factors)))
    ranked = sorted(factors, key=lambda f: _RARITY_RANK[f.rarity], reverse=True)
    differentiators = [f.description for f in ranked[:3]]
    logger.debug("Uniqueness: %d factors, score %d", len(factors), score)

    if factors:
        summary = f"Found {len(factors)} differentiators; strongest: {differentiators[0]}."
    else:
        summary = "No distinctive factors found beyond a typical profile."
    suggestions = [f.suggestion for f in ranked if f.suggestion][:3]
    if not factors:
        suggestions.append("Highlight awards, cross-domain skills or unusual projects if you have them.")

    return UniquenessResult(
        score=score,
        score_label=score_label(score),
        factors=factors,
        differentiators=differentiators,
        summary=summary,
        suggestions=suggestions,
    )
