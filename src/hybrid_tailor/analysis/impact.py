"""Impact analyzer: how well each experience bullet is quantified."""

from __future__ import annotations

import logging
import re
from collections import Counter

from hybrid_tailor.analysis.keywords import normalize_token
from hybrid_tailor.analysis.labels import percentage, score_label
from hybrid_tailor.models.analysis import (
    ImpactBullet,
    ImpactResult,
    ImprovementLevel,
    MetricCategories,
    MetricCategory,
)
from hybrid_tailor.models.resume import ResumeContent

logger = logging.getLogger(__name__)

_SCALE_NOUNS = (
    "users|customers|clients|people|employees|engineers|developers|members|students|"
    "patients|requests|transactions|orders|records|servers|services|applications|apps|"
    "teams|countries|markets|stores|sites|locations|projects|products|reports|"
    "stakeholders|accounts|downloads|visitors|queries|events|tickets|partners|vendors|"
    "repositories|microservices|pipelines|hires|deployments|releases|features|deals|"
    "leads|papers|articles|courses|campaigns|incidents|dashboards|models"
)

# A bare number only counts after a word that frames it as an amount. Version
# numbers ("Python 3", "Windows 10") are not metrics.
_QUANTITY_WORDS = r"by|over|under|nearly|approximately|about|more than|fewer than|less than|up to|top"

# Checked in this order; a bullet's category is the first that matches.
METRIC_PATTERNS: list[tuple[MetricCategory, re.Pattern[str]]] = [
    ("percentage", re.compile(r"\d+(?:\.\d+)?\s?%|\b\d+(?:\.\d+)?\s?(?:percent|pct)\b", re.IGNORECASE)),
    (
        "monetary",
        re.compile(
            r"[$€£¥]\s?\d[\d,.]*(?:\s?(?:k|m|mm|b|bn|million|billion|thousand)\b)?"
            r"|\b\d[\d,.]*\s?(?:usd|eur|gbp|dollars|euros)\b",
            re.IGNORECASE,
        ),
    ),
    (
        "time",
        re.compile(
            r"\b\d+(?:\.\d+)?\s?(?:ms|milliseconds?|seconds?|secs?|minutes?|mins?|hours?|hrs?|"
            r"days?|weeks?|months?|quarters?|years?)\b",
            re.IGNORECASE,
        ),
    ),
    (
        "scale",
        re.compile(
            rf"\b\d[\d,.]*\s?[kmb]?\+?\s(?:[a-z][a-z-]*\s){{0,2}}(?:{_SCALE_NOUNS})\b"
            r"|\b\d+(?:\.\d+)?\s?[kmb]\+?(?=\s|$|[,.;])"
            r"|\bteam of \d+\b",
            re.IGNORECASE,
        ),
    ),
    (
        "other",
        re.compile(
            rf"\b\d+(?:\.\d+)?x\b|#\d+\b|\b(?:{_QUANTITY_WORDS})\s(?!(?:19|20)\d{{2}}\b)\d+(?:\.\d+)?\b",
            re.IGNORECASE,
        ),
    ),
]

ACTION_VERBS = frozenset("""
accelerated achieved analyzed architected authored automated built coached
co-founded collaborated conducted consolidated coordinated created cut defined
delivered deployed designed developed directed drove enabled engineered
established executed expanded facilitated founded generated grew headed
implemented improved increased initiated integrated introduced launched led
maintained managed mentored migrated modernized negotiated optimized organized
oversaw owned partnered pioneered presented published redesigned reduced
refactored researched resolved saved scaled secured shipped spearheaded
streamlined supervised tested trained transformed won wrote
""".split())

_VERB_STEMS = frozenset(normalize_token(v) for v in ACTION_VERBS)

# Words hinting at which kind of figure a bullet could carry, checked in order.
_METRIC_HINTS: list[tuple[MetricCategory, frozenset[str]]] = [
    ("monetary", frozenset("saved revenue budget cost costs sales funding profit spend pricing negotiated".split())),
    ("time", frozenset("accelerated faster automated streamlined shortened latency turnaround deadline deadlines".split())),
    ("percentage", frozenset("improved increased reduced decreased boosted raised grew lowered optimized enhanced".split())),
    ("scale", frozenset("led managed mentored served scaled supported trained onboarded hired users customers team".split())),
]

_WORD_RE = re.compile(r"[A-Za-z][A-Za-z'\-]*")


def find_metrics(text: str) -> tuple[list[str], MetricCategory | None]:
    """Return every figure in ``text`` and the category of the first pattern that matched."""
    found: list[str] = []
    category: MetricCategory | None = None
    for name, pattern in METRIC_PATTERNS:
        for match in pattern.finditer(text):
            value = match.group(0).strip()
            if any(value in f for f in found):
                continue
            found.append(value)
            if category is None:
                category = name
    return found, category


def _words(text: str) -> list[str]:
    return [w.lower() for w in _WORD_RE.findall(text)]


def opening_pattern(text: str) -> str:
    """The lowercased first two words, used to spot repetitive bullets."""
    return " ".join(_words(text)[:2])


def starts_with_action_verb(text: str) -> bool:
    words = _words(text)
    if not words:
        return False
    return words[0] in ACTION_VERBS or normalize_token(words[0]) in _VERB_STEMS


def classify_bullet(text: str, repeated_openings: set[str] | frozenset[str] = frozenset()) -> ImprovementLevel:
    """Improvement level of one bullet.

    ``repeated_openings`` holds the opening patterns shared by several
    unquantified bullets of the same resume.
    """
    metrics, _ = find_metrics(text)
    if metrics:
        return "none"
    if opening_pattern(text) in repeated_openings:
        return "transformed"
    if starts_with_action_verb(text) and len(_words(text)) >= 3:
        return "minor"
    return "major"


def repeated_openings(texts: list[str]) -> frozenset[str]:
    """Opening patterns shared by two or more unquantified bullets."""
    counts = Counter(
        opening_pattern(t) for t in texts if not find_metrics(t)[0] and len(_words(t)) >= 2
    )
    return frozenset(pattern for pattern, n in counts.items() if n >= 2)


def suggest_metric(text: str) -> MetricCategory:
    words = set(_words(text))
    for category, hints in _METRIC_HINTS:
        if words & hints:
            return category
    return "other"


def analyze_impact(resume: ResumeContent) -> ImpactResult:
    """Classify every experience bullet and score the share already quantified."""
    pairs = list(resume.iter_bullets())
    repeated = repeated_openings([b.text for _, b in pairs])
    tally = Counter()
    bullets: list[ImpactBullet] = []

    for exp, bullet in pairs:
        metrics, category = find_metrics(bullet.text)
        level = classify_bullet(bullet.text, repeated)
        if category:
            tally[category] += 1
        bullets.append(
            ImpactBullet(
                bullet_id=bullet.id,
                experience_id=exp.id,
                experience_title=exp.title,
                company_name=exp.company,
                original=bullet.text,
                improvement=level,
                metrics=metrics,
                metric_category=category,
                suggested_metric=None if level == "none" else suggest_metric(bullet.text),
            )
        )

    total = len(bullets)
    quantified = sum(1 for b in bullets if b.improvement == "none")
    score = percentage(quantified, total)
    improved = total - quantified
    logger.debug("Impact: %d/%d bullets quantified", quantified, total)

    if total == 0:
        summary = "No experience bullets to analyze."
    else:
        summary = f"{quantified} of {total} bullets carry a concrete figure; {improved} could show more impact."

    suggestions: list[str] = []
    levels = Counter(b.improvement for b in bullets)
    if levels["major"]:
        suggestions.append(f"Rewrite {levels['major']} duty-style bullets around an action and its result.")
    if levels["minor"]:
        suggestions.append(f"Add a figure to {levels['minor']} bullets that already lead with an action verb.")
    if levels["transformed"]:
        suggestions.append(f"Vary the opening of {levels['transformed']} bullets that start the same way.")

    return ImpactResult(
        score=score,
        score_label=score_label(score),
        summary=summary,
        total_bullets=total,
        bullets_improved=improved,
        bullets=bullets,
        metric_categories=MetricCategories(**tally),
        suggestions=suggestions,
    )
