"""Rule engine: deterministic edits a recruiter would ask for, applied before any rewriting.

Each rule kind is bound to exactly one (precondition, apply) pair. Rules run
in priority order against a shared draft, so later rules see earlier edits.
Anything that needs new wording is not written here; it is added to the
rewrite plan with instructions for the rewriter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from hybrid_tailor.analysis.keywords import (
    Keyword,
    NormalizedText,
    extract_job_keywords,
    normalize_phrase,
    skill_key,
)
from hybrid_tailor.analysis.labels import SCORE_THRESHOLDS
from hybrid_tailor.config import PipelineConfig
from hybrid_tailor.errors import RuleEngineError
from hybrid_tailor.models.analysis import PreAnalysisResult
from hybrid_tailor.models.job import JobData
from hybrid_tailor.models.resume import Experience, ResumeContent, WhyFitBullet
from hybrid_tailor.models.rules import (
    SUMMARY_ID,
    RewriteItem,
    RewritePlan,
    RuleEvaluationResult,
    StrategicTone,
)

logger = logging.getLogger(__name__)

STRONG_SCORE = dict(SCORE_THRESHOLDS)["strong"]


class RuleKind(str, Enum):
    DEDUPE_SKILLS = "dedupe-skills"
    PROMOTE_MATCHED_SKILLS = "promote-matched-skills"
    SUMMARY_FIRST = "summary-first"
    ORDER_SECTIONS = "order-sections"
    DROP_DUPLICATE_BULLETS = "drop-duplicate-bullets"
    FLAG_UNQUANTIFIED_BULLETS = "flag-unquantified-bullets"
    FLAG_REPETITIVE_BULLETS = "flag-repetitive-bullets"
    FLAG_LONG_BULLETS = "flag-long-bullets"
    INJECT_MISSING_KEYWORDS = "inject-missing-keywords"
    ADD_COMPANY_CONTEXT = "add-company-context"
    DEMOTE_UNEVIDENCED_SOFT_SKILLS = "demote-unevidenced-soft-skills"
    SURFACE_DIFFERENTIATORS = "surface-differentiators"
    ADD_WHY_FIT_SECTION = "add-why-fit-section"


@dataclass(frozen=True)
class Rule:
    kind: RuleKind
    name: str
    recruiter_issue: str
    priority: int

    @property
    def id(self) -> str:
        return self.kind.value


DEFAULT_RULES: tuple[Rule, ...] = (
    Rule(RuleKind.DEDUPE_SKILLS, "Deduplicate skills",
         "Repeated skills look padded and waste scan time.", 10),
    Rule(RuleKind.PROMOTE_MATCHED_SKILLS, "Lead with matching skills",
         "Recruiters read the first few skills; the ones this job asks for should be there.", 20),
    Rule(RuleKind.SUMMARY_FIRST, "Summary first",
         "Without a summary up top the recruiter has to infer what you are applying as.", 30),
    Rule(RuleKind.ORDER_SECTIONS, "Recruiter scan order",
         "Experience is read first; education ahead of it buries the evidence.", 40),
    Rule(RuleKind.DROP_DUPLICATE_BULLETS, "Remove duplicate bullets",
         "Empty or repeated bullets read as careless.", 50),
    Rule(RuleKind.FLAG_UNQUANTIFIED_BULLETS, "Quantify impact",
         "Bullets without a result give the recruiter nothing to compare.", 60),
    Rule(RuleKind.FLAG_REPETITIVE_BULLETS, "Vary bullet structure",
         "Bullets that open the same way blur together.", 70),
    Rule(RuleKind.FLAG_LONG_BULLETS, "Tighten long bullets",
         "Long bullets are skipped during a six-second scan.", 80),
    Rule(RuleKind.INJECT_MISSING_KEYWORDS, "Cover missing keywords",
         "Screeners search for the posting's own words.", 90),
    Rule(RuleKind.ADD_COMPANY_CONTEXT, "Explain the target company",
         "A recruiter outside the company's niche may not know it; say why it matters.", 100),
    Rule(RuleKind.DEMOTE_UNEVIDENCED_SOFT_SKILLS, "Show, don't claim, soft skills",
         "Soft skills listed without evidence are discounted.", 110),
    Rule(RuleKind.SURFACE_DIFFERENTIATORS, "Surface differentiators",
         "What makes you rare should be visible in the summary, not buried.", 120),
    Rule(RuleKind.ADD_WHY_FIT_SECTION, "Why I'm the right fit",
         "Recruiters want the case for the candidate in one glance, not pieced together from the page.", 130),
)


@dataclass
class RuleContext:
    pre_analysis: PreAnalysisResult
    job: JobData
    draft: ResumeContent
    plan: RewritePlan
    config: PipelineConfig = field(default_factory=PipelineConfig)
    job_keywords: list[Keyword] = field(default_factory=list)


@dataclass
class RuleOutcome:
    draft: ResumeContent
    applied: list[RuleEvaluationResult]
    plan: RewritePlan


Precondition = Callable[[RuleContext], bool]
Apply = Callable[[RuleContext], str]


def strategic_tone(context_score: int) -> StrategicTone:
    if context_score >= 75:
        return "confident"
    if context_score >= 50:
        return "measured"
    return "humble"


def _bullet_index(draft: ResumeContent) -> dict[str, tuple[Experience, int]]:
    return {b.id: (exp, i) for exp in draft.experiences for i, b in enumerate(exp.bullets)}


def _summary_item(ctx: RuleContext) -> RewriteItem:
    return RewriteItem(id=SUMMARY_ID, kind="summary", original=ctx.draft.summary or "")


def _flag_bullet(ctx: RuleContext, bullet_id: str, instruction: str, metric_category: str | None = None) -> bool:
    found = _bullet_index(ctx.draft).get(bullet_id)
    if found is None:
        return False
    exp, i = found
    item = ctx.plan.flag(
        RewriteItem(id=bullet_id, kind="bullet", original=exp.bullets[i].text, experience_id=exp.id),
        instruction,
    )
    if metric_category and item.metric_category is None:
        item.metric_category = metric_category
    return True


def _word_count(text: str) -> int:
    return len(text.split())


# --- dedupe-skills ---


def _skill_lists(draft: ResumeContent) -> list[list[str]]:
    s = draft.skills
    return [s.technical, s.soft, s.languages, s.certifications]


def _dedupe(values: list[str]) -> tuple[list[str], list[str]]:
    seen: set[str] = set()
    kept, dropped = [], []
    for value in values:
        key = skill_key(value)
        if not key or key in seen:
            dropped.append(value)
            continue
        seen.add(key)
        kept.append(value)
    return kept, dropped


def _has_duplicate_skills(ctx: RuleContext) -> bool:
    return any(_dedupe(values)[1] for values in _skill_lists(ctx.draft))


def _dedupe_skills(ctx: RuleContext) -> str:
    removed: list[str] = []
    for values in _skill_lists(ctx.draft):
        kept, dropped = _dedupe(values)
        values[:] = kept
        removed.extend(dropped)
    return f"Removed {len(removed)} duplicate skill entries: {', '.join(removed)}"


# --- promote-matched-skills ---


def _matches_job(ctx: RuleContext, skill: str) -> bool:
    keys = {kw.key for kw in ctx.job_keywords}
    if normalize_phrase(skill) in keys:
        return True
    norm = NormalizedText(skill)
    return any(norm.contains(kw.key) for kw in ctx.job_keywords)


def _promoted_order(ctx: RuleContext) -> list[str]:
    technical = ctx.draft.skills.technical
    matched = [s for s in technical if _matches_job(ctx, s)]
    return matched + [s for s in technical if not _matches_job(ctx, s)]


def _skills_out_of_order(ctx: RuleContext) -> bool:
    return _promoted_order(ctx) != ctx.draft.skills.technical


def _promote_skills(ctx: RuleContext) -> str:
    promoted = [s for s in ctx.draft.skills.technical if _matches_job(ctx, s)]
    ctx.draft.skills.technical = _promoted_order(ctx)
    return f"Moved {len(promoted)} job-matching skills to the front: {', '.join(promoted)}"


# --- summary-first ---


def _summary_not_first(ctx: RuleContext) -> bool:
    order = ctx.draft.section_order
    has_summary = bool(ctx.draft.summary and ctx.draft.summary.strip())
    return not has_summary or not order or order[0] != "summary"


def _summary_first(ctx: RuleContext) -> str:
    order = [s for s in ctx.draft.section_order if s != "summary"]
    ctx.draft.section_order = ["summary", *order]
    if ctx.draft.summary and ctx.draft.summary.strip():
        return "Moved the summary to the top"
    ctx.plan.flag(_summary_item(ctx), f"Write a two to three sentence summary positioning the candidate for {ctx.job.title}.")
    return "Placed the summary first and scheduled one to be written"


# --- order-sections ---

_CORE_SECTIONS = ("experience", "skills", "education")


def _target_section_order(draft: ResumeContent) -> list[str]:
    order = draft.section_order
    has_experience = bool(draft.experiences)
    core = ["experience", "skills", "education"] if has_experience else ["education", "experience", "skills"]
    core = [s for s in core if s in order]
    head = ["summary"] if order and order[0] == "summary" else []
    if "why_fit" in order:
        head.append("why_fit")
    rest = [s for s in order if s not in _CORE_SECTIONS and s not in head]
    return [*head, *core, *rest]


def _sections_out_of_order(ctx: RuleContext) -> bool:
    return _target_section_order(ctx.draft) != ctx.draft.section_order


def _order_sections(ctx: RuleContext) -> str:
    ctx.draft.section_order = _target_section_order(ctx.draft)
    return f"Reordered sections: {', '.join(ctx.draft.section_order)}"


# --- drop-duplicate-bullets ---


def _redundant_bullet_ids(draft: ResumeContent) -> list[str]:
    redundant: list[str] = []
    for exp in draft.experiences:
        seen: set[str] = set()
        for bullet in exp.bullets:
            key = " ".join(bullet.text.lower().split())
            if not key or key in seen:
                redundant.append(bullet.id)
            seen.add(key)
    return redundant


def _has_redundant_bullets(ctx: RuleContext) -> bool:
    return bool(_redundant_bullet_ids(ctx.draft))


def _drop_bullets(ctx: RuleContext) -> str:
    redundant = set(_redundant_bullet_ids(ctx.draft))
    for exp in ctx.draft.experiences:
        exp.bullets = [b for b in exp.bullets if b.id not in redundant]
    return f"Removed {len(redundant)} empty or duplicate bullets"


# --- flag-unquantified-bullets / flag-repetitive-bullets ---


def _impact_bullets(ctx: RuleContext, levels: tuple[str, ...]):
    present = _bullet_index(ctx.draft)
    return [b for b in ctx.pre_analysis.impact.bullets if b.improvement in levels and b.bullet_id in present]


def _has_unquantified(ctx: RuleContext) -> bool:
    return bool(_impact_bullets(ctx, ("minor", "major")))


def _flag_unquantified(ctx: RuleContext) -> str:
    bullets = _impact_bullets(ctx, ("minor", "major"))
    for b in bullets:
        category = b.suggested_metric or "other"
        if b.improvement == "major":
            instruction = f"Lead with a strong action verb and state the result as a {category} figure."
        else:
            instruction = f"Add the {category} result this work produced."
        _flag_bullet(ctx, b.bullet_id, instruction, category)
    return f"Flagged {len(bullets)} bullets to quantify"


def _has_repetitive(ctx: RuleContext) -> bool:
    return bool(_impact_bullets(ctx, ("transformed",)))


def _flag_repetitive(ctx: RuleContext) -> str:
    bullets = _impact_bullets(ctx, ("transformed",))
    for b in bullets:
        _flag_bullet(
            ctx,
            b.bullet_id,
            "Restructure: open with a different action verb than its neighbours and end on the outcome.",
            b.suggested_metric,
        )
    return f"Flagged {len(bullets)} repetitive bullets for restructuring"


# --- flag-long-bullets ---


def _long_bullet_ids(ctx: RuleContext) -> list[str]:
    limit = ctx.config.max_bullet_words
    return [b.id for _, b in ctx.draft.iter_bullets() if _word_count(b.text) > limit]


def _has_long_bullets(ctx: RuleContext) -> bool:
    return bool(_long_bullet_ids(ctx))


def _flag_long(ctx: RuleContext) -> str:
    ids = _long_bullet_ids(ctx)
    for bullet_id in ids:
        _flag_bullet(ctx, bullet_id, f"Tighten to at most {ctx.config.max_bullet_words} words.")
    return f"Flagged {len(ids)} bullets over {ctx.config.max_bullet_words} words"


# --- inject-missing-keywords ---


def _coverage_weak(ctx: RuleContext) -> bool:
    context = ctx.pre_analysis.context
    return context.score < STRONG_SCORE and bool(context.missing_keywords) and ctx.config.max_keywords_per_item > 0


def _inject_keywords(ctx: RuleContext) -> str:
    limit = ctx.config.max_keywords_per_item
    items = list(ctx.plan.items)
    if not items:
        items = [ctx.plan.flag(_summary_item(ctx), "Rewrite the summary for this role.")]

    pool = list(ctx.pre_analysis.context.missing_keywords)
    handed: list[str] = []
    while pool and any(len(i.keywords) < limit for i in items):
        for item in items:
            if not pool:
                break
            if len(item.keywords) < limit:
                keyword = pool.pop(0)
                item.keywords.append(keyword)
                handed.append(keyword)

    for item in items:
        if item.keywords:
            ctx.plan.flag(
                item,
                f"Work in where truthful: {', '.join(item.keywords)}. Skip any the original cannot support.",
            )
    return f"Handed {len(handed)} missing keywords to {sum(1 for i in items if i.keywords)} items"


# --- add-company-context ---


def _company_unknown(ctx: RuleContext) -> bool:
    company = ctx.pre_analysis.company
    return company is not None and company.needs_context


def _add_company_context(ctx: RuleContext) -> str:
    name = ctx.pre_analysis.company.company_name
    ctx.plan.flag(
        _summary_item(ctx),
        f"Name {name} explicitly and say in a phrase what it does or its mission.",
    )
    return f"Asked the summary to introduce {name}"


# --- demote-unevidenced-soft-skills ---


def _has_unevidenced(ctx: RuleContext) -> bool:
    return bool(ctx.pre_analysis.soft_skills)


def _demote_soft_skills(ctx: RuleContext) -> str:
    claims = ctx.pre_analysis.soft_skills
    claimed_entries = {c.claimed_text for c in claims if c.source == "skills"}
    soft = ctx.draft.skills.soft
    ctx.draft.skills.soft = [s for s in soft if s not in claimed_entries] + [s for s in soft if s in claimed_entries]
    names = [c.skill for c in claims]
    ctx.plan.flag(
        _summary_item(ctx),
        f"Show rather than claim {', '.join(names)}: point to what was done, not the trait.",
    )
    return f"Demoted {len(claimed_entries)} unevidenced soft skills; summary will show {', '.join(names)}"


# --- surface-differentiators ---


def _hidden_differentiators(ctx: RuleContext) -> list[str]:
    summary = NormalizedText(ctx.draft.summary or "")
    hidden: list[str] = []
    for factor in ctx.pre_analysis.uniqueness.factors:
        if factor.rarity not in ("rare", "very_rare"):
            continue
        visible = any(summary.contains(normalize_phrase(e)) for e in factor.evidence)
        if not visible and factor.description not in hidden:
            hidden.append(factor.description)
    return hidden


def _has_hidden_differentiators(ctx: RuleContext) -> bool:
    return bool(_hidden_differentiators(ctx))


def _surface_differentiators(ctx: RuleContext) -> str:
    hidden = _hidden_differentiators(ctx)
    ctx.plan.flag(_summary_item(ctx), f"Surface these differentiators: {'; '.join(hidden)}.")
    return f"Asked the summary to surface {len(hidden)} differentiators"


# --- add-why-fit-section ---

WHY_FIT_LABELS = {
    "skill_combination": "Unique skill set:",
    "career_transition": "Diverse perspective:",
    "achievement": "Proven track record:",
    "domain_expertise": "Deep expertise:",
}
WHY_FIT_MAX = 3
WHY_FIT_MIN = 2


def _why_fit_lines(ctx: RuleContext) -> list[tuple[str, str]]:
    """(label, text) pairs: rare factors first, topped up from highly relevant roles."""
    lines: list[tuple[str, str]] = []
    for factor in ctx.pre_analysis.uniqueness.factors:
        if factor.rarity in ("rare", "very_rare"):
            lines.append((WHY_FIT_LABELS.get(factor.type, "Distinctive background:"), factor.description))
            if len(lines) >= WHY_FIT_MAX:
                return lines
    if len(lines) < WHY_FIT_MIN:
        high = [a for a in ctx.pre_analysis.context.experience_alignments if a.relevance == "high"]
        for alignment in high[: WHY_FIT_MIN - len(lines)]:
            text = f"{alignment.experience_title} experience"
            if alignment.matched_keywords:
                text += f" covering {', '.join(alignment.matched_keywords)}"
            lines.append(("Directly relevant:", text))
    return lines


def _why_fit_missing(ctx: RuleContext) -> bool:
    return not ctx.draft.why_fit and bool(_why_fit_lines(ctx))


def _add_why_fit(ctx: RuleContext) -> str:
    ctx.draft.why_fit = [
        WhyFitBullet(id=f"why-fit-{n}", label=label, text=text)
        for n, (label, text) in enumerate(_why_fit_lines(ctx), start=1)
    ]
    order = [s for s in ctx.draft.section_order if s != "why_fit"]
    at = 1 if order and order[0] == "summary" else 0
    ctx.draft.section_order = [*order[:at], "why_fit", *order[at:]]
    for entry in ctx.draft.why_fit:
        ctx.plan.flag(
            RewriteItem(id=entry.id, kind="why_fit", original=entry.text, label=entry.label),
            "Polish into one or two sentences that open with proof, not a claim. Keep the label's point.",
        )
    return f"Added a why-fit section with {len(ctx.draft.why_fit)} bullets"


HANDLERS: dict[RuleKind, tuple[Precondition, Apply]] = {
    RuleKind.DEDUPE_SKILLS: (_has_duplicate_skills, _dedupe_skills),
    RuleKind.PROMOTE_MATCHED_SKILLS: (_skills_out_of_order, _promote_skills),
    RuleKind.SUMMARY_FIRST: (_summary_not_first, _summary_first),
    RuleKind.ORDER_SECTIONS: (_sections_out_of_order, _order_sections),
    RuleKind.DROP_DUPLICATE_BULLETS: (_has_redundant_bullets, _drop_bullets),
    RuleKind.FLAG_UNQUANTIFIED_BULLETS: (_has_unquantified, _flag_unquantified),
    RuleKind.FLAG_REPETITIVE_BULLETS: (_has_repetitive, _flag_repetitive),
    RuleKind.FLAG_LONG_BULLETS: (_has_long_bullets, _flag_long),
    RuleKind.INJECT_MISSING_KEYWORDS: (_coverage_weak, _inject_keywords),
    RuleKind.ADD_COMPANY_CONTEXT: (_company_unknown, _add_company_context),
    RuleKind.DEMOTE_UNEVIDENCED_SOFT_SKILLS: (_has_unevidenced, _demote_soft_skills),
    RuleKind.SURFACE_DIFFERENTIATORS: (_has_hidden_differentiators, _surface_differentiators),
    RuleKind.ADD_WHY_FIT_SECTION: (_why_fit_missing, _add_why_fit),
}

_unhandled = [kind.value for kind in RuleKind if kind not in HANDLERS]
if _unhandled:
    raise RuntimeError(f"Rule kinds without a handler: {_unhandled}")


def list_rules() -> list[Rule]:
    return sorted(DEFAULT_RULES, key=lambda r: r.priority)


def _check_invariants(resume: ResumeContent, pre_analysis: PreAnalysisResult) -> None:
    ids: set[str] = set()
    for _, bullet in resume.iter_bullets():
        if bullet.id in ids:
            raise RuleEngineError(f"Duplicate bullet id {bullet.id!r}")
        ids.add(bullet.id)
    for b in pre_analysis.impact.bullets:
        if b.bullet_id not in ids:
            raise RuleEngineError(f"Pre-analysis references unknown bullet {b.bullet_id!r}")
    why_fit_ids = [entry.id for entry in resume.why_fit]
    if len(set(why_fit_ids)) != len(why_fit_ids):
        raise RuleEngineError("Duplicate why-fit bullet id")


def apply_rules(
    resume: ResumeContent,
    job: JobData,
    pre_analysis: PreAnalysisResult,
    config: PipelineConfig | None = None,
    rules: tuple[Rule, ...] | list[Rule] = DEFAULT_RULES,
) -> RuleOutcome:
    """Apply every rule whose precondition holds, in priority order, to a copy of ``resume``."""
    _check_invariants(resume, pre_analysis)
    ctx = RuleContext(
        pre_analysis=pre_analysis,
        job=job,
        draft=resume.model_copy(deep=True),
        plan=RewritePlan(tone=strategic_tone(pre_analysis.context.score)),
        config=config or PipelineConfig(),
        job_keywords=extract_job_keywords(job),
    )
    applied: list[RuleEvaluationResult] = []
    for rule in sorted(rules, key=lambda r: r.priority):
        precondition, apply = HANDLERS[rule.kind]
        if not precondition(ctx):
            continue
        edit = apply(ctx)
        logger.debug("Rule %s: %s", rule.id, edit)
        applied.append(
            RuleEvaluationResult(
                rule_id=rule.id,
                rule_name=rule.name,
                recruiter_issue=rule.recruiter_issue,
                edit=edit,
            )
        )
    logger.info(
        "Rules: %d of %d fired, %d items to rewrite (%d bullets)",
        len(applied), len(rules), len(ctx.plan.items), len(ctx.plan.bullet_items),
    )
    return RuleOutcome(draft=ctx.draft, applied=applied, plan=ctx.plan)
