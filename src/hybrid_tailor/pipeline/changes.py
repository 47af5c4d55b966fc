"""What tailoring changed between the stored resume and the tailored one."""

from __future__ import annotations

from collections import Counter

from hybrid_tailor.models.result import BulletDiff, TailoringChanges, TextDiff
from hybrid_tailor.models.resume import ResumeContent


def _common_order(first: list[str], second: list[str]) -> list[str]:
    present = set(second)
    return [v for v in first if v in present]


def _removed(before: list[str], after: list[str]) -> list[str]:
    remaining = Counter(after)
    removed = []
    for value in before:
        if remaining[value] > 0:
            remaining[value] -= 1
        else:
            removed.append(value)
    return removed


def diff_resume(original: ResumeContent, tailored: ResumeContent) -> TailoringChanges:
    summary_modified = (original.summary or "") != (tailored.summary or "")

    before = {b.id: (exp.id, b.text) for exp, b in original.iter_bullets()}
    bullet_diffs = [
        BulletDiff(bullet_id=b.id, experience_id=exp.id, before=before[b.id][1], after=b.text)
        for exp, b in tailored.iter_bullets()
        if b.id in before and before[b.id][1] != b.text
    ]
    after_ids = {b.id for _, b in tailored.iter_bullets()}

    skills_reordered = False
    skills_removed: list[str] = []
    for field in ("technical", "soft", "languages", "certifications"):
        old, new = getattr(original.skills, field), getattr(tailored.skills, field)
        if _common_order(old, new) != _common_order(new, old):
            skills_reordered = True
        skills_removed.extend(_removed(old, new))

    return TailoringChanges(
        summary_modified=summary_modified,
        summary_diff=TextDiff(before=original.summary, after=tailored.summary) if summary_modified else None,
        bullets_modified=len(bullet_diffs),
        bullet_diffs=bullet_diffs,
        bullets_removed=sum(1 for bullet_id in before if bullet_id not in after_ids),
        skills_reordered=skills_reordered,
        skills_removed=skills_removed,
        sections_reordered=original.section_order != tailored.section_order,
        experiences_reordered=[e.id for e in original.experiences] != [e.id for e in tailored.experiences],
        why_fit_section_added=bool(tailored.why_fit) and not original.why_fit,
        why_fit_bullet_count=len(tailored.why_fit),
    )
