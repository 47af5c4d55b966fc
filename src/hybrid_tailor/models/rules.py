"""Pydantic models for rule engine output."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from hybrid_tailor.models.base import CamelModel

StrategicTone = Literal["confident", "measured", "humble"]
RewriteKind = Literal["bullet", "summary", "why_fit"]

SUMMARY_ID = "summary"


class RuleEvaluationResult(CamelModel):
    rule_id: str
    rule_name: str
    recruiter_issue: str
    edit: str  # what the rule changed or flagged

    def applied(self) -> dict:
        return {"ruleId": self.rule_id, "ruleName": self.rule_name, "recruiterIssue": self.recruiter_issue}


class RewriteItem(CamelModel):
    """One fragment the rule engine could not resolve deterministically."""

    id: str  # bullet or why-fit bullet id; SUMMARY_ID for the summary
    kind: RewriteKind
    original: str
    experience_id: str | None = None
    label: str | None = None  # why-fit bullets only
    instructions: list[str] = Field(default_factory=list)
    metric_category: str | None = None
    keywords: list[str] = Field(default_factory=list)

    @property
    def key(self) -> str:
        """Fragment id on the wire. Bullet ids are opaque, so every non-summary key is kind-prefixed."""
        if self.kind == "summary":
            return SUMMARY_ID
        return f"{self.kind}:{self.id}"


class RewritePlan(CamelModel):
    """Everything the rule engine hands to the rewriter."""

    tone: StrategicTone = "measured"
    items: list[RewriteItem] = Field(default_factory=list)

    def get(self, item_id: str, kind: RewriteKind = "bullet") -> RewriteItem | None:
        for item in self.items:
            if item.kind == kind and item.id == item_id:
                return item
        return None

    def flag(self, item: RewriteItem, instruction: str) -> RewriteItem:
        """Add an item (or merge into the existing one of the same kind and id) with an instruction."""
        existing = self.get(item.id, item.kind)
        if existing is None:
            self.items.append(item)
            existing = item
        if instruction not in existing.instructions:
            existing.instructions.append(instruction)
        return existing

    @property
    def bullet_items(self) -> list[RewriteItem]:
        return [i for i in self.items if i.kind == "bullet"]

    @property
    def why_fit_items(self) -> list[RewriteItem]:
        return [i for i in self.items if i.kind == "why_fit"]

    @property
    def summary_item(self) -> RewriteItem | None:
        return self.get(SUMMARY_ID, "summary")
