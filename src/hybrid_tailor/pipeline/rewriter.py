"""Rewriter: the one stage that calls a generative model, once per run."""

from __future__ import annotations

import json
import logging
from typing import Protocol

import anthropic

from hybrid_tailor.clients.llm_client import DEFAULT_MODEL, LLMClient
from hybrid_tailor.errors import ErrorCode, RewriteError
from hybrid_tailor.models.analysis import PreAnalysisResult
from hybrid_tailor.models.job import JobData
from hybrid_tailor.models.resume import ResumeContent
from hybrid_tailor.models.rewrite import RewriteRequest, RewriteResult
from hybrid_tailor.models.rules import RewritePlan, StrategicTone
from hybrid_tailor.utils.json_parser import extract_json

logger = logging.getLogger(__name__)

TONE_GUIDANCE: dict[StrategicTone, str] = {
    "confident": "The candidate is a strong match. Write assertively and lead with outcomes.",
    "measured": "The candidate is a reasonable match. Write plainly and let the results carry the weight.",
    "humble": "The candidate is a stretch for this role. Emphasize transferable results and eagerness to grow, without overstating fit.",
}

SYSTEM_PROMPT = """\
You are an expert resume editor working for a recruiter. You receive only the
fragments of a resume that need rewriting, each with instructions produced by
an automated review. Rewrite each fragment following its instructions.

Rules:
- Keep every fact true to the original. Never invent numbers, employers, tools or titles.
  If an instruction asks for a figure the original does not support, describe the
  result concretely without a number.
- Bullets: one sentence, start with a strong action verb, no first person.
- Summary: two to three sentences.
- Why-fit bullets: one or two sentences supporting the given label. Return the text only, without the label.
- Return every fragment you were given, identified by its id.

Respond with JSON only, in this shape:
{"items": [{"id": "<fragment id>", "text": "<rewritten text>"}]}"""


class Rewriter(Protocol):
    """Turns a rewrite request into rewritten fragments, or raises ``RewriteError``."""

    async def rewrite(self, request: RewriteRequest) -> RewriteResult: ...


def build_request(plan: RewritePlan, job: JobData, pre_analysis: PreAnalysisResult) -> RewriteRequest:
    """Minimal request: only flagged fragments and the context needed to rewrite them."""
    keywords: list[str] = []
    for item in plan.items:
        for keyword in item.keywords:
            if keyword not in keywords:
                keywords.append(keyword)
    company = pre_analysis.company
    return RewriteRequest(
        job_title=job.title,
        company_name=job.company_name,
        company_context_needed=bool(company and company.needs_context),
        tone=plan.tone,
        missing_keywords=keywords,
        items=[item.model_copy(deep=True) for item in plan.items],
    )


def build_prompt(request: RewriteRequest) -> str:
    target = request.job_title + (f" at {request.company_name}" if request.company_name else "")
    fragments = [
        {
            "id": item.key,
            "kind": item.kind,
            "original": item.original,
            "instructions": item.instructions,
            **({"label": item.label} if item.label else {}),
            **({"metricCategory": item.metric_category} if item.metric_category else {}),
            **({"keywords": item.keywords} if item.keywords else {}),
        }
        for item in request.items
    ]
    return f"""Target role: {target}
Tone: {TONE_GUIDANCE[request.tone]}

Fragments to rewrite:
{json.dumps(fragments, indent=2, ensure_ascii=False)}

Respond with JSON only."""


def parse_fragments(text: str, request: RewriteRequest) -> dict[str, str]:
    """Map item key to rewritten text; anything short of a full answer is malformed."""
    try:
        data = extract_json(text)
    except ValueError as exc:
        raise RewriteError(f"Rewrite response is not JSON: {exc}") from exc
    if not isinstance(data, dict) or not isinstance(data.get("items"), list):
        raise RewriteError("Rewrite response has no 'items' list")

    fragments: dict[str, str] = {}
    for entry in data["items"]:
        if not isinstance(entry, dict):
            raise RewriteError("Rewrite response item is not an object")
        item_id, item_text = entry.get("id"), entry.get("text")
        if not isinstance(item_id, str) or not isinstance(item_text, str):
            raise RewriteError("Rewrite response item needs string 'id' and 'text'")
        fragments.setdefault(item_id, item_text.strip())

    requested = [item.key for item in request.items]
    missing = [i for i in requested if not fragments.get(i)]
    if missing:
        raise RewriteError(f"Rewrite response missing text for: {', '.join(missing)}")
    extra = [i for i in fragments if i not in requested]
    if extra:
        logger.warning("Ignoring unrequested fragments in rewrite response: %s", extra)
    return {i: fragments[i] for i in requested}


class AnthropicRewriter:
    """Rewriter backed by one Claude call."""

    def __init__(
        self,
        llm: LLMClient,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.3,
        max_tokens: int = 4096,
    ):
        self.llm = llm
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def rewrite(self, request: RewriteRequest) -> RewriteResult:
        if not request.items:
            return RewriteResult(fragments={}, model=self.model)
        if not self.llm.is_configured:
            raise RewriteError("No Anthropic API key configured", ErrorCode.AI_NOT_CONFIGURED)

        try:
            response = await self.llm.generate(
                prompt=build_prompt(request),
                system=SYSTEM_PROMPT,
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except (anthropic.AuthenticationError, anthropic.PermissionDeniedError) as exc:
            raise RewriteError(f"Anthropic rejected the credentials: {exc}", ErrorCode.AUTH_ERROR) from exc
        except anthropic.RateLimitError as exc:
            raise RewriteError(f"Anthropic rate limit reached: {exc}", ErrorCode.RATE_LIMIT) from exc
        except anthropic.APITimeoutError as exc:
            raise RewriteError("Anthropic request timed out", ErrorCode.TIMEOUT) from exc
        except anthropic.APIError as exc:
            raise RewriteError(f"Anthropic request failed: {exc}") from exc

        fragments = parse_fragments(response.text, request)
        logger.info("Rewrote %d fragments in one call", len(fragments))
        return RewriteResult(
            fragments=fragments,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
            model=response.model,
        )


def apply_rewrites(draft: ResumeContent, request: RewriteRequest, result: RewriteResult) -> ResumeContent:
    """Splice rewritten fragments into a copy of ``draft`` at their original positions."""
    tailored = draft.model_copy(deep=True)
    bullets = {b.id: b for _, b in tailored.iter_bullets()}
    why_fit = {w.id: w for w in tailored.why_fit}
    for item in request.items:
        text = result.fragments.get(item.key)
        if not text:
            raise RewriteError(f"No rewritten text for {item.key!r}")
        if item.kind == "summary":
            tailored.summary = text
            continue
        target = (bullets if item.kind == "bullet" else why_fit).get(item.id)
        if target is None:
            raise RewriteError(f"Rewritten {item.kind} {item.id!r} is not in the draft")
        target.text = text
        target.is_modified = True
    return tailored
