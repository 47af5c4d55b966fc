"""Utility to extract JSON from LLM responses."""

from __future__ import annotations

import json
import re

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)
_decoder = json.JSONDecoder()


def extract_json(text: str) -> dict | list:
    """Extract the first JSON value from an LLM response.

    Tries in order:
    1. Direct json.loads on the full text
    2. The body of the first fenced code block
    3. The first '{' or '[' that starts a complete JSON value, ignoring
       any prose before or after it

    Truncated output is not repaired: a half-written response raises.
    """
    if text is None:
        raise ValueError("Could not extract JSON from empty response")
    text = text.strip()

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    fence = _FENCE_RE.search(text)
    if fence:
        body = fence.group(1).strip()
        try:
            return json.loads(body)
        except json.JSONDecodeError:
            found = _first_value(body)
            if found is not None:
                return found

    found = _first_value(text)
    if found is not None:
        return found

    raise ValueError(f"Could not extract JSON from text: {text[:200]}...")


def _first_value(text: str) -> dict | list | None:
    """Decode the first complete object or array embedded in ``text``."""
    for i, ch in enumerate(text):
        if ch not in "{[":
            continue
        try:
            value, _ = _decoder.raw_decode(text, i)
        except json.JSONDecodeError:
            continue
        if isinstance(value, (dict, list)):
            return value
    return None
