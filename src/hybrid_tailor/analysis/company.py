"""Company context checker: does the target employer need introducing?"""

from __future__ import annotations

import asyncio
import logging
import re
import sqlite3
from typing import Protocol

from hybrid_tailor.cache.company_cache import CompanyCache
from hybrid_tailor.models.analysis import CompanyContext

logger = logging.getLogger(__name__)

WELL_KNOWN_COMPANIES = frozenset({
    # Tech
    "google", "alphabet", "apple", "microsoft", "amazon", "meta", "facebook", "netflix",
    "tesla", "nvidia", "intel", "ibm", "oracle", "salesforce", "adobe",
    "uber", "lyft", "airbnb", "spotify", "twitter", "x", "linkedin", "github",
    "stripe", "square", "paypal", "shopify", "twilio", "atlassian", "zoom",
    "slack", "dropbox", "snap", "pinterest", "reddit", "discord",
    # Finance
    "goldman sachs", "morgan stanley", "jp morgan", "jpmorgan", "jpmorgan chase", "citibank",
    "bank of america", "wells fargo", "blackrock", "fidelity", "vanguard",
    # Consulting
    "mckinsey", "bain", "bcg", "boston consulting group", "deloitte", "accenture",
    "pwc", "kpmg", "ey", "ernst & young",
    # Other major corporations
    "walmart", "target", "costco", "nike", "coca-cola", "pepsi", "pepsico",
    "procter & gamble", "johnson & johnson", "pfizer", "moderna",
})

_LEGAL_SUFFIX_RE = re.compile(
    r"(?:,?\s+(?:inc|llc|ltd|plc|corp|corporation|co|company|gmbh|ag|sa|limited))+\.?$",
    re.IGNORECASE,
)


def normalize_company_name(name: str) -> str:
    """Lowercase, drop legal suffixes and a leading "the"."""
    cleaned = " ".join(name.strip().split())
    cleaned = _LEGAL_SUFFIX_RE.sub("", cleaned).strip(" ,.")
    cleaned = cleaned.lower()
    if cleaned.startswith("the "):
        cleaned = cleaned[4:]
    return cleaned


def is_well_known(name: str) -> bool:
    return normalize_company_name(name) in WELL_KNOWN_COMPANIES


class CompanyLookup(Protocol):
    """Blocking source of company recognition beyond the static catalog."""

    def lookup(self, company_name: str) -> CompanyContext | None: ...


class CachedCompanyLookup:
    """Lookup backed by the persistent company cache."""

    def __init__(self, cache: CompanyCache):
        self.cache = cache

    def lookup(self, company_name: str) -> CompanyContext | None:
        return self.cache.get(normalize_company_name(company_name))

    def remember(self, company_name: str, is_known: bool, context: str = "") -> CompanyContext:
        return self.cache.put(normalize_company_name(company_name), is_known, context)


def _unknown(company_name: str, is_known: bool | None) -> CompanyContext:
    context = ""
    if is_known is False:
        context = f"{company_name}: add one line on what the company does and its mission."
    return CompanyContext(company_name=company_name, is_well_known=is_known, source="unknown", context=context)


class CompanyContextChecker:
    """Catalog first, then an optional lookup bounded by its own timeout."""

    def __init__(self, lookup: CompanyLookup | None = None, timeout: float = 2.0):
        self.lookup = lookup
        self.timeout = timeout

    async def check(self, company_name: str | None) -> CompanyContext | None:
        if not company_name or not company_name.strip():
            return None
        name = company_name.strip()
        if is_well_known(name):
            return CompanyContext(company_name=name, is_well_known=True, source="catalog")
        if self.lookup is None:
            return _unknown(name, False)

        try:
            found = await asyncio.wait_for(asyncio.to_thread(self.lookup.lookup, name), self.timeout)
        except asyncio.TimeoutError:
            logger.warning("Company lookup for %r timed out after %.1fs", name, self.timeout)
            return _unknown(name, None)
        except (OSError, ValueError, sqlite3.Error) as exc:
            logger.warning("Company lookup for %r failed: %s", name, exc)
            return _unknown(name, None)

        if found is None:
            return _unknown(name, False)
        return found.model_copy(update={"company_name": name})
