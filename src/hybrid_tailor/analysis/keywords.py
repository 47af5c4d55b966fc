"""Keyword extraction and stemmed matching shared by the analyzers."""

from __future__ import annotations

import re
from dataclasses import dataclass

from nltk.stem import PorterStemmer

from hybrid_tailor.models.job import JobData
from hybrid_tailor.models.resume import ResumeContent

# Tokens keep tech punctuation inside a word: c++, c#, node.js, ci/cd, e-commerce
_TOKEN_RE = re.compile(r"[a-z0-9][a-z0-9+#]*(?:[./\-][a-z0-9+#]+)*", re.IGNORECASE)
_NUMERIC_RE = re.compile(r"^[\d.,/\-+]+$")

STOPWORDS = frozenset("""
a about above across after all also an and any are as at be been before being
below both but by can could did do does during each etc few for from had has
have having he her here his how i if in into is it its just may me might more
most must my no nor not of on only or other our out over own per plus same
shall she should so some such than that the their them then there these they
this those through to too under up us very via was we were what when where
which while who whom why will with within without would you your
ability able candidate candidates company environment etc excellent
experience experienced familiarity familiar good great ideal including join
joining knowledge looking must-have nice-to-have position preferred
proficiency proficient required requirement requirements responsibilities
responsible role seeking skill skills strong team teams understanding work
working year years
""".split())

_stemmer = PorterStemmer()


@dataclass(frozen=True)
class Keyword:
    """A job keyword: ``key`` is the normalized stem phrase, ``display`` its surface form."""

    key: str
    display: str

    @property
    def is_phrase(self) -> bool:
        return " " in self.key


def _is_content_token(token: str) -> bool:
    lowered = token.lower()
    if len(lowered) < 2 and lowered not in {"c", "r"}:
        return False
    return lowered not in STOPWORDS and not _NUMERIC_RE.match(lowered)


def normalize_token(token: str) -> str:
    """Lowercase and stem a single token; symbols and short acronyms are left alone."""
    lowered = token.lower()
    if len(lowered) <= 3 or not lowered.isalpha():
        return lowered
    return _stemmer.stem(lowered)


def content_tokens(text: str) -> list[str]:
    """Surface-form tokens of ``text`` with stop words and bare numbers removed."""
    return [m.group(0) for m in _TOKEN_RE.finditer(text or "") if _is_content_token(m.group(0))]


def normalize_phrase(text: str) -> str:
    return " ".join(normalize_token(t) for t in content_tokens(text))


def extract_keywords(text: str) -> list[Keyword]:
    """Unique single-token keywords of ``text`` in first-seen order."""
    seen: dict[str, Keyword] = {}
    for token in content_tokens(text):
        key = normalize_token(token)
        if key not in seen:
            seen[key] = Keyword(key=key, display=token)
    return list(seen.values())


def extract_job_keywords(job: JobData) -> list[Keyword]:
    """Keywords a resume is measured against, in job order.

    Skills-list entries come first, each as a (possibly multi-word) phrase.
    Requirement and description tokens follow unless they duplicate a
    keyword or are a word of a multi-word skill phrase.
    """
    keywords: dict[str, Keyword] = {}
    phrase_words: set[str] = set()

    for skill in job.skills or []:
        key = normalize_phrase(skill)
        if not key or key in keywords:
            continue
        keywords[key] = Keyword(key=key, display=skill.strip())
        if " " in key:
            phrase_words.update(key.split())

    for text in [*(job.requirements or []), job.description]:
        for kw in extract_keywords(text):
            if kw.key in keywords or kw.key in phrase_words:
                continue
            keywords[kw.key] = kw
    return list(keywords.values())


class NormalizedText:
    """Stemmed view of a block of text supporting keyword containment."""

    def __init__(self, text: str):
        self.tokens = [normalize_token(t) for t in content_tokens(text)]
        self._token_set = set(self.tokens)
        self._joined = f" {' '.join(self.tokens)} "

    def contains(self, key: str) -> bool:
        if not key:
            return False
        if " " in key:
            return f" {key} " in self._joined
        return key in self._token_set


def resume_sections(resume: ResumeContent) -> dict[str, str]:
    """Plain text of each resume section, keyed by section name in document order."""
    experience = []
    for exp in resume.experiences:
        experience.append(f"{exp.title} {exp.company}")
        experience.extend(b.text for b in exp.bullets)
    skills = resume.skills
    return {
        "summary": resume.summary or "",
        "experience": "\n".join(experience),
        "skills": "\n".join([*skills.technical, *skills.soft, *skills.languages, *skills.certifications]),
        "education": "\n".join(
            " ".join(filter(None, [e.degree, e.field, e.institution, *e.honors])) for e in resume.education
        ),
        "projects": "\n".join(
            " ".join([p.name, p.description, *p.technologies]) for p in resume.projects
        ),
    }


def resume_text(resume: ResumeContent) -> str:
    return "\n".join(text for text in resume_sections(resume).values() if text)


def skill_key(skill: str) -> str:
    """Case- and whitespace-insensitive identity of a skill entry."""
    return " ".join(skill.lower().split())
