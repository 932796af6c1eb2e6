"""Keyword relevance matching between a question and content records.

Two policies are available:

``"phrase"`` (default)
    The whole normalised question must appear verbatim in the normalised
    content, heading or title of a record.

``"tokens"``
    Any significant word of the question appearing anywhere in the record's
    title, heading and content is enough.  Much looser; useful for long
    natural-language questions.

Matching is presence/absence only: results keep the input order.
"""

import re
from typing import List, Sequence

from celestial.config import MatchPolicy
from celestial.models.page import ContentRecord

_NON_ALNUM_RE = re.compile(r"[^a-z0-9 ]+")
_WHITESPACE_RE = re.compile(r"\s+")

# Words shorter than this ("is", "a", "of", ...) match nearly every record.
_MIN_TOKEN_LEN = 3


def normalize(text: str) -> str:
    """Lowercase *text*, drop punctuation and collapse runs of whitespace."""
    text = _NON_ALNUM_RE.sub(" ", (text or "").lower())
    return _WHITESPACE_RE.sub(" ", text).strip()


def question_tokens(question: str) -> List[str]:
    """Return the significant words of *question* in order, without repeats."""
    tokens: List[str] = []
    for token in normalize(question).split(" "):
        if len(token) >= _MIN_TOKEN_LEN and token not in tokens:
            tokens.append(token)
    return tokens


def _phrase_match(records: Sequence[ContentRecord], question: str) -> List[ContentRecord]:
    q = normalize(question)
    if not q:
        return []
    return [
        r
        for r in records
        if q in normalize(r.content) or q in normalize(r.heading) or q in normalize(r.title)
    ]


def _token_match(records: Sequence[ContentRecord], question: str) -> List[ContentRecord]:
    tokens = question_tokens(question)
    if not tokens:
        return []
    matches: List[ContentRecord] = []
    for r in records:
        haystack = f"{r.title} {r.heading} {r.content}".lower()
        if any(token in haystack for token in tokens):
            matches.append(r)
    return matches


def match(
    records: Sequence[ContentRecord],
    question: str,
    policy: MatchPolicy = "phrase",
) -> List[ContentRecord]:
    """Return the records relevant to *question*, in their original order."""
    if not question:
        return []
    if policy == "tokens":
        return _token_match(records, question)
    if policy == "phrase":
        return _phrase_match(records, question)
    raise ValueError(f"Unknown match policy: {policy!r}")
