"""Text helpers shared by the analyzer and every category extractor."""

from __future__ import annotations

import functools
import re
from typing import Iterable, List, Optional, Sequence, Tuple, Union

QUOTE_CHARS = "\"'`“”‘’«»"

# Whole-word contractions. Suffix forms are handled below.
_CONTRACTIONS = {
    "im": ("i", "am"),
    "i'm": ("i", "am"),
    "can't": ("can", "not"),
    "cant": ("can", "not"),
    "cannot": ("can", "not"),
    "won't": ("will", "not"),
    "wont": ("will", "not"),
    "shan't": ("shall", "not"),
    "ain't": ("is", "not"),
    "dont": ("do", "not"),
    "doesnt": ("does", "not"),
    "didnt": ("did", "not"),
    "isnt": ("is", "not"),
    "wasnt": ("was", "not"),
    "ive": ("i", "have"),
    "it's": ("it", "is"),
    "that's": ("that", "is"),
    "there's": ("there", "is"),
    "here's": ("here", "is"),
    "what's": ("what", "is"),
    "who's": ("who", "is"),
    "where's": ("where", "is"),
    "how's": ("how", "is"),
    "he's": ("he", "is"),
    "she's": ("she", "is"),
    "let's": ("let", "us"),
}

_SUFFIXES = (
    ("n't", "not"),
    ("'m", "am"),
    ("'re", "are"),
    ("'ve", "have"),
    ("'ll", "will"),
    ("'d", "would"),
)

CLAUSE_BREAKS = (
    "but",
    "however",
    "although",
    "though",
    "because",
    "since",
    "unless",
    "so that",
    "and then",
    "and",
    "while",
    "whereas",
    "until",
)


def normalize_text(text: str) -> str:
    """Normalize text for comparison by lowercasing and collapsing whitespace.

    Args:
        text: Text to normalize

    Returns:
        Normalized text
    """
    return re.sub(r"\s+", " ", (text or "").strip()).lower()


def split_contraction(word: str) -> Tuple[str, ...]:
    """Expand a single lower-cased word into its spoken parts.

    >>> split_contraction("don't")
    ('do', 'not')
    >>> split_contraction("I'm".lower())
    ('i', 'am')
    """
    w = word.replace("’", "'")
    if w in _CONTRACTIONS:
        return _CONTRACTIONS[w]
    for suffix, expansion in _SUFFIXES:
        if w.endswith(suffix) and len(w) > len(suffix):
            return (w[: -len(suffix)], expansion)
    return (w,)


def plain_text(text: str) -> str:
    """Lower-case text with straight quotes and contractions expanded.

    This is the form keyword scans run against, so phrase tables only need
    to list "do not" and never "don't".
    """
    lowered = (text or "").lower().replace("’", "'").replace("‘", "'")
    expanded = re.sub(r"[a-z']+", lambda m: " ".join(split_contraction(m.group())), lowered)
    return re.sub(r"\s+", " ", expanded).strip()


# ── Candidate normalization ──────────────────────────────────────────────────

def normalize_candidate(
    raw: object,
    min_length: int = 2,
    max_length: int = 200,
    blocklist: Iterable[str] = (),
    lower: bool = True,
    min_alpha: int = 2,
) -> Optional[str]:
    """Clean a raw candidate string, or reject it.

    Trims, strips surrounding quotes and trailing sentence punctuation, and
    collapses internal whitespace.

    Args:
        raw: Candidate value produced by a strategy
        min_length: Shortest accepted value
        max_length: Longest accepted value
        blocklist: Vacuous values to reject (compared case-insensitively)
        lower: Lower-case the result
        min_alpha: Required length of at least one alphabetic run (0 allows
            purely numeric values)

    Returns:
        The cleaned value, or None when rejected
    """
    if not isinstance(raw, str):
        return None
    value = re.sub(r"\s+", " ", raw).strip()
    value = value.strip(QUOTE_CHARS).strip()
    value = re.sub(r"[\s.,;:!?…]+$", "", value)
    value = re.sub(r"^[\s,;:]+", "", value)
    value = value.strip(QUOTE_CHARS).strip()
    if lower:
        value = value.lower()
    if len(value) < min_length or len(value) > max_length:
        return None
    if value.lower() in blocklist:
        return None
    if min_alpha > 0 and not re.search(r"[A-Za-z]{%d,}" % min_alpha, value):
        return None
    return value


# ── Phrase lookup ────────────────────────────────────────────────────────────

@functools.lru_cache(maxsize=1024)
def _phrase_regex(phrases: Tuple[str, ...]) -> re.Pattern:
    ordered = sorted(set(phrases), key=lambda p: (-len(p), p))
    body = "|".join(re.escape(p) for p in ordered if p)
    return re.compile(r"(?<![a-z0-9])(?:%s)(?![a-z0-9])" % (body or r"(?!x)x"))


def _as_key(phrases: Union[Sequence[str], Iterable[str]]) -> Tuple[str, ...]:
    if isinstance(phrases, tuple):
        return phrases
    return tuple(sorted(phrases))


def contains_any(text: str, phrases: Iterable[str]) -> bool:
    """True if any phrase occurs in text on word boundaries.

    Both sides are expected to be lower-case; "reset" does not match inside
    "preset".
    """
    if not text:
        return False
    return _phrase_regex(_as_key(phrases)).search(text) is not None


def first_phrase(text: str, phrases: Iterable[str]) -> Optional[str]:
    """Return the leftmost phrase found in text, or None."""
    if not text:
        return None
    m = _phrase_regex(_as_key(phrases)).search(text)
    return m.group(0) if m else None


# ── Span shaping ─────────────────────────────────────────────────────────────

def cut_clause(
    text: str,
    stops: Iterable[str] = CLAUSE_BREAKS,
    at_comma: bool = True,
) -> str:
    """Cut text at the first clause break (a stop word or a comma)."""
    if not text:
        return ""
    end = len(text)
    if at_comma:
        for mark in (",", ";", " - ", "(", "—"):
            idx = text.find(mark)
            if idx != -1:
                end = min(end, idx)
    m = _phrase_regex(_as_key(stops)).search(text.lower())
    if m:
        end = min(end, m.start())
    return text[:end].strip()


def strip_leading(text: str, words: Iterable[str]) -> str:
    """Drop any run of the given words from the front of text."""
    parts = text.split()
    lookup = set(words)
    while parts and parts[0].lower().strip(QUOTE_CHARS + ",") in lookup:
        parts.pop(0)
    return " ".join(parts)


def strip_trailing(text: str, words: Iterable[str]) -> str:
    """Drop any run of the given words from the end of text."""
    parts = text.split()
    lookup = set(words)
    while parts and parts[-1].lower().strip(QUOTE_CHARS + ".,;:!?") in lookup:
        parts.pop()
    return " ".join(parts)


def drop_words(text: str, words: Iterable[str]) -> str:
    """Remove every occurrence of the given words."""
    lookup = set(words)
    return " ".join(p for p in text.split() if p.lower() not in lookup)


def snake_case(text: str) -> str:
    """'Data Storage' -> 'data_storage'."""
    return re.sub(r"[^a-z0-9]+", "_", (text or "").lower()).strip("_")


def parse_value(value: str) -> Union[str, bool, int, float]:
    """Turn yes/no/true/false and numeric strings into typed values."""
    lowered = value.strip().lower()
    if lowered in ("true", "yes"):
        return True
    if lowered in ("false", "no"):
        return False
    if re.fullmatch(r"-?\d+", lowered):
        return int(lowered)
    if re.fullmatch(r"-?\d+\.\d+", lowered):
        return float(lowered)
    return value


DETERMINERS = frozenset({
    "a", "an", "the", "my", "our", "your", "their", "his", "her", "its",
    "this", "that", "these", "those", "some",
})


def first_word(text: str) -> str:
    parts = (text or "").split()
    return parts[0].lower() if parts else ""


def find_phrase_spans(text: str, phrases: Iterable[str]) -> List[Tuple[int, str]]:
    """Return (offset, phrase) for every phrase occurrence, left to right."""
    if not text:
        return []
    return [(m.start(), m.group(0)) for m in _phrase_regex(_as_key(phrases)).finditer(text)]
