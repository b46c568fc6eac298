"""Fact extraction: objective key/value statements about the writer's world.

Opinions are not facts, so any candidate carrying subjective language is
dropped. Values that read as booleans or numbers are typed.
"""

from __future__ import annotations

import re
from typing import Dict, Iterator, List, Optional

from ..analyzer import Match, View
from ..pipeline import Candidate, Category, Strategy, run_category
from ..types import Fact
from ..utils import (
    CLAUSE_BREAKS,
    DETERMINERS,
    contains_any,
    cut_clause,
    drop_words,
    first_word,
    normalize_candidate,
    parse_value,
    snake_case,
    strip_leading,
)

MIN_LENGTH = 2
MAX_LENGTH = 200

BLOCKLIST = frozenset({
    "it", "that", "this", "something", "anything", "nothing", "stuff",
    "things", "one", "okay", "ok", "fine", "here", "there",
})

SUBJECTIVE = (
    "good", "bad", "great", "nice", "awesome", "terrible", "beautiful",
    "ugly", "best", "worst", "love", "hate", "think", "believe", "feel",
    "guess", "suppose", "hope", "prefer", "like", "want", "wish", "maybe",
    "perhaps", "amazing", "horrible", "cool",
)

NON_VALUE_STARTS = frozenset({
    "to", "been", "being", "not", "no", "never", "just", "already", "going",
    "experience", "idea", "question", "problem", "issue", "feeling", "time",
    "fun", "chance", "trouble",
})

VALUE_STOPS = CLAUSE_BREAKS + ("which", "so", "who", "that")

FILLER = ("fully", "completely", "all", "already", "totally", "now", "currently", "still")

# (regex over plain text, key, value)
STORAGE_FACTS = (
    (
        re.compile(
            r"\b(?:data|files|backups?|photos|documents)\b[^.;!?]*?"
            r"\b(?:cloud backed|cloud synced|backed up (?:to|in) the cloud|in the cloud|synced to the cloud)\b"
        ),
        "data_storage",
        "cloud_backed",
    ),
    (
        re.compile(
            r"\b(?:files|data|documents|photos) (?:is|are) (?:all |fully |already |safely )*backed up\b"
        ),
        "data_backup_status",
        "complete",
    ),
    (
        re.compile(r"\b(?:files|data|documents|photos) (?:is|are) not backed up\b"),
        "data_backup_status",
        "missing",
    ),
)


def _value(view: View) -> str:
    text = cut_clause(view.text().lower(), VALUE_STOPS)
    return strip_leading(text, FILLER)


def _key(view: View) -> str:
    return snake_case(drop_words(view.normal(), DETERMINERS))


def _starts_with_verb(view: View) -> bool:
    head = view.tokens[0] if view.tokens else None
    return head is not None and head.is_("Verb") and not head.is_("Noun")


def _parse_statement(match: Match):
    value = match.group("value")
    if _starts_with_verb(value):
        return None
    return {"key": _key(match.group("key")), "value": _value(value)}


def _parse_fixed(key: str):
    def parse(match: Match):
        group = match.group()
        if _starts_with_verb(group):
            return None
        return {"key": key, "value": _value(group)}
    return parse


def _scan_storage(text: str) -> Iterator[Dict[str, object]]:
    for regex, key, value in STORAGE_FACTS:
        if regex.search(text):
            yield {"key": key, "value": value, "typed": True}


STRATEGIES = (
    Strategy(
        name="storage",
        confidence=0.90,
        scan=_scan_storage,
    ),
    Strategy(
        name="possessive",
        confidence=0.85,
        pattern="(my|our) [<key> #Adjective? #Noun+] (is|are|was|were) [<value> .+]",
        parse=_parse_statement,
    ),
    Strategy(
        name="definite",
        confidence=0.80,
        pattern="(this|the) [<key> #Adjective? #Noun+] (is|are) [<value> .+]",
        parse=_parse_statement,
    ),
    Strategy(
        name="location",
        confidence=0.90,
        pattern="(i|we) (live|work|am based|are based|am located|are located|reside) (in|at) [.+]",
        parse=_parse_fixed("location"),
    ),
    Strategy(
        name="possession",
        confidence=0.80,
        pattern="(i|we) (have|own|got|have got) (a|an|the|my|our)? [.+]",
        parse=_parse_fixed("possession"),
    ),
    Strategy(
        name="identity",
        confidence=0.75,
        pattern="(i|we) (am|are) (a|an) [#Adjective* #Noun+]",
        parse=_parse_fixed("identity"),
    ),
)


def validate(candidate: Candidate) -> Optional[Dict[str, object]]:
    if candidate.get("typed"):
        return {"key": candidate.get("key"), "value": candidate.get("value")}
    if candidate.question:
        return None

    key = candidate.get("key")
    raw = candidate.get("value")
    if not key or not isinstance(raw, str):
        return None
    value = normalize_candidate(raw, min_length=MIN_LENGTH, max_length=MAX_LENGTH, blocklist=BLOCKLIST, min_alpha=0)
    if value is None or not re.search(r"[a-z0-9]", value) or first_word(value) in NON_VALUE_STARTS:
        return None
    if contains_any(value, SUBJECTIVE) or contains_any(key.replace("_", " "), SUBJECTIVE):
        return None
    return {"key": key, "value": parse_value(value)}


def dedup_key(fact: Fact) -> str:
    return f"{fact.key}:{str(fact.value)[:50]}".lower()


CATEGORY = Category(
    name="facts",
    item_type=Fact,
    primary="value",
    strategies=STRATEGIES,
    validate=validate,
    key=dedup_key,
)


def extract_facts(text: str) -> List[Fact]:
    """Extract objective facts from text. Never raises."""
    return run_category(CATEGORY, text)
