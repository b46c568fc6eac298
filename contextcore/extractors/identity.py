"""Identity extraction: names, aliases, age and roles the writer claims.

Identity has the highest precedence of all categories, so its own rules are
strict: only first-person claims, names are short runs of plain words, and
roles pass a blocklist on both the whole phrase and its head noun.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional

from ..analyzer import Match, View
from ..cues import get_taxonomy
from ..pipeline import Candidate, Category, Strategy, run_category
from ..types import Identity
from ..utils import DETERMINERS, cut_clause, drop_words, normalize_candidate

ROLE_BLOCKLIST = frozenset({
    "bit", "lot", "little", "fan", "believer", "skeptic", "mess", "hurry",
    "joke", "mistake", "while", "second", "moment", "participant",
    "student of life", "person", "one", "someone", "nobody", "everybody",
    "thing", "nothing", "way", "kind", "sort", "part", "few", "couple",
    "lot of", "position", "situation", "rush", "mood", "minute", "day",
})

NOT_NAMES = frozenset({
    "here", "there", "now", "later", "soon", "confidential", "unknown",
    "hidden", "secret", "mine", "yours", "missing", "changing", "important",
    "available", "busy", "ready", "happy", "sad", "hungry", "thirsty", "tired",
    "sure", "fine", "good", "okay", "ok", "sorry", "back", "done", "home",
    "stuck", "new", "not", "just", "still", "also", "really", "using",
})

TEMPORAL_WORDS = frozenset({
    "later", "tomorrow", "tonight", "soon", "yesterday", "morning", "evening",
    "afternoon", "back", "asap", "now", "today",
})

# Tags that never start or make up a name.
FUNCTION_TAGS = (
    "Pronoun", "Preposition", "Conjunction", "Determiner", "Adverb", "Modal",
    "Negative", "Copula", "QuestionWord",
)

_NAME_WORD = re.compile(r"^[A-Za-z][A-Za-z'\-]*$")

MAX_NAME_WORDS = 3


def _name_words(view: View) -> List[str]:
    """Leading plain words of a span, up to MAX_NAME_WORDS."""
    out: List[str] = []
    for tok in view.tokens:
        if not tok.text or not _NAME_WORD.match(tok.text):
            break
        if any(tok.is_(tag) for tag in FUNCTION_TAGS):
            break
        out.append(tok.text)
        if len(out) == MAX_NAME_WORDS or tok.post:
            break
    return out


def _parse_name(match: Match):
    words = _name_words(match.group())
    return {"type": "name", "value": " ".join(words)} if words else None


def _parse_implicit_name(match: Match):
    group = match.group()
    if any(t.is_("Adjective") or t.is_("Verb") or t.is_("Gerund") for t in group.tokens):
        return None
    words = _name_words(group)
    if len(words) != len(group):
        return None
    return {"type": "name", "value": " ".join(words)}


def _parse_alias(match: Match):
    view = match.group()
    tokens = [t for t in view.tokens if t.normal not in DETERMINERS]
    if not tokens:
        return None
    first = tokens[0]
    if first.normal in TEMPORAL_WORDS or first.is_("Adjective") or any(first.is_(tag) for tag in FUNCTION_TAGS):
        return None
    return {"type": "alias", "value": first.text or first.normal}


def _following(match: Match):
    end = match.offset + len(match)
    return match.window[end] if end < len(match.window) else None


def _parse_age(match: Match):
    if "i" not in match.before(5).words() and "i" not in match.words():
        return None
    nxt = _following(match)
    if nxt is not None and nxt.is_("Noun") and not nxt.is_("Conjunction"):
        return None
    numbers = match.group().numbers()
    if not numbers:
        return None
    return {"type": "age", "value": int(numbers[0])}


def _parse_role(match: Match):
    text = match.group().text()
    return {"type": "role", "value": text} if text else None


def _role_value(raw: str) -> Optional[str]:
    value = drop_words(cut_clause(raw.lower()), DETERMINERS)
    value = normalize_candidate(value, min_length=2, max_length=50, blocklist=ROLE_BLOCKLIST)
    if value is None:
        return None
    head = value.split()[-1]
    if head in ROLE_BLOCKLIST:
        return None
    return value


STRATEGIES = (
    Strategy(
        name="legal",
        confidence=0.95,
        pattern="(my|his|her|the) (real|full|legal|first|last) name is [.+]",
        parse=_parse_name,
        fields={"subtype": "legal"},
    ),
    Strategy(
        name="explicit",
        confidence=0.90,
        pattern="(my|our) name is [.+]",
        parse=_parse_name,
        fields={"subtype": "explicit"},
    ),
    Strategy(
        name="implicit",
        confidence=0.80,
        pattern="^ i am [#TitleCase #TitleCase?] $",
        parse=_parse_implicit_name,
        fields={"subtype": "implicit"},
    ),
    Strategy(
        name="alias",
        confidence=0.85,
        pattern="(go by|goes by|known as|nickname is|alias is|username is|handle is) [.+]",
        parse=_parse_alias,
        fields={"subtype": "alias"},
    ),
    Strategy(
        name="call_me",
        confidence=0.85,
        pattern="call me [.+]",
        parse=_parse_alias,
        fields={"subtype": "alias"},
    ),
    Strategy(
        name="age",
        confidence=0.95,
        pattern="[#Value] (years old|year old|yrs old|yr old|yo)",
        parse=_parse_age,
        group="age",
        fields={"subtype": "explicit"},
    ),
    Strategy(
        name="age_bare",
        confidence=0.60,
        pattern="i am [#Value] $",
        parse=_parse_age,
        group="age",
        fallback=True,
        fields={"subtype": "implicit"},
    ),
    Strategy(
        name="role",
        confidence=0.85,
        pattern="i (am|was) (a|an) [#Adjective* #Noun+]",
        parse=_parse_role,
        fields={"subtype": "explicit"},
    ),
    Strategy(
        name="role_as",
        confidence=0.85,
        pattern="(as|speaking as) (a|an) [#Adjective* #Noun+]",
        parse=_parse_role,
        fields={"subtype": "implicit"},
    ),
    Strategy(
        name="role_work",
        confidence=0.90,
        pattern="i (work|am working) as (a|an)? [#Adjective* #Noun+]",
        parse=_parse_role,
        fields={"subtype": "explicit"},
    ),
    Strategy(
        name="role_title",
        confidence=0.90,
        pattern="(my|our) (role|job title|title|position) is [.+]",
        parse=_parse_role,
        fields={"subtype": "explicit"},
    ),
)


def _valid_name(value: str) -> bool:
    words = value.lower().split()
    if not words or any(w in NOT_NAMES or w in TEMPORAL_WORDS for w in words):
        return False
    if get_taxonomy().tool_type(value.lower()) is not None:
        return False
    return all(len(w) >= 2 for w in words)


def validate(candidate: Candidate) -> Optional[Dict[str, object]]:
    kind = candidate.get("type")
    value = candidate.get("value")
    subtype = candidate.get("subtype")

    if kind == "age":
        if not isinstance(value, int):
            return None
        low = 18 if candidate.strategy.name == "age_bare" else 1
        if not low <= value < (100 if low == 18 else 120):
            return None
        return {"type": "age", "value": value, "subtype": subtype}

    if not isinstance(value, str):
        return None

    if kind == "role":
        role = _role_value(value)
        if role is None or get_taxonomy().tool_type(role) is not None:
            return None
        return {"type": "role", "value": role, "subtype": subtype}

    if kind in ("name", "alias"):
        cleaned = normalize_candidate(value, min_length=2, max_length=50, lower=False)
        if cleaned is None or not _valid_name(cleaned):
            return None
        return {"type": kind, "value": cleaned, "subtype": subtype}

    return None


def dedup_key(identity: Identity) -> str:
    return f"{identity.type}:{str(identity.value).lower()}"


CATEGORY = Category(
    name="identity",
    item_type=Identity,
    primary="value",
    strategies=STRATEGIES,
    validate=validate,
    key=dedup_key,
)


def extract_identity(text: str) -> List[Identity]:
    """Extract identity claims from text. Never raises."""
    return run_category(CATEGORY, text)
