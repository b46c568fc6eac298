"""Preference extraction: stated likes and dislikes.

Only explicit preference verbs count. "Want" is never read as a preference
(that is a goal), and a comparison ("X over Y") is kept on the item rather
than producing a second, negative item for Y.
"""

from __future__ import annotations

import re
from typing import Dict, Iterator, List, Optional, Tuple

from ..analyzer import Match
from ..pipeline import Candidate, Category, Strategy, run_category
from ..types import Preference
from ..utils import (
    CLAUSE_BREAKS,
    DETERMINERS,
    contains_any,
    cut_clause,
    normalize_candidate,
    snake_case,
    strip_leading,
    strip_trailing,
)

MIN_LENGTH = 2
MAX_LENGTH = 150

BLOCKLIST = frozenset({
    "it", "that", "this", "something", "anything", "nothing", "everything",
    "stuff", "things", "way", "one", "what", "how", "when", "where", "why",
    "you", "them", "him", "her", "me", "us", "those", "these", "it a lot",
    "that a lot", "it more", "this one", "that one",
})

PREFERENCE_STOPS = CLAUSE_BREAKS + ("until", "when", "if", "whenever", "for now", "so")

COMPARISON = re.compile(r"\s(?:over|rather than|instead of|more than|than|to)\s")

LEADING = ("to", "doing", "using", "having", "going", "a", "an", "the", "my", "our", "being")

TRAILING = ("more", "better", "most", "best", "a lot", "lot", "instead", "too", "anyway")

DOMAINS = (
    ("mode", (
        "dark mode", "light mode", "dark theme", "light theme", "night mode",
        "dark", "light", "theme",
    )),
    ("os", ("linux", "windows", "macos", "mac os", "ubuntu", "debian", "fedora", "android", "ios")),
    ("editor", (
        "vscode", "vs code", "vim", "neovim", "emacs", "sublime", "intellij",
        "pycharm", "editor", "ide",
    )),
    ("language", (
        "python", "javascript", "typescript", "java", "rust", "golang", "c++",
        "c#", "ruby", "php", "kotlin", "swift",
    )),
    ("framework", (
        "react", "vue", "angular", "svelte", "django", "flask", "fastapi",
        "rails", "laravel", "next.js", "express", "spring", "framework",
    )),
    ("browser", ("chrome", "firefox", "safari", "edge", "brave", "opera", "browser")),
    ("work_mode", (
        "offline", "online", "remote", "remotely", "from home", "in office",
        "in the office", "hybrid", "async", "asynchronous", "alone", "in a team",
    )),
    ("time", ("morning", "mornings", "night", "nights", "evening", "evenings", "early", "late")),
    ("communication", (
        "email", "emails", "text", "texts", "call", "calls", "phone call",
        "video call", "chat", "slack", "messages", "meetings",
    )),
)

DEFAULT_PATTERN = re.compile(
    r"\b(?:by default,? (?:i|we) (?:use|go with|pick|choose|run)"
    r"|(?:i|we) (?:default to|stick to|stick with|always go with))\s+([^.!?;]+)"
)


def _domain(value: str, comparison: Optional[str]) -> str:
    text = f"{value} {comparison or ''}"
    for key, keywords in DOMAINS:
        if contains_any(text, keywords):
            return key
    return "general"


def _clean(raw: str) -> str:
    text = cut_clause(raw.lower(), PREFERENCE_STOPS)
    text = strip_leading(text, LEADING)
    return strip_trailing(text, TRAILING)


def _split_comparison(raw: str) -> Tuple[str, Optional[str]]:
    text = " " + strip_leading(raw.lower(), ("to",)) + " "
    m = COMPARISON.search(text)
    if not m:
        return text.strip(), None
    return text[:m.start()].strip(), text[m.end():].strip()


def _parse_prefer(match: Match):
    value, other = _split_comparison(match.group().text())
    fields = {"value": value, "polarity": "positive"}
    if other:
        fields.update(comparison=other, confidence=0.95)
    return fields


def _parse(polarity: str):
    def parse(match: Match):
        return {"value": match.group().text(), "polarity": polarity}
    return parse


def _parse_favorite(match: Match):
    noun = match.group("noun").normal() if "noun" in match.groups else ""
    return {"value": match.group("value").text(), "polarity": "positive", "noun": noun}


def _scan_defaults(text: str) -> Iterator[Dict[str, object]]:
    for m in DEFAULT_PATTERN.finditer(text):
        yield {"value": m.group(1), "polarity": "positive"}


STRATEGIES = (
    Strategy(
        name="prefer",
        confidence=0.90,
        pattern="(i|we) #Adverb? (prefer|prefers|would prefer|would rather) [.+]",
        parse=_parse_prefer,
    ),
    Strategy(
        name="like",
        confidence=0.85,
        pattern="(i|we) #Adverb? (like|love|enjoy|adore|appreciate) [.+]",
        parse=_parse("positive"),
    ),
    Strategy(
        name="dislike",
        confidence=0.90,
        pattern=(
            "(i|we) #Adverb? (do not like|dislike|hate|avoid|can not stand|do not want to use|"
            "do not enjoy|detest|despise|do not love) [.+]"
        ),
        parse=_parse("negative"),
    ),
    Strategy(
        name="habit",
        confidence=0.80,
        pattern=(
            "(i|we) (usually|normally|typically|always|generally|mostly) (use|choose|pick|go with|"
            "work with|stick with|work in|work on|work from|listen to) [.+]"
        ),
        parse=_parse("positive"),
    ),
    Strategy(
        name="habit",
        confidence=0.80,
        pattern="(i|we) tend to (use|choose|pick|go with|work with|stick with) [.+]",
        parse=_parse("positive"),
    ),
    Strategy(
        name="favorite",
        confidence=0.90,
        pattern="(my|our) (preference|default|favorite|favourite|go-to|preferred) [<noun> #Noun?] is [<value> .+]",
        parse=_parse_favorite,
    ),
    Strategy(
        name="default",
        confidence=0.75,
        scan=_scan_defaults,
        fallback=True,
    ),
)


def validate(candidate: Candidate) -> Optional[Dict[str, object]]:
    raw = candidate.get("value")
    if not isinstance(raw, str):
        return None
    value = normalize_candidate(_clean(raw), min_length=MIN_LENGTH, max_length=MAX_LENGTH, blocklist=BLOCKLIST)
    if value is None or value.split()[0] in BLOCKLIST:
        return None
    if value.split()[0] in DETERMINERS and len(value.split()) == 1:
        return None

    comparison = candidate.get("comparison")
    if comparison:
        comparison = normalize_candidate(
            _clean(comparison), min_length=MIN_LENGTH, max_length=MAX_LENGTH, blocklist=BLOCKLIST
        )

    key = _domain(value, comparison)
    noun = candidate.get("noun")
    if key == "general" and noun:
        key = snake_case(noun)

    return {
        "key": key,
        "value": value,
        "polarity": candidate.get("polarity") or "positive",
        "comparison": comparison or None,
    }


def dedup_key(preference: Preference) -> str:
    return f"{preference.key}:{preference.value[:50]}"


CATEGORY = Category(
    name="preferences",
    item_type=Preference,
    primary="value",
    strategies=STRATEGIES,
    validate=validate,
    key=dedup_key,
)


def extract_preferences(text: str) -> List[Preference]:
    """Extract preferences from text. Never raises."""
    return run_category(CATEGORY, text)
