"""Experience extraction: past work and situations with lasting relevance."""

from __future__ import annotations

import re
from typing import Dict, Iterator, List, Optional

from ..analyzer import Match
from ..pipeline import Candidate, Category, Strategy, run_category
from ..types import Experience
from ..utils import CLAUSE_BREAKS, cut_clause, normalize_candidate, normalize_text, strip_leading

MIN_LENGTH = 5
MAX_LENGTH = 200

BLOCKLIST = frozenset({
    "it", "that", "this", "something", "anything", "nothing", "stuff",
    "things", "one", "way",
})

EXPERIENCE_STOPS = CLAUSE_BREAKS + ("before", "which", "when", "now", "so")

_WORKED_WITH = re.compile(r"\b(?:i|we) (?:have |had )?worked with ([^.;!?]+)")
_BUILT_BEFORE = re.compile(r"\b(?:i|we) (?:have |had )?built ([^.;!?]+?) before\b")
_PAST_MARKER = re.compile(r"\b(?:previously|in the past|back when),? ([^.;!?]+)")


def _description(raw: str) -> str:
    return cut_clause(raw.lower(), EXPERIENCE_STOPS)


def _scan_worked_with(text: str) -> Iterator[str]:
    for m in _WORKED_WITH.finditer(text):
        what = _description(m.group(1))
        if what:
            yield f"worked with {what}"


def _scan_built(text: str) -> Iterator[str]:
    for m in _BUILT_BEFORE.finditer(text):
        what = m.group(1).strip()
        if what and _description(what) == what:
            yield f"built {what} previously"


def _scan_past(text: str) -> Iterator[str]:
    for m in _PAST_MARKER.finditer(text):
        yield strip_leading(_description(m.group(1)), ("i", "we"))


def _parse_verb(match: Match):
    verb = match.group("verb").normal()
    what = _description(match.group("what").text())
    return f"{verb} {what}" if what else None


def _parse_habit(match: Match):
    return _description(match.group().text())


def _parse_experience(match: Match):
    what = _description(match.group().text())
    return f"experience with {what}" if what else None


STRATEGIES = (
    Strategy(
        name="worked_with",
        confidence=0.90,
        scan=_scan_worked_with,
    ),
    Strategy(
        name="built_before",
        confidence=0.85,
        scan=_scan_built,
    ),
    Strategy(
        name="lived_through",
        confidence=0.85,
        pattern=(
            "(i|we) [<verb> (faced|experienced|encountered|handled|dealt with|went through|survived)] "
            "[<what> .+]"
        ),
        parse=_parse_verb,
    ),
    Strategy(
        name="habit",
        confidence=0.80,
        pattern="(i|we) (previously|once|used to) [.+]",
        parse=_parse_habit,
    ),
    Strategy(
        name="experience",
        confidence=0.90,
        pattern="(i|we) have (some|a lot of|years of|prior)? experience (with|in) [.+]",
        parse=_parse_experience,
    ),
    Strategy(
        name="past_marker",
        confidence=0.75,
        scan=_scan_past,
        fallback=True,
    ),
)


def validate(candidate: Candidate) -> Optional[Dict[str, object]]:
    if candidate.match is not None and candidate.question:
        return None
    description = normalize_candidate(
        candidate.get("description"),
        min_length=MIN_LENGTH,
        max_length=MAX_LENGTH,
        blocklist=BLOCKLIST,
    )
    if description is None:
        return None
    return {"description": description}


def dedup_key(experience: Experience) -> str:
    return normalize_text(experience.description)[:50]


CATEGORY = Category(
    name="experiences",
    item_type=Experience,
    primary="description",
    strategies=STRATEGIES,
    validate=validate,
    key=dedup_key,
)


def extract_experiences(text: str) -> List[Experience]:
    """Extract past experiences from text. Never raises."""
    return run_category(CATEGORY, text)
