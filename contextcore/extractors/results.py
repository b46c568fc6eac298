"""Result extraction: outcomes and what caused them."""

from __future__ import annotations

from typing import Dict, List, Optional

from ..analyzer import Match, View
from ..pipeline import Candidate, Category, Strategy, run_category
from ..types import Result
from ..utils import (
    CLAUSE_BREAKS,
    DETERMINERS,
    cut_clause,
    drop_words,
    first_phrase,
    normalize_candidate,
    normalize_text,
)

MIN_LENGTH = 3
MAX_LENGTH = 200

# Short device names ("pc", "os") are valid sources.
SOURCE_MIN_LENGTH = 2

BLOCKLIST = frozenset({"it", "that", "this", "something", "anything", "nothing", "stuff"})

# Extra words dropped from outcome subjects ("all local files" -> "local files").
QUANTIFIERS = ("all", "every", "most", "some", "any", "both", "entire", "whole")

# Source phrasings that name a known system event.
SOURCE_EVENTS = (
    ("system_reset", ("reset", "resetting", "resets", "reinstall", "reinstalling", "format", "formatting", "factory reset")),
    ("system_upgrade", ("upgrade", "upgrading", "upgraded", "update", "updating", "updated")),
    ("system_failure", ("crash", "crashed", "crashing", "failure", "power outage")),
)

OUTCOME_STOPS = CLAUSE_BREAKS + ("which", "so", "when", "after", "before")


def _clean(text: str) -> str:
    text = cut_clause(text.lower(), OUTCOME_STOPS)
    return drop_words(drop_words(text, DETERMINERS), QUANTIFIERS)


def _source(view: View) -> str:
    text = _clean(view.text())
    for event, cues in SOURCE_EVENTS:
        if first_phrase(text, cues):
            return event
    return text


def _nominal(token) -> bool:
    return (token.is_("Noun") or token.is_("Adjective")) and not token.is_("Pronoun")


def _split_subject(view: View):
    """Split "resetting my PC, all local files" into cause and subject.

    The last comma decides; without one the trailing noun run is the subject.
    """
    tokens = view.tokens
    cut = None
    for i, tok in enumerate(tokens[:-1]):
        if tok.is_("Comma"):
            cut = i + 1
    if cut is None:
        cut = len(tokens)
        while cut > 1 and _nominal(tokens[cut - 1]):
            cut -= 1
        while cut > 1 and (tokens[cut - 1].is_("Determiner") or tokens[cut - 1].is_("Possessive")):
            cut -= 1
    return View(tokens[:cut], view.window, view.offset), View(tokens[cut:], view.window, view.offset + cut)


def _parse_causal(match: Match):
    return {"source": _source(match.group("source")), "outcome": _clean(match.group("outcome").text())}


def _parse_passive(match: Match):
    cause, subject = _split_subject(match.group("source"))
    if not cause or not subject:
        return None
    verb = match.group("verb").normal()
    return {"source": _source(cause), "outcome": f"{_clean(subject.text())} {verb}"}


def _parse_destructive(match: Match):
    target = _clean(match.group("target").text())
    if not target:
        return None
    verb = match.group("verb").normal()
    return {"source": _source(match.group("source")), "outcome": f"{verb} {target}"}


def _parse_status(match: Match):
    return {"source": _source(match.group("source")), "outcome": match.group("verb").normal()}


def _parse_user(match: Match):
    target = _clean(match.group("target").text())
    if not target:
        return None
    return {"source": "user action", "outcome": f"{match.group('verb').normal()} {target}"}


STRATEGIES = (
    Strategy(
        name="causal",
        confidence=0.90,
        pattern="[<source> .+] (caused|resulted in|led to|triggered) [<outcome> .+]",
        parse=_parse_causal,
    ),
    Strategy(
        name="passive",
        confidence=0.90,
        pattern=(
            "(after|when|once) [<source> .+] (was|were|got|has been|have been) #Adverb? "
            "[<verb> (wiped|deleted|lost|erased|corrupted|removed|destroyed)]"
        ),
        parse=_parse_passive,
    ),
    Strategy(
        name="destructive",
        confidence=0.90,
        pattern=(
            "[<source> #Gerund? #Determiner? #Possessive? #Adjective* #Noun+] "
            "[<verb> (wiped|deleted|broke|destroyed|crashed|corrupted|erased)] [<target> .+]"
        ),
        parse=_parse_destructive,
    ),
    Strategy(
        name="status",
        confidence=0.85,
        pattern=(
            "[<source> #Gerund? #Determiner? #Possessive? #Adjective* #Noun+] "
            "[<verb> (succeeded|failed|passed|worked|completed|finished)]"
        ),
        parse=_parse_status,
    ),
    Strategy(
        name="user_action",
        confidence=0.85,
        pattern="(i|we) [<verb> (passed|cleared|completed|finished|failed|won|lost)] [<target> .+]",
        parse=_parse_user,
    ),
    Strategy(
        name="trigger",
        confidence=0.80,
        pattern="(after|when|once) [<source> .+] [<verb> (happened|occurred|worked|broke)]",
        parse=_parse_status,
    ),
)


def validate(candidate: Candidate) -> Optional[Dict[str, object]]:
    if candidate.question:
        return None
    outcome = normalize_candidate(
        candidate.get("outcome"), min_length=MIN_LENGTH, max_length=MAX_LENGTH, blocklist=BLOCKLIST
    )
    source = normalize_candidate(
        candidate.get("source"), min_length=SOURCE_MIN_LENGTH, max_length=MAX_LENGTH, blocklist=BLOCKLIST
    )
    if outcome is None or source is None:
        return None
    return {"outcome": outcome, "source": source}


def dedup_key(result: Result) -> str:
    return normalize_text(result.outcome)[:50]


CATEGORY = Category(
    name="results",
    item_type=Result,
    primary="outcome",
    strategies=STRATEGIES,
    validate=validate,
    key=dedup_key,
)


def extract_results(text: str) -> List[Result]:
    """Extract causal results from text. Never raises."""
    return run_category(CATEGORY, text)
