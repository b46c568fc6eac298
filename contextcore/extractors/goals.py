"""Goal extraction: things the writer wants to achieve.

A goal is a desired, not-yet-reached state ("migrate my workflow to linux").
Each description gets a horizon (short/medium/long), a status and a coarse
life-area category.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional

from ..analyzer import Match, get_lexicon
from ..cues import HARM_VERBS, PREDICTION_CUES, RISK_CUES
from ..pipeline import Candidate, Category, Strategy, run_category
from ..types import Goal
from ..utils import (
    CLAUSE_BREAKS,
    DETERMINERS,
    contains_any,
    cut_clause,
    drop_words,
    first_word,
    normalize_candidate,
    normalize_text,
    strip_leading,
)

MIN_LENGTH = 5
MAX_LENGTH = 200

# "and" is handled separately so "clean X and set up Y" yields two goals.
GOAL_STOPS = tuple(b for b in CLAUSE_BREAKS if b != "and") + ("so i", "so we", "until", "before i")

BLOCKLIST = frozenset({
    "it", "that", "this", "something", "anything", "everything", "nothing",
    "stuff", "things", "more", "do it", "do that", "do this", "do something",
})

VAGUE = frozenset({
    "better", "things", "stuff", "more", "be better", "do better", "get better",
    "be happy", "be good", "improve", "change", "go", "see", "try", "know",
    "do more", "be more", "have fun", "relax", "chill", "sleep",
})

# Verbs that turn a "goal" into a question for the assistant.
QUESTION_VERBS = ("know", "ask", "find out", "ask you", "check if", "check whether")

ACHIEVEMENT_VERBS = ("achieve", "accomplish", "reach", "attain")

FILLER_ADVERBS = frozenset({"fully", "really", "properly", "finally", "actually", "just"})

HORIZON_INDICATORS = (
    ("short", (
        "today", "tonight", "this week", "this weekend", "next week", "soon",
        "asap", "as soon as possible", "tomorrow", "immediately", "quickly",
        "in a few days", "by tomorrow", "by friday", "this afternoon",
    )),
    ("medium", (
        "this month", "next month", "this year", "in a few months",
        "in a few weeks", "this quarter", "next quarter", "this semester",
        "by summer", "by the end of the year",
    )),
    ("long", (
        "next year", "someday", "eventually", "one day", "in the future",
        "long term", "long-term", "in a few years", "in five years",
        "in 5 years", "in ten years", "before i retire", "lifelong",
    )),
)

TASK_VERBS = (
    "reset", "fix", "install", "uninstall", "clean", "clean up", "set up",
    "setup", "update", "upgrade", "back up", "backup", "delete", "remove",
    "organize", "finish", "submit", "send", "order", "format", "configure",
    "repair", "restart", "reinstall", "wipe", "sort out", "tidy", "pay",
    "book", "call", "email", "download",
)

CATEGORIES = (
    ("career", (
        "career", "job", "promotion", "promoted", "engineer", "engineering",
        "developer", "hired", "salary", "resume", "interview", "backend",
        "frontend", "full stack", "senior", "manager", "profession", "become",
    )),
    ("education", (
        "learn", "study", "degree", "course", "exam", "exams", "certification",
        "graduate", "school", "university", "college", "master", "phd", "class",
    )),
    ("health", (
        "lose weight", "weight", "fitness", "gym", "exercise", "run",
        "marathon", "healthy", "health", "diet", "sleep better", "workout",
        "meditate", "quit smoking",
    )),
    ("financial", (
        "save", "saving", "money", "debt", "invest", "investing", "budget",
        "retire", "financial", "income", "buy a house", "mortgage", "afford",
    )),
    ("relationship", (
        "friends", "family", "partner", "relationship", "marry", "married",
        "date", "dating", "kids", "parents",
    )),
    ("technical", (
        "code", "app", "server", "setup", "environment", "install", "linux",
        "windows", "macos", "pc", "computer", "laptop", "storage", "docker",
        "workflow", "database", "deploy", "api", "website", "project", "system",
        "reset", "migrate", "backup", "software", "hardware", "dev",
    )),
    ("lifestyle", (
        "travel", "move", "cook", "read more", "hobby", "garden", "home",
        "house", "vacation", "live",
    )),
    ("personal", (
        "confidence", "confident", "habit", "habits", "mindset", "happier",
        "myself", "discipline", "focus",
    )),
)

PAUSED = ("paused", "on hold", "put on hold", "shelved", "postponed", "on pause")
COMPLETING = (
    "almost", "nearly", "finishing", "wrapping up", "close to", "final stages",
    "last step", "about to finish",
)


def _starts_with(text: str, phrases) -> bool:
    return any(text == p or text.startswith(p + " ") for p in phrases)


def _split_goals(raw: str) -> List[str]:
    """Cut a raw span at clause breaks and split verb-led "and" conjuncts."""
    head = cut_clause(raw, GOAL_STOPS)
    parts = re.split(r"\s+and\s+", head, flags=re.IGNORECASE)
    lex = get_lexicon()
    out = [parts[0]]
    for part in parts[1:]:
        if lex.has("verbs", first_word(part)):
            out.append(part)
        else:
            out[-1] = f"{out[-1]} and {part}"
    return [p for p in out if p.strip()]


def _clean(description: str) -> str:
    text = description.lower()
    text = strip_leading(text, ("to",))
    text = drop_words(text, DETERMINERS | FILLER_ADVERBS)
    words = text.split()
    if len(words) > 1 and words[0] in ACHIEVEMENT_VERBS:
        text = " ".join(words[1:])
    return text


def _horizon(description: str, scope: str) -> str:
    for horizon, phrases in HORIZON_INDICATORS:
        if contains_any(scope, phrases):
            return horizon
    category = _category(description)
    if _starts_with(description, TASK_VERBS):
        return "short"
    if category in ("career", "financial"):
        return "long"
    return "medium"


def _category(description: str) -> str:
    for name, keywords in CATEGORIES:
        if contains_any(description, keywords):
            return name
    return "general"


def _status(scope: str) -> str:
    if contains_any(scope, PAUSED):
        return "paused"
    if contains_any(scope, COMPLETING):
        return "completing"
    return "active"


# ── Parsers ──────────────────────────────────────────────────────────────────

def _parse(match: Match):
    return [{"description": part} for part in _split_goals(match.group().text())]


def _parse_become(match: Match):
    return [{"description": "become " + part} for part in _split_goals(match.group().text())]


def _parse_acquire(match: Match):
    verb = match.group("verb").normal()
    return [{"description": f"{verb} {part}"} for part in _split_goals(match.group("object").text())]


def _parse_future(match: Match):
    return [{"description": part, "horizon": "long"} for part in _split_goals(match.group().text())]


STRATEGIES = (
    Strategy(
        name="explicit",
        confidence=0.95,
        pattern="(my|our) (goal|objective|aim|dream|plan) is to [.+]",
        parse=_parse,
    ),
    Strategy(
        name="desire",
        confidence=0.85,
        pattern="(i|we) #Adverb? (want to|need to|wanna) [.+]",
        parse=_parse,
    ),
    Strategy(
        name="aspiration",
        confidence=0.90,
        pattern="(i|we) #Adverb? (aim|aspire|hope|plan|intend) to [.+]",
        parse=_parse,
    ),
    Strategy(
        name="intention",
        confidence=0.80,
        pattern="(i|we) #Adverb? (would like|would love) to [.+]",
        parse=_parse,
    ),
    Strategy(
        name="intention",
        confidence=0.80,
        pattern="(i|we) (will|am going to|are going to) [.+]",
        parse=_parse,
    ),
    Strategy(
        name="effort",
        confidence=0.85,
        pattern="(looking|trying|working|planning|hoping) to [.+]",
        parse=_parse,
    ),
    Strategy(
        name="achievement",
        confidence=0.85,
        pattern="to (achieve|accomplish|reach|attain) [.+]",
        parse=_parse,
    ),
    Strategy(
        name="transformation",
        confidence=0.80,
        pattern="to become (a|an)? [.+]",
        parse=_parse_become,
    ),
    Strategy(
        name="acquisition",
        confidence=0.75,
        pattern="(want|need|hope|plan|planning|hoping) to [<verb> (get|buy|land)] [<object> .+]",
        parse=_parse_acquire,
    ),
    Strategy(
        name="future",
        confidence=0.75,
        pattern="(next year|someday|eventually|one day|in the future) (i|we) (will|want to|would like to|plan to|hope to) [.+]",
        parse=_parse_future,
    ),
    Strategy(
        name="deadline",
        confidence=0.80,
        pattern="by (next|this|the end of)? #Date+ (i|we) (will|want to|need to|have to|should) [.+]",
        parse=_parse,
    ),
)

def _predicts_harm(candidate: Candidate, description: str) -> bool:
    """"I will lose my job" is a prediction, not a goal."""
    if not _starts_with(description, HARM_VERBS):
        return False
    matched = candidate.match.normal() if candidate.match is not None else candidate.sentence
    return contains_any(matched, PREDICTION_CUES)


# Verbs that never start a goal ("I will be late", "I want to say thanks").
NON_GOAL_STARTS = frozenset({"be", "have", "say", "tell", "ask", "see", "let", "go", "not"})


def validate(candidate: Candidate) -> Optional[Dict[str, object]]:
    raw = candidate.get("description")
    if not isinstance(raw, str) or candidate.question or "?" in raw:
        return None
    description = normalize_candidate(
        _clean(raw),
        min_length=MIN_LENGTH,
        max_length=MAX_LENGTH,
        blocklist=BLOCKLIST,
        min_alpha=3,
    )
    if description is None or description in VAGUE:
        return None
    if first_word(description) in NON_GOAL_STARTS or _starts_with(description, QUESTION_VERBS):
        return None
    if contains_any(candidate.sentence, RISK_CUES) or _predicts_harm(candidate, description):
        return None

    before = candidate.match.before(6).normal() if candidate.match is not None else ""
    scope = f"{before} {description}"
    horizon = candidate.get("horizon") or _horizon(description, scope)
    return {
        "description": description,
        "horizon": horizon,
        "status": _status(candidate.sentence),
        "category": _category(description),
        "subtype": candidate.get("subtype") or candidate.strategy.name,
    }


def dedup_key(goal: Goal) -> str:
    return normalize_text(goal.description)[:50]


CATEGORY = Category(
    name="goals",
    item_type=Goal,
    primary="description",
    strategies=STRATEGIES,
    validate=validate,
    key=dedup_key,
)


def extract_goals(text: str) -> List[Goal]:
    """Extract goals from text. Never raises; returns [] when nothing is found."""
    return run_category(CATEGORY, text)
