"""Job extraction: ongoing work the writer is doing right now.

A job is work in progress ("building an esp32 sensor project"). Plans belong
to goals, finished work to experiences, and one-off happenings to events, so
a clause carrying goal-tense, completed-tense or past-event markers is
rejected. The one exception is paused work, which is kept with status
``paused`` even when the sentence also talks about the past.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from ..analyzer import Match, get_lexicon
from ..cues import COMPLETED_CUES, GOAL_CUES, PAUSED_CUES, get_taxonomy
from ..pipeline import Candidate, Category, Scorer, Strategy, run_category
from ..types import Job
from ..utils import (
    CLAUSE_BREAKS,
    DETERMINERS,
    contains_any,
    cut_clause,
    drop_words,
    first_word,
    normalize_candidate,
    strip_trailing,
)

MIN_LENGTH = 3
MAX_LENGTH = 200

JOB_STOPS = CLAUSE_BREAKS + (
    "after", "before", "when", "for", "with", "using", "in order to", "to",
    "which", "that is", "right now", "at the moment",
)

VAGUE_TITLES = frozenset({
    "stuff", "things", "something", "anything", "everything", "nothing", "it",
    "this", "that", "what", "email", "emails", "message", "reply", "late",
    "out", "it out", "things out", "on it", "myself", "home", "away",
})

TEMPORAL_TAIL = ("now", "today", "currently", "lately", "tonight", "again", "too", "still")

# Identity phrasing: "working as a developer" is a role.
IDENTITY_MARKERS = ("working as", "work as", "employed as", "hired as", "my role", "my position")

PAST_EVENT_MARKERS = (
    "yesterday", "last night", "this morning", "earlier today", "just now",
    "ago", "last week", "one time",
)

COMPLETING = (
    "almost done", "nearly done", "nearly finished", "almost finished",
    "wrapping up", "finishing up", "about to finish", "final touches",
    "close to finishing",
)

DOMAINS = (
    ("education", (
        "exam", "exams", "thesis", "course", "assignment", "homework",
        "final year project", "dissertation", "degree", "coursework", "test",
        "preparation",
    )),
    ("hardware", (
        "esp32", "esp8266", "arduino", "sensor", "circuit", "pcb", "robot",
        "raspberry pi", "hardware", "drone", "firmware", "embedded",
    )),
    ("data", (
        "data", "analytics", "machine learning", "dashboard", "pipeline",
        "model", "database", "etl", "dataset",
    )),
    ("software", (
        "app", "website", "api", "backend", "frontend", "code", "software",
        "platform", "bot", "library", "tool", "script", "plugin", "extension",
        "game", "service", "system", "web", "cli",
    )),
    ("design", ("design", "logo", "ui", "ux", "mockup", "figma", "branding", "redesign")),
    ("research", ("research", "paper", "study", "experiment", "survey")),
    ("business", (
        "startup", "business", "company", "client", "clients", "marketing",
        "sales", "store", "shop", "customer support",
    )),
    ("writing", ("book", "novel", "blog", "article", "essay", "newsletter", "story")),
)

JOB_SCORER = Scorer(floor=0.5, ceiling=0.98)


def _title(raw: str) -> str:
    text = cut_clause(raw.lower(), JOB_STOPS)
    text = drop_words(text, DETERMINERS)
    return strip_trailing(text, TEMPORAL_TAIL)


def _domain(title: str) -> Optional[str]:
    for domain, keywords in DOMAINS:
        if contains_any(title, keywords):
            return domain
    return None


def _status(sentence: str) -> str:
    if contains_any(sentence, PAUSED_CUES):
        return "paused"
    if contains_any(sentence, COMPLETING):
        return "completing"
    return "active"


def _clause(match: Match, group_offset: int, title: str) -> str:
    """The matched words up to the cut title, plus a little left context."""
    lead = " ".join(t.normal for t in match.tokens[: group_offset - match.offset])
    return " ".join(p for p in (match.before(3).normal(), lead, title) if p)


def _parse(match: Match):
    group = match.group()
    title = _title(group.text())
    return {"title": title, "clause": _clause(match, group.offset, title)}


def _parse_preparation(match: Match):
    title = _title(match.group().text())
    return {"title": f"{title} preparation", "clause": match.normal()} if title else None


def _parse_work(match: Match):
    return {"title": _title(match.group("work").text()), "clause": match.normal()}


STRATEGIES = (
    Strategy(
        name="building",
        confidence=0.96,
        pattern=(
            "(i|we) (am|are)? (currently|actively|now)? (working on|building|developing|"
            "creating|designing|implementing|coding|writing) [.+]"
        ),
        parse=_parse,
    ),
    Strategy(
        name="preparation",
        confidence=0.95,
        pattern="(studying|preparing|revising) for [.+]",
        parse=_parse_preparation,
    ),
    Strategy(
        name="employment",
        confidence=0.94,
        pattern="(working at|working for|work at|work for) [<org> #Noun+] (handling|managing|running|leading) [<work> .+]",
        parse=_parse_work,
    ),
    Strategy(
        name="ongoing",
        confidence=0.92,
        pattern="(currently|actively|now) (working on|building|developing) [.+]",
        parse=_parse,
    ),
    Strategy(
        name="maintaining",
        confidence=0.85,
        pattern="(i|we) (am|are)? (maintaining|managing|supporting|running|operating) [.+]",
        parse=_parse,
    ),
    Strategy(
        name="paused",
        confidence=0.85,
        pattern="(i|we) (paused|shelved|suspended|put on hold|stopped working on|put aside) [.+]",
        parse=_parse,
        fields={"status": "paused"},
    ),
    Strategy(
        name="side_project",
        confidence=0.80,
        pattern="(my|our) [(side|personal|pet|hobby) (project|startup|business)]",
        parse=_parse,
    ),
    Strategy(
        name="named_project",
        confidence=0.75,
        pattern="(my|our) (project|startup|app) (called|named) [.+]",
        parse=_parse,
    ),
)


def validate(candidate: Candidate) -> Optional[Dict[str, object]]:
    title = normalize_candidate(
        candidate.get("title"),
        min_length=MIN_LENGTH,
        max_length=MAX_LENGTH,
        blocklist=VAGUE_TITLES,
    )
    if title is None:
        return None
    lex = get_lexicon()
    head = first_word(title)
    if lex.has("prepositions", head) or lex.has("adverbs", head) or lex.has("copulas", head):
        return None

    clause = candidate.get("clause") or candidate.span
    status = candidate.get("status") or _status(candidate.sentence)
    if status != "paused":
        if contains_any(clause, GOAL_CUES):
            return None
        if contains_any(clause, COMPLETED_CUES) or contains_any(clause, PAST_EVENT_MARKERS):
            return None
    if contains_any(clause, IDENTITY_MARKERS):
        return None

    taxonomy = get_taxonomy()
    if taxonomy.is_skill(title) or taxonomy.tool_type(title) is not None:
        return None

    return {"title": title, "status": status, "domain": _domain(title)}


def dedup_key(job: Job) -> str:
    return job.title.lower().replace(" ", "_")[:100]


CATEGORY = Category(
    name="jobs",
    item_type=Job,
    primary="title",
    strategies=STRATEGIES,
    validate=validate,
    key=dedup_key,
    scorer=JOB_SCORER,
)


def extract_jobs(text: str) -> List[Job]:
    """Extract ongoing jobs from text. Never raises."""
    return run_category(CATEGORY, text)
