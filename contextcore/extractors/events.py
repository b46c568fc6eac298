"""Event extraction: discrete happenings with tense and relevance decay.

Known events (outages, crashes, upgrades, resets, travel, meetings) are
detected by phrase; anything else that merely sounds like an event of a
broad type is reported as ``<type>_event`` at a lower confidence.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterator, List, Optional

from ..pipeline import Candidate, Category, Strategy, run_category
from ..types import Event, Temporal
from ..utils import contains_any, first_phrase

# Checked past, future, present; present is the default.
TENSES = (
    ("past", (
        "was", "were", "did", "had", "after", "yesterday", "last", "ago",
        "finished", "completed", "done", "went", "crashed", "stopped",
    )),
    ("future", ("will", "going to", "about to", "tomorrow", "later", "soon", "next")),
    ("present", ("am", "is", "are", "now", "right now", "currently", "at the moment", "today")),
)

# Checked long, medium, short; otherwise derived from the tense.
DECAYS = (
    ("long", ("last week", "last month", "last year", "ago", "before", "previously", "earlier this year")),
    ("medium", ("yesterday", "recently", "the other day", "earlier")),
    ("short", ("just", "now", "right now", "currently", "at the moment", "today", "this moment")),
)

DEVICES = ("laptop", "computer", "phone", "pc", "desktop", "tablet", "server")
TRAVEL_MODES = (("train", "train"), ("bus", "bus"), ("plane", "plane"), ("flight", "plane"), ("car", "car"))


def _device(text: str) -> Optional[Dict[str, str]]:
    device = first_phrase(text, DEVICES)
    return {"device": device} if device else None


def _travel_mode(text: str) -> Dict[str, str]:
    for word, mode in TRAVEL_MODES:
        if contains_any(text, (word,)):
            return {"mode": mode}
    return {"mode": "unknown"}


def _static(details: Optional[Dict[str, str]]) -> Callable[[str], Optional[Dict[str, str]]]:
    return lambda text: dict(details) if details else None


# (name, cues, details, confidence)
KNOWN_EVENTS = (
    (
        "internet_outage",
        ("internet went down", "internet outage", "connection dropped", "wifi went down", "internet is down"),
        _static(None),
        0.90,
    ),
    (
        "system_failure",
        ("laptop crashed", "computer crashed", "pc crashed", "phone crashed", "stopped booting", "crashed and stopped"),
        _device,
        0.90,
    ),
    (
        "system_upgrade",
        ("upgrading my system", "after upgrading", "system upgrade", "upgraded my", "after updating", "updated my system"),
        _static(None),
        0.85,
    ),
    (
        "system_reset",
        ("resetting my pc", "after resetting", "reset my pc", "windows reset", "factory reset", "reinstalled windows"),
        _static({"scope": "full"}),
        0.90,
    ),
    (
        "travel",
        ("on a train", "on the train", "on a bus", "on the bus", "on a plane", "on a flight", "traveling", "travelling", "commuting"),
        _travel_mode,
        0.90,
    ),
    (
        "meeting",
        ("in a meeting", "on a call", "in a call", "have a meeting", "had a meeting", "meeting with"),
        _static(None),
        0.85,
    ),
)

EVENT_TYPES = (
    ("system", (
        "reset", "reinstall", "format", "wipe", "upgrade", "update", "install",
        "uninstall", "crash", "restart", "reboot", "shutdown", "upgrading",
    )),
    ("travel", ("flying", "driving", "riding", "road trip")),
    ("work", ("meeting", "conference", "presentation", "demo", "interview")),
    ("connectivity", ("lost connection", "network down", "outage")),
    ("hardware", ("hard drive failed", "disk failed", "screen broke", "died")),
)


def temporal_of(text: str) -> Temporal:
    """Tense and decay of the text an event was found in."""
    tense = "present"
    for name, cues in TENSES:
        if contains_any(text, cues):
            tense = name
            break
    for name, cues in DECAYS:
        if contains_any(text, cues):
            return Temporal(tense=tense, decay=name)
    return Temporal(tense=tense, decay="medium" if tense == "past" else "short")


def _scan_known(text: str) -> Iterator[Dict[str, object]]:
    for name, cues, details, confidence in KNOWN_EVENTS:
        if contains_any(text, cues):
            yield {"name": name, "details": details(text), "confidence": confidence}


def _scan_general(text: str) -> Iterator[Dict[str, object]]:
    for kind, cues in EVENT_TYPES:
        if contains_any(text, cues):
            yield {"name": f"{kind}_event"}
            return


STRATEGIES = (
    Strategy(
        name="known",
        confidence=0.90,
        scan=_scan_known,
    ),
    Strategy(
        name="general",
        confidence=0.75,
        scan=_scan_general,
        fallback=True,
    ),
)


def validate(candidate: Candidate) -> Optional[Dict[str, object]]:
    name = candidate.get("name")
    if not name:
        return None
    return {
        "name": name,
        "details": candidate.get("details") or None,
        "temporal": temporal_of(candidate.sentence),
    }


def dedup_key(event: Event) -> str:
    return event.name


CATEGORY = Category(
    name="events",
    item_type=Event,
    primary="name",
    strategies=STRATEGIES,
    validate=validate,
    key=dedup_key,
)


def extract_events(text: str) -> List[Event]:
    """Extract events from text. Never raises."""
    return run_category(CATEGORY, text)
