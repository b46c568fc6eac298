"""Constraint extraction: temporary limitations the writer is working under."""

from __future__ import annotations

import re
from typing import Callable, Dict, Iterator, List, Optional

from ..pipeline import Candidate, Category, Strategy, run_category
from ..types import Constraint
from ..utils import contains_any, first_phrase

TRAVEL_WORDS = ("train", "bus", "plane", "flight", "travel", "traveling", "travelling", "commute", "commuting")
MOBILE_WORDS = ("phone", "android", "iphone", "mobile", "tablet")
LIMIT_WORDS = ("can not", "limited", "hard", "difficult", "not easy")

LAPTOP_WORDS = ("laptop", "notebook", "macbook")

SITUATIONAL = (
    "right now", "currently", "at the moment", "for now", "only", "just",
    "stuck", "today", "temporarily", "this week",
)

_STUCK_OS = re.compile(r"\bstuck (?:using|on|with) (windows|macos|mac|linux|ubuntu|chromeos)\b")


def _describe_environment(text: str) -> str:
    m = _STUCK_OS.search(text)
    name = m.group(1) if m else "one environment"
    suffix = " laptop" if contains_any(text, LAPTOP_WORDS) else ""
    return f"currently restricted to {name}{suffix}"


def _describe_failure(text: str) -> str:
    device = first_phrase(text, LAPTOP_WORDS + ("computer", "pc", "desktop", "phone"))
    if device in LAPTOP_WORDS:
        return "laptop not booting"
    return f"{device} not booting" if device else "hardware failure"


def _fixed(description: str) -> Callable[[str], str]:
    return lambda text: description


def _travel_limited(text: str) -> bool:
    return all(contains_any(text, words) for words in (TRAVEL_WORDS, MOBILE_WORDS, LIMIT_WORDS))


# (type, cues or detector, describe, confidence) for the specific scans.
SPECIFIC = (
    ("limited_interaction", _travel_limited, _fixed("on mobile during travel"), 0.85),
    (
        "device_limitation",
        (
            "only my phone", "only phone", "just my phone", "only mobile",
            "only using my phone", "only have my phone", "only my tablet",
        ),
        _fixed("only mobile available"),
        0.90,
    ),
    (
        "environment_limitation",
        lambda text: _STUCK_OS.search(text) is not None,
        _describe_environment,
        0.85,
    ),
    (
        "connectivity_limitation",
        (
            "internet went down", "internet is down", "no internet", "offline",
            "wifi is down", "wifi went down", "no wifi", "lost connection",
        ),
        _fixed("no internet access"),
        0.90,
    ),
    (
        "time_limitation",
        (
            "short on time", "no time", "in a hurry", "running out of time", "limited time",
        ),
        _fixed("short on time"),
        0.85,
    ),
    (
        "hardware_failure",
        (
            "stopped booting", "will not boot", "not booting", "does not boot",
            "crashed and stopped", "will not turn on",
        ),
        _describe_failure,
        0.90,
    ),
)

# Fallback tables: (type, patterns, keywords, description).
GENERAL = (
    (
        "limited_interaction",
        ("can not do much", "can not really work", "hard to work", "difficult to work", "not easy to"),
        ("limited", "restricted", "hard to", "difficult"),
        "limited interaction available",
    ),
    (
        "device_limitation",
        ("on mobile", "on my phone", "from my phone", "on my tablet", "stuck with my phone"),
        ("phone", "mobile", "tablet"),
        "only mobile available",
    ),
    (
        "environment_limitation",
        ("stuck using", "restricted to", "forced to use", "have to use"),
        ("forced", "restricted"),
        "environment restricted",
    ),
    (
        "connectivity_limitation",
        ("no connection", "bad connection", "slow internet", "poor connection", "network down"),
        ("internet", "wifi", "connection", "network", "connectivity"),
        "no internet access",
    ),
    (
        "power_limitation",
        ("low battery", "battery dying", "about to die", "running out of battery", "need to charge"),
        ("battery", "charging", "charger"),
        "low battery",
    ),
    (
        "time_limitation",
        ("running late", "urgent", "asap", "tight deadline"),
        ("hurry", "rush", "deadline", "short on"),
        "short on time",
    ),
    (
        "access_limitation",
        ("can not access", "no access", "do not have access", "locked out", "can not open"),
        ("access", "locked", "blocked", "unavailable"),
        "access restricted",
    ),
    (
        "hardware_failure",
        ("laptop crashed", "computer crashed", "hard drive failed", "screen broke", "is dead"),
        ("crashed", "broken", "failure"),
        "hardware failure",
    ),
)


def _scan_specific(text: str) -> Iterator[Dict[str, object]]:
    for kind, cues, describe, confidence in SPECIFIC:
        hit = cues(text) if callable(cues) else contains_any(text, cues)
        if hit:
            yield {"type": kind, "description": describe(text), "confidence": confidence}


def _scan_general(text: str) -> Iterator[Dict[str, object]]:
    for kind, patterns, _, description in GENERAL:
        if contains_any(text, patterns):
            yield {"type": kind, "description": description, "confidence": 0.90}
            return
    if not contains_any(text, SITUATIONAL):
        return
    for kind, _, keywords, description in GENERAL:
        if contains_any(text, keywords):
            yield {"type": kind, "description": description, "confidence": 0.75}
            return


STRATEGIES = (
    Strategy(
        name="specific",
        confidence=0.85,
        scan=_scan_specific,
    ),
    Strategy(
        name="general",
        confidence=0.75,
        scan=_scan_general,
        fallback=True,
    ),
)


def validate(candidate: Candidate) -> Optional[Dict[str, object]]:
    kind = candidate.get("type")
    description = candidate.get("description")
    if not kind or not description:
        return None
    return {"type": kind, "description": description}


def dedup_key(constraint: Constraint) -> str:
    return constraint.type


CATEGORY = Category(
    name="constraints",
    item_type=Constraint,
    primary="description",
    strategies=STRATEGIES,
    validate=validate,
    key=dedup_key,
)


def extract_constraints(text: str) -> List[Constraint]:
    """Extract current limitations from text. Never raises."""
    return run_category(CATEGORY, text)
