"""Intent extraction: what the writer wants from this exchange right now.

Explicit requests (help, advice, backups, sensor picks) are checked first and
yield at most one ``ask``. Only when none applies is the whole text
classified, a question mark taking priority over keywords.
"""

from __future__ import annotations

import re
from typing import Dict, Iterator, List, Optional

from ..pipeline import Candidate, Category, Strategy, run_category
from ..types import Intent
from ..utils import contains_any, snake_case

INTENT_TYPES = ("ask", "debug", "explore", "decide", "learn")

# (cues, required context, default target, confidence); the first hit wins.
REQUESTS = (
    (
        ("can you help", "could you help", "help me", "check if", "please help", "i need help"),
        (),
        "general_help",
        0.95,
    ),
    (
        (
            "want advice", "need advice", "advice on", "any advice", "looking for advice",
            "recommend", "recommendation", "suggest", "suggestion",
        ),
        (),
        "general_advice",
        0.90,
    ),
    (
        (
            "without losing", "not losing", "do not want to lose", "back up", "backup",
            "save", "preserve", "keep my",
        ),
        ("password", "passwords", "data", "files", "chrome", "photos", "documents"),
        "backup_method",
        0.90,
    ),
    (
        ("which sensor", "sensor to use", "sensor recommendation", "advice on sensor"),
        (),
        "sensor_recommendation",
        0.95,
    ),
)

# Requests whose target is fixed by the request itself.
FIXED_TARGETS = frozenset({"backup_method", "sensor_recommendation"})

DECIDE_KEYWORDS = (
    "should i", "which is better", "or should", "vs", "versus", "compare",
    "comparing", "between", "choosing", "decide", "deciding", "which one",
)

# In a question, a bare "or" offers a choice.
DECIDE_CUES = DECIDE_KEYWORDS + ("or",)

# Checked in order when there is no question mark.
KEYWORD_TYPES = (
    ("debug", (
        "debugging", "trying to fix", "fix", "fixing", "troubleshooting",
        "not working", "broken", "error", "errors", "bug", "bugs", "issue",
        "problem with", "failing", "crashed", "does not work", "can not get",
        "will not work", "exception",
    )),
    ("explore", (
        "exploring", "looking into", "researching", "investigating", "curious about",
        "wondering about", "checking out", "learning about", "trying out",
        "experimenting with",
    )),
    ("decide", DECIDE_KEYWORDS),
    ("learn", (
        "want to understand", "trying to learn", "learning", "studying", "teach me",
        "explain", "what does", "how does", "understanding", "need to know",
    )),
)

TARGETS = (
    ("sensor_recommendation", (
        "which sensor", "sensor to use", "sensor recommendation", "recommend sensor",
        "advice on sensor", "advice on which sensor",
    )),
    ("backup_method", (
        "backup", "back up", "without losing", "not lose", "not losing", "preserve",
    )),
    ("system_reset_impact", (
        "resetting windows", "reset windows", "windows reset", "will break", "break my",
    )),
    ("tool_recommendation", ("which tool", "tool to use", "recommend tool", "tool recommendation")),
    ("method_recommendation", ("best way", "how to", "method", "approach", "technique")),
)

_ADVICE_ON = re.compile(r"\badvice on (?:which |what |the )?([a-z0-9]+)")
_WHICH_TO_USE = re.compile(r"\bwhich ([a-z0-9]+) to use\b")

# "vs code" names an editor, not a comparison.
_VS_CODE = re.compile(r"\bvs code\b")


def _target(text: str) -> Optional[str]:
    for target, cues in TARGETS:
        if contains_any(text, cues):
            return target
    for regex in (_ADVICE_ON, _WHICH_TO_USE):
        m = regex.search(text)
        if m:
            return f"{m.group(1)}_recommendation"
    return None


def _scan_requests(text: str) -> Iterator[Dict[str, object]]:
    for cues, context, default, confidence in REQUESTS:
        if not contains_any(text, cues):
            continue
        if context and not contains_any(text, context):
            continue
        target = default if default in FIXED_TARGETS else (_target(text) or default)
        yield {"type": "ask", "target": target, "confidence": confidence}
        return


def _scan_classify(text: str) -> Iterator[Dict[str, object]]:
    cue_text = _VS_CODE.sub("vscode", text)
    if "?" in text:
        kind = "decide" if contains_any(cue_text, DECIDE_CUES) else "ask"
        yield {"type": kind, "target": _target(text), "confidence": 0.90}
        return
    for kind, cues in KEYWORD_TYPES:
        if contains_any(cue_text, cues):
            yield {"type": kind, "target": _target(text), "confidence": 0.85}
            return


STRATEGIES = (
    Strategy(
        name="request",
        confidence=0.90,
        scan=_scan_requests,
    ),
    Strategy(
        name="classify",
        confidence=0.85,
        scan=_scan_classify,
        fallback=True,
    ),
)


def validate(candidate: Candidate) -> Optional[Dict[str, object]]:
    kind = candidate.get("type")
    if kind not in INTENT_TYPES:
        return None
    target = candidate.get("target")
    if target is not None:
        target = snake_case(str(target)) or None
    return {"type": kind, "target": target}


def dedup_key(intent: Intent) -> str:
    return f"{intent.type}:{intent.target}"


CATEGORY = Category(
    name="intents",
    item_type=Intent,
    primary="type",
    strategies=STRATEGIES,
    validate=validate,
    key=dedup_key,
)


def extract_intents(text: str) -> List[Intent]:
    """Extract the writer's current intent from text. Never raises."""
    return run_category(CATEGORY, text)
