"""Cue tables shared across categories, and the tool/skill taxonomy.

Categories never read each other's output. Cross-category precedence is
applied through these tables instead: a lower-precedence category rejects a
candidate whose clause carries a higher-precedence cue.

Precedence, highest first:
    identity > job > goal > skill > preference > tool
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .utils import contains_any, snake_case

# "i am a ...", "working as ..."
IDENTITY_CUES = (
    "i am a",
    "i am an",
    "i was a",
    "i was an",
    "my role is",
    "my job is",
    "working as",
    "work as",
    "employed as",
    "my name is",
    "call me",
)

# Desire, plan or aspiration: the thing is not done (or owned) yet.
GOAL_CUES = (
    "want to",
    "wanna",
    "need to",
    "would like to",
    "would love to",
    "planning to",
    "plan to",
    "hoping to",
    "hope to",
    "aim to",
    "going to",
    "trying to",
    "looking to",
    "my goal",
    "intend to",
)

LEARNING_GOAL_CUES = (
    "want to learn",
    "wanna learn",
    "need to learn",
    "planning to learn",
    "plan to learn",
    "hoping to learn",
    "going to learn",
    "will learn",
    "should learn",
    "would like to learn",
    "trying to learn",
    "aim to learn",
)

# Completed actions: the work is over, so it is not a job.
COMPLETED_CUES = (
    "built",
    "finished",
    "completed",
    "shipped",
    "launched",
    "delivered",
    "wrapped up",
    "done with",
    "was working on",
    "used to work on",
)

PAUSED_CUES = ("paused", "on hold", "shelved", "stalled", "suspended", "put aside")

# Explicit ability claims.
ABILITY_CUES = (
    "i know",
    "i can",
    "able to",
    "capable of",
    "proficient in",
    "proficient with",
    "good at",
    "skilled in",
    "skilled at",
    "experienced in",
    "experienced with",
    "expert in",
    "expert at",
    "fluent in",
    "mastered",
    "familiar with",
    "comfortable with",
    "confident with",
    "confident in",
    "confident managing",
    "confident using",
    "i speak",
    "have experience",
    "years of experience",
)

# Worry or risk framing (warnings outrank goals on these clauses).
RISK_CUES = (
    "worried", "worry", "afraid", "scared", "concerned", "nervous", "anxious",
    "fear", "risk", "at risk",
)

# Loss or damage verbs that read as a prediction after "will".
HARM_VERBS = ("lose", "break", "fail", "crash", "damage", "destroy", "wipe", "corrupt", "mess up")

PREDICTION_CUES = ("will", "going to", "gonna")


def has_identity_cue(text: str) -> bool:
    return contains_any(text, IDENTITY_CUES)


# ── Taxonomy ─────────────────────────────────────────────────────────────────

_DATA_DIR = os.path.join(os.path.dirname(__file__), "data")


def _load_json(filename: str) -> dict:
    path = os.path.join(_DATA_DIR, filename)
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


TOOL_TYPES = ("hardware", "software", "service", "platform", "security")
SKILL_TYPES = ("language", "technical", "general")


@dataclass(frozen=True)
class Taxonomy:
    """Tool and skill vocabularies, read-only after loading.

    Attributes:
        tools: Tool type -> terms
        tool_aliases: Normalized name -> canonical name ("chrome" -> "google_chrome")
        skills: Skill type -> terms
    """
    tools: Dict[str, Tuple[str, ...]]
    tool_aliases: Dict[str, str]
    skills: Dict[str, Tuple[str, ...]]

    @property
    def tool_terms(self) -> Tuple[str, ...]:
        return tuple(t for kind in TOOL_TYPES for t in self.tools.get(kind, ()))

    @property
    def skill_terms(self) -> Tuple[str, ...]:
        return tuple(t for kind in SKILL_TYPES for t in self.skills.get(kind, ()))

    def tool_type(self, term: str) -> Optional[str]:
        """Type of an exact tool term, or None."""
        term = term.lower()
        for kind in TOOL_TYPES:
            if term in self.tools.get(kind, ()):
                return kind
        return None

    def tool_name(self, term: str) -> str:
        name = snake_case(term)
        return self.tool_aliases.get(name, name)

    def skill_type(self, term: str) -> Optional[str]:
        term = term.lower()
        for kind in SKILL_TYPES:
            if term in self.skills.get(kind, ()):
                return kind
        return None

    def is_skill(self, text: str) -> bool:
        return self.skill_type(text.strip()) is not None


_taxonomy: Optional[Taxonomy] = None


def get_taxonomy() -> Taxonomy:
    global _taxonomy
    if _taxonomy is None:
        raw = _load_json("taxonomy.json")
        _taxonomy = Taxonomy(
            tools={k: tuple(v) for k, v in raw.get("tools", {}).items()},
            tool_aliases=dict(raw.get("tool_aliases", {})),
            skills={k: tuple(v) for k, v in raw.get("skills", {}).items()},
        )
    return _taxonomy
