"""Type definitions for the contextcore library.

Every extraction item is a frozen dataclass carrying a ``confidence`` field.
Optional fields default to ``None`` so the deduplicator can fill them in from
a discarded duplicate.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

DEFAULT_CONFIDENCE = 0.5

FactValue = Union[str, bool, int, float]


class Item:
    """Mixin shared by all extraction items."""

    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Identity(Item):
    """A claim about who the writer is.

    Attributes:
        type: One of ``name``, ``alias``, ``age``, ``role``
        value: The claimed value (an int for ages)
        subtype: How the claim was phrased (``legal``, ``explicit``, ``implicit``...)
        confidence: Score in (0, 1]
    """
    type: str
    value: Union[str, int]
    subtype: Optional[str] = None
    confidence: float = DEFAULT_CONFIDENCE


@dataclass(frozen=True)
class Goal(Item):
    """Something the writer wants to achieve.

    Attributes:
        description: Normalized goal text ("migrate workflow to linux")
        horizon: Expected time scale, ``short``, ``medium`` or ``long``
        status: ``active``, ``paused`` or ``completing``
        category: Coarse life area (career, education, technical...)
        subtype: Which phrasing produced it (explicit, desire, aspiration...)
        confidence: Score in (0, 1]
    """
    description: str
    horizon: str = "medium"
    status: str = "active"
    category: str = "general"
    subtype: Optional[str] = None
    confidence: float = DEFAULT_CONFIDENCE


@dataclass(frozen=True)
class Temporal:
    """Tense and relevance decay of an event."""
    tense: str = "present"
    decay: str = "short"


@dataclass(frozen=True)
class Event(Item):
    """Something that happened, is happening, or will happen.

    Attributes:
        name: Event name ("internet_outage", "travel", "work_event"...)
        details: Extra attributes such as ``{"mode": "train"}``, or None
        temporal: Tense and decay
        confidence: Score in (0, 1]
    """
    name: str
    details: Optional[Dict[str, str]] = None
    temporal: Temporal = field(default_factory=Temporal)
    confidence: float = DEFAULT_CONFIDENCE


@dataclass(frozen=True)
class Tool(Item):
    """A device, program, service or platform the writer mentions.

    Attributes:
        type: ``hardware``, ``software``, ``service``, ``platform`` or ``security``
        name: Normalized tool name ("windows", "android_phone")
        context: ``in_use``, ``planned``, ``blocked`` or ``deprecated``
        version: Version string when one was stated
        confidence: Score in (0, 1]
    """
    type: str
    name: str
    context: str = "in_use"
    version: Optional[str] = None
    confidence: float = DEFAULT_CONFIDENCE


@dataclass(frozen=True)
class Skill(Item):
    """An ability the writer claims."""
    type: str
    name: str
    level: Optional[str] = None
    confidence: float = DEFAULT_CONFIDENCE


@dataclass(frozen=True)
class Job(Item):
    """Ongoing work the writer is doing.

    Attributes:
        title: Normalized job title ("esp32 sensor project")
        status: ``active``, ``paused`` or ``completing``
        domain: Work domain (software, hardware, data...) or None
        confidence: Score in (0, 1]
    """
    title: str
    status: str = "active"
    domain: Optional[str] = None
    confidence: float = DEFAULT_CONFIDENCE


@dataclass(frozen=True)
class Preference(Item):
    """A stated like or dislike.

    Attributes:
        key: Preference domain (mode, os, editor, general...)
        value: The preferred (or rejected) thing
        polarity: ``positive`` or ``negative``
        comparison: What it was preferred over, if stated
        confidence: Score in (0, 1]
    """
    key: str
    value: str
    polarity: str = "positive"
    comparison: Optional[str] = None
    confidence: float = DEFAULT_CONFIDENCE


@dataclass(frozen=True)
class Experience(Item):
    """Something the writer has done or lived through before."""
    description: str
    confidence: float = DEFAULT_CONFIDENCE


@dataclass(frozen=True)
class Fact(Item):
    """A key/value statement about the writer's world."""
    key: str
    value: FactValue
    confidence: float = DEFAULT_CONFIDENCE


@dataclass(frozen=True)
class Result(Item):
    """A causal outcome: ``source`` led to ``outcome``."""
    outcome: str
    source: str
    confidence: float = DEFAULT_CONFIDENCE


@dataclass(frozen=True)
class Intent(Item):
    """What the writer wants from the conversation (ask, debug, learn...)."""
    type: str
    target: Optional[str] = None
    confidence: float = DEFAULT_CONFIDENCE


@dataclass(frozen=True)
class Constraint(Item):
    """A limitation the writer is working under."""
    type: str
    description: str
    confidence: float = DEFAULT_CONFIDENCE


@dataclass(frozen=True)
class RiskWarning(Item):
    """A risk the writer is concerned about."""
    type: str
    related_to: Optional[str] = None
    confidence: float = DEFAULT_CONFIDENCE


# Fixed response keys, in output order.
CATEGORY_NAMES = (
    "identity",
    "goals",
    "events",
    "tools",
    "skills",
    "jobs",
    "preferences",
    "experiences",
    "facts",
    "results",
    "intents",
    "constraints",
    "warnings",
)


@dataclass(frozen=True)
class Meta:
    """Run metadata attached to every response.

    Attributes:
        source: Caller-supplied label (default ``"text"``)
        parser_version: Version of the extractor that produced the response
        timestamp: ISO-8601 UTC time of the call
    """
    source: str
    parser_version: str
    timestamp: str

    @classmethod
    def now(cls, source: str, parser_version: str) -> "Meta":
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        return cls(source=source, parser_version=parser_version, timestamp=stamp)


@dataclass
class ContextResponse:
    """Result of one extraction call.

    One list per category (always present, possibly empty) plus ``meta``.
    """
    meta: Meta
    identity: List[Identity] = field(default_factory=list)
    goals: List[Goal] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
    tools: List[Tool] = field(default_factory=list)
    skills: List[Skill] = field(default_factory=list)
    jobs: List[Job] = field(default_factory=list)
    preferences: List[Preference] = field(default_factory=list)
    experiences: List[Experience] = field(default_factory=list)
    facts: List[Fact] = field(default_factory=list)
    results: List[Result] = field(default_factory=list)
    intents: List[Intent] = field(default_factory=list)
    constraints: List[Constraint] = field(default_factory=list)
    warnings: List[RiskWarning] = field(default_factory=list)

    @classmethod
    def empty(cls, source: str, parser_version: str) -> "ContextResponse":
        """Build the skeleton returned for unusable input."""
        return cls(meta=Meta.now(source, parser_version))

    def items(self, category: str) -> list:
        return getattr(self, category)

    @property
    def total(self) -> int:
        """Number of items across all categories."""
        return sum(len(self.items(name)) for name in CATEGORY_NAMES)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            name: [item.to_dict() for item in self.items(name)]
            for name in CATEGORY_NAMES
        }
        out["meta"] = asdict(self.meta)
        return out
