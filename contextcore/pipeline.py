"""Generic extraction engine shared by all categories.

A category is data: an ordered strategy table, a validator, a dedup key and
a scorer. ``run_category`` is the one pipeline that drives them:

    analyzer parse -> strategies (in order) -> validate -> score -> dedupe

Every stage returns a value or None ("no contribution"). ``guarded`` is the
isolating combinator placed at each boundary: an error inside one stage is
logged and turns into None, it never reaches the caller and never touches a
sibling stage's output.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar

from .analyzer import Document, Match, analyze
from .types import DEFAULT_CONFIDENCE, Item
from .utils import contains_any, plain_text

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_INPUT_LENGTH = 50_000
HEDGE_PENALTY = 0.8
CONFIDENCE_FLOOR = 0.05
CONFIDENCE_CEILING = 0.98

HEDGE_WORDS = (
    "maybe",
    "sort of",
    "kind of",
    "probably",
    "i think",
    "somewhat",
    "a bit",
    "a little",
    "perhaps",
    "not sure",
)


def guarded(fn: Callable[..., T], *args: Any, label: str = "", **kwargs: Any) -> Optional[T]:
    """Call fn and turn any exception into None.

    The failure is logged at debug level with the stage label; callers treat
    None as "this stage contributed nothing".
    """
    try:
        return fn(*args, **kwargs)
    except Exception:
        logger.debug("Skipped %s", label or getattr(fn, "__name__", "stage"), exc_info=True)
        return None


# ── Confidence ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Scorer:
    """Turns a base confidence into a final, bounded score.

    Attributes:
        floor: Lowest score an item can carry
        ceiling: Highest score an item can carry (below 1.0)
        hedge_penalty: Multiplier applied when hedging language co-occurs
        hedge_words: Phrases that count as hedging
    """
    floor: float = CONFIDENCE_FLOOR
    ceiling: float = CONFIDENCE_CEILING
    hedge_penalty: float = HEDGE_PENALTY
    hedge_words: Tuple[str, ...] = HEDGE_WORDS

    def hedged(self, evidence: str) -> bool:
        return contains_any(evidence, self.hedge_words)

    def score(self, base: Any, evidence: str = "") -> float:
        """Score a candidate.

        Args:
            base: Confidence supplied by the strategy (may be missing or junk)
            evidence: Plain text the candidate was found in

        Returns:
            A finite score within [floor, ceiling]
        """
        if isinstance(base, bool) or not isinstance(base, (int, float)) or not math.isfinite(base):
            value = DEFAULT_CONFIDENCE
        else:
            value = float(base)
        if evidence and self.hedged(evidence):
            value *= self.hedge_penalty
        return round(min(self.ceiling, max(self.floor, value)), 4)


DEFAULT_SCORER = Scorer()


@dataclass(frozen=True)
class IndicatorTiers:
    """Ordered indicator tiers mapped to base confidences.

    Tiers are checked in order (explicit first); the first tier with a phrase
    present in the text decides the base confidence.

    Example:
        >>> tiers = IndicatorTiers((("explicit", ("i prefer",), 0.95),
        ...                         ("weak", ("i guess",), 0.6)))
        >>> tiers.classify("i prefer tea")
        ('explicit', 0.95)
    """
    tiers: Tuple[Tuple[str, Tuple[str, ...], float], ...]

    def classify(self, text: str) -> Optional[Tuple[str, float]]:
        for name, phrases, confidence in self.tiers:
            if contains_any(text, phrases):
                return name, confidence
        return None

    def confidence(self, text: str, default: float = DEFAULT_CONFIDENCE) -> float:
        found = self.classify(text)
        return found[1] if found else default


# ── Strategies and candidates ────────────────────────────────────────────────

def _whole_match(match: Match) -> str:
    return match.group().text()


@dataclass(frozen=True)
class Strategy:
    """One rule of a category's strategy table.

    Exactly one of ``pattern`` (an analyzer phrase pattern) or ``scan`` (a
    function over plain text) is set.

    Attributes:
        name: Label used in logs and as the default ``subtype``
        confidence: Base confidence of candidates this rule produces
        pattern: Phrase pattern run against the analyzed document
        parse: Turns one match into a raw candidate (str, mapping or None)
        scan: Yields raw candidates from the plain text; runs even when the
            analyzer failed
        fields: Static fields merged into every candidate
        group: Strategies sharing a group cooperate on ``fallback``
        fallback: Only run when no earlier strategy of the group produced
            an accepted item
    """
    name: str
    confidence: float
    pattern: Optional[str] = None
    parse: Callable[[Match], Any] = _whole_match
    scan: Optional[Callable[[str], Iterable[Any]]] = None
    fields: Mapping[str, Any] = field(default_factory=dict)
    group: str = "main"
    fallback: bool = False

    def __post_init__(self):
        if (self.pattern is None) == (self.scan is None):
            raise ValueError(f"Strategy {self.name!r} needs exactly one of pattern or scan")


@dataclass(frozen=True)
class Candidate:
    """A raw value a strategy found, before validation.

    Attributes:
        fields: Raw fields (the category's primary field holds the raw span)
        strategy: The rule that produced it
        span: Plain form of the matched words
        sentence: Plain form of the sentence it came from
        question: True when that sentence is a question
        match: The analyzer match, None for scan candidates
    """
    fields: Mapping[str, Any]
    strategy: Strategy
    span: str = ""
    sentence: str = ""
    question: bool = False
    match: Optional[Match] = None

    def get(self, key: str, default: Any = None) -> Any:
        return self.fields.get(key, default)

    @property
    def base_confidence(self) -> Any:
        return self.fields.get("confidence", self.strategy.confidence)


def _as_fields(raw: Any, primary: str, strategy: Strategy) -> Optional[Dict[str, Any]]:
    if raw is None:
        return None
    if isinstance(raw, str):
        fields: Dict[str, Any] = {primary: raw}
    elif isinstance(raw, Mapping):
        fields = dict(raw)
    else:
        return None
    for key, value in strategy.fields.items():
        fields.setdefault(key, value)
    return fields


# ── Category ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Category:
    """Everything the pipeline needs to know about one semantic category.

    Attributes:
        name: Response key ("goals", "tools"...)
        item_type: Dataclass the accepted candidates are built into
        primary: Field a plain-string candidate is stored under
        strategies: Ordered strategy table
        validate: Candidate -> final fields (without confidence) or None
        key: Dedup key of a built item
        scorer: Confidence scorer
    """
    name: str
    item_type: type
    primary: str
    strategies: Tuple[Strategy, ...]
    validate: Callable[[Candidate], Optional[Dict[str, Any]]]
    key: Callable[[Any], str]
    scorer: Scorer = DEFAULT_SCORER


def dedupe(items: Sequence[Item], key: Callable[[Any], str]) -> List[Item]:
    """Collapse items sharing a dedup key.

    First-seen order is kept. On a collision the kept item takes the
    newcomer's confidence only when it is strictly higher, and optional
    fields that are None on the kept item are filled from the newcomer.
    Merges build new instances; no item is mutated.
    """
    kept: Dict[str, Item] = {}
    for item in items:
        k = key(item)
        existing = kept.get(k)
        if existing is None:
            kept[k] = item
            continue
        updates: Dict[str, Any] = {}
        if item.confidence > existing.confidence:
            updates["confidence"] = item.confidence
        for f in dataclasses.fields(existing):
            if getattr(existing, f.name) is None and getattr(item, f.name) is not None:
                updates[f.name] = getattr(item, f.name)
        if updates:
            kept[k] = dataclasses.replace(existing, **updates)
    return list(kept.values())


def _candidates(category: Category, strategy: Strategy, document: Optional[Document], plain: str, question: bool):
    if strategy.scan is not None:
        raws = guarded(lambda: list(strategy.scan(plain)), label=f"{category.name}.{strategy.name} scan") or []
        for raw in raws:
            fields = _as_fields(raw, category.primary, strategy)
            if fields is not None:
                yield Candidate(fields, strategy, span=plain, sentence=plain, question=question)
        return

    if document is None:
        return
    matches = guarded(document.match, strategy.pattern, label=f"{category.name}.{strategy.name} match") or []
    for m in matches:
        raw = guarded(strategy.parse, m, label=f"{category.name}.{strategy.name} parse")
        for value in raw if isinstance(raw, (list, tuple)) else (raw,):
            fields = _as_fields(value, category.primary, strategy)
            if fields is None:
                continue
            yield Candidate(
                fields,
                strategy,
                span=m.normal(),
                sentence=m.sentence.normal(),
                question=m.is_question(),
                match=m,
            )


def _accept(category: Category, candidate: Candidate) -> Optional[Item]:
    fields = category.validate(candidate)
    if not fields:
        logger.debug("%s rejected %r (%s)", category.name, dict(candidate.fields), candidate.strategy.name)
        return None
    fields = dict(fields)
    base = fields.pop("confidence", candidate.base_confidence)
    confidence = category.scorer.score(base, candidate.sentence)
    return category.item_type(**fields, confidence=confidence)


def _apply(category: Category, strategy: Strategy, document: Optional[Document], plain: str, question: bool) -> List[Item]:
    found: List[Item] = []
    for candidate in _candidates(category, strategy, document, plain, question):
        item = guarded(_accept, category, candidate, label=f"{category.name}.{strategy.name} validate")
        if item is not None:
            found.append(item)
    return found


def _run(category: Category, text: str, document: Optional[Document]) -> List[Item]:
    if document is None:
        document = guarded(analyze, text, label=f"{category.name} analyzer")
    plain = plain_text(text)
    question = "?" in text

    accepted: List[Item] = []
    productive = set()
    for strategy in category.strategies:
        if strategy.fallback and strategy.group in productive:
            continue
        found = guarded(
            _apply, category, strategy, document, plain, question,
            label=f"{category.name}.{strategy.name}",
        )
        if found:
            accepted.extend(found)
            productive.add(strategy.group)
    return dedupe(accepted, category.key)


def prepare_text(text: Any, max_length: int = MAX_INPUT_LENGTH) -> Optional[str]:
    """Return usable input text, truncated to max_length, or None."""
    if not isinstance(text, str) or not text.strip():
        return None
    return text[:max_length]


def run_category(category: Category, text: Any, document: Optional[Document] = None) -> List[Item]:
    """Run one category over text.

    Returns [] for non-string, empty or whitespace-only input and never
    raises. ``document`` lets the aggregator share one analyzer parse.
    """
    prepared = prepare_text(text)
    if prepared is None:
        return []
    try:
        return _run(category, prepared, document)
    except Exception:
        logger.warning("Category %s failed", category.name, exc_info=True)
        return []
