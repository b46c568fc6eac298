"""Skill extraction: abilities the writer explicitly claims.

Skills rank below identity, jobs and goals. "I am a developer" is identity,
"I want to learn Rust" is a goal, and neither becomes a skill unless an
explicit ability phrase ("I know", "proficient in", "fluent in") is present.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterator, List, Optional

from ..analyzer import Match
from ..cues import ABILITY_CUES, LEARNING_GOAL_CUES, get_taxonomy, has_identity_cue
from ..pipeline import Candidate, Category, IndicatorTiers, Scorer, Strategy, run_category
from ..types import Skill
from ..utils import (
    CLAUSE_BREAKS,
    contains_any,
    cut_clause,
    find_phrase_spans,
    normalize_candidate,
    strip_leading,
    strip_trailing,
)

MIN_LENGTH = 2
MAX_LENGTH = 50
MAX_FREE_WORDS = 3

BLOCKLIST = frozenset({
    "it", "that", "this", "everything", "anything", "something", "nothing",
    "stuff", "things", "how", "what", "why", "you", "them", "him", "her",
    "lot", "a lot", "so", "right", "well", "more",
})

# Words that make a free-text span a clause, not a skill name.
CLAUSE_WORDS = frozenset({
    "you", "it", "that", "this", "what", "how", "why", "when", "where", "who",
    "them", "him", "her", "me", "us", "there", "he", "she", "they", "we", "i",
    "is", "are", "was", "will", "would", "should", "could", "if", "do", "does",
})

LEADING = (
    "how", "to", "use", "using", "code", "coding", "program", "programming",
    "in", "with", "write", "writing", "build", "building", "work", "working",
    "speak", "speaking", "a", "an", "the", "some", "basic", "of", "at",
)

TRAILING = (
    "well", "fluently", "properly", "too", "really", "already", "now",
    "pretty", "quite", "very", "a", "bit", "little",
)

LEVELS = (
    ("basic", (
        "basics", "basic", "beginner", "learning", "novice", "new to",
        "just started", "starting with", "a little", "little bit", "junior",
    )),
    ("advanced", (
        "expert", "advanced", "proficient", "senior", "fluent", "native",
        "mastered", "very good", "excellent", "deep knowledge", "years of experience",
        "highly skilled", "extensively",
    )),
    ("intermediate", (
        "intermediate", "decent", "familiar", "comfortable", "okay at",
        "some experience", "working knowledge", "fairly well", "pretty well",
        "confident",
    )),
)

# A skill listing runs on through "and" and commas.
LIST_STOPS = tuple(b for b in CLAUSE_BREAKS if b != "and")

NEGATIONS = ("not", "never", "no longer", "hardly", "barely")

# Base confidence of a bare mention, by the strongest ability phrase nearby.
MENTION_TIERS = IndicatorTiers((
    ("explicit", ("expert in", "expert at", "mastered", "fluent in", "years of experience"), 0.85),
    ("moderate", ("skilled at", "experienced in", "experienced with", "have experience"), 0.75),
    ("weak", ("familiar with", "comfortable with", "confident with", "confident in"), 0.65),
))

SKILL_SCORER = Scorer(ceiling=0.95)


def _level(scope: str) -> Optional[str]:
    for level, phrases in LEVELS:
        if contains_any(scope, phrases):
            return level
    return None


def _clean_phrase(raw: str) -> str:
    text = cut_clause(raw.lower())
    text = strip_leading(text, LEADING)
    return strip_trailing(text, TRAILING)


def _skills_in(listing: str, phrase: str, free: bool) -> List[Dict[str, object]]:
    """Known skill terms in a listing; the cleaned phrase itself when free and short."""
    taxonomy = get_taxonomy()
    found = [
        {"name": term, "type": taxonomy.skill_type(term)}
        for _, term in find_phrase_spans(listing, taxonomy.skill_terms)
    ]
    if found or not free:
        return found
    words = phrase.split()
    if not words or len(words) > MAX_FREE_WORDS or any(w in CLAUSE_WORDS for w in words):
        return []
    return [{"name": phrase, "type": "general"}]


def _ability(free: bool, **extra) -> Callable[[Match], List[Dict[str, object]]]:
    def parse(match: Match) -> List[Dict[str, object]]:
        group = match.group()
        words = group.normal().split()
        if words and words[0] in NEGATIONS:
            return []
        scope = f"{match.before(3).normal()} {match.normal()}"
        out = []
        listing = cut_clause(group.normal(), LIST_STOPS, at_comma=False)
        for fields in _skills_in(listing, _clean_phrase(group.text()), free):
            fields.update(extra)
            fields.setdefault("scope", scope)
            out.append(fields)
        return out
    return parse


def _language(match: Match) -> List[Dict[str, object]]:
    taxonomy = get_taxonomy()
    out = []
    for _, term in find_phrase_spans(match.group().normal(), taxonomy.skills.get("language", ())):
        out.append({"name": term, "type": "language", "scope": match.normal()})
    return out


def _native_language(match: Match) -> List[Dict[str, object]]:
    return [dict(f, level="advanced") for f in _language(match)]


def _scan(text: str) -> Iterator[Dict[str, object]]:
    if not contains_any(text, ABILITY_CUES):
        return
    taxonomy = get_taxonomy()
    for offset, term in find_phrase_spans(text, taxonomy.skill_terms):
        before = text[max(0, offset - 30):offset]
        if contains_any(before, NEGATIONS):
            continue
        yield {
            "name": term,
            "type": taxonomy.skill_type(term),
            "scope": f"{before}{term}",
            "scanned": True,
            "confidence": MENTION_TIERS.confidence(text, default=0.70),
        }


STRATEGIES = (
    Strategy(
        name="proficiency",
        confidence=0.90,
        pattern=(
            "(i|we) (know|am proficient in|am proficient with|am good at|am great at|"
            "am skilled in|am skilled at|am experienced in|am experienced with|"
            "have mastered|am expert in|am an expert in|am an expert at) [.+]"
        ),
        parse=_ability(free=True),
    ),
    Strategy(
        name="capability",
        confidence=0.90,
        pattern="(i|we) (can|am able to|am capable of) [.+]",
        parse=_ability(free=False),
    ),
    Strategy(
        name="comfort",
        confidence=0.85,
        pattern="(i|we) am #Adverb? (comfortable|familiar|confident) (with|in|using) [.+]",
        parse=_ability(free=True, level="intermediate"),
    ),
    Strategy(
        name="experience",
        confidence=0.85,
        pattern="(i|we) have (experience|expertise|knowledge|background|a background) (in|with) [.+]",
        parse=_ability(free=True),
    ),
    Strategy(
        name="experience_years",
        confidence=0.90,
        pattern="(i|we) have #Value+ years of (experience|expertise) (in|with) [.+]",
        parse=_ability(free=True, level="advanced"),
    ),
    Strategy(
        name="language",
        confidence=0.90,
        pattern="(i|we) (speak|am fluent in|can speak) [.+]",
        parse=_language,
    ),
    Strategy(
        name="native_language",
        confidence=0.90,
        pattern="[.+] is my (native|first|mother) (language|tongue)",
        parse=_native_language,
    ),
    Strategy(
        name="native_language",
        confidence=0.90,
        pattern="my (native|first|mother) (language|tongue) is [.+]",
        parse=_native_language,
    ),
    Strategy(
        name="mention",
        confidence=0.70,
        scan=_scan,
        fallback=True,
    ),
)


def validate(candidate: Candidate) -> Optional[Dict[str, object]]:
    name = normalize_candidate(
        candidate.get("name"),
        min_length=MIN_LENGTH,
        max_length=MAX_LENGTH,
        blocklist=BLOCKLIST,
        min_alpha=1,
    )
    if name is None:
        return None
    kind = candidate.get("type") or get_taxonomy().skill_type(name) or "general"

    if candidate.get("scanned"):
        # No explicit ability phrase bound to this span: identity and
        # learning-goal statements take precedence.
        sentence = candidate.sentence
        if contains_any(sentence, LEARNING_GOAL_CUES) or has_identity_cue(sentence):
            return None

    scope = candidate.get("scope") or candidate.span
    return {
        "type": kind,
        "name": name,
        "level": candidate.get("level") or _level(scope),
    }


def dedup_key(skill: Skill) -> str:
    return f"{skill.type}:{skill.name}"


CATEGORY = Category(
    name="skills",
    item_type=Skill,
    primary="name",
    strategies=STRATEGIES,
    validate=validate,
    key=dedup_key,
    scorer=SKILL_SCORER,
)


def extract_skills(text: str) -> List[Skill]:
    """Extract skills from text. Never raises."""
    return run_category(CATEGORY, text)
