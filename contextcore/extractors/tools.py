"""Tool extraction: hardware, software, services, platforms and security tools.

Explicit mention only. A candidate is kept when a known tool term from the
taxonomy names it; the surrounding words decide whether the tool is in use,
planned, blocked or deprecated. Tools sit at the bottom of the precedence
order, so a mention inside a skill or learning clause is left to skills.
"""

from __future__ import annotations

import re
from typing import Dict, Iterator, List, Optional

from ..analyzer import Match, View
from ..cues import LEARNING_GOAL_CUES, get_taxonomy
from ..pipeline import Candidate, Category, Strategy, run_category
from ..types import Tool
from ..utils import contains_any, find_phrase_spans, normalize_candidate

# Checked in this order; the first hit wins.
CONTEXT_CUES = (
    ("deprecated", (
        "stopped using", "no longer use", "no longer using", "used to use",
        "replaced", "switched from", "got rid of", "uninstalled", "moved away from",
        "ditched", "quit using", "gave up on", "do not use anymore",
        "not using anymore", "abandoned",
    )),
    ("blocked", (
        "can not use", "cannot use", "unable to use", "blocked", "not working",
        "broken", "crashed", "is down", "will not work", "does not work",
        "do not work", "failed", "corrupted", "dead", "stopped working",
        "not allowed", "banned", "locked out",
    )),
    ("planned", (
        "will use", "planning to", "going to use", "want to try", "want to use",
        "plan to use", "thinking about", "considering", "looking into",
        "would like to use", "switch to", "switching to", "migrate to",
        "migrating to", "move to", "moving to", "will try", "hoping to use",
    )),
)

# Ability and learning language: the mention belongs to skills.
SKILL_CUES = (
    "i know", "proficient", "good at", "skilled", "experienced in",
    "experienced with", "expert in", "familiar with", "comfortable with",
    "confident", "have experience", "mastered", "learn", "learning", "studying",
) + LEARNING_GOAL_CUES

# "web development" is a skill, not the web platform.
NON_TOOL_FOLLOWERS = frozenset({
    "development", "developer", "developers", "design", "designer",
    "engineering", "engineer", "dev", "skills", "programming",
})

VERSIONED_TYPES = ("software", "platform", "service")

_VERSION = re.compile(r"^\s*(?:version\s*|v\s*)?(\d+(?:\.\d+)*[a-z]?)\b")

SPEC_NAMES = {
    "cpu": "cpu",
    "processor": "cpu",
    "gpu": "gpu",
    "ram": "ram",
    "memory": "ram",
    "storage": "storage",
}


def _context(scope: str) -> str:
    for context, cues in CONTEXT_CUES:
        if contains_any(scope, cues):
            return context
    return "in_use"


def _version(kind: str, following: str) -> Optional[str]:
    if kind not in VERSIONED_TYPES:
        return None
    m = _VERSION.match(following)
    return m.group(1) if m else None


def _tool_fields(term: str, scope: str, following: str) -> Optional[Dict[str, object]]:
    taxonomy = get_taxonomy()
    kind = taxonomy.tool_type(term)
    if kind is None:
        return None
    next_word = following.split()[0] if following.split() else ""
    if next_word in NON_TOOL_FOLLOWERS:
        return None
    return {
        "type": kind,
        "name": taxonomy.tool_name(term),
        "scope": scope,
        "version": _version(kind, following),
    }


def _terms_in(view: View, scope: str) -> List[Dict[str, object]]:
    """Known tool terms starting inside the view.

    Two trailing tokens are included so multi-word names that run past the
    matched noun phrase ("Expo Go") are still found whole.
    """
    head = view.normal()
    text = f"{head} {view.after(2).normal()}".strip()
    found = []
    for offset, term in find_phrase_spans(text, get_taxonomy().tool_terms):
        if offset >= len(head):
            continue
        following = text[offset + len(term):]
        fields = _tool_fields(term, scope, following)
        if fields is not None:
            found.append(fields)
    return found


def _scope(match: Match) -> str:
    return " ".join(p for p in (match.before(5).normal(), match.normal(), match.after(4).normal()) if p)


def _parse(match: Match):
    return _terms_in(match.group(), _scope(match))


def _parse_versioned(match: Match):
    out = []
    version = match.group("version").normal()
    for fields in _terms_in(match.group("name"), _scope(match)):
        if fields["type"] in VERSIONED_TYPES and version:
            fields["version"] = version
        out.append(fields)
    return out


def _parse_spec(match: Match):
    word = match.group("part").normal()
    name = SPEC_NAMES.get(word)
    amount = match.group("amount").normal().replace(" ", "")
    unit = match.group("unit").normal() if "unit" in match.groups else ""
    if name is None or not amount:
        return None
    return {
        "type": "hardware",
        "name": name,
        "scope": _scope(match),
        "version": f"{amount}{unit}" or None,
    }


def _scan(text: str) -> Iterator[Dict[str, object]]:
    for offset, term in find_phrase_spans(text, get_taxonomy().tool_terms):
        end = offset + len(term)
        scope = text[max(0, offset - 40):end + 25]
        fields = _tool_fields(term, scope, text[end:])
        if fields is not None:
            yield fields


STRATEGIES = (
    Strategy(
        name="usage",
        confidence=0.85,
        pattern="(using|use|uses|used|with|on|via|switched to|switch to) (only|just)? (a|an|the|my|our)? [#Noun+]",
        parse=_parse,
    ),
    Strategy(
        name="installed",
        confidence=0.90,
        pattern="(running|installed|have installed|run) (a|an|the|my|our)? [#Noun+]",
        parse=_parse,
    ),
    Strategy(
        name="device",
        confidence=0.85,
        pattern="(my|our|the) [#Noun* (device|phone|laptop|computer|pc|machine|setup|tablet)]",
        parse=_parse,
    ),
    Strategy(
        name="version",
        confidence=0.90,
        pattern="[<name> #Noun+] (version|v)? [<version> #Value]",
        parse=_parse_versioned,
    ),
    Strategy(
        name="app",
        confidence=0.80,
        pattern="(in|for|through) (the|my)? [#Noun+] (app|application)",
        parse=_parse,
    ),
    Strategy(
        name="spec",
        confidence=0.80,
        pattern="[<part> (cpu|gpu|ram|memory|storage|processor)] is [<amount> #Value] [<unit> (gb|tb|ghz)?]",
        parse=_parse_spec,
    ),
    Strategy(
        name="spec",
        confidence=0.80,
        pattern="[<amount> #Value] [<unit> (gb|tb)?] (of)? [<part> (ram|memory|storage)]",
        parse=_parse_spec,
    ),
    Strategy(
        name="mention",
        confidence=0.75,
        scan=_scan,
    ),
)


def validate(candidate: Candidate) -> Optional[Dict[str, object]]:
    kind = candidate.get("type")
    name = normalize_candidate(candidate.get("name"), min_length=2, max_length=50, min_alpha=1)
    if name is None or kind is None:
        return None
    name = re.sub(r"[^a-z0-9_]", "", name.replace(" ", "_"))
    if len(name) < 2:
        return None
    scope = candidate.get("scope") or candidate.span
    if contains_any(scope, SKILL_CUES):
        return None
    return {
        "type": kind,
        "name": name,
        "context": _context(scope),
        "version": candidate.get("version"),
    }


def dedup_key(tool: Tool) -> str:
    return f"{tool.type}:{tool.name}"


CATEGORY = Category(
    name="tools",
    item_type=Tool,
    primary="name",
    strategies=STRATEGIES,
    validate=validate,
    key=dedup_key,
)


def extract_tools(text: str) -> List[Tool]:
    """Extract tools from text. Never raises."""
    return run_category(CATEGORY, text)
