"""contextcore - Deterministic semantic context extraction.

Turn one free-form message into typed, confidence-scored records: goals,
facts, preferences, constraints, warnings, intents, tools, skills, jobs,
experiences, events, identity claims and results.
Zero dependencies. Stateless.

Example:
    >>> from contextcore import extract_context
    >>>
    >>> response = extract_context("I prefer dark mode over light mode")
    >>> response.preferences[0].value
    'dark mode'
    >>> response.to_dict()["meta"]["source"]
    'text'
"""

__version__ = "0.1.0"

from .types import (
    CATEGORY_NAMES,
    ContextResponse,
    Meta,
    Identity,
    Goal,
    Temporal,
    Event,
    Tool,
    Skill,
    Job,
    Preference,
    Experience,
    Fact,
    Result,
    Intent,
    Constraint,
    RiskWarning,
)
from .pipeline import Category, Strategy, Scorer
from .compiler import (
    ContextCompiler,
    extract_context,
    extract_identity,
    extract_goals,
    extract_events,
    extract_tools,
    extract_skills,
    extract_jobs,
    extract_preferences,
    extract_experiences,
    extract_facts,
    extract_results,
    extract_intents,
    extract_constraints,
    extract_warnings,
)

__all__ = [
    "ContextCompiler",
    "extract_context",
    "extract_identity",
    "extract_goals",
    "extract_events",
    "extract_tools",
    "extract_skills",
    "extract_jobs",
    "extract_preferences",
    "extract_experiences",
    "extract_facts",
    "extract_results",
    "extract_intents",
    "extract_constraints",
    "extract_warnings",
    "CATEGORY_NAMES",
    "ContextResponse",
    "Meta",
    "Identity",
    "Goal",
    "Temporal",
    "Event",
    "Tool",
    "Skill",
    "Job",
    "Preference",
    "Experience",
    "Fact",
    "Result",
    "Intent",
    "Constraint",
    "RiskWarning",
    "Category",
    "Strategy",
    "Scorer",
]
