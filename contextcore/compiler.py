"""The aggregator: run every category over one text and merge the results."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from . import __version__
from .analyzer import analyze
from .extractors import (
    constraints,
    events,
    experiences,
    facts,
    goals,
    identity,
    intents,
    jobs,
    preferences,
    results,
    skills,
    tools,
    warnings,
)
from .pipeline import MAX_INPUT_LENGTH, Category, guarded, prepare_text, run_category
from .types import CATEGORY_NAMES, ContextResponse

logger = logging.getLogger(__name__)

PARSER_VERSION = __version__
DEFAULT_SOURCE = "text"

# Output order matches CATEGORY_NAMES.
CATEGORIES: Tuple[Category, ...] = (
    identity.CATEGORY,
    goals.CATEGORY,
    events.CATEGORY,
    tools.CATEGORY,
    skills.CATEGORY,
    jobs.CATEGORY,
    preferences.CATEGORY,
    experiences.CATEGORY,
    facts.CATEGORY,
    results.CATEGORY,
    intents.CATEGORY,
    constraints.CATEGORY,
    warnings.CATEGORY,
)

CATEGORY_BY_NAME: Dict[str, Category] = {c.name: c for c in CATEGORIES}


class ContextCompiler:
    """Compile free text into a ContextResponse.

    The text is truncated and analyzed once; the immutable document is shared
    by every category. Each category runs in isolation, so one failing
    category yields an empty list without affecting the others.

    Example:
        >>> compiler = ContextCompiler()
        >>> response = compiler.extract("I prefer dark mode over light mode")
        >>> response.preferences[0].polarity
        'positive'
    """

    def __init__(
        self,
        categories: Iterable[Category] = CATEGORIES,
        max_input_length: int = MAX_INPUT_LENGTH,
    ):
        self.categories: Tuple[Category, ...] = tuple(categories)
        self.max_input_length = max_input_length

    def extract(self, text: Any, source: Optional[str] = None) -> ContextResponse:
        """Extract all categories from text. Never raises."""
        source = source if isinstance(source, str) and source else DEFAULT_SOURCE
        try:
            return self._extract(text, source)
        except Exception:
            logger.warning("Extraction failed; returning empty response", exc_info=True)
            return ContextResponse.empty(source, PARSER_VERSION)

    def _extract(self, text: Any, source: str) -> ContextResponse:
        response = ContextResponse.empty(source, PARSER_VERSION)
        prepared = prepare_text(text, self.max_input_length)
        if prepared is None:
            return response

        document = guarded(analyze, prepared, label="analyzer")
        for category in self.categories:
            if category.name not in CATEGORY_NAMES:
                logger.debug("Ignoring unknown category %s", category.name)
                continue
            items = guarded(run_category, category, prepared, document, label=category.name)
            setattr(response, category.name, list(items or []))
        return response

    def extract_category(self, name: str, text: Any) -> List[Any]:
        """Run a single category by name.

        Raises:
            KeyError: If no category of that name is configured
        """
        for category in self.categories:
            if category.name == name:
                prepared = prepare_text(text, self.max_input_length)
                return run_category(category, prepared) if prepared else []
        raise KeyError(name)


_default_compiler: Optional[ContextCompiler] = None


def get_compiler() -> ContextCompiler:
    global _default_compiler
    if _default_compiler is None:
        _default_compiler = ContextCompiler()
    return _default_compiler


def extract_context(
    text: Any,
    options: Optional[Mapping[str, Any]] = None,
    *,
    source: Optional[str] = None,
) -> ContextResponse:
    """Extract structured context from text.

    Args:
        text: Free-form input. Non-strings and blank text give empty arrays
        options: Optional settings; only ``source`` is read
        source: Label recorded in ``meta.source`` (overrides options)

    Returns:
        A ContextResponse with all thirteen categories and ``meta``
    """
    if source is None and isinstance(options, Mapping):
        source = options.get("source")
    return get_compiler().extract(text, source=source)


extract_identity = identity.extract_identity
extract_goals = goals.extract_goals
extract_events = events.extract_events
extract_tools = tools.extract_tools
extract_skills = skills.extract_skills
extract_jobs = jobs.extract_jobs
extract_preferences = preferences.extract_preferences
extract_experiences = experiences.extract_experiences
extract_facts = facts.extract_facts
extract_results = results.extract_results
extract_intents = intents.extract_intents
extract_constraints = constraints.extract_constraints
extract_warnings = warnings.extract_warnings
