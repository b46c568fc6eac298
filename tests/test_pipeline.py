"""Tests for the shared extraction engine: scoring, dedup and isolation."""

import math

import pytest

import contextcore.pipeline as pipeline
from contextcore.pipeline import (
    Category,
    IndicatorTiers,
    Scorer,
    Strategy,
    dedupe,
    guarded,
    prepare_text,
    run_category,
)
from contextcore.types import Preference


def _validate(candidate):
    value = candidate.get("value")
    if not value:
        return None
    return {"key": "general", "value": value.lower()}


def _key(item):
    return item.value


def _category(*strategies):
    return Category(
        name="preferences",
        item_type=Preference,
        primary="value",
        strategies=tuple(strategies),
        validate=_validate,
        key=_key,
    )


LIKE = Strategy(name="like", confidence=0.9, pattern="i like [.+]")


def _boom(*_args, **_kwargs):
    raise RuntimeError("boom")


class TestScorer:

    def test_passes_base_through(self):
        assert Scorer().score(0.9) == pytest.approx(0.9)

    @pytest.mark.parametrize("base", [None, "high", True, math.nan, math.inf])
    def test_bad_base_uses_default(self, base):
        assert Scorer().score(base) == pytest.approx(0.5)

    def test_clamps_into_bounds(self):
        scorer = Scorer()
        assert scorer.score(1.5) == pytest.approx(0.98)
        assert scorer.score(0.0) == pytest.approx(0.05)
        assert scorer.score(-3) == pytest.approx(0.05)

    def test_hedge_penalty(self):
        assert Scorer().score(0.9, "i think i like tea") == pytest.approx(0.72)

    def test_no_hedge_no_penalty(self):
        assert Scorer().score(0.9, "i like tea") == pytest.approx(0.9)

    def test_custom_ceiling(self):
        assert Scorer(ceiling=0.95).score(0.99) == pytest.approx(0.95)


class TestIndicatorTiers:

    TIERS = IndicatorTiers((
        ("explicit", ("i prefer",), 0.95),
        ("weak", ("i guess",), 0.6),
    ))

    def test_first_tier_wins(self):
        assert self.TIERS.classify("i guess i prefer tea") == ("explicit", 0.95)

    def test_default_when_nothing_matches(self):
        assert self.TIERS.classify("tea") is None
        assert self.TIERS.confidence("tea", default=0.7) == 0.7


class TestDedupe:

    def test_first_seen_order(self):
        items = [
            Preference(key="general", value="tea", confidence=0.8),
            Preference(key="general", value="coffee", confidence=0.8),
            Preference(key="general", value="tea", confidence=0.7),
        ]
        out = dedupe(items, _key)
        assert [p.value for p in out] == ["tea", "coffee"]

    def test_higher_confidence_replaces(self):
        items = [
            Preference(key="general", value="tea", confidence=0.7),
            Preference(key="general", value="tea", confidence=0.9),
        ]
        assert dedupe(items, _key)[0].confidence == 0.9

    def test_equal_confidence_keeps_existing(self):
        first = Preference(key="general", value="tea", confidence=0.8)
        out = dedupe([first, Preference(key="other", value="tea", confidence=0.8)], _key)
        assert out[0] is first

    def test_fills_missing_optional_fields(self):
        items = [
            Preference(key="general", value="tea", confidence=0.9),
            Preference(key="general", value="tea", comparison="coffee", confidence=0.5),
        ]
        out = dedupe(items, _key)
        assert out[0].comparison == "coffee"
        assert out[0].confidence == 0.9

    def test_does_not_mutate_inputs(self):
        first = Preference(key="general", value="tea", confidence=0.5)
        dedupe([first, Preference(key="general", value="tea", confidence=0.9)], _key)
        assert first.confidence == 0.5


class TestGuarded:

    def test_returns_value(self):
        assert guarded(lambda x: x * 2, 4) == 8

    def test_swallows_exceptions(self):
        assert guarded(_boom, label="test") is None


class TestStrategy:

    def test_needs_pattern_or_scan(self):
        with pytest.raises(ValueError):
            Strategy(name="empty", confidence=0.5)

    def test_rejects_both(self):
        with pytest.raises(ValueError):
            Strategy(name="both", confidence=0.5, pattern="x", scan=lambda text: [])


class TestRunCategory:

    def test_pattern_strategy(self):
        items = run_category(_category(LIKE), "I like Tea")
        assert [p.value for p in items] == ["tea"]
        assert items[0].confidence == pytest.approx(0.9)

    @pytest.mark.parametrize("text", [None, 42, "", "   \n", ["I like tea"]])
    def test_unusable_input(self, text):
        assert run_category(_category(LIKE), text) == []

    def test_hedged_sentence(self):
        items = run_category(_category(LIKE), "I think I like tea")
        assert items[0].confidence == pytest.approx(0.72)

    def test_fallback_only_when_group_empty(self):
        fallback = Strategy(name="fallback", confidence=0.6, scan=lambda text: ["fallback"], fallback=True)
        category = _category(LIKE, fallback)
        assert [p.value for p in run_category(category, "I like tea")] == ["tea"]
        assert [p.value for p in run_category(category, "Nothing to see")] == ["fallback"]

    def test_candidate_confidence_overrides_strategy(self):
        scan = Strategy(name="scan", confidence=0.9, scan=lambda text: [{"value": "tea", "confidence": 0.3}])
        items = run_category(_category(scan), "anything")
        assert items[0].confidence == pytest.approx(0.3)

    def test_failing_scan_is_isolated(self):
        broken = Strategy(name="broken", confidence=0.9, scan=_boom)
        items = run_category(_category(broken, LIKE), "I like tea")
        assert [p.value for p in items] == ["tea"]

    def test_failing_parse_is_isolated(self):
        broken = Strategy(name="broken", confidence=0.9, pattern="i like [.+]", parse=_boom)
        items = run_category(_category(broken, LIKE), "I like tea")
        assert [p.value for p in items] == ["tea"]

    def test_failing_validator_gives_empty(self):
        category = Category(
            name="preferences",
            item_type=Preference,
            primary="value",
            strategies=(LIKE,),
            validate=_boom,
            key=_key,
        )
        assert run_category(category, "I like tea") == []

    def test_scans_run_without_analyzer(self, monkeypatch):
        monkeypatch.setattr(pipeline, "analyze", _boom)
        scan = Strategy(name="scan", confidence=0.8, scan=lambda text: ["tea"] if "tea" in text else [])
        items = run_category(_category(LIKE, scan), "I like tea")
        assert [p.value for p in items] == ["tea"]
        assert items[0].confidence == pytest.approx(0.8)

    def test_truncates_long_input(self):
        seen = []

        def scan(text):
            seen.append(len(text))
            return []

        run_category(_category(Strategy(name="scan", confidence=0.5, scan=scan)), "a" * 70_000)
        assert seen == [pipeline.MAX_INPUT_LENGTH]

    def test_prepare_text(self):
        assert prepare_text("  ") is None
        assert prepare_text(3) is None
        assert prepare_text("abcdef", max_length=3) == "abc"
