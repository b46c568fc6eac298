"""Tests for the aggregator: totality, determinism, bounds and isolation."""

import time

import pytest

import contextcore
import contextcore.compiler as compiler_module
from contextcore import CATEGORY_NAMES, ContextCompiler, extract_context
from contextcore.compiler import CATEGORY_BY_NAME, PARSER_VERSION
from contextcore.pipeline import MAX_INPUT_LENGTH

SAMPLES = [
    "I prefer dark mode over light mode",
    "I'm on mobile right now",
    "How do I fix this error?",
    "Hello world.",
    "After resetting my PC, all local files were wiped.",
    "I'm building an ESP32 sensor project with VS Code on Windows and I want to learn Rust next year.",
    "My name is Alice, I'm 25 years old and I know Python. I'm worried about losing my data.",
    "I'm stuck using Windows on my laptop. Can you help me back up my passwords?",
    "Ich möchte 日本語 lernen ❤ café!",
]

UNUSABLE = [None, 42, 3.5, ["text"], {"text": "hi"}, "", "   ", "\n\t"]


def _without_timestamp(data):
    data = dict(data)
    data["meta"] = {k: v for k, v in data["meta"].items() if k != "timestamp"}
    return data


class TestScenarios:

    def test_preference_with_comparison(self):
        response = extract_context("I prefer dark mode over light mode")
        assert len(response.preferences) == 1
        assert response.preferences[0].polarity == "positive"
        assert response.preferences[0].confidence < 1

    def test_on_mobile(self):
        response = extract_context("I'm on mobile right now")
        assert len(response.constraints) == 1
        assert response.constraints[0].type == "device_limitation"

    def test_question_is_ask(self):
        response = extract_context("How do I fix this error?")
        assert len(response.intents) == 1
        assert response.intents[0].type == "ask"
        assert response.intents[0].confidence < 1

    def test_empty_string(self):
        response = extract_context("")
        assert response.total == 0
        data = response.to_dict()
        assert data["meta"]["source"] == "text"
        assert data["meta"]["parser_version"] == PARSER_VERSION
        assert data["meta"]["timestamp"]

    def test_neutral_text(self):
        response = extract_context("Hello world.")
        for name in CATEGORY_NAMES:
            assert response.items(name) == [], name

    def test_long_input_is_truncated(self, monkeypatch):
        seen = []
        real = compiler_module.run_category

        def spy(category, text, document=None):
            seen.append(len(text))
            return real(category, text, document)

        monkeypatch.setattr(compiler_module, "run_category", spy)
        text = ("I prefer dark mode. " * 4000)[:70_000]
        t0 = time.perf_counter()
        response = extract_context(text)
        elapsed = time.perf_counter() - t0

        assert seen == [MAX_INPUT_LENGTH] * len(CATEGORY_NAMES)
        assert response.preferences
        assert elapsed < 60


class TestTotality:

    @pytest.mark.parametrize("text", UNUSABLE)
    def test_unusable_input_gives_skeleton(self, text):
        data = extract_context(text).to_dict()
        assert set(data) == set(CATEGORY_NAMES) | {"meta"}
        assert all(data[name] == [] for name in CATEGORY_NAMES)

    @pytest.mark.parametrize("text", SAMPLES)
    def test_every_key_present(self, text):
        data = extract_context(text).to_dict()
        assert list(data)[:-1] == list(CATEGORY_NAMES)
        assert all(isinstance(data[name], list) for name in CATEGORY_NAMES)

    def test_aggregator_failure_gives_skeleton(self, monkeypatch):
        def boom(*_args, **_kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(compiler_module, "prepare_text", boom)
        response = ContextCompiler().extract("I prefer dark mode", source="chat")
        assert response.total == 0
        assert response.meta.source == "chat"


class TestProperties:

    @pytest.mark.parametrize("text", SAMPLES)
    def test_deterministic(self, text):
        first = _without_timestamp(extract_context(text).to_dict())
        second = _without_timestamp(extract_context(text).to_dict())
        assert first == second

    @pytest.mark.parametrize("text", SAMPLES)
    def test_confidence_bounds(self, text):
        response = extract_context(text)
        for name in CATEGORY_NAMES:
            for item in response.items(name):
                assert 0.05 <= item.confidence <= 0.98, (name, item)

    @pytest.mark.parametrize("text", SAMPLES)
    def test_no_duplicate_keys(self, text):
        response = extract_context(text)
        for name in CATEGORY_NAMES:
            keys = [CATEGORY_BY_NAME[name].key(item) for item in response.items(name)]
            assert len(keys) == len(set(keys)), name

    def test_failing_category_is_isolated(self, monkeypatch):
        text = "I prefer dark mode over light mode. I'm on mobile right now"
        baseline = extract_context(text)
        real = compiler_module.run_category

        def flaky(category, *args, **kwargs):
            if category.name == "preferences":
                raise RuntimeError("boom")
            return real(category, *args, **kwargs)

        monkeypatch.setattr(compiler_module, "run_category", flaky)
        response = extract_context(text)
        assert response.preferences == []
        assert response.constraints == baseline.constraints
        assert response.constraints

    def test_shared_analyzer_failure_reparses_per_category(self, monkeypatch):
        def boom(*_args, **_kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(compiler_module, "analyze", boom)
        response = extract_context("I'm on mobile right now")
        assert [c.type for c in response.constraints] == ["device_limitation"]


class TestOptions:

    def test_source_from_options(self):
        assert extract_context("hi", {"source": "chat"}).meta.source == "chat"

    def test_source_keyword_wins(self):
        assert extract_context("hi", {"source": "chat"}, source="email").meta.source == "email"

    def test_bad_source_falls_back(self):
        assert extract_context("hi", {"source": 7}).meta.source == "text"

    def test_parser_version(self):
        assert extract_context("hi").meta.parser_version == contextcore.__version__

    def test_timestamp_is_utc(self):
        assert extract_context("hi").meta.timestamp.endswith("Z")


class TestCompiler:

    def test_extract_category(self):
        compiler = ContextCompiler()
        items = compiler.extract_category("preferences", "I prefer dark mode over light mode")
        assert [p.value for p in items] == ["dark mode"]

    def test_extract_category_unknown(self):
        with pytest.raises(KeyError):
            ContextCompiler().extract_category("moods", "I am happy")

    def test_subset_of_categories(self):
        compiler = ContextCompiler(categories=[CATEGORY_BY_NAME["constraints"]])
        response = compiler.extract("I prefer dark mode. I'm on mobile right now")
        assert response.preferences == []
        assert response.constraints

    def test_items_are_immutable(self):
        response = extract_context("I prefer dark mode over light mode")
        with pytest.raises(Exception):
            response.preferences[0].value = "light mode"
