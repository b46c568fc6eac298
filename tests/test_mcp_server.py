"""Integration tests for the contextcore MCP server tools."""

import json

import pytest

pytest.importorskip("mcp", reason="mcp package requires Python 3.10+")

from contextcore import CATEGORY_NAMES, __version__
from contextcore_mcp.server import extract_category, extract_context, list_categories


class TestExtractContext:
    def test_full_response(self):
        result = json.loads(extract_context("I prefer dark mode over light mode"))
        assert list(result)[:-1] == list(CATEGORY_NAMES)
        assert result["preferences"][0]["value"] == "dark mode"
        assert result["meta"]["source"] == "text"

    def test_source_label(self):
        result = json.loads(extract_context("I'm on mobile right now", source="chat"))
        assert result["meta"]["source"] == "chat"
        assert result["constraints"][0]["type"] == "device_limitation"

    def test_empty_text(self):
        result = json.loads(extract_context(""))
        assert all(result[name] == [] for name in CATEGORY_NAMES)


class TestExtractCategory:
    def test_single_category(self):
        result = json.loads(extract_category("intents", "How do I fix this error?"))
        assert result["category"] == "intents"
        assert result["count"] == 1
        assert result["items"][0]["type"] == "ask"

    def test_unknown_category(self):
        result = json.loads(extract_category("moods", "I am happy"))
        assert result["error"] == "unknown category: moods"
        assert result["categories"] == list(CATEGORY_NAMES)

    def test_nothing_found(self):
        result = json.loads(extract_category("warnings", "Hello world."))
        assert result["count"] == 0
        assert result["items"] == []


def test_list_categories():
    result = json.loads(list_categories())
    assert result["categories"] == list(CATEGORY_NAMES)
    assert result["parser_version"] == __version__
