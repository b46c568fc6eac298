"""Tests for text helpers."""

from contextcore.utils import (
    contains_any,
    cut_clause,
    find_phrase_spans,
    first_phrase,
    normalize_candidate,
    normalize_text,
    parse_value,
    plain_text,
    snake_case,
    split_contraction,
    strip_leading,
    strip_trailing,
)


def test_plain_text_expands_contractions():
    assert plain_text("I'm sure it's fine") == "i am sure it is fine"


def test_plain_text_keeps_punctuation():
    assert plain_text("Hello,  World!") == "hello, world!"


def test_split_contraction_suffixes():
    assert split_contraction("can't") == ("can", "not")
    assert split_contraction("we're") == ("we", "are")
    assert split_contraction("tea") == ("tea",)


def test_normalize_text():
    assert normalize_text("  Dark   Mode ") == "dark mode"
    assert normalize_text(None) == ""


def test_normalize_candidate_strips_quotes_and_punctuation():
    assert normalize_candidate('  "Dark Mode."  ') == "dark mode"


def test_normalize_candidate_keeps_case_when_asked():
    assert normalize_candidate("Alice", lower=False) == "Alice"


def test_normalize_candidate_rejections():
    assert normalize_candidate("it", blocklist={"it"}) is None
    assert normalize_candidate("42") is None
    assert normalize_candidate("a" * 300) is None
    assert normalize_candidate("x") is None
    assert normalize_candidate(None) is None


def test_contains_any_respects_word_boundaries():
    assert contains_any("reset my pc", ("reset",))
    assert not contains_any("preset value", ("reset",))
    assert not contains_any("", ("reset",))


def test_first_phrase_is_leftmost():
    assert first_phrase("i use vs code and vim", ("vim", "vs code")) == "vs code"
    assert first_phrase("nothing here", ("vim",)) is None


def test_find_phrase_spans_prefers_longest():
    assert find_phrase_spans("i use google chrome", ("chrome", "google chrome")) == [(6, "google chrome")]


def test_find_phrase_spans_offsets():
    assert find_phrase_spans("i know python", ("python",)) == [(7, "python")]


def test_cut_clause():
    assert cut_clause("dark mode, usually") == "dark mode"
    assert cut_clause("tea but not coffee") == "tea"
    assert cut_clause("tea, coffee", at_comma=False) == "tea, coffee"


def test_strip_leading_and_trailing():
    assert strip_leading("to the gym", ("to", "the")) == "gym"
    assert strip_trailing("dark mode more", ("more",)) == "dark mode"


def test_snake_case():
    assert snake_case("Data Storage") == "data_storage"
    assert snake_case("  VS Code! ") == "vs_code"


def test_parse_value():
    assert parse_value("yes") is True
    assert parse_value("False") is False
    assert parse_value("42") == 42
    assert parse_value("3.5") == 3.5
    assert parse_value("blue") == "blue"
