"""Tests for the tokenizer, tagger and phrase matcher."""

import pytest

from contextcore.analyzer import MAX_SENTENCE_TOKENS, PatternError, analyze, compile_pattern


class TestTokenizer:

    def test_contractions_expand_to_implicit_tokens(self):
        doc = analyze("I'm on mobile.")
        assert [t.normal for t in doc.tokens] == ["i", "am", "on", "mobile"]
        assert doc.tokens[0].text == "I'm"
        assert doc.tokens[1].text == ""

    def test_negative_contraction(self):
        doc = analyze("I don't like it")
        assert [t.normal for t in doc.tokens] == ["i", "do", "not", "like", "it"]

    def test_surface_text_is_preserved(self):
        doc = analyze("I don't like it")
        assert doc.sentences()[0].text() == "I don't like it"

    def test_sentence_split(self):
        doc = analyze("Hello world. I like tea.")
        sentences = doc.sentences()
        assert len(sentences) == 2
        assert sentences[1].normal() == "i like tea"

    def test_abbreviation_does_not_split(self):
        doc = analyze("Ask Dr. Smith about it")
        assert len(doc.sentences()) == 1

    def test_long_sentence_is_windowed(self):
        doc = analyze(" ".join(["word"] * 200))
        assert len(doc.windows) == 3
        assert all(e - s <= MAX_SENTENCE_TOKENS for s, e in doc.windows)

    def test_comma_tag(self):
        doc = analyze("Honestly, I like tea")
        assert doc.tokens[0].is_("Comma")
        assert not doc.tokens[1].is_("Comma")

    def test_proper_noun_mid_sentence(self):
        doc = analyze("I met Zorblat today")
        zorblat = doc.tokens[2]
        assert zorblat.is_("TitleCase")
        assert zorblat.is_("ProperNoun")

    def test_numbers(self):
        doc = analyze("I have 3 years")
        assert doc.tokens[2].is_("Value")
        assert doc.sentences()[0].numbers() == [3.0]

    def test_empty_text(self):
        doc = analyze("")
        assert doc.tokens == ()
        assert doc.sentences() == []


class TestPatterns:

    def test_greedy_capture(self):
        doc = analyze("I prefer dark mode over light mode")
        matches = doc.match("(i|we) prefer [.+]")
        assert len(matches) == 1
        assert matches[0].group().text() == "dark mode over light mode"

    def test_named_group(self):
        doc = analyze("My name is Alice.")
        m = doc.match("my name is [<name> .+]")[0]
        assert m.group("name").text() == "Alice"
        assert m.group("name").normal() == "alice"

    def test_missing_group_is_empty(self):
        doc = analyze("I like tea")
        m = doc.match("i like [.+]")[0]
        assert not m.group("nope")
        assert m.group("nope").text() == ""

    def test_multi_word_alternative(self):
        doc = analyze("I would rather have tea")
        assert doc.has("i (would rather|prefer) [.+]")

    def test_tag_term(self):
        doc = analyze("I have 3 years of experience")
        assert doc.has("have #Value years")

    def test_anchors(self):
        doc = analyze("tea is good")
        assert doc.has("^ tea")
        assert not doc.has("^ good")
        assert doc.has("good $")

    def test_question_flag_is_per_sentence(self):
        doc = analyze("I like tea. How do I fix this error?")
        assert not doc.match("i like [.+]")[0].is_question()
        assert doc.match("fix [.+]")[0].is_question()

    def test_context_views(self):
        doc = analyze("I prefer dark mode")
        m = doc.match("prefer")[0]
        assert m.before(1).normal() == "i"
        assert m.after(2).normal() == "dark mode"
        assert m.sentence.normal() == "i prefer dark mode"

    def test_remove_returns_new_view(self):
        view = analyze("I prefer dark mode over light mode").sentences()[0]
        trimmed = view.remove("(dark|light)")
        assert trimmed.normal() == "i prefer mode over mode"
        assert view.normal() == "i prefer dark mode over light mode"

    def test_required_literals_prefilter(self):
        compiled = compile_pattern("(i|we) prefer [.+]")
        assert not compiled.applicable(frozenset({"i", "like"}))
        assert compiled.applicable(frozenset({"we", "prefer", "tea"}))

    def test_unknown_tag_raises(self):
        with pytest.raises(PatternError):
            compile_pattern("#Bogus")

    def test_unclosed_group_raises(self):
        with pytest.raises(PatternError):
            compile_pattern("[foo")

    def test_unclosed_alternation_raises(self):
        with pytest.raises(PatternError):
            compile_pattern("(a|b")
