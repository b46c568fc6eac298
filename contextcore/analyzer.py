"""Deterministic linguistic analyzer: tokenizer, tagger, phrase matcher.

Zero dependencies. The lexicon ships as JSON next to this module and is
loaded once on first use.

Strategy:
    1. Split text into whitespace chunks, peel punctuation, expand contractions
       into implicit tokens ("I'm" -> i + am)
    2. Tag each token from the lexicon (closed word classes, common verbs and
       adjectives, dates, numbers) with suffix rules for the rest; unknown
       open-class words default to Noun
    3. Split into sentence windows
    4. Compile phrase patterns ("(i|we) prefer [.+] (over|than) [.+]") into a
       regular expression over an encoded token stream and run it per window

Pattern syntax:
    word          literal, matches the token's normal form
    #Tag          token carrying a tag (#Noun, #Value, #TitleCase...)
    .             any token
    (a|b c)       alternation, alternatives may span several terms
    x? x+ x*      optional / one or more / zero or more (greedy)
    [ ... ]       capture group, [<name> ... ] for a named group
    ^ $           start / end of the sentence
"""

from __future__ import annotations

import functools
import json
import os
import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple, Union

from .utils import split_contraction

MAX_SENTENCE_TOKENS = 80

TAGS = (
    "Noun",
    "ProperNoun",
    "TitleCase",
    "Pronoun",
    "Possessive",
    "Determiner",
    "Preposition",
    "Conjunction",
    "Verb",
    "Gerund",
    "PastTense",
    "Auxiliary",
    "Copula",
    "Modal",
    "Adjective",
    "Adverb",
    "Value",
    "Date",
    "QuestionWord",
    "Negative",
    "Comma",
)


class PatternError(ValueError):
    """Raised when a phrase pattern cannot be compiled."""


# ── Data loading ──────────────────────────────────────────────────────────────

_DATA_DIR = os.path.join(os.path.dirname(__file__), "data")


def _load_json(filename: str) -> dict:
    path = os.path.join(_DATA_DIR, filename)
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


@dataclass(frozen=True)
class Lexicon:
    """Word classes used by the tagger. Built once, read-only afterwards."""
    classes: Dict[str, FrozenSet[str]]
    number_words: Dict[str, int]

    def has(self, cls: str, word: str) -> bool:
        return word in self.classes.get(cls, frozenset())


_lexicon: Optional[Lexicon] = None


def get_lexicon() -> Lexicon:
    global _lexicon
    if _lexicon is None:
        raw = _load_json("lexicon.json")
        classes = {
            key: frozenset(w.lower() for w in values)
            for key, values in raw.items()
            if isinstance(values, list)
        }
        _lexicon = Lexicon(classes=classes, number_words=dict(raw.get("number_words", {})))
    return _lexicon


# ── Tokens ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Token:
    """One word of the input.

    Attributes:
        text: Surface form, empty for implicit tokens from contractions
        normal: Lower-case normal form used by patterns
        tags: Part-of-speech and semantic tags
        pre: Punctuation glued to the front of the word
        post: Punctuation glued to the end of the word
        start: Character offset of the chunk in the input
    """
    text: str
    normal: str
    tags: FrozenSet[str]
    pre: str = ""
    post: str = ""
    start: int = 0

    def is_(self, tag: str) -> bool:
        return tag in self.tags


_LEADING = re.compile(r"^[\"'`“”‘’(\[{<«*_]+")
_TRAILING = re.compile(r"[\"'`“”‘’)\]}>»*_.,;:!?…]+$")
_SENTENCE_END = re.compile(r"[.!?;…]")
_ABBREVIATIONS = frozenset({"mr", "mrs", "ms", "dr", "e.g", "i.e", "etc", "vs", "st", "approx"})
_NUMERIC = re.compile(r"^\d+(?:[.,]\d+)*(?:st|nd|rd|th|k|gb|tb|mb|ghz|mhz|%)?$")
_CLOCK = re.compile(r"^\d{1,2}(?::\d{2})?(?:am|pm)$")


def _chunks(text: str):
    """Yield (chunk, offset, newline_before) for every whitespace-separated chunk."""
    last_end = 0
    for m in re.finditer(r"\S+", text):
        gap = text[last_end:m.start()]
        yield m.group(0), m.start(), "\n" in gap
        last_end = m.end()


def _word_tags(word: str, lex: Lexicon) -> set:
    tags = set()
    if _NUMERIC.match(word) or word in lex.number_words:
        tags.add("Value")
        return tags
    if _CLOCK.match(word):
        tags.add("Date")
        return tags

    closed = (
        ("determiners", "Determiner"),
        ("possessives", "Possessive"),
        ("pronouns", "Pronoun"),
        ("prepositions", "Preposition"),
        ("conjunctions", "Conjunction"),
        ("auxiliaries", "Auxiliary"),
        ("copulas", "Copula"),
        ("modals", "Modal"),
        ("negatives", "Negative"),
        ("question_words", "QuestionWord"),
    )
    for cls, tag in closed:
        if lex.has(cls, word):
            tags.add(tag)
    if lex.has("copulas", word) or lex.has("auxiliaries", word):
        tags.add("Verb")

    if lex.has("dates", word):
        tags.add("Date")
        tags.add("Noun")
    if lex.has("adverbs", word):
        tags.add("Adverb")
    if lex.has("adjectives", word):
        tags.add("Adjective")
    if lex.has("nouns", word):
        tags.add("Noun")
    if lex.has("verbs", word):
        tags.add("Verb")
    if lex.has("irregular_past", word):
        tags.update(("Verb", "PastTense"))

    if tags:
        return tags

    # Suffix rules for words the lexicon does not know.
    if word.endswith("ing") and len(word) > 4:
        if lex.has("ing_nouns", word):
            tags.add("Noun")
        else:
            tags.update(("Verb", "Gerund"))
    elif word.endswith("ed") and len(word) > 4 and not lex.has("ed_words", word):
        tags.update(("Verb", "PastTense"))
    elif word.endswith("ly") and len(word) > 4:
        tags.add("Adverb")
    elif re.search(r"(ful|ous|ive|less|ish)$", word) and len(word) > 5:
        tags.add("Adjective")
    elif word.endswith(("able", "ible")) and len(word) > 6:
        tags.add("Adjective")
    else:
        tags.add("Noun")
    return tags


def _encode_normal(word: str) -> str:
    return re.sub(r"[<>|\s]", "", word)


def tokenize(text: str) -> Tuple[Tuple[Token, ...], Tuple[Tuple[int, int], ...]]:
    """Tokenize and tag text.

    Returns:
        (tokens, windows) where windows are (start, end) token index ranges,
        one per sentence, each at most MAX_SENTENCE_TOKENS long
    """
    lex = get_lexicon()
    raw_tokens: List[dict] = []
    boundaries: List[int] = []

    for chunk, offset, newline in _chunks(text):
        if newline and raw_tokens:
            boundaries.append(len(raw_tokens))
        lead = _LEADING.match(chunk)
        pre = lead.group(0) if lead else ""
        rest = chunk[len(pre):]
        trail = _TRAILING.search(rest)
        post = trail.group(0) if trail else ""
        core = rest[: len(rest) - len(post)] if post else rest

        if not core:
            if raw_tokens:
                raw_tokens[-1]["post"] += chunk
                if _SENTENCE_END.search(chunk):
                    boundaries.append(len(raw_tokens))
            continue

        lowered = core.lower().replace("’", "'")
        parts = split_contraction(lowered)
        for i, part in enumerate(parts):
            normal = _encode_normal(part)
            if not normal:
                continue
            raw_tokens.append({
                "text": core if i == 0 else "",
                "normal": normal,
                "pre": pre if i == 0 else "",
                "post": post if i == len(parts) - 1 else "",
                "start": offset,
            })

        if post and _SENTENCE_END.search(post) and lowered not in _ABBREVIATIONS:
            boundaries.append(len(raw_tokens))

    tokens: List[Token] = []
    sentence_starts = {0, *boundaries}
    for idx, raw in enumerate(raw_tokens):
        word = raw["normal"]
        tags = _word_tags(word, lex)
        surface = raw["text"]
        if surface and surface[0].isupper() and word != "i":
            tags.add("TitleCase")
            if "Noun" in tags and idx not in sentence_starts:
                tags.add("ProperNoun")
        if "," in raw["post"]:
            tags.add("Comma")
        if idx > 0 and "Verb" in tags and "Noun" not in tags:
            prev = tokens[-1]
            if prev.is_("Determiner") or prev.is_("Possessive") or prev.is_("Adjective"):
                tags.add("Noun")
        tokens.append(Token(
            text=surface,
            normal=word,
            tags=frozenset(tags),
            pre=raw["pre"],
            post=raw["post"],
            start=raw["start"],
        ))

    windows: List[Tuple[int, int]] = []
    cuts = sorted(b for b in set(boundaries) if 0 < b < len(tokens))
    start = 0
    for end in cuts + [len(tokens)]:
        while end - start > MAX_SENTENCE_TOKENS:
            windows.append((start, start + MAX_SENTENCE_TOKENS))
            start += MAX_SENTENCE_TOKENS
        if end > start:
            windows.append((start, end))
        start = end
    return tuple(tokens), tuple(windows)


# ── Pattern compilation ───────────────────────────────────────────────────────

_PATTERN_LEXER = re.compile(
    r"\[<(?P<name>[A-Za-z_]\w*)>|(?P<punct>[\[\]()|?+*^$])|(?P<tag>#[A-Za-z]+)|(?P<word>[^\s\[\]()|?+*]+)"
)

_ANY = r"<[^>]*>"


def _tag_regex(tag: str) -> str:
    return r"<[^|>]*(?:\|[A-Za-z]+)*?\|%s\|[^>]*>" % tag


def _word_regex(word: str) -> str:
    return r"<%s\|[^>]*>" % re.escape(word)


@dataclass(frozen=True)
class CompiledPattern:
    """A phrase pattern ready to run against encoded token streams."""
    source: str
    regex: re.Pattern
    groups: Tuple[str, ...]
    required: Tuple[FrozenSet[str], ...]

    def applicable(self, words: FrozenSet[str]) -> bool:
        """True if every required literal (or one of its alternatives) is present."""
        return all(words & need for need in self.required)


class _Parser:
    def __init__(self, source: str):
        self.source = source
        self.items: List[Tuple[str, str]] = []
        for m in _PATTERN_LEXER.finditer(source):
            kind = m.lastgroup
            self.items.append((kind, m.group(kind) if kind != "name" else m.group("name")))
        self.pos = 0
        self.groups: List[str] = []

    def peek(self) -> Optional[Tuple[str, str]]:
        return self.items[self.pos] if self.pos < len(self.items) else None

    def take(self) -> Tuple[str, str]:
        item = self.items[self.pos]
        self.pos += 1
        return item

    def parse(self) -> Tuple[str, List[FrozenSet[str]]]:
        regex, required, _ = self.sequence(stop=())
        if self.peek() is not None:
            raise PatternError(f"Unexpected {self.peek()[1]!r} in pattern {self.source!r}")
        return regex, required

    def sequence(self, stop: Tuple[str, ...]):
        """Parse terms until a stop token. Returns (regex, required, first_literals)."""
        parts: List[str] = []
        required: List[FrozenSet[str]] = []
        first: Optional[FrozenSet[str]] = None
        while True:
            item = self.peek()
            if item is None or (item[0] == "punct" and item[1] in stop):
                break
            regex, req, lits, optional = self.term()
            parts.append(regex)
            if not optional:
                required.extend(req)
                if first is None and lits:
                    first = lits
        return "".join(parts), required, first

    def term(self):
        kind, value = self.take()
        required: List[FrozenSet[str]] = []
        literals: Optional[FrozenSet[str]] = None
        if kind == "word":
            if value == ".":
                regex = _ANY
            else:
                word = value.lower()
                regex = _word_regex(word)
                literals = frozenset({word})
                required.append(literals)
        elif kind == "tag":
            tag = value[1:]
            if tag not in TAGS:
                raise PatternError(f"Unknown tag {value!r} in pattern {self.source!r}")
            regex = _tag_regex(tag)
        elif kind == "punct" and value == "^":
            return "^", [], None, True
        elif kind == "punct" and value == "$":
            return "$", [], None, True
        elif kind == "punct" and value == "(":
            alts: List[str] = []
            alt_firsts: List[Optional[FrozenSet[str]]] = []
            while True:
                regex_alt, _req, first = self.sequence(stop=("|", ")"))
                alts.append(regex_alt)
                alt_firsts.append(first)
                closing = self.take() if self.peek() else None
                if closing is None:
                    raise PatternError(f"Unclosed '(' in pattern {self.source!r}")
                if closing[1] == ")":
                    break
            regex = "(?:%s)" % "|".join(alts)
            if all(f for f in alt_firsts):
                literals = frozenset().union(*alt_firsts)
                required.append(literals)
        elif kind in ("punct", "name") and (value == "[" or kind == "name"):
            name = value if kind == "name" else f"g{len(self.groups) + 1}"
            if name in self.groups:
                raise PatternError(f"Duplicate group {name!r} in pattern {self.source!r}")
            self.groups.append(name)
            inner, inner_req, first = self.sequence(stop=("]",))
            if not self.peek():
                raise PatternError(f"Unclosed '[' in pattern {self.source!r}")
            self.take()
            regex = "(?P<%s>%s)" % (name, inner)
            required.extend(inner_req)
            literals = first
        else:
            raise PatternError(f"Unexpected {value!r} in pattern {self.source!r}")

        optional = False
        nxt = self.peek()
        if nxt and nxt[0] == "punct" and nxt[1] in "?+*":
            self.take()
            regex = "(?:%s)%s" % (regex, nxt[1])
            optional = nxt[1] in "?*"
        if optional:
            required = []
        return regex, required, literals, optional


@functools.lru_cache(maxsize=1024)
def compile_pattern(pattern: str) -> CompiledPattern:
    """Compile a phrase pattern. Results are cached per process."""
    parser = _Parser(pattern)
    regex, required = parser.parse()
    if not regex.strip("^$"):
        raise PatternError(f"Empty pattern {pattern!r}")
    return CompiledPattern(
        source=pattern,
        regex=re.compile(regex),
        groups=tuple(parser.groups),
        required=tuple(required),
    )


# ── Views and matches ─────────────────────────────────────────────────────────

def _encode(tokens: Sequence[Token]) -> Tuple[str, Dict[int, int], Dict[int, int]]:
    parts: List[str] = []
    starts: Dict[int, int] = {}
    ends: Dict[int, int] = {}
    offset = 0
    for i, tok in enumerate(tokens):
        piece = "<%s|%s|>" % (tok.normal, "|".join(sorted(tok.tags)))
        starts[offset] = i
        offset += len(piece)
        ends[offset] = i + 1
        parts.append(piece)
    return "".join(parts), starts, ends


def _render(tokens: Sequence[Token]) -> str:
    out: List[str] = []
    last = len(tokens) - 1
    for i, tok in enumerate(tokens):
        pre = tok.pre if i > 0 else ""
        post = tok.post if i < last else ""
        if tok.text:
            if out:
                out.append(" ")
            out.append(pre + tok.text + post)
        elif post:
            out.append(post)
    return "".join(out).strip()


class View:
    """An immutable span of tokens.

    Views are cheap to copy; ``remove`` and ``clone`` return new views and
    never touch the original.
    """

    __slots__ = ("tokens", "window", "offset")

    def __init__(self, tokens: Sequence[Token], window: Optional[Sequence[Token]] = None, offset: int = 0):
        self.tokens: Tuple[Token, ...] = tuple(tokens)
        self.window: Tuple[Token, ...] = tuple(window) if window is not None else self.tokens
        self.offset = offset

    def __len__(self) -> int:
        return len(self.tokens)

    def __bool__(self) -> bool:
        return bool(self.tokens)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.text()!r})"

    def text(self) -> str:
        """Surface text of the span, without its outer punctuation."""
        return _render(self.tokens)

    def normal(self) -> str:
        """Space-joined normal forms (contractions expanded, lower-case)."""
        return " ".join(t.normal for t in self.tokens)

    def words(self) -> FrozenSet[str]:
        return frozenset(t.normal for t in self.tokens)

    def clone(self) -> "View":
        return View(self.tokens, self.window, self.offset)

    @property
    def sentence(self) -> "View":
        """The sentence window this span came from."""
        return View(self.window, self.window, 0)

    def before(self, n: int = 6) -> "View":
        """Up to n tokens preceding this span in its sentence."""
        start = max(0, self.offset - n)
        return View(self.window[start:self.offset], self.window, start)

    def after(self, n: int = 6) -> "View":
        """Up to n tokens following this span in its sentence."""
        start = self.offset + len(self.tokens)
        return View(self.window[start:start + n], self.window, start)

    def is_question(self) -> bool:
        """True if the sentence this span came from carries a question mark."""
        return any("?" in t.post for t in self.window)

    def tagged(self, tag: str) -> bool:
        return any(tag in t.tags for t in self.tokens)

    def match(self, pattern: str) -> List["Match"]:
        """Run a pattern inside this span."""
        return _find(self.tokens, compile_pattern(pattern), window=self.tokens, base=0)

    def has(self, pattern: str) -> bool:
        return bool(self.match(pattern))

    def remove(self, pattern: str) -> "View":
        """Return a copy without any sub-span matching the pattern."""
        drop = set()
        for m in self.match(pattern):
            drop.update(range(m.offset, m.offset + len(m)))
        kept = [t for i, t in enumerate(self.tokens) if i not in drop]
        return View(kept, self.window, self.offset)

    def numbers(self) -> List[float]:
        """Numeric values of Value-tagged tokens, number words included."""
        lex = get_lexicon()
        out: List[float] = []
        pending: Optional[float] = None
        for tok in self.tokens:
            word = tok.normal
            if word in lex.number_words:
                n = lex.number_words[word]
                if pending is None:
                    pending = float(n)
                elif n >= 100:
                    pending *= n
                else:
                    pending += n
                continue
            if pending is not None:
                out.append(pending)
                pending = None
            if "Value" in tok.tags:
                digits = re.match(r"^\d+(?:[.,]\d+)*", word)
                if digits:
                    out.append(float(digits.group(0).replace(",", "")))
        if pending is not None:
            out.append(pending)
        return out


class Match(View):
    """A pattern match: a view plus its capture groups."""

    __slots__ = ("groups",)

    def __init__(self, tokens, window, offset, groups: Dict[str, View]):
        super().__init__(tokens, window, offset)
        self.groups = groups

    def group(self, key: Union[int, str, None] = None) -> View:
        """Return a capture group.

        With no key: the first group, or the whole match when the pattern
        has no groups. Missing or non-participating groups give an empty view.
        """
        if key is None:
            if not self.groups:
                return View(self.tokens, self.window, self.offset)
            key = next(iter(self.groups))
        if isinstance(key, int):
            key = f"g{key}"
        return self.groups.get(key) or View((), self.window, self.offset)


def _find(tokens: Sequence[Token], compiled: CompiledPattern, window: Sequence[Token], base: int) -> List[Match]:
    if not tokens or not compiled.applicable(frozenset(t.normal for t in tokens)):
        return []
    encoded, starts, ends = _encode(tokens)
    found: List[Match] = []
    for m in compiled.regex.finditer(encoded):
        if m.end() == m.start():
            continue
        s = starts.get(m.start())
        e = ends.get(m.end())
        if s is None or e is None:
            continue
        groups: Dict[str, View] = {}
        for name in compiled.groups:
            if m.start(name) == -1:
                continue
            gs = starts.get(m.start(name))
            ge = ends.get(m.end(name))
            if m.start(name) == m.end(name):
                gs = ge = starts.get(m.start(name), s)
            if gs is None or ge is None:
                continue
            groups[name] = View(tokens[gs:ge], window, base + gs)
        found.append(Match(tokens[s:e], window, base + s, groups))
    return found


@dataclass(frozen=True)
class Document:
    """Analyzed text. Immutable and safe to share between extractors."""
    text: str
    tokens: Tuple[Token, ...]
    windows: Tuple[Tuple[int, int], ...]

    def sentences(self) -> List[View]:
        return [View(self.tokens[s:e]) for s, e in self.windows]

    def match(self, pattern: str) -> List[Match]:
        """All matches of a pattern, sentence by sentence, left to right."""
        compiled = compile_pattern(pattern)
        out: List[Match] = []
        for s, e in self.windows:
            window = self.tokens[s:e]
            out.extend(_find(window, compiled, window=window, base=0))
        return out

    def has(self, pattern: str) -> bool:
        return bool(self.match(pattern))


def analyze(text: str) -> Document:
    """Tokenize, tag and sentence-split text."""
    tokens, windows = tokenize(text or "")
    return Document(text=text or "", tokens=tokens, windows=windows)
