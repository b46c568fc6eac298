"""Tests for the contextcore command line."""

import io
import json

import pytest

from contextcore import CATEGORY_NAMES, __version__
from contextcore.cli import main


def _run(argv, capsys):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    out, err = capsys.readouterr()
    return exc.value.code, out, err


def test_extract_prints_json(capsys):
    code, out, _ = _run(["extract", "I prefer dark mode over light mode"], capsys)
    assert code == 0
    data = json.loads(out)
    assert list(data)[:-1] == list(CATEGORY_NAMES)
    assert data["preferences"][0]["value"] == "dark mode"
    assert data["meta"]["source"] == "text"


def test_extract_source(capsys):
    code, out, _ = _run(["extract", "--source", "chat", "hi"], capsys)
    assert code == 0
    assert json.loads(out)["meta"]["source"] == "chat"


def test_extract_pretty(capsys):
    _, out, _ = _run(["extract", "--pretty", "hi"], capsys)
    assert out.startswith("{\n  ")


def test_extract_reads_stdin(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("I'm on mobile right now"))
    code, out, _ = _run(["extract", "-"], capsys)
    assert code == 0
    assert json.loads(out)["constraints"][0]["type"] == "device_limitation"


def test_category(capsys):
    code, out, _ = _run(["category", "intents", "How do I fix this error?"], capsys)
    assert code == 0
    items = json.loads(out)
    assert [i["type"] for i in items] == ["ask"]


def test_unknown_category(capsys):
    code, out, err = _run(["category", "moods", "I am happy"], capsys)
    assert code == 1
    assert out == ""
    assert "unknown category 'moods'" in err


def test_version(capsys):
    code, out, _ = _run(["version"], capsys)
    assert code == 0
    assert out.strip() == f"contextcore {__version__}"


def test_no_command_prints_help(capsys):
    code, out, _ = _run([], capsys)
    assert code == 0
    assert "usage: contextcore" in out
