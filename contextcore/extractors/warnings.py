"""Warning extraction: risks the writer is aware of or worried about."""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional

from ..pipeline import Candidate, Category, Strategy, run_category
from ..types import RiskWarning
from ..utils import contains_any

RESET_WORDS = ("reset", "resetting", "resets", "wipe", "wiping", "reinstall", "format", "formatting")
MACHINE_WORDS = ("pc", "windows", "computer", "laptop")
KEEP_CUES = ("without losing", "not losing", "do not want to lose", "not lose")
WORRY_CUES = (
    "worry about data", "worried about data", "worry about loss", "worried about losing",
    "still worry", "still worried", "concerned about data", "afraid of losing",
)
LOSS_WORDS = ("wiped", "deleted", "lost", "gone", "erased")
DATA_WORDS = ("files", "data", "documents", "photos", "passwords")
BREAK_CUES = ("will break", "might break", "could break", "break my", "would break")
SETUP_WORDS = ("setup", "development", "config", "configuration", "environment", "install")

# Ordered; the first matching entry names what a warning relates to.
RELATED_TO = (
    ("windows_reset", ("resetting windows", "reset windows", "windows reset", "reinstall windows")),
    ("system_reset", ("system reset", "reset system", "during resets", "resets", "factory reset")),
    ("pc_reset", ("reset", "resetting", "wipe", "wiping", "format")),
    ("data_backup", ("backup", "backing up", "back up", "save", "saving")),
    ("software_update", ("update", "updating", "upgrade", "upgrading")),
    ("file_deletion", ("delete", "deleting", "remove", "removing", "deleted", "wiped")),
)

# Fallback tables: (type, patterns, keywords).
GENERAL = (
    ("data_loss_risk", (
        "lose data", "losing data", "data loss", "wipe data", "delete data",
        "erase data", "lose files", "losing files", "lost data", "lost files",
    ), ("data", "files", "documents", "backup", "passwords")),
    ("system_breakage_risk", (
        "will break", "might break", "could break", "break my", "break current",
        "break setup",
    ), ("break", "breaking", "broke", "damage", "corrupt")),
    ("security_risk", (
        "is it safe", "is this safe", "is it secure", "security risk", "security concern",
        "privacy concern", "worried about security", "data breach", "hacked", "malware",
        "virus",
    ), ("security", "secure", "privacy", "breach", "hack", "password")),
    ("irreversible_action", (
        "can not undo", "no undo", "irreversible", "can not go back",
        "point of no return", "no way back",
    ), ("undo", "permanent", "forever", "revert")),
    ("general_concern", (
        "worried about", "concerned about", "afraid of", "fear of", "scared of",
        "nervous about", "risky", "dangerous", "be careful",
    ), ("worried", "concerned", "afraid", "scared", "nervous", "careful", "warning", "worry")),
)

# Keywords alone are too weak; one of these must appear as well.
RISK_CUES = (
    "worried", "worry", "afraid", "risk", "risky", "careful", "lose", "losing",
    "break", "scared", "nervous", "concerned", "danger", "dangerous", "unsafe",
)


def _related_to(text: str) -> Optional[str]:
    for related, cues in RELATED_TO:
        if contains_any(text, cues):
            return related
    return None


def _scan_specific(text: str) -> Iterator[Dict[str, object]]:
    if contains_any(text, BREAK_CUES) and contains_any(text, SETUP_WORDS):
        related = _related_to(text)
        yield {
            "type": "system_breakage_risk",
            "related_to": related if related != "pc_reset" else "windows_reset",
            "confidence": 0.85,
        }
    resetting = contains_any(text, RESET_WORDS)
    if (resetting and contains_any(text, MACHINE_WORDS)) or contains_any(text, KEEP_CUES):
        yield {"type": "data_loss_risk", "related_to": "pc_reset", "confidence": 0.90}
    elif resetting and contains_any(text, WORRY_CUES):
        yield {"type": "data_loss_risk", "related_to": "system_reset", "confidence": 0.90}
    elif contains_any(text, LOSS_WORDS) and contains_any(text, DATA_WORDS):
        yield {
            "type": "data_loss_risk",
            "related_to": _related_to(text) or "file_deletion",
            "confidence": 0.85,
        }


def _scan_general(text: str) -> Iterator[Dict[str, object]]:
    for kind, patterns, _ in GENERAL:
        if contains_any(text, patterns):
            yield {"type": kind, "related_to": _related_to(text), "confidence": 0.90}
            return
    if not contains_any(text, RISK_CUES):
        return
    for kind, _, keywords in GENERAL:
        if contains_any(text, keywords):
            yield {"type": kind, "related_to": _related_to(text), "confidence": 0.70}
            return


STRATEGIES = (
    Strategy(
        name="specific",
        confidence=0.85,
        scan=_scan_specific,
    ),
    Strategy(
        name="general",
        confidence=0.70,
        scan=_scan_general,
        fallback=True,
    ),
)


def validate(candidate: Candidate) -> Optional[Dict[str, object]]:
    kind = candidate.get("type")
    if not kind:
        return None
    return {"type": kind, "related_to": candidate.get("related_to")}


def dedup_key(warning: RiskWarning) -> str:
    return warning.type


CATEGORY = Category(
    name="warnings",
    item_type=RiskWarning,
    primary="type",
    strategies=STRATEGIES,
    validate=validate,
    key=dedup_key,
)


def extract_warnings(text: str) -> List[RiskWarning]:
    """Extract risk warnings from text. Never raises."""
    return run_category(CATEGORY, text)
