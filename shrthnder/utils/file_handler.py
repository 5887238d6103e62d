from __future__ import annotations
import json, os
from datetime import date
from pathlib import Path

from shrthnder.app import config

# Passages used when the rule provider sends none for a category
DEFAULT_TEXTS = {
    "general": (
        "Hey everyone, by the way I'm on my way to the meeting. In my opinion we should "
        "discuss this as soon as possible since the deadline is approaching."
    ),
    "medical": (
        "The patient presented with an elevated heart rate of 120 bpm. After a thorough "
        "diagnosis, the doctor wrote a prescription for medication. The patient's medical "
        "history was reviewed carefully."
    ),
    "legal": (
        "The attorney filed a motion without notifying the defendant. The plaintiff claims "
        "jurisdiction in this state, but we may challenge that."
    ),
    "tech": (
        "The application programming interface needs to connect to the database. The user "
        "interface and user experience need improvement, and there's a pull request waiting "
        "for review."
    ),
}


def default_test_text(category: str) -> str:
    return DEFAULT_TEXTS.get(category, DEFAULT_TEXTS["general"])


def ensure_app_files():
    os.makedirs(config.DATA_DIR, exist_ok=True)


def default_export_name(day: date | None = None) -> str:
    day = day or date.today()
    return f"{config.EXPORT_PREFIX}_{day.isoformat()}.json"


def export_results(results: list, path: str | os.PathLike | None = None) -> Path:
    """Write stored results as pretty-printed JSON. Returns the file written."""
    target = Path(path) if path else config.DATA_DIR / default_export_name()
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w", encoding="utf-8") as f:
        json.dump(results, f, indent=2)
    return target
