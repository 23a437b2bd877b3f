"""Configuration loading for the command line."""

from dataclasses import dataclass, fields
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


@dataclass
class SchedulerConfig:
    """Settings shared by every command.

    ``anchor`` is an ISO ``YYYY-MM-DD`` date; when unset each run anchors on
    the current time.
    """

    date_format: str = "%d-%b-%Y"
    anchor: Optional[str] = None
    verbosity: int = 0


def load_config(path: str | Path) -> SchedulerConfig:
    """Load a YAML configuration file.

    Parameters
    ----------
    path:
        Path to a YAML mapping with any of the keys ``date_format``,
        ``anchor`` and ``verbosity``.  Missing keys keep their defaults.
    """

    with open(Path(path), "r", encoding="utf8") as f:
        raw: Dict[str, Any] = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise TypeError("Configuration root must be a mapping")

    known = {f.name for f in fields(SchedulerConfig)}
    unknown = sorted(k for k in raw if k not in known)
    if unknown:
        raise KeyError(f"Unknown keys in configuration: {unknown}")

    merged: Dict[str, Any] = {}
    if raw.get("date_format") is not None:
        merged["date_format"] = str(raw["date_format"])
    # ``yaml.safe_load`` turns unquoted ISO dates into ``date`` objects.
    anchor = raw.get("anchor")
    if isinstance(anchor, (date, datetime)):
        merged["anchor"] = anchor.isoformat()
    elif anchor is not None:
        merged["anchor"] = str(anchor)
    if raw.get("verbosity") is not None:
        try:
            merged["verbosity"] = int(raw["verbosity"])
        except (TypeError, ValueError) as exc:
            raise TypeError(f"Invalid value for 'verbosity': {raw['verbosity']}") from exc

    return SchedulerConfig(**merged)
