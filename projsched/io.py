from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional
import csv
import re

import pandas as pd
import yaml

from .driver import as_datetime, parse_id
from .errors import InvalidInputError
from .task_graph import Task

__all__ = [
    "TaskFile",
    "load_tasks",
    "load_yaml_tasks",
    "load_csv_tasks",
    "schedule_frame",
    "write_schedule_csv",
]

SCHEDULE_COLUMNS = ["id", "dependencies", "duration", "start", "end"]


@dataclass(frozen=True)
class TaskFile:
    """Tasks read from disk and the anchor date the file asks for, if any."""

    tasks: List[Task]
    anchor: Optional[datetime] = None


def _raise(path: str, msg: str) -> None:
    raise InvalidInputError(f"{path}: {msg}")


def _number(path: str, value: Any) -> int:
    try:
        return parse_id(value)
    except InvalidInputError:
        _raise(path, f"expected a whole number, got {value!r}")


def load_yaml_tasks(text: str) -> TaskFile:
    """Parse tasks from YAML text.

    The document is a mapping with a ``tasks`` list and an optional
    ``anchor`` date.  Each task has ``id``, ``duration`` and optionally
    ``depends_on`` (or ``dependencies``) as a list of ids.
    """

    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:  # pragma: no cover - yaml lib formats message
        _raise("$", f"YAML parse error: {exc}")

    if not isinstance(raw, dict):
        _raise("$", "root must be a mapping")
    for key in raw:
        if key not in {"tasks", "anchor"}:
            _raise(key, "unexpected field")

    anchor_raw = raw.get("anchor")
    anchor: Optional[datetime] = None
    if isinstance(anchor_raw, datetime):
        anchor = anchor_raw
    elif isinstance(anchor_raw, date):
        anchor = datetime(anchor_raw.year, anchor_raw.month, anchor_raw.day)
    elif anchor_raw is not None:
        anchor = as_datetime(str(anchor_raw))

    items = raw.get("tasks")
    if items is None:
        items = []
    if not isinstance(items, list):
        _raise("tasks", "must be a list")

    tasks: List[Task] = []
    for i, node in enumerate(items):
        where = f"tasks[{i}]"
        if not isinstance(node, dict):
            _raise(where, "must be a mapping")
        for key in node:
            if key not in {"id", "duration", "depends_on", "dependencies"}:
                _raise(f"{where}.{key}", "unexpected field")
        if "id" not in node:
            _raise(f"{where}.id", "missing")
        if "duration" not in node:
            _raise(f"{where}.duration", "missing")
        deps_raw = node.get("depends_on", node.get("dependencies"))
        if deps_raw is None:
            deps_raw = []
        if not isinstance(deps_raw, list):
            deps_raw = [deps_raw]
        deps = tuple(_number(f"{where}.depends_on", d) for d in deps_raw)
        tasks.append(
            Task(
                _number(f"{where}.id", node["id"]),
                deps,
                _number(f"{where}.duration", node["duration"]),
            )
        )
    return TaskFile(tasks=tasks, anchor=anchor)


def load_csv_tasks(path: Path | str) -> TaskFile:
    """Read tasks from a CSV file with ``id``, ``dependencies`` and ``duration``.

    Dependencies are separated by ``;`` or whitespace.  Leading and trailing
    whitespace is trimmed from all fields and blank rows are skipped.
    """

    def _strip(val: Optional[str]) -> str:
        return val.strip() if val is not None else ""

    with Path(path).open(newline="") as f:
        reader = csv.DictReader(f)
        rows = list(reader)

    tasks: List[Task] = []
    for line, row in enumerate(rows, start=2):
        tid = _strip(row.get("id"))
        if not tid:
            continue
        deps = tuple(
            _number(f"line {line}.dependencies", part)
            for part in re.split(r"[;\s]+", _strip(row.get("dependencies")))
            if part
        )
        tasks.append(
            Task(
                _number(f"line {line}.id", tid),
                deps,
                _number(f"line {line}.duration", _strip(row.get("duration"))),
            )
        )
    return TaskFile(tasks=tasks)


def load_tasks(path: Path | str) -> TaskFile:
    """Load a task file, choosing the format from its extension."""

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"No such file: {p}")
    ext = p.suffix.lower()
    if ext in (".yaml", ".yml"):
        return load_yaml_tasks(p.read_text(encoding="utf8"))
    if ext == ".csv":
        return load_csv_tasks(p)
    raise ValueError(f"Unsupported task file extension: {ext}")


def schedule_frame(scheduled: Iterable[Task]) -> pd.DataFrame:
    """Return scheduled tasks as a table, one row per task in input order."""

    rows: List[Dict[str, Any]] = [
        {
            "id": t.id,
            "dependencies": ";".join(str(d) for d in t.dependencies),
            "duration": t.duration,
            "start": t.schedule_start,
            "end": t.schedule_end,
        }
        for t in scheduled
    ]
    df = pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)
    df["start"] = pd.to_datetime(df["start"])
    df["end"] = pd.to_datetime(df["end"])
    return df


def write_schedule_csv(scheduled: Iterable[Task], path: Path | str) -> Path:
    """Write :func:`schedule_frame` to ``path`` as CSV and return the path."""

    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    schedule_frame(scheduled).to_csv(out, index=False, date_format="%Y-%m-%d")
    return out
