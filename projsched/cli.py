from __future__ import annotations

import argparse
import sys
from datetime import datetime
from typing import Callable, List, Optional, TextIO

import yaml

from .config import SchedulerConfig, load_config
from .driver import TaskList, as_datetime, render, sample_tasks
from .errors import (
    DuplicateTaskError,
    SchedulingError,
    SelfDependencyError,
    UnknownTaskError,
)
from .io import load_tasks, write_schedule_csv
from .logging_setup import get_logger, init_logging
from .scheduling import schedule
from .task_graph import TaskGraph

__all__ = ["interactive", "main"]

logger = get_logger()

MENU = ("[1] Add a task", "[2] Schedule!", "[3] Reset tasks", "[4] Exit")

NOT_ADDED = {
    DuplicateTaskError: "Duplicate task ID found! Task was not added.",
    UnknownTaskError: "Unknown task ID dependency detected! Task was not added.",
    SelfDependencyError: "Task cannot depend on itself! Task was not added.",
}


def _rejection(exc: SchedulingError) -> str:
    return NOT_ADDED.get(type(exc), "Invalid input! Task was not added.")


def _add_from_prompts(tasks: TaskList, ask: Callable[[str], str], say: Callable[[str], None]) -> None:
    # Answers are checked as they arrive; the first failure abandons the task.
    try:
        tid = tasks.check_id(ask("Input task ID number:"))

        say("Input dependency ID numbers separated by comma.")
        say("Or do not input any number and press enter if no dependency.")
        say("E.g.: 1,3,7")
        deps = tasks.check_dependencies(tid, ask("Dependency ID numbers:"))

        say("Input task duration in days.")
        say("Whole numbers only.")
        tasks.add_task(tid, deps, ask("Task duration:"))
    except SchedulingError as exc:
        say(_rejection(exc))
        return
    say(f"Task {tid} has been added.")


def interactive(
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    anchor: Optional[datetime] = None,
    date_format: str = "%d-%b-%Y",
) -> TaskList:
    """Run the line based menu until the user exits or input ends.

    Returns the task list as it stood when the loop finished.
    """

    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    def say(line: str) -> None:
        stdout.write(line + "\n")

    def ask(prompt: str) -> str:
        stdout.write(prompt)
        stdout.flush()
        line = stdin.readline()
        if not line:
            raise EOFError
        return line.rstrip("\r\n")

    tasks = TaskList()
    say("Welcome to Project Scheduler.")
    try:
        while True:
            for entry in MENU:
                say(entry)
            choice = ask("Choose option number:").strip()
            if choice == "1":
                _add_from_prompts(tasks, ask, say)
            elif choice == "2":
                if not tasks.tasks:
                    say("It seems that you have not added tasks yet.")
                    say("Add tasks first.")
                    continue
                try:
                    lines = tasks.render_all(anchor, date_format)
                except SchedulingError as exc:
                    say(f"Could not schedule: {exc}")
                    continue
                say("Here's your schedule:")
                for line in lines:
                    say(line)
            elif choice == "3":
                tasks.reset_all()
                say("Tasks have been reset.")
            elif choice == "4":
                stdout.write("Bye!")
                break
            else:
                say("Invalid option. Choose again.")
    except EOFError:
        logger.debug("input closed, leaving menu")
    return tasks


def _print_schedule(scheduled, date_format: str) -> None:
    for task in scheduled:
        print(render(task, date_format))


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="projsched",
        description="Schedule dependent tasks on the calendar",
    )
    parser.add_argument("--config", type=str, help="Path to YAML configuration file")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=None,
        help="Increase log verbosity; repeat for debug output",
    )
    sub = parser.add_subparsers(dest="command")

    sched_parser = sub.add_parser("schedule", help="Schedule tasks from a YAML or CSV file")
    sched_parser.add_argument("file", help="Task file (.yaml, .yml or .csv)")
    sched_parser.add_argument("--anchor", type=str, default=None, help="Start date, YYYY-MM-DD")
    sched_parser.add_argument("--out", type=str, default=None, help="Also write the schedule to this CSV")
    sched_parser.add_argument(
        "--order",
        choices=("input", "topo"),
        default="input",
        help="List tasks as given in the file or in dependency order",
    )

    sample_parser = sub.add_parser("sample", help="Schedule the built-in sample plan")
    sample_parser.add_argument("--anchor", type=str, default=None, help="Start date, YYYY-MM-DD")

    sub.add_parser("interactive", help="Enter tasks through a text menu")

    args = parser.parse_args(argv)

    try:
        cfg = load_config(args.config) if args.config else SchedulerConfig()
    except (OSError, KeyError, TypeError, yaml.YAMLError) as exc:
        print(f"error: invalid configuration {args.config}: {exc}", file=sys.stderr)
        return 1
    verbosity = args.verbose if args.verbose is not None else cfg.verbosity
    init_logging(verbosity)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        anchor_text = getattr(args, "anchor", None) or cfg.anchor
        anchor = as_datetime(anchor_text) if anchor_text else None

        if args.command == "interactive":
            interactive(anchor=anchor, date_format=cfg.date_format)
            return 0

        if args.command == "sample":
            scheduled = schedule(sample_tasks(), anchor)
            _print_schedule(scheduled, cfg.date_format)
            return 0

        task_file = load_tasks(args.file)
        if anchor is None:
            anchor = task_file.anchor
        # Report dangling ids and whole cycles before any date is computed.
        graph = TaskGraph.build(task_file.tasks)
        graph.validate()
        scheduled = schedule(task_file.tasks, anchor)
        if args.order == "topo":
            by_id = {t.id: t for t in scheduled}
            scheduled = [by_id[t.id] for t in graph.toposort()]
        _print_schedule(scheduled, cfg.date_format)
        if args.out:
            out = write_schedule_csv(scheduled, args.out)
            logger.info("wrote schedule to %s", out)
        return 0
    except (SchedulingError, FileNotFoundError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
