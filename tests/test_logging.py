import io
import json
import logging
from datetime import datetime

import pytest

from projsched import logging_setup
from projsched.driver import TaskList
from projsched.errors import DuplicateTaskError, SelfDependencyError
from projsched.scheduling import schedule
from projsched.task_graph import Task


def test_json_log_contains_context_and_message(capsys):
    logging_setup.init_logging(verbosity=1)
    logger = logging_setup.get_logger().bind(run="r1", task=3, anchor="2024-01-01")
    logger.info("hello")
    captured = capsys.readouterr()
    line = captured.out.strip()
    data = json.loads(line)
    assert data["run"] == "r1"
    assert data["task"] == 3
    assert data["anchor"] == "2024-01-01"
    assert data["message"] == "hello"
    assert data["level"] == "INFO"


def test_verbosity_respected(capsys):
    logging_setup.init_logging(verbosity=0)
    logger = logging_setup.get_logger()
    logger.info("should be hidden")
    assert capsys.readouterr().out == ""

    logging_setup.init_logging(verbosity=2)
    logger = logging_setup.get_logger()
    logger.debug("now visible")
    line = capsys.readouterr().out.strip()
    data = json.loads(line)
    assert data["level"] == "DEBUG"
    assert data["message"] == "now visible"


def test_schedule_run_is_logged(capsys):
    logging_setup.init_logging(verbosity=1)
    schedule([Task(1, None, 2)], datetime(2024, 1, 1))
    records = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert records[-1]["message"] == "scheduled 1 tasks"
    assert records[-1]["anchor"] == "2024-01-01T00:00:00"
    assert len(records[-1]["run"]) == 8


def test_rejection_is_logged_with_task_and_code(capsys):
    logging_setup.init_logging(verbosity=1)
    tasks = TaskList([Task(1, None, 2)])
    with pytest.raises(DuplicateTaskError):
        tasks.add_task(1, None, 1)
    records = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert {
        "level": "INFO",
        "message": "duplicate task id 1",
        "task": 1,
        "code": "TASK/DUPLICATE",
    } in records
    logging_setup.init_logging(verbosity=0)


def test_text_output_to_given_stream():
    stream = io.StringIO()
    logging_setup.init_logging(verbosity=1, stream=stream, json_lines=False)
    logging_setup.get_logger(task=4).rejected(SelfDependencyError(4))
    assert stream.getvalue() == "INFO projsched: task 4 cannot depend on itself\n"
    logging_setup.init_logging(verbosity=0)


def test_negative_verbosity_means_quiet():
    stream = io.StringIO()
    logger = logging_setup.init_logging(verbosity=-1, stream=stream)
    assert logger.level == logging.WARNING
    logging_setup.init_logging(verbosity=0)
