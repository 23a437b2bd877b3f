from pathlib import Path

import pytest

from projsched.config import SchedulerConfig, load_config


def test_load_bundled_config():
    path = Path(__file__).resolve().parent.parent / "configs" / "projsched.yaml"
    cfg = load_config(path)
    assert cfg.date_format == "%d-%b-%Y"
    assert cfg.anchor == "2024-01-01"
    assert cfg.verbosity == 0


def test_defaults_for_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == SchedulerConfig()


def test_values_are_cast(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("verbosity: '2'\nanchor: '2025-06-30'\n")
    cfg = load_config(path)
    assert cfg.verbosity == 2
    assert cfg.anchor == "2025-06-30"


def test_unknown_key(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("timezone: UTC\n")
    with pytest.raises(KeyError, match="timezone"):
        load_config(path)


def test_bad_verbosity(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("verbosity: loud\n")
    with pytest.raises(TypeError, match="verbosity"):
        load_config(path)
