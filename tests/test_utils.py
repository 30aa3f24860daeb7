import json
import logging
import logging.handlers
from pathlib import Path

import pytest

from utils import DEFAULT_CONFIG, load_config, merge_config, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_partial_config_gets_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"simulation_parameters": {"seed": 3, "particle_count": 10}}))
    config = load_config(str(path))
    sim_params = config["simulation_parameters"]
    assert sim_params["seed"] == 3
    assert sim_params["particle_count"] == 10
    assert sim_params["repel_radius"] == 200.0
    assert config["run_control"] == DEFAULT_CONFIG["run_control"]


def test_defaults_are_not_mutated():
    merge_config({"run_control": {"max_steps": 5}})
    assert DEFAULT_CONFIG["run_control"]["max_steps"] is None


def test_unknown_section_ignored():
    config = merge_config({"bogus": {"a": 1}})
    assert "bogus" not in config


def test_section_must_be_object():
    with pytest.raises(ValueError):
        merge_config({"logging": "loud"})


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.json"))


def test_invalid_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(json.JSONDecodeError):
        load_config(str(path))


def test_top_level_must_be_object(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2]")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_shipped_config_loads():
    config = load_config(str(Path(__file__).resolve().parent.parent / "config.json"))
    assert config["simulation_parameters"]["particle_count"] == 1200


def test_setup_logging_console_only(restore_root_logger):
    setup_logging({"logging": {"level": "debug", "log_file": None}})
    root = restore_root_logger
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert not isinstance(root.handlers[0], logging.handlers.RotatingFileHandler)


def test_setup_logging_with_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "rainfall.log"
    setup_logging({"logging": {"level": "INFO", "log_file": str(log_file)}})
    root = restore_root_logger
    assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)
    for handler in root.handlers:
        handler.flush()
    assert log_file.exists()
    assert "Logging system initialized." in log_file.read_text()
