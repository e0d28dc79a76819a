import logging

import pytest

from logging_config import reset_logging, setup_logging
from workforce import InvalidModelError, sample_model, solve


@pytest.fixture(autouse=True)
def clean_logging():
    reset_logging()
    yield
    reset_logging()


def test_solve_logs_to_file(tmp_path):
    log_file = tmp_path / "logs" / "planner.log"
    setup_logging("INFO", log_file=log_file)
    solve(sample_model())

    text = log_file.read_text(encoding="utf-8")
    assert "workforce" in text
    assert "Solved 5-week horizon" in text
    assert "Solved stage" not in text


def test_debug_level_logs_each_stage(tmp_path):
    log_file = tmp_path / "planner.log"
    setup_logging(logging.DEBUG, log_file=log_file)
    solve(sample_model())

    assert log_file.read_text(encoding="utf-8").count("Solved stage") == 5


def test_setup_is_idempotent(tmp_path):
    setup_logging("INFO", log_file=tmp_path / "a.log")
    setup_logging("INFO", log_file=tmp_path / "b.log")
    assert len(logging.getLogger("workforce").handlers) == 2
    assert not (tmp_path / "b.log").exists()


def test_rejected_model_logs_warning(caplog):
    model = sample_model()
    bad = type(model)(**{**model.__dict__, "hire_fixed_cost": -1})
    with caplog.at_level(logging.WARNING, logger="workforce"):
        with pytest.raises(InvalidModelError):
            solve(bad)
    assert "Rejected workforce model" in caplog.text
