"""Tests for input limits and configuration loading."""

import pytest

from flowsched.config import SchedulerLimits, default_solver_name, load_limits
from flowsched.logging_config import LoggingFlags, log_if


class TestSchedulerLimits:
    def test_defaults(self):
        limits = SchedulerLimits()
        assert limits.max_name_length == 15
        assert limits.max_period == 200
        assert limits.min_processors == 1
        assert limits.max_processors == 5
        assert limits.max_tasks == 60

    @pytest.mark.parametrize("kwargs", [{"max_period": 0}, {"max_tasks": -1}, {"max_name_length": "15"}])
    def test_rejects_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            SchedulerLimits(**kwargs)

    def test_rejects_inverted_processor_range(self):
        with pytest.raises(ValueError, match="min_processors"):
            SchedulerLimits(min_processors=4, max_processors=2)

    def test_from_env(self):
        limits = SchedulerLimits.from_env({"FLOWSCHED_MAX_PERIOD": "120", "FLOWSCHED_MAX_TASKS": ""})
        assert limits.max_period == 120
        assert limits.max_tasks == 60

    def test_from_env_not_an_integer(self):
        with pytest.raises(ValueError, match="FLOWSCHED_MAX_PROCESSORS"):
            SchedulerLimits.from_env({"FLOWSCHED_MAX_PROCESSORS": "many"})

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "limits.yaml"
        path.write_text("max_processors: 8\nmax_tasks: 10\n")
        limits = SchedulerLimits.from_yaml(path)
        assert limits.max_processors == 8
        assert limits.max_tasks == 10
        assert limits.max_period == 200

    def test_from_yaml_empty(self, tmp_path):
        path = tmp_path / "limits.yaml"
        path.write_text("")
        assert SchedulerLimits.from_yaml(path) == SchedulerLimits()

    def test_from_yaml_unknown_key(self, tmp_path):
        path = tmp_path / "limits.yaml"
        path.write_text("max_cores: 8\n")
        with pytest.raises(ValueError, match="max_cores"):
            SchedulerLimits.from_yaml(path)

    def test_from_yaml_not_a_mapping(self, tmp_path):
        path = tmp_path / "limits.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="mapping"):
            SchedulerLimits.from_yaml(path)


def test_load_limits(tmp_path, monkeypatch):
    monkeypatch.setenv("FLOWSCHED_MAX_TASKS", "7")
    assert load_limits().max_tasks == 7

    path = tmp_path / "limits.yaml"
    path.write_text("max_period: 50\n")
    limits = load_limits(path)
    assert limits.max_period == 50
    assert limits.max_tasks == 60


def test_default_solver_name(monkeypatch):
    monkeypatch.delenv("FLOWSCHED_SOLVER", raising=False)
    assert default_solver_name() == "edmonds-karp"
    monkeypatch.setenv("FLOWSCHED_SOLVER", "ortools")
    assert default_solver_name() == "ortools"


class TestLogging:
    def test_log_if(self, capsys):
        log_if(True, "shown")
        log_if(False, "hidden")
        out = capsys.readouterr().out
        assert "shown" in out
        assert "hidden" not in out

    def test_flag_groups(self):
        LoggingFlags.enable_all_debug()
        assert LoggingFlags.SCHEDULE_PROGRESS and LoggingFlags.FLOW_DETAILS
        LoggingFlags.set_quiet_mode()
        assert LoggingFlags.WARNINGS
        assert not LoggingFlags.SCHEDULE_PROGRESS
        assert not LoggingFlags.FLOW_DETAILS
        assert not LoggingFlags.CLI_OUTPUT
