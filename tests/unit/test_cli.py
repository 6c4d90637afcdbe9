"""Unit tests for the click command line."""

import pytest
from click.testing import CliRunner

from cache_db.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def store_args(tmp_path):
    return ["--store", "file", "--path", str(tmp_path), "--max-size", "2"]


class TestCli:
    """Test commands against a file store shared across invocations."""

    def test_set_get_persist_across_invocations(self, runner, store_args):
        result = runner.invoke(main, store_args + ["set", "a", "1"])
        assert result.exit_code == 0, result.output
        result = runner.invoke(main, store_args + ["get", "a"])
        assert result.exit_code == 0
        assert result.output.strip() == "1"

    def test_get_missing_exits_1(self, runner, store_args):
        result = runner.invoke(main, store_args + ["get", "missing"])
        assert result.exit_code == 1
        assert "(absent)" in result.output

    def test_ls_shows_mru_first_and_eviction(self, runner, store_args):
        for key in ("a", "b", "c"):
            runner.invoke(main, store_args + ["set", key, key.upper()])
        result = runner.invoke(main, store_args + ["ls"])
        lines = result.output.strip().splitlines()
        assert "2/2 entries" in lines[0]
        assert lines[1].split()[1] == "c"
        assert lines[2].split()[1] == "b"

    def test_delete_and_clear(self, runner, store_args):
        runner.invoke(main, store_args + ["set", "a", "1"])
        assert "deleted" in runner.invoke(main, store_args + ["delete", "a"]).output
        assert "not found" in runner.invoke(main, store_args + ["delete", "a"]).output
        runner.invoke(main, store_args + ["set", "b", "2"])
        runner.invoke(main, store_args + ["clear"])
        assert runner.invoke(main, store_args + ["size"]).output.strip() == "0"

    def test_negative_ttl_rejected(self, runner, store_args):
        result = runner.invoke(main, store_args + ["set", "a", "1", "--ttl", "-5"])
        assert result.exit_code == 2

    def test_invalid_max_size(self, runner, tmp_path):
        result = runner.invoke(main, ["--path", str(tmp_path), "--max-size", "0", "size"])
        assert result.exit_code != 0

    def test_show_events(self, runner, store_args):
        result = runner.invoke(main, ["--show-events"] + store_args + ["set", "a", "1"])
        assert result.exit_code == 0
        assert "[set]" in result.output

    def test_stats(self, runner, store_args):
        result = runner.invoke(main, store_args + ["stats"])
        assert result.exit_code == 0
        assert "hit_ratio=" in result.output

    def test_selftest(self, runner):
        result = runner.invoke(main, ["selftest"])
        assert result.exit_code == 0, result.output
        assert "22/22 passed" in result.output
