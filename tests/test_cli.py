import json

import pytest

from tickerdash.cli import build_parser, main
from tickerdash.config.constants import STORAGE_KEYS


def _stored_tickers(config_file):
    path = config_file.parent / "state" / f"{STORAGE_KEYS.TICKERS}.json"
    return json.loads(path.read_text())


class TestCommandLine:
    """Test the tickerdash console script against a file store."""

    def test_show_empty_dashboard(self, config_file, capsys):
        assert main(["--config", str(config_file), "show"]) == 0
        out = capsys.readouterr().out
        assert "LAYOUT (1 entries)" in out
        assert "menu" in out
        assert "TICKERS (0" in out

    def test_add_persists_between_runs(self, config_file, capsys):
        assert main(["--config", str(config_file), "add", "aapl"]) == 0
        assert main(["--config", str(config_file), "add", "MSFT", "--compare"]) == 0

        tickers = _stored_tickers(config_file)
        assert [t["data"]["symbol"] for t in tickers] == ["AAPL", "MSFT"]
        assert [t["compare"] for t in tickers] == [False, True]

        capsys.readouterr()
        assert main(["--config", str(config_file), "compare"]) == 0
        out = capsys.readouterr().out
        assert "MSFT" in out
        assert "AAPL" not in out

    def test_toggle_and_remove(self, config_file, capsys):
        main(["--config", str(config_file), "add", "TSLA"])
        widget_id = _stored_tickers(config_file)[0]["id"]

        assert main(["--config", str(config_file), "toggle-compare", widget_id]) == 0
        assert _stored_tickers(config_file)[0]["compare"] is True

        assert main(["--config", str(config_file), "remove", widget_id]) == 0
        assert _stored_tickers(config_file) == []

    def test_unknown_widget_id(self, config_file, capsys):
        assert main(["--config", str(config_file), "remove", "NOPE-1"]) == 1
        assert main(["--config", str(config_file), "toggle-compare", "NOPE-1"]) == 1
        assert "No widget with id NOPE-1" in capsys.readouterr().out

    def test_provider_failure_exits_non_zero(self, config_file, capsys):
        assert main(["--config", str(config_file), "add", "FAILED"]) == 1
        assert "unavailable" in capsys.readouterr().out

    def test_empty_symbol(self, config_file, capsys):
        assert main(["--config", str(config_file), "add", " "]) == 2

    def test_missing_config(self, tmp_path, capsys):
        assert main(["--config", str(tmp_path / "nope.yaml"), "show"]) == 2
        assert "not found" in capsys.readouterr().out

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])
