"""Tests for the serprelay command-line interface."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterator
from pathlib import Path

import pytest

from serprelay.cli import main


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Run from an empty directory with no SERPRELAY_ variables set."""
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.startswith("SERPRELAY_"):
            monkeypatch.delenv(name)
    # ``search`` points the root log handler at the captured stderr
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers, root.level = handlers, level


class TestSearchCommand:
    def test_prints_mock_response(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["search", "coffee shops", "--num", "5"])

        assert exc_info.value.code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["provider"] == "mock"
        assert len(data["organic"]) == 5
        assert data["organic"][0]["url"] == "https://example.com/coffee-1"
        assert data["degraded"] is True

    def test_blank_query_exits_2(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["search", "   "])

        assert exc_info.value.code == 2
        assert "Query parameter (q) is required" in capsys.readouterr().err

    def test_invalid_type_exits_2(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["search", "coffee", "--type", "images"])

        assert exc_info.value.code == 2

    def test_missing_config_exits_1(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["search", "coffee", "--config", "nope.yaml"])

        assert exc_info.value.code == 1

    def test_config_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        config = tmp_path / "custom.yaml"
        config.write_text("observability:\n  log_level: error\n")

        with pytest.raises(SystemExit) as exc_info:
            main(["search", "tea", "--config", str(config), "--num", "2"])

        assert exc_info.value.code == 0
        assert len(json.loads(capsys.readouterr().out)["organic"]) == 2


def test_command_required() -> None:
    with pytest.raises(SystemExit) as exc_info:
        main([])

    assert exc_info.value.code == 2
