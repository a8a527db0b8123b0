"""Unit tests for the pushwatch CLI."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from pushwatch.cli import app
from pushwatch.domain.errors import TargetDirectoryError

runner = CliRunner()

LIST_TARGETS = "pushwatch.infrastructure.adapters.join.join_client.JoinClient.list_targets"

WATCH_YAML = """\
Phone:
  3111899: [Topic, Rank]
All Devices:
  218274: [OnOff]
"""


@pytest.fixture(autouse=True)
def isolated_cli(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Run in an empty directory without a Join key or logging reconfiguration."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("JOIN_API_KEY", raising=False)
    with patch("pushwatch.cli.configure_structlog"):
        yield


@pytest.fixture
def watch_file(tmp_path: Path) -> Path:
    path = tmp_path / "watch.yaml"
    path.write_text(WATCH_YAML, encoding="utf-8")
    return path


class TestVersion:
    """Tests for --version."""

    def test_version(self, project_version: str) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert project_version in result.output


class TestCheckConfig:
    """Tests for the check-config command."""

    def test_offline_validation(self, watch_file: Path) -> None:
        result = runner.invoke(app, ["check-config", str(watch_file), "--offline"])

        assert result.exit_code == 0
        assert "OK" in result.output
        assert "2 entities, 2 targets" in result.output

    def test_invalid_file(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("Phone:\n  3111899: []\n", encoding="utf-8")

        result = runner.invoke(app, ["check-config", str(path), "--offline"])

        assert result.exit_code == 1
        assert "Configuration invalid" in result.output

    def test_online_validation_requires_api_key(self, watch_file: Path) -> None:
        result = runner.invoke(app, ["check-config", str(watch_file)])

        assert result.exit_code == 1
        assert "JOIN_API_KEY" in result.output

    def test_online_validation_resolves_targets(
        self, watch_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("JOIN_API_KEY", "k")
        listing = AsyncMock(return_value={"Phone": "dev-phone"})

        with patch(LIST_TARGETS, listing):
            result = runner.invoke(app, ["check-config", str(watch_file)])

        assert result.exit_code == 0
        assert "dev-phone" in result.output

    def test_online_validation_reports_unknown_target(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("JOIN_API_KEY", "k")
        path = tmp_path / "watch.yaml"
        path.write_text("Laptop:\n  1: [Rank]\n", encoding="utf-8")
        listing = AsyncMock(return_value={"Phone": "dev-phone"})

        with patch(LIST_TARGETS, listing):
            result = runner.invoke(app, ["check-config", str(path)])

        assert result.exit_code == 1
        assert "Unknown delivery target" in result.output


class TestDevices:
    """Tests for the devices command."""

    def test_lists_devices(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JOIN_API_KEY", "k")
        listing = AsyncMock(return_value={"Tablet": "def", "Phone": "abc"})

        with patch(LIST_TARGETS, listing):
            result = runner.invoke(app, ["devices"])

        assert result.exit_code == 0
        assert "Phone" in result.output
        assert "abc" in result.output

    def test_listing_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JOIN_API_KEY", "k")
        listing = AsyncMock(side_effect=TargetDirectoryError("Join device listing failed"))

        with patch(LIST_TARGETS, listing):
            result = runner.invoke(app, ["devices"])

        assert result.exit_code == 1
        assert "Cannot list devices" in result.output
