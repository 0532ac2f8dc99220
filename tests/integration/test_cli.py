"""Tests for the command line entry point."""

from __future__ import annotations

import pytest
from click.testing import CliRunner, Result

from kubestalk import __version__
from kubestalk.cli import cli
from kubestalk.models.config import StalkConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("KUBESTALK_SHOW_EMPTY", "KUBESTALK_DIFF_BY_LINE", "KUBESTALK_HIDE_MANAGED", "KUBESTALK_LABELS"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> list[StalkConfig]:
    """Replace the async entry point with one that records its config."""
    configs: list[StalkConfig] = []

    async def fake_main(config: StalkConfig) -> None:
        configs.append(config)

    monkeypatch.setattr("kubestalk.app.main", fake_main)
    return configs


def _invoke(*args: str) -> Result:
    return CliRunner().invoke(cli, list(args))


class TestVersionAndHelp:
    def test_version(self) -> None:
        result = _invoke("--version")
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self) -> None:
        result = _invoke("--help")
        assert result.exit_code == 0
        assert "--jsonpath" in result.output


class TestUsageErrors:
    def test_missing_resources(self) -> None:
        result = _invoke()
        assert result.exit_code == 2

    def test_negative_context_lines(self, captured: list[StalkConfig]) -> None:
        result = _invoke("deploy", "--context-lines=-1")
        assert result.exit_code == 2
        assert "negative" in result.output
        assert captured == []

    def test_names_with_labels(self, captured: list[StalkConfig]) -> None:
        result = _invoke("deploy", "web", "-l", "app=web")
        assert result.exit_code == 2
        assert "label selector" in result.output


class TestOptions:
    def test_short_options(self, captured: list[StalkConfig]) -> None:
        result = _invoke(
            "deploy,sts",
            "web",
            "-n",
            "prod-*",
            "-j",
            "{.spec}",
            "-s",
            "template",
            "-h",
            "replicas",
            "-e",
            "-w",
            "-c",
            "5",
        )
        assert result.exit_code == 0, result.output
        (config,) = captured
        assert config.watch.kinds == ("deploy", "sts")
        assert config.watch.names == ("web",)
        assert config.watch.namespaces == ("prod-*",)
        assert config.diff.query == "{.spec}"
        assert config.diff.include_paths == ("template",)
        assert config.diff.exclude_paths == ("replicas",)
        assert not config.diff.hide_empty_diffs
        assert not config.diff.word_diff
        assert config.diff.context_lines == 5

    def test_flags_fall_back_to_env(self, captured: list[StalkConfig], monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KUBESTALK_SHOW_EMPTY", "true")
        monkeypatch.setenv("KUBESTALK_HIDE_MANAGED", "false")
        result = _invoke("pods")
        assert result.exit_code == 0, result.output
        (config,) = captured
        assert not config.diff.hide_empty_diffs
        assert not config.diff.hide_managed_fields

    def test_explicit_flag_beats_env(self, captured: list[StalkConfig], monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KUBESTALK_HIDE_MANAGED", "false")
        result = _invoke("pods", "--hide-managed")
        assert result.exit_code == 0, result.output
        assert captured[0].diff.hide_managed_fields

    def test_stdin(self, captured: list[StalkConfig]) -> None:
        result = _invoke("-")
        assert result.exit_code == 0, result.output
        assert captured[0].watch.stdin
