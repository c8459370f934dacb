# File: tests/test_cli.py
"""Тесты для CLI (`doc_scout.cli`) с использованием click.testing.CliRunner.
Проверяют команды `explore`, `config`, `--version`, а также обработку ошибок.
"""
import json

import pytest
from click.testing import CliRunner

import doc_scout.cli as cli_module
from doc_scout.cli import cli
from doc_scout.crawler.models import ExplorationResult, LinkCandidate, PageResult


@pytest.fixture(autouse=True)
def patch_engine(monkeypatch):
    """Патчим Engine, чтобы не ходить в сеть; запоминаем аргументы вызова."""
    calls = []

    class DummyEngine:
        def __init__(self, config):
            self.config = config

        def explore(self, url, depth):
            calls.append({"url": url, "depth": depth, "config": self.config})
            if url == "bad":
                return ExplorationResult(url, depth, error="Error fetching content: Invalid URL", is_error=True)
            page = PageResult(
                url=url,
                title="Example",
                content="Example body",
                links=(LinkCandidate("http://example.com/docs", "Docs", 7.0),),
            )
            return ExplorationResult(url, depth, content=[page])

    monkeypatch.setattr(cli_module, "Engine", DummyEngine)
    return calls


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "DocScout" in result.output


def test_show_config(tmp_path):
    cfg_file = tmp_path / "custom.yaml"
    cfg_file.write_text("deadline: 20\nfan_out: 2\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["deadline"] == 20
    assert data["fan_out"] == 2


def test_bad_config_reports_error(tmp_path):
    cfg_file = tmp_path / "broken.yaml"
    cfg_file.write_text("no_such_option: 1\n", encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 1


def test_explore_stdout(patch_engine):
    runner = CliRunner()
    result = runner.invoke(cli, ["explore", "http://example.com/", "--depth", "2"])
    assert result.exit_code == 0
    output = json.loads(result.output)
    assert output["rootUrl"] == "http://example.com/"
    assert output["explorationDepth"] == 2
    assert output["pagesExplored"] == 1
    assert output["content"][0]["links"] == [{"url": "http://example.com/docs", "text": "Docs"}]
    assert patch_engine[0]["depth"] == 2


@pytest.mark.parametrize("given,expected", [("0", 1), ("9", 5), ("3", 3)])
def test_explore_depth_is_clamped(patch_engine, given, expected):
    runner = CliRunner()
    result = runner.invoke(cli, ["explore", "http://example.com/", "-d", given])
    assert result.exit_code == 0
    assert patch_engine[0]["depth"] == expected


def test_explore_deadline_override(patch_engine):
    runner = CliRunner()
    result = runner.invoke(cli, ["explore", "http://example.com/", "--deadline", "5"])
    assert result.exit_code == 0
    assert patch_engine[0]["config"].deadline == 5.0


def test_explore_json_file(tmp_path):
    out = tmp_path / "out" / "result.json"
    runner = CliRunner()
    result = runner.invoke(cli, ["explore", "http://example.com/", "--json", str(out)])
    assert result.exit_code == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["content"][0]["title"] == "Example"


def test_explore_hard_failure_exit_code():
    runner = CliRunner()
    result = runner.invoke(cli, ["explore", "bad"])
    assert result.exit_code == 1
    assert "Invalid URL" in result.output
