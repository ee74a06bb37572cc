"""CLI tests: compare JSON/YAML documents end to end."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from keydiff.cli import app
from keydiff.plugins import loader

runner = CliRunner()


@pytest.fixture(autouse=True)
def _no_installed_plugins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(loader, "_load_group", lambda group: [])


def _write_json(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def _orders(tmp_path: Path, amount: int) -> tuple[Path, Path]:
    expected = _write_json(
        tmp_path / "expected.json",
        {"customer": "alice", "orders": [{"id": 1, "amount": 10}, {"id": 2, "amount": 20}]},
    )
    actual = _write_json(
        tmp_path / "actual.json",
        {"customer": "alice", "orders": [{"id": 2, "amount": amount}, {"id": 1, "amount": 10}]},
    )
    return expected, actual


def test_identical_documents_exit_zero(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    expected, actual = _orders(tmp_path, 20)

    result = runner.invoke(app, ["compare", str(expected), str(actual), "--key", "dict=id"])

    assert result.exit_code == 0, result.output
    assert "The objects are identical." in result.output


def test_differences_exit_one_and_are_printed(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    expected, actual = _orders(tmp_path, 25)

    result = runner.invoke(app, ["compare", str(expected), str(actual), "--key", "dict=id"])

    assert result.exit_code == 1
    assert "[orders][2][amount]: 20 != 25" in result.output


def test_missing_key_provider_exits_two(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    expected, actual = _orders(tmp_path, 25)

    result = runner.invoke(app, ["compare", str(expected), str(actual)])

    assert result.exit_code == 2
    assert "MISSING_KEY_PROVIDER" in result.output


def test_default_config_file_is_picked_up(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "keydiff.yaml").write_text("key_providers:\n  dict: id\n", encoding="utf-8")
    expected, actual = _orders(tmp_path, 25)

    result = runner.invoke(app, ["compare", str(expected), str(actual)])

    assert result.exit_code == 1
    assert "[orders][2][amount]: 20 != 25" in result.output


def test_yaml_inputs_and_json_report_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    expected = tmp_path / "expected.yaml"
    actual = tmp_path / "actual.yml"
    expected.write_text("tags: [a, a, b]\n", encoding="utf-8")
    actual.write_text("tags: [a, b, b]\n", encoding="utf-8")
    report = tmp_path / "out" / "report.json"

    result = runner.invoke(
        app, ["compare", str(expected), str(actual), "--format", "json", "--output", str(report)]
    )

    assert result.exit_code == 1
    payload = json.loads(report.read_text(encoding="utf-8"))
    assert payload["differences"] == [
        {"path": "[tags]", "message": "expected element not found: 'a'"},
        {"path": "[tags]", "message": "extra element found: 'b'"},
    ]


def test_markdown_format(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    expected = _write_json(tmp_path / "left.json", {"a": 1})
    actual = _write_json(tmp_path / "right.json", {"a": "1"})

    result = runner.invoke(app, ["compare", str(expected), str(actual), "--format", "markdown"])

    assert result.exit_code == 1
    assert "## keydiff Report: left.json vs right.json" in result.output
    assert "| `[a]` | type mismatch (int != str) |" in result.output


def test_invalid_inputs_exit_two(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    good = _write_json(tmp_path / "good.json", {})

    assert runner.invoke(app, ["compare", str(broken), str(good)]).exit_code == 2
    assert runner.invoke(app, ["compare", str(good), str(tmp_path / "missing.json")]).exit_code == 2
    assert runner.invoke(app, ["compare", str(good), str(good), "--key", "nonsense"]).exit_code == 2
    assert runner.invoke(app, ["compare", str(good), str(good), "--format", "html"]).exit_code == 2


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.startswith("keydiff ")
