import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from mama_brain.cli import app


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def faq_path(tmp_path: Path) -> Path:
    path = tmp_path / "faq.json"
    records = [{"question": "ساعت کاری چیه؟", "answer": "هر روز از ۹ تا ۵."}]
    path.write_text(json.dumps(records, ensure_ascii=False), encoding="utf-8")
    return path


def test_respond_with_faq(runner: CliRunner, faq_path: Path) -> None:
    result = runner.invoke(app, ["respond", "ساعت کاری چیه؟", "--faq", str(faq_path)])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["feedback"]["response_source"] == "faq"
    assert payload["response_content"].startswith("[ماما] ")


def test_respond_without_faq(runner: CliRunner) -> None:
    result = runner.invoke(app, ["respond", "امروز خسته‌ام", "--seed", "7"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["feedback"]["response_source"] == "empathetic"
    assert payload["selected_template_key"].startswith("empathetic-")


def test_correct_command(runner: CliRunner) -> None:
    result = runner.invoke(app, ["correct", "sghl"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"corrected": "سلام", "was_changed": True}


def test_signals_command(runner: CliRunner) -> None:
    result = runner.invoke(app, ["signals", "چرا؟"])
    assert result.exit_code == 0
    categories = [signal["category"] for signal in json.loads(result.stdout)]
    assert "تراکم_سوال" in categories


def test_angles_command(runner: CliRunner) -> None:
    result = runner.invoke(app, ["angles", "سلام چطوری؟", "--last-key", "angle-steps"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["primary"] == "angle-clarification"
    assert payload["anti_repetition_triggered"] is True


def test_deep_and_bias_commands(runner: CliRunner, tmp_path: Path) -> None:
    stats_path = tmp_path / "stats.json"
    stats_path.write_text(json.dumps([["سوال", 0.5, 1], ["کمک", 0.5, 99]], ensure_ascii=False), encoding="utf-8")

    deep = runner.invoke(app, ["deep", "سلام چطوری؟", "--stats", str(stats_path), "--seed", "0"])
    assert deep.exit_code == 0
    assert json.loads(deep.stdout)["template_key"] == "angle-clarification"

    bias = runner.invoke(app, ["bias", str(stats_path)])
    assert bias.exit_code == 0
    assert json.loads(bias.stdout) == [
        {"angle_key": "angle-clarification", "bias_weight": 2.0},
        {"angle_key": "angle-steps", "bias_weight": 0.5},
    ]


def test_import_faq_command(runner: CliRunner, faq_path: Path, tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("faq_import:\n  batch_delay: 0\n", encoding="utf-8")
    result = runner.invoke(app, ["import-faq", str(faq_path), "--config", str(config_path)])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"success": 1, "failed": 0, "stored": 1}
