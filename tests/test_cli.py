import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner
from pain_verdict.cli import app

runner = CliRunner()


@pytest.fixture
def records_file(tmp_path):
    path = tmp_path / "records.json"
    path.write_text(
        json.dumps(
            [
                {"text": "Payroll is a nightmare, I'm so frustrated", "engagement_score": 8, "source_label": "smallbusiness"},
                {"text": "I would pay for a tool that fixes invoicing", "engagement_score": 2, "source_label": "accounting"},
                {"text": "Lovely weather for a picnic today."},
            ]
        )
    )
    return path


def test_version():
    """Test the --version option."""
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "pain-verdict" in result.stdout


def test_score_command():
    result = runner.invoke(app, ["score", "This is a nightmare, anyone know an alternative?"])
    assert result.exit_code == 0
    assert "Pain Score" in result.stdout
    assert "nightmare" in result.stdout


def test_verdict_json():
    result = runner.invoke(app, ["verdict", "--pain", "8", "--market", "6", "--competition", "4", "--timing", "7", "--json"])
    assert result.exit_code == 0

    data = json.loads(result.stdout)
    assert data["verdict"] == "mixed"
    assert data["available_dimensions"] == 4
    assert data["weakest_dimension"]["name"] == "Competition"


def test_verdict_partial_table():
    result = runner.invoke(app, ["verdict", "--market", "8"])
    assert result.exit_code == 0
    assert "Viability Verdict" in result.stdout
    assert "STRONG SIGNAL" in result.stdout


def test_verdict_rejects_out_of_range():
    result = runner.invoke(app, ["verdict", "--pain", "11"])
    assert result.exit_code != 0


def test_analyze_json(records_file):
    result = runner.invoke(app, ["analyze", str(records_file), "--no-praise-filter", "--json"])
    assert result.exit_code == 0, result.stdout

    data = json.loads(result.stdout)
    assert data["records_in"] == 3
    assert data["signals"] == 2
    assert data["praise_removed"] == 0
    assert data["summary"]["total_signals"] == 2
    assert 0 <= data["calibrated"]["score"] <= 10


def test_analyze_with_themes(records_file, tmp_path):
    themes_path = tmp_path / "themes.json"
    themes_path.write_text(json.dumps({"themes": [{"name": "Payroll"}, {"name": "Tax deadlines"}]}))

    result = runner.invoke(
        app, ["analyze", str(records_file), "--themes", str(themes_path), "--no-praise-filter", "--json"]
    )
    assert result.exit_code == 0, result.stdout

    themes = json.loads(result.stdout)["themes"]
    assert [t["resonance"] for t in themes] == ["high", None]


def test_analyze_table_output(records_file):
    result = runner.invoke(app, ["analyze", str(records_file), "--no-praise-filter"])
    assert result.exit_code == 0
    assert "Pain score" in result.stdout
    assert "Signal Summary" in result.stdout


def test_analyze_missing_file(tmp_path):
    result = runner.invoke(app, ["analyze", str(tmp_path / "nope.json"), "--no-praise-filter"])
    assert result.exit_code == 1
    assert "file not found" in " ".join(result.stdout.split())


def test_analyze_invalid_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json")
    result = runner.invoke(app, ["analyze", str(path), "--no-praise-filter"])
    assert result.exit_code == 1
    assert "invalid JSON" in " ".join(result.stdout.split())


def test_analyze_skips_praise_filter_without_key(records_file, monkeypatch, tmp_path):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("PAIN_VERDICT_OPENAI_API_KEY", raising=False)
    monkeypatch.chdir(tmp_path)  # no .env here

    result = runner.invoke(app, ["analyze", str(records_file)])
    assert result.exit_code == 0
    assert "OPENAI_API_KEY not set" in result.stderr
    assert "OPENAI_API_KEY" not in result.stdout


def test_analyze_json_without_key_is_valid_json(records_file, monkeypatch, tmp_path):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("PAIN_VERDICT_OPENAI_API_KEY", raising=False)
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["analyze", str(records_file), "--json"])
    assert result.exit_code == 0

    data = json.loads(result.stdout)
    assert data["records_in"] == 3
    assert data["praise_removed"] == 0


def test_analyze_log_level_defaults_to_settings(records_file, monkeypatch):
    monkeypatch.setenv("PAIN_VERDICT_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("PAIN_VERDICT_LOG_JSON", "true")

    with patch("pain_verdict.cli.analyze.configure_logging") as mock_configure:
        result = runner.invoke(app, ["analyze", str(records_file), "--no-praise-filter", "--json"])

    assert result.exit_code == 0
    mock_configure.assert_called_once_with("DEBUG", True)


def test_analyze_log_level_option_wins(records_file, monkeypatch):
    monkeypatch.setenv("PAIN_VERDICT_LOG_LEVEL", "DEBUG")
    monkeypatch.delenv("PAIN_VERDICT_LOG_JSON", raising=False)

    with patch("pain_verdict.cli.analyze.configure_logging") as mock_configure:
        result = runner.invoke(
            app, ["analyze", str(records_file), "--no-praise-filter", "--json", "--log-level", "ERROR"]
        )

    assert result.exit_code == 0
    mock_configure.assert_called_once_with("ERROR", False)
