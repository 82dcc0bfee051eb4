"""Tests for CLI commands: plan, queue, review, grade, progress, learn, export/import, reset, config."""

import json
import logging
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from vocabu.domain.exceptions import NotFoundError, StorageError
from vocabu.interface._common import humanize_error
from vocabu.interface.cli import app

runner = CliRunner()

PLAN_YAML = """\
contextId: travel
createdAt: 1709280000000
recommendation: {perDay: 2, perWeek: 14, total: 60}
todaySet:
  - {term: airport, translation: аэропорт}
  - {term: ticket, translation: билет}
pool:
  - luggage
  - passport
"""


@pytest.fixture
def data_dir(tmp_path, mock_home):
    return tmp_path / "data"


@pytest.fixture
def invoke(data_dir):
    def _invoke(*args, input=None):
        return runner.invoke(app, ["--data-dir", str(data_dir), *args], input=input)

    return _invoke


@pytest.fixture
def loaded(invoke, tmp_path):
    path = tmp_path / "plan.yaml"
    path.write_text(PLAN_YAML, encoding="utf-8")
    result = invoke("plan", "load", str(path))
    assert result.exit_code == 0, result.output
    return result


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "vocabulary learning with spaced repetition" in result.stdout
    for command in ("plan", "review", "grade", "progress", "export"):
        assert command in result.stdout


# --- Plan ---


def test_plan_load(loaded, invoke):
    assert "Plan applied: 4 words (4 new), daily target 2." in loaded.output

    result = invoke("plan", "show", "--json")
    assert result.exit_code == 0
    assert json.loads(result.stdout)["todaySet"][0]["id"] == "airport"


def test_plan_load_is_idempotent(loaded, invoke, tmp_path):
    result = invoke("plan", "load", str(tmp_path / "plan.yaml"))
    assert "(0 new)" in result.output


def test_plan_load_malformed(invoke, tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("todaySet: nope\n")
    result = invoke("plan", "load", str(path))
    assert result.exit_code == 2
    assert "Malformed plan" in result.output


def test_plan_load_missing_file(invoke, tmp_path):
    result = invoke("plan", "load", str(tmp_path / "nope.yaml"))
    assert result.exit_code == 2
    assert "Cannot read" in result.output


def test_plan_new_from_word_list(invoke, tmp_path):
    words = tmp_path / "words.txt"
    words.write_text("hotel\tотель\nvisa;виза\n# skipped\n", encoding="utf-8")

    result = invoke(
        "plan", "new", "--words", str(words), "--level", "A2", "--comfort", "--name", "Trip"
    )

    assert result.exit_code == 0, result.output
    assert "2 words (2 new), daily target 8" in result.output
    shown = invoke("plan", "show")
    assert "Plan: Trip" in shown.output
    assert "hotel - отель" in shown.output
    assert "Comfort mode: on" in shown.output


def test_plan_new_needs_input(invoke):
    result = invoke("plan", "new")
    assert result.exit_code == 2


def test_plan_show_without_plan(invoke):
    result = invoke("plan", "show")
    assert result.exit_code == 1
    assert "No plan yet" in result.output


# --- Queue & grading ---


def test_queue_json(loaded, invoke):
    result = invoke("queue", "--json")
    assert json.loads(result.stdout) == {
        "items": ["airport", "ticket", "luggage", "passport"],
        "fallback": False,
    }


def test_grade_command(loaded, invoke):
    result = invoke("grade", "airport", "good", "--json")
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["newInterval"] == 1
    assert payload["grade"] == "good"

    queue = json.loads(invoke("queue", "--json").stdout)
    assert "airport" not in queue["items"]


def test_grade_invalid(loaded, invoke):
    result = invoke("grade", "airport", "perfect")
    assert result.exit_code == 2
    assert "Invalid grade" in result.output


def test_grade_unknown_item(loaded, invoke):
    result = invoke("grade", "ghost", "good")
    assert result.exit_code == 2
    assert "Unknown word 'ghost'" in result.output


def test_review_session(loaded, invoke):
    result = invoke("review", input="g\nperfect\n4\nq\n")

    assert result.exit_code == 0, result.output
    assert "[1/4] airport" in result.output
    assert "= аэропорт" in result.output
    assert "Invalid grade" in result.output
    assert "Reviewed 2. Today: 2/2" in result.output

    progress = json.loads(invoke("progress", "--json").stdout)
    assert progress["done"] == 2
    assert progress["byGrade"]["easy"] == 1


def test_review_without_plan(invoke):
    result = invoke("review")
    assert result.exit_code == 0
    assert "Nothing due today" in result.output


def test_learn_record_applied_on_review(loaded, invoke):
    result = invoke("learn", "record", "Airport", "5")
    assert result.exit_code == 0
    assert "Recorded airport" in result.output

    result = invoke("review", input="q\n")
    assert "Schedule updated from exercises: 1 words" in result.output
    assert "] airport" not in result.output


def test_learn_record_bad_quality(loaded, invoke):
    result = invoke("learn", "record", "airport", "2")
    assert result.exit_code == 2


# --- Export / import / reset ---


def test_export_import_round_trip(loaded, invoke, tmp_path):
    invoke("grade", "ticket", "easy")
    out = tmp_path / "backup.json"
    assert invoke("export", "--output", str(out)).exit_code == 0
    package = json.loads(out.read_text(encoding="utf-8"))
    assert package["version"] == "vocabu-export-1"

    assert invoke("reset", "--force").exit_code == 0
    assert invoke("plan", "show").exit_code == 1

    result = invoke("import", str(out))
    assert result.exit_code == 0, result.output
    assert "plan" in result.output
    progress = json.loads(invoke("progress", "--json").stdout)
    assert progress["totalReviewCount"] == 1


def test_export_csv(loaded, invoke):
    result = invoke("export", "--format", "plan-csv")
    assert result.exit_code == 0
    assert result.stdout.splitlines()[0] == "id,term,translation,origin,today,due,interval,ease,reps"


def test_reset_requires_confirmation(loaded, invoke):
    result = invoke("reset", input="n\n")
    assert result.exit_code == 1
    assert invoke("plan", "show").exit_code == 0


# --- Config ---


def test_config_show(invoke, data_dir):
    result = invoke("config", "show")
    assert result.exit_code == 0
    output = json.loads(result.stdout)
    assert output["data_dir"] == str(data_dir.resolve())
    assert output["session_limit"] == 10


# --- Humanize error ---


def test_humanize_error():
    assert "ghost" in humanize_error(NotFoundError("ghost"))
    err = FileNotFoundError(2, "No such file or directory", "x.yaml")
    assert humanize_error(err) == "Cannot read x.yaml: No such file or directory"


# --- Error boundary ---


@patch("vocabu.interface.cli.service_from_context")
def test_core_failure_offers_reset(mock_service_factory, loaded, invoke):
    mock_service = MagicMock()
    mock_service.grade_current_card.side_effect = StorageError("card-states", "disk full")
    mock_service_factory.return_value = mock_service

    result = invoke("grade", "airport", "good", input="y\n")

    assert result.exit_code == 1
    assert "Something went wrong" in result.output
    assert "All saved state cleared." in result.output
    assert invoke("plan", "show").exit_code == 1


@patch("vocabu.interface._common.resolve_config")
def test_config_show_uses_resolved_config(mock_resolve_config):
    mock_config = MagicMock()
    mock_config.verbose = 1
    mock_config.model_dump.return_value = {"data_dir": "/tmp/words", "fallback_size": 3}
    mock_resolve_config.return_value = mock_config

    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"data_dir": "/tmp/words", "fallback_size": 3}


# --- Verbosity ---


@pytest.fixture
def root_level():
    root = logging.getLogger()
    before = root.level
    yield root
    root.setLevel(before)


def test_verbose_flag_feeds_config(invoke, root_level):
    root_level.setLevel(logging.INFO)
    result = invoke("-vv", "config", "show")
    assert result.exit_code == 0
    assert json.loads(result.stdout)["verbose"] == 3
    assert root_level.level == logging.DEBUG


def test_verbose_from_environment(invoke, root_level, monkeypatch):
    root_level.setLevel(logging.INFO)
    monkeypatch.setenv("VOCABU_VERBOSE", "2")
    result = invoke("config", "show")
    assert json.loads(result.stdout)["verbose"] == 2
    assert root_level.level == logging.DEBUG


def test_default_verbosity_keeps_info(invoke, root_level):
    root_level.setLevel(logging.INFO)
    result = invoke("config", "show")
    assert json.loads(result.stdout)["verbose"] == 1
    assert root_level.level == logging.INFO
