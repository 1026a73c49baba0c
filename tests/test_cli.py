# tests/test_cli.py

from __future__ import annotations

import json
import logging

import pytest
from typer.testing import CliRunner

from person_resolver.cli.app import app
from person_resolver.config import load_config
from person_resolver.logging import configure_logging

runner = CliRunner()

EVIDENCE = [
    {
        "url": "https://acme.com/team/jane",
        "title": "Jane Doe - Acme Corp",
        "snippet": "Jane Doe, senior engineer",
        "evidence": {"name": "Jane Doe", "email": "jane@acme.com", "company": "Acme Corp"},
    },
    {
        "url": "https://github.com/janedoe",
        "title": "janedoe (Jane Doe)",
        "evidence": {"email": "jane@acme.com", "socialProfiles": [{"platform": "github", "username": "janedoe"}]},
    },
]


@pytest.fixture(autouse=True)
def restore_logging():
    # --config rebuilds the shared handlers against the runner's streams
    yield
    configure_logging(load_config(), force=True)


@pytest.fixture
def evidence_file(tmp_path):
    path = tmp_path / "evidence.json"
    path.write_text(json.dumps(EVIDENCE), encoding="utf-8")
    return path


def _target_args():
    return ["--first", "Jane", "--last", "Doe", "--email", "jane@acme.com"]


def test_resolve_writes_json(tmp_path, evidence_file):
    out = tmp_path / "result.json"
    result = runner.invoke(app, ["resolve", str(evidence_file), *_target_args(), "--out", str(out), "--pretty"])

    assert result.exit_code == 0, result.output
    data = json.loads(out.read_text(encoding="utf-8"))
    assert len(data["clusters"]) == 1
    assert data["analysis"]["likely_same_person"] is True


def test_resolve_accepts_wrapped_evidence_and_strategy(tmp_path):
    path = tmp_path / "wrapped.json"
    path.write_text(json.dumps({"evidence": EVIDENCE}), encoding="utf-8")
    out = tmp_path / "result.json"

    result = runner.invoke(
        app,
        ["resolve", str(path), *_target_args(), "--strategy", "feature_vector", "--biography", "--out", str(out)],
    )

    assert result.exit_code == 0, result.output
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["analysis"]["clustering_method"] == "feature_vector"
    assert data["summary"]["biographical_insights"] is not None


def test_resolve_rejects_wrong_shape(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"items": []}), encoding="utf-8")

    result = runner.invoke(app, ["resolve", str(path), *_target_args()])
    assert result.exit_code == 2


def test_resolve_rejects_invalid_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")

    result = runner.invoke(app, ["resolve", str(path), *_target_args()])
    assert result.exit_code == 2


def test_unknown_strategy_exits_2(evidence_file):
    result = runner.invoke(app, ["resolve", str(evidence_file), *_target_args(), "--strategy", "magic"])
    assert result.exit_code == 2


def test_custom_config(tmp_path, evidence_file):
    config = tmp_path / "cfg.yml"
    config.write_text("resolution:\n  strategy: feature_vector\n", encoding="utf-8")
    out = tmp_path / "result.json"

    result = runner.invoke(
        app, ["resolve", str(evidence_file), *_target_args(), "--config", str(config), "--out", str(out)]
    )

    assert result.exit_code == 0, result.output
    assert json.loads(out.read_text(encoding="utf-8"))["stats"]["strategy"] == "feature_vector"


def test_stats_prints_table(evidence_file):
    result = runner.invoke(app, ["stats", str(evidence_file), *_target_args()])

    assert result.exit_code == 0, result.output
    assert "C1" in result.output
    assert "Likely same person: yes" in result.output


def test_verbose_lowers_log_level(tmp_path, evidence_file):
    out = tmp_path / "result.json"
    result = runner.invoke(app, ["resolve", str(evidence_file), *_target_args(), "--verbose", "--out", str(out)])

    assert result.exit_code == 0, result.output
    base = logging.getLogger("person_resolver")
    assert base.level == logging.DEBUG
    assert all(h.level == logging.DEBUG for h in base.handlers)
    assert json.loads(out.read_text(encoding="utf-8"))["clusters"]
