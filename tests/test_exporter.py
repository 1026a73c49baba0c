# tests/test_exporter.py

from __future__ import annotations

import json

from person_resolver import resolve
from person_resolver.exporter import export_result_json, result_to_dict, serialize_result_to_json_string


def _result(target, cfg, make_evidence):
    evidence = [
        make_evidence(
            url="https://github.com/janedoe",
            title="Jane Doe",
            email="jane@acme.com",
            social_profiles=[{"platform": "github", "username": "janedoe", "followers": 12}],
        ),
        make_evidence(url="https://linkedin.com/in/janedoe", snippet="Engineer at Acme"),
        make_evidence(url="https://globex.example/x", email="other@globex.example"),
    ]
    return resolve(evidence, target, config=cfg)


def test_result_to_dict_layout(target, cfg, make_evidence):
    data = result_to_dict(_result(target, cfg, make_evidence))

    assert set(data) == {"target", "clusters", "summary", "analysis", "snippet_only_sources", "stats"}
    assert data["target"]["first_name"] == "Jane"

    top = data["clusters"][0]
    assert top["cluster_id"] == "C1"
    assert top["merged_evidence"]["social_profiles"][0]["followers"] == 12
    assert top["relationships"][0]["type"] == "unrelated"
    assert isinstance(data["analysis"]["recommended_actions"], list)
    assert data["snippet_only_sources"][0]["domain"] == "linkedin.com"
    assert data["stats"]["strategy"] == "incremental"


def test_serialized_string_round_trips_through_json(target, cfg, make_evidence):
    result = _result(target, cfg, make_evidence)
    assert json.loads(serialize_result_to_json_string(result)) == result_to_dict(result)


def test_export_writes_file(tmp_path, target, cfg, make_evidence):
    out = tmp_path / "nested" / "result.json"
    export_result_json(_result(target, cfg, make_evidence), out)

    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["summary"]["total_sources"] == 2
    assert data["summary"]["excluded_sources"] == 1
