"""
json_exporter.py
Structured JSON exporter for ClusteringResult objects.

This exporter:
- Converts dataclasses to dictionaries (NOT strings)
- Preserves full structure for downstream processing
- Never mutates the result
"""

from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from pathlib import Path
from typing import Any, Dict

from person_resolver.logging import get_logger
from person_resolver.models import ClusteringResult

log = get_logger("json_exporter")


def _to_json_compatible(obj: Any) -> Any:
    """
    Recursively convert objects into JSON-compatible structures.

    Rules:
    - Primitives pass through
    - dataclasses → dict (recursively)
    - dict → dict (recursively)
    - list / tuple / set → list (recursively)
    - Anything else → str(obj)
    """
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj

    if is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: _to_json_compatible(getattr(obj, f.name)) for f in fields(obj)}

    if isinstance(obj, dict):
        return {str(k): _to_json_compatible(v) for k, v in obj.items()}

    if isinstance(obj, (list, tuple)):
        return [_to_json_compatible(v) for v in obj]

    if isinstance(obj, set):
        return sorted(_to_json_compatible(v) for v in obj)

    return str(obj)


def result_to_dict(result: ClusteringResult) -> Dict[str, Any]:
    """
    Convert a result into a JSON-safe dict with a stable top-level layout.
    """
    return {
        "target": _to_json_compatible(result.target),
        "clusters": [_to_json_compatible(c) for c in result.clusters],
        "summary": _to_json_compatible(result.summary),
        "analysis": _to_json_compatible(result.analysis),
        "snippet_only_sources": [_to_json_compatible(s) for s in result.snippet_only_sources],
        "stats": _to_json_compatible(result.stats),
    }


def serialize_result_to_json_string(result: ClusteringResult, indent: int | None = 2) -> str:
    return json.dumps(
        result_to_dict(result),
        indent=indent,
        ensure_ascii=False,
    )


def export_result_json(result: ClusteringResult, output_path: str | Path, indent: int = 2) -> None:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    log.info(
        "Exporting result JSON to: %s (clusters=%d, sources=%d, snippet_only=%d)",
        output_path,
        len(result.clusters),
        result.summary.total_sources,
        len(result.snippet_only_sources),
    )

    json_str = serialize_result_to_json_string(result, indent=indent)

    with output_path.open("w", encoding="utf-8") as f:
        f.write(json_str)

    size_bytes = output_path.stat().st_size
    log.info("JSON export complete. size=%d bytes", size_bytes)
