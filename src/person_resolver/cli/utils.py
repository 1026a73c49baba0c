from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console

from person_resolver.biography import KeywordBiographer
from person_resolver.config import get_config, load_config
from person_resolver.core.exceptions import EvidenceFormatError
from person_resolver.core.pipeline import resolve
from person_resolver.logging import configure_logging, set_level
from person_resolver.models import ClusteringResult, TargetIdentity

console = Console(stderr=True)


def load_evidence(path: Path) -> List[Dict[str, Any]]:
    """
    Read an evidence document: either a JSON list of evidence objects or an
    object with an ``evidence`` list.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise EvidenceFormatError(f"Cannot read evidence file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise EvidenceFormatError(f"Invalid JSON in {path}: {exc}") from exc

    if isinstance(data, dict):
        data = data.get("evidence")
    if not isinstance(data, list):
        raise EvidenceFormatError(
            f"{path}: expected a list of evidence objects or an object with an 'evidence' list"
        )
    return data


def run_resolution(
    evidence_path: Path,
    *,
    first: str,
    last: str,
    email: str,
    strategy: Optional[str],
    biography: bool,
    config_path: Optional[Path],
    verbose: bool = False,
) -> ClusteringResult:
    """
    Load configuration and evidence, then run one resolution.

    ``verbose`` lowers the log level to DEBUG and prints the elapsed time.
    """
    if config_path is not None:
        cfg = load_config(config_path)
        configure_logging(cfg, force=True)
    else:
        cfg = get_config()

    if verbose:
        set_level(logging.DEBUG)

    evidence = load_evidence(evidence_path)
    target = TargetIdentity(first_name=first, last_name=last, email=email)

    t0 = time.perf_counter()
    result = resolve(
        evidence,
        target,
        strategy=strategy,
        config=cfg,
        biographer=KeywordBiographer() if biography else None,
    )
    elapsed = time.perf_counter() - t0

    if verbose:
        console.log(
            f"Resolved {len(evidence)} evidence items into {len(result.clusters)} clusters in {elapsed:.2f}s"
        )

    return result


def write_json(
    data: Dict[str, Any],
    *,
    out: Path | None,
    pretty: bool,
):
    """
    Write JSON to stdout or file.
    """
    if pretty:
        payload = json.dumps(data, indent=2, ensure_ascii=False)
    else:
        payload = json.dumps(data, separators=(",", ":"), ensure_ascii=False)

    if out:
        out.write_text(payload, encoding="utf-8")
    else:
        print(payload)
