"""Deterministic report artifacts for a lockguard run."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

    from lockguard.host.context import ReviewResults

REPORT_JSON = "LOCKGUARD_REPORT.json"
REPORT_MD = "LOCKGUARD_REPORT.md"


def canonical_dumps(obj: Any) -> str:
    """Serialize a JSON-compatible object with stable canonical formatting."""
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def write_json(path: Path, obj: Any) -> None:
    """Write canonical JSON as UTF-8."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(canonical_dumps(obj), encoding="utf-8")


def write_review_artifacts(out_dir: Path, results: ReviewResults, *, base: str, head: str) -> tuple[Path, Path]:
    """Write the JSON and markdown renditions of the reported comments."""
    out_dir.mkdir(parents=True, exist_ok=True)

    payload = results.to_dict()
    payload["base"] = base
    payload["head"] = head
    json_path = out_dir / REPORT_JSON
    write_json(json_path, payload)

    md_path = out_dir / REPORT_MD
    md_path.write_text(results.render_markdown(), encoding="utf-8")
    return json_path, md_path
