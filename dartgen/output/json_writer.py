"""JSON output writer."""

from __future__ import annotations

import json
from datetime import datetime, timezone

from ..models import GenerationResult


def build_report(result: GenerationResult, source_path: str) -> dict:
    return {
        "generated_at": _now_iso(),
        "file": source_path,
        "changed": result.did_change,
        **result.to_dict(),
    }


def dumps_report(result: GenerationResult, source_path: str) -> str:
    return json.dumps(build_report(result, source_path), indent=2, ensure_ascii=False)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
