"""Apply generation results to source text and write them back."""

from __future__ import annotations

import os
import shutil
from typing import List, Optional, Tuple

from ..errors import ContractViolation
from ..models import GenerationResult


def _edits(result: GenerationResult) -> List[Tuple[int, int, List[str]]]:
    """(first line, last line, new lines) per edit; ``last < first`` inserts."""
    edits = [(e.start_line, e.end_line, e.text.split("\n")) for e in result.class_edits]
    imp = result.import_edit
    if imp is not None:
        if imp.start_line is None or imp.end_line is None:
            # No directive block yet: put one at the top, followed by a blank line.
            edits.append((1, 0, imp.text.split("\n") + [""]))
        else:
            edits.append((imp.start_line, imp.end_line, imp.text.split("\n")))
    return edits


def apply_edits(text: str, result: GenerationResult) -> str:
    """Return *text* with every edit of *result* applied.

    Edits are applied bottom-up so that line numbers computed on the input
    text stay valid.
    """
    lines = text.split("\n")
    edits = sorted(_edits(result), key=lambda e: (e[0], e[1]), reverse=True)

    previous_start: Optional[int] = None
    for start, end, new_lines in edits:
        if start < 1 or end > len(lines):
            raise ContractViolation(f"Edit span {start}-{end} outside of {len(lines)} lines")
        if previous_start is not None and end >= previous_start:
            raise ContractViolation(f"Overlapping edits at line {start}")
        del lines[start - 1:end]
        for k, new_line in enumerate(new_lines):
            lines.insert(start - 1 + k, new_line)
        previous_start = start

    return "\n".join(lines)


def write_file(path: str, text: str, backup: bool = False) -> Optional[str]:
    """Overwrite *path* with *text*; returns the backup path when one was made."""
    backup_path = None
    if backup and os.path.exists(path):
        backup_path = path + ".bak"
        shutil.copy(path, backup_path)
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(text)
    return backup_path
