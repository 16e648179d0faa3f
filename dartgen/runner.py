"""Runner: reads a Dart file, generates members and writes the result."""

from __future__ import annotations

import os
import sys
import time
from typing import Optional

from .config import DartGenConfig
from .discovery import resolve_project
from .errors import DartGenError
from .generator import DataClassGenerator
from .models import GenerationResult, ProjectInfo
from .output.patch_writer import apply_edits, write_file


class RunResult:
    """Outcome of one file run."""

    def __init__(self, path: str):
        self.path = path
        self.project: Optional[ProjectInfo] = None
        self.generation: Optional[GenerationResult] = None
        self.original_text: str = ""
        self.text: str = ""
        self.written = False
        self.backup_path: Optional[str] = None
        self.duration_seconds: float = 0.0

    @property
    def did_change(self) -> bool:
        return self.text != self.original_text


def generate_file(
    path: str,
    config: DartGenConfig,
    part: Optional[str] = None,
    coerce_numbers: bool = False,
    write: bool = False,
    verbose: bool = True,
) -> RunResult:
    """Generate the data-class members of every class in the file at *path*."""
    start_time = time.time()
    result = RunResult(path)

    if not os.path.isfile(path):
        raise DartGenError(f"File not found: {path}")

    with open(path, "r", encoding="utf-8") as fh:
        result.original_text = fh.read()

    result.project = resolve_project(path, config.project)

    if verbose:
        print(f"[dartgen] File: {path}")
        print(f"[dartgen] Package: {result.project.package_name}"
              f"{' (flutter)' if result.project.is_flutter else ''}")

    generator = DataClassGenerator(
        result.original_text,
        config=config.generator,
        project=result.project,
        part=part,
        coerce_numbers=coerce_numbers,
        file_name=os.path.splitext(os.path.basename(path))[0],
    )
    generation = generator.generate()
    result.generation = generation

    if verbose:
        print(f"[dartgen] Classes found: {len(generation.classes)}")
        edited = {e.class_name for e in generation.class_edits}
        for clazz in generation.classes:
            if not clazz.is_valid:
                continue
            status = "updated" if clazz.name in edited else "up to date"
            print(f"  - {clazz.name} (lines {clazz.starts_at_line}-{clazz.ends_at_line}): {status}")
    for issue in generation.diagnostics:
        print(f"  [!] {issue}", file=sys.stderr)

    result.text = apply_edits(result.original_text, generation)

    if write and result.did_change:
        result.backup_path = write_file(path, result.text, backup=config.output.backup)
        result.written = True
        if verbose:
            print(f"[dartgen] Wrote {path}")
            if result.backup_path:
                print(f"[dartgen] Backup: {result.backup_path}")
    elif verbose and not result.did_change:
        print("[dartgen] Nothing to do.")

    result.duration_seconds = time.time() - start_time
    return result
