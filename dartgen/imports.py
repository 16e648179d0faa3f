"""Import/export/part directives of a Dart file.

The directive block at the head of the file is read once, may be extended by
the generators (``requires_import``) and is re-emitted in a canonical order:

    dart: imports
    third-party package: imports
    same-project package: imports
    relative imports
    exports
    parts

Each group is sorted and groups are separated by a blank line.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from .utils import are_strict_equal, is_blank

_DIRECTIVES = ("import", "export", "part")


def _normalize(directive: str) -> str:
    return directive.replace('"', "'").strip()


class ImportTable:
    """Directive lines of one file plus the line span they occupied."""

    def __init__(self, text: str):
        self.text = text
        self.values: List[str] = []
        self.start_at_line: Optional[int] = None
        self.end_at_line: Optional[int] = None
        self.raw_imports = ""
        self._read_imports()

    @property
    def has_imports(self) -> bool:
        return len(self.values) > 0

    @property
    def has_previous_imports(self) -> bool:
        return self.start_at_line is not None and self.end_at_line is not None

    def _read_imports(self):
        lines = self.text.split("\n")
        for i, raw in enumerate(lines):
            line = raw.strip()
            is_last = i == len(lines) - 1

            if line.startswith(_DIRECTIVES):
                self.values.append(line)
                self.raw_imports += line + "\n"
                if self.start_at_line is None:
                    self.start_at_line = i + 1
                if is_last:
                    self.end_at_line = i + 1
                    break
                continue

            # License headers before the first directive do not end the block.
            is_license_comment = line.startswith("//") and not self.values
            did_end = not (is_blank(line) or line.startswith("library") or is_license_comment)

            if is_last or did_end:
                if self.start_at_line is not None:
                    # i is the 0-based index of the first line after the block,
                    # i.e. the 1-based number of the line before it.
                    self.end_at_line = i - 1 if i > 0 and is_blank(lines[i - 1]) else i
                break

    def includes(self, directive: str) -> bool:
        wanted = _normalize(directive)
        return any(_normalize(v) == wanted for v in self.values)

    def has_at_least_one_import(self, uris: Iterable[str]) -> bool:
        for uri in uris:
            directive = f"import '{uri}';"
            if directive in self.text or self.includes(directive):
                return True
        return False

    def requires_import(self, uri: str, valid_overrides: Iterable[str] = ()):
        """Add ``import '<uri>';`` unless it or an accepted alternative exists.

        A complete directive (``part 'a.g.dart';``) is added as given.
        """
        directive = uri if uri.startswith(_DIRECTIVES) else f"import '{uri}';"
        if not self.includes(directive) and not self.has_at_least_one_import(valid_overrides):
            self.values.append(directive)

    def formatted(self, package_name: Optional[str] = None) -> str:
        if not self.has_imports:
            return ""

        dart_imports: List[str] = []
        package_imports: List[str] = []
        local_imports: List[str] = []
        relative_imports: List[str] = []
        exports: List[str] = []
        parts: List[str] = []

        local_prefix = f"package:{package_name}/" if package_name else None

        for directive in self.values:
            if directive.startswith("export"):
                exports.append(directive)
            elif directive.startswith("part"):
                parts.append(directive)
            elif "dart:" in directive:
                dart_imports.append(directive)
            elif local_prefix is not None and local_prefix in directive:
                local_imports.append(directive)
            elif "package:" in directive:
                package_imports.append(directive)
            else:
                relative_imports.append(directive)

        groups = [dart_imports, package_imports, local_imports, relative_imports, exports, parts]
        return "\n\n".join("\n".join(sorted(g)) for g in groups if g)

    def did_change(self, package_name: Optional[str] = None) -> bool:
        return not are_strict_equal(self.raw_imports, self.formatted(package_name))
