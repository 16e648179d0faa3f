"""Data-class generation over the classes of one Dart file.

:class:`DataClassGenerator` walks the valid classes found by the scanner, asks
the member builders for the text of every enabled member and records, per
class, which members must be inserted before the closing brace and which
existing members must be replaced. The patched class text is produced by
:mod:`.output.assembler`; nothing here touches the file.
"""

from __future__ import annotations

from typing import Optional

from .config import JSON_SERIALIZABLE, GeneratorConfig, validate_part
from .errors import ContractViolation
from .generators import members
from .generators.constructor import build_constructor
from .generators.json_serializable import ANNOTATION, JSON_ANNOTATION, build_json_serializable, part_directive
from .generators.members import Member
from .imports import ImportTable
from .models import ClassEdit, ClassPart, DartClass, GenerationResult, ImportEdit, ProjectInfo
from .output.assembler import generate_class_replacement
from .parsers.dart_parser import parse_classes
from .parsers.tokenizer import BracketCounter
from .utils import are_strict_equal, indent, remove_end


def _normalize_signature(line: str) -> str:
    """Drop whitespace and generic arguments: ``Map<String, dynamic> toMap()`` -> ``MaptoMap()``."""
    result = ""
    generics = 0
    prev = ""
    for char in line:
        if char == "<":
            generics += 1
        if char != " " and generics == 0:
            result += char
        if char == ">" and prev != "=" and generics > 0:
            generics -= 1
        prev = char
    return result


class DataClassGenerator:
    """Generate the data-class members of every valid class in *text*."""

    def __init__(
        self,
        text: str,
        config: Optional[GeneratorConfig] = None,
        project: Optional[ProjectInfo] = None,
        part: Optional[str] = None,
        coerce_numbers: bool = False,
        file_name: Optional[str] = None,
    ):
        self.text = text
        self.config = config or GeneratorConfig()
        self.project = project or ProjectInfo()
        self.part = validate_part(part)
        self.coerce_numbers = coerce_numbers
        # stem of the edited file, names the json_serializable part file
        self.file_name = file_name
        self.classes = parse_classes(text)
        self.imports = ImportTable(text)

    def is_part_selected(self, part: str) -> bool:
        return self.part is None or self.part == part

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def generate(self) -> GenerationResult:
        if self.part == JSON_SERIALIZABLE and not self.file_name:
            raise ContractViolation("the json_serializable template needs the file name")

        result = GenerationResult(classes=self.classes)
        for clazz in self.classes:
            if not clazz.is_valid:
                result.diagnostics.append(clazz.issue)
                continue
            if self.part == JSON_SERIALIZABLE:
                edit = self.generate_json_serializable(clazz)
                if edit is not None:
                    result.class_edits.append(edit)
                continue
            self.generate_class(clazz)
            if clazz.did_change:
                result.class_edits.append(ClassEdit(
                    class_name=clazz.name,
                    start_line=clazz.starts_at_line,
                    end_line=clazz.ends_at_line,
                    text=generate_class_replacement(clazz),
                ))

        package_name = self.project.package_name
        if self.imports.did_change(package_name):
            result.import_edit = ImportEdit(
                start_line=self.imports.start_at_line if self.imports.has_previous_imports else None,
                end_line=self.imports.end_at_line if self.imports.has_previous_imports else None,
                text=self.imports.formatted(package_name),
            )
        return result

    def generate_class(self, clazz: DartClass):
        cfg = self.config
        equatable = clazz.uses_equatable or cfg.use_equatable

        if cfg.constructor.enabled and self.is_part_selected("constructor"):
            self.insert_constructor(clazz)

        if clazz.is_widget:
            return

        if not clazz.is_abstract:
            if cfg.copy_with.enabled and self.is_part_selected("copyWith"):
                self.append_or_replace(clazz, members.build_copy_with(clazz))
            if self.is_part_selected("serialization"):
                if cfg.to_map.enabled:
                    self.append_or_replace(clazz, members.build_to_map(clazz))
                if cfg.from_map.enabled:
                    self.append_or_replace(clazz, members.build_from_map(
                        clazz, cfg.from_map.default_values, self.coerce_numbers))
                if cfg.to_json.enabled:
                    self.append_or_replace(clazz, members.build_to_json(clazz))
                if cfg.from_json.enabled:
                    self.append_or_replace(clazz, members.build_from_json(clazz))

        if cfg.to_string.enabled and self.is_part_selected("toString"):
            if equatable:
                self.append_or_replace(clazz, members.build_stringify(clazz))
            else:
                self.append_or_replace(clazz, members.build_to_string(clazz))

        if equatable:
            if self.is_part_selected("useEquatable"):
                self.insert_equatable(clazz)
        elif self.is_part_selected("equality"):
            if cfg.equality.enabled:
                self.append_or_replace(clazz, members.build_equality(clazz, self.project.is_flutter))
            if cfg.hash_code.enabled:
                self.append_or_replace(clazz, members.build_hash_code(clazz, cfg.hash_code.use_jenkins))

    def generate_json_serializable(self, clazz: DartClass) -> Optional[ClassEdit]:
        self.imports.requires_import(JSON_ANNOTATION)
        self.imports.requires_import(part_directive(self.file_name))

        text = build_json_serializable(clazz, annotate=not self.is_annotated(clazz))
        if are_strict_equal(text, clazz.class_content):
            return None
        return ClassEdit(
            class_name=clazz.name,
            start_line=clazz.starts_at_line,
            end_line=clazz.ends_at_line,
            text=text,
        )

    def is_annotated(self, clazz: DartClass) -> bool:
        """Whether the closest non-blank line above the class is ``@JsonSerializable``."""
        lines = self.text.split("\n")
        i = clazz.starts_at_line - 2
        while i >= 0 and not lines[i].strip():
            i -= 1
        return i >= 0 and lines[i].strip().startswith(ANNOTATION[:-2])

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def insert_constructor(self, clazz: DartClass):
        make_const = (clazz.uses_equatable or self.config.use_equatable) and self.is_part_selected("useEquatable")
        constr = build_constructor(clazz, self.config.constructor.default_values, make_const)

        if clazz.has_constructor:
            if not are_strict_equal(clazz.constr, constr):
                clazz.constr = indent(constr)
                clazz.constr_different = True
        else:
            clazz.constr = indent(constr)
            clazz.constr_different = True

    def insert_equatable(self, clazz: DartClass):
        self.add_equatable_details(clazz)
        self.append_or_replace(clazz, members.build_props(clazz))

    def add_equatable_details(self, clazz: DartClass):
        # Base classes are expected to bring Equatable themselves.
        if clazz.superclass is not None and "Base" in clazz.superclass:
            return
        self.imports.requires_import(members.EQUATABLE)
        if clazz.uses_equatable:
            return
        if clazz.superclass is not None or self.config.use_equatable_mixin:
            clazz.mixins.append("EquatableMixin")
        else:
            clazz.superclass = "Equatable"
        clazz.header_changed = True

    def find_part(self, name: str, finder: str, clazz: DartClass) -> Optional[ClassPart]:
        """Locate an existing member whose first line starts with *finder*.

        The member spans from that line to the line that brings the depth back
        to the class body, or to the first line ending in ``;`` for arrow
        members written on one line.
        """
        if clazz.starts_at_line is None:
            raise ContractViolation(f"{clazz.name} has no start line")

        wanted = _normalize_signature(finder)
        counter = BracketCounter()
        part: Optional[ClassPart] = None
        single_line = False
        lines = clazz.class_content.split("\n")

        for i, line in enumerate(lines):
            depth_before = counter.curly
            counter.feed(line)
            line_number = clazz.starts_at_line + i

            if part is None:
                if i == 0 or depth_before != 1:
                    continue
                if not _normalize_signature(line.strip()).startswith(wanted):
                    continue
                if counter.curly != 2 and "=>" not in line:
                    continue
                part = ClassPart(name=name, starts_at=line_number, current=line + "\n")
                single_line = counter.curly == 1
                if single_line and line.rstrip().endswith(";"):
                    part.ends_at = line_number
                    part.current = remove_end(part.current, "\n")
                    return part
                continue

            part.current += line + "\n"
            if (single_line and line.rstrip().endswith(";")) or (not single_line and counter.curly == 1):
                part.ends_at = line_number
                part.current = remove_end(part.current, "\n")
                return part

        return None

    def append_or_replace(self, clazz: DartClass, member: Member):
        for uri, overrides in member.imports:
            self.imports.requires_import(uri, overrides)

        part = self.find_part(member.name, member.finder, clazz)
        replacement = remove_end(indent(member.text.replace("@override\n", "")), "\n")
        if part is not None:
            part.replacement = replacement
            if not are_strict_equal(part.current, replacement):
                clazz.to_replace.append(part)
        else:
            clazz.to_insert += "\n" + indent(member.text)


def generate(
    text: str,
    config: Optional[GeneratorConfig] = None,
    project: Optional[ProjectInfo] = None,
    part: Optional[str] = None,
    coerce_numbers: bool = False,
    file_name: Optional[str] = None,
) -> GenerationResult:
    return DataClassGenerator(text, config, project, part, coerce_numbers, file_name).generate()
