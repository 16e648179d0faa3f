"""Template for classes serialized by json_serializable.

Unlike the other members this rewrites the whole class: the fields are kept,
the constructor becomes a named one with ``required this.x`` for every
non-nullable field, and ``fromJson``/``toJson`` delegate to the functions
that build_runner writes into ``<file>.g.dart``.
"""

from __future__ import annotations

from ..models import ClassField, DartClass

JSON_ANNOTATION = "package:json_annotation/json_annotation.dart"
ANNOTATION = "@JsonSerializable()"


def part_directive(file_name: str) -> str:
    return f"part '{file_name}.g.dart';"


def _field_line(prop: ClassField) -> str:
    words = []
    if prop.is_late:
        words.append("late")
    if prop.is_final:
        words.append("final")
    elif prop.is_const:
        words.append("const")
    words += [prop.raw_type, prop.name]
    return " ".join(words) + ";"


def build_json_serializable(clazz: DartClass, annotate: bool = True) -> str:
    name = clazz.name
    lines = [ANNOTATION] if annotate else []
    lines.append(clazz.class_declaration_line() + " {")
    lines += [f"  {_field_line(p)}" for p in clazz.properties]
    lines.append("")
    lines.append(f"  {name}({{")
    for p in clazz.properties:
        required = "" if p.is_nullable else "required "
        lines.append(f"    {required}this.{p.name},")
    lines.append("  });")
    lines.append("")
    lines.append(f"  factory {name}.fromJson(Map<String, dynamic> json) => _${name}FromJson(json);")
    lines.append("")
    lines.append(f"  Map<String, dynamic> toJson() => _${name}ToJson(this);")
    lines.append("}")
    return "\n".join(lines)
