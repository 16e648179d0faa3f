"""Builders for the generated data-class members.

Each builder is a pure function of the class model and a few flags and
returns a :class:`Member`: the unindented source text, the prefix that
identifies an existing copy of the member in the class body, and the imports
the text needs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..models import ClassField, DartClass

# (uri, accepted alternatives)
Import = Tuple[str, Tuple[str, ...]]

DART_CONVERT = "dart:convert"
DART_UI = "dart:ui"
FLUTTER_FOUNDATION = "package:flutter/foundation.dart"
COLLECTION = "package:collection/collection.dart"
EQUATABLE = "package:equatable/equatable.dart"

# Flutter libraries that already re-export dart:ui's hashList.
_FLUTTER_UI_LIBRARIES = (
    "package:flutter/material.dart",
    "package:flutter/cupertino.dart",
    "package:flutter/widgets.dart",
)


@dataclass
class Member:
    name: str
    text: str
    finder: str
    imports: List[Import] = field(default_factory=list)


def _nullable(type_name: str) -> str:
    return type_name if type_name == "dynamic" else type_name + "?"


def _named(clazz: DartClass, prop: ClassField) -> str:
    return f"{prop.name}: " if clazz.has_named_constructor else ""


# =====================================================================
# copyWith
# =====================================================================

def build_copy_with(clazz: DartClass) -> Member:
    method = f"{clazz.type} copyWith({{\n"
    for p in clazz.properties:
        method += f"  {_nullable(p.type)} {p.name},\n"
    method += "}) {\n"
    method += f"  return {clazz.type}(\n"
    for p in clazz.properties:
        method += f"    {_named(clazz, p)}{p.name} ?? this.{p.name},\n"
    method += "  );\n"
    method += "}"
    return Member("copyWith", method, f"{clazz.type} copyWith(")


# =====================================================================
# toMap / fromMap
# =====================================================================

def _to_map_value(prop: ClassField, name: Optional[str] = None, end: str = ",\n") -> str:
    prop = prop.list_type if prop.is_collection else prop
    name = prop.name if name is None else name
    null_safe = "?" if prop.is_nullable else ""

    if prop.type == "DateTime":
        return f"{name}{null_safe}.millisecondsSinceEpoch{end}"
    if prop.type == "Color":
        return f"{name}{null_safe}.value{end}"
    if prop.type == "IconData":
        return f"{name}{null_safe}.codePoint{end}"
    if prop.is_primitive:
        return f"{name}{end}"
    return f"{name}{null_safe}.toMap(){end}"


def build_to_map(clazz: DartClass) -> Member:
    method = "Map<String, dynamic> toMap() {\n"
    method += "  return <String, dynamic>{\n"
    for p in clazz.properties:
        null_safe = "?" if p.is_nullable else ""
        method += f"    '{p.source_name}': "
        if p.is_enum:
            if p.is_collection:
                method += f"{p.name}{null_safe}.map((x) => x.index).toList(),\n"
            else:
                method += f"{p.name}{null_safe}.index,\n"
        elif p.is_collection:
            if p.is_map or p.list_type.is_primitive:
                to_list = f"{null_safe}.toList()" if p.is_set else ""
                method += f"{p.name}{to_list},\n"
            else:
                method += f"{p.name}{null_safe}.map((x) => {_to_map_value(p, 'x', '')}).toList(),\n"
        else:
            method += _to_map_value(p)
    method += "  };\n"
    method += "}"
    return Member("toMap", method, "Map<String, dynamic> toMap()")


def _from_map_value(prop: ClassField, default_values: bool, coerce_numbers: bool,
                    value: Optional[str] = None) -> str:
    material_convert = "" if prop.is_collection else " as int"
    prop = prop.list_type if prop.is_collection else prop

    add_default = (
        default_values
        and prop.raw_type != "dynamic"
        and not prop.is_nullable
        and prop.is_primitive
    )
    left = "(" if add_default else ""
    right = ")" if add_default else ""
    if value is None:
        value = f"{left}map['{prop.source_name}']"

    if prop.type == "DateTime":
        if default_values:
            value = f"({value} ?? 0)"
        return f"DateTime.fromMillisecondsSinceEpoch({value}{material_convert})"
    if prop.type == "Color":
        if default_values:
            value = f"({value} ?? 0)"
        return f"Color({value}{material_convert})"
    if prop.type == "IconData":
        if default_values:
            value = f"({value} ?? 0)"
        return f"IconData({value}{material_convert}, fontFamily: 'MaterialIcons')"

    if not prop.is_primitive:
        return f"{prop.type}.fromMap({value} as Map<String, dynamic>)"
    if coerce_numbers:
        if prop.is_double:
            value += ".toDouble()"
        elif prop.is_int:
            value += ".toInt()"
    if add_default:
        value += f" ?? {prop.default_value}{right}"
    return value


def build_from_map(clazz: DartClass, default_values: bool = False, coerce_numbers: bool = False) -> Member:
    left = "(" if default_values else ""
    right = ")" if default_values else ""

    method = f"factory {clazz.name}.fromMap(Map<String, dynamic> map) {{\n"
    method += f"  return {clazz.type}(\n"
    for p in clazz.properties:
        method += f"    {_named(clazz, p)}"
        value = f"map['{p.source_name}']"
        if p.is_nullable:
            method += f"{value} != null ? "

        if p.is_enum:
            element = p.list_type.type
            if p.is_collection:
                default = " ?? <int>[]" if default_values else ""
                method += (
                    f"{p.type}.from(({left}{value}{default}{right} as List<int>)"
                    f".map<{element}>((x) => {element}.values[x]),)"
                )
            else:
                default = " ?? 0" if default_values else ""
                method += f"{p.type}.values[{left}{value}{default}{right} as int]"
        elif p.is_collection:
            method += f"{p.type}.from("
            if p.is_primitive:
                default = ""
                if default_values and not p.is_nullable and not p.is_map:
                    brackets = "[]" if p.is_list else "{}"
                    default = f" ?? const <{p.list_type.type}>{brackets}"
                elif default_values and not p.is_nullable:
                    default = " ?? const <String, dynamic>{}"
                cast_left = "(" if default else ""
                cast_right = ")" if default else ""
                method += f"({cast_left}{value}{default}{cast_right} as {p.type}))"
            else:
                element = p.list_type.type
                convert = _from_map_value(p, default_values, coerce_numbers, "x")
                method += f"({value} as List<dynamic>).map<{element}>((x) => {convert},),)"
        elif p.is_primitive:
            method += f"{_from_map_value(p, default_values, coerce_numbers)} as {p.type}"
        else:
            method += _from_map_value(p, default_values, coerce_numbers)

        if p.is_nullable:
            method += " : null"
        method += ",\n"
    method += "  );\n"
    method += "}"
    return Member("fromMap", method, f"factory {clazz.name}.fromMap(Map<String, dynamic> map)")


# =====================================================================
# JSON
# =====================================================================

def build_to_json(clazz: DartClass) -> Member:
    method = "String toJson() => json.encode(toMap());"
    return Member("toJson", method, "String toJson()", [(DART_CONVERT, ())])


def build_from_json(clazz: DartClass) -> Member:
    method = (
        f"factory {clazz.name}.fromJson(String source) => "
        f"{clazz.name}.fromMap(json.decode(source) as Map<String, dynamic>);"
    )
    return Member("fromJson", method, f"factory {clazz.name}.fromJson(String source)", [(DART_CONVERT, ())])


# =====================================================================
# toString
# =====================================================================

def build_to_string(clazz: DartClass) -> Member:
    short = clazz.few_props
    props = ", ".join(f"{p.name}: ${p.name}" for p in clazz.properties)
    method = "@override\n"
    if short:
        method += f"String toString() => '{clazz.name}({props})';"
    else:
        method += "String toString() {\n"
        method += f"  return '{clazz.name}({props})';\n"
        method += "}"
    return Member("toString", method, "String toString()")


def build_stringify(clazz: DartClass) -> Member:
    method = "@override\nbool get stringify => true;"
    return Member("stringify", method, "bool get stringify")


# =====================================================================
# Equality
# =====================================================================

def _collection_equals(prop: ClassField) -> str:
    if prop.is_set:
        return "setEquals"
    if prop.is_map:
        return "mapEquals"
    return "listEquals"


def build_equality(clazz: DartClass, is_flutter: bool = False) -> Member:
    collections = [p for p in clazz.properties if p.is_collection]
    imports: List[Import] = []

    # Outside Flutter the deep comparison comes from package:collection and is
    # bound to a local named after the collection kind when all agree.
    helper = None
    if collections:
        if is_flutter:
            imports.append((FLUTTER_FOUNDATION, ()))
        else:
            imports.append((COLLECTION, ()))
            helper = "collectionEquals"
            if all(p.is_list for p in collections):
                helper = "listEquals"
            elif all(p.is_map for p in collections):
                helper = "mapEquals"
            elif all(p.is_set for p in collections):
                helper = "setEquals"

    method = "@override\n"
    method += f"bool operator ==(covariant {clazz.type} other) {{\n"
    method += "  if (identical(this, other)) return true;\n"
    if helper is not None:
        method += f"  final {helper} = const DeepCollectionEquality().equals;\n"
    method += "\n"
    method += "  return\n"
    last = len(clazz.properties) - 1
    for i, p in enumerate(clazz.properties):
        if p.is_collection:
            equals = helper if helper is not None else _collection_equals(p)
            method += f"    {equals}(other.{p.name}, {p.name})"
        else:
            method += f"    other.{p.name} == {p.name}"
        method += ";\n" if i == last else " &&\n"
    method += "}"
    return Member("equality", method, "bool operator ==", imports)


def build_hash_code(clazz: DartClass, use_jenkins: bool = False) -> Member:
    short = not use_jenkins and clazz.few_props
    imports: List[Import] = []

    method = "@override\n"
    if use_jenkins:
        imports.append((DART_UI, _FLUTTER_UI_LIBRARIES))
        method += "int get hashCode {\n"
        method += "  return hashList([\n"
        for p in clazz.properties:
            method += f"    {p.name},\n"
        method += "  ]);\n"
        method += "}"
    elif short:
        method += "int get hashCode => " + " ^ ".join(f"{p.name}.hashCode" for p in clazz.properties) + ";"
    else:
        method += "int get hashCode {\n"
        method += "  return " + " ^\n    ".join(f"{p.name}.hashCode" for p in clazz.properties) + ";\n"
        method += "}"
    return Member("hashCode", method, "int get hashCode", imports)


# =====================================================================
# Equatable
# =====================================================================

def build_props(clazz: DartClass) -> Member:
    names = [p.name for p in clazz.properties]
    method = "@override\n"
    if len(names) <= 4:
        method += "List<Object?> get props => [" + ", ".join(names) + "];"
    else:
        method += "List<Object?> get props {\n"
        method += "  return [\n"
        for name in names:
            method += f"    {name},\n"
        method += "  ];\n"
        method += "}"
    return Member("props", method, "List<Object> get props")
