"""Tests for the Dart class scanner."""

from textwrap import dedent

import pytest

from dartgen.models import DartClass
from dartgen.parsers.dart_parser import (
    is_field_line,
    parse_classes,
    parse_declaration,
    parse_field_line,
    scan,
    split_keeping_generics,
)


class TestDeclaration:
    def test_split_keeps_generics(self):
        assert split_keeping_generics("class Pair <A, B> extends Base<A> {") == [
            "class", "Pair<A, B>", "extends", "Base<A>",
        ]

    def test_parse_declaration(self):
        clazz = DartClass()
        parse_declaration("class Box<T extends num> extends Base with A, B implements C {", clazz)
        assert clazz.name == "Box"
        assert clazz.full_generic_type == "<T extends num>"
        assert clazz.superclass == "Base"
        assert clazz.mixins == ["A", "B"]
        assert clazz.interfaces == ["C"]

    def test_mixins_split_by_spaces(self):
        clazz = DartClass()
        parse_declaration("class A with B, C {", clazz)
        assert clazz.mixins == ["B", "C"]


class TestFieldLines:
    @pytest.mark.parametrize(
        "line, expected",
        [
            ("  final int x;", True),
            ("  String? name;", True),
            ("  final int x = 3;", False),
            ("  static const int max = 3;", False),
            ("  int get area => x * y;", False),
            ("  @override", False),
            ("  // comment", False),
            ("  void reset();", False),
            ("  Point(this.x);", False),
        ],
    )
    def test_is_field_line(self, line, expected):
        clazz = DartClass(name="Point")
        assert is_field_line(line, clazz) == expected

    def test_non_final_after_constructor_is_ignored(self):
        clazz = DartClass(name="Point", constr_starts_at_line=2)
        assert not is_field_line("  int x;", clazz)
        assert is_field_line("  final int x;", clazz)

    def test_parse_field_line(self):
        prop = parse_field_line("  final Map<String, int> scores;", 3)
        assert prop.raw_type == "Map<String, int>"
        assert prop.name == "scores"
        assert prop.is_final
        assert prop.line == 3

    def test_late_and_nullable(self):
        prop = parse_field_line("  late String? note;", 1)
        assert prop.is_late
        assert prop.raw_type == "String?"

    def test_enum_marker_on_previous_line(self):
        prop = parse_field_line("  final Status status;", 3, prev_line="  // enum")
        assert prop.is_enum


class TestScanner:
    def test_simple_class(self):
        text = dedent("""\
            class Point {
              final int x;
              final int y;
            }
        """)
        classes = parse_classes(text)
        assert len(classes) == 1
        clazz = classes[0]
        assert clazz.name == "Point"
        assert (clazz.starts_at_line, clazz.ends_at_line) == (1, 4)
        assert [p.name for p in clazz.properties] == ["x", "y"]
        assert not clazz.has_constructor
        assert clazz.is_valid

    def test_constructor_is_captured(self):
        text = dedent("""\
            class Point {
              final int x;
              final int y;

              const Point({
                required this.x,
                required this.y,
              });
            }
        """)
        clazz = parse_classes(text)[0]
        assert clazz.has_constructor
        assert (clazz.constr_starts_at_line, clazz.constr_ends_at_line) == (5, 8)
        assert clazz.constr.startswith("  const Point({")
        assert clazz.constr.endswith("});")
        assert len(clazz.properties) == 2

    def test_methods_are_not_fields(self):
        text = dedent("""\
            class User {
              final String name;

              String greet() {
                final String prefix = 'Hi';
                return prefix + name;
              }
            }
        """)
        clazz = parse_classes(text)[0]
        assert [p.name for p in clazz.properties] == ["name"]

    def test_braces_in_strings_do_not_end_the_class(self):
        text = dedent("""\
            class A {
              final String open = '}';
              final String b;
            }
        """)
        clazz = parse_classes(text)[0]
        assert clazz.ends_at_line == 4
        assert [p.name for p in clazz.properties] == ["b"]

    def test_several_classes_and_state_is_skipped(self):
        text = dedent("""\
            class A {
              final int a;
            }

            class _CardState extends State<Card> {
              int count;
            }

            abstract class B {
              final int b;
            }
        """)
        classes = parse_classes(text)
        assert [c.name for c in classes] == ["A", "B"]
        assert classes[1].is_abstract

    def test_class_without_fields_is_invalid(self):
        result = scan("class Empty {\n}\n")
        assert len(result.classes) == 1
        assert result.valid_classes == []

    def test_imports_are_read(self):
        result = scan("import 'dart:convert';\n\nclass A {\n  final int a;\n}\n")
        assert result.imports.values == ["import 'dart:convert';"]

    def test_declaration_over_several_lines(self):
        text = dedent("""\
            class Long<T>
                extends Base<T>
                with Mixin {
              final T value;
            }
        """)
        clazz = parse_classes(text)[0]
        assert clazz.name == "Long"
        assert clazz.full_generic_type == "<T>"
        assert clazz.superclass == "Base<T>"
        assert clazz.mixins == ["Mixin"]
        assert clazz.header_ends_at_line == 3
        assert [p.name for p in clazz.properties] == ["value"]

    def test_state_declared_over_two_lines_is_skipped(self):
        text = "class _CardState\n    extends State<Card> {\n  int count;\n}\n"
        assert parse_classes(text) == []

    def test_unterminated_class_does_not_swallow_the_next_one(self):
        text = dedent("""\
            class Broken {
              final int a;

              void run() {
            class Point {
              final int x;
            }
        """)
        broken, point = parse_classes(text)
        assert broken.name == "Broken"
        assert broken.ends_at_line is None
        assert not broken.is_valid
        assert point.starts_at_line == 5
        assert point.ends_at_line == 7
        assert [p.name for p in point.properties] == ["x"]
        assert point.is_valid
