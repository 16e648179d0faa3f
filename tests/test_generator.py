"""End-to-end tests for data-class generation."""

from textwrap import dedent

import pytest

from dartgen.config import GeneratorConfig
from dartgen.errors import ConfigError, ContractViolation
from dartgen.generator import DataClassGenerator, generate
from dartgen.models import ProjectInfo
from dartgen.output.patch_writer import apply_edits
from dartgen.utils import are_strict_equal


POINT = dedent("""\
    class Point {
      final int x;
      final int y;
    }
""")

POINT_GENERATED = dedent("""\
    import 'dart:convert';

    class Point {
      final int x;
      final int y;

      Point({
        required this.x,
        required this.y,
      });

      Point copyWith({
        int? x,
        int? y,
      }) {
        return Point(
          x: x ?? this.x,
          y: y ?? this.y,
        );
      }

      Map<String, dynamic> toMap() {
        return <String, dynamic>{
          'x': x,
          'y': y,
        };
      }

      factory Point.fromMap(Map<String, dynamic> map) {
        return Point(
          x: map['x'] as int,
          y: map['y'] as int,
        );
      }

      String toJson() => json.encode(toMap());

      factory Point.fromJson(String source) => Point.fromMap(json.decode(source) as Map<String, dynamic>);

      @override
      String toString() => 'Point(x: $x, y: $y)';

      @override
      bool operator ==(covariant Point other) {
        if (identical(this, other)) return true;

        return
          other.x == x &&
          other.y == y;
      }

      @override
      int get hashCode => x.hashCode ^ y.hashCode;
    }
""")


def run(text, config=None, project=None, part=None, coerce_numbers=False):
    result = generate(text, config=config, project=project, part=part, coerce_numbers=coerce_numbers)
    return apply_edits(text, result), result


class TestPoint:
    """The canonical two-field class."""

    def test_full_generation(self):
        text, result = run(POINT)
        assert text == POINT_GENERATED
        assert [e.class_name for e in result.class_edits] == ["Point"]
        assert result.import_edit is not None
        assert result.import_edit.start_line is None

    def test_second_run_changes_nothing(self):
        result = generate(POINT_GENERATED)
        assert result.class_edits == []
        assert result.import_edit is None
        assert not result.did_change

    def test_whitespace_differences_are_not_changes(self):
        squashed = POINT_GENERATED.replace(
            "  String toString() => 'Point(x: $x, y: $y)';",
            "  String toString() =>   'Point(x: $x, y: $y)';",
        )
        assert generate(squashed).class_edits == []


class TestConstructorRules:
    def test_existing_default_is_preserved(self):
        source = dedent("""\
            class Point {
              final int x;
              final int y;

              Point({
                this.x = 5,
                required this.y,
              });
            }
        """)
        text, _ = run(source, part="constructor")
        assert text == source

    def test_new_field_is_added_to_existing_constructor(self):
        source = dedent("""\
            class Point {
              final int x;
              final int y;

              Point(this.x);
            }
        """)
        text, _ = run(source, part="constructor")
        assert text == dedent("""\
            class Point {
              final int x;
              final int y;

              Point(
                this.x,
                this.y,
              );
            }
        """)

    def test_nullable_fields_are_never_required_or_defaulted(self):
        config = GeneratorConfig()
        config.constructor.default_values = True
        source = "class A {\n  final int? count;\n  final List<String> tags;\n}\n"
        text, _ = run(source, config=config, part="constructor")
        assert "    this.count,\n" in text
        assert "required this.count" not in text
        assert "this.tags = const []," in text


class TestSerialization:
    def test_list_of_primitives_and_custom_types(self):
        source = "class Order {\n  final List<int> ids;\n  final List<Item> items;\n}\n"
        text, _ = run(source, part="serialization")
        assert "'ids': ids," in text
        assert "'items': items.map((x) => x.toMap()).toList()," in text
        assert text.startswith("import 'dart:convert';\n\nclass Order {")

    def test_existing_imports_are_merged(self):
        source = "import 'package:meta/meta.dart';\n\nclass A {\n  final int a;\n}\n"
        text, result = run(source, part="serialization")
        assert result.import_edit.start_line == 1
        assert result.import_edit.end_line == 1
        assert text.startswith("import 'dart:convert';\n\nimport 'package:meta/meta.dart';\n\nclass A {")


class TestDiagnostics:
    def test_zero_fields(self):
        result = generate("class Empty {\n  void run() {}\n}\n")
        assert result.class_edits == []
        assert result.diagnostics == [
            "Empty couldn't be converted to a data class: Class must have at least one property!"
        ]

    def test_duplicate_names(self):
        result = generate("class A {\n  final int first_name;\n  final String first_name;\n}\n")
        assert result.class_edits == []
        assert result.diagnostics[0].endswith("Class doesn't have unique property names!")

    def test_names_that_sanitize_to_the_same_identifier(self):
        result = generate("class Cart {\n  final int total;\n  final int total$;\n}\n")
        assert result.class_edits == []
        assert result.diagnostics == [
            "Cart couldn't be converted to a data class: Class doesn't have unique property names!"
        ]

    def test_unterminated_class_is_reported_and_the_next_one_generated(self):
        source = dedent("""\
            class Broken {
              final int a;

              void run() {
            class Point {
              final int x;
            }
        """)
        text, result = run(source, part="toString")
        assert result.diagnostics == ["Broken couldn't be converted to a data class: Class has no ending!"]
        assert [e.class_name for e in result.class_edits] == ["Point"]
        assert text.endswith(dedent("""\
            class Point {
              final int x;

              @override
              String toString() => 'Point(x: $x)';
            }
        """))

    def test_unknown_part(self):
        with pytest.raises(ConfigError):
            DataClassGenerator(POINT, part="everything")


class TestPartsAndKinds:
    def test_to_string_only(self):
        text, result = run(POINT, part="toString")
        assert result.import_edit is None
        assert text == dedent("""\
            class Point {
              final int x;
              final int y;

              @override
              String toString() => 'Point(x: $x, y: $y)';
            }
        """)

    def test_stale_member_is_replaced(self):
        source = dedent("""\
            class Point {
              final int x;
              final int y;

              @override
              String toString() {
                return 'Point(x: $x)';
              }
            }
        """)
        text, _ = run(source, part="toString")
        assert text == dedent("""\
            class Point {
              final int x;
              final int y;

              @override
              String toString() => 'Point(x: $x, y: $y)';
            }
        """)

    def test_widget_only_gets_a_constructor(self):
        source = dedent("""\
            class Title extends StatelessWidget {
              final String text;

              @override
              Widget build(BuildContext context) {
                return Text(text);
              }
            }
        """)
        text, _ = run(source)
        assert "const Title({\n    Key? key,\n    required this.text,\n  }) : super(key: key);" in text
        assert "copyWith" not in text
        assert "toString" not in text
        assert "operator ==" not in text

    def test_abstract_class_skips_copy_with_and_serialization(self):
        source = "abstract class Shape {\n  final int sides;\n}\n"
        text, _ = run(source)
        assert "copyWith" not in text
        assert "toMap" not in text
        assert "String toString()" in text
        assert "operator ==" in text

    def test_flutter_equality_uses_foundation(self):
        source = "class Bag {\n  final List<int> ids;\n}\n"
        text, _ = run(source, project=ProjectInfo(package_name="app", is_flutter=True), part="equality")
        assert "import 'package:flutter/foundation.dart';" in text
        assert "listEquals(other.ids, ids)" in text
        assert "DeepCollectionEquality" not in text

    def test_jenkins_hash_with_material_import(self):
        config = GeneratorConfig()
        config.hash_code.use_jenkins = True
        source = "import 'package:flutter/material.dart';\n\nclass A {\n  final int a;\n}\n"
        text, result = run(source, config=config, part="equality")
        assert "hashList([" in text
        assert "dart:ui" not in text
        assert result.import_edit is None


class TestEquatable:
    def test_use_equatable_setting(self):
        config = GeneratorConfig()
        config.use_equatable = True
        text, _ = run(POINT, config=config)
        assert "import 'package:equatable/equatable.dart';" in text
        assert "class Point extends Equatable {" in text
        assert "const Point({" in text
        assert "List<Object?> get props => [x, y];" in text
        assert "bool get stringify => true;" in text
        assert "operator ==" not in text
        assert "hashCode" not in text

        again = generate(text, config=config)
        assert again.class_edits == []
        assert again.import_edit is None

    def test_mixin_when_class_has_superclass(self):
        config = GeneratorConfig()
        config.use_equatable = True
        source = "class Dog extends Animal {\n  final String name;\n}\n"
        text, _ = run(source, config=config, part="useEquatable")
        assert "class Dog extends Animal with EquatableMixin {" in text

    def test_base_superclass_is_left_alone(self):
        source = "class Dog extends AnimalBase {\n  final String name;\n}\n"
        config = GeneratorConfig()
        config.use_equatable = True
        text, _ = run(source, config=config, part="useEquatable")
        assert "class Dog extends AnimalBase {" in text
        assert "get props => [name];" in text
        assert "equatable.dart" not in text

    def test_existing_equatable_class(self):
        source = dedent("""\
            import 'package:equatable/equatable.dart';

            class Point extends Equatable {
              final int x;
            }
        """)
        text, _ = run(source, part="useEquatable")
        assert are_strict_equal(
            text,
            source.replace("  final int x;\n", "  final int x;\n\n  @override\n  List<Object?> get props => [x];\n"),
        )

    def test_mixin_added_to_a_declaration_over_two_lines(self):
        source = "class Dog\n    extends Animal {\n  final String name;\n}\n"
        config = GeneratorConfig()
        config.use_equatable = True
        text, _ = run(source, config=config, part="useEquatable")
        assert "class Dog extends Animal with EquatableMixin {\n  final String name;\n" in text
        assert "    extends Animal {" not in text
        assert generate(text, config=config, part="useEquatable").class_edits == []


USER = dedent("""\
    class User {
      final String name;
      final int? age;
    }
""")

USER_JSON_SERIALIZABLE = dedent("""\
    import 'package:json_annotation/json_annotation.dart';

    part 'user.g.dart';

    @JsonSerializable()
    class User {
      final String name;
      final int? age;

      User({
        required this.name,
        this.age,
      });

      factory User.fromJson(Map<String, dynamic> json) => _$UserFromJson(json);

      Map<String, dynamic> toJson() => _$UserToJson(this);
    }
""")


class TestJsonSerializable:
    def convert(self, text):
        result = generate(text, part="jsonSerializable", file_name="user")
        return apply_edits(text, result), result

    def test_template(self):
        text, result = self.convert(USER)
        assert text == USER_JSON_SERIALIZABLE
        assert [e.class_name for e in result.class_edits] == ["User"]

    def test_second_run_changes_nothing(self):
        _, result = self.convert(USER_JSON_SERIALIZABLE)
        assert not result.did_change

    def test_existing_header_is_not_repeated(self):
        source = dedent("""\
            import 'package:json_annotation/json_annotation.dart';

            part 'user.g.dart';

            @JsonSerializable()
            class User {
              final String name;
              User(this.name);
            }
        """)
        text, result = self.convert(source)
        assert result.import_edit is None
        assert text.count("@JsonSerializable()") == 1
        assert "  User({\n    required this.name,\n  });" in text
        assert "User(this.name);" not in text

    def test_other_members_are_not_generated(self):
        text, _ = self.convert(USER)
        assert "copyWith" not in text
        assert "toString" not in text
        assert "dart:convert" not in text

    def test_file_name_is_required(self):
        with pytest.raises(ContractViolation):
            generate(USER, part="jsonSerializable")
