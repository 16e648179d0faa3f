"""Data models for class discovery and generation."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import List, Optional

from .utils import remove_end, split_top_level, to_var_name


WIDGET_BASES = ("StatelessWidget", "StatefulWidget")

_PRIMITIVE_TYPES = frozenset({"String", "num", "dynamic", "bool"})


@dataclass(frozen=True)
class ProjectInfo:
    """Facts about the Dart package the edited file belongs to."""
    package_name: Optional[str] = None
    is_flutter: bool = False
    root: Optional[str] = None


# ---------------------------------------------------------------------------
# Fields
# ---------------------------------------------------------------------------

@dataclass
class ClassField:
    """A property inferred from a field declaration line."""
    raw_type: str
    source_name: str  # as written, may be a map key like ``first-name``
    line: int = 1
    is_final: bool = True
    is_const: bool = False
    is_late: bool = False
    is_enum: bool = False  # preceded by a ``// enum`` comment
    name: str = field(init=False)

    def __post_init__(self):
        self.name = to_var_name(self.source_name)

    @property
    def type(self) -> str:
        return remove_end(self.raw_type, "?") if self.is_nullable else self.raw_type

    @property
    def is_nullable(self) -> bool:
        return self.raw_type.endswith("?")

    def _is_collection_type(self, collection: str) -> bool:
        return self.raw_type == collection or self.raw_type.startswith(collection + "<")

    @property
    def is_list(self) -> bool:
        return self._is_collection_type("List")

    @property
    def is_map(self) -> bool:
        return self._is_collection_type("Map")

    @property
    def is_set(self) -> bool:
        return self._is_collection_type("Set")

    @property
    def is_collection(self) -> bool:
        return self.is_list or self.is_map or self.is_set

    @property
    def list_type(self) -> "ClassField":
        """The element field of a list or set; the field itself otherwise."""
        if self.is_list or self.is_set:
            collection = "Set" if self.is_set else "List"
            if self.raw_type == collection:
                element = "dynamic"
            else:
                element = self.raw_type.replace(collection + "<", "", 1).replace(">", "", 1)
            return ClassField(element, self.name, self.line, self.is_final)
        return self

    @property
    def is_primitive(self) -> bool:
        t = self.list_type.type
        return t in _PRIMITIVE_TYPES or self.is_double or self.is_int or self.is_map

    @property
    def is_private(self) -> bool:
        return self.name.startswith("_")

    @property
    def is_int(self) -> bool:
        return self.list_type.type == "int"

    @property
    def is_double(self) -> bool:
        return self.list_type.type == "double"

    @property
    def default_value(self) -> str:
        if self.is_list:
            return "const []"
        if self.is_map or self.is_set:
            return "const {}"
        t = self.type
        if t == "String":
            return "''"
        if t in ("num", "int"):
            return "0"
        if t == "double":
            return "0.0"
        if t == "bool":
            return "false"
        if t == "dynamic":
            return "null"
        return f"{t}()"


# ---------------------------------------------------------------------------
# Pending edits
# ---------------------------------------------------------------------------

@dataclass
class ClassPart:
    """A generated member that already exists in the class body.

    ``starts_at``/``ends_at`` are 1-based file lines, inclusive.
    """
    name: str
    starts_at: Optional[int] = None
    ends_at: Optional[int] = None
    current: Optional[str] = None
    replacement: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.starts_at is not None and self.ends_at is not None and self.current is not None


# ---------------------------------------------------------------------------
# Classes
# ---------------------------------------------------------------------------

@dataclass
class DartClass:
    """A class found by the scanner, plus the edits generated for it."""
    name: Optional[str] = None
    full_generic_type: str = ""
    superclass: Optional[str] = None
    interfaces: list = field(default_factory=list)
    mixins: list = field(default_factory=list)
    constr: Optional[str] = None
    properties: list = field(default_factory=list)  # list of ClassField
    starts_at_line: Optional[int] = None
    ends_at_line: Optional[int] = None
    header_ends_at_line: Optional[int] = None  # line holding the opening brace
    constr_starts_at_line: Optional[int] = None
    constr_ends_at_line: Optional[int] = None
    constr_different: bool = False
    header_changed: bool = False  # superclass or mixins were added
    class_content: str = ""
    to_insert: str = ""
    to_replace: list = field(default_factory=list)  # list of ClassPart

    @property
    def type(self) -> str:
        return (self.name or "") + self.generic_type

    @property
    def generic_type(self) -> str:
        """Generic parameters without their bounds: ``<T extends num>`` -> ``<T>``."""
        if not self.full_generic_type:
            return ""
        inner = self.full_generic_type.strip()[1:-1]
        params = []
        for part in split_top_level(inner, ","):
            if " extends " in part:
                part = part[:part.index(" extends ")]
            params.append(part.strip())
        return "<" + ", ".join(params) + ">"

    @property
    def props_end_at_line(self) -> int:
        if self.properties:
            return self.properties[-1].line
        return -1

    @property
    def class_detected(self) -> bool:
        return self.starts_at_line is not None

    @property
    def did_change(self) -> bool:
        return (
            len(self.to_insert) > 0
            or len(self.to_replace) > 0
            or self.constr_different
            or self.header_changed
        )

    @property
    def has_named_constructor(self) -> bool:
        if self.constr is not None:
            return self.constr.replace("const", "", 1).lstrip().startswith(f"{self.name}({{")
        return True

    @property
    def has_constructor(self) -> bool:
        return (
            self.constr_starts_at_line is not None
            and self.constr_ends_at_line is not None
            and self.constr is not None
        )

    @property
    def has_ending(self) -> bool:
        return self.ends_at_line is not None

    @property
    def has_properties(self) -> bool:
        return len(self.properties) > 0

    @property
    def few_props(self) -> bool:
        return len(self.properties) <= 3

    @property
    def unique_prop_names(self) -> bool:
        names = [p.name for p in self.properties]
        return len(names) == len(set(names))

    @property
    def is_valid(self) -> bool:
        return (
            self.class_detected
            and self.name is not None
            and self.has_ending
            and self.has_properties
            and self.unique_prop_names
        )

    @property
    def is_widget(self) -> bool:
        return self.superclass in WIDGET_BASES

    @property
    def is_state(self) -> bool:
        return not self.is_widget and self.superclass is not None and self.superclass.startswith("State<")

    @property
    def is_abstract(self) -> bool:
        return self.class_content.lstrip().startswith("abstract class")

    @property
    def uses_equatable(self) -> bool:
        return self.superclass == "Equatable" or "EquatableMixin" in self.mixins

    @property
    def issue(self) -> str:
        msg = f"{self.name} couldn't be converted to a data class: "
        if not self.has_properties:
            msg += "Class must have at least one property!"
        elif not self.has_ending:
            msg += "Class has no ending!"
        elif not self.unique_prop_names:
            msg += "Class doesn't have unique property names!"
        else:
            msg = remove_end(msg, ": ") + "."
        return msg

    def replacement_at_line(self, line: int) -> Optional[str]:
        for part in self.to_replace:
            if part.starts_at is None or part.ends_at is None:
                continue
            if part.starts_at <= line <= part.ends_at:
                return part.replacement
        return None

    def class_declaration_line(self) -> str:
        """Rebuild the declaration line from the current metadata."""
        keyword = "abstract class" if self.is_abstract else "class"
        declaration = f"{keyword} {self.name}{self.full_generic_type}"
        if self.superclass is not None:
            declaration += f" extends {self.superclass}"
        if self.mixins:
            declaration += " with " + ", ".join(self.mixins)
        if self.interfaces:
            declaration += " implements " + ", ".join(self.interfaces)
        return declaration


# ---------------------------------------------------------------------------
# Generation results
# ---------------------------------------------------------------------------

@dataclass
class ClassEdit:
    """Replacement text for the inclusive line span of one class."""
    class_name: str
    start_line: int
    end_line: int
    text: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ImportEdit:
    """Formatted directive block; ``start_line`` None means insert at the top."""
    start_line: Optional[int]
    end_line: Optional[int]
    text: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class GenerationResult:
    classes: list = field(default_factory=list)  # list of DartClass
    class_edits: List[ClassEdit] = field(default_factory=list)
    import_edit: Optional[ImportEdit] = None
    diagnostics: List[str] = field(default_factory=list)

    @property
    def did_change(self) -> bool:
        return bool(self.class_edits) or self.import_edit is not None

    def to_dict(self) -> dict:
        return {
            "classes": [
                {
                    "name": c.name,
                    "start_line": c.starts_at_line,
                    "end_line": c.ends_at_line,
                    "valid": c.is_valid,
                    "fields": [p.name for p in c.properties],
                }
                for c in self.classes
            ],
            "class_edits": [e.to_dict() for e in self.class_edits],
            "import_edit": self.import_edit.to_dict() if self.import_edit else None,
            "diagnostics": list(self.diagnostics),
        }
