"""Line-oriented Dart class scanner.

A single forward pass over the file discovers class declarations, their
generic parameters and super types, the first unnamed constructor and the
field declarations directly inside the class body. There is no AST: the
scanner relies on bracket depth (see :mod:`.tokenizer`) and on the shape of
declaration lines, which is enough for the plain data classes the generator
targets.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional

from ..imports import ImportTable
from ..models import ClassField, DartClass
from ..utils import includes_all, includes_one, remove_end, split_top_level
from .tokenizer import BracketCounter

# A ``// enum`` comment marks the next field as serialized by its index.
_RE_ENUM_MARKER = re.compile(r".*//\s*enum", re.IGNORECASE)

# Characters that mark a line as a method, getter or annotation.
_NON_FIELD_SYMBOLS = ("{", "}", "=>", "@")
_NON_FIELD_KEYWORDS = ("static", "set", "get", "return", "factory")


class _ScanState(Enum):
    OUTSIDE = auto()      # between classes
    HEADER = auto()       # declaration seen, body not opened yet
    BODY = auto()
    CONSTRUCTOR = auto()  # inside the parameter list of the constructor


@dataclass
class ScanResult:
    classes: List[DartClass] = field(default_factory=list)
    imports: Optional[ImportTable] = None

    @property
    def valid_classes(self) -> List[DartClass]:
        return [c for c in self.classes if c.is_valid]


# =====================================================================
# DECLARATION LINE
# =====================================================================

def is_class_line(line: str) -> bool:
    # The trailing space keeps identifiers such as ``classifier`` out.
    stripped = line.lstrip()
    return stripped.startswith("class ") or stripped.startswith("abstract class ")


def split_keeping_generics(line: str) -> List[str]:
    """Split a declaration line on spaces, keeping ``<...>`` in one word.

    ``class Pair <A, B> {`` gives ``['class', 'Pair<A, B>']``. Everything
    after the opening ``{`` is ignored.
    """
    words: List[str] = []
    current = ""
    generics = 0

    def flush():
        word = current.strip()
        if not word:
            return
        # A generic list separated from its name by a space belongs to it.
        if word.startswith("<") and words:
            words[-1] += word
        else:
            words.append(word)

    for char in line:
        if char == "<":
            generics += 1
        elif char == ">":
            generics -= 1

        if generics == 0 and char in (" ", "{"):
            flush()
            current = ""
            if char == "{":
                return words
            continue
        current += char

    flush()
    return words


def parse_declaration(line: str, clazz: DartClass):
    """Fill name, generics, superclass, mixins and interfaces of *clazz*."""
    class_next = extends_next = mixins_next = implements_next = False

    for word in split_keeping_generics(line):
        if word == "class":
            class_next = True
        elif word == "extends":
            extends_next = True
        elif extends_next:
            extends_next = False
            clazz.superclass = remove_end(word, ",")
        elif word == "with":
            mixins_next, extends_next, implements_next = True, False, False
        elif word == "implements":
            mixins_next, extends_next, implements_next = False, False, True
        elif class_next:
            class_next = False
            if "<" in word:
                clazz.full_generic_type = word[word.index("<"):word.rindex(">") + 1]
                word = word[:word.index("<")]
            clazz.name = word
        elif mixins_next:
            clazz.mixins.extend(split_top_level(word, ","))
        elif implements_next:
            clazz.interfaces.extend(split_top_level(word, ","))


# =====================================================================
# FIELDS
# =====================================================================

def is_field_line(line: str, clazz: DartClass) -> bool:
    """Whether a line directly inside the class body declares a property."""
    stripped = line.lstrip()
    return (
        # would be the constructor or an error
        not stripped.startswith(clazz.name or "")
        and not stripped.startswith("//")
        and not includes_one(line, _NON_FIELD_SYMBOLS, word_based=False)
        and not includes_one(line.strip(), _NON_FIELD_KEYWORDS)
        # final values that are assigned in place are not constructor input
        and not includes_all(line, ("final ", "="))
        # non-final fields declared after the constructor are left alone
        and (clazz.constr_starts_at_line is None or "final " in line)
        # abstract method signatures
        and not re.sub(r"\s", "", line).endswith(");")
    )


def parse_field_line(line: str, line_number: int, prev_line: Optional[str] = None) -> Optional[ClassField]:
    raw_type: Optional[str] = None
    name: Optional[str] = None
    is_final = is_const = is_late = False

    words = line.strip().split(" ")
    for i, word in enumerate(words):
        is_last = i == len(words) - 1
        if not word or word in ("{", "}"):
            continue

        if word == "final":
            is_final = True
            continue
        if word == "late":
            is_late = True
            continue
        if word == "const":
            is_const = is_const or i == 0
            continue

        # The name ends with ';' or is followed by '='; everything before it
        # is the type, which may contain spaces: Pair<A, B>.
        is_variable = (word.endswith(";") or (not is_last and words[i + 1] == "=")) \
            and "(" not in word and ")" not in word
        if is_variable:
            if name is None:
                name = remove_end(word, ";")
        elif raw_type is None:
            raw_type = word
        elif name is None:
            raw_type += " " + word

    if raw_type is None or name is None:
        return None

    prop = ClassField(raw_type, name, line_number, is_final=is_final, is_const=is_const, is_late=is_late)
    if prev_line is not None:
        prop.is_enum = _RE_ENUM_MARKER.match(prev_line) is not None
    return prop


# =====================================================================
# SCANNER
# =====================================================================

def _strip_const(line: str) -> str:
    stripped = line.lstrip()
    if stripped.startswith("const "):
        stripped = stripped[len("const "):].lstrip()
    return stripped


class DartClassScanner:
    """Single pass over the lines of a file, one class at a time."""

    def __init__(self, text: str):
        self.text = text
        self.lines = text.split("\n")
        self.classes: List[DartClass] = []
        self._counter = BracketCounter()
        self._state = _ScanState.OUTSIDE
        self._clazz = DartClass()
        self._header = ""

    def scan(self) -> List[DartClass]:
        for i, line in enumerate(self.lines):
            self._consume(i, line)
        return self.classes

    def _start_class(self, line: str, line_number: int):
        self._clazz = DartClass(starts_at_line=line_number)
        self._counter.reset()
        self._header = line.strip()
        parse_declaration(line, self._clazz)
        # The State<T> object of a stateful widget is not a data class.
        if not self._clazz.is_state:
            self.classes.append(self._clazz)
        self._state = _ScanState.HEADER

    def _reparse_header(self):
        """Parse a declaration spread over several lines as a whole."""
        clazz = self._clazz
        clazz.superclass = None
        clazz.full_generic_type = ""
        clazz.mixins = []
        clazz.interfaces = []
        parse_declaration(self._header, clazz)
        if clazz.is_state and self.classes and self.classes[-1] is clazz:
            self.classes.pop()

    def _consume(self, index: int, line: str):
        line_number = index + 1
        class_line = is_class_line(line)
        if class_line:
            self._start_class(line, line_number)

        if self._state is _ScanState.OUTSIDE:
            return

        clazz = self._clazz
        counter = self._counter
        depth_before = counter.curly
        counter.feed(line)

        if self._state is _ScanState.HEADER:
            if not class_line:
                self._header += " " + line.strip()
            if counter.opened:
                self._state = _ScanState.BODY
                clazz.header_ends_at_line = line_number
                if not class_line:
                    self._reparse_header()

        if (
            not class_line
            and depth_before == 1
            and clazz.constr_starts_at_line is None
            and clazz.name is not None
            and _strip_const(line).startswith(clazz.name + "(")
        ):
            clazz.constr_starts_at_line = line_number
            self._state = _ScanState.CONSTRUCTOR

        if self._state is _ScanState.CONSTRUCTOR:
            clazz.constr = line + "\n" if clazz.constr is None else clazz.constr + line + "\n"
            if counter.paren == 0:
                clazz.constr_ends_at_line = line_number
                clazz.constr = remove_end(clazz.constr, "\n")
                self._state = _ScanState.BODY

        clazz.class_content += line
        if counter.closed:
            clazz.ends_at_line = line_number
            self._clazz = DartClass()
            self._state = _ScanState.OUTSIDE
            return
        clazz.class_content += "\n"

        if (
            self._state is _ScanState.BODY
            and counter.paren == 0
            and counter.curly == 1
            and not class_line
            and is_field_line(line, clazz)
        ):
            prev_line = self.lines[index - 1] if index > 0 else None
            prop = parse_field_line(line, line_number, prev_line)
            if prop is not None:
                clazz.properties.append(prop)


def parse_classes(text: str) -> List[DartClass]:
    return DartClassScanner(text).scan()


def scan(text: str) -> ScanResult:
    return ScanResult(classes=parse_classes(text), imports=ImportTable(text))
