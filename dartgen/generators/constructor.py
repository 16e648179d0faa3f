"""Unnamed constructor generation.

The constructor is rebuilt from the class fields, reusing whatever the
existing constructor already declares: plain parameters come first in their
form as written, ``this.`` parameters keep their modifiers and defaults, and the
initializer list or body after the parameter list is carried over.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..errors import ContractViolation
from ..models import DartClass
from ..utils import remove_end, remove_start, split_top_level


@dataclass
class OldParameter:
    """A parameter of the constructor found in the source."""
    name: str
    text: str  # as written, always ending with ",\n" unless it is a comment
    is_this: bool = False


def _strip_const(constr: str) -> str:
    stripped = constr.lstrip()
    if stripped.startswith("const"):
        stripped = stripped[len("const"):].lstrip()
    return stripped


def _parameter_list(constr: str) -> str:
    """Text inside the outermost parentheses, without ``{}``/``[]`` delimiters."""
    inner = ""
    depth = 0
    found = False
    for c in constr:
        if c == "(":
            if found:
                inner += c
            depth += 1
            found = True
            continue
        if c == ")":
            depth -= 1
            if found and depth == 0:
                break
        if depth >= 1:
            inner += c
    inner = remove_start(inner, ["{", "["])
    return remove_end(inner, ["}", "]"])


def _parse_parameter(arg: str) -> Optional[OldParameter]:
    formatted = arg.replace("required", "", 1).strip()
    if "=" in formatted:
        formatted = formatted[:formatted.index("=")].strip()

    is_this = formatted.startswith("this.")
    if is_this:
        name = formatted[len("this."):]
    elif formatted.startswith("super."):
        name = formatted[len("super."):]
    else:
        words = formatted.split(" ")
        name = words[1] if len(words) > 1 else ""
    name = remove_end(name.strip(), ",")
    if not name:
        return None

    text = arg.strip()
    if not text.endswith(",") and not text.startswith("//"):
        text += ","
    return OldParameter(name=name, text=text + "\n", is_this=is_this)


def find_old_constructor_params(clazz: DartClass) -> List[OldParameter]:
    """Parameters declared by the existing constructor, in source order."""
    if clazz.constr_starts_at_line is None or clazz.constr_ends_at_line is None:
        return []
    if clazz.constr is None:
        raise ContractViolation(f"{clazz.name} has a constructor span but no constructor text")

    inner = _parameter_list(clazz.constr)
    if clazz.constr_starts_at_line == clazz.constr_ends_at_line:
        args = split_top_level(inner, ",")
    else:
        args = inner.split("\n")

    params: List[OldParameter] = []
    for arg in args:
        param = _parse_parameter(arg)
        if param is not None:
            params.append(param)
    return params


def constructor_brackets(clazz: DartClass) -> Tuple[str, str]:
    """Opening and closing delimiters of the parameter list.

    New constructors use named parameters.
    """
    if clazz.constr is None:
        return "({", "})"
    constr = _strip_const(clazz.constr)
    if constr.startswith(clazz.name + "(["):
        start = "(["
    elif constr.startswith(clazz.name + "({"):
        start = "({"
    else:
        start = "("
    if "])" in constr:
        end = "])"
    elif "})" in constr:
        end = "})"
    else:
        end = ")"
    return start, end


def _has_key(params: List[OldParameter]) -> bool:
    return any(p.text.startswith("Key? key") or p.text.startswith("super.key") for p in params)


def _ending(clazz: DartClass, end: str, params: List[OldParameter]) -> str:
    if clazz.constr is not None:
        constr = clazz.constr.rstrip()
        if " : " in constr:
            return end + " " + constr[constr.index(" : ") + 1:].strip()
        if constr.endswith("{"):
            return end + " " + constr[constr.rindex("{"):]
    # super.key already forwards the key
    if clazz.is_widget and not any(p.text.startswith("super.") for p in params):
        return end + " : super(key: key);"
    return end + ";"


def build_constructor(clazz: DartClass, default_values: bool = False, make_const: bool = False) -> str:
    """Return the unindented constructor for *clazz*."""
    start, end = constructor_brackets(clazz)
    named = start == "({" and end == "})"

    constr = ""
    if clazz.constr is not None:
        if clazz.constr.lstrip().startswith("const"):
            constr += "const "
    elif clazz.is_widget or make_const:
        constr += "const "
    constr += clazz.name + start + "\n"

    old_params = find_old_constructor_params(clazz)

    if clazz.is_widget and not _has_key(old_params):
        constr += "  Key? key,\n"

    for param in old_params:
        if not param.is_this:
            constr += "  " + param.text

    old_by_name = {p.name: p for p in old_params}
    for prop in clazz.properties:
        old = old_by_name.get(prop.name)
        if old is not None:
            if old.is_this:
                constr += "  " + old.text
            continue

        parameter = f"this.{prop.name}"
        if prop.is_nullable:
            constr += f"  {parameter},\n"
        elif default_values and (prop.is_primitive or prop.is_collection) and prop.raw_type != "dynamic":
            constr += f"  {parameter} = {prop.default_value},\n"
        elif named:
            constr += f"  required {parameter},\n"
        else:
            constr += f"  {parameter},\n"

    return constr + _ending(clazz, end, old_params)
