"""Rebuild the source text of a class from its pending edits."""

from __future__ import annotations

from ..errors import ContractViolation
from ..models import DartClass
from ..utils import remove_end


def generate_class_replacement(clazz: DartClass) -> str:
    """Return the patched text for lines ``starts_at_line..ends_at_line``.

    Lines are visited from the closing brace upwards:

    * the closing line is preceded by the members to insert,
    * the line of the last field is followed by a new constructor,
    * lines covered by a replaced member or by the old constructor are
      swapped for the replacement text, emitted once,
    * the declaration, possibly spread over several lines, becomes one line
      regenerated from the class metadata.
    """
    if clazz.starts_at_line is None or clazz.ends_at_line is None:
        raise ContractViolation(f"{clazz.name} has no line span")

    lines = clazz.class_content.split("\n")
    start = clazz.starts_at_line
    header_end = (clazz.header_ends_at_line or start) - start
    replacement = ""

    for i in range(clazz.ends_at_line - start, -1, -1):
        line = lines[i] + "\n"
        line_number = start + i

        if i <= header_end:
            if i == 0:
                declaration = clazz.class_declaration_line()
                if "{" in lines[header_end]:
                    declaration += " {"
                replacement = declaration + "\n" + replacement
        elif line_number == clazz.props_end_at_line and clazz.constr is not None and not clazz.has_constructor:
            replacement = line + "\n" + clazz.constr + replacement
        elif line_number == clazz.ends_at_line and clazz.is_valid:
            replacement = clazz.to_insert + line + replacement
        elif clazz.has_constructor and clazz.constr_different and \
                clazz.constr_starts_at_line <= line_number <= clazz.constr_ends_at_line:
            if line_number == clazz.constr_starts_at_line:
                replacement = remove_end(clazz.constr, "\n") + "\n" + replacement
        else:
            part = clazz.replacement_at_line(line_number)
            if part is None:
                replacement = line + replacement
            elif part not in replacement:
                replacement = part + "\n" + replacement

    return remove_end(replacement, "\n")
