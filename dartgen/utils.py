"""Small text helpers shared by the scanner, the generators and the assembler."""

from __future__ import annotations

import re
from typing import Iterable, Sequence, Union

# Characters that may appear in map keys but not in Dart identifiers.
_INVALID_NAME_CHARS = ("-", "~", ":", "#", "$")

# Reserved words are rewritten by doubling the first letter and capitalizing
# the word itself: ``class`` -> ``cClass``.
_RESERVED_WORDS = (
    "assert", "break", "case", "catch", "class", "const", "continue",
    "default", "do", "else", "enum", "extends", "false", "final", "finally",
    "for", "if", "in", "is", "new", "null", "rethrow", "return", "super",
    "switch", "this", "throw", "true", "try", "var", "void", "while", "with",
)

_WHITESPACE = re.compile(r"\s")


def capitalize(source: str) -> str:
    """Upper-case the first character only (``str.capitalize`` lowers the rest)."""
    if not source:
        return source
    return source[0].upper() + source[1:]


RESERVED_NAMES = {word: word[0] + capitalize(word) for word in _RESERVED_WORDS}


def to_var_name(source: str) -> str:
    """Turn a raw map key into a valid, non-reserved Dart identifier."""
    result = source
    for char in _INVALID_NAME_CHARS:
        if char in result:
            pieces = result.split(char)
            result = pieces[0] + "".join(capitalize(p) for p in pieces[1:])

    result = RESERVED_NAMES.get(result, result)

    if result and result[0].isdigit():
        result = "n" + result
    return result


def remove_end(source: str, end: Union[str, Sequence[str]]) -> str:
    """Remove *end* from the end of *source*.

    With a list of suffixes the source is trimmed and each suffix is removed
    in turn, trimming again after every step.
    """
    if isinstance(end, str):
        return source[:-len(end)] if end and source.endswith(end) else source
    result = source.strip()
    for e in end:
        result = remove_end(result, e).strip()
    return result


def remove_start(source: str, start: Union[str, Sequence[str]]) -> str:
    """Counterpart of :func:`remove_end` for prefixes."""
    if isinstance(start, str):
        return source[len(start):] if start and source.startswith(start) else source
    result = source.strip()
    for s in start:
        result = remove_start(result, s).strip()
    return result


def indent(source: str, prefix: str = "  ") -> str:
    """Indent every non-empty line by *prefix*; every line ends with a newline."""
    return "".join((prefix + line if line else line) + "\n" for line in source.split("\n"))


def are_strict_equal(a: str, b: str) -> bool:
    """Compare two snippets ignoring all whitespace."""
    return _WHITESPACE.sub("", a) == _WHITESPACE.sub("", b)


def is_blank(source: str | None) -> bool:
    return source is None or not source.strip()


def includes_one(source: str, matches: Iterable[str], word_based: bool = True) -> bool:
    """True when *source* contains one of *matches*.

    In word mode the source is split on single spaces and a word must equal
    the match exactly, so ``get`` does not match ``getter``.
    """
    if word_based:
        words = set(source.split(" "))
        return any(m in words for m in matches)
    return any(m in source for m in matches)


def includes_all(source: str, matches: Iterable[str]) -> bool:
    return all(m in source for m in matches)


def split_top_level(source: str, separator: str = ",") -> list:
    """Split on *separator* outside of ``<>``, ``()``, ``[]`` and ``{}``."""
    parts: list[str] = []
    depth = 0
    current = ""
    prev = ""
    for c in source:
        if c in ("(", "<", "[", "{"):
            depth += 1
        elif c in (")", "]", "}") or (c == ">" and prev != "="):
            depth -= 1
        elif c == separator and depth == 0:
            parts.append(current)
            current = ""
            prev = c
            continue
        current += c
        prev = c
    parts.append(current)
    return [p.strip() for p in parts if p.strip()]
