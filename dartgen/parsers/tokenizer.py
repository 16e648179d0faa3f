"""Line-fed lexical state machine for Dart source.

The scanner works on one line at a time, but block comments and triple-quoted
strings span lines, so the tokenizer keeps its state between calls. Only the
characters that belong to code are reported; string contents (outside of
``${}`` interpolation) and comments are dropped, which keeps braces in string
literals from disturbing the depth counters.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import List


class _TokState(Enum):
    CODE = auto()
    BLOCK_COMMENT = auto()
    STRING_SQ = auto()        # single-quoted  '...'
    STRING_DQ = auto()        # double-quoted  "..."
    STRING_TSQ = auto()       # triple single  '''...'''
    STRING_TDQ = auto()       # triple double  """..."""
    RAW_SQ = auto()
    RAW_DQ = auto()
    RAW_TSQ = auto()
    RAW_TDQ = auto()


# Single-line string states end at the end of the line even when unterminated.
_LINE_BOUND = (_TokState.STRING_SQ, _TokState.STRING_DQ, _TokState.RAW_SQ, _TokState.RAW_DQ)

_CLOSERS = {
    _TokState.STRING_SQ: "'",
    _TokState.STRING_DQ: '"',
    _TokState.STRING_TSQ: "'''",
    _TokState.STRING_TDQ: '"""',
    _TokState.RAW_SQ: "'",
    _TokState.RAW_DQ: '"',
    _TokState.RAW_TSQ: "'''",
    _TokState.RAW_TDQ: '"""',
}

_RAW = (_TokState.RAW_SQ, _TokState.RAW_DQ, _TokState.RAW_TSQ, _TokState.RAW_TDQ)


def _is_escaped(src: str, pos: int) -> bool:
    n = 0
    p = pos - 1
    while p >= 0 and src[p] == '\\':
        n += 1
        p -= 1
    return n % 2 == 1


class CodeFilter:
    """Feed lines in order; :meth:`code` returns the code-only part of each."""

    def __init__(self):
        self.reset()

    def reset(self):
        self._state = _TokState.CODE
        # brace depth inside each open ${...}
        self._interp_stack: List[int] = []
        self._interp_return: List[_TokState] = []

    def code(self, line: str) -> str:
        result: list[str] = []
        i = 0
        n = len(line)
        state = self._state

        while i < n:
            c = line[i]

            # interpolation brace tracking (we are in CODE inside ${...})
            if self._interp_stack and state == _TokState.CODE:
                if c == '{':
                    self._interp_stack[-1] += 1
                    i += 1; continue
                if c == '}':
                    self._interp_stack[-1] -= 1
                    if self._interp_stack[-1] == 0:
                        self._interp_stack.pop()
                        state = self._interp_return.pop()
                    i += 1; continue

            if state == _TokState.CODE:
                if c == '/' and i + 1 < n and line[i + 1] == '/':
                    break
                if c == '/' and i + 1 < n and line[i + 1] == '*':
                    state = _TokState.BLOCK_COMMENT; i += 2; continue
                if c == 'r' and i + 1 < n and line[i + 1] in ('"', "'") and not (i > 0 and (line[i - 1].isalnum() or line[i - 1] == '_')):
                    q = line[i + 1]
                    if line[i + 1:i + 4] == q * 3:
                        state = _TokState.RAW_TSQ if q == "'" else _TokState.RAW_TDQ; i += 4; continue
                    state = _TokState.RAW_SQ if q == "'" else _TokState.RAW_DQ; i += 2; continue
                if c in ('"', "'"):
                    if line[i:i + 3] == c * 3:
                        state = _TokState.STRING_TSQ if c == "'" else _TokState.STRING_TDQ; i += 3; continue
                    state = _TokState.STRING_SQ if c == "'" else _TokState.STRING_DQ; i += 1; continue
                result.append(c); i += 1; continue

            if state == _TokState.BLOCK_COMMENT:
                if c == '*' and i + 1 < n and line[i + 1] == '/':
                    state = _TokState.CODE; i += 2; continue
                i += 1; continue

            closer = _CLOSERS[state]
            if state in _RAW:
                if line[i:i + len(closer)] == closer:
                    state = _TokState.CODE; i += len(closer); continue
                i += 1; continue

            # regular strings: end quote and interpolation
            if line[i:i + len(closer)] == closer and not _is_escaped(line, i):
                state = _TokState.CODE; i += len(closer); continue
            if c == '$' and i + 1 < n and line[i + 1] == '{' and not _is_escaped(line, i):
                self._interp_stack.append(1)
                self._interp_return.append(state)
                state = _TokState.CODE; i += 2; continue
            i += 1

        if state in _LINE_BOUND:
            state = _TokState.CODE
        self._state = state
        return ''.join(result)


@dataclass
class LineCounts:
    curly_open: int = 0
    curly_close: int = 0
    paren_open: int = 0
    paren_close: int = 0


class BracketCounter:
    """Curly and round bracket depth over a sequence of lines.

    ``opened`` records whether the curly depth was ever positive, so that a
    declaration split over several lines is not taken as an empty class.
    """

    def __init__(self):
        self._filter = CodeFilter()
        self.reset()

    def reset(self):
        self._filter.reset()
        self.curly = 0
        self.paren = 0
        self.opened = False

    def feed(self, line: str) -> LineCounts:
        code = self._filter.code(line)
        counts = LineCounts(
            curly_open=code.count('{'),
            curly_close=code.count('}'),
            paren_open=code.count('('),
            paren_close=code.count(')'),
        )
        self.curly += counts.curly_open - counts.curly_close
        self.paren += counts.paren_open - counts.paren_close
        if counts.curly_open:
            self.opened = True
        return counts

    @property
    def closed(self) -> bool:
        return self.opened and self.curly == 0
