from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from .constants import TAB_STOP


def expand_tabs(content: bytes) -> bytes:
    out = bytearray()
    for ch in content:
        if ch == 0x09:
            out.append(0x20)
            while len(out) % TAB_STOP != 0:
                out.append(0x20)
        else:
            out.append(ch)
    return bytes(out)


def strip_line_ending(line: bytes) -> bytes:
    if line.endswith(b"\r\n"):
        return line[:-2]
    if line.endswith(b"\n"):
        return line[:-1]
    return line


class Row:
    """One line of text; ``rendered`` follows ``content`` on every assignment."""

    __slots__ = ("_content", "_rendered")

    def __init__(self, content: bytes = b"") -> None:
        self.content = content

    @property
    def content(self) -> bytes:
        return self._content

    @content.setter
    def content(self, value: bytes) -> None:
        self._content = bytes(value)
        self._rendered = expand_tabs(self._content)

    @property
    def rendered(self) -> bytes:
        return self._rendered

    @property
    def size(self) -> int:
        return len(self._content)

    @property
    def rsize(self) -> int:
        return len(self._rendered)

    def __repr__(self) -> str:
        return f"Row({self._content!r})"


class TextBuffer:
    def __init__(self) -> None:
        self._rows: list[Row] = []

    @classmethod
    def from_lines(cls, lines: Iterable[bytes]) -> "TextBuffer":
        buf = cls()
        for line in lines:
            buf.append_row(line)
        return buf

    def append_row(self, line: bytes) -> Row:
        row = Row(strip_line_ending(line))
        self._rows.append(row)
        return row

    def row_count(self) -> int:
        return len(self._rows)

    def row_at(self, i: int) -> Row:
        if not 0 <= i < len(self._rows):
            raise IndexError(f"row {i} out of range (0..{len(self._rows)})")
        return self._rows[i]

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)


@dataclass(slots=True)
class ViewportState:
    cx: int = 0
    cy: int = 0
    rowoff: int = 0
    coloff: int = 0
    screenrows: int = 0
    screencols: int = 0


@dataclass(slots=True)
class EditorState:
    buffer: TextBuffer = field(default_factory=TextBuffer)
    view: ViewportState = field(default_factory=ViewportState)

    @property
    def numrows(self) -> int:
        return self.buffer.row_count()

    def current_row(self) -> Row | None:
        if self.view.cy < self.buffer.row_count():
            return self.buffer.row_at(self.view.cy)
        return None
