from __future__ import annotations

from typing import TYPE_CHECKING

from .constants import (
    ANSI_CLEAR_LINE,
    ANSI_CURSOR_HOME,
    ANSI_HIDE_CURSOR,
    ANSI_SHOW_CURSOR,
    KILOVIEW_VERSION,
)
from .models import EditorState
from .viewport import scroll_to_cursor

if TYPE_CHECKING:
    from .terminal import TerminalSession

MARGIN = b"~"


def welcome_message() -> bytes:
    return f"Kiloview -- version {KILOVIEW_VERSION}".encode()


def draw_welcome(state: EditorState, out: list[bytes]) -> None:
    cols = state.view.screencols
    banner = welcome_message()[:cols]
    left = (cols - len(banner)) // 2
    # The margin marker takes the first column of the centring gap.
    if left:
        out.append(MARGIN.ljust(left))
    out.append(banner)


def draw_rows(state: EditorState, out: list[bytes]) -> None:
    view = state.view
    numrows = state.numrows
    for y in range(view.screenrows):
        filerow = view.rowoff + y
        if filerow < numrows:
            rendered = state.buffer.row_at(filerow).rendered
            # Slicing past the end yields b"", never a negative-length piece.
            out.append(rendered[view.coloff : view.coloff + view.screencols])
        elif numrows == 0 and y == view.screenrows // 3:
            draw_welcome(state, out)
        else:
            out.append(MARGIN)
        out.append(ANSI_CLEAR_LINE)
        if y < view.screenrows - 1:
            out.append(b"\r\n")


def cursor_escape(state: EditorState) -> bytes:
    view = state.view
    return b"\x1b[%d;%dH" % (view.cy - view.rowoff + 1, view.cx - view.coloff + 1)


def build_frame(state: EditorState) -> bytes:
    out: list[bytes] = [ANSI_HIDE_CURSOR, ANSI_CURSOR_HOME]
    draw_rows(state, out)
    out.append(cursor_escape(state))
    out.append(ANSI_SHOW_CURSOR)
    return b"".join(out)


def refresh_screen(state: EditorState, session: TerminalSession) -> None:
    scroll_to_cursor(state)
    session.write(build_frame(state))
