from __future__ import annotations

from .constants import Key
from .models import EditorState


def row_len(state: EditorState, y: int | None = None) -> int:
    y = state.view.cy if y is None else y
    if 0 <= y < state.numrows:
        return state.buffer.row_at(y).size
    return 0


def clamp_cursor_x(state: EditorState) -> None:
    state.view.cx = min(state.view.cx, row_len(state))


def move_left(state: EditorState) -> None:
    view = state.view
    if view.cx > 0:
        view.cx -= 1
    elif view.cy > 0:
        view.cy -= 1
        view.cx = row_len(state)


def move_right(state: EditorState) -> None:
    view = state.view
    row = state.current_row()
    if row is None:
        return
    if view.cx < row.size:
        view.cx += 1
    elif view.cy + 1 < state.numrows:
        view.cy += 1
        view.cx = 0


def move_up(state: EditorState) -> None:
    if state.view.cy > 0:
        state.view.cy -= 1


def move_down(state: EditorState) -> None:
    if state.view.cy < state.numrows:
        state.view.cy += 1


_MOVES = {
    Key.ARROW_LEFT: move_left,
    Key.ARROW_RIGHT: move_right,
    Key.ARROW_UP: move_up,
    Key.ARROW_DOWN: move_down,
}


def move_cursor(state: EditorState, key: int) -> None:
    move = _MOVES.get(key)
    if move is None:
        return
    move(state)
    clamp_cursor_x(state)


def page_move(state: EditorState, key: int, page_size: int | None = None) -> None:
    times = state.view.screenrows if page_size is None else page_size
    direction = Key.ARROW_UP if key == Key.PAGE_UP else Key.ARROW_DOWN
    for _ in range(times):
        move_cursor(state, direction)


def move_home(state: EditorState) -> None:
    state.view.cx = 0


def move_end(state: EditorState) -> None:
    state.view.cx = row_len(state)


def _follow(offset: int, pos: int, span: int) -> int:
    """Smallest shift of `offset` that puts `pos` in `[offset, offset + span)`."""
    return max(min(offset, pos), pos - span + 1)


def scroll_to_cursor(state: EditorState) -> None:
    """Bring the cursor back inside the visible window.

    The only place scroll offsets are written.
    """
    view = state.view
    view.rowoff = _follow(view.rowoff, view.cy, view.screenrows)
    view.coloff = _follow(view.coloff, view.cx, view.screencols)
