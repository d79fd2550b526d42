from __future__ import annotations

import argparse
import logging
import os
import signal
import sys
from functools import partial
from typing import Callable

from .constants import (
    ANSI_CLEAR_SCREEN,
    ANSI_CURSOR_HOME,
    CTRL_Q,
    KILOVIEW_VERSION,
    READ_TIMEOUT,
    Key,
)
from .keys import KeyDecoder
from .log import setup_logging
from .models import EditorState, TextBuffer
from .terminal import TerminalError, TerminalSession
from .ui import refresh_screen
from .viewport import move_cursor, move_end, move_home, page_move

logger = logging.getLogger(__name__)


KEY_HANDLERS: dict[int, Callable[[EditorState], None]] = {
    Key.ARROW_UP: partial(move_cursor, key=Key.ARROW_UP),
    Key.ARROW_DOWN: partial(move_cursor, key=Key.ARROW_DOWN),
    Key.ARROW_LEFT: partial(move_cursor, key=Key.ARROW_LEFT),
    Key.ARROW_RIGHT: partial(move_cursor, key=Key.ARROW_RIGHT),
    Key.PAGE_UP: partial(page_move, key=Key.PAGE_UP),
    Key.PAGE_DOWN: partial(page_move, key=Key.PAGE_DOWN),
    Key.HOME_KEY: move_home,
    Key.END_KEY: move_end,
}


class Editor:
    def __init__(
        self,
        session: TerminalSession,
        state: EditorState,
        decoder: KeyDecoder | None = None,
    ) -> None:
        self.session = session
        self.state = state
        self.decoder = decoder if decoder is not None else KeyDecoder(session.read_byte)
        self._resized = False
        self._needs_refresh = True

    def update_window_size(self) -> None:
        rows, cols = self.session.query_window_size()
        self.state.view.screenrows = rows
        self.state.view.screencols = cols
        self._needs_refresh = True

    def handle_sigwinch(self, _signum: int, _frame) -> None:
        self._resized = True

    def refresh_screen(self) -> None:
        refresh_screen(self.state, self.session)
        self._needs_refresh = False

    def process_keypress(self) -> bool:
        """Handle at most one key; return True when the user asked to quit."""
        c = self.decoder.read_key()
        if c is None:
            return False
        logger.debug("key %r", c)
        self._needs_refresh = True

        if c == CTRL_Q:
            return True
        handler = KEY_HANDLERS.get(c)
        if handler is not None:
            handler(self.state)
        return False

    def run(self) -> int:
        self.update_window_size()
        while True:
            if self._resized:
                self._resized = False
                self.update_window_size()
            if self._needs_refresh:
                self.refresh_screen()
            if self.process_keypress():
                logger.info("quit requested")
                return 0


def open_buffer(filename: str | None) -> TextBuffer:
    if filename is None:
        return TextBuffer()
    try:
        with open(filename, "rb") as f:
            buf = TextBuffer.from_lines(f)
    except FileNotFoundError:
        logger.info("%s does not exist, starting with an empty buffer", filename)
        return TextBuffer()
    logger.info("loaded %d rows from %s", buf.row_count(), filename)
    return buf


def _terminate(signum: int, _frame) -> None:
    raise SystemExit(128 + signum)


def _clear_screen(session: TerminalSession) -> None:
    if not os.isatty(session.ofd):
        return
    try:
        session.write(ANSI_CLEAR_SCREEN + ANSI_CURSOR_HOME)
    except TerminalError as exc:
        logger.warning("could not clear the screen: %s", exc)


def escape_timeout_ms(value: str) -> int:
    ms = int(value)
    if ms < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1 millisecond, got {ms}")
    return ms


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kiloview", description="Terminal text viewer")
    parser.add_argument("filename", nargs="?", help="file to view; missing files open empty")
    parser.add_argument(
        "--escape-timeout",
        type=escape_timeout_ms,
        default=int(READ_TIMEOUT * 1000),
        metavar="MS",
        help="how long to wait for the rest of an escape sequence (default: %(default)s)",
    )
    parser.add_argument("--log-file", help="write a debug log to this file (or set KILOVIEW_LOG)")
    parser.add_argument("--log-level", default="INFO", help="log level (default: %(default)s)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {KILOVIEW_VERSION}")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_file, args.log_level)

    try:
        buffer = open_buffer(args.filename)
    except OSError as exc:
        print(f"kiloview: cannot open {args.filename}: {exc.strerror or exc}", file=sys.stderr)
        return 1

    session = TerminalSession(
        sys.stdin.fileno(),
        sys.stdout.fileno(),
        read_timeout=args.escape_timeout / 1000,
    )
    editor = Editor(session, EditorState(buffer=buffer))

    signal.signal(signal.SIGWINCH, editor.handle_sigwinch)
    signal.signal(signal.SIGTERM, _terminate)
    signal.signal(signal.SIGHUP, _terminate)
    try:
        with session:
            code = editor.run()
    except TerminalError as exc:
        # The session has already put the terminal back by the time we get here.
        logger.error("terminal failure: %s", exc)
        _clear_screen(session)
        print(f"kiloview: {exc.strerror or exc}", file=sys.stderr)
        return 1

    _clear_screen(session)
    return code
