from __future__ import annotations

import atexit
import errno
import fcntl
import logging
import os
import re
import select
import struct
import termios
from contextlib import AbstractContextManager

from .constants import (
    ANSI_CURSOR_FAR_CORNER,
    ANSI_CURSOR_QUERY,
    CURSOR_REPLY_MAX,
    READ_TIMEOUT,
)

logger = logging.getLogger(__name__)

_CURSOR_REPLY_RE = re.compile(rb"\x1b\[(\d+);(\d+)R")


class TerminalError(OSError):
    """The terminal cannot be driven: not a tty, raw mode or size query failed."""


def _deciseconds(timeout: float) -> int:
    return max(0, min(255, round(timeout * 10)))


class TerminalSession(AbstractContextManager["TerminalSession"]):
    """Raw-mode access to a terminal, restored on every exit path.

    Input is unbuffered and unechoed; control characters that would normally
    raise signals or pause output are delivered as plain bytes, and output
    post-processing is off, so callers must emit ``\\r\\n`` themselves.
    """

    def __init__(self, ifd: int, ofd: int, read_timeout: float = READ_TIMEOUT) -> None:
        self.ifd = ifd
        self.ofd = ofd
        self.read_timeout = read_timeout
        self._orig: list | None = None

    @property
    def raw(self) -> bool:
        return self._orig is not None

    def __enter__(self) -> "TerminalSession":
        self.enter_raw_mode()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.leave_raw_mode()
        except TerminalError as restore_exc:
            if exc_type is None:
                raise
            # Keep the exception that is already unwinding the block.
            logger.error("could not restore terminal attributes: %s", restore_exc)

    def enter_raw_mode(self) -> None:
        if not os.isatty(self.ifd):
            raise TerminalError(errno.ENOTTY, "input is not a terminal")
        if not os.isatty(self.ofd):
            raise TerminalError(errno.ENOTTY, "output is not a terminal")
        try:
            orig = termios.tcgetattr(self.ifd)
            raw = termios.tcgetattr(self.ifd)
        except termios.error as exc:
            raise TerminalError(errno.ENOTTY, f"tcgetattr failed: {exc}") from exc

        raw[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
        raw[1] &= ~termios.OPOST
        raw[2] |= termios.CS8
        raw[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
        raw[6][termios.VMIN] = 0
        raw[6][termios.VTIME] = _deciseconds(self.read_timeout)
        try:
            termios.tcsetattr(self.ifd, termios.TCSAFLUSH, raw)
        except termios.error as exc:
            raise TerminalError(errno.EIO, f"tcsetattr failed: {exc}") from exc

        self._orig = orig
        atexit.register(self.leave_raw_mode)
        logger.info("raw mode entered on fd %d (read timeout %.3fs)", self.ifd, self.read_timeout)

    def leave_raw_mode(self) -> None:
        if self._orig is None:
            return
        orig, self._orig = self._orig, None
        atexit.unregister(self.leave_raw_mode)
        try:
            termios.tcsetattr(self.ifd, termios.TCSAFLUSH, orig)
        except termios.error as exc:
            raise TerminalError(errno.EIO, f"tcsetattr failed: {exc}") from exc
        logger.info("terminal attributes restored on fd %d", self.ifd)

    def read_byte(self) -> int | None:
        """Return one input byte, or None if nothing arrived within the timeout."""
        try:
            readable, _, _ = select.select([self.ifd], [], [], self.read_timeout)
        except InterruptedError:
            return None
        if not readable:
            return None
        try:
            data = os.read(self.ifd, 1)
        except (BlockingIOError, InterruptedError):
            return None
        except OSError as exc:
            raise TerminalError(exc.errno, f"read failed: {exc.strerror}") from exc
        if not data:
            return None
        return data[0]

    def write(self, data: bytes) -> None:
        view = memoryview(data)
        while view:
            try:
                n = os.write(self.ofd, view)
            except InterruptedError:
                continue
            except OSError as exc:
                raise TerminalError(exc.errno, f"write failed: {exc.strerror}") from exc
            view = view[n:]

    def get_cursor_position(self) -> tuple[int, int]:
        self.write(ANSI_CURSOR_QUERY)

        buf = bytearray()
        while len(buf) < CURSOR_REPLY_MAX:
            c = self.read_byte()
            if c is None:
                break
            buf.append(c)
            if c == ord("R"):
                break

        match = _CURSOR_REPLY_RE.match(bytes(buf))
        if not match:
            raise TerminalError(errno.EIO, f"invalid cursor position response: {bytes(buf)!r}")
        return int(match.group(1)), int(match.group(2))

    def query_window_size(self) -> tuple[int, int]:
        rows = cols = 0
        try:
            packed = fcntl.ioctl(self.ofd, termios.TIOCGWINSZ, struct.pack("HHHH", 0, 0, 0, 0))
            rows, cols, _, _ = struct.unpack("HHHH", packed)
        except OSError as exc:
            logger.debug("TIOCGWINSZ failed (%s), probing with the cursor", exc)

        if not cols:
            self.write(ANSI_CURSOR_FAR_CORNER)
            rows, cols = self.get_cursor_position()

        if not rows or not cols:
            raise TerminalError(errno.EIO, f"unusable window size {rows}x{cols}")
        logger.info("window size %dx%d", rows, cols)
        return rows, cols
