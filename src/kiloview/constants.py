from __future__ import annotations

from enum import IntEnum

KILOVIEW_VERSION = "0.1.0"
TAB_STOP = 8

# Seconds a single read may wait; also bounds the escape-sequence lookahead.
READ_TIMEOUT = 0.1
CURSOR_REPLY_MAX = 32

ESC = 27


class Key(IntEnum):
    ESCAPE = ESC
    ARROW_LEFT = 1000
    ARROW_RIGHT = 1001
    ARROW_UP = 1002
    ARROW_DOWN = 1003
    DEL_KEY = 1004
    HOME_KEY = 1005
    END_KEY = 1006
    PAGE_UP = 1007
    PAGE_DOWN = 1008


def ctrl(ch: str) -> int:
    return ord(ch.upper()) & 0x1F


CTRL_C = ctrl("c")
CTRL_Q = ctrl("q")
CTRL_Z = ctrl("z")

ANSI_HIDE_CURSOR = b"\x1b[?25l"
ANSI_SHOW_CURSOR = b"\x1b[?25h"
ANSI_CURSOR_HOME = b"\x1b[H"
ANSI_CLEAR_LINE = b"\x1b[K"
ANSI_CLEAR_SCREEN = b"\x1b[2J"
ANSI_CURSOR_QUERY = b"\x1b[6n"
ANSI_CURSOR_FAR_CORNER = b"\x1b[999C\x1b[999B"

CSI_SIMPLE_MAP = {
    ord("A"): Key.ARROW_UP,
    ord("B"): Key.ARROW_DOWN,
    ord("C"): Key.ARROW_RIGHT,
    ord("D"): Key.ARROW_LEFT,
    ord("H"): Key.HOME_KEY,
    ord("F"): Key.END_KEY,
}
CSI_TILDE_MAP = {
    ord("1"): Key.HOME_KEY,
    ord("3"): Key.DEL_KEY,
    ord("4"): Key.END_KEY,
    ord("5"): Key.PAGE_UP,
    ord("6"): Key.PAGE_DOWN,
    ord("7"): Key.HOME_KEY,
    ord("8"): Key.END_KEY,
}
SS3_SIMPLE_MAP = {
    ord("H"): Key.HOME_KEY,
    ord("F"): Key.END_KEY,
}
