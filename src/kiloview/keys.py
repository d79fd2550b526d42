from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Callable

from .constants import (
    CSI_SIMPLE_MAP,
    CSI_TILDE_MAP,
    ESC,
    SS3_SIMPLE_MAP,
    Key,
)

logger = logging.getLogger(__name__)

ByteReader = Callable[[], int | None]


class _State(Enum):
    ESCAPE = auto()
    CSI = auto()
    CSI_PARAM = auto()
    SS3 = auto()


class KeyDecoder:
    """Turns a byte stream into one logical key per call.

    ``read_byte`` must return a single byte, or None once its timeout has
    elapsed without input. Every state of the escape-sequence machine reads
    through it, so no call blocks longer than a few timeouts.
    """

    def __init__(self, read_byte: ByteReader) -> None:
        self.read_byte = read_byte

    def read_key(self) -> int | None:
        c = self.read_byte()
        if c is None or c != ESC:
            return c

        state = _State.ESCAPE
        param = 0
        while True:
            b = self.read_byte()
            if b is None:
                return Key.ESCAPE

            if state is _State.ESCAPE:
                if b == ord("["):
                    state = _State.CSI
                elif b == ord("O"):
                    state = _State.SS3
                else:
                    break
            elif state is _State.CSI:
                simple = CSI_SIMPLE_MAP.get(b)
                if simple is not None:
                    return simple
                if ord("0") <= b <= ord("9"):
                    param = b
                    state = _State.CSI_PARAM
                else:
                    break
            elif state is _State.CSI_PARAM:
                if b == ord("~"):
                    key = CSI_TILDE_MAP.get(param)
                    if key is not None:
                        return key
                break
            else:
                key = SS3_SIMPLE_MAP.get(b)
                if key is not None:
                    return key
                break

        logger.debug("unrecognized escape sequence ending in %r", chr(b))
        return Key.ESCAPE
