from __future__ import annotations

import pytest

from kiloview.constants import Key
from kiloview.keys import KeyDecoder


def decoder_for(data: bytes) -> tuple[KeyDecoder, list[int]]:
    pending = list(data)
    reads: list[int] = []

    def read_byte() -> int | None:
        reads.append(1)
        return pending.pop(0) if pending else None

    return KeyDecoder(read_byte), reads


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"\x1b[A", Key.ARROW_UP),
        (b"\x1b[B", Key.ARROW_DOWN),
        (b"\x1b[C", Key.ARROW_RIGHT),
        (b"\x1b[D", Key.ARROW_LEFT),
        (b"\x1b[H", Key.HOME_KEY),
        (b"\x1b[F", Key.END_KEY),
        (b"\x1b[1~", Key.HOME_KEY),
        (b"\x1b[7~", Key.HOME_KEY),
        (b"\x1b[3~", Key.DEL_KEY),
        (b"\x1b[4~", Key.END_KEY),
        (b"\x1b[8~", Key.END_KEY),
        (b"\x1b[5~", Key.PAGE_UP),
        (b"\x1b[6~", Key.PAGE_DOWN),
        (b"\x1bOH", Key.HOME_KEY),
        (b"\x1bOF", Key.END_KEY),
    ],
)
def test_known_sequences(data: bytes, expected: Key) -> None:
    decoder, _ = decoder_for(data)
    assert decoder.read_key() == expected


@pytest.mark.parametrize("byte", [ord("a"), ord("~"), 0, 3, 17, 127, 200])
def test_plain_bytes_pass_through(byte: int) -> None:
    decoder, _ = decoder_for(bytes([byte]))
    assert decoder.read_key() == byte


def test_lone_escape_is_escape() -> None:
    decoder, _ = decoder_for(b"\x1b")
    assert decoder.read_key() is Key.ESCAPE
    assert Key.ESCAPE == 27


def test_timeout_without_input_is_no_key() -> None:
    decoder, _ = decoder_for(b"")
    assert decoder.read_key() is None


@pytest.mark.parametrize(
    "data",
    [
        b"\x1bx",
        b"\x1b[",
        b"\x1b[Z",
        b"\x1b[2~",
        b"\x1b[9~",
        b"\x1b[5",
        b"\x1b[5x",
        b"\x1bO",
        b"\x1bOA",
        b"\x1b\x1b",
    ],
)
def test_unrecognized_sequences_decode_to_escape(data: bytes) -> None:
    decoder, reads = decoder_for(data)
    assert decoder.read_key() is Key.ESCAPE
    # Never more than one byte past the longest sequence.
    assert len(reads) <= 5


def test_consecutive_keys() -> None:
    decoder, _ = decoder_for(b"q\x1b[Bz")
    assert decoder.read_key() == ord("q")
    assert decoder.read_key() == Key.ARROW_DOWN
    assert decoder.read_key() == ord("z")
    assert decoder.read_key() is None
