"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens:
single printable characters pass through, everything else becomes a name
such as ``UP``, ``SHIFT_DOWN``, ``ALT_w`` or ``ENTER``.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []

_CONTROL_KEYS = {
    b"\t": "TAB",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\x15": "CTRL_U",
    b"\r": "ENTER",
    b"\n": "ENTER",
    b" ": "SPACE",
    b"\x03": "CTRL_C",
}
_ARROWS = {b"A": "UP", b"B": "DOWN", b"C": "RIGHT", b"D": "LEFT"}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _read_utf8_tail(fd: int, lead: bytes) -> str:
    """Complete a multi-byte UTF-8 character whose first byte is ``lead``."""
    first = lead[0]
    if first >= 0xF0:
        missing = 3
    elif first >= 0xE0:
        missing = 2
    elif first >= 0xC0:
        missing = 1
    else:
        missing = 0
    data = lead
    for _ in range(missing):
        nxt = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if nxt is None:
            break
        data += nxt
    return data.decode("utf-8", errors="replace")


def _decode_csi(fd: int) -> str:
    """Decode the part of an ``ESC [`` sequence after the bracket."""
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq in _ARROWS:
        return _ARROWS[seq]
    if seq == b"Z":
        return "SHIFT_TAB"
    if seq != b"1":
        return "ESC"
    # Modified arrows: ESC [ 1 ; <mod> <A-D>
    if _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS) != b";":
        return "ESC"
    modifier = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if modifier is None or final not in _ARROWS:
        return "ESC"
    arrow = _ARROWS[final]
    if modifier == b"2":
        return f"SHIFT_{arrow}"
    if modifier in {b"3", b"9"}:
        return f"ALT_{arrow}"
    return arrow


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token; returns ``""`` when ``timeout_ms`` elapses without input."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""
        ch = os.read(fd, 1)
        if not ch:
            return ""

    if ch in _CONTROL_KEYS:
        return _CONTROL_KEYS[ch]
    if ch != b"\x1b":
        if ch[0] >= 0x80:
            return _read_utf8_tail(fd, ch)
        return ch.decode("utf-8", errors="replace")

    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq == b"[":
        return _decode_csi(fd)
    if seq == b"\x1b":
        _PENDING_BYTES.append(seq)
        return "ESC"
    if 0x21 <= seq[0] <= 0x7E:
        # Alt/Meta sends ESC followed by the plain character.
        return f"ALT_{seq.decode('ascii')}"
    _PENDING_BYTES.append(seq)
    return "ESC"
