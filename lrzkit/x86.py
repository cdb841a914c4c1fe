"""Branch-call-jump filters for x86 and IA-64 machine code.

Both converters rewrite relative branch targets in a writable buffer
(``bytearray`` or writable ``memoryview``) in place.
"""

from __future__ import annotations

_MASK32 = 0xFFFFFFFF


def _shift(value: int, offset: int, encoding: bool) -> int:
    """Add (encoding) or subtract (decoding) an offset modulo 2**32."""
    return (value + offset if encoding else value - offset) & _MASK32


def _is_ms_byte(byte: int) -> bool:
    """True for 0x00 and 0xFF, the only plausible top bytes of a near offset."""
    return ((byte + 1) & 0xFE) == 0


def x86_convert(data, ip: int, state: int, encoding: bool) -> tuple[int, int]:
    """Convert x86 CALL/JMP (E8/E9) targets in place.

    Returns ``(processed, state)``: the number of bytes handled and the
    state to pass to the call that handles the following bytes.
    """
    size = len(data)
    mask = state & 7
    if size < 5:
        return 0, state
    limit = size - 4
    ip = (ip + 5) & _MASK32
    pos = 0

    while True:
        p = pos
        while p < limit and (data[p] & 0xFE) != 0xE8:
            p += 1

        distance = p - pos
        pos = p
        if p >= limit:
            return pos, (0 if distance > 2 else mask >> distance)

        if distance > 2:
            mask = 0
        else:
            mask >>= distance
            if mask != 0 and (
                mask > 4 or mask == 3 or _is_ms_byte(data[p + (mask >> 1) + 1])
            ):
                mask = (mask >> 1) | 4
                pos += 1
                continue

        if not _is_ms_byte(data[p + 4]):
            mask = (mask >> 1) | 4
            pos += 1
            continue

        value = int.from_bytes(data[p + 1:p + 5], "little")
        current = (ip + pos) & _MASK32
        pos += 5
        value = _shift(value, current, encoding)
        if mask != 0:
            shift = (mask & 6) << 2
            if _is_ms_byte((value >> shift) & 0xFF):
                value ^= ((0x100 << shift) - 1) & _MASK32
                value = _shift(value, current, encoding)
            mask = 0
        data[p + 1] = value & 0xFF
        data[p + 2] = (value >> 8) & 0xFF
        data[p + 3] = (value >> 16) & 0xFF
        data[p + 4] = (0 - ((value >> 24) & 1)) & 0xFF


def ia64_convert(data, ip: int, encoding: bool) -> int:
    """Convert IA-64 branch bundles (16-byte aligned) in place.

    Returns the number of bytes processed, a multiple of 16.
    """
    size = len(data)
    if size < 16:
        return 0
    last = size - 16
    i = 0
    while True:
        template = (0x334B0000 >> (data[i] & 0x1E)) & 3
        if template:
            for m in range(template + 1, 5):
                p = i + m * 5 - 8
                if ((data[p + 3] >> m) & 15) == 5 and (
                    ((data[p - 1] | (data[p] << 8)) >> m) & 0x70
                ) == 0:
                    raw = int.from_bytes(data[p:p + 4], "little")
                    value = raw >> m
                    value = (value & 0xFFFFF) | ((value & (1 << 23)) >> 3)
                    value = (value << 4) & _MASK32
                    value = _shift(value, (ip + i) & _MASK32, encoding)
                    value >>= 4
                    value &= 0x1FFFFF
                    value += 0x700000
                    value &= 0x8FFFFF
                    raw &= ~(0x8FFFFF << m) & _MASK32
                    raw = (raw | (value << m)) & _MASK32
                    data[p:p + 4] = raw.to_bytes(4, "little")
        i += 16
        if i > last:
            return i