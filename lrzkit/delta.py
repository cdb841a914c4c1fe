"""Delta filter: each byte is stored as its difference from the byte
``distance`` positions earlier.

The coder keeps the last ``distance`` bytes of the stream between calls,
so data can be encoded or decoded in pieces of any size.
"""

from __future__ import annotations

DELTA_STATE_SIZE = 256


class DeltaCoder:
    """Stateful delta encoder and decoder for one stream."""

    def __init__(self, distance: int):
        if not 1 <= distance <= DELTA_STATE_SIZE:
            raise ValueError(
                f"Delta distance must be between 1 and {DELTA_STATE_SIZE}, got {distance}"
            )
        self.distance = distance
        self._history = bytearray(distance)

    def reset(self) -> None:
        """Forget previously seen bytes, as at the start of a stream."""
        self._history = bytearray(self.distance)

    @property
    def state(self) -> bytes:
        """The last ``distance`` bytes of the original stream, oldest first."""
        return bytes(self._history)

    def encode(self, data) -> bytes:
        """Return the delta-encoded form of data and advance the state."""
        data = bytes(data)
        if not data:
            return b""
        history = bytes(self._history) + data
        encoded = bytes((byte - prev) & 0xFF for byte, prev in zip(data, history))
        self._history = bytearray(history[-self.distance:])
        return encoded

    def decode(self, data) -> bytes:
        """Return the original bytes for delta-encoded data and advance the state."""
        data = bytes(data)
        if not data:
            return b""
        distance = self.distance
        output = bytearray(self._history)
        for byte in data:
            output.append((byte + output[-distance]) & 0xFF)
        self._history = output[-distance:]
        return bytes(output[distance:])