"""Splitting a byte buffer into newline-terminated JSON-RPC frames."""

from __future__ import annotations

from typing import Optional


class JsonRpcFrameCodec:
    """Decodes one line at a time from a growing byte buffer."""

    def decode(self, buffer: bytearray) -> Optional[bytes]:
        """Remove and return the first complete line, without its newline.

        Returns None, leaving the buffer untouched, when no newline has arrived yet.
        """
        end = buffer.find(b"\n")
        if end < 0:
            return None
        frame = bytes(buffer[:end])
        del buffer[: end + 1]
        return frame