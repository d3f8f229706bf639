"""Thread-safe stderr accumulator."""

from __future__ import annotations

import threading


class StderrBuffer:
    """Growable byte buffer shared by the stderr reader and the ticker.

    The reader thread appends chunks as ffmpeg writes them; the ticker and
    the runner take snapshots. Snapshots are copies, so callers may keep
    them after the buffer grows.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._data = bytearray()

    def append(self, chunk: bytes) -> None:
        with self._lock:
            self._data.extend(chunk)

    def snapshot(self) -> bytes:
        with self._lock:
            return bytes(self._data)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
