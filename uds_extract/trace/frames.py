# trace/frames.py
from __future__ import annotations
from typing import Iterator, Tuple

from .layout import FRAME_SIZE

# Запись — это просто неизменяемый срез bytes
FrameRecord = bytes


class FrameSource:
    """
    Представление буфера трассы как последовательности 17-байтных записей.
    Буфер не копируется и не меняется (держим memoryview), копируются только
    выдаваемые записи; последняя запись может быть короче.
    """
    def __init__(self, buffer: bytes | bytearray | memoryview):
        self._buf = memoryview(buffer)

    def __len__(self) -> int:
        return len(self._buf)

    @property
    def frame_count(self) -> int:
        return (len(self._buf) + FRAME_SIZE - 1) // FRAME_SIZE

    def at_end(self, offset: int) -> bool:
        return offset >= len(self._buf)

    def frame_at(self, offset: int) -> FrameRecord:
        """min(17, L - offset) байт начиная с offset (пусто за концом буфера)."""
        if offset < 0:
            raise ValueError("offset must be >= 0")
        return bytes(self._buf[offset:offset + FRAME_SIZE])

    def frames(self, start: int = 0) -> Iterator[Tuple[int, FrameRecord]]:
        offset = start
        while not self.at_end(offset):
            yield offset, self.frame_at(offset)
            offset += FRAME_SIZE
