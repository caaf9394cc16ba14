from __future__ import annotations

import pytest

FRAME = 17


def frame(**at) -> bytes:
    """17-байтная запись с нулями, кроме указанных смещений (b9=0x10, ...)."""
    buf = bytearray(FRAME)
    for key, value in at.items():
        buf[int(key[1:])] = value
    return bytes(buf)


class TraceBuilder:
    def __init__(self):
        self.rows: list[bytes] = []

    def raw(self, row: bytes) -> "TraceBuilder":
        self.rows.append(bytes(row))
        return self

    def other(self, count: int = 1) -> "TraceBuilder":
        for _ in range(count):
            self.rows.append(frame(b11=0x22))
        return self

    def request(self, counter: int, pci: int, head: bytes = b"\xAA\xBB\xCC\xDD") -> "TraceBuilder":
        # pci — значение поля длины до вычитания 1
        row = bytearray(frame(b9=0x10 | ((pci >> 8) & 0x0F), b10=pci & 0xFF, b11=0x36, b12=counter))
        row[13:13 + len(head)] = head
        self.rows.append(bytes(row))
        # запись без данных сразу после запроса
        self.rows.append(frame(b0=0x30))
        return self

    def data(self, chunk: bytes, pad: int = 0x55) -> "TraceBuilder":
        row = bytearray(frame())
        row[10:17] = (bytes(chunk) + bytes([pad]) * 7)[:7]
        self.rows.append(bytes(row))
        return self

    def ack(self, counter: int) -> "TraceBuilder":
        self.rows.append(frame(b9=0x02, b10=0x76, b11=counter))
        return self

    def block(self, counter: int, payload: bytes) -> "TraceBuilder":
        """Полный блок: запрос, продолжения и подтверждение."""
        self.request(counter, len(payload) + 1, payload[:4])
        rest = payload[4:]
        for i in range(0, len(rest), 7):
            self.data(rest[i:i + 7])
        return self.ack(counter)

    def build(self) -> bytes:
        return b"".join(self.rows)


@pytest.fixture
def trace() -> TraceBuilder:
    return TraceBuilder()
