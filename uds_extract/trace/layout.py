# trace/layout.py
from dataclasses import dataclass

@dataclass(frozen=True)
class Span:
    name: str
    start: int
    size: int

    @property
    def end(self) -> int:
        return self.start + self.size

    def take(self, frame: bytes) -> bytes:
        # на коротком кадре просто вернётся меньше байт
        return bytes(frame[self.start:self.end])

# Одна запись лога шины — ровно 17 байт (последняя может быть короче)
FRAME_SIZE = 17

# Смещения внутри записи (0-based)
PCI_HIGH_OFF = 9        # младший полубайт — старшая часть длины
PCI_LOW_OFF = 10        # младший байт длины / SID ответа на кадре-подтверждении
SID_OFF = 11            # SID запроса / счётчик блока в подтверждении
BSC_OFF = 12            # BlockSequenceCounter в запросе 0x36

REQUEST_HEAD = Span("REQUEST_HEAD", start=13, size=4)     # первые 4 байта данных блока
CONTINUATION = Span("CONTINUATION", start=10, size=7)     # 7 байт данных в кадре-продолжении

# Минимальная длина записи, чтобы поля были определены
REQUEST_MIN_LEN = BSC_OFF + 1
ACK_MIN_LEN = SID_OFF + 1

SID_TRANSFER_DATA = 0x36
SID_TRANSFER_DATA_POSITIVE = 0x76   # 0x36 + 0x40

# Сколько байт засчитывал исходный инструмент за кадр запроса (хотя дописывал 4)
LEGACY_REQUEST_CREDIT = 5
