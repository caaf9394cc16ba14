# trace/reassembly.py
"""
Сборка образа памяти из лога шины с сессией UDS TransferData (0x36).

Автомат состояний:
    SEEK_REQUEST    -> ищем следующий 0x36 с допустимым счётчиком
    COLLECT_PAYLOAD -> снимаем данные блока в выходной буфер
    SEEK_ACK        -> ищем положительный ответ 0x76 с тем же счётчиком
    DONE            -> конец: либо кончился лог, либо блок не подтверждён

Ошибок наружу нет: любой сбой последовательности просто останавливает сборку,
уже собранные байты возвращаются как есть.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import List, Tuple

from .classify import block_counter, is_transfer_ack, is_transfer_request
from .frames import FrameSource
from .layout import FRAME_SIZE
from .payload import PayloadExtractor
from .sequence import SequenceValidator


class State(enum.Enum):
    SEEK_REQUEST = "seek_request"
    COLLECT_PAYLOAD = "collect_payload"
    SEEK_ACK = "seek_ack"
    DONE = "done"


class StopReason(enum.Enum):
    NO_REQUEST = "no_request"   # больше нет подходящих запросов 0x36
    NO_ACK = "no_ack"           # последний принятый блок не подтверждён


@dataclass(frozen=True)
class TransferBlock:
    counter: int
    offset: int
    pci_length: int
    data_length: int
    frames: int
    acked: bool = False


@dataclass(frozen=True)
class DecodeReport:
    image: bytes
    blocks: Tuple[TransferBlock, ...]
    stop: StopReason
    frames_total: int

    @property
    def acked_blocks(self) -> int:
        return sum(1 for b in self.blocks if b.acked)


@dataclass
class ReassemblyEngine:
    source: FrameSource
    extractor: PayloadExtractor = field(default_factory=PayloadExtractor)

    def __post_init__(self):
        self.state = State.SEEK_REQUEST
        self.cursor = 0
        self.validator = SequenceValidator()
        self.output = bytearray()
        self.blocks: List[TransferBlock] = []
        self.stop: StopReason | None = None
        self._pending: int | None = None   # смещение принятого запроса

    # ---------- переходы ----------
    def _seek_request(self):
        for offset, frame in self.source.frames(self.cursor):
            if is_transfer_request(frame) and self.validator.accept(block_counter(frame)):
                self._pending = offset
                self.cursor = offset
                self.state = State.COLLECT_PAYLOAD
                return
        self.stop = StopReason.NO_REQUEST
        self.state = State.DONE

    def _collect_payload(self):
        offset = self._pending
        request = self.source.frame_at(offset)
        res = self.extractor.extract(self.source, offset, self.output)
        self.blocks.append(TransferBlock(
            counter=block_counter(request),
            offset=offset,
            pci_length=res.pci_length,
            data_length=res.appended,
            frames=res.frames,
        ))
        self.cursor = res.next_offset
        self.state = State.SEEK_ACK

    def _seek_ack(self):
        counter = self.validator.last_accepted
        for offset, frame in self.source.frames(self.cursor):
            if is_transfer_ack(frame, counter):
                self.blocks[-1] = replace(self.blocks[-1], acked=True)
                self.cursor = offset + FRAME_SIZE
                self.state = State.SEEK_REQUEST
                return
        self.stop = StopReason.NO_ACK
        self.state = State.DONE

    def run(self) -> DecodeReport:
        steps = {
            State.SEEK_REQUEST: self._seek_request,
            State.COLLECT_PAYLOAD: self._collect_payload,
            State.SEEK_ACK: self._seek_ack,
        }
        while self.state is not State.DONE:
            steps[self.state]()
        return DecodeReport(
            image=bytes(self.output),
            blocks=tuple(self.blocks),
            stop=self.stop,
            frames_total=self.source.frame_count,
        )


def decode_with_report(buffer: bytes, legacy_count: bool = False) -> DecodeReport:
    engine = ReassemblyEngine(FrameSource(buffer), PayloadExtractor(legacy_count=legacy_count))
    return engine.run()


def decode_trace(buffer: bytes, legacy_count: bool = False) -> bytes:
    """Собрать образ из буфера трассы. Никогда не бросает исключений на данных."""
    return decode_with_report(buffer, legacy_count=legacy_count).image
