# trace/payload.py
"""Снятие заголовков и выравнивающих байт с одного блока TransferData.

Блок = кадр запроса 0x36 + один кадр без данных + кадры-продолжения,
пока не набрана длина из PCI. В кадре запроса данные лежат в байтах 13..16,
в каждом продолжении — в байтах 10..16; хвост сверх заявленной длины — это
заполнитель и отбрасывается.
"""

from __future__ import annotations

from dataclasses import dataclass

from .classify import pci_length
from .frames import FrameSource
from .layout import CONTINUATION, FRAME_SIZE, LEGACY_REQUEST_CREDIT, REQUEST_HEAD


@dataclass(frozen=True)
class ExtractedBlock:
    """Итог разбора одного блока."""

    pci_length: int     # заявленная длина данных
    appended: int       # сколько байт реально дописано в выход
    frames: int         # сколько записей съедено, включая запрос и пропущенную
    next_offset: int    # откуда продолжать сканирование


@dataclass(frozen=True)
class PayloadExtractor:
    # True — считать кадр запроса за 5 байт, как делал исходный инструмент
    legacy_count: bool = False

    def extract(self, source: FrameSource, offset: int, out: bytearray) -> ExtractedBlock:
        request = source.frame_at(offset)
        target = pci_length(request)

        head = REQUEST_HEAD.take(request)
        out.extend(head)
        appended = len(head)
        counted = LEGACY_REQUEST_CREDIT if self.legacy_count else appended

        # запись сразу после запроса данных не несёт
        cursor = offset + FRAME_SIZE
        frames = 1
        if not source.at_end(cursor):
            cursor += FRAME_SIZE
            frames += 1

        while counted < target and not source.at_end(cursor):
            chunk = CONTINUATION.take(source.frame_at(cursor))
            remaining = target - counted
            if len(chunk) > remaining:
                chunk = chunk[:remaining]
            out.extend(chunk)
            appended += len(chunk)
            counted += len(chunk)
            cursor += FRAME_SIZE
            frames += 1

        return ExtractedBlock(pci_length=target, appended=appended, frames=frames, next_offset=cursor)
