# trace/classify.py
from __future__ import annotations
import enum

from .layout import (
    ACK_MIN_LEN, BSC_OFF, PCI_HIGH_OFF, PCI_LOW_OFF, REQUEST_MIN_LEN,
    SID_OFF, SID_TRANSFER_DATA, SID_TRANSFER_DATA_POSITIVE,
)


class FrameKind(enum.Enum):
    TRANSFER_REQUEST = "request"
    TRANSFER_ACK = "ack"
    OTHER = "other"


def is_transfer_request(frame: bytes) -> bool:
    # нужны байты 9..12: длина + SID + счётчик
    return len(frame) >= REQUEST_MIN_LEN and frame[SID_OFF] == SID_TRANSFER_DATA


def is_transfer_ack(frame: bytes, expected_counter: int | None) -> bool:
    if expected_counter is None or len(frame) < ACK_MIN_LEN:
        return False
    return frame[PCI_LOW_OFF] == SID_TRANSFER_DATA_POSITIVE and frame[SID_OFF] == expected_counter


def pci_length(frame: bytes) -> int:
    """Длина данных вызова 0x36 из PCI: ((b9 & 0x0F) << 8 | b10) - 1."""
    return (((frame[PCI_HIGH_OFF] & 0x0F) << 8) | frame[PCI_LOW_OFF]) - 1


def block_counter(frame: bytes) -> int:
    return frame[BSC_OFF]


def classify(frame: bytes, expected_counter: int | None = None) -> FrameKind:
    if is_transfer_request(frame):
        return FrameKind.TRANSFER_REQUEST
    if expected_counter is None:
        # без ожидаемого счётчика подтверждение узнаём только по SID 0x76
        if len(frame) >= ACK_MIN_LEN and frame[PCI_LOW_OFF] == SID_TRANSFER_DATA_POSITIVE:
            return FrameKind.TRANSFER_ACK
        return FrameKind.OTHER
    if is_transfer_ack(frame, expected_counter):
        return FrameKind.TRANSFER_ACK
    return FrameKind.OTHER
