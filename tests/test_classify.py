from __future__ import annotations

from conftest import frame

from uds_extract.trace.classify import (
    FrameKind, block_counter, classify, is_transfer_ack, is_transfer_request, pci_length,
)


def test_request_detected_by_service_byte():
    f = frame(b9=0x10, b10=0x06, b11=0x36, b12=0x01)
    assert is_transfer_request(f)
    assert block_counter(f) == 0x01
    assert classify(f) is FrameKind.TRANSFER_REQUEST


def test_request_needs_counter_byte():
    f = frame(b11=0x36)[:12]
    assert not is_transfer_request(f)
    assert classify(f) is FrameKind.OTHER


def test_pci_length_uses_low_nibble_only():
    assert pci_length(frame(b9=0x00, b10=0x06)) == 5
    assert pci_length(frame(b9=0xF1, b10=0x02)) == 0x101
    assert pci_length(frame(b9=0x10, b10=0x00)) == -1


def test_ack_matches_counter():
    f = frame(b10=0x76, b11=0x07)
    assert is_transfer_ack(f, 0x07)
    assert not is_transfer_ack(f, 0x08)
    assert not is_transfer_ack(f, None)
    assert classify(f, 0x07) is FrameKind.TRANSFER_ACK
    assert classify(f, 0x08) is FrameKind.OTHER


def test_ack_on_short_frame_is_false():
    assert not is_transfer_ack(frame(b10=0x76, b11=0x07)[:11], 0x07)


def test_classify_without_counter_uses_response_sid():
    assert classify(frame(b10=0x76, b11=0x42)) is FrameKind.TRANSFER_ACK
    assert classify(frame(b11=0x22)) is FrameKind.OTHER
