from __future__ import annotations

from uds_extract.trace.frames import FrameSource
from uds_extract.trace.payload import PayloadExtractor


def _run(buf: bytes, legacy: bool = False):
    out = bytearray()
    res = PayloadExtractor(legacy_count=legacy).extract(FrameSource(buf), 0, out)
    return bytes(out), res


def test_padding_after_declared_length_is_dropped(trace):
    # 4 байта в запросе + 7 + 2, остальное — заполнитель
    buf = trace.request(1, 14).data(b"\x01\x02\x03\x04\x05\x06\x07").data(b"\x08\x09").build()
    out, res = _run(buf)
    assert out == b"\xAA\xBB\xCC\xDD" + bytes(range(1, 10))
    assert res.pci_length == 13
    assert res.appended == 13
    assert res.frames == 4
    assert res.next_offset == 4 * 17


def test_frame_after_request_carries_no_payload(trace):
    buf = trace.request(1, 6).data(b"\xEE").build()
    out, res = _run(buf)
    assert out == b"\xAA\xBB\xCC\xDD\xEE"
    assert res.frames == 3


def test_stops_consuming_once_length_reached(trace):
    buf = trace.request(1, 12).data(b"\x01" * 7).data(b"\x02" * 7).build()
    out, res = _run(buf)
    assert len(out) == 11
    assert res.next_offset == 3 * 17


def test_short_block_keeps_head_and_skips_one_frame(trace):
    buf = trace.request(1, 3).data(b"\x01" * 7).build()
    out, res = _run(buf)
    assert out == b"\xAA\xBB\xCC\xDD"
    assert res.frames == 2
    assert res.next_offset == 2 * 17


def test_legacy_count_credits_five_bytes(trace):
    buf = trace.request(1, 10).data(b"\x01\x02\x03\x04\x05\x06\x07").build()
    out, res = _run(buf, legacy=True)
    # 9 заявлено, 5 «засчитано» за запрос -> из продолжения берётся только 4
    assert out == b"\xAA\xBB\xCC\xDD\x01\x02\x03\x04"
    assert res.appended == 8


def test_end_of_buffer_mid_block(trace):
    buf = trace.request(1, 30).data(b"\x01" * 7).build()
    out, res = _run(buf)
    assert out == b"\xAA\xBB\xCC\xDD" + b"\x01" * 7
    assert res.next_offset == len(buf)


def test_truncated_continuation_frame(trace):
    buf = trace.request(1, 20).data(b"\x01\x02\x03\x04\x05\x06\x07").build()[:-4]
    out, _ = _run(buf)
    assert out == b"\xAA\xBB\xCC\xDD\x01\x02\x03"
