from __future__ import annotations

import asyncio

import pytest

from uds_extract.trace.io import (
    default_out_path, extract_image, load_trace, load_trace_async, save_image,
)


def test_load_trace_reads_whole_file(tmp_path, trace):
    buf = trace.block(1, b"\x01" * 10).build()
    p = tmp_path / "can.bin"
    p.write_bytes(buf)
    assert load_trace(p) == buf
    assert asyncio.run(load_trace_async(p)) == buf


def test_load_trace_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_trace(tmp_path / "nope.bin")


def test_save_image_creates_dirs(tmp_path):
    out = tmp_path / "a" / "b" / "img.bin"
    result = save_image(b"\x01\x02", out)
    assert out.read_bytes() == b"\x01\x02"
    assert result == {"bytes": 2, "out": str(out)}


def test_extract_image_default_output(tmp_path, trace):
    p = tmp_path / "session.log"
    p.write_bytes(trace.block(1, b"\x07" * 12).block(2, b"\x08" * 5).build())
    result = extract_image(p)
    assert result["out"] == str(tmp_path / "outputFile.bin")
    assert result["bytes"] == 17
    assert result["blocks"] == 2
    assert result["stop"] == "no_request"
    assert default_out_path(p).read_bytes() == b"\x07" * 12 + b"\x08" * 5


def test_extract_image_writes_nothing_when_empty(tmp_path, trace):
    p = tmp_path / "session.log"
    p.write_bytes(trace.other(5).build())
    result = extract_image(p, tmp_path / "out.bin")
    assert result["out"] is None
    assert result["bytes"] == 0
    assert not (tmp_path / "out.bin").exists()
