# trace/io.py
from __future__ import annotations
import asyncio
from pathlib import Path

from ..config import DEFAULT_OUT_NAME
from .reassembly import decode_with_report

# ---- Получение буфера трассы ----
def load_trace(path: Path) -> bytes:
    # ошибки файловой системы уходят вызывающему как есть
    return Path(path).read_bytes()

async def load_trace_async(path: Path) -> bytes:
    """Чтение файла вне цикла событий; разбор после этого — синхронный."""
    return await asyncio.to_thread(load_trace, path)

# ---- Выдача результата ----
def default_out_path(in_path: Path) -> Path:
    return Path(in_path).with_name(DEFAULT_OUT_NAME)

def save_image(data: bytes, out_path: Path) -> dict:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(bytes(data))
    return {"bytes": len(data), "out": str(out_path)}

# ---- Высокоуровневая операция ----
def extract_image(in_path: Path, out_path: Path | None = None, legacy_count: bool = False) -> dict:
    in_path = Path(in_path)
    report = decode_with_report(load_trace(in_path), legacy_count=legacy_count)
    result = {
        "bytes": len(report.image),
        "blocks": len(report.blocks),
        "stop": report.stop.value,
        "source": str(in_path),
        "out": None,
    }
    # пустой образ не сохраняем — сообщать об этом должен вызывающий
    if report.image:
        saved = save_image(report.image, out_path or default_out_path(in_path))
        result["out"] = saved["out"]
    return result
