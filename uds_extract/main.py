from __future__ import annotations
from pathlib import Path

import typer
from rich import print
from rich.table import Table

from .config import APP_NAME
from .session_log import log_event
from .trace.classify import classify
from .trace.frames import FrameSource
from .trace.io import load_trace, extract_image
from .trace.layout import FRAME_SIZE
from .trace.reassembly import decode_with_report

app = typer.Typer(add_completion=False, help=f"{APP_NAME}: сборка образа памяти ЭБУ из лога UDS TransferData (0x36).")

NOTHING_FOUND = "Подходящих блоков 0x36 не найдено, записывать нечего."

def _read_or_exit(trace: Path) -> bytes:
    try:
        return load_trace(trace)
    except OSError as e:
        print(f"[red]Не удалось прочитать трассу:[/] {trace} ({e.strerror or e})")
        raise typer.Exit(code=2)

@app.command()
def extract(
    trace: Path = typer.Argument(..., help="Файл лога шины (записи по 17 байт)"),
    out_file: Path = typer.Argument(None, help="Куда сохранить образ (по умолчанию outputFile.bin рядом с трассой)"),
    legacy_count: bool = typer.Option(False, "--legacy-count", help="Считать кадр запроса за 5 байт, как исходный инструмент"),
):
    """Собрать образ из трассы и сохранить в .bin."""
    if not trace.is_file():
        print(f"[red]Файл не найден:[/] {trace}")
        raise typer.Exit(code=2)

    try:
        result = extract_image(trace, out_file, legacy_count=legacy_count)
    except OSError as e:
        print(f"[red]Ошибка ввода-вывода:[/] {e.filename or trace} ({e.strerror or e})")
        log_event("extract_error", {"source": str(trace), "out": str(out_file) if out_file else None, "error": str(e)})
        raise typer.Exit(code=2)
    log_event("extract", result)

    if not result["out"]:
        print(f"[yellow]{NOTHING_FOUND}[/]")
        raise typer.Exit(code=1)
    print(f"[green]Готово:[/] {result['bytes']} байт из {result['blocks']} блоков -> {result['out']}")

@app.command()
def blocks(
    trace: Path = typer.Argument(..., help="Файл лога шины"),
    legacy_count: bool = typer.Option(False, "--legacy-count", help="Считать кадр запроса за 5 байт"),
):
    """Показать принятые блоки TransferData и причину остановки."""
    report = decode_with_report(_read_or_exit(trace), legacy_count=legacy_count)

    table = Table(title=f"{trace.name}: {len(report.blocks)} блоков, {len(report.image)} байт")
    for col in ("BSC", "Смещение", "PCI", "Данные", "Записей", "Ответ 0x76"):
        table.add_column(col)
    for b in report.blocks:
        table.add_row(
            f"{b.counter:02X}", f"0x{b.offset:06X}", str(b.pci_length),
            str(b.data_length), str(b.frames), "да" if b.acked else "[red]нет[/]",
        )
    print(table)
    print(f"[dim]Остановка:[/] {report.stop.value}, записей в трассе: {report.frames_total}")

    log_event("blocks", {
        "source": str(trace),
        "blocks": len(report.blocks),
        "acked": report.acked_blocks,
        "bytes": len(report.image),
        "stop": report.stop.value,
    })

@app.command()
def frames(
    trace: Path = typer.Argument(..., help="Файл лога шины"),
    start: int = typer.Option(0, min=0, help="С какой записи начать"),
    limit: int = typer.Option(32, min=1, help="Сколько записей показать"),
):
    """Вывести записи трассы в HEX с классификацией."""
    source = FrameSource(_read_or_exit(trace))
    shown = 0
    for offset, frame in source.frames(start * FRAME_SIZE):
        if shown >= limit:
            break
        kind = classify(frame)
        color = {"request": "cyan", "ack": "green"}.get(kind.value, "dim")
        print(f"[{color}]{offset // FRAME_SIZE:6d} 0x{offset:06X}  {frame.hex(' ').upper():<50} {kind.value}[/]")
        shown += 1

    log_event("frames", {"source": str(trace), "start": start, "shown": shown})


if __name__ == "__main__":
    app()
