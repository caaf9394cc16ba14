# session_log.py
from __future__ import annotations
import json
from datetime import datetime, timezone

from .config import LOG_FILE

def log_event(kind: str, payload: dict):
    """Дописать событие в журнал сессии (JSON lines)."""
    LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    record = {
        "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "kind": kind,
        "payload": payload,
    }
    with open(LOG_FILE, "a", encoding="utf-8") as f:
        f.write(json.dumps(record, ensure_ascii=False) + "\n")
