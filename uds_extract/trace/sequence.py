# trace/sequence.py
from __future__ import annotations
from dataclasses import dataclass


@dataclass
class SequenceValidator:
    """
    Строгая непрерывность BlockSequenceCounter: первый блок принимается любой,
    дальше только last + 1. Переход 0xFF -> 0x00 не поддерживается.
    """
    last_accepted: int | None = None

    def accept(self, candidate: int) -> bool:
        if self.last_accepted is None or candidate == self.last_accepted + 1:
            self.last_accepted = candidate
            return True
        return False
