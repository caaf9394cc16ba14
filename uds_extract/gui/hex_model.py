# gui/hex_model.py
from __future__ import annotations
from typing import Iterable, List
from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex

BYTES_PER_ROW = 16

class ImageHexModel(QAbstractTableModel):
    """
    Просмотр собранного образа: 16 байт в строке + ASCII колонка.
    Только чтение; первые байты каждого блока 0x36 подсвечиваются.
    """
    def __init__(self, data: bytes | bytearray = b""):
        super().__init__()
        self._buf = bytes(data)
        self._block_starts: set[int] = set()

    # ---------- Публичный API ----------
    def load_image(self, data: bytes, block_lengths: Iterable[int] = ()):
        self.beginResetModel()
        self._buf = bytes(data)
        self._block_starts = set(self._starts(block_lengths))
        self.endResetModel()

    def bytes(self) -> bytes:
        return self._buf

    def is_block_start(self, offset: int) -> bool:
        return offset in self._block_starts

    @staticmethod
    def _starts(lengths: Iterable[int]) -> List[int]:
        out, pos = [], 0
        for n in lengths:
            if n > 0:
                out.append(pos)
            pos += n
        return out

    # поиск: pattern в виде bytes; ascii_mode=True — по ASCII-представлению
    def find_next(self, pattern: bytes, start: int = 0, ascii_mode: bool = False) -> int:
        if not pattern:
            return -1
        if ascii_mode:
            trans = bytes(ch if 32 <= ch <= 126 else ord('.') for ch in self._buf)
            pat = bytes(ch if 32 <= ch <= 126 else ord('.') for ch in pattern)
            return trans.find(pat, start)
        return self._buf.find(pattern, start)

    # ---------- Qt model ----------
    def rowCount(self, parent=QModelIndex()) -> int:
        if parent.isValid(): return 0
        return (len(self._buf) + BYTES_PER_ROW - 1) // BYTES_PER_ROW

    def columnCount(self, parent=QModelIndex()) -> int:
        return BYTES_PER_ROW + 1  # + ASCII колонка

    def index_to_offset(self, row: int, col: int) -> int:
        return row * BYTES_PER_ROW + col

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid(): return None
        r, c = index.row(), index.column()

        if c == BYTES_PER_ROW:
            if role == Qt.DisplayRole:
                chunk = self._buf[r * BYTES_PER_ROW:(r + 1) * BYTES_PER_ROW]
                return "".join(chr(b) if 32 <= b <= 126 else "." for b in chunk)
            return None

        i = self.index_to_offset(r, c)
        if i >= len(self._buf):
            return None

        if role == Qt.DisplayRole:
            return f"{self._buf[i]:02X}"

        if role == Qt.TextAlignmentRole:
            return Qt.AlignCenter

        if role == Qt.BackgroundRole and self.is_block_start(i):
            from PySide6.QtGui import QBrush, QColor
            return QBrush(QColor(60, 90, 140))  # начало блока

        if role == Qt.ToolTipRole and self.is_block_start(i):
            return f"Начало блока, смещение 0x{i:06X}"

        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if role != Qt.DisplayRole: return None
        if orientation == Qt.Horizontal:
            if section < BYTES_PER_ROW: return f"+{section:02X}"
            return "ASCII"
        return f"{section*BYTES_PER_ROW:06X}"

    def flags(self, index):
        if not index.isValid(): return Qt.NoItemFlags
        return Qt.ItemIsEnabled | Qt.ItemIsSelectable
