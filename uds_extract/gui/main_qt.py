# gui/main_qt.py
from __future__ import annotations
import zlib, sys
from pathlib import Path

from PySide6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QPushButton,
    QLabel, QFileDialog, QCheckBox, QMessageBox, QLineEdit, QGroupBox, QSplitter,
    QTextEdit, QTableView,
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QFontDatabase, QPalette, QColor

from ..config import APP_NAME, DEFAULT_OUT_NAME
from ..session_log import log_event
from ..trace.io import load_trace, save_image
from ..trace.reassembly import DecodeReport, decode_with_report
from .hex_model import ImageHexModel, BYTES_PER_ROW

# ---------- тема ----------
DARK = {
    QPalette.Window: (30, 32, 36),
    QPalette.Base: (30, 30, 30),
    QPalette.AlternateBase: (42, 44, 48),
    QPalette.Button: (45, 45, 45),
    QPalette.Highlight: (77, 163, 255),
}
TEXT_ROLES = (QPalette.WindowText, QPalette.Text, QPalette.ButtonText, QPalette.HighlightedText)

def setup_theme(app):
    app.setStyle("Fusion")
    pal = QPalette()
    for role, rgb in DARK.items():
        pal.setColor(role, QColor(*rgb))
    for role in TEXT_ROLES:
        pal.setColor(role, QColor(220, 220, 220))
    app.setPalette(pal)
    # остальное тянет стиль Fusion из палитры
    app.setStyleSheet("QTextEdit,QLineEdit{background:#1e2024;}")

# ---------- MainWindow ----------
class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle(APP_NAME)
        self.resize(1100, 760)
        self.trace_path: Path | None = None
        self.report: DecodeReport | None = None

        w = QWidget(); root = QVBoxLayout(w)

        # верх: трасса и сохранение
        grp_src = QGroupBox("Трасса")
        lays = QHBoxLayout(grp_src)
        self.btn_open = QPushButton("Открыть трассу…")
        self.btn_save = QPushButton("Сохранить образ как…")
        self.chk_legacy = QCheckBox("Счёт 5 байт на запрос")
        self.chk_legacy.setToolTip("Учёт длины как в исходном инструменте: кадр запроса засчитывается за 5 байт")
        self.lbl_info = QLabel("Образ: —")
        for wdg in (self.btn_open, self.btn_save, self.chk_legacy):
            lays.addWidget(wdg)
        lays.addWidget(self.lbl_info, 1)

        # поиск и переход
        controls = QHBoxLayout()
        self.ed_find = QLineEdit(); self.ed_find.setPlaceholderText("Поиск HEX ('DE AD BE EF') или ASCII")
        self.chk_ascii = QCheckBox("ASCII")
        btn_find = QPushButton("Найти")
        self.ed_goto = QLineEdit(); self.ed_goto.setPlaceholderText("Перейти к смещению (hex)")
        btn_goto = QPushButton("Перейти")
        for wdg in (self.ed_find, self.chk_ascii, btn_find, self.ed_goto, btn_goto):
            controls.addWidget(wdg)

        # таблица + лог
        self.table = QTableView()
        self.model = ImageHexModel(b"")
        self.table.setModel(self.model)
        fixed = QFontDatabase.systemFont(QFontDatabase.FixedFont); fixed.setPointSize(12)
        self.table.setFont(fixed)
        self.table.verticalHeader().setDefaultSectionSize(22)
        self.table.horizontalHeader().setDefaultAlignment(Qt.AlignCenter)
        self.table.setAlternatingRowColors(True)
        self.table.setCornerButtonEnabled(False)

        self.log = QTextEdit(); self.log.setReadOnly(True)
        split = QSplitter(Qt.Vertical)
        split.addWidget(self.table); split.addWidget(self.log)
        split.setStretchFactor(0, 3); split.setStretchFactor(1, 1)

        root.addWidget(grp_src)
        root.addLayout(controls)
        root.addWidget(split, 1)
        self.setCentralWidget(w)
        self.statusBar()

        self.btn_open.clicked.connect(self._open_trace)
        self.btn_save.clicked.connect(self._save_as)
        self.chk_legacy.stateChanged.connect(lambda *_: self._redecode())
        btn_find.clicked.connect(self._find)
        btn_goto.clicked.connect(self._goto)

    # ---------- utils ----------
    def _log(self, html: str):
        self.log.append(html)
        self.statusBar().showMessage(self._strip(html), 3000)

    @staticmethod
    def _strip(html: str) -> str:
        import re
        return re.sub("<[^<]+?>", "", html)

    # ---------- actions ----------
    def _open_trace(self):
        p, _ = QFileDialog.getOpenFileName(self, "Открыть трассу", "", "Все файлы (*)")
        if not p: return
        self.trace_path = Path(p)
        if self._redecode():
            # как в исходном инструменте: сразу предлагаем сохранить результат
            self._save_as()

    def _redecode(self) -> bool:
        if self.trace_path is None:
            return False
        try:
            buf = load_trace(self.trace_path)
        except OSError as e:
            QMessageBox.critical(self, "Трасса", str(e)); return False

        self.report = decode_with_report(buf, legacy_count=self.chk_legacy.isChecked())
        rep = self.report
        self.model.load_image(rep.image, [b.data_length for b in rep.blocks])
        self._update_info()
        log_event("gui_decode", {
            "source": str(self.trace_path), "bytes": len(rep.image),
            "blocks": len(rep.blocks), "stop": rep.stop.value,
        })

        if not rep.image:
            self._log(f"<b style='color:#d7ba7d'>{self.trace_path.name}: подходящих блоков 0x36 не найдено.</b>")
            QMessageBox.warning(self, "Нет данных", "Подходящих блоков 0x36 не найдено, записывать нечего.")
            return False

        rows = "<br>".join(
            f"BSC {b.counter:02X} @0x{b.offset:06X}: PCI {b.pci_length}, данных {b.data_length}"
            + ("" if b.acked else " <span style='color:#d7ba7d'>(без ответа 0x76)</span>")
            for b in rep.blocks
        )
        self._log(f"<b>{self.trace_path.name}:</b> {len(rep.image)} байт, {len(rep.blocks)} блоков, "
                  f"остановка: {rep.stop.value}<br>{rows}")
        return True

    def _save_as(self):
        if not self.model.bytes():
            QMessageBox.warning(self, "Нет данных", "Сначала открой трассу с блоками 0x36."); return
        start = str(self.trace_path.with_name(DEFAULT_OUT_NAME)) if self.trace_path else DEFAULT_OUT_NAME
        p, _ = QFileDialog.getSaveFileName(self, "Сохранить образ", start, "BIN (*.bin)")
        if not p: return
        try:
            result = save_image(self.model.bytes(), Path(p))
        except OSError as e:
            QMessageBox.critical(self, "Сохранение", str(e)); return
        log_event("gui_save", result)
        self._log(f"Сохранено: <b>{result['out']}</b> ({result['bytes']} байт)")

    def _find(self):
        text = self.ed_find.text().strip()
        if not text: return
        if self.chk_ascii.isChecked():
            pat = text.encode("utf-8", "ignore")
        else:
            hexstr = text.replace(" ", "").replace("0x", "").replace("0X", "")
            try: pat = bytes.fromhex(hexstr)
            except ValueError:
                QMessageBox.warning(self, "HEX", "Неверная HEX-строка."); return
        idx = self.model.find_next(pat, start=0, ascii_mode=self.chk_ascii.isChecked())
        if idx < 0: QMessageBox.information(self, "Поиск", "Не найдено."); return
        self._select_offset(idx)

    def _goto(self):
        s = self.ed_goto.text().strip().lower().replace("0x", "")
        if not s: return
        try: off = int(s, 16)
        except ValueError: QMessageBox.warning(self, "Смещение", "Введи смещение в HEX."); return
        self._select_offset(off)

    def _select_offset(self, off: int):
        row, col = divmod(off, BYTES_PER_ROW)
        idx = self.model.index(row, col)
        self.table.setCurrentIndex(idx)
        self.table.scrollTo(idx, QTableView.ScrollHint.PositionAtCenter)

    def _update_info(self):
        buf = self.model.bytes()
        crc = zlib.crc32(buf) & 0xFFFFFFFF
        self.lbl_info.setText(f"Образ: {len(buf)} bytes | CRC32: 0x{crc:08X}")

# ---------- entry ----------
def main():
    app = QApplication(sys.argv)
    setup_theme(app)
    win = MainWindow()
    win.show()
    sys.exit(app.exec())

if __name__ == "__main__":
    main()
