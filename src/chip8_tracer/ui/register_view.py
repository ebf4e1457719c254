"""
レジスタ表示ウィジェット。
CPUが返すレイアウト定義（グループ名、レジスタ名、ビット幅）から、値ラベルの格子を組み立てます。
"""
from typing import Dict, Optional
from PySide6.QtWidgets import QWidget, QVBoxLayout, QGridLayout, QLabel, QGroupBox
from PySide6.QtGui import QFontDatabase
from PySide6.QtCore import Qt

from chip8_tracer.core.cpu import AbstractCpu

# @intent:constant 1行に並べるレジスタ数。V0-VFは4x4で表示されます。
COLUMNS = 4

# @intent:responsibility レジスタ値を16進で表示します。値の取得はupdate_registers()の呼び出し時だけ行います。
class RegisterView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setStyleSheet("background-color: #121212; color: #BBBBBB;")

        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(4, 4, 4, 4)

        self._fixed_font = QFontDatabase.systemFont(QFontDatabase.FixedFont).family()
        self._labels: Dict[str, QLabel] = {}
        self._digits: Dict[str, int] = {}
        self._cpu: Optional[AbstractCpu] = None

    def set_cpu(self, cpu: AbstractCpu) -> None:
        self._cpu = cpu
        self._build()

    def _build(self):
        while self._layout.count():
            item = self._layout.takeAt(0)
            if item.widget():
                item.widget().deleteLater()
        self._labels.clear()
        self._digits.clear()

        for group in self._cpu.get_register_layout():
            box = QGroupBox(group.group_name)
            box.setStyleSheet("QGroupBox { font-weight: bold; color: #EEE; } "
                              "QGroupBox::title { color: #00AAAA; }")
            grid = QGridLayout(box)
            grid.setContentsMargins(10, 15, 10, 10)

            for index, reg in enumerate(group.registers):
                digits = (reg.width + 3) // 4
                value = QLabel("0" * digits)
                value.setStyleSheet(f"font-family: '{self._fixed_font}', monospace; color: #FFD700;")
                value.setAlignment(Qt.AlignRight)

                row, col = divmod(index, COLUMNS)
                grid.addWidget(QLabel(f"{reg.name}:"), row, col * 2)
                grid.addWidget(value, row, col * 2 + 1)
                self._labels[reg.name] = value
                self._digits[reg.name] = digits

            self._layout.addWidget(box)

        self._layout.addStretch()

    def update_registers(self):
        if not self._cpu:
            return
        for name, value in self._cpu.get_register_map().items():
            label = self._labels.get(name)
            if label is not None:
                label.setText(f"{value:0{self._digits[name]}X}")

    def get_register_text(self, name: str) -> str:
        return self._labels[name].text()
