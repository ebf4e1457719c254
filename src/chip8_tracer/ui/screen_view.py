"""
Screen View モジュール。

64x32の論理フレームバッファを、指定倍率で拡大して描画するウィジェットを提供します。
"""
from typing import Optional, Tuple

from PySide6.QtWidgets import QWidget
from PySide6.QtCore import QSize
from PySide6.QtGui import QPainter, QColor, QPaintEvent

from chip8_tracer.peripherals.display import DISPLAY_WIDTH, DISPLAY_HEIGHT

# --- 色定義 ---
COLOR_PIXEL_OFF = "#101010"
COLOR_PIXEL_ON = "#99FF99"

Frame = Tuple[Tuple[bool, ...], ...]

# @intent:responsibility フレームバッファの内容を画面に描画します。描画内容はset_frame()で受け取るだけで、Displayは参照しません。
class ScreenView(QWidget):
    def __init__(self, scale: int = 10, parent=None):
        super().__init__(parent)
        self._scale = scale
        self._frame: Optional[Frame] = None
        self.setFixedSize(self.sizeHint())

    def sizeHint(self) -> QSize:
        return QSize(DISPLAY_WIDTH * self._scale, DISPLAY_HEIGHT * self._scale)

    def set_scale(self, scale: int) -> None:
        self._scale = scale
        self.setFixedSize(self.sizeHint())
        self.update()

    # @intent:responsibility 描画するフレームを差し替え、再描画を要求します。
    def set_frame(self, frame: Frame) -> None:
        self._frame = frame
        self.update()

    def get_frame(self) -> Optional[Frame]:
        return self._frame

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(COLOR_PIXEL_OFF))
        if self._frame:
            on = QColor(COLOR_PIXEL_ON)
            for y, row in enumerate(self._frame):
                for x, lit in enumerate(row):
                    if lit:
                        painter.fillRect(x * self._scale, y * self._scale, self._scale, self._scale, on)
        painter.end()
