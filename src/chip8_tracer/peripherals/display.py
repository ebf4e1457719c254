# chip8_tracer/peripherals/display.py
"""
Display Buffer

64x32のモノクロ論理フレームバッファを提供します。
スプライト描画はXOR合成で行い、点灯していた画素が消えた場合に衝突として報告します。
ホスト側の拡大表示やウィンドウ管理はUI層の責務です。
"""
from typing import List, Tuple

from chip8_tracer.common.errors import BoundsViolationError

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
SPRITE_WIDTH = 8

# @intent:responsibility 論理フレームバッファの保持と、画素・スプライト単位の操作を提供します。
class Display:
    """
    (x, y) で指定する行優先(row-major)の画素配列。
    """
    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT):
        self.width = width
        self.height = height
        self._pixels: List[bool] = [False] * (width * height)

    # @intent:responsibility 全ての画素を消灯します。
    def clear(self) -> None:
        self._pixels = [False] * (self.width * self.height)

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise BoundsViolationError(f"Pixel ({x}, {y}) is outside the {self.width}x{self.height} display.")
        return y * self.width + x

    def set_pixel(self, x: int, y: int, on: bool) -> None:
        self._pixels[self._offset(x, y)] = bool(on)

    def get_pixel(self, x: int, y: int) -> bool:
        return self._pixels[self._offset(x, y)]

    # @intent:responsibility 8画素幅の1行をXOR合成で描画し、衝突の有無を返します。
    # @intent:pre-condition row_byteは8bit値である必要があります。
    # @intent:rationale wrap=Falseの場合は画面外の画素を描画せずに捨てます（クリップ）。
    def draw_sprite(self, x: int, y: int, row_byte: int, wrap: bool = True) -> bool:
        """
        row_byteの最上位ビットを(x, y)に、以降のビットを右方向に描画します。
        1→0 に変化した画素が1つでもあればTrueを返します。
        """
        if not 0 <= row_byte <= 0xFF:
            raise ValueError(f"Sprite row {row_byte} is not an 8-bit value.")
        if wrap:
            y %= self.height
        elif not 0 <= y < self.height:
            return False

        collision = False
        for bit in range(SPRITE_WIDTH):
            if not row_byte & (0x80 >> bit):
                continue
            px = x + bit
            if wrap:
                px %= self.width
            elif not 0 <= px < self.width:
                continue
            offset = y * self.width + px
            if self._pixels[offset]:
                collision = True
            self._pixels[offset] = not self._pixels[offset]
        return collision

    # @intent:responsibility 描画用に、現在のフレームを読み取り専用の行タプルとして返します。
    def get_frame(self) -> Tuple[Tuple[bool, ...], ...]:
        return tuple(
            tuple(self._pixels[row * self.width:(row + 1) * self.width])
            for row in range(self.height)
        )

    def count_lit(self) -> int:
        return sum(self._pixels)
