# chip8_tracer/peripherals/keypad.py
"""
Keypad

16キーの16進キーパッドの押下状態を保持します。
配列は以下の物理配置に対応します。

    1  2  3  C
    4  5  6  D
    7  8  9  E
    A  0  B  F

ホストのキーとの対応付けはUI層（Config）の責務です。
"""
from typing import List, Optional

from chip8_tracer.common.errors import BoundsViolationError

KEY_COUNT = 16

# @intent:responsibility キーのレベル状態を保持します。デバウンスやエッジ検出は行いません。
class Keypad:
    def __init__(self):
        self._keys: List[bool] = [False] * KEY_COUNT

    def reset(self) -> None:
        """
        全てのキーを離された状態に戻します。
        """
        self._keys = [False] * KEY_COUNT

    def _check(self, index: int) -> None:
        if not 0 <= index < KEY_COUNT:
            raise BoundsViolationError(f"Key index {index} is outside 0x0-0xF.")

    # @intent:responsibility キー状態を更新する唯一の手段です。UI層から呼ばれます。
    def set_key(self, index: int, pressed: bool) -> None:
        self._check(index)
        self._keys[index] = bool(pressed)

    def is_pressed(self, index: int) -> bool:
        """
        キーindexが押されているかを返します。0x0-0xF以外はBoundsViolationErrorです。
        """
        self._check(index)
        return self._keys[index]

    # @intent:responsibility 0x0から順に走査し、最初に押されているキーの番号を返します。
    def first_pressed(self) -> Optional[int]:
        for index, pressed in enumerate(self._keys):
            if pressed:
                return index
        return None

    def get_pressed_keys(self) -> List[int]:
        """
        押されている全てのキーの番号を昇順で返します。
        """
        return [index for index, pressed in enumerate(self._keys) if pressed]
