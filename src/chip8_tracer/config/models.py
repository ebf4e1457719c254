from dataclasses import dataclass, field
from typing import Optional

from chip8_tracer.common.types import KeyMap
from chip8_tracer.arch.chip8.quirks import Chip8Quirks

# @intent:constant 一般的なQWERTYキーボード配置とキーパッドの対応。
#   1 2 3 C      1 2 3 4
#   4 5 6 D  =>  Q W E R
#   7 8 9 E      A S D F
#   A 0 B F      Z X C V
DEFAULT_KEY_MAP: KeyMap = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}

@dataclass
class SystemConfig:
    rom: Optional[str] = None
    cycles_per_frame: int = 10
    frame_rate: int = 60  # 画面更新の周期。ディレイタイマは常に60Hz
    scale: int = 10
    quirks: Chip8Quirks = field(default_factory=Chip8Quirks)
    key_map: KeyMap = field(default_factory=lambda: dict(DEFAULT_KEY_MAP))
