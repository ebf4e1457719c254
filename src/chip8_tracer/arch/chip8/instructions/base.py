# src/chip8_tracer/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通ユーティリティ。
"""
from dataclasses import dataclass, field
from typing import List

from chip8_tracer.core.snapshot import Operation
from chip8_tracer.peripherals.display import Display
from chip8_tracer.peripherals.keypad import Keypad
from chip8_tracer.arch.chip8.quirks import Chip8Quirks

# @intent:data_structure 実行関数が参照する周辺機器と互換性設定の束。
# @intent:rationale CPUは周辺機器を所有せず参照するだけなので、所有者（Machine）から渡された参照をまとめて受け渡します。
@dataclass
class Peripherals:
    display: Display
    keypad: Keypad
    quirks: Chip8Quirks = field(default_factory=Chip8Quirks)

# @intent:utility_function 命令語からディスパッチテーブルのキーを求めます。
# @intent:rationale 先頭ニブルで命令群を選び、群内で曖昧な場合のみ下位ニブル（8群）・下位バイト（E/F群）・
#                  命令語全体（0群）を加えます。新しい命令はテーブルへの追加だけで実装できます。
def dispatch_key(word: int) -> int:
    group = word & 0xF000
    if group == 0x0000:
        return word
    if group == 0x8000:
        return group | (word & 0x000F)
    if group in (0xE000, 0xF000):
        return group | (word & 0x00FF)
    return group

# @intent:utility_function 命令語から全てのオペランド表現を取り出し、Operationを生成します。
def make_operation(word: int, mnemonic: str, operands: List[str]) -> Operation:
    return Operation(
        opcode_hex=f"{word:04X}",
        mnemonic=mnemonic,
        operands=operands,
        pattern=dispatch_key(word),
        word=word,
        x=(word >> 8) & 0xF,
        y=(word >> 4) & 0xF,
        n=word & 0xF,
        kk=word & 0xFF,
        nnn=word & 0xFFF,
    )

# @intent:utility_function オペランドの表示形式。
def reg(index: int) -> str:
    return f"V{index:X}"

def imm(value: int) -> str:
    return f"#${value:02X}"

def addr(value: int) -> str:
    return f"${value:03X}"
