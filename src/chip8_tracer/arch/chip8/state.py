# src/chip8_tracer/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。
"""
from dataclasses import dataclass, field
from typing import List

from chip8_tracer.core.state import CpuState
from chip8_tracer.transport.bus import PROGRAM_ORIGIN
from chip8_tracer.common.errors import BoundsViolationError, StackOverflowError, StackUnderflowError

# @intent:constant CHIP-8のレジスタ数、スタック段数、フラグレジスタ番号。
REGISTER_COUNT = 16
STACK_DEPTH = 16
FLAG_REGISTER = 0xF

# @intent:responsibility CHIP-8の全てのレジスタ（V0-VF, I, PC, SP, スタック, DT）の状態を保持します。
# @intent:rationale 幅の変換（8bit/16bit）やインデックス指定は全てここで範囲チェックし、
#                  暗黙の切り詰めやラップアラウンドを起こさないようにします。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUのレジスタ状態を保持するデータクラス。
    spは次に書き込むスタックスロットの番号(0-16)です。
    """
    pc: int = PROGRAM_ORIGIN
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    i: int = 0x0000    # Index Register
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    dt: int = 0x00     # Delay Timer

    # @intent:accessor 汎用レジスタへの範囲チェック付きアクセスを提供します。
    def read_v(self, index: int) -> int:
        if not 0 <= index < REGISTER_COUNT:
            raise BoundsViolationError(f"Register index {index} is outside V0-VF.")
        return self.v[index]

    def write_v(self, index: int, value: int) -> None:
        if not 0 <= index < REGISTER_COUNT:
            raise BoundsViolationError(f"Register index {index} is outside V0-VF.")
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Value {value} is not an 8-bit value.")
        self.v[index] = value

    @property
    def flag_vf(self) -> bool:
        return self.v[FLAG_REGISTER] != 0

    @flag_vf.setter
    def flag_vf(self, value: bool) -> None:
        self.v[FLAG_REGISTER] = 1 if value else 0

    # @intent:responsibility 戻りアドレスをスタックに積みます。
    # @intent:pre-condition sp < STACK_DEPTH。満杯の場合は何も変更せずにStackOverflowErrorを送出します。
    def push(self, address: int) -> None:
        if self.sp >= STACK_DEPTH:
            raise StackOverflowError(f"Call stack overflow: {STACK_DEPTH} nested calls already active (PC={self.pc:#06x}).")
        if not 0 <= address <= 0xFFFF:
            raise ValueError(f"Return address {address} is not a 16-bit value.")
        self.stack[self.sp] = address
        self.sp += 1

    # @intent:pre-condition sp > 0。空の場合は何も変更せずにStackUnderflowErrorを送出します。
    def pop(self) -> int:
        if self.sp <= 0:
            raise StackUnderflowError(f"Return with empty call stack (PC={self.pc:#06x}).")
        self.sp -= 1
        return self.stack[self.sp]

