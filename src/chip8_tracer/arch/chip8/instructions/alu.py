# src/chip8_tracer/arch/chip8/instructions/alu.py
"""
算術命令の実装。
"""
from chip8_tracer.core.cpu import PcControl
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.bus import Bus
from chip8_tracer.common.errors import BoundsViolationError
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import Peripherals, make_operation, reg, imm

# --- 7xkk ADD Vx, byte ---
# @intent:responsibility ADD Vx, byte 命令をデコードします。
def decode_add_byte(word: int) -> Operation:
    return make_operation(word, "ADD", [reg((word >> 8) & 0xF), imm(word & 0xFF)])

# @intent:responsibility Vx = Vx + kk (mod 256) を実行します。
# @intent:rationale この命令はキャリーを定義しないため、VFは変更しません。
def execute_add_byte(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> PcControl:
    state.write_v(op.x, (state.read_v(op.x) + op.kk) & 0xFF)
    return PcControl.ADVANCE

# --- Fx1E ADD I, Vx ---
# @intent:responsibility ADD I, Vx 命令をデコードします。
def decode_add_index(word: int) -> Operation:
    return make_operation(word, "ADD", ["I", reg((word >> 8) & 0xF)])

# @intent:responsibility I = I + Vx を実行します。
# @intent:rationale メモリサイズでのマスクはしません。範囲外のIは、次にメモリを参照する命令で検出されます。
#                  16bitレジスタに収まらない結果だけはここで報告します。
def execute_add_index(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> PcControl:
    result = state.i + state.read_v(op.x)
    if result > 0xFFFF:
        raise BoundsViolationError(f"Index register overflow: {result:#x} does not fit in 16 bits.", result)
    state.i = result
    return PcControl.ADVANCE
