# src/chip8_tracer/arch/chip8/instructions/load.py
"""
転送命令（レジスタ、インデックス、タイマへのロード）の実装。
"""
from chip8_tracer.core.cpu import PcControl
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import Peripherals, make_operation, reg, imm, addr

# --- 6xkk LD Vx, byte ---
# @intent:responsibility LD Vx, byte 命令をデコードします。
def decode_ld_byte(word: int) -> Operation:
    return make_operation(word, "LD", [reg((word >> 8) & 0xF), imm(word & 0xFF)])

# @intent:responsibility Vxに即値kkを格納します。
def execute_ld_byte(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> PcControl:
    state.write_v(op.x, op.kk)
    return PcControl.ADVANCE

# --- 8xy0 LD Vx, Vy ---
# @intent:responsibility LD Vx, Vy 命令をデコードします。
def decode_ld_reg(word: int) -> Operation:
    return make_operation(word, "LD", [reg((word >> 8) & 0xF), reg((word >> 4) & 0xF)])

# @intent:responsibility VyをVxにコピーします。
def execute_ld_reg(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> PcControl:
    state.write_v(op.x, state.read_v(op.y))
    return PcControl.ADVANCE

# --- Annn LD I, addr ---
# @intent:responsibility LD I, addr 命令をデコードします。
def decode_ld_index(word: int) -> Operation:
    return make_operation(word, "LD", ["I", addr(word & 0xFFF)])

# @intent:responsibility インデックスレジスタIに12bitアドレスnnnを格納します。
def execute_ld_index(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> PcControl:
    state.i = op.nnn
    return PcControl.ADVANCE

# --- Fx15 LD DT, Vx ---
# @intent:responsibility LD DT, Vx 命令をデコードします。
def decode_ld_dt(word: int) -> Operation:
    return make_operation(word, "LD", ["DT", reg((word >> 8) & 0xF)])

# @intent:responsibility ディレイタイマにVxを設定します。他の非分岐命令と同様にPCを進めます。
def execute_ld_dt(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> PcControl:
    state.dt = state.read_v(op.x)
    return PcControl.ADVANCE
