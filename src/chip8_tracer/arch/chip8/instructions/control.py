# src/chip8_tracer/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。
"""
from chip8_tracer.core.cpu import PcControl
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import Peripherals, make_operation, reg, imm, addr

# --- 00EE RET ---
# @intent:responsibility RET (Return from Subroutine) 命令をデコードします。
def decode_ret(word: int) -> Operation:
    return make_operation(word, "RET", [])

# @intent:responsibility RET命令を実行し、スタックから戻りアドレスをポップします。
# @intent:rationale 既定ではCALL時にCALL自身のアドレスを積んでいるため、ポップ後に+2してCALLの次の命令へ戻ります。
def execute_ret(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> PcControl:
    return_addr = state.pop()
    if io.quirks.call_pushes_return:
        state.pc = return_addr
    else:
        state.pc = (return_addr + op.length) & 0xFFFF
    return PcControl.JUMP

# --- 1nnn JP ---
# @intent:responsibility JP addr 命令をデコードします。
def decode_jp(word: int) -> Operation:
    return make_operation(word, "JP", [addr(word & 0xFFF)])

# @intent:responsibility PCをnnnに設定します。
def execute_jp(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> PcControl:
    state.pc = op.nnn
    return PcControl.JUMP

# --- 2nnn CALL ---
# @intent:responsibility CALL addr 命令をデコードします。
def decode_call(word: int) -> Operation:
    return make_operation(word, "CALL", [addr(word & 0xFFF)])

# @intent:responsibility CALL命令を実行し、戻り情報をプッシュしてからジャンプします。
# @intent:pre-condition スタックが満杯の場合、push()がStackOverflowErrorを送出し、PCは変更されません。
def execute_call(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> PcControl:
    if io.quirks.call_pushes_return:
        state.push((state.pc + op.length) & 0xFFFF)
    else:
        state.push(state.pc)
    state.pc = op.nnn
    return PcControl.JUMP

# --- 3xkk SE ---
# @intent:responsibility SE Vx, byte 命令をデコードします。
def decode_se_byte(word: int) -> Operation:
    return make_operation(word, "SE", [reg((word >> 8) & 0xF), imm(word & 0xFF)])

# @intent:responsibility Vx == kk の場合に次の命令をスキップします。
def execute_se_byte(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> PcControl:
    if state.read_v(op.x) == op.kk:
        return PcControl.SKIP
    return PcControl.ADVANCE

# --- 4xkk SNE ---
# @intent:responsibility SNE Vx, byte 命令をデコードします。
def decode_sne_byte(word: int) -> Operation:
    return make_operation(word, "SNE", [reg((word >> 8) & 0xF), imm(word & 0xFF)])

# @intent:responsibility Vx != kk の場合に次の命令をスキップします。
def execute_sne_byte(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> PcControl:
    if state.read_v(op.x) != op.kk:
        return PcControl.SKIP
    return PcControl.ADVANCE
