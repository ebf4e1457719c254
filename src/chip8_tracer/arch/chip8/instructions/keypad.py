# src/chip8_tracer/arch/chip8/instructions/keypad.py
"""
キーパッド命令の実装。
"""
from chip8_tracer.core.cpu import PcControl
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import Peripherals, make_operation, reg

# --- ExA1 SKNP Vx ---
# @intent:responsibility SKNP Vx 命令をデコードします。
def decode_sknp(word: int) -> Operation:
    return make_operation(word, "SKNP", [reg((word >> 8) & 0xF)])

# @intent:responsibility キーVxが押されていない場合に次の命令をスキップします。
# @intent:pre-condition Vxは0x0-0xFのキー番号である必要があります。それ以外はBoundsViolationErrorになります。
def execute_sknp(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> PcControl:
    if not io.keypad.is_pressed(state.read_v(op.x)):
        return PcControl.SKIP
    return PcControl.ADVANCE

# --- Fx0A LD Vx, K ---
# @intent:responsibility LD Vx, K 命令をデコードします。
def decode_ld_key(word: int) -> Operation:
    return make_operation(word, "LD", [reg((word >> 8) & 0xF), "K"])

# @intent:responsibility 押されているキーの番号をVxに格納します。
# @intent:rationale キーが押されていない場合はPCを進めず、次のstep()で同じ命令を再実行させます。
#                  CPU内部で待機せず、待ち合わせを呼び出し元のループに委ねます。
def execute_ld_key(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> PcControl:
    key = io.keypad.first_pressed()
    if key is None:
        return PcControl.HOLD
    state.write_v(op.x, key)
    return PcControl.ADVANCE
