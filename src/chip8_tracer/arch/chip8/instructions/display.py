# src/chip8_tracer/arch/chip8/instructions/display.py
"""
画面命令（消去、スプライト描画）の実装。
"""
from chip8_tracer.core.cpu import PcControl
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import Peripherals, make_operation, reg

# --- 00E0 CLS ---
# @intent:responsibility CLS 命令をデコードします。
def decode_cls(word: int) -> Operation:
    return make_operation(word, "CLS", [])

# @intent:responsibility 画面の全ピクセルを消灯します。VFは変更しません。
def execute_cls(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> PcControl:
    io.display.clear()
    return PcControl.ADVANCE

# --- Dxyn DRW ---
# @intent:responsibility DRW Vx, Vy, n 命令をデコードします。
def decode_drw(word: int) -> Operation:
    return make_operation(word, "DRW", [reg((word >> 8) & 0xF), reg((word >> 4) & 0xF), f"{word & 0xF}"])

# @intent:responsibility Iから始まるnバイトのスプライトを(Vx, Vy)にXOR描画し、衝突をVFに設定します。
# @intent:pre-condition スプライトの全バイトを先に読み込みます。範囲外の場合は画面を変更する前に失敗します。
def execute_drw(state: Chip8CpuState, bus: Bus, io: Peripherals, op: Operation) -> PcControl:
    rows = [bus.read(state.i + row) for row in range(op.n)]

    display = io.display
    origin_x = state.read_v(op.x) % display.width
    origin_y = state.read_v(op.y) % display.height

    collision = False
    for row, row_byte in enumerate(rows):
        if display.draw_sprite(origin_x, origin_y + row, row_byte, wrap=io.quirks.wrap_sprites):
            collision = True

    state.flag_vf = collision
    return PcControl.ADVANCE
