# src/chip8_tracer/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。
"""
from typing import Dict, List, Optional

from chip8_tracer.common.types import RegisterLayoutInfo, RegisterInfo, DisassemblyLine
from chip8_tracer.core.cpu import AbstractCpu, PcControl
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.bus import Bus
from chip8_tracer.peripherals.display import Display
from chip8_tracer.peripherals.keypad import Keypad
from chip8_tracer.arch.chip8.state import Chip8CpuState, REGISTER_COUNT
from chip8_tracer.arch.chip8.quirks import Chip8Quirks
from chip8_tracer.arch.chip8.instructions import decode_opcode, execute_instruction, Peripherals
from chip8_tracer.arch.chip8 import disassembler

# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行）を提供します。
# @intent:rationale ディスプレイとキーパッドは所有せず参照のみ保持します。所有者はMachine（駆動ループ側）です。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 CPUをエミュレートするクラス。
    状態を変更するのはstep()とtick_timer()だけです。
    """
    def __init__(self, bus: Bus, display: Display, keypad: Keypad, quirks: Optional[Chip8Quirks] = None):
        super().__init__(bus)
        self._io = Peripherals(display=display, keypad=keypad, quirks=quirks or Chip8Quirks())

    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState()

    @property
    def quirks(self) -> Chip8Quirks:
        return self._io.quirks

    # @intent:responsibility PCから2バイトをビッグエンディアンで読み込みます。
    # @intent:post-condition PC(またはPC+1)がメモリ外の場合、BoundsViolationErrorを送出します。
    def _fetch(self) -> int:
        return self._bus.read_word(self._state.pc)

    def _decode(self, opcode: int) -> Operation:
        return decode_opcode(opcode)

    def _execute(self, operation: Operation) -> PcControl:
        return execute_instruction(operation, self._state, self._bus, self._io)

    # @intent:responsibility 60Hzのタイマ割り込みに相当する処理です。命令実行とは独立して呼び出し元が呼びます。
    def tick_timer(self) -> None:
        if self._state.dt > 0:
            self._state.dt -= 1

    # @intent:responsibility 状態ダンプ・UI表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{index:X}": s.v[index] for index in range(REGISTER_COUNT)}
        registers.update({"I": s.i, "PC": s.pc, "SP": s.sp, "DT": s.dt})
        return registers

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"V{index:X}", 8) for index in range(REGISTER_COUNT)]),
            RegisterLayoutInfo("Pointers/Timers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8), RegisterInfo("DT", 8)
            ])
        ]

    # @intent:responsibility VFを衝突フラグとして提供します。
    def get_flag_state(self) -> Dict[str, bool]:
        return {"VF": self._state.flag_vf}

    def disassemble(self, start_addr: int, length: int) -> List[DisassemblyLine]:
        return disassembler.disassemble(self._bus, start_addr, length)
