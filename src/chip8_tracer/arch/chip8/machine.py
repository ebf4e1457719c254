# src/chip8_tracer/arch/chip8/machine.py
"""
CHIP-8 マシン構成モジュール。

メモリ(Bus)、ディスプレイ、キーパッドを所有し、CPUに参照を渡して一つの仮想マシンとして束ねます。
フレームレートや60Hzタイマの実時間制御は行いません。呼び出し元のループが
step() / tick_timer() / run_frame() をどの頻度で呼ぶかを決めます。
"""
from typing import List, Optional

from chip8_tracer.core.snapshot import Snapshot
from chip8_tracer.transport.bus import Bus, RAM, MEMORY_SIZE, PROGRAM_ORIGIN
from chip8_tracer.peripherals.display import Display
from chip8_tracer.peripherals.keypad import Keypad
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.quirks import Chip8Quirks
from chip8_tracer.arch.chip8.state import Chip8CpuState, REGISTER_COUNT, STACK_DEPTH

# @intent:constant ディレイタイマの減算周期(Hz)。命令の実行速度とは独立しています。
TIMER_HZ = 60

# @intent:responsibility CHIP-8仮想マシンの構成要素を生成・所有し、駆動ループ向けの操作を提供します。
class Chip8Machine:
    def __init__(self, quirks: Optional[Chip8Quirks] = None):
        self.bus = Bus()
        self.bus.register_device(0x000, MEMORY_SIZE - 1, RAM(MEMORY_SIZE))
        self.display = Display()
        self.keypad = Keypad()
        self.cpu = Chip8Cpu(self.bus, self.display, self.keypad, quirks)

    # @intent:responsibility レジスタ・スタック・PC・I・DTを初期化し、画面とキー状態を消去します。
    # @intent:rationale メモリの内容は保持します。ロード済みのプログラムはリセット後もそのまま実行できます。
    def reset(self) -> None:
        self.cpu.reset()
        self.display.clear()
        self.keypad.reset()

    # @intent:responsibility プログラムイメージを0x200から書き込みます。
    # @intent:post-condition 収まらない場合はProgramTooLargeErrorを送出し、メモリは変更されません。
    def load_program(self, data: bytes) -> None:
        self.bus.load_program(bytes(data), PROGRAM_ORIGIN)

    def step(self) -> Snapshot:
        return self.cpu.step()

    def tick_timer(self) -> None:
        self.cpu.tick_timer()

    # @intent:responsibility 1フレーム分として、最大cycles命令を実行した後にタイマをticks回進めます。
    # @intent:post-condition 途中で例外が発生した場合はタイマを進めずにそのまま伝播させます。
    def run_frame(self, cycles: int, ticks: int = 1) -> List[Snapshot]:
        """
        ticksはこのフレームの間に経過した60Hz周期の数です。
        フレームレートが60でない駆動ループは、経過時間に応じて0回や2回以上を渡します。
        """
        snapshots = [self.cpu.step() for _ in range(cycles)]
        for _ in range(ticks):
            self.cpu.tick_timer()
        return snapshots

    @property
    def state(self) -> Chip8CpuState:
        return self.cpu.get_state()

    # @intent:responsibility デバッグ用のテキスト状態ダンプを生成します。実行には影響しません。
    def dump_state(self) -> str:
        """
        PC、V0-VF（4列）、SP、スタック16段、I、DTを整形して返します。
        """
        s = self.cpu.get_state()
        rows = REGISTER_COUNT // 4
        lines = [f"PC {s.pc:04X}"]
        for row in range(rows):
            lines.append("      ".join(f"V{row + col * rows:X}: {s.v[row + col * rows]:02X}" for col in range(4)))
        lines.append(f"SP {s.sp:X}")
        rows = STACK_DEPTH // 4
        for row in range(rows):
            lines.append("    ".join(f"S{row + col * rows:X}: {s.stack[row + col * rows]:04X}" for col in range(4)))
        lines.append(f"I  {s.i:04X}")
        lines.append(f"DT {s.dt:02X}")
        return "\n".join(lines)
