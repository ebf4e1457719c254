# chip8_tracer/debugger/debugger.py
"""
実行制御とブレークポイント。

Chip8Machine.step()を繰り返し呼び出し、条件に一致した時点、またはコアが
Chip8Errorを報告した時点で停止します。実行した命令のSnapshotは履歴として保持します。
"""
from copy import deepcopy
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from chip8_tracer.common.errors import Chip8Error
from chip8_tracer.core.snapshot import Snapshot
from chip8_tracer.transport.bus import BusAccessType
from chip8_tracer.arch.chip8.machine import Chip8Machine
from chip8_tracer.arch.chip8.state import Chip8CpuState

class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # 次に実行する命令のアドレス
    MEMORY_READ = "MEMORY_READ"         # 命令がアドレスを読んだ（フェッチ、スプライト読み出し）
    REGISTER_VALUE = "REGISTER_VALUE"   # 実行後のレジスタ値が一致
    REGISTER_CHANGE = "REGISTER_CHANGE" # 実行前後でレジスタ値が異なる

# @intent:responsibility 停止条件1件。frozenなので同じ内容の条件は重複登録されません。
@dataclass(frozen=True)
class BreakpointCondition:
    """
    register_name は "V0"-"VF", "I", "PC", "SP", "DT" のいずれかです。
    """
    condition_type: BreakpointConditionType
    value: Optional[int] = None
    address: Optional[int] = None
    register_name: Optional[str] = None
    enabled: bool = True

# @intent:utility_function レジスタ名から状態の値を取り出します。未知の名前はNoneを返します。
def read_register(state: Chip8CpuState, name: str) -> Optional[int]:
    name = name.upper()
    if len(name) == 2 and name[0] == "V":
        try:
            return state.v[int(name[1], 16)]
        except ValueError:
            return None
    attr = {"I": "i", "PC": "pc", "SP": "sp", "DT": "dt"}.get(name)
    return getattr(state, attr) if attr else None

# @intent:responsibility マシンを命令単位で進め、停止条件と実行履歴を管理します。
class Debugger:
    def __init__(self, machine: Chip8Machine, history_limit: int = 1000):
        self._machine = machine
        self._conditions: List[BreakpointCondition] = []
        self._history: List[Snapshot] = []
        self._history_limit = history_limit
        self._running = False
        self._last_error: Optional[Chip8Error] = None

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        """
        ブレークポイントを追加します。同じ条件が登録済みの場合は何もしません。
        """
        if condition not in self._conditions:
            self._conditions.append(condition)

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        """
        ブレークポイントを削除します。登録されていない条件はエラーにしません。
        """
        if condition in self._conditions:
            self._conditions.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._conditions)

    def get_history(self) -> List[Snapshot]:
        """
        実行済み命令のSnapshotを古い順に返します。件数はhistory_limitまでです。
        """
        return list(self._history)

    @property
    def last_error(self) -> Optional[Chip8Error]:
        """
        直前のrun()を止めたコアの異常。正常に終わった場合はNoneです。
        """
        return self._last_error

    def is_running(self) -> bool:
        return self._running

    def _active(self, condition_type: BreakpointConditionType) -> List[BreakpointCondition]:
        return [c for c in self._conditions if c.enabled and c.condition_type == condition_type]

    def _hits_pc_breakpoint(self, pc: int) -> bool:
        return any(c.value == pc for c in self._active(BreakpointConditionType.PC_MATCH))

    # @intent:responsibility 実行済みの1命令について、PC_MATCH以外の条件を判定します。
    def _hits_after_step(self, previous: Chip8CpuState, snapshot: Snapshot) -> bool:
        reads = {a.address for a in snapshot.bus_activity if a.access_type == BusAccessType.READ}
        if any(c.address in reads for c in self._active(BreakpointConditionType.MEMORY_READ)):
            return True

        for c in self._active(BreakpointConditionType.REGISTER_VALUE):
            if c.register_name and read_register(snapshot.state, c.register_name) == c.value:
                return True

        for c in self._active(BreakpointConditionType.REGISTER_CHANGE):
            if not c.register_name:
                continue
            before = read_register(previous, c.register_name)
            if before is not None and before != read_register(snapshot.state, c.register_name):
                return True
        return False

    # @intent:post-condition コアの例外はそのまま伝播し、履歴には何も追加されません。
    def step_instruction(self) -> Snapshot:
        """
        マシンを1命令進め、Snapshotを履歴に追加して返します。ブレークポイントは判定しません。
        """
        snapshot = self._machine.step()
        self._history.append(snapshot)
        if len(self._history) > self._history_limit:
            del self._history[0]
        return snapshot

    # @intent:responsibility ブレークポイントまたは異常で止まるまで、最大max_steps命令を実行します。
    # @intent:return 実行した命令数。
    def run(self, max_steps: int) -> int:
        """
        現在のPCにブレークポイントがある場合は、その命令を1つ実行してから判定を始めます。
        Chip8Errorはlast_errorに保存して実行を止めます。
        """
        self._running = True
        self._last_error = None
        executed = 0
        resume_from_breakpoint = self._hits_pc_breakpoint(self._machine.state.pc)

        while self._running and executed < max_steps:
            pc = self._machine.state.pc
            if not resume_from_breakpoint and self._hits_pc_breakpoint(pc):
                print(f"Breakpoint hit at PC: {pc:#06x}")
                break
            resume_from_breakpoint = False

            # step()は状態オブジェクトを直接更新するため、比較用にコピーしておく
            previous = deepcopy(self._machine.state)
            try:
                snapshot = self.step_instruction()
            except Chip8Error as e:
                self._last_error = e
                print(f"Execution halted at PC: {self._machine.state.pc:#06x}: {e}")
                break
            executed += 1

            if self._hits_after_step(previous, snapshot):
                print(f"Breakpoint hit at PC: {snapshot.state.pc:#06x}")
                break

        self._running = False
        return executed

    def stop(self) -> None:
        """
        実行中のrun()を、現在の命令の完了後に停止させます。
        """
        self._running = False
