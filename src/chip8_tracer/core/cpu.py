# chip8_tracer/core/cpu.py
"""
Core Layer (命令サイクル)

1命令分の実行手順（フェッチ、デコード、実行、PC更新、Snapshot生成）を固定し、
命令セット固有の処理はサブクラスと命令テーブルに任せます。
"""
from abc import ABC, abstractmethod
from copy import deepcopy
from enum import Enum
from typing import Dict, List

from chip8_tracer.transport.bus import Bus
from chip8_tracer.core.snapshot import Snapshot, Operation, Metadata
from chip8_tracer.core.state import CpuState
from chip8_tracer.common.types import RegisterLayoutInfo, DisassemblyLine

# @intent:responsibility 命令実行後のPCの扱いを表します。
# @intent:rationale PCの進め方は命令ごとに異なるため、実行関数が結果として返し、CPUが一箇所で適用します。
class PcControl(Enum):
    ADVANCE = "ADVANCE" # 次の命令へ (+length)
    SKIP = "SKIP"       # 次の命令を飛ばす (+2*length)
    JUMP = "JUMP"       # 実行関数がPCを直接設定済み
    HOLD = "HOLD"       # PCを進めない（同じ命令を再実行）

# @intent:responsibility 命令サイクルの駆動と、UI・デバッガ向けの照会インターフェースを定義します。
class AbstractCpu(ABC):
    """
    命令サイクルを持つCPUの基底クラス。
    状態(CpuState)はprotectedに保持し、変更はstep()を通じてのみ行います。
    """
    def __init__(self, bus: Bus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._cycle_count: int = 0

    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        pass

    # @intent:responsibility 状態を電源投入直後の値に戻します。累計実行数もクリアします。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0

    def get_state(self) -> CpuState:
        return self._state

    # @intent:responsibility 保存済みの状態（Snapshot.stateなど）をCPUに復元します。
    def restore_state(self, state: CpuState) -> None:
        self._state = deepcopy(state)

    def get_cycle_count(self) -> int:
        return self._cycle_count

    # @intent:post-condition PCは変更しません。PCの更新は_update_pcの責務です。
    @abstractmethod
    def _fetch(self) -> int:
        pass

    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        pass

    # @intent:return 実行後のPCの扱い。
    @abstractmethod
    def _execute(self, operation: Operation) -> PcControl:
        pass

    # @intent:responsibility 1命令を実行し、実行後の状態とバスアクセスをSnapshotにまとめて返します。
    # @intent:post-condition 例外が送出された場合、状態は変更されていません（PCも進みません）。
    def step(self) -> Snapshot:
        """
        内部でループはしません。何命令をどの速度で実行するかは呼び出し元が決めます。
        """
        # 前サイクルの残りを捨ててから、このサイクルのアクセスだけを記録する
        self._bus.get_and_clear_activity_log()
        pc_before = self._state.pc

        operation = self._decode(self._fetch())
        control = self._execute(operation)
        self._update_pc(operation, control)

        return self._create_snapshot(pc_before, operation)

    def _update_pc(self, operation: Operation, control: PcControl) -> None:
        if control == PcControl.ADVANCE:
            self._state.pc = (self._state.pc + operation.length) & 0xFFFF
        elif control == PcControl.SKIP:
            self._state.pc = (self._state.pc + 2 * operation.length) & 0xFFFF

    def _create_snapshot(self, pc_before: int, operation: Operation) -> Snapshot:
        self._cycle_count += 1
        text = operation.mnemonic
        if operation.operands:
            text = f"{text} {', '.join(operation.operands)}"

        # stateはコピーして格納し、以降の実行でSnapshotの内容が変化しないようにする
        return Snapshot(
            pc_before=pc_before,
            state=deepcopy(self._state),
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count, symbol_info=text),
            bus_activity=self._bus.get_and_clear_activity_log()
        )

    # --- UI・デバッガ向けの照会 ---

    # @intent:return レジスタ名から現在値への辞書。表示側はCPUの内部構造を知らずに値を描画できます。
    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        pass

    # @intent:return 表示グループごとのレジスタ名とビット幅。
    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        pass

    @abstractmethod
    def get_flag_state(self) -> Dict[str, bool]:
        pass

    # @intent:return 指定範囲の (address, hex_word, "MNEMONIC operands") のリスト。
    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[DisassemblyLine]:
        pass
