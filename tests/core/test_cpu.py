# tests/core/test_cpu.py
"""
chip8_tracer.core.cpuモジュールの単体テスト。
"""
import pytest
from typing import Dict, List

from chip8_tracer.core.state import CpuState
from chip8_tracer.core.cpu import AbstractCpu, PcControl
from chip8_tracer.core.snapshot import Snapshot, Operation
from chip8_tracer.transport.bus import Bus, RAM, BusAccessType
from chip8_tracer.common.types import RegisterLayoutInfo, RegisterInfo

# @intent:test_suite 抽象CPUの命令サイクル（テンプレートメソッド）とPC更新規則を検証します。

class DummyCpu(AbstractCpu):
    """
    命令語の上位バイトでPcControlを選ぶだけのテスト用CPU。
    """
    CONTROLS = {0x00: PcControl.ADVANCE, 0x01: PcControl.SKIP, 0x02: PcControl.HOLD, 0x03: PcControl.JUMP}

    def _create_initial_state(self) -> CpuState:
        return CpuState(pc=0x0010, sp=0x0000)

    def _fetch(self) -> int:
        return self._bus.read_word(self._state.pc)

    def _decode(self, opcode: int) -> Operation:
        return Operation(opcode_hex=f"{opcode:04X}", mnemonic="OP", operands=[f"{opcode & 0xFF:02X}"], word=opcode)

    def _execute(self, operation: Operation) -> PcControl:
        control = self.CONTROLS[operation.word >> 8]
        if control == PcControl.JUMP:
            self._state.pc = operation.word & 0xFF
        return control

    def get_register_map(self) -> Dict[str, int]:
        return {"PC": self._state.pc, "SP": self._state.sp}

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [RegisterLayoutInfo("Test Group", [RegisterInfo("PC", 16), RegisterInfo("SP", 16)])]

    def get_flag_state(self) -> Dict[str, bool]:
        return {}

    def disassemble(self, start_addr: int, length: int):
        return []


class TestCpuState:
    def test_cpu_state_init_default(self):
        state = CpuState()
        assert state.pc == 0x0000
        assert state.sp == 0x0000

    def test_cpu_state_mutability(self):
        state = CpuState()
        state.pc = 0x1000
        assert state.pc == 0x1000


class TestAbstractCpu:
    @pytest.fixture
    def setup_cpu(self):
        bus = Bus()
        bus.register_device(0x0000, 0x00FF, RAM(256))
        cpu = DummyCpu(bus)
        return cpu, bus

    def _write_word(self, bus, address, word):
        bus.load(address, word >> 8)
        bus.load(address + 1, word & 0xFF)

    def test_advance(self, setup_cpu):
        cpu, bus = setup_cpu
        self._write_word(bus, 0x10, 0x0000)
        snapshot = cpu.step()
        assert cpu.get_state().pc == 0x12
        assert snapshot.pc_before == 0x10

    def test_skip(self, setup_cpu):
        cpu, bus = setup_cpu
        self._write_word(bus, 0x10, 0x0100)
        cpu.step()
        assert cpu.get_state().pc == 0x14

    def test_hold(self, setup_cpu):
        cpu, bus = setup_cpu
        self._write_word(bus, 0x10, 0x0200)
        cpu.step()
        cpu.step()
        assert cpu.get_state().pc == 0x10

    def test_jump(self, setup_cpu):
        cpu, bus = setup_cpu
        self._write_word(bus, 0x10, 0x0340)
        cpu.step()
        assert cpu.get_state().pc == 0x40

    def test_snapshot_contents(self, setup_cpu):
        cpu, bus = setup_cpu
        self._write_word(bus, 0x10, 0x0000)
        snapshot = cpu.step()
        assert isinstance(snapshot, Snapshot)
        assert snapshot.metadata.cycle_count == 1
        assert snapshot.metadata.symbol_info == "OP 00"
        assert [a.access_type for a in snapshot.bus_activity] == [BusAccessType.READ, BusAccessType.READ]

    def test_snapshot_state_is_a_copy(self, setup_cpu):
        cpu, bus = setup_cpu
        self._write_word(bus, 0x10, 0x0000)
        self._write_word(bus, 0x12, 0x0000)
        first = cpu.step()
        cpu.step()
        assert first.state.pc == 0x12
        assert cpu.get_state().pc == 0x14

    def test_failed_fetch_does_not_count_or_move(self, setup_cpu):
        cpu, _ = setup_cpu
        cpu.get_state().pc = 0xFF
        with pytest.raises(IndexError):
            cpu.step()
        assert cpu.get_state().pc == 0xFF
        assert cpu.get_cycle_count() == 0

    def test_reset(self, setup_cpu):
        cpu, bus = setup_cpu
        self._write_word(bus, 0x10, 0x0000)
        cpu.step()
        cpu.reset()
        assert cpu.get_state().pc == 0x10
        assert cpu.get_cycle_count() == 0

    def test_restore_state(self, setup_cpu):
        cpu, bus = setup_cpu
        self._write_word(bus, 0x10, 0x0000)
        snapshot = cpu.step()
        cpu.get_state().pc = 0x80
        cpu.restore_state(snapshot.state)
        assert cpu.get_state().pc == 0x12
        assert cpu.get_state() is not snapshot.state
