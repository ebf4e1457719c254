# tests/arch/chip8/test_chip8_cpu.py
"""
Chip8Cpuの命令サイクル全体に関する性質の検証。
PCの進み方、スキップ、境界、未知命令、タイマ、表示用APIを確認します。
"""
import pytest

from chip8_tracer.arch.chip8.machine import Chip8Machine
from chip8_tracer.common.errors import BoundsViolationError, UnknownInstructionError, Chip8Error
from chip8_tracer.common.types import RegisterLayoutInfo


def program(*words):
    return b"".join(word.to_bytes(2, "big") for word in words)


@pytest.fixture
def machine():
    return Chip8Machine()


def load(machine, *words):
    machine.load_program(program(*words))
    machine.reset()


class TestProgramCounter:
    @pytest.mark.parametrize("word", [0x00E0, 0x6012, 0x7012, 0x8120, 0xA456, 0xF015, 0xF11E])
    def test_non_branching_instructions_advance_by_two(self, machine, word):
        load(machine, word)
        machine.step()
        assert machine.state.pc == 0x202

    def test_skip_for_all_registers_and_bytes(self, machine):
        for x in range(16):
            for kk in range(256):
                value = (kk + 1) & 0xFF if kk % 2 else kk
                load(machine, 0x6000 | (x << 8) | value, 0x3000 | (x << 8) | kk, 0x4000 | (x << 8) | kk)
                machine.step()
                machine.step()
                expected = 0x206 if value == kk else 0x204
                assert machine.state.pc == expected, (x, kk)
                machine.state.pc = 0x204
                machine.step()
                expected = 0x206 if value == kk else 0x208
                assert machine.state.pc == expected, (x, kk)

    def test_load_then_compare_same_immediate_always_skips(self, machine):
        for kk in (0x00, 0x01, 0x7F, 0x80, 0xFF):
            load(machine, 0x6500 | kk, 0x3500 | kk)
            machine.step()
            machine.step()
            assert machine.state.pc == 0x206


class TestBounds:
    def test_fetch_at_last_byte_is_bounds_violation(self, machine):
        machine.reset()
        machine.state.pc = 0xFFF
        with pytest.raises(BoundsViolationError):
            machine.step()
        assert machine.state.pc == 0xFFF

    def test_fetch_of_last_full_word(self, machine):
        load(machine, 0x1FFE)
        machine.step()
        assert machine.state.pc == 0xFFE
        # 0xFFE-0xFFF はゼロ（未知命令 0000）
        with pytest.raises(UnknownInstructionError):
            machine.step()

    def test_machine_resumable_after_error(self, machine):
        load(machine, 0x00EE)
        with pytest.raises(Chip8Error):
            machine.step()
        machine.load_program(program(0x6001))
        machine.step()
        assert machine.state.v[0] == 1


class TestUnknownInstruction:
    def test_reported_and_pc_held(self, machine):
        load(machine, 0x6007, 0x8124)
        machine.step()
        with pytest.raises(UnknownInstructionError) as excinfo:
            machine.step()
        assert excinfo.value.pc == 0x202
        assert excinfo.value.opcode == 0x8124
        assert machine.state.pc == 0x202
        assert machine.state.v[0] == 0x07

    def test_reported_again_on_retry(self, machine):
        load(machine, 0xB200)
        for _ in range(2):
            with pytest.raises(UnknownInstructionError):
                machine.step()
        assert machine.cpu.get_cycle_count() == 0


class TestTimer:
    def test_tick_decrements(self, machine):
        load(machine, 0x6002, 0xF015)
        machine.step()
        machine.step()
        machine.tick_timer()
        assert machine.state.dt == 1
        machine.tick_timer()
        machine.tick_timer()
        assert machine.state.dt == 0

    def test_instructions_do_not_decrement(self, machine):
        load(machine, 0x6009, 0xF015, 0x6100, 0x6100)
        for _ in range(4):
            machine.step()
        assert machine.state.dt == 9


class TestInspection:
    def test_register_map(self, machine):
        load(machine, 0x6C42, 0xA321)
        machine.step()
        machine.step()
        registers = machine.cpu.get_register_map()
        assert registers["VC"] == 0x42
        assert registers["I"] == 0x321
        assert registers["PC"] == 0x204
        assert registers["SP"] == 0
        assert registers["DT"] == 0

    def test_register_layout(self, machine):
        layout = machine.cpu.get_register_layout()
        assert all(isinstance(group, RegisterLayoutInfo) for group in layout)
        names = [reg.name for group in layout for reg in group.registers]
        assert names[:16] == [f"V{i:X}" for i in range(16)]
        assert {"I", "PC", "SP", "DT"} <= set(names)

    def test_flag_state(self, machine):
        assert machine.cpu.get_flag_state() == {"VF": False}
        machine.state.v[0xF] = 1
        assert machine.cpu.get_flag_state() == {"VF": True}

    def test_snapshot_records_sprite_reads(self, machine):
        load(machine, 0xA300, 0xD002)
        machine.step()
        snapshot = machine.step()
        addresses = [access.address for access in snapshot.bus_activity]
        # フェッチ2バイト + スプライト2バイト
        assert addresses == [0x202, 0x203, 0x300, 0x301]
        assert snapshot.metadata.symbol_info == "DRW V0, V0, 2"
