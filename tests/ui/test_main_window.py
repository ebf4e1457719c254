import os
import sys
import tempfile
import unittest
from PySide6.QtWidgets import QApplication
from PySide6.QtGui import QKeyEvent
from PySide6.QtCore import QEvent, Qt

from chip8_tracer.config.models import SystemConfig
from chip8_tracer.arch.chip8.machine import Chip8Machine
from chip8_tracer.ui.main_window import MainWindow


def program(*words):
    return b"".join(w.to_bytes(2, "big") for w in words)


class TestMainWindow(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        if not QApplication.instance():
            cls.app = QApplication(sys.argv)
        else:
            cls.app = QApplication.instance()

    def make_window(self, *words, config=None):
        machine = Chip8Machine()
        machine.load_program(program(*words))
        machine.reset()
        window = MainWindow(config or SystemConfig(), machine)
        self.addCleanup(window.close)
        return window, machine

    def test_step_updates_views(self):
        window, machine = self.make_window(0x6042)
        window.step()
        self.assertEqual(machine.state.pc, 0x202)
        self.assertEqual(window.register_view.get_register_text("V0"), "42")
        self.assertEqual(window.register_view.get_register_text("PC"), "0202")

    def test_run_frame_draws_screen(self):
        window, machine = self.make_window(0xA20A, 0xD001, 0x1204, 0x0000, 0x0000, 0x8000)
        window._run_frame()
        frame = window.screen_view.get_frame()
        self.assertTrue(frame[0][0])
        self.assertFalse(frame[0][1])

    def test_start_stop(self):
        window, _ = self.make_window(0x1200)
        window.start()
        self.assertTrue(window.is_running())
        window.stop()
        self.assertFalse(window.is_running())

    def test_error_halts_execution(self):
        """
        未知の命令で実行が停止し、ステータスバーに報告されることを検証します。
        """
        window, machine = self.make_window(0xFFFF)
        window.start()
        window._run_frame()
        self.assertFalse(window.is_running())
        self.assertEqual(machine.state.pc, 0x200)
        self.assertIn("Halted at PC=0x0200", window.statusBar().currentMessage())

    def test_reset(self):
        window, machine = self.make_window(0x6042, 0x00E0)
        window.step()
        window.reset()
        self.assertEqual(machine.state.pc, 0x200)
        self.assertEqual(machine.state.v[0], 0)
        self.assertEqual(window.register_view.get_register_text("V0"), "00")

    def test_key_mapping(self):
        window, machine = self.make_window(0x1200)
        window.keyPressEvent(QKeyEvent(QEvent.KeyPress, Qt.Key_Q, Qt.NoModifier))
        self.assertTrue(machine.keypad.is_pressed(0x4))

        window.keyReleaseEvent(QKeyEvent(QEvent.KeyRelease, Qt.Key_Q, Qt.NoModifier))
        self.assertFalse(machine.keypad.is_pressed(0x4))

    def test_unmapped_key_is_ignored(self):
        window, machine = self.make_window(0x1200)
        window.keyPressEvent(QKeyEvent(QEvent.KeyPress, Qt.Key_P, Qt.NoModifier))
        self.assertEqual(machine.keypad.get_pressed_keys(), [])

    def test_wait_for_key_resumes_after_press(self):
        window, machine = self.make_window(0xF30A)
        window.step()
        self.assertEqual(machine.state.pc, 0x200)

        window.keyPressEvent(QKeyEvent(QEvent.KeyPress, Qt.Key_V, Qt.NoModifier))
        window.step()
        self.assertEqual(machine.state.pc, 0x202)
        self.assertEqual(machine.state.v[3], 0xF)

    def test_failed_load_keeps_current_program(self):
        """
        大きすぎるROMや存在しないROMの読み込みに失敗しても、ロード済みのプログラムと状態が残ることを検証します。
        """
        window, machine = self.make_window(0x6042, 0x1202)
        window.step()
        with tempfile.TemporaryDirectory() as tmp:
            oversize = os.path.join(tmp, "huge.ch8")
            with open(oversize, "wb") as f:
                f.write(bytes([0xFF]) * 0x1000)
            window.load_rom(oversize)
            self.assertIn("Failed to load", window.statusBar().currentMessage())
            window.load_rom(os.path.join(tmp, "missing.ch8"))
            self.assertIn("Failed to load", window.statusBar().currentMessage())

        self.assertEqual(machine.bus.peek(0x200), 0x60)
        self.assertEqual(machine.bus.peek(0x201), 0x42)
        self.assertEqual(machine.state.pc, 0x202)
        self.assertEqual(machine.state.v[0], 0x42)

    def test_delay_timer_runs_at_60hz_for_any_frame_rate(self):
        # LD V0, #3C / LD DT, V0 / JP $204
        for frame_rate in (30, 60, 120):
            window, machine = self.make_window(0x603C, 0xF015, 0x1204,
                                               config=SystemConfig(frame_rate=frame_rate, cycles_per_frame=0))
            machine.step()
            machine.step()
            for _ in range(frame_rate // 2):
                window._run_frame()
            self.assertEqual(machine.state.dt, 0x3C - 30, f"frame_rate={frame_rate}")

    def test_load_rom(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "rom.ch8")
            with open(path, "wb") as f:
                f.write(program(0x6107))
            window, machine = self.make_window(0x1200)
            window.load_rom(path)
        window.step()
        self.assertEqual(machine.state.v[1], 0x07)
        self.assertEqual(machine.bus.peek(0x200), 0x61)
