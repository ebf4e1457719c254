# src/chip8_tracer/ui/main_window.py
"""
メインウィンドウの実装。
マシンを駆動するフレームタイマ、画面、レジスタ表示、キー入力の対応付けを保持します。
"""
from typing import Optional

from PySide6.QtWidgets import QMainWindow, QDockWidget, QToolBar, QFileDialog
from PySide6.QtGui import QAction, QKeyEvent, QKeySequence
from PySide6.QtCore import Qt, QTimer

from chip8_tracer.common.errors import Chip8Error, ProgramTooLargeError
from chip8_tracer.config.models import SystemConfig
from chip8_tracer.transport.bus import PROGRAM_ORIGIN
from chip8_tracer.loader.loader import RomLoader
from chip8_tracer.arch.chip8.machine import Chip8Machine, TIMER_HZ
from .screen_view import ScreenView
from .register_view import RegisterView


# @intent:responsibility アプリケーションのメインウィンドウを定義し、UIの主要なコンポーネントを組み立てます。
# @intent:rationale 命令実行とタイマ更新はUIスレッド上のQTimerから同期的に行います。
#                  キー状態の書き込みとstep()が同じスレッドで順に実行されるため、排他制御は不要です。
class MainWindow(QMainWindow):
    def __init__(self, config: SystemConfig, machine: Chip8Machine, parent=None):
        super().__init__(parent)
        self.setWindowTitle("CHIP-8 Tracer")
        self._config = config
        self._machine = machine

        self.screen_view = ScreenView(scale=config.scale)
        self.setCentralWidget(self.screen_view)

        self.register_view = RegisterView()
        self.register_view.set_cpu(machine.cpu)
        dock = QDockWidget("Registers", self)
        dock.setWidget(self.register_view)
        self.addDockWidget(Qt.RightDockWidgetArea, dock)

        self._timer = QTimer(self)
        self._timer.setInterval(max(1, 1000 // config.frame_rate))
        self._timer.timeout.connect(self._run_frame)
        # 60Hz周期の端数。_frame_ticks()が更新する
        self._tick_phase = 0

        self._create_toolbar()
        self._create_menus()
        self._refresh()

    # @intent:responsibility 実行制御用のツールバーを作成します。
    def _create_toolbar(self):
        toolbar = QToolBar("Main Toolbar")
        self.addToolBar(toolbar)

        self.run_action = QAction("Run", self)
        self.run_action.triggered.connect(self.start)
        toolbar.addAction(self.run_action)

        self.stop_action = QAction("Stop", self)
        self.stop_action.triggered.connect(self.stop)
        toolbar.addAction(self.stop_action)

        self.step_action = QAction("Step", self)
        self.step_action.triggered.connect(self.step)
        toolbar.addAction(self.step_action)

        self.reset_action = QAction("Reset", self)
        self.reset_action.triggered.connect(self.reset)
        toolbar.addAction(self.reset_action)

    def _create_menus(self):
        file_menu = self.menuBar().addMenu("File")
        self.load_rom_action = QAction("Load ROM...", self)
        self.load_rom_action.setShortcut("Ctrl+O")
        self.load_rom_action.triggered.connect(self._load_rom_dialog)
        file_menu.addAction(self.load_rom_action)

    def _load_rom_dialog(self):
        path, _ = QFileDialog.getOpenFileName(self, "Load CHIP-8 ROM", "", "CHIP-8 ROM (*.ch8);;All Files (*)")
        if path:
            self.load_rom(path)

    # @intent:responsibility ROMを読み込み、メモリを差し替えてマシンをリセットします。
    # @intent:post-condition 読み込みに失敗した場合、ロード済みのプログラムと実行状態は変更されません。
    def load_rom(self, path: str) -> None:
        self.stop()
        try:
            data = RomLoader().read_rom(path)
            capacity = self._machine.bus.get_size() - PROGRAM_ORIGIN
            if len(data) > capacity:
                raise ProgramTooLargeError(len(data), capacity)
        except (OSError, Chip8Error) as e:
            self.statusBar().showMessage(f"Failed to load {path}: {e}")
            return
        self._machine.bus.clear()
        self._machine.load_program(data)
        self.reset()
        self.statusBar().showMessage(f"Loaded {path}")

    def is_running(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def reset(self) -> None:
        self._machine.reset()
        self._tick_phase = 0
        self._refresh()

    def step(self) -> None:
        self.stop()
        try:
            self._machine.step()
        except Chip8Error as e:
            self._report_error(e)
        self._refresh()

    # @intent:responsibility このフレームの間に経過した60Hz周期の数を返します。
    # @intent:post-condition frame_rate回呼ぶと合計でTIMER_HZ回になり、1秒あたりの減算回数はframe_rateに依存しません。
    def _frame_ticks(self) -> int:
        ticks, self._tick_phase = divmod(self._tick_phase + TIMER_HZ, self._config.frame_rate)
        return ticks

    # @intent:responsibility 1フレーム分の命令を実行し、経過した周期の数だけタイマを進めて画面を更新します。
    def _run_frame(self) -> None:
        try:
            self._machine.run_frame(self._config.cycles_per_frame, self._frame_ticks())
        except Chip8Error as e:
            self._report_error(e)
        self._refresh()

    # @intent:responsibility コアが報告した異常を表示し、実行を停止します。
    def _report_error(self, error: Chip8Error) -> None:
        self.stop()
        self.statusBar().showMessage(f"Halted at PC={self._machine.state.pc:#06x}: {error}")

    def _refresh(self) -> None:
        self.screen_view.set_frame(self._machine.display.get_frame())
        self.register_view.update_registers()

    # @intent:responsibility ホストのキーイベントを設定のキーマップでキーパッド番号に変換します。
    def key_index(self, event: QKeyEvent) -> Optional[int]:
        name = QKeySequence(event.key()).toString().upper()
        return self._config.key_map.get(name)

    def keyPressEvent(self, event: QKeyEvent) -> None:
        index = self.key_index(event)
        if index is None or event.isAutoRepeat():
            super().keyPressEvent(event)
            return
        self._machine.keypad.set_key(index, True)

    def keyReleaseEvent(self, event: QKeyEvent) -> None:
        index = self.key_index(event)
        if index is None or event.isAutoRepeat():
            super().keyReleaseEvent(event)
            return
        self._machine.keypad.set_key(index, False)

    def closeEvent(self, event) -> None:
        self.stop()
        super().closeEvent(event)
