# src/chip8_tracer/ui/app.py
"""
PySide6アプリケーションのエントリポイント。
設定とROMからマシンを構築し、メインウィンドウを起動します。
"""
import argparse
import sys

from PySide6.QtWidgets import QApplication

from chip8_tracer.common.errors import Chip8Error
from chip8_tracer.config.loader import ConfigLoader
from chip8_tracer.config.models import SystemConfig
from chip8_tracer.config.builder import SystemBuilder
from .main_window import MainWindow

# @intent:responsibility アプリケーションを起動し、メインウィンドウを表示します。
def main():
    parser = argparse.ArgumentParser(prog="chip8-tracer", description="Run a CHIP-8 program in a window.")
    parser.add_argument("rom", nargs="?", help="Path to a CHIP-8 program image (.ch8)")
    parser.add_argument("--config", help="YAML system configuration file")
    args, qt_args = parser.parse_known_args()

    config = ConfigLoader().load_from_file(args.config) if args.config else SystemConfig()
    try:
        machine = SystemBuilder().build_system(config, rom_path=args.rom)
    except (OSError, Chip8Error) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    app = QApplication([sys.argv[0]] + qt_args)
    main_win = MainWindow(config, machine)
    main_win.show()
    if args.rom or config.rom:
        main_win.start()
    sys.exit(app.exec())

if __name__ == '__main__':
    main()
