# chip8_tracer/loader/loader.py
"""
ROMローダーモジュール。
CHIP-8の生バイナリ形式（ヘッダなし、0x200に配置）のロードをサポートします。
"""
from chip8_tracer.arch.chip8.machine import Chip8Machine

class RomLoader:
    """
    .ch8 形式のファイルを読み込み、データをマシンのメモリにロードするローダー。
    """
    def read_rom(self, file_path: str) -> bytes:
        with open(file_path, 'rb') as f:
            return f.read()

    # @intent:post-condition ファイルが無い場合はFileNotFoundError、大きすぎる場合はProgramTooLargeErrorを送出します。
    def load_rom(self, file_path: str, machine: Chip8Machine) -> int:
        """
        ROMをロードし、書き込んだバイト数を返します。
        """
        data = self.read_rom(file_path)
        machine.load_program(data)
        return len(data)
