import warnings
from typing import Optional

from chip8_tracer.arch.chip8.machine import Chip8Machine
from chip8_tracer.loader.loader import RomLoader
from .models import SystemConfig

# @intent:responsibility システム構成（Config）に基づいてマシンを生成し、ROMをロードしてリセット済みの状態にします。
class SystemBuilder:
    def build_system(self, config: SystemConfig, rom_path: Optional[str] = None) -> Chip8Machine:
        machine = Chip8Machine(quirks=config.quirks)

        # 引数で指定されたROMは設定ファイルの指定より優先する
        path = rom_path or config.rom
        if path:
            RomLoader().load_rom(path, machine)
        else:
            warnings.warn("No ROM specified; memory above 0x200 is left empty.")

        machine.reset()
        return machine
