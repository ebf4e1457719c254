# src/chip8_tracer/arch/chip8/instructions/maps.py
"""
ディスパッチキーと命令実装のマッピング定義。
キーは base.dispatch_key() が命令語から求める値です。
"""
from . import load
from . import alu
from . import control
from . import display
from . import keypad

# @intent:map ディスパッチキーからデコード関数へのマッピングテーブル。
DECODE_MAP = {
    # Display
    0x00E0: display.decode_cls,
    0xD000: display.decode_drw,

    # Control
    0x00EE: control.decode_ret,
    0x1000: control.decode_jp,
    0x2000: control.decode_call,
    0x3000: control.decode_se_byte,
    0x4000: control.decode_sne_byte,

    # Load
    0x6000: load.decode_ld_byte,
    0x8000: load.decode_ld_reg,
    0xA000: load.decode_ld_index,
    0xF015: load.decode_ld_dt,

    # ALU
    0x7000: alu.decode_add_byte,
    0xF01E: alu.decode_add_index,

    # Keypad
    0xE0A1: keypad.decode_sknp,
    0xF00A: keypad.decode_ld_key,
}

# @intent:map ディスパッチキーから実行関数へのマッピングテーブル。
EXECUTE_MAP = {
    # Display
    0x00E0: display.execute_cls,
    0xD000: display.execute_drw,

    # Control
    0x00EE: control.execute_ret,
    0x1000: control.execute_jp,
    0x2000: control.execute_call,
    0x3000: control.execute_se_byte,
    0x4000: control.execute_sne_byte,

    # Load
    0x6000: load.execute_ld_byte,
    0x8000: load.execute_ld_reg,
    0xA000: load.execute_ld_index,
    0xF015: load.execute_ld_dt,

    # ALU
    0x7000: alu.execute_add_byte,
    0xF01E: alu.execute_add_index,

    # Keypad
    0xE0A1: keypad.execute_sknp,
    0xF00A: keypad.execute_ld_key,
}
