# src/chip8_tracer/arch/chip8/disassembler.py
"""
CHIP-8 Disassembler

メモリ上のバイナリデータを解析し、CHIP-8のニーモニックに変換します。
Instruction Layerのデコードロジックを再利用します。読み込みはpeekで行い、
バスアクセスログを汚しません。
"""
from typing import List

from chip8_tracer.common.types import DisassemblyLine
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.instructions import decode_opcode

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(bus: Bus, start_addr: int, length: int) -> List[DisassemblyLine]:
    """
    指定された範囲のメモリを2バイト単位で逆アセンブルします。
    マップ外に達した場合、または命令語の2バイト目が存在しない場合はそこで打ち切ります。

    Returns:
        List of (address, hex_word, mnemonic) tuples.
    """
    result = []
    current_addr = start_addr
    end_addr = start_addr + length

    while current_addr < end_addr:
        if not (bus.is_mapped(current_addr) and bus.is_mapped(current_addr + 1)):
            break

        word = (bus.peek(current_addr) << 8) | bus.peek(current_addr + 1)
        operation = decode_opcode(word)

        mnemonic_str = operation.mnemonic
        if operation.operands:
            mnemonic_str += " " + ", ".join(operation.operands)

        result.append((current_addr, operation.opcode_hex, mnemonic_str))
        current_addr += operation.length

    return result
