# chip8_tracer/core/state.py
"""
Core Layer (CPU状態)

AbstractCpuが命令サイクルで参照する最小限のレジスタです。
"""
from dataclasses import dataclass

# @intent:responsibility 命令サイクルが直接扱うPCとSPを保持します。命令セット固有のレジスタはサブクラスで追加します。
@dataclass
class CpuState:
    pc: int = 0x0000
    sp: int = 0x0000  # CHIP-8では次に書き込むスタックスロットの番号
