"""
エミュレーションコアが報告する異常系の定義。

コアは例外を内部で握りつぶさず、step()/load_program() の呼び出し元へ同期的に伝播させます。
停止・リセット・続行のいずれを選ぶかは呼び出し元の責務です。
"""
from typing import Optional


# @intent:responsibility コアが報告する全ての異常の基底クラス。
class Chip8Error(Exception):
    """呼び出し元が一括して捕捉できるようにするための基底例外。"""


# @intent:responsibility メモリ・レジスタ番号など、範囲外アクセスを表します。
# @intent:rationale 既存コードがIndexErrorで捕捉できるよう、IndexErrorも継承します。
class BoundsViolationError(Chip8Error, IndexError):
    def __init__(self, message: str, address: Optional[int] = None):
        super().__init__(message)
        self.address = address


# @intent:responsibility CALLのネストがスタック容量(16)を超えたことを表します。
class StackOverflowError(Chip8Error):
    pass


# @intent:responsibility 空のスタックに対するRETを表します。
class StackUnderflowError(Chip8Error):
    pass


# @intent:responsibility 命令表に存在しない命令語を表します。PCは進められません。
class UnknownInstructionError(Chip8Error):
    def __init__(self, pc: int, opcode: int):
        super().__init__(f"Unknown instruction {opcode:04X} at {pc:#06x}")
        self.pc = pc
        self.opcode = opcode


# @intent:responsibility メモリに収まらないプログラムイメージを表します。
class ProgramTooLargeError(Chip8Error, ValueError):
    def __init__(self, size: int, capacity: int):
        super().__init__(f"Program of {size} bytes exceeds the {capacity} bytes available.")
        self.size = size
        self.capacity = capacity
