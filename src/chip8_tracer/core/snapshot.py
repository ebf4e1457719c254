# chip8_tracer/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令実行後のCPUとバスの状態を記録した不変のデータ構造を定義します。
デバッガ・UIへの情報提供と、実行履歴の記録に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from chip8_tracer.core.state import CpuState
from chip8_tracer.transport.bus import BusAccess


# @intent:responsibility デコードされた命令の詳細を記録します。
# @intent:rationale デコードは純粋関数であるため、オペランドの全ての見え方（x, y, n, kk, nnn）を
#                  ここに保持し、実行関数は命令語を再解析しません。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    デコードされた命令の詳細（命令語、ニーモニック、オペランド）を記録するデータクラス。
    """
    opcode_hex: str # 例: "A2F0"
    mnemonic: str # 例: "LD"
    operands: List[str] = field(default_factory=list) # 例: ["I", "$2F0"]
    pattern: int = 0 # ディスパッチテーブルのキー
    word: int = 0 # 16bit命令語
    x: int = 0 # bits 11-8
    y: int = 0 # bits 7-4
    n: int = 0 # bits 3-0
    kk: int = 0 # 下位8bit
    nnn: int = 0 # 下位12bit
    length: int = 2 # 命令のバイト長

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True)
class Metadata:
    """
    実行に関するメタデータ（累計実行命令数、表示用テキスト）を記録するデータクラス。
    """
    cycle_count: int
    symbol_info: Optional[str] = None # 例: "LD V0, $0A"

# @intent:responsibility ある一時点におけるCPUとバスの状態を不変に記録します。
@dataclass(frozen=True)
class Snapshot:
    """
    1命令実行直後の、CPU状態とバスアクティビティを記録した不変のデータ構造。
    stateは実行後の状態のコピーであり、以降の実行で変化しません。
    """
    pc_before: int
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)
