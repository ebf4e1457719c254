"""
共通の型定義を提供するモジュール。
プロジェクト全体で使用される汎用的な型エイリアスなどを定義します。
"""
from typing import Dict, List, NamedTuple, Tuple

# @intent:data_structure CHIP-8キー番号(0x0-0xF)とホスト側キー名の対応表の型エイリアス。
# Config, UIの両レイヤーで共通して使用されます。
KeyMap = Dict[str, int]

# @intent:data_structure 逆アセンブル結果の1行 (address, hex_word, mnemonic)。
DisassemblyLine = Tuple[int, str, str]

# @intent:data_structure 単一のレジスタの表示定義。状態ダンプとUIがフィールドを生成するために使用される。
class RegisterInfo(NamedTuple):
    name: str
    width: int  # ビット幅 (8 or 16)

# @intent:data_structure レジスタグループの表示定義。関連するレジスタ（例: "General", "Pointers"）をまとめる。
class RegisterLayoutInfo(NamedTuple):
    group_name: str
    registers: List[RegisterInfo]
