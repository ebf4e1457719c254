# src/chip8_tracer/arch/chip8/quirks.py
"""
CHIP-8処理系ごとに解釈が分かれる挙動の切り替え。
"""
from dataclasses import dataclass

# @intent:responsibility 互換性に関わる挙動の選択を保持します。
# @intent:rationale 既定値は画面端でラップし、CALLは呼び出し元アドレスを積んでRETで+2する構成です。
#                  どちらの設定でもRET後のPCは同じ（CALLの次の命令）になります。
@dataclass(frozen=True)
class Chip8Quirks:
    wrap_sprites: bool = True         # Falseの場合、画面外の画素はクリップされる
    call_pushes_return: bool = False  # Trueの場合、CALLはPC+2を積み、RETはそのアドレスへ戻る
