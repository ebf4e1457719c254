"""
CHIP-8命令セット実装パッケージ。
"""
from chip8_tracer.core.cpu import PcControl
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.bus import Bus
from chip8_tracer.common.errors import UnknownInstructionError
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import Peripherals, dispatch_key, make_operation
from .maps import DECODE_MAP, EXECUTE_MAP

UNKNOWN_MNEMONIC = "UNKNOWN"

# @intent:responsibility CHIP-8の命令語をデコードします。
# @intent:rationale デコードはマシン状態を参照しない純粋関数です。逆アセンブラも同じ関数を使います。
def decode_opcode(word: int) -> Operation:
    """
    16bit命令語をデコードし、Operationオブジェクトを返します。
    命令表にない命令語は mnemonic="UNKNOWN" のOperationになります。
    """
    decoder = DECODE_MAP.get(dispatch_key(word))
    if decoder:
        return decoder(word)
    return make_operation(word, UNKNOWN_MNEMONIC, [f"${word:04X}"])

# @intent:responsibility デコードされたCHIP-8命令を実行します。
# @intent:post-condition 未知の命令はUnknownInstructionErrorとして報告し、状態を変更しません。
def execute_instruction(operation: Operation, state: Chip8CpuState, bus: Bus, io: Peripherals) -> PcControl:
    """
    デコードされたCHIP-8命令を実行し、CPUの状態を変更します。
    戻り値はPCの扱い（PcControl）です。
    """
    executor = EXECUTE_MAP.get(operation.pattern)
    if executor is None:
        raise UnknownInstructionError(state.pc, operation.word)
    return executor(state, bus, io, operation)
