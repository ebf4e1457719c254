# src/chip8_tracer/cli.py
"""
ヘッドレス実行用のエントリポイント。
ROMをロードしてリセットし、指定命令数を実行して各命令と最終状態を表示します。
"""
import argparse
import sys
from typing import List, Optional

from chip8_tracer.common.errors import Chip8Error
from chip8_tracer.config.loader import ConfigLoader
from chip8_tracer.config.models import SystemConfig
from chip8_tracer.config.builder import SystemBuilder
from chip8_tracer.debugger.debugger import Debugger, BreakpointCondition, BreakpointConditionType


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chip8-trace", description="Trace a CHIP-8 program without a display.")
    parser.add_argument("rom", help="Path to a CHIP-8 program image (.ch8)")
    parser.add_argument("--steps", type=int, default=20,
                        help="Number of instructions to execute (default: 20)")
    parser.add_argument("--config", help="YAML system configuration file")
    parser.add_argument("--breakpoint", metavar="ADDR", nargs="+", default=[],
                        type=lambda x: int(x, 0),
                        help="Program addresses at which to stop execution")
    parser.add_argument("--quiet", action="store_true",
                        help="Do not print each executed instruction")
    return parser


# @intent:responsibility CLI引数を解釈し、マシンを構築・実行して結果を表示します。
# @intent:return プロセスの終了コード。コアが異常を報告した場合は1。
def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = ConfigLoader().load_from_file(args.config) if args.config else SystemConfig()
    try:
        machine = SystemBuilder().build_system(config, rom_path=args.rom)
    except (OSError, Chip8Error) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # 全命令を表示するため、履歴の上限を実行命令数に合わせる
    debugger = Debugger(machine, history_limit=max(args.steps, 1))
    for address in args.breakpoint:
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=address))

    debugger.run(args.steps)

    if not args.quiet:
        for snapshot in debugger.get_history():
            print(f"[{snapshot.pc_before:04X}] {snapshot.operation.opcode_hex}  {snapshot.metadata.symbol_info}")
    print(machine.dump_state())

    # 異常の内容はDebugger.run()が報告済み
    return 1 if debugger.last_error is not None else 0


if __name__ == '__main__':
    sys.exit(main())
