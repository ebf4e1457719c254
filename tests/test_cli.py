# tests/test_cli.py
"""
ヘッドレス実行エントリポイントの検証。
"""
import pytest

from chip8_tracer.cli import build_parser, main


def program(*words):
    return b"".join(w.to_bytes(2, "big") for w in words)


@pytest.fixture
def rom(tmp_path):
    def _write(*words):
        path = tmp_path / "test.ch8"
        path.write_bytes(program(*words))
        return str(path)
    return _write


class TestCli:
    def test_parser_defaults(self):
        args = build_parser().parse_args(["game.ch8"])
        assert args.rom == "game.ch8"
        assert args.steps == 20
        assert args.breakpoint == []
        assert not args.quiet

    def test_parser_breakpoints_accept_hex(self):
        args = build_parser().parse_args(["game.ch8", "--breakpoint", "0x204", "520"])
        assert args.breakpoint == [0x204, 520]

    # @intent:test_case_trace 実行した命令と最終状態が出力されることを検証します。
    def test_trace_output(self, rom, capsys):
        code = main([rom(0x6005, 0x7003, 0xA123), "--steps", "3"])
        out = capsys.readouterr().out

        assert code == 0
        assert "[0200] 6005  LD V0, #$05" in out
        assert "[0202] 7003  ADD V0, #$03" in out
        assert "[0204] A123  LD I, $123" in out
        assert "PC 0206" in out
        assert "V0: 08" in out
        assert "I  0123" in out

    def test_quiet(self, rom, capsys):
        code = main([rom(0x6005), "--steps", "1", "--quiet"])
        out = capsys.readouterr().out
        assert code == 0
        assert "[0200]" not in out
        assert out.startswith("PC 0202")

    def test_breakpoint_stops_execution(self, rom, capsys):
        code = main([rom(0x6001, 0x6102, 0x6203), "--steps", "10", "--breakpoint", "0x204", "--quiet"])
        out = capsys.readouterr().out
        assert code == 0
        assert "Breakpoint hit at PC: 0x0204" in out
        assert "PC 0204" in out

    # @intent:test_case_error コアが異常を報告した場合は終了コード1になることを検証します。
    def test_unknown_instruction(self, rom, capsys):
        code = main([rom(0x6001, 0xFFFF), "--steps", "5"])
        captured = capsys.readouterr()
        assert code == 1
        assert "PC 0202" in captured.out
        assert captured.out.count("Execution halted at PC: 0x0202") == 1
        assert captured.err == ""

    # @intent:test_case_long_trace 履歴の既定上限を超える命令数でも全命令が表示されることを検証します。
    def test_trace_longer_than_default_history(self, rom, capsys):
        code = main([rom(0x6001, 0x1202), "--steps", "1500"])
        lines = [line for line in capsys.readouterr().out.splitlines() if line.startswith("[")]
        assert code == 0
        assert len(lines) == 1500
        assert lines[0] == "[0200] 6001  LD V0, #$01"
        assert lines[-1] == "[0202] 1202  JP $202"

    def test_missing_rom(self, tmp_path, capsys):
        code = main([str(tmp_path / "missing.ch8")])
        assert code == 1
        assert "Error:" in capsys.readouterr().err

    def test_config_file(self, rom, tmp_path, capsys):
        config = tmp_path / "system.yaml"
        config.write_text("quirks:\n  call_pushes_return: true\n")
        code = main([rom(0x2204, 0x0000, 0x00EE), "--steps", "2", "--config", str(config), "--quiet"])
        out = capsys.readouterr().out
        assert code == 0
        assert "PC 0202" in out
        assert "S0: 0202" in out
