import os
import warnings
import yaml
from typing import Dict, Any

from chip8_tracer.arch.chip8.quirks import Chip8Quirks
from .models import SystemConfig, DEFAULT_KEY_MAP

class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
        config = self._parse_config(data)
        # ROMパスは設定ファイルからの相対パスとして解決する
        if config.rom and not os.path.isabs(config.rom):
            config.rom = os.path.join(os.path.dirname(os.path.abspath(path)), config.rom)
        return config

    def _parse_config(self, data: Dict[str, Any]) -> SystemConfig:
        if not isinstance(data, dict):
            raise ValueError(f"Configuration root must be a mapping, got {type(data).__name__}")

        quirks_data = self._parse_mapping(data, "quirks")
        quirks = Chip8Quirks(
            wrap_sprites=bool(quirks_data.get("wrap_sprites", True)),
            call_pushes_return=bool(quirks_data.get("call_pushes_return", False)),
        )

        key_map = dict(DEFAULT_KEY_MAP)
        if "key_map" in data:
            key_map = {}
            for host_key, chip8_key in self._parse_mapping(data, "key_map").items():
                key_index = self._parse_int(chip8_key)
                if not 0 <= key_index <= 0xF:
                    raise ValueError(f"Key map entry {host_key!r} targets invalid key {key_index:#x}")
                key_map[str(host_key).upper()] = key_index
            unmapped = sorted(set(range(16)) - set(key_map.values()))
            if unmapped:
                warnings.warn("Keypad keys without a host key: " + ", ".join(f"{k:X}" for k in unmapped))

        config = SystemConfig(
            rom=data.get("rom"),
            cycles_per_frame=self._parse_int(data.get("cycles_per_frame", 10)),
            frame_rate=self._parse_int(data.get("frame_rate", 60)),
            scale=self._parse_int(data.get("scale", 10)),
            quirks=quirks,
            key_map=key_map,
        )
        if config.cycles_per_frame < 0 or config.frame_rate <= 0 or config.scale <= 0:
            raise ValueError("cycles_per_frame must be >= 0, frame_rate and scale must be positive")
        return config

    # @intent:responsibility セクションの値がマッピングであることを検証します。キーが無ければ空のマッピングを返します。
    def _parse_mapping(self, data: Dict[str, Any], name: str) -> Dict[str, Any]:
        value = data.get(name, {})
        if not isinstance(value, dict):
            raise ValueError(f"'{name}' must be a mapping, got {type(value).__name__}")
        return value

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.lower().startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")
