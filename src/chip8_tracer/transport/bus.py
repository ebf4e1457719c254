# chip8_tracer/transport/bus.py
"""
Transport Layer (メモリバス)

CHIP-8の4KBアドレス空間を表します。CPUと命令はメモリをBus経由でのみ参照し、
全てのアクセスは範囲チェックされます。マップ外のアドレスは BoundsViolationError です。
"""
from abc import ABC, abstractmethod
from typing import List, Tuple
from dataclasses import dataclass
from enum import Enum

from chip8_tracer.common.errors import BoundsViolationError, ProgramTooLargeError

# @intent:constant CHIP-8のメモリサイズとプログラム配置先頭アドレス。
MEMORY_SIZE = 0x1000
PROGRAM_ORIGIN = 0x200

class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility 1命令の実行中に発生したメモリアクセス1件を表します。Snapshotに格納されます。
@dataclass(frozen=True)
class BusAccess:
    address: int
    data: int # 8bit
    access_type: BusAccessType

# @intent:responsibility Busにマップできる記憶デバイスのインターフェース。アドレスはデバイス内オフセットです。
class Device(ABC):
    @abstractmethod
    def read(self, offset: int) -> int:
        pass

    @abstractmethod
    def write(self, offset: int, data: int) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

# @intent:responsibility 主記憶。範囲外アクセスや8bitに収まらない値は、切り詰めずにエラーとします。
class RAM(Device):
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError(f"RAM size must be a positive integer, got {size!r}.")
        self._memory = bytearray(size)

    def _check(self, offset: int) -> None:
        if not 0 <= offset < len(self._memory):
            raise BoundsViolationError(
                f"Offset {offset:#06x} is outside RAM of {len(self._memory)} bytes.", offset)

    def read(self, offset: int) -> int:
        self._check(offset)
        return self._memory[offset]

    def write(self, offset: int, data: int) -> None:
        self._check(offset)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._memory[offset] = data

    def clear(self) -> None:
        self._memory[:] = bytes(len(self._memory))

    def get_size(self) -> int:
        return len(self._memory)

# @intent:responsibility アドレス範囲ごとにデバイスへアクセスを振り分け、read/writeを記録します。
# @intent:rationale 記録したアクセスは命令ごとにSnapshotへ渡され、デバッガのMEMORY_READ判定に使われます。
class Bus:
    """
    read()/write()はアクセスを記録し、peek()/load()は記録しません。
    記録はget_and_clear_activity_log()で取り出すまで蓄積されます。
    """
    def __init__(self):
        self._regions: List[Tuple[int, int, Device]] = []
        self._activity: List[BusAccess] = []

    # @intent:pre-condition 0 <= start <= end。RAMの場合は範囲の大きさとRAMのサイズが一致すること。
    def register_device(self, start_address: int, end_address: int, device: Device) -> None:
        """
        範囲の重複は検査しません。先に登録したデバイスが優先されます。
        """
        if not 0 <= start_address <= end_address:
            raise ValueError(f"Invalid address range {start_address:#x}-{end_address:#x}.")
        if not isinstance(device, Device):
            raise TypeError(f"{type(device).__name__} is not a Device.")
        span = end_address - start_address + 1
        if isinstance(device, RAM) and device.get_size() != span:
            raise ValueError(f"RAM of {device.get_size()} bytes cannot be mapped onto {span} addresses.")
        self._regions.append((start_address, end_address, device))

    def _find_device(self, address: int) -> Tuple[Device, int]:
        for start, end, device in self._regions:
            if start <= address <= end:
                return device, address - start
        raise BoundsViolationError(f"Address {address:#06x} is not mapped.", address)

    def is_mapped(self, address: int) -> bool:
        return any(start <= address <= end for start, end, _ in self._regions)

    # @intent:return マップ済みの最上位アドレス+1。何も登録されていなければ0。
    def get_size(self) -> int:
        return max((end + 1 for _, end, _ in self._regions), default=0)

    def read(self, address: int) -> int:
        device, offset = self._find_device(address)
        data = device.read(offset)
        self._activity.append(BusAccess(address, data, BusAccessType.READ))
        return data

    # @intent:responsibility 命令語を上位バイト、下位バイトの順で読み込みます。
    # @intent:pre-condition 2バイトとも検査してから読むため、失敗時にはアクセスが記録されません。
    def read_word(self, address: int) -> int:
        if not (self.is_mapped(address) and self.is_mapped(address + 1)):
            raise BoundsViolationError(
                f"Word access at {address:#06x} crosses the end of mapped memory.", address)
        return (self.read(address) << 8) | self.read(address + 1)

    # 逆アセンブラや状態ダンプ用
    def peek(self, address: int) -> int:
        device, offset = self._find_device(address)
        return device.read(offset)

    def write(self, address: int, data: int) -> None:
        device, offset = self._find_device(address)
        device.write(offset, data)
        self._activity.append(BusAccess(address, data, BusAccessType.WRITE))

    def load(self, address: int, data: int) -> None:
        device, offset = self._find_device(address)
        device.write(offset, data)

    # @intent:responsibility プログラムイメージをoriginから連続して書き込みます。
    # @intent:pre-condition 書き込み前に全長を検証し、溢れる場合はメモリを一切変更しません。
    def load_program(self, data: bytes, origin: int = PROGRAM_ORIGIN) -> None:
        capacity = self.get_size() - origin
        if len(data) > capacity:
            raise ProgramTooLargeError(len(data), capacity)
        for offset, byte in enumerate(data):
            self.load(origin + offset, byte)

    def get_and_clear_activity_log(self) -> List[BusAccess]:
        log, self._activity = self._activity, []
        return log

    def clear(self) -> None:
        for _, _, device in self._regions:
            device.clear()
        self._activity = []
