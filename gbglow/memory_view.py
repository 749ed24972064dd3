"""State and formatting of the debugger's hex memory viewer and stack view."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .debugger_controls import parse_hex_u16

ReadByte = Callable[[int], int]

ADDRESS_SPACE_SIZE = 0x10000
ADDR_MAX = 0xFFFF
STACK_ADDR_LIMIT = 0xFFFE
PAGE_SIZE = 0x100
VIEW_ROWS = 16
DEFAULT_COLUMNS = 16
DEFAULT_STACK_ENTRIES = 16

REGIONS = {
    "ROM0": 0x0000,
    "VRAM": 0x8000,
    "WRAM": 0xC000,
    "OAM": 0xFE00,
    "IO": 0xFF00,
    "HRAM": 0xFF80,
}


def clamp_memory_view_start(start_address: int, rows: int, cols: int) -> int:
    """Latest start address from which ``rows`` x ``cols`` bytes still fit."""
    visible = rows * cols
    if visible <= 0 or visible >= ADDRESS_SPACE_SIZE:
        return 0
    return min(max(start_address, 0), ADDRESS_SPACE_SIZE - visible)


@dataclass(frozen=True)
class MemoryRow:
    """One line of the hex viewer."""

    address: int
    values: tuple[int, ...]

    @property
    def hex(self) -> str:
        return "".join(f"{value:02X} " for value in self.values)

    @property
    def ascii(self) -> str:
        return "".join(chr(value) if 32 <= value < 127 else "." for value in self.values)

    def text(self) -> str:
        return f"{self.address:04X}: {self.hex}|{self.ascii}|"


def format_memory_row(read: ReadByte, address: int, cols: int) -> MemoryRow:
    """Up to ``cols`` bytes from ``address``, stopping at the end of memory."""
    end = min(address + cols, ADDR_MAX + 1)
    return MemoryRow(address, tuple(read(addr) & 0xFF for addr in range(address, end)))


def stack_entries(
    read: ReadByte, sp: int, count: int = DEFAULT_STACK_ENTRIES
) -> list[tuple[int, int]]:
    """``(address, little-endian word)`` pairs from ``sp`` upwards."""
    entries: list[tuple[int, int]] = []
    for index in range(count):
        addr = sp + index * 2
        if addr > STACK_ADDR_LIMIT:
            break
        low = read(addr) & 0xFF
        high = read(addr + 1) & 0xFF
        entries.append((addr, (high << 8) | low))
    return entries


class MemoryView:
    """Start address and navigation of a 16-row hex viewer."""

    def __init__(self, address: int = 0x0000, columns: int = DEFAULT_COLUMNS) -> None:
        self.address = address
        self.columns = columns
        self.row_count = VIEW_ROWS

    def _clamp(self, address: int) -> int:
        return clamp_memory_view_start(address, self.row_count, self.columns)

    def goto(self, text: str) -> None:
        """Move to a hexadecimal address; raises ValueError for bad input."""
        self.address = self._clamp(parse_hex_u16(text))

    def jump_to_region(self, name: str) -> None:
        """Move to the start of a named region (ROM0, VRAM, WRAM, OAM, IO, HRAM)."""
        try:
            self.address = REGIONS[name]
        except KeyError:
            raise ValueError(f"unknown memory region: {name!r}") from None

    def page_back(self) -> None:
        current = self.address
        self.address = self._clamp(current - PAGE_SIZE if current >= PAGE_SIZE else 0)

    def page_forward(self) -> None:
        self.address = self._clamp(self.address + PAGE_SIZE)

    def row_back(self) -> None:
        current = self.address
        self.address = self._clamp(current - self.columns if current >= self.columns else 0)

    def row_forward(self) -> None:
        self.address = self._clamp(self.address + self.columns)

    def rows(self, read: ReadByte) -> list[MemoryRow]:
        """The visible rows, after clamping the start address."""
        self.address = self._clamp(self.address)
        result: list[MemoryRow] = []
        for row in range(self.row_count):
            row_address = self.address + row * self.columns
            if row_address > ADDR_MAX:
                break
            result.append(format_memory_row(read, row_address, self.columns))
        return result