"""Breakpoints, stepping, memory watches and execution history for the CPU."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from .disassembler import (
    DisassembledInstruction,
    disassemble,
    format_address,
    is_step_over_opcode,
)

DEFAULT_MAX_HISTORY = 1000
_ADDRESS_LIMIT = 0xFFFF


class MemoryBus(Protocol):
    def read(self, address: int) -> int: ...

    def write(self, address: int, value: int) -> None: ...


class CpuLike(Protocol):
    """Anything exposing a ``registers`` object with a ``pc`` attribute."""

    registers: Any


@dataclass
class MemoryWatch:
    """A watched memory byte and the value last seen there."""

    address: int
    label: str
    last_value: int
    break_on_change: bool = False


class Debugger:
    """Debugging services over an attached CPU and memory bus."""

    def __init__(self) -> None:
        self._cpu: Optional[CpuLike] = None
        self._memory: Optional[MemoryBus] = None
        self._ppu: Any = None

        self._breakpoints: set[int] = set()
        self._step_requested = False
        self._step_over_active = False
        self._step_over_return = 0
        self._skip_once = False
        self._skipped_pc = 0

        self._watches: list[MemoryWatch] = []
        self._history: deque[int] = deque(maxlen=DEFAULT_MAX_HISTORY)

    # --- attachment -------------------------------------------------------

    def attach(self, cpu: CpuLike, memory: MemoryBus, ppu: Any = None) -> None:
        self._cpu = cpu
        self._memory = memory
        self._ppu = ppu

    def is_attached(self) -> bool:
        return self._cpu is not None and self._memory is not None

    # --- breakpoints ------------------------------------------------------

    def add_breakpoint(self, address: int) -> None:
        self._breakpoints.add(address & 0xFFFF)

    def remove_breakpoint(self, address: int) -> None:
        self._breakpoints.discard(address & 0xFFFF)

    def toggle_breakpoint(self, address: int) -> None:
        if self.has_breakpoint(address):
            self.remove_breakpoint(address)
        else:
            self.add_breakpoint(address)

    def has_breakpoint(self, address: int) -> bool:
        return (address & 0xFFFF) in self._breakpoints

    def clear_all_breakpoints(self) -> None:
        self._breakpoints.clear()

    @property
    def breakpoints(self) -> tuple[int, ...]:
        """Breakpoint addresses in ascending order."""
        return tuple(sorted(self._breakpoints))

    # --- execution control ------------------------------------------------

    def should_break(self, pc: int) -> bool:
        """True if execution should pause before running the instruction at ``pc``."""
        if self._skip_once and pc == self._skipped_pc:
            self._skip_once = False
            return False
        return self.has_breakpoint(pc)

    def skip_breakpoint_once(self, pc: int) -> None:
        """Ignore the breakpoint at ``pc`` the next time it is reached."""
        self._skip_once = True
        self._skipped_pc = pc

    def request_step(self) -> None:
        self._step_requested = True

    def request_step_over(self) -> None:
        self._step_requested = True
        self._step_over_active = True

    def prepare_step_over_for_current_instruction(self) -> bool:
        """Arm step-over for a CALL or RST at the current PC.

        Returns False when a plain single step should be used instead.
        """
        if not self.is_attached():
            return False
        current_pc = self.pc
        if not is_step_over_opcode(self.read_memory(current_pc)):
            return False
        next_address = self.disassemble_at(current_pc).next_address
        self.request_step_over()
        self.set_step_over_return(next_address)
        return True

    @property
    def step_requested(self) -> bool:
        return self._step_requested

    def clear_step_request(self) -> None:
        self._step_requested = False

    @property
    def step_over_active(self) -> bool:
        return self._step_over_active

    def set_step_over_return(self, address: int) -> None:
        self._step_over_return = address

    def should_stop_step_over(self, pc: int) -> bool:
        return self._step_over_active and pc == self._step_over_return

    def clear_step_over(self) -> None:
        self._step_over_active = False
        self._step_over_return = 0
        self._step_requested = False

    # --- memory -----------------------------------------------------------

    def read_memory(self, address: int) -> int:
        """Byte at ``address``, or 0 when no memory is attached."""
        if self._memory is None:
            return 0
        return self._memory.read(address & 0xFFFF)

    def write_memory(self, address: int, value: int) -> None:
        if self._memory is not None:
            self._memory.write(address & 0xFFFF, value & 0xFF)

    def read_memory_region(self, start: int, length: int) -> list[int]:
        """``length`` bytes from ``start``, wrapping at the top of the address space."""
        return [self.read_memory((start + offset) & 0xFFFF) for offset in range(length)]

    # --- watches ----------------------------------------------------------

    def add_watch(self, address: int, label: str = "", break_on_change: bool = False) -> None:
        """Watch ``address``; an existing watch gets the new label and break flag."""
        label = label or format_address(address)
        for watch in self._watches:
            if watch.address == address:
                watch.label = label
                watch.break_on_change = break_on_change
                return
        self._watches.append(
            MemoryWatch(address, label, self.read_memory(address), break_on_change)
        )

    def remove_watch(self, address: int) -> None:
        self._watches = [watch for watch in self._watches if watch.address != address]

    @property
    def watches(self) -> tuple[MemoryWatch, ...]:
        return tuple(self._watches)

    def update_watches(self) -> bool:
        """Refresh watched values; True if a break-on-change watch changed."""
        triggered = False
        for watch in self._watches:
            current = self.read_memory(watch.address)
            if current != watch.last_value:
                if watch.break_on_change:
                    triggered = True
                watch.last_value = current
        return triggered

    # --- history ----------------------------------------------------------

    def record_execution(self, pc: int) -> None:
        self._history.append(pc)

    @property
    def execution_history(self) -> tuple[int, ...]:
        """Executed PCs, oldest first."""
        return tuple(self._history)

    def clear_history(self) -> None:
        self._history.clear()

    def set_max_history(self, max_size: int) -> None:
        """Limit the history, dropping the oldest entries that no longer fit."""
        self._history = deque(self._history, maxlen=max_size)

    # --- registers --------------------------------------------------------

    @property
    def registers(self) -> Any:
        """The CPU's register set, or None when no CPU is attached."""
        if self._cpu is None:
            return None
        return self._cpu.registers

    @property
    def pc(self) -> int:
        registers = self.registers
        return 0 if registers is None else registers.pc

    # --- disassembly ------------------------------------------------------

    def disassemble_at(self, address: int) -> DisassembledInstruction:
        return disassemble(self.read_memory, address, self.has_breakpoint(address))

    def disassemble_range(self, start: int, count: int) -> list[DisassembledInstruction]:
        """Up to ``count`` consecutive instructions from ``start``."""
        results: list[DisassembledInstruction] = []
        address = start & 0xFFFF
        while len(results) < count and address < _ADDRESS_LIMIT:
            instruction = self.disassemble_at(address)
            results.append(instruction)
            if instruction.next_address <= address:
                break
            address = instruction.next_address
        return results

    def disassemble_around_pc(
        self, lines_before: int, lines_after: int
    ) -> list[DisassembledInstruction]:
        """Instructions surrounding the current PC; empty if PC is not on a decoded boundary."""
        if self._cpu is None:
            return []
        pc = self.pc
        address = pc - 64 if pc > 64 else 0
        decoded: list[DisassembledInstruction] = []
        while address < pc + 32 and address < _ADDRESS_LIMIT:
            instruction = self.disassemble_at(address)
            decoded.append(instruction)
            if instruction.next_address <= address:
                break
            address = instruction.next_address

        pc_index = next(
            (index for index, instruction in enumerate(decoded) if instruction.address == pc),
            None,
        )
        if pc_index is None:
            return []
        start = max(0, pc_index - lines_before)
        end = min(len(decoded), pc_index + lines_after + 1)
        return decoded[start:end]