"""Execution controls and display helpers behind the debugger windows."""

from __future__ import annotations

import string
from typing import Optional

from .debugger import Debugger
from .disassembler import DisassembledInstruction

FLAG_Z = 0x80
FLAG_N = 0x40
FLAG_H = 0x20
FLAG_C = 0x10

ENTRY_POINT = 0x0100
RST_VECTORS = 0x0000
INT_VECTORS = 0x0040

_ADDR_MAX = 0xFFFF
_HEX_DIGITS = frozenset(string.hexdigits)
_LEADING_SPACE = " \t\n\v\f\r"

BREAKPOINT_MARKER = "\u25cf"
PC_MARKER = "\u25ba"

DEFAULT_WINDOWS = {
    "registers": True,
    "disassembly": True,
    "memory": True,
    "breakpoints": False,
    "watches": False,
    "stack": False,
    "io_registers": False,
    "sprites": True,
}


def parse_hex_u16(text: str) -> int:
    """Parse a hexadecimal address in 0..0xFFFF; raises ValueError otherwise."""
    if not text:
        raise ValueError("empty address")
    body = text.lstrip(_LEADING_SPACE)
    negative = False
    if body[:1] in ("+", "-"):
        negative = body[0] == "-"
        body = body[1:]
    if body[:2].lower() == "0x" and len(body) > 2 and body[2] in _HEX_DIGITS:
        body = body[2:]
    if not body or not all(char in _HEX_DIGITS for char in body):
        raise ValueError(f"invalid hexadecimal address: {text!r}")
    value = int(body, 16)
    if negative and value != 0:
        raise ValueError(f"address out of range: {text!r}")
    if value > _ADDR_MAX:
        raise ValueError(f"address out of range: {text!r}")
    return value


def format_flags(f: int) -> str:
    """The Z, N, H and C flags of register F, ``-`` for a clear flag."""
    return "".join(
        letter if f & mask else "-"
        for letter, mask in (("Z", FLAG_Z), ("N", FLAG_N), ("H", FLAG_H), ("C", FLAG_C))
    )


def format_disassembly_line(instruction: DisassembledInstruction, pc: int) -> str:
    """One disassembly listing line with breakpoint and PC markers."""
    marker = BREAKPOINT_MARKER if instruction.is_breakpoint else " "
    pc_marker = PC_MARKER if instruction.address == pc else " "
    byte_text = "".join(f"{value:02X} " for value in instruction.bytes)
    return (
        f"{marker}{pc_marker} {instruction.address:04X}  "
        f"{byte_text:<9}{instruction.mnemonic:<6} {instruction.operands}"
    )


class DebuggerControls:
    """Pause, step and continue requests driven by the debugger windows."""

    def __init__(self) -> None:
        self.debugger: Optional[Debugger] = None
        self.visible = False
        self.paused = False
        self.step_requested = False
        self.continue_requested = False
        self.docking_mode = False
        self.windows: dict[str, bool] = dict(DEFAULT_WINDOWS)
        self.follow_pc = True
        self.disasm_address = 0x0000

    def attach(self, debugger: Debugger) -> None:
        self.debugger = debugger

    def toggle_visible(self) -> None:
        self.set_visible(not self.visible)

    def set_visible(self, visible: bool) -> None:
        """Showing the debugger pauses; hiding it resumes and drops requests."""
        self.visible = visible
        if visible:
            self.paused = True
        else:
            self.paused = False
            self.clear_execution_requests()

    def should_pause(self) -> bool:
        return self.visible and self.paused

    def request_step(self) -> None:
        self.step_requested = True
        self.continue_requested = False

    def request_step_over(self) -> None:
        """Run over a CALL or RST at PC, or fall back to a single step."""
        if self.debugger is not None and self.debugger.prepare_step_over_for_current_instruction():
            self.continue_requested = True
            self.paused = False
            self.step_requested = False
            return
        self.request_step()

    def clear_step_request(self) -> None:
        self.step_requested = False

    def continue_execution(self) -> None:
        self.continue_requested = True
        self.step_requested = False
        self.paused = False

    def clear_continue(self) -> None:
        self.continue_requested = False

    def clear_execution_requests(self) -> None:
        self.step_requested = False
        self.continue_requested = False

    def pause_execution(self) -> None:
        self.paused = True
        self.continue_requested = False