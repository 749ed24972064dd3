"""Game Boy (SM83) instruction disassembly and memory-map naming."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

ReadByte = Callable[[int], int]

_REGISTERS_8 = ("B", "C", "D", "E", "H", "L", "(HL)", "A")
_PAIRS = ("BC", "DE", "HL", "SP")
_CB_ROTATES = ("RLC", "RRC", "RL", "RR", "SLA", "SRA", "SWAP", "SRL")
_ALU_PREFIXES = ("ADD A, ", "ADC A, ", "SUB ", "SBC A, ", "AND ", "XOR ", "OR ", "CP ")

_STEP_OVER_OPCODES = frozenset(
    {0xC4, 0xCC, 0xCD, 0xD4, 0xDC, 0xC7, 0xCF, 0xD7, 0xDF, 0xE7, 0xEF, 0xF7, 0xFF}
)

_UNDEFINED_OPCODES = frozenset(
    {0xD3, 0xDB, 0xDD, 0xE3, 0xE4, 0xEB, 0xEC, 0xED, 0xF4, 0xFC, 0xFD}
)

_MEMORY_REGIONS = (
    (0x4000, "ROM0"),
    (0x8000, "ROM1"),
    (0xA000, "VRAM"),
    (0xC000, "ERAM"),
    (0xD000, "WRAM0"),
    (0xE000, "WRAM1"),
    (0xFE00, "ECHO"),
    (0xFEA0, "OAM"),
    (0xFF00, "----"),
    (0xFF80, "IO"),
    (0xFFFF, "HRAM"),
)


def _build_fixed() -> dict[int, str]:
    table = {
        0x00: "NOP",
        0x02: "LD (BC), A",
        0x12: "LD (DE), A",
        0x22: "LD (HL+), A",
        0x32: "LD (HL-), A",
        0x0A: "LD A, (BC)",
        0x1A: "LD A, (DE)",
        0x2A: "LD A, (HL+)",
        0x3A: "LD A, (HL-)",
        0x07: "RLCA",
        0x0F: "RRCA",
        0x17: "RLA",
        0x1F: "RRA",
        0x27: "DAA",
        0x2F: "CPL",
        0x37: "SCF",
        0x3F: "CCF",
        0x76: "HALT",
        0xC0: "RET NZ",
        0xC8: "RET Z",
        0xD0: "RET NC",
        0xD8: "RET C",
        0xC9: "RET",
        0xD9: "RETI",
        0xE9: "JP HL",
        0xE2: "LDH (C), A",
        0xF2: "LDH A, (C)",
        0xF9: "LD SP, HL",
        0xF3: "DI",
        0xFB: "EI",
    }
    for index, pair in enumerate(_PAIRS):
        table[0x03 + 16 * index] = f"INC {pair}"
        table[0x0B + 16 * index] = f"DEC {pair}"
        table[0x09 + 16 * index] = f"ADD HL, {pair}"
    for index, pair in enumerate(("BC", "DE", "HL", "AF")):
        table[0xC1 + 16 * index] = f"POP {pair}"
        table[0xC5 + 16 * index] = f"PUSH {pair}"
    for index, name in enumerate(_REGISTERS_8):
        table[0x04 + 8 * index] = f"INC {name}"
        table[0x05 + 8 * index] = f"DEC {name}"
    for vector in range(8):
        table[0xC7 + 8 * vector] = f"RST ${vector * 8:02X}"
    for opcode in range(0x40, 0x80):
        if opcode != 0x76:
            table[opcode] = f"LD {_REGISTERS_8[(opcode >> 3) & 7]}, {_REGISTERS_8[opcode & 7]}"
    for opcode in range(0x80, 0xC0):
        table[opcode] = _ALU_PREFIXES[(opcode >> 3) & 7] + _REGISTERS_8[opcode & 7]
    return table


def _build_imm8() -> dict[int, str]:
    table = {
        0xE0: "LDH ({}), A",
        0xF0: "LDH A, ({})",
        0xE8: "ADD SP, {}",
        0xF8: "LD HL, SP+{}",
    }
    for index, name in enumerate(_REGISTERS_8):
        table[0x06 + 8 * index] = f"LD {name}, {{}}"
    for index, prefix in enumerate(_ALU_PREFIXES):
        table[0xC6 + 8 * index] = prefix + "{}"
    return table


def _build_imm16() -> dict[int, str]:
    table = {
        0x08: "LD ({}), SP",
        0xC2: "JP NZ, {}",
        0xCA: "JP Z, {}",
        0xD2: "JP NC, {}",
        0xDA: "JP C, {}",
        0xC3: "JP {}",
        0xC4: "CALL NZ, {}",
        0xCC: "CALL Z, {}",
        0xD4: "CALL NC, {}",
        0xDC: "CALL C, {}",
        0xCD: "CALL {}",
        0xEA: "LD ({}), A",
        0xFA: "LD A, ({})",
    }
    for index, pair in enumerate(_PAIRS):
        table[0x01 + 16 * index] = f"LD {pair}, {{}}"
    return table


_FIXED = _build_fixed()
_IMM8 = _build_imm8()
_IMM16 = _build_imm16()
_RELATIVE = {
    0x18: "JR {}",
    0x20: "JR NZ, {}",
    0x28: "JR Z, {}",
    0x30: "JR NC, {}",
    0x38: "JR C, {}",
}


@dataclass(frozen=True)
class DisassembledInstruction:
    """One decoded instruction and where the next one starts."""

    address: int
    bytes: tuple[int, ...]
    mnemonic: str
    operands: str
    next_address: int
    is_breakpoint: bool = False

    def text(self) -> str:
        """The instruction as a single line of assembly."""
        return f"{self.mnemonic} {self.operands}" if self.operands else self.mnemonic


def register_name(index: int) -> str:
    """Name of the 8-bit operand encoded by the low three bits of ``index``."""
    return _REGISTERS_8[index & 0x07]


def disassemble_cb(opcode: int) -> str:
    """Text of a CB-prefixed instruction."""
    reg_name = register_name(opcode)
    bit = (opcode >> 3) & 0x07
    op_type = (opcode >> 6) & 0x03
    if op_type == 0:
        return f"{_CB_ROTATES[bit]} {reg_name}"
    return f"{('BIT', 'RES', 'SET')[op_type - 1]} {bit}, {reg_name}"


def _hex8(value: int) -> str:
    return f"${value & 0xFF:02X}"


def _hex16(value: int) -> str:
    return f"${value & 0xFFFF:04X}"


def disassemble(read: ReadByte, address: int, is_breakpoint: bool = False) -> DisassembledInstruction:
    """Decode the instruction at ``address`` using ``read`` to fetch bytes."""
    address &= 0xFFFF
    opcode = read(address) & 0xFF
    data = [opcode]
    cursor = (address + 1) & 0xFFFF

    def fetch() -> int:
        nonlocal cursor
        value = read(cursor) & 0xFF
        cursor = (cursor + 1) & 0xFFFF
        data.append(value)
        return value

    if opcode in _FIXED:
        text = _FIXED[opcode]
    elif opcode in _IMM8:
        text = _IMM8[opcode].format(_hex8(fetch()))
    elif opcode in _IMM16:
        low = fetch()
        high = fetch()
        text = _IMM16[opcode].format(_hex16((high << 8) | low))
    elif opcode in _RELATIVE:
        offset = fetch()
        if offset >= 0x80:
            offset -= 0x100
        text = _RELATIVE[opcode].format(_hex16(cursor + offset))
    elif opcode == 0x10:
        fetch()
        text = "STOP"
    elif opcode == 0xCB:
        text = disassemble_cb(fetch())
    else:
        text = f"DB {_hex8(opcode)}"

    mnemonic, _, operands = text.partition(" ")
    return DisassembledInstruction(
        address=address,
        bytes=tuple(data),
        mnemonic=mnemonic,
        operands=operands,
        next_address=cursor,
        is_breakpoint=is_breakpoint,
    )


def is_step_over_opcode(opcode: int) -> bool:
    """True for CALL and RST opcodes, which step-over runs to completion."""
    return opcode in _STEP_OVER_OPCODES


def is_undefined_opcode(opcode: int) -> bool:
    """True for opcodes that the CPU does not define."""
    return opcode in _UNDEFINED_OPCODES


def memory_region_name(address: int) -> str:
    """Short name of the memory-map region that holds ``address``."""
    for limit, name in _MEMORY_REGIONS:
        if address < limit:
            return name
    return "IE"


def format_address(address: int) -> str:
    """Address prefixed with its region name, e.g. ``ROM0:$0100``."""
    return f"{memory_region_name(address)}:{_hex16(address)}"