"""Game Boy disassembler, debugger, memory and sprite views, screenshots and recent ROMs."""

__version__ = "0.1.0"

__all__ = [
    "debugger",
    "debugger_controls",
    "disassembler",
    "jsonscan",
    "memory_view",
    "recent_roms",
    "screenshot",
    "sprite_view",
    "textfile",
]