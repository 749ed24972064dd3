# gbglow

Building blocks for the debugging and front-end side of a Game Boy emulator,
written in plain Python with no dependencies outside the standard library.
Python 3.10 or newer is required.

| Module | What it gives you |
| --- | --- |
| `gbglow.disassembler` | Disassembly of the Game Boy CPU instruction set, including `CB`-prefixed instructions, and memory-map region names |
| `gbglow.debugger` | `Debugger`: breakpoints, single step and step over, memory watches, execution history, disassembly around the PC |
| `gbglow.debugger_controls` | `DebuggerControls`: the pause / step / continue state behind a debugger window, plus `parse_hex_u16`, `format_flags` and `format_disassembly_line` |
| `gbglow.memory_view` | `MemoryView` hex-viewer navigation, `MemoryRow`, `format_memory_row`, `stack_entries` |
| `gbglow.sprite_view` | OAM reading (`read_oam`, `Sprite`), `visible_sprites` and `render_sprites` for the sprite layer |
| `gbglow.screenshot` | `Screenshot` and `encode_png` for saving 160×144 RGBA framebuffers as PNG files |
| `gbglow.recent_roms` | `RecentRoms`: the ten most recently opened ROMs, kept in a JSON file |
| `gbglow.jsonscan` | The small JSON scanner the recent-ROM file is read with |
| `gbglow.textfile` | `write_text_atomically`, replacing a file through a `.tmp` sibling |

## Disassembling code

`disassemble` takes a function that reads one byte from an address, so it
works on a `bytes` object just as well as on a live emulator's memory:

```python
from gbglow.disassembler import disassemble, format_address, memory_region_name

rom = bytes([0x00, 0xC3, 0x50, 0x01, 0xCB, 0x7C])
read = lambda address: rom[address] if address < len(rom) else 0

instruction = disassemble(read, 0x0001, False)
print(instruction.text())          # JP $0150
print(instruction.next_address)    # 4

print(memory_region_name(0xFF44))  # IO
print(format_address(0x0150))      # ROM0:$0150
```

Opcodes the CPU does not define are shown as `DB $xx`.

## Debugging

A `Debugger` is attached to objects you supply: a CPU whose `registers`
attribute has a `pc`, and a memory bus with `read(address)` and
`write(address, value)`. Until memory is attached, reads return 0.

```python
from gbglow.debugger import Debugger

debugger = Debugger()
debugger.attach(cpu, memory, ppu)
debugger.add_breakpoint(0x0150)
debugger.toggle_breakpoint(0xC000)

if debugger.should_break(0x0150):
    ...  # pause the emulator here
```

- `skip_breakpoint_once(pc)` lets execution continue past the breakpoint it
  is paused on.
- Step over is armed only for `CALL` and `RST` instructions;
  `prepare_step_over_for_current_instruction()` returns `False` for anything
  else so the caller can fall back to a single step.
- `add_watch(address, label, break_on_change)` watches a byte;
  `update_watches()` returns `True` when a break-on-change watch changed.
- `record_execution(pc)` keeps a history of at most 1000 entries by default
  (`set_max_history` changes the limit).

`DebuggerControls` wraps a debugger with the flags a user interface needs:
showing it pauses, hiding it resumes, and `request_step_over()` falls back
to a single step when step over cannot be armed. `parse_hex_u16` accepts a
hexadecimal address typed by the user and raises `ValueError` for anything
outside `0..FFFF`.

## Memory, stack and sprite views

```python
from gbglow.memory_view import MemoryView, stack_entries

view = MemoryView()
view.jump_to_region("VRAM")
view.page_forward()
for row in view.rows(read):
    print(row.text())              # 8100: 00 00 ... |................|

print(stack_entries(read, 0xFFFC, 2))
```

`render_sprites(read)` returns the 160×144 sprite layer as rows of grey
levels (255 white to 0 black) with `None` where nothing is drawn, honouring
8×16 mode, flips and the `OBP0`/`OBP1` palettes.

## Screenshots and recent ROMs

`Screenshot.capture(framebuffer, rom_name)` writes a 160×144 RGBA
framebuffer as a PNG file named like `gbglow_My_Game_20250101_120000.png`
in `~/Pictures/gbglow` (or a directory you pass in), and returns its path.
A framebuffer of the wrong size raises `ValueError`.

```python
from gbglow.screenshot import extract_rom_name

print(extract_rom_name("roms/My Game.gb"))  # My_Game
```

`RecentRoms` keeps the ten most recently opened ROMs, newest first, in
`$XDG_CONFIG_HOME/gbglow/recent_roms.json` (or under `~/.config`). Adding or
clearing saves at once; on load, entries whose files no longer exist are
dropped. Used as a context manager it saves unsaved changes on exit.

## What this package does not do

It does not emulate the Game Boy itself: there is no CPU, memory bus, PPU,
sound or cartridge here, and no joypad or game-controller input. It draws no
windows; the debugger and view modules give state and text for a user
interface to show. There is no command-line program.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.