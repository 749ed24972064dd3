"""Saving the LCD framebuffer as timestamped PNG files."""

from __future__ import annotations

import os
import struct
import zlib
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence, Union

APP_NAME = "gbglow"
SCREENSHOT_DIRECTORY_NAME = "gbglow"
LCD_WIDTH = 160
LCD_HEIGHT = 144
CHANNELS = 4

_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
_COLOR_TYPE_RGBA = 6


def default_screenshot_dir() -> Path:
    """``$HOME/Pictures/gbglow``, or ``./screenshots`` when HOME is unset."""
    home = os.environ.get("HOME")
    if home:
        return Path(home) / "Pictures" / SCREENSHOT_DIRECTORY_NAME
    return Path("screenshots")


def extract_rom_name(rom_path: str) -> str:
    """File name of ``rom_path`` without extension, made safe for file names."""
    name = rom_path.replace("\\", "/").rsplit("/", 1)[-1]
    stem, dot, _ = name.rpartition(".")
    if dot:
        name = stem
    return "".join(
        char if (char.isascii() and char.isalnum()) or char in "_-" else "_" for char in name
    )


def generate_filename(rom_name: str, when: Optional[datetime] = None) -> str:
    """``gbglow_ROMNAME_YYYYMMDD_HHMMSS.png``; the ROM part is left out when empty."""
    when = when or datetime.now()
    parts = [APP_NAME]
    clean = extract_rom_name(rom_name) if rom_name else ""
    if clean:
        parts.append(clean)
    parts.append(when.strftime("%Y%m%d_%H%M%S"))
    return "_".join(parts) + ".png"


def _chunk(kind: bytes, payload: bytes) -> bytes:
    crc = zlib.crc32(kind + payload) & 0xFFFFFFFF
    return struct.pack(">I", len(payload)) + kind + payload + struct.pack(">I", crc)


def encode_png(pixels: Union[bytes, bytearray, Sequence[int]], width: int, height: int) -> bytes:
    """Encode row-major 8-bit RGBA ``pixels`` as a PNG image."""
    data = bytes(pixels)
    stride = width * CHANNELS
    if width <= 0 or height <= 0 or len(data) != stride * height:
        raise ValueError(
            f"invalid RGBA buffer: {len(data)} bytes for {width}x{height} "
            f"(expected {stride * height})"
        )
    raw = b"".join(
        b"\x00" + data[row * stride:(row + 1) * stride] for row in range(height)
    )
    header = struct.pack(">IIBBBBB", width, height, 8, _COLOR_TYPE_RGBA, 0, 0, 0)
    return (
        _PNG_SIGNATURE
        + _chunk(b"IHDR", header)
        + _chunk(b"IDAT", zlib.compress(raw, 9))
        + _chunk(b"IEND", b"")
    )


class Screenshot:
    """Writes LCD framebuffers to PNG files in a screenshot directory."""

    def __init__(self, directory: Union[str, Path, None] = None) -> None:
        self.screenshot_dir = Path(directory) if directory is not None else default_screenshot_dir()
        self._last_path: Optional[Path] = None

    def capture(self, framebuffer: Union[bytes, bytearray, Sequence[int]], rom_name: str) -> Path:
        """Save a 160x144 RGBA framebuffer and return the file written.

        Raises ValueError for a framebuffer of the wrong size and OSError
        when the directory or file cannot be written.
        """
        expected = LCD_WIDTH * LCD_HEIGHT * CHANNELS
        if len(framebuffer) != expected:
            raise ValueError(
                f"invalid framebuffer size: {len(framebuffer)} (expected {expected})"
            )
        image = encode_png(framebuffer, LCD_WIDTH, LCD_HEIGHT)
        self.screenshot_dir.mkdir(parents=True, exist_ok=True)
        path = self.screenshot_dir / generate_filename(rom_name)
        path.write_bytes(image)
        self._last_path = path
        return path

    @property
    def last_screenshot_path(self) -> Optional[Path]:
        """Path of the most recent screenshot, or None if none was taken."""
        return self._last_path