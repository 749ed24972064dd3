"""Reading OAM and drawing the sprite layer as the debugger shows it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

ReadByte = Callable[[int], int]

REG_LCDC = 0xFF40
REG_LY = 0xFF44
REG_OBP0 = 0xFF48
REG_OBP1 = 0xFF49

OAM_BASE = 0xFE00
TILE_DATA = 0x8000
NUM_SPRITES = 40
SPRITE_WIDTH = 8
TILE_SIZE_BYTES = 16
TILE_BYTES_PER_ROW = 2
PIXELS_PER_TILE_ROW = 8

SCREEN_WIDTH = 160
SCREEN_HEIGHT = 144

LCDC_OBJ_ENABLE = 0x02
LCDC_OBJ_SIZE = 0x04
ATTR_Y_FLIP = 0x40
ATTR_X_FLIP = 0x20
ATTR_PALETTE = 0x10
TILE_NUM_MASK_8X16 = 0xFE
SHADE_MASK = 0x03

_SHADES = (255, 170, 85, 0)


@dataclass(frozen=True)
class Sprite:
    """One OAM entry."""

    index: int
    y: int
    x: int
    tile: int
    attributes: int

    @property
    def screen_x(self) -> int:
        return self.x - SPRITE_WIDTH

    @property
    def screen_y(self) -> int:
        return self.y - 16

    @property
    def x_flip(self) -> bool:
        return bool(self.attributes & ATTR_X_FLIP)

    @property
    def y_flip(self) -> bool:
        return bool(self.attributes & ATTR_Y_FLIP)

    @property
    def uses_obp1(self) -> bool:
        return bool(self.attributes & ATTR_PALETTE)

    def is_on_screen(self, height: int) -> bool:
        return (
            -height < self.screen_y < SCREEN_HEIGHT
            and -SPRITE_WIDTH < self.screen_x < SCREEN_WIDTH
        )


def read_oam(read: ReadByte) -> list[Sprite]:
    """All 40 OAM entries in index order."""
    sprites = []
    for index in range(NUM_SPRITES):
        base = OAM_BASE + index * 4
        y, x, tile, attributes = (read(base + offset) & 0xFF for offset in range(4))
        sprites.append(Sprite(index, y, x, tile, attributes))
    return sprites


def sprites_enabled(read: ReadByte) -> bool:
    return bool(read(REG_LCDC) & LCDC_OBJ_ENABLE)


def sprite_height(read: ReadByte) -> int:
    """16 in 8x16 mode, otherwise 8."""
    return 16 if read(REG_LCDC) & LCDC_OBJ_SIZE else 8


def sprite_shade(palette: int, color_index: int) -> Optional[int]:
    """Grey level (255 white .. 0 black) of a sprite colour; None for transparent."""
    if color_index == 0:
        return None
    return _SHADES[(palette >> (color_index * 2)) & SHADE_MASK]


def visible_sprites(read: ReadByte) -> list[Sprite]:
    """Sprites at least partly on screen, in OAM order."""
    height = sprite_height(read)
    return [sprite for sprite in read_oam(read) if sprite.is_on_screen(height)]


def render_sprites(read: ReadByte) -> list[list[Optional[int]]]:
    """The 160x144 sprite layer as rows of grey levels, None where transparent.

    Lower OAM indexes are drawn last and so win where sprites overlap.
    """
    height = sprite_height(read)
    large = height == 16
    palettes = (read(REG_OBP0) & 0xFF, read(REG_OBP1) & 0xFF)
    screen: list[list[Optional[int]]] = [
        [None] * SCREEN_WIDTH for _ in range(SCREEN_HEIGHT)
    ]

    for sprite in reversed(read_oam(read)):
        if not sprite.is_on_screen(height):
            continue
        tile = sprite.tile & TILE_NUM_MASK_8X16 if large else sprite.tile
        palette = palettes[1] if sprite.uses_obp1 else palettes[0]
        for tile_row in range(height):
            py = sprite.screen_y + tile_row
            if not 0 <= py < SCREEN_HEIGHT:
                continue
            actual_row = height - 1 - tile_row if sprite.y_flip else tile_row
            current_tile = (tile + (1 if actual_row >= 8 else 0)) & 0xFF
            tile_addr = (
                TILE_DATA
                + current_tile * TILE_SIZE_BYTES
                + (actual_row & 7) * TILE_BYTES_PER_ROW
            )
            low = read(tile_addr) & 0xFF
            high = read(tile_addr + 1) & 0xFF
            for px in range(SPRITE_WIDTH):
                pix_x = sprite.screen_x + px
                if not 0 <= pix_x < SCREEN_WIDTH:
                    continue
                bit = px if sprite.x_flip else PIXELS_PER_TILE_ROW - 1 - px
                color_index = ((low >> bit) & 1) | (((high >> bit) & 1) << 1)
                if color_index:
                    screen[py][pix_x] = sprite_shade(palette, color_index)
    return screen