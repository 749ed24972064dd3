import pytest

from gbglow.sprite_view import (
    NUM_SPRITES,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    read_oam,
    render_sprites,
    sprite_shade,
    visible_sprites,
)

OAM = 0xFE00


@pytest.fixture
def memory():
    mem = {0xFF40: 0x02, 0xFF48: 0xE4, 0xFF49: 0x1B}
    return mem


def reader(mem):
    return lambda address: mem.get(address, 0)


def put_sprite(mem, index, y, x, tile, attributes=0):
    base = OAM + index * 4
    mem[base], mem[base + 1], mem[base + 2], mem[base + 3] = y, x, tile, attributes


def put_tile_row(mem, tile, row, low, high):
    address = 0x8000 + tile * 16 + row * 2
    mem[address] = low
    mem[address + 1] = high


def test_read_oam_decodes_entries(memory):
    put_sprite(memory, 0, 16, 8, 0x05, 0x60)
    sprites = read_oam(reader(memory))
    assert len(sprites) == NUM_SPRITES
    sprite = sprites[0]
    assert (sprite.screen_x, sprite.screen_y, sprite.tile) == (0, 0, 0x05)
    assert sprite.x_flip and sprite.y_flip
    assert not sprite.uses_obp1
    assert [s.index for s in sprites] == list(range(NUM_SPRITES))


def test_sprite_shade_levels():
    assert sprite_shade(0xE4, 0) is None
    assert [sprite_shade(0xE4, index) for index in (1, 2, 3)] == [170, 85, 0]
    assert sprite_shade(0x00, 3) == 255


def test_visible_sprites_in_8x8_mode(memory):
    put_sprite(memory, 3, 16, 8, 0)
    put_sprite(memory, 5, 9, 8, 0)
    put_sprite(memory, 7, 1, 8, 0)
    assert [s.index for s in visible_sprites(reader(memory))] == [3, 5]


def test_visible_sprites_in_8x16_mode(memory):
    memory[0xFF40] = 0x06
    put_sprite(memory, 7, 1, 8, 0)
    assert [s.index for s in visible_sprites(reader(memory))] == [7]


def test_render_empty_layer_is_transparent(memory):
    screen = render_sprites(reader(memory))
    assert len(screen) == SCREEN_HEIGHT
    assert all(len(row) == SCREEN_WIDTH for row in screen)
    assert all(pixel is None for row in screen for pixel in row)


def test_render_draws_tile_pixels(memory):
    put_sprite(memory, 0, 16, 8, 1)
    put_tile_row(memory, 1, 0, 0xFF, 0x00)
    screen = render_sprites(reader(memory))
    assert screen[0][0:8] == [sprite_shade(0xE4, 1)] * 8
    assert screen[0][8] is None
    assert screen[1][0] is None


def test_render_x_flip(memory):
    put_tile_row(memory, 1, 0, 0x80, 0x00)
    put_sprite(memory, 0, 16, 8, 1)
    plain = render_sprites(reader(memory))
    put_sprite(memory, 0, 16, 8, 1, 0x20)
    flipped = render_sprites(reader(memory))
    assert plain[0][0] is not None and plain[0][7] is None
    assert flipped[0][7] == plain[0][0] and flipped[0][0] is None


def test_lower_index_wins_overlap(memory):
    put_sprite(memory, 0, 16, 8, 1)
    put_sprite(memory, 1, 16, 8, 2)
    put_tile_row(memory, 1, 0, 0xFF, 0x00)
    put_tile_row(memory, 2, 0, 0xFF, 0xFF)
    screen = render_sprites(reader(memory))
    assert screen[0][0] == sprite_shade(0xE4, 1)


def test_obp1_palette_selected_by_attribute(memory):
    put_sprite(memory, 0, 16, 8, 1, 0x10)
    put_tile_row(memory, 1, 0, 0xFF, 0x00)
    screen = render_sprites(reader(memory))
    assert screen[0][0] == sprite_shade(0x1B, 1)


def test_8x16_uses_even_tile_and_next(memory):
    memory[0xFF40] = 0x06
    put_sprite(memory, 0, 16, 8, 3)
    put_tile_row(memory, 3, 0, 0xFF, 0x00)
    screen = render_sprites(reader(memory))
    assert screen[8][0] == sprite_shade(0xE4, 1)
    assert screen[0][0] is None


def test_sprite_clipped_at_left_edge(memory):
    put_sprite(memory, 0, 16, 4, 1)
    put_tile_row(memory, 1, 0, 0xFF, 0x00)
    screen = render_sprites(reader(memory))
    drawn = [x for x, pixel in enumerate(screen[0]) if pixel is not None]
    assert drawn == [0, 1, 2, 3]