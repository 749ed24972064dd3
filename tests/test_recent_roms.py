import time
from pathlib import Path

import pytest

from gbglow.recent_roms import (
    MAX_RECENT_ROMS,
    RecentRomEntry,
    RecentRoms,
    default_config_dir,
)


def make_rom(directory: Path, name: str) -> str:
    path = directory / name
    path.write_bytes(b"\x00" * 16)
    return str(path)


@pytest.fixture
def config(tmp_path):
    return tmp_path / "config" / "recent.json"


def test_entry_display_name_strips_directories():
    assert RecentRomEntry("/games/gb/tetris.gb", 5).display_name == "tetris.gb"
    assert RecentRomEntry("C:\\roms\\zelda.gbc").display_name == "zelda.gbc"
    assert RecentRomEntry("plain.gb").display_name == "plain.gb"


def test_new_list_is_empty(config):
    roms = RecentRoms(config)
    assert roms.is_empty()
    assert roms.roms == ()


def test_add_rom_puts_newest_first(tmp_path, config):
    first = make_rom(tmp_path, "a.gb")
    second = make_rom(tmp_path, "b.gb")
    roms = RecentRoms(config)
    before = int(time.time())
    roms.add_rom(first)
    roms.add_rom(second)
    paths = [entry.file_path for entry in roms.roms]
    assert paths == [second, first]
    assert all(entry.last_played >= before for entry in roms.roms)
    assert not roms.is_empty()


def test_adding_existing_rom_moves_it_to_front(tmp_path, config):
    first = make_rom(tmp_path, "a.gb")
    second = make_rom(tmp_path, "b.gb")
    roms = RecentRoms(config)
    roms.add_rom(first)
    roms.add_rom(second)
    roms.add_rom(first)
    assert [entry.file_path for entry in roms.roms] == [first, second]


def test_list_is_limited(tmp_path, config):
    roms = RecentRoms(config)
    paths = [make_rom(tmp_path, f"rom{index}.gb") for index in range(MAX_RECENT_ROMS + 3)]
    for path in paths:
        roms.add_rom(path)
    assert len(roms.roms) == MAX_RECENT_ROMS
    assert roms.roms[0].file_path == paths[-1]


def test_saved_list_round_trips(tmp_path, config):
    first = make_rom(tmp_path, "a.gb")
    second = make_rom(tmp_path, 'we"ird\\name.gb')
    roms = RecentRoms(config)
    roms.add_rom(first)
    roms.add_rom(second)
    assert not roms.dirty
    reloaded = RecentRoms(config)
    assert reloaded.roms == roms.roms


def test_saved_file_layout(tmp_path, config):
    rom = make_rom(tmp_path, "a.gb")
    roms = RecentRoms(config)
    roms.add_rom(rom)
    stamp = roms.roms[0].last_played
    expected = (
        '{\n  "roms": [\n    {\n'
        f'      "path": "{rom}",\n'
        f'      "time": {stamp}\n'
        "    }\n  ]\n}\n"
    )
    assert config.read_text() == expected


def test_clear_empties_file(tmp_path, config):
    roms = RecentRoms(config)
    roms.add_rom(make_rom(tmp_path, "a.gb"))
    roms.clear()
    assert roms.is_empty()
    assert config.read_text() == '{\n  "roms": [\n  ]\n}\n'
    assert RecentRoms(config).is_empty()


def test_load_skips_missing_and_duplicate_files(tmp_path, config):
    existing = make_rom(tmp_path, "a.gb")
    missing = str(tmp_path / "gone.gb")
    config.parent.mkdir(parents=True)
    config.write_text(
        '{"roms": ['
        f'{{"path": "{missing}", "time": 1}},'
        f'{{"path": "{existing}", "time": 2}},'
        f'{{"path": "{existing}", "time": 3}},'
        '{"path": "broken"}'
        "]}"
    )
    roms = RecentRoms(config)
    assert roms.roms == (RecentRomEntry(existing, 2),)


def test_load_without_roms_key_keeps_list(tmp_path, config):
    config.parent.mkdir(parents=True)
    config.write_text('{"other": []}')
    assert RecentRoms(config).is_empty()


def test_save_into_unwritable_location_raises(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    roms = RecentRoms(blocker / "recent.json")
    with pytest.raises(OSError):
        roms.save()


def test_failed_save_keeps_changes_pending(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    roms = RecentRoms(blocker / "recent.json")
    roms.add_rom(make_rom(tmp_path, "a.gb"))
    assert roms.dirty
    assert len(roms.roms) == 1


def test_default_config_dir_prefers_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert default_config_dir() == tmp_path / "gbglow"


def test_default_config_dir_uses_home(monkeypatch, tmp_path):
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    assert default_config_dir() == tmp_path / ".config" / "gbglow"


def test_default_config_dir_without_home(monkeypatch):
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.delenv("HOME", raising=False)
    assert default_config_dir() == Path(".") / "gbglow"