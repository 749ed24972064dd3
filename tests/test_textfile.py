from pathlib import Path

import pytest

from gbglow.textfile import write_text_atomically


def test_writes_new_file(tmp_path: Path) -> None:
    target = tmp_path / "settings.cfg"
    write_text_atomically(target, "gamepad_a=A\n")
    assert target.read_text(encoding="utf-8") == "gamepad_a=A\n"


def test_overwrites_existing_file(tmp_path: Path) -> None:
    target = tmp_path / "recent.json"
    target.write_text("old contents that are longer", encoding="utf-8")
    write_text_atomically(target, "new")
    assert target.read_text(encoding="utf-8") == "new"


def test_accepts_string_path_and_leaves_no_temp(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    write_text_atomically(str(target), "line one\nline two\n")
    assert target.read_text(encoding="utf-8") == "line one\nline two\n"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["file.txt"]


def test_unicode_round_trip(tmp_path: Path) -> None:
    target = tmp_path / "names.txt"
    text = "Pokémon ● ► ROM"
    write_text_atomically(target, text)
    assert target.read_text(encoding="utf-8") == text


def test_missing_directory_raises(tmp_path: Path) -> None:
    target = tmp_path / "missing" / "file.txt"
    with pytest.raises(OSError):
        write_text_atomically(target, "data")
    assert not (tmp_path / "missing").exists()


def test_failed_rename_removes_temp(tmp_path: Path) -> None:
    target = tmp_path / "occupied"
    target.mkdir()
    (target / "inside").write_text("x", encoding="utf-8")
    with pytest.raises(OSError):
        write_text_atomically(target, "data")
    assert not Path(str(target) + ".tmp").exists()
    assert target.is_dir()