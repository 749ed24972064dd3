"""The list of recently opened ROM files, kept in a small JSON file."""

from __future__ import annotations

import logging
import os
import re
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from .jsonscan import (
    escape_json_string,
    extract_integer_value,
    extract_string_value,
    find_matching_delimiter,
)
from .textfile import write_text_atomically

logger = logging.getLogger(__name__)

CONFIG_DIRECTORY_NAME = "gbglow"
RECENT_ROMS_FILE_NAME = "recent_roms.json"
MAX_RECENT_ROMS = 10

_PATH_SEPARATORS = re.compile(r"[/\\]")


def default_config_dir() -> Path:
    """``$XDG_CONFIG_HOME/gbglow``, else ``$HOME/.config/gbglow``, else ``./gbglow``."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config is not None:
        base = xdg_config
    else:
        home = os.environ.get("HOME")
        base = f"{home}/.config" if home is not None else "."
    return Path(f"{base}/{CONFIG_DIRECTORY_NAME}")


@dataclass
class RecentRomEntry:
    """A ROM file and when it was last played (seconds since the epoch)."""

    file_path: str
    last_played: int = 0
    display_name: str = field(init=False)

    def __post_init__(self) -> None:
        self.display_name = _PATH_SEPARATORS.split(self.file_path)[-1]


def _parse_entry(object_text: str) -> Optional[RecentRomEntry]:
    path = extract_string_value(object_text, "path")
    if path is None:
        return None
    played = extract_integer_value(object_text, "time")
    if played is None:
        return None
    return RecentRomEntry(path, played)


def _file_exists(path: str) -> bool:
    try:
        return os.path.exists(path)
    except (OSError, ValueError):
        return False


class RecentRoms:
    """Recently opened ROMs, newest first, persisted across sessions.

    Used as a context manager, unsaved changes are written on exit.
    """

    def __init__(
        self,
        config_path: Union[str, Path, None] = None,
        max_entries: int = MAX_RECENT_ROMS,
    ) -> None:
        self.config_path = (
            Path(config_path)
            if config_path is not None
            else default_config_dir() / RECENT_ROMS_FILE_NAME
        )
        self.max_entries = max_entries
        self._roms: list[RecentRomEntry] = []
        self._dirty = False
        self.load()

    def __enter__(self) -> RecentRoms:
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self._dirty:
            self._save_or_warn()

    @property
    def dirty(self) -> bool:
        """True when the list has changes that were not saved."""
        return self._dirty

    def add_rom(self, rom_path: str) -> None:
        """Put ``rom_path`` at the top of the list with the current time and save."""
        self._roms = [entry for entry in self._roms if entry.file_path != rom_path]
        self._roms.insert(0, RecentRomEntry(rom_path, int(time.time())))
        del self._roms[self.max_entries:]
        self._dirty = True
        self._save_or_warn()

    @property
    def roms(self) -> tuple[RecentRomEntry, ...]:
        """The recent ROMs, newest first."""
        return tuple(self._roms)

    def clear(self) -> None:
        self._roms.clear()
        self._dirty = True
        self._save_or_warn()

    def is_empty(self) -> bool:
        return not self._roms

    def load(self) -> None:
        """Read the list from disk, keeping only existing, distinct files.

        A missing or unrecognisable file leaves the list unchanged.
        """
        try:
            contents = self.config_path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return

        roms_key = contents.find('"roms"')
        if roms_key == -1:
            return
        array_start = contents.find("[", roms_key)
        if array_start == -1:
            return
        array_end = find_matching_delimiter(contents, array_start, "[", "]")
        if array_end is None or array_end <= array_start:
            return

        parsed: list[RecentRomEntry] = []
        seen: set[str] = set()
        pos = array_start
        while True:
            object_start = contents.find("{", pos)
            if object_start == -1 or object_start >= array_end:
                break
            object_end = find_matching_delimiter(contents, object_start, "{", "}")
            if object_end is None or object_end > array_end:
                break
            entry = _parse_entry(contents[object_start:object_end + 1])
            if (
                entry is not None
                and _file_exists(entry.file_path)
                and entry.file_path not in seen
            ):
                seen.add(entry.file_path)
                parsed.append(entry)
                if len(parsed) >= self.max_entries:
                    break
            pos = object_end + 1

        self._roms = parsed
        self._dirty = False

    def save(self) -> None:
        """Write the list to disk; raises OSError when that fails."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        entries = [
            "    {\n"
            f'      "path": "{escape_json_string(entry.file_path)}",\n'
            f'      "time": {entry.last_played}\n'
            "    }"
            for entry in self._roms
        ]
        body = ",\n".join(entries)
        contents = '{\n  "roms": [\n' + (body + "\n" if body else "") + "  ]\n}\n"
        write_text_atomically(self.config_path, contents)
        self._dirty = False

    def _save_or_warn(self) -> None:
        try:
            self.save()
        except OSError as error:
            logger.warning("Could not save recent ROMs to %s: %s", self.config_path, error)