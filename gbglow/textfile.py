"""Writing small text files without leaving half-written results behind."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union


def write_text_atomically(path: Union[str, Path], contents: str) -> None:
    """Replace ``path`` with ``contents`` through a ``.tmp`` sibling file.

    The temporary file is removed again when anything fails, and the
    OSError that caused the failure is raised.
    """
    target = Path(path)
    temp_path = Path(str(target) + ".tmp")
    try:
        with open(temp_path, "w", encoding="utf-8") as handle:
            handle.write(contents)
        os.replace(temp_path, target)
    except OSError:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError:
            pass
        raise