"""Directory swaps used when installing and updating skills."""

from __future__ import annotations

import shutil
from typing import TYPE_CHECKING
from uuid import uuid4

if TYPE_CHECKING:
    from pathlib import Path


def swap_directory(source: Path, target: Path) -> None:
    """Move ``source`` to ``target``, replacing any existing directory there.

    An existing ``target`` is renamed aside first and only deleted once
    ``source`` is in place; if the move fails it is put back.
    """
    if not target.exists():
        shutil.move(source, target)
        return

    backup = target.with_name(f".{target.name}.{uuid4().hex}.old")
    target.rename(backup)
    try:
        shutil.move(source, target)
    except BaseException:
        shutil.rmtree(target, ignore_errors=True)
        backup.rename(target)
        raise
    shutil.rmtree(backup, ignore_errors=True)
