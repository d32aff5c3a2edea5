"""Path containment checks."""

from __future__ import annotations

import os
from pathlib import Path

from skillcrate.validation.errors import ErrorKind, SkillValidationError


def is_contained(candidate: str | os.PathLike[str], root: str | os.PathLike[str]) -> bool:
    """Check that ``candidate`` is ``root`` itself or lies below it.

    Both paths are made absolute and ``.``/``..`` are resolved lexically;
    symlinks on disk are not followed. The prefix test includes the
    separator, so ``/a/skills-evil`` is not inside ``/a/skills``.
    """
    resolved_candidate = os.path.abspath(candidate)
    resolved_root = os.path.abspath(root)

    if resolved_candidate == resolved_root:
        return True

    prefix = (
        resolved_root if resolved_root.endswith(os.sep) else resolved_root + os.sep
    )
    return resolved_candidate.startswith(prefix)


def ensure_contained(
    candidate: str | os.PathLike[str], root: str | os.PathLike[str]
) -> Path:
    """Return the normalized ``candidate`` or raise if it escapes ``root``.

    Raises:
        SkillValidationError: ``candidate`` is outside ``root``.
    """
    if not is_contained(candidate, root):
        raise SkillValidationError(
            ErrorKind.OUTSIDE_ROOT,
            f"Path {os.fspath(candidate)!r} is outside of {os.fspath(root)!r}",
        )
    return Path(os.path.abspath(candidate))


def ensure_not_linked_outside(
    candidate: str | os.PathLike[str], root: str | os.PathLike[str]
) -> Path:
    """Return ``candidate`` if it is a real directory entry that stays in ``root``.

    Unlike :func:`ensure_contained` this looks at the filesystem: ``candidate``
    must not itself be a symlink, and after following every symlink on the
    way it must still resolve inside ``root``.

    Raises:
        SkillValidationError: ``candidate`` is a symlink or resolves outside
            ``root``.
    """
    path = Path(candidate)
    if path.is_symlink() or not is_contained(path.resolve(), Path(root).resolve()):
        raise SkillValidationError(
            ErrorKind.OUTSIDE_ROOT,
            f"Path {os.fspath(candidate)!r} is a symlink or links outside of "
            f"{os.fspath(root)!r}",
        )
    return path
