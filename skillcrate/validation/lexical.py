"""Lexical checks for git URLs, skill subpaths and skill names.

Every string checked here ends up in a subprocess argument or a filesystem
path, so the rules are allow-lists and anything unexpected is rejected.
"""

# ruff: noqa: PLR2004

from __future__ import annotations

import re
from typing import NamedTuple

from skillcrate.validation.errors import ErrorKind, SkillValidationError

ALLOWED_PROTOCOLS = ("https", "http", "git", "ssh")

# Shell metacharacters that must never reach a git invocation.
DANGEROUS_CHARS = re.compile(r"[`$(){};&|<>\\]")

_SCHEME = re.compile(r"([A-Za-z][A-Za-z0-9+.-]*):(.*)", re.DOTALL)
_AUTHORITY = re.compile(r"//([^/?#]*)")
_SSH_URL = re.compile(r"git@[a-zA-Z0-9.-]+:[a-zA-Z0-9/_.-]+")

_SUBPATH_CHARS = re.compile(r"[a-zA-Z0-9/_.-]+")
_REPEATED_SLASHES = re.compile(r"/+")
_EDGE_SLASH = re.compile(r"^/|/$")

_NAME_INVALID_CHARS = re.compile(r"[^a-z0-9-]")
_REPEATED_HYPHENS = re.compile(r"-+")


class UrlShape(NamedTuple):
    """Scheme and remainder of a string that looks like a URL."""

    scheme: str
    rest: str


def parse_url_shape(raw: str) -> UrlShape | None:
    """Return the scheme of ``raw`` if it has the shape of a URL.

    ``http`` and ``https`` additionally need an authority with a host, the
    way a browser URL parser refuses ``https://`` or ``https://a b``.
    """
    match = _SCHEME.fullmatch(raw)
    if match is None:
        return None

    scheme = match.group(1).lower()
    rest = match.group(2)
    if scheme in ("http", "https"):
        authority = _AUTHORITY.match(rest)
        if authority is None:
            return None
        host = authority.group(1).rpartition("@")[2]
        if not host or any(c.isspace() for c in host):
            return None

    return UrlShape(scheme, rest)


def validate_git_url(url: str) -> str:
    """Validate that a git URL is safe to hand to ``git clone``.

    Returns:
        The URL, unchanged.

    Raises:
        SkillValidationError: The protocol is not allowed, the URL carries
            shell metacharacters, or it is neither a URL nor an SSH
            ``git@host:path`` reference.
    """
    shape = parse_url_shape(url)

    if shape is not None:
        if shape.scheme not in ALLOWED_PROTOCOLS:
            allowed = ", ".join(f"{p}:" for p in ALLOWED_PROTOCOLS)
            raise SkillValidationError(
                ErrorKind.INVALID_PROTOCOL,
                f"Invalid protocol: {shape.scheme}:. Allowed: {allowed}",
            )
        if DANGEROUS_CHARS.search(url):
            raise SkillValidationError(
                ErrorKind.COMMAND_INJECTION,
                "Invalid characters in git URL: potential command injection detected",
            )
        return url

    if url.startswith("git@"):
        if _SSH_URL.fullmatch(url) is None or DANGEROUS_CHARS.search(url):
            raise SkillValidationError(
                ErrorKind.MALFORMED_SSH, f"Invalid SSH git URL format: {url!r}"
            )
        return url

    if DANGEROUS_CHARS.search(url):
        raise SkillValidationError(
            ErrorKind.COMMAND_INJECTION,
            "Invalid characters in git URL: potential command injection detected",
        )
    raise SkillValidationError(ErrorKind.MALFORMED_URL, f"Invalid URL: {url!r}")


def validate_skill_subpath(subpath: str) -> str:
    """Validate and normalize a path inside a skill repository.

    The traversal, absolute and hidden checks run on the raw string, before
    any normalization.

    Returns:
        The normalized subpath, ``""`` for the repository root.

    Raises:
        SkillValidationError: The subpath could escape the repository or
            contains characters outside ``[a-zA-Z0-9/_.-]``.
    """
    if ".." in subpath:
        raise SkillValidationError(
            ErrorKind.PATH_TRAVERSAL,
            "Invalid skill subpath: path traversal detected (..)",
        )

    if subpath.startswith("/"):
        raise SkillValidationError(
            ErrorKind.ABSOLUTE_PATH,
            "Invalid skill subpath: absolute paths not allowed",
        )

    if subpath.startswith("."):
        raise SkillValidationError(
            ErrorKind.HIDDEN_PATH,
            "Invalid skill subpath: hidden paths not allowed",
        )

    normalized = _EDGE_SLASH.sub("", _REPEATED_SLASHES.sub("/", subpath))
    if normalized == "":
        return normalized

    if _SUBPATH_CHARS.fullmatch(normalized) is None:
        raise SkillValidationError(
            ErrorKind.INVALID_CHARACTERS,
            "Invalid skill subpath: contains invalid characters",
        )

    return normalized


def validate_skill_name(name: str) -> bool:
    """Check that a skill name is safe to use as a directory name."""
    if ".." in name or "/" in name or "\\" in name:
        return False

    if name.startswith("."):
        return False

    return 0 < len(name) <= 100


def sanitize_skill_name(name: str) -> str:
    """Turn any string into a lowercase, hyphen separated skill name.

    Never fails; the result is empty when ``name`` has nothing usable.
    """
    lowered = name.lower()
    hyphenated = _REPEATED_HYPHENS.sub("-", _NAME_INVALID_CHARS.sub("-", lowered))
    return hyphenated.strip("-")
