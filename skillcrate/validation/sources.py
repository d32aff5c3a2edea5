"""Classification of install sources.

A source is one of a local path, a git URL or a GitHub ``owner/repo[/path]``
shorthand. The checks run in a fixed order and the first match wins, so
``owner/repo.git`` is a git URL and not a shorthand.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict

from skillcrate.validation.errors import ErrorKind, SkillValidationError

logger = logging.getLogger(__name__)

LOCAL_PATH_PREFIXES = ("/", "./", "../", "~/")
GIT_URL_PREFIXES = ("git@", "git://", "http://", "https://")

_SHORTHAND = re.compile(
    r"([a-zA-Z0-9_-]+)/([a-zA-Z0-9_-]+)(?:/([\w\-./]+))?", re.ASCII
)


class LocalPath(BaseModel):
    """A skill directory on the local filesystem."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["local"] = "local"
    path: str

    def resolve(self) -> Path:
        """Return the absolute path, with ``~`` expanded."""
        return Path(self.path).expanduser().resolve()


class GitUrl(BaseModel):
    """A git repository given by URL."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["git"] = "git"
    url: str

    @property
    def clone_url(self) -> str:
        """URL to hand to ``git clone``."""
        return self.url


class GitHubShorthand(BaseModel):
    """A GitHub repository given as ``owner/repo[/subpath]``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["github"] = "github"
    owner: str
    repo: str
    subpath: str | None = None

    @property
    def clone_url(self) -> str:
        """HTTPS URL of the repository on GitHub."""
        return f"https://github.com/{self.owner}/{self.repo}"


type InstallSource = LocalPath | GitUrl | GitHubShorthand
type RemoteSource = GitUrl | GitHubShorthand


def classify(source: str) -> InstallSource:
    """Classify a raw install source.

    Raises:
        SkillValidationError: ``source`` is neither a local path, a git URL
            nor a GitHub shorthand.
    """
    if source.startswith(LOCAL_PATH_PREFIXES):
        return LocalPath(path=source)

    if source.startswith(GIT_URL_PREFIXES) or source.endswith(".git"):
        return GitUrl(url=source)

    if match := _SHORTHAND.fullmatch(source):
        owner, repo, subpath = match.groups()
        return GitHubShorthand(owner=owner, repo=repo, subpath=subpath)

    raise SkillValidationError(
        ErrorKind.INVALID_SOURCE,
        f"Invalid source format: {source!r} "
        "(expected a local path, a git URL, or owner/repo[/path])",
    )


def is_valid_install_source(source: str) -> bool:
    """Check a raw install source, logging why it was rejected."""
    try:
        classify(source)
    except SkillValidationError as e:
        logger.warning("%s", e)
        return False
    return True
