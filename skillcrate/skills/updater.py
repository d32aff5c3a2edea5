"""Update installed skills from their git sources."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

from skillcrate.skills.discovery import SkillDirectories, find_all_skills
from skillcrate.skills.git import GitCommandError, GitExecutor
from skillcrate.skills.metadata import MetadataStore
from skillcrate.skills.models import Skill, SkillMetadata
from skillcrate.validation.errors import ErrorKind, SkillValidationError
from skillcrate.validation.lexical import (
    validate_git_url,
    validate_skill_name,
    validate_skill_subpath,
)
from skillcrate.validation.paths import ensure_contained
from skillcrate.validation.sources import GitHubShorthand, GitUrl, classify

logger = logging.getLogger(__name__)

type SkillSelector = Callable[[list[Skill]], list[Skill]]
type Confirmer = Callable[[str], bool]


class PromptCancelledError(Exception):
    """The user aborted an interactive prompt."""


class MetadataReader(Protocol):
    """Read access to skill metadata."""

    def get_metadata(self, skill_path: Path) -> SkillMetadata | None:
        """Return the metadata of a skill, ``None`` when absent or invalid."""
        ...


class SkillReplacer(Protocol):
    """Fetches a fresh copy of a skill over the installed one."""

    async def replace_skill(self, url: str, subpath: str, destination: Path) -> None:
        """Replace ``destination`` with ``subpath`` of the repository at ``url``."""
        ...


@dataclass
class UpdateOptions:
    """Flags of the update command."""

    all: bool = False
    """Update every updateable skill without asking which."""

    yes: bool = False
    """Skip both the selection and the confirmation."""


@dataclass
class UpdateSummary:
    """Outcome of an update run."""

    updated: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        """Number of skills updated."""
        return len(self.updated)

    @property
    def fail_count(self) -> int:
        """Number of skills that failed to update."""
        return len(self.failed)


def is_updateable(skill: Skill, store: MetadataReader) -> bool:
    """Check whether a skill was installed from a git source."""
    metadata = store.get_metadata(skill.path)
    if metadata is None or not metadata.source:
        return False

    try:
        source = classify(metadata.source)
    except SkillValidationError:
        return False
    return isinstance(source, GitUrl | GitHubShorthand)


def _select_all(skills: list[Skill]) -> list[Skill]:
    return skills


def _refuse(_message: str) -> bool:
    return False


class SkillUpdater:
    """Drive updates of installed skills, one skill at a time."""

    def __init__(
        self,
        *,
        directories: SkillDirectories | None = None,
        discover: Callable[[], list[Skill]] | None = None,
        store: MetadataStore | None = None,
        executor: SkillReplacer | None = None,
        select: SkillSelector = _select_all,
        confirm: Confirmer = _refuse,
    ) -> None:
        """Initialize the updater.

        Args:
            directories: Install roots; skills must stay inside them.
            discover: Returns the installed skills.
            store: Metadata of installed skills.
            executor: Performs the clone and swap.
            select: Asks the user which skills to update.
            confirm: Asks the user to confirm the update.
        """
        self._directories = directories or SkillDirectories()
        self._discover = discover or (lambda: find_all_skills(self._directories))
        self._store = store or MetadataStore()
        self._executor = executor or GitExecutor()
        self._select = select
        self._confirm = confirm

    def _plan(self, skill: Skill, metadata: SkillMetadata) -> tuple[str, str, Path]:
        """Validate everything handed to the executor for one skill."""
        if not metadata.source:
            raise SkillValidationError(
                ErrorKind.INVALID_SOURCE, "No source information found"
            )

        source = classify(metadata.source)
        if not isinstance(source, GitUrl | GitHubShorthand):
            raise SkillValidationError(
                ErrorKind.INVALID_SOURCE,
                f"Source is not a git repository: {metadata.source!r}",
            )
        url = validate_git_url(source.clone_url)

        if metadata.subpath is not None:
            subpath = metadata.subpath
        elif isinstance(source, GitHubShorthand):
            subpath = source.subpath or ""
        else:
            subpath = ""
        subpath = validate_skill_subpath(subpath)

        if not validate_skill_name(skill.path.name):
            raise SkillValidationError(
                ErrorKind.INVALID_CHARACTERS, f"Invalid skill name: {skill.path.name!r}"
            )
        root = self._directories.root_for(skill.location)
        destination = ensure_contained(skill.path, root)
        if destination == ensure_contained(root, root):
            raise SkillValidationError(
                ErrorKind.OUTSIDE_ROOT, f"Refusing to replace the skill root {root}"
            )

        return url, subpath, destination

    async def update_skill(self, skill: Skill) -> bool:
        """Update one skill; failures are logged and reported as ``False``."""
        metadata = self._store.get_metadata(skill.path)
        if metadata is None or not metadata.source:
            logger.error("Cannot update %s: No source information found", skill.name)
            return False

        try:
            url, subpath, destination = self._plan(skill, metadata)
        except SkillValidationError as e:
            logger.error("Cannot update %s: %s", skill.name, e)  # noqa: TRY400
            return False

        logger.info("Updating %s from %s", skill.name, url)
        try:
            await self._executor.replace_skill(url, subpath, destination)
        except GitCommandError as e:
            logger.error("Failed to update %s: %s", skill.name, e)  # noqa: TRY400
            if e.stderr:
                logger.error("%s", e.stderr)  # noqa: TRY400
            return False
        except (SkillValidationError, OSError):
            logger.exception("Failed to update %s", skill.name)
            return False

        try:
            self._store.set_metadata(
                destination,
                metadata.model_copy(update={"last_updated": datetime.now(UTC)}),
            )
        except OSError:
            logger.exception("Updated %s but failed to write metadata", skill.name)

        return True

    async def update_skills(self, options: UpdateOptions) -> UpdateSummary | None:
        """Update the installed skills chosen by ``options`` and the user.

        Returns:
            The summary, or ``None`` when there was nothing to update or the
            user cancelled.
        """
        all_skills = self._discover()
        if not all_skills:
            logger.info("No skills installed.")
            return None

        updateable = [s for s in all_skills if is_updateable(s, self._store)]
        if not updateable:
            logger.info("No updateable skills found.")
            return None

        logger.info(
            "Found %s updateable skill(s) (%s local/manual)",
            len(updateable),
            len(all_skills) - len(updateable),
        )

        to_update = updateable
        if not options.all and not options.yes:
            to_update = self._select(updateable)
            if not to_update:
                logger.info("No skills selected. Update cancelled.")
                return None

        if not options.yes and not self._confirm(
            f"Update {len(to_update)} skill(s)? This will overwrite local changes."
        ):
            logger.info("Update cancelled.")
            return None

        summary = UpdateSummary()
        for skill in to_update:
            if await self.update_skill(skill):
                summary.updated.append(skill.name)
            else:
                summary.failed.append(skill.name)

        logger.info(
            "Update complete: %s updated, %s failed",
            summary.success_count,
            summary.fail_count,
        )
        return summary
