"""Install skills from local paths, git URLs and GitHub shorthands."""

# ruff: noqa: PLR0913

from __future__ import annotations

import logging
import shutil
import tempfile
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from skillcrate.skills.fsops import swap_directory
from skillcrate.skills.git import GitExecutor
from skillcrate.skills.metadata import MetadataStore
from skillcrate.skills.models import SkillMetadata
from skillcrate.skills.skill_md import SKILL_FILE, SkillDocumentError, read_skill_document
from skillcrate.validation.errors import ErrorKind, SkillValidationError
from skillcrate.validation.lexical import (
    sanitize_skill_name,
    validate_git_url,
    validate_skill_name,
    validate_skill_subpath,
)
from skillcrate.validation.paths import ensure_contained, ensure_not_linked_outside
from skillcrate.validation.schema import check_skill_frontmatter
from skillcrate.validation.sources import GitHubShorthand, LocalPath, classify

logger = logging.getLogger(__name__)


class InstallError(Exception):
    """The source holds nothing that can be installed."""


@dataclass
class InstallResult:
    """Names of the skills handled by one install."""

    installed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


def find_skill_dirs(base: Path) -> list[Path]:
    """Find the skill directories under ``base``.

    ``base`` itself is the only skill when it has a SKILL.md; otherwise every
    directory below it holding one is a skill. Hidden directories are skipped.
    """
    if (base / SKILL_FILE).is_file():
        return [base]

    found: list[Path] = []
    for skill_file in sorted(base.rglob(SKILL_FILE)):
        relative = skill_file.parent.relative_to(base)
        if any(part.startswith(".") for part in relative.parts):
            continue
        if skill_file.is_file():
            found.append(skill_file.parent)
    return found


class SkillInstaller:
    """Install skills into one install root."""

    def __init__(
        self,
        root: Path,
        *,
        executor: GitExecutor | None = None,
        store: MetadataStore | None = None,
    ) -> None:
        """Initialize the installer.

        Args:
            root: Directory the skills are installed into.
            executor: Used to clone remote sources.
            store: Used to record where each skill came from.
        """
        self._root = root
        self._executor = executor or GitExecutor()
        self._store = store or MetadataStore()

    @property
    def root(self) -> Path:
        """Return the install root."""
        return self._root

    async def install(self, source: str, *, overwrite: bool = False) -> InstallResult:
        """Install every skill found at ``source``.

        Raises:
            SkillValidationError: ``source`` or its subpath was rejected.
            GitCommandError: The repository could not be cloned.
            InstallError: No SKILL.md was found.
        """
        install_source = classify(source)

        if isinstance(install_source, LocalPath):
            base = install_source.resolve()
            if not base.is_dir():
                raise InstallError(f"Source path '{source}' is not a directory.")
            return self._install_from(
                base, source=str(base), overwrite=overwrite, base_subpath=""
            )

        url = validate_git_url(install_source.clone_url)
        subpath = ""
        if isinstance(install_source, GitHubShorthand) and install_source.subpath:
            subpath = validate_skill_subpath(install_source.subpath)

        with self._executor.temporary_directory() as tmp:
            clone_dir = Path(tmp) / "repo"
            logger.info("cloning %s", url)
            await self._executor.clone(url, clone_dir)
            shutil.rmtree(clone_dir / ".git", ignore_errors=True)

            base = ensure_contained(clone_dir / subpath, clone_dir)
            ensure_not_linked_outside(base, clone_dir)
            if not base.is_dir():
                raise InstallError(f"Subpath '{subpath}' not found in {url}")
            return self._install_from(
                base, source=source, overwrite=overwrite, base_subpath=subpath
            )

    def _install_from(
        self, base: Path, *, source: str, overwrite: bool, base_subpath: str
    ) -> InstallResult:
        skill_dirs = find_skill_dirs(base)
        if not skill_dirs:
            raise InstallError(f"No {SKILL_FILE} found in '{source}'.")

        self._root.mkdir(parents=True, exist_ok=True)
        result = InstallResult()
        for skill_dir in skill_dirs:
            relative = skill_dir.relative_to(base).as_posix()
            subpath = "/".join(p for p in (base_subpath, relative) if p and p != ".")
            try:
                name = self._install_one(
                    skill_dir,
                    base=base,
                    source=source,
                    subpath=subpath,
                    overwrite=overwrite,
                )
            except (SkillValidationError, SkillDocumentError, OSError) as e:
                logger.warning("Skipping skill at %s: %s", skill_dir, e)
                result.failed.append(skill_dir.name)
                continue

            if name is None:
                result.skipped.append(skill_dir.name)
            else:
                result.installed.append(name)
        return result

    def _install_one(
        self,
        skill_dir: Path,
        *,
        base: Path,
        source: str,
        subpath: str,
        overwrite: bool,
    ) -> str | None:
        """Copy one skill into the install root and record its metadata."""
        ensure_not_linked_outside(skill_dir, base)
        document = read_skill_document(skill_dir / SKILL_FILE)
        frontmatter = check_skill_frontmatter(document.metadata).unwrap()

        name = sanitize_skill_name(frontmatter.name)
        if not validate_skill_name(name):
            raise SkillValidationError(
                ErrorKind.INVALID_CHARACTERS, f"Invalid skill name: {frontmatter.name!r}"
            )

        target = ensure_contained(self._root / name, self._root)

        if target.exists() and not overwrite:
            logger.warning(
                "Skill '%s' already exists, use overwrite to replace it.", name
            )
            return None

        # Hidden staging dir next to the target, so discovery never sees it.
        staging = Path(tempfile.mkdtemp(prefix=f".{name}.", dir=self._root))
        try:
            shutil.copytree(
                skill_dir,
                staging,
                ignore=shutil.ignore_patterns(".git"),
                symlinks=True,
                dirs_exist_ok=True,
            )
            now = datetime.now(UTC)
            self._store.set_metadata(
                staging,
                SkillMetadata(
                    source=source,
                    subpath=subpath,
                    version=frontmatter.version,
                    installed_at=now,
                    last_updated=now,
                ),
            )
            swap_directory(staging, target)
        except BaseException:
            shutil.rmtree(staging, ignore_errors=True)
            raise

        logger.info("installed skill '%s' into %s", name, target)
        return name
