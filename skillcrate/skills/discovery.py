"""Discovery of installed skills."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from skillcrate.env import SKILLCRATE_GLOBAL_DIR, SKILLCRATE_PROJECT_DIR
from skillcrate.skills.models import Skill, SkillLocation
from skillcrate.skills.skill_md import SKILL_FILE, SkillDocumentError, read_skill_document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkillDirectories:
    """Roots that skills are installed under."""

    project: Path = SKILLCRATE_PROJECT_DIR
    global_: Path = SKILLCRATE_GLOBAL_DIR

    def root_for(self, location: SkillLocation) -> Path:
        """Return the install root for a location."""
        return self.project if location == "project" else self.global_

    def ordered(self) -> list[tuple[Path, SkillLocation]]:
        """Roots in lookup order, project first."""
        return [(self.project, "project"), (self.global_, "global")]


def _load_skill(entry: Path, location: SkillLocation) -> Skill | None:
    """Build the discovery record for one skill directory."""
    skill_file = entry / SKILL_FILE
    if not skill_file.is_file():
        logger.debug("no %s found in %s", SKILL_FILE, entry)
        return None

    try:
        document = read_skill_document(skill_file)
    except SkillDocumentError:
        logger.exception("Failed to load skill: %s", skill_file)
        return Skill(name=entry.name, path=entry, location=location)

    description = document.metadata.get("description")
    return Skill(
        name=entry.name,
        path=entry,
        description=description if isinstance(description, str) else "",
        location=location,
    )


def find_skills(root: Path, location: SkillLocation) -> list[Skill]:
    """List the skills installed directly under ``root``."""
    if not root.is_dir():
        logger.debug("skill dir not found: %s", root)
        return []

    result: list[Skill] = []
    try:
        for entry in sorted(root.iterdir()):
            if not entry.is_dir() or entry.name.startswith("."):
                continue
            skill = _load_skill(entry, location)
            if skill is not None:
                result.append(skill)
    except OSError:
        logger.exception("error when scanning skill dir: %s", root)

    logger.debug("found %s skills under: %s", len(result), root)
    return result


def find_all_skills(directories: SkillDirectories | None = None) -> list[Skill]:
    """List project and global skills.

    A project skill shadows a global skill with the same name.
    """
    directories = directories or SkillDirectories()

    seen: set[str] = set()
    result: list[Skill] = []
    for root, location in directories.ordered():
        for skill in find_skills(root, location):
            if skill.name in seen:
                logger.warning(
                    "Found duplicate skill names, %s skill is shadowed: %s",
                    location,
                    skill.name,
                )
                continue
            seen.add(skill.name)
            result.append(skill)
    return result
