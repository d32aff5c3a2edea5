"""Skill management module."""

from skillcrate.skills.discovery import SkillDirectories, find_all_skills
from skillcrate.skills.git import GitCommandError, GitExecutor
from skillcrate.skills.installer import InstallError, InstallResult, SkillInstaller
from skillcrate.skills.metadata import MetadataStore
from skillcrate.skills.models import Skill, SkillMetadata
from skillcrate.skills.render import render_available_skills
from skillcrate.skills.updater import (
    PromptCancelledError,
    SkillUpdater,
    UpdateOptions,
    UpdateSummary,
    is_updateable,
)

__all__ = [
    "GitCommandError",
    "GitExecutor",
    "InstallError",
    "InstallResult",
    "MetadataStore",
    "PromptCancelledError",
    "Skill",
    "SkillDirectories",
    "SkillInstaller",
    "SkillMetadata",
    "SkillUpdater",
    "UpdateOptions",
    "UpdateSummary",
    "find_all_skills",
    "is_updateable",
    "render_available_skills",
]
