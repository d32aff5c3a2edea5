"""Skill tools for LangChain agents.

Provides tools for reading and installing skills.
"""

# ruff: noqa: PLR2004

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from langchain_core.tools import BaseTool, StructuredTool
from pydantic import BaseModel, Field

from skillcrate.skills.git import GitCommandError
from skillcrate.skills.installer import InstallError
from skillcrate.skills.render import render_available_skills
from skillcrate.skills.skill_md import SKILL_FILE, SkillDocumentError, read_skill_document
from skillcrate.validation.errors import SkillValidationError

if TYPE_CHECKING:
    from skillcrate.skills.installer import SkillInstaller
    from skillcrate.skills.models import Skill

logger = logging.getLogger(__name__)

MAX_SKILL_CONTENT = 100000


def _build_load_skill_description(skills: list[Skill]) -> str:
    """Build the dynamic tool description listing available skills."""
    base = (
        "Load a skill to get detailed instructions for a specific task.\n"
        "Skills provide specialized knowledge and step-by-step guidance.\n"
        "Use this when a task matches an available skill's description."
    )
    if not skills:
        return base + "\n\nNo skills are currently available."

    return (
        base
        + "\nOnly the skills listed here are available:\n"
        + render_available_skills(skills)
    )


class _LoadSkillInput(BaseModel):
    """Input schema for the load_skill tool."""

    skill_name: str = Field(description="Name of the skill to load.")


class _InstallSkillInput(BaseModel):
    """Input schema for the install_skill tool."""

    source: str = Field(
        description=(
            "Where to install from: a git URL, an owner/repo[/path] GitHub "
            "shorthand, or a local path starting with '/', './', '../' or '~/'."
        )
    )
    overwrite: bool = Field(
        default=False, description="Whether to overwrite an existing skill."
    )


def create_skill_tool(skills: list[Skill]) -> BaseTool:
    """Create the load_skill tool with a description of the given skills.

    Args:
        skills: Skills the agent may load.

    Returns:
        A BaseTool instance named 'load_skill'.
    """
    skills_dict = {s.name: s for s in skills}

    def read_skill_content(skill_name: str) -> str:
        """Read a skill's instructions."""
        skill = skills_dict.get(skill_name)

        if skill is None:
            if skills_dict:
                available = ", ".join(skills_dict)
                return (
                    f"Error: Skill '{skill_name}' not found. "
                    f"Available skills: {available}"
                )
            return f"Error: Skill '{skill_name}' not found. No skills are installed."

        try:
            document = read_skill_document(skill.path / SKILL_FILE)
        except SkillDocumentError as e:
            return f"Error reading skill '{skill_name}': {e}"

        content = document.content
        if len(content) > MAX_SKILL_CONTENT:
            content = content[:MAX_SKILL_CONTENT] + "\n... (truncated)"

        return f"## Skill: {skill_name}\n\n**Base directory**: {skill.path}\n\n{content}"

    return StructuredTool.from_function(
        func=read_skill_content,
        name="load_skill",
        description=_build_load_skill_description(skills),
        args_schema=_LoadSkillInput,
    )


def create_install_skill_tool(installer: SkillInstaller) -> BaseTool:
    """Create the install_skill tool bound to an installer.

    Args:
        installer: The installer that owns the target skill directory.

    Returns:
        A BaseTool instance named 'install_skill'.
    """

    async def install_skill(source: str, overwrite: bool = False) -> str:  # noqa: FBT001, FBT002
        """Install skills from a source."""
        try:
            result = await installer.install(source, overwrite=overwrite)
        except (SkillValidationError, InstallError) as e:
            return f"Error: {e}"
        except GitCommandError as e:
            detail = f" ({e.stderr})" if e.stderr else ""
            return f"Error: {e}{detail}"

        parts = []
        if result.installed:
            parts.append(
                f"Successfully installed skill(s): {', '.join(result.installed)}."
            )
        if result.skipped:
            parts.append(
                f"Skipped existing skill(s): {', '.join(result.skipped)}. "
                "Set overwrite=True to replace them."
            )
        if result.failed:
            parts.append(f"Failed skill(s): {', '.join(result.failed)}.")
        return " ".join(parts)

    return StructuredTool.from_function(
        coroutine=install_skill,
        name="install_skill",
        description=(
            "Install a skill from a git repository, a GitHub owner/repo[/path] "
            f"shorthand, or a local directory containing a {SKILL_FILE} file.\n"
            "Will refuse to overwrite an existing skill unless overwrite=True."
        ),
        args_schema=_InstallSkillInput,
    )
