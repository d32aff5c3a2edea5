"""Render installed skills as markup for agent prompts."""

from skillcrate.skills.models import Skill
from skillcrate.validation.escaping import escape_xml


def render_available_skills(skills: list[Skill]) -> str:
    """Build the ``<available_skills>`` block.

    Names and descriptions come from third-party SKILL.md files, so every
    text node is escaped.
    """
    lines = ["<available_skills>"]
    for skill in skills:
        lines.append("  <skill>")
        lines.append(f"    <name>{escape_xml(skill.name)}</name>")
        if skill.description:
            lines.append(
                f"    <description>{escape_xml(skill.description)}</description>"
            )
        lines.append(f"    <location>{escape_xml(skill.location)}</location>")
        lines.append("  </skill>")
    lines.append("</available_skills>")
    return "\n".join(lines)
