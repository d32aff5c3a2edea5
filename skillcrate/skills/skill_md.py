"""Helpers for reading SKILL.md documents."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import frontmatter
import yaml

from skillcrate.validation.escaping import escape_regexp

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

SKILL_FILE = "SKILL.md"


class SkillDocumentError(Exception):
    """SKILL.md could not be read or its frontmatter could not be parsed."""


@dataclass(frozen=True)
class SkillDocument:
    """Parsed SKILL.md."""

    metadata: dict[str, Any]
    content: str


def has_valid_frontmatter(content: str) -> bool:
    """Check that the document starts with a ``---`` frontmatter block."""
    return content.strip().startswith("---")


def extract_yaml_field(content: str, field: str) -> str:
    """Return the raw value of a top level ``field: value`` line.

    ``field`` comes from untrusted documents too, so it is escaped before
    being placed in the pattern.
    """
    pattern = re.compile(rf"^{escape_regexp(field)}:\s*(.+?)$", re.MULTILINE)
    match = pattern.search(content)
    return match.group(1).strip() if match else ""


def read_skill_document(path: Path) -> SkillDocument:
    """Load a SKILL.md file and split it into frontmatter and body.

    Raises:
        SkillDocumentError: The file is unreadable or the YAML is invalid.
    """
    logger.debug("read skill document: %s", path)
    try:
        with path.open("r", encoding="utf-8") as f:
            post = frontmatter.load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise SkillDocumentError(f"Failed to read {path}: {e}") from e

    return SkillDocument(metadata=dict(post.metadata), content=post.content)
