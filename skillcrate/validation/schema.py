"""SKILL.md frontmatter schema.

The field constraints live on the pydantic model, so every violated rule is
collected in a single pass; ``_MESSAGES`` only rewords pydantic's messages
for the rules users hit most often.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from skillcrate.validation.errors import FrontmatterValidationError, SchemaViolation

logger = logging.getLogger(__name__)

SKILL_NAME_PATTERN = r"^[a-z0-9-]+$"
SEMVER_PATTERN = r"^[0-9]+\.[0-9]+\.[0-9]+$"


class SkillFrontmatter(BaseModel):
    """Definition of the SKILL.md frontmatter."""

    model_config = ConfigDict(strict=True, frozen=True, extra="ignore")

    name: str = Field(min_length=1, max_length=100, pattern=SKILL_NAME_PATTERN)
    description: str = Field(min_length=1, max_length=500)
    # Optional keys may be left out but not set to null; defaults are not
    # validated, so a missing key still yields None.
    version: str = Field(default=None, pattern=SEMVER_PATTERN)
    author: str = Field(default=None)
    tags: list[str] = Field(default=None)


# (field, pydantic error type) -> message
_MESSAGES: dict[tuple[str, str], str] = {
    ("name", "missing"): "Skill name is required",
    ("name", "string_too_short"): "Skill name cannot be empty",
    ("name", "string_too_long"): "Skill name too long",
    ("name", "string_pattern_mismatch"): (
        "Skill name must be lowercase alphanumeric with hyphens"
    ),
    ("description", "missing"): "Description is required",
    ("description", "string_too_short"): "Description cannot be empty",
    ("description", "string_too_long"): "Description too long",
    ("version", "string_pattern_mismatch"): "Version must be semantic (e.g., 1.0.0)",
    ("version", "string_type"): "Version must be a string (e.g., 1.0.0)",
    ("author", "string_type"): "Author must be a string",
    ("tags", "list_type"): "Tags must be a list of strings",
}


def _to_violation(error: dict[str, Any]) -> SchemaViolation:
    loc = [str(part) for part in error["loc"]]
    field_path = ".".join(loc)
    message = _MESSAGES.get((loc[0] if loc else "", error["type"]), error["msg"])
    return SchemaViolation(field=field_path, message=message)


@dataclass(frozen=True)
class FrontmatterValidation:
    """Outcome of checking a frontmatter mapping."""

    frontmatter: SkillFrontmatter | None
    errors: list[SchemaViolation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Whether the frontmatter passed every rule."""
        return self.frontmatter is not None

    def unwrap(self) -> SkillFrontmatter:
        """Return the frontmatter or raise with every violation."""
        if self.frontmatter is None:
            raise FrontmatterValidationError(self.errors)
        return self.frontmatter


def check_skill_frontmatter(data: Any) -> FrontmatterValidation:  # noqa: ANN401
    """Validate a parsed frontmatter mapping, reporting every violation."""
    try:
        frontmatter = SkillFrontmatter.model_validate(data)
    except ValidationError as e:
        return FrontmatterValidation(
            frontmatter=None, errors=[_to_violation(err) for err in e.errors()]
        )
    return FrontmatterValidation(frontmatter=frontmatter)


def validate_skill_frontmatter(data: Any) -> SkillFrontmatter | None:  # noqa: ANN401
    """Validate SKILL.md frontmatter, logging each violation on failure."""
    result = check_skill_frontmatter(data)
    if not result.ok:
        logger.warning("SKILL.md validation errors:")
        for violation in result.errors:
            logger.warning("  - %s", violation)
    return result.frontmatter
