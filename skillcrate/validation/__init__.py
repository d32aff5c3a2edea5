"""Validation of untrusted skill inputs."""

from skillcrate.validation.errors import (
    ErrorKind,
    FrontmatterValidationError,
    SchemaViolation,
    SkillValidationError,
)
from skillcrate.validation.escaping import escape_regexp, escape_xml
from skillcrate.validation.lexical import (
    sanitize_skill_name,
    validate_git_url,
    validate_skill_name,
    validate_skill_subpath,
)
from skillcrate.validation.paths import (
    ensure_contained,
    ensure_not_linked_outside,
    is_contained,
)
from skillcrate.validation.schema import (
    FrontmatterValidation,
    SkillFrontmatter,
    check_skill_frontmatter,
    validate_skill_frontmatter,
)
from skillcrate.validation.sources import (
    GitHubShorthand,
    GitUrl,
    InstallSource,
    LocalPath,
    RemoteSource,
    classify,
    is_valid_install_source,
)

__all__ = [
    "ErrorKind",
    "FrontmatterValidation",
    "FrontmatterValidationError",
    "GitHubShorthand",
    "GitUrl",
    "InstallSource",
    "LocalPath",
    "RemoteSource",
    "SchemaViolation",
    "SkillFrontmatter",
    "SkillValidationError",
    "check_skill_frontmatter",
    "classify",
    "ensure_contained",
    "ensure_not_linked_outside",
    "escape_regexp",
    "escape_xml",
    "is_contained",
    "is_valid_install_source",
    "sanitize_skill_name",
    "validate_git_url",
    "validate_skill_frontmatter",
    "validate_skill_name",
    "validate_skill_subpath",
]
