"""Per-skill install metadata, stored as a JSON sidecar."""

from __future__ import annotations

import logging
import os
import tempfile
from typing import TYPE_CHECKING

from pydantic import ValidationError

from skillcrate.skills.models import SkillMetadata

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

METADATA_FILE = ".skillcrate-meta.json"


def write_then_replace(path: Path, content: str) -> None:
    """Write ``content`` to a temporary file next to ``path``, then swap it in."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        os.unlink(tmp_name)
        raise


class MetadataStore:
    """Read and write the metadata sidecar of installed skills."""

    def __init__(self, filename: str = METADATA_FILE) -> None:
        """Initialize the store.

        Args:
            filename: Name of the sidecar file inside each skill directory.
        """
        self._filename = filename

    def metadata_path(self, skill_path: Path) -> Path:
        """Return the sidecar path for a skill directory."""
        return skill_path / self._filename

    def get_metadata(self, skill_path: Path) -> SkillMetadata | None:
        """Load the metadata of a skill.

        Missing or malformed metadata yields ``None``; this never raises.
        """
        metadata_path = self.metadata_path(skill_path)
        try:
            content = metadata_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("cannot read metadata %s: %s", metadata_path, e)
            return None

        try:
            return SkillMetadata.model_validate_json(content)
        except ValidationError as e:
            logger.debug("invalid metadata %s: %s", metadata_path, e)
            return None

    def set_metadata(self, skill_path: Path, metadata: SkillMetadata) -> None:
        """Persist the metadata of a skill."""
        write_then_replace(
            self.metadata_path(skill_path),
            metadata.model_dump_json(by_alias=True, exclude_none=True, indent=2),
        )
