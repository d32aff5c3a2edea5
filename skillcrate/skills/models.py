"""Skill data models."""

from datetime import datetime
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

type SkillLocation = Literal["global", "project"]


class Skill(BaseModel):
    """An installed skill found by discovery."""

    name: str
    path: Path
    description: str = ""
    location: SkillLocation


class SkillMetadata(BaseModel):
    """Install record kept next to each installed skill."""

    model_config = ConfigDict(populate_by_name=True)

    source: str | None = None
    """Install source as given by the user (git URL, shorthand or path)."""

    subpath: str | None = None
    """Location of the skill directory inside the source repository."""

    version: str | None = None
    installed_at: datetime | None = Field(default=None, alias="installedAt")
    last_updated: datetime | None = Field(default=None, alias="lastUpdated")
