import shutil
from collections.abc import Callable
from pathlib import Path

import pytest

from skillcrate.skills.discovery import SkillDirectories
from skillcrate.skills.git import GitExecutor

type WriteSkill = Callable[..., Path]


def make_skill_md(name: str, description: str = "A test skill", body: str = "") -> str:
    """Build a SKILL.md document."""
    return (
        f"---\nname: {name}\ndescription: {description}\n---\n\n"
        f"{body or f'Instructions for {name}.'}\n"
    )


@pytest.fixture
def skill_dirs(tmp_path: Path) -> SkillDirectories:
    """Project and global install roots inside a temp dir."""
    return SkillDirectories(project=tmp_path / "project", global_=tmp_path / "global")


@pytest.fixture
def write_skill() -> WriteSkill:
    """Return a helper that writes ``<root>/<dirname>/SKILL.md``."""

    def _write(
        root: Path,
        dirname: str,
        *,
        name: str | None = None,
        description: str = "A test skill",
        content: str | None = None,
    ) -> Path:
        skill_dir = root / dirname
        skill_dir.mkdir(parents=True, exist_ok=True)
        if content is None:
            content = make_skill_md(name or Path(dirname).name, description)
        (skill_dir / "SKILL.md").write_text(content, encoding="utf-8")
        return skill_dir

    return _write


class FakeGitExecutor(GitExecutor):
    """Git executor whose clone copies a local template repository."""

    def __init__(self, template: Path, temp_dir: Path) -> None:
        super().__init__(temp_dir=temp_dir, timeout=5)
        self.template = template
        self.cloned: list[str] = []

    async def clone(self, url: str, destination: Path) -> None:
        self.cloned.append(url)
        shutil.copytree(self.template, destination, symlinks=True)
        (destination / ".git").mkdir(exist_ok=True)
        (destination / ".git" / "HEAD").write_text("ref: refs/heads/main\n")


@pytest.fixture
def repo_template(tmp_path: Path) -> Path:
    """Empty directory standing in for the contents of a remote repository."""
    template = tmp_path / "remote-repo"
    template.mkdir()
    return template


@pytest.fixture
def fake_executor(tmp_path: Path, repo_template: Path) -> FakeGitExecutor:
    """Executor that clones ``repo_template``."""
    return FakeGitExecutor(repo_template, tmp_path / "scratch")
