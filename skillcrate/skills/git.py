"""Git operations used to fetch and replace skills.

Commands are started with an argument vector, never through a shell, and the
URL is validated again before it is handed to git.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import shutil
import signal
import sys
import tempfile
from pathlib import Path

from skillcrate.env import SKILLCRATE_GIT_TIMEOUT, SKILLCRATE_TEMP_DIR
from skillcrate.skills.fsops import swap_directory
from skillcrate.skills.skill_md import SKILL_FILE
from skillcrate.validation.lexical import validate_git_url, validate_skill_subpath
from skillcrate.validation.paths import ensure_contained, ensure_not_linked_outside

logger = logging.getLogger(__name__)


class GitCommandError(Exception):
    """A git command failed."""

    def __init__(self, message: str, stderr: str = "") -> None:
        """Initialize the error.

        Args:
            message: What went wrong.
            stderr: Captured standard error of the git process.
        """
        super().__init__(message)
        self.stderr = stderr


def kill_process_tree(process: asyncio.subprocess.Process) -> None:
    """Kill the process and all its children.

    The process is started with ``start_new_session=True`` on Unix, so its
    PID is also the process group id.
    """
    if process.pid is None:
        return

    try:
        if sys.platform != "win32":
            os.killpg(process.pid, signal.SIGKILL)
        else:
            process.kill()
    except (ProcessLookupError, OSError):
        pass


async def run_git(*args: str, timeout: float = SKILLCRATE_GIT_TIMEOUT) -> str:
    """Run ``git`` with the given arguments and return its stdout.

    Raises:
        GitCommandError: git is missing, exits non-zero or times out.
    """
    logger.debug("run git %s", args)
    try:
        process = await asyncio.create_subprocess_exec(
            "git",
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env={**os.environ, "GIT_TERMINAL_PROMPT": "0"},
            start_new_session=sys.platform != "win32",
        )
    except OSError as e:
        raise GitCommandError(f"Failed to start git: {e}") from e

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout)
    except TimeoutError as e:
        kill_process_tree(process)
        with contextlib.suppress(ProcessLookupError):
            await process.wait()
        raise GitCommandError(f"git {args[0]} timed out after {timeout}s") from e

    if process.returncode != 0:
        err = stderr.decode(errors="replace").strip()
        raise GitCommandError(
            f"git {args[0]} exited with code {process.returncode}", stderr=err
        )
    return stdout.decode(errors="replace")


class GitExecutor:
    """Clone skill repositories and swap them into place."""

    def __init__(
        self,
        temp_dir: Path = SKILLCRATE_TEMP_DIR,
        timeout: int = SKILLCRATE_GIT_TIMEOUT,
    ) -> None:
        """Initialize the executor.

        Args:
            temp_dir: Parent directory for temporary clones.
            timeout: Timeout in seconds for a single git command.
        """
        self._temp_dir = temp_dir
        self._timeout = timeout

    def temporary_directory(self) -> tempfile.TemporaryDirectory[str]:
        """Create a scratch directory for a clone."""
        self._temp_dir.mkdir(parents=True, exist_ok=True)
        return tempfile.TemporaryDirectory(prefix="skillcrate-", dir=self._temp_dir)

    async def clone(self, url: str, destination: Path) -> None:
        """Shallow clone ``url`` into ``destination``."""
        validate_git_url(url)
        await run_git(
            "clone",
            "--depth",
            "1",
            "--quiet",
            "--",
            url,
            str(destination),
            timeout=self._timeout,
        )

    async def replace_skill(self, url: str, subpath: str, destination: Path) -> None:
        """Replace an installed skill with a fresh copy from its repository.

        The old directory is only removed once the new copy is cloned and
        contains a SKILL.md.
        """
        subpath = validate_skill_subpath(subpath)

        with self.temporary_directory() as tmp:
            clone_dir = Path(tmp) / "repo"
            await self.clone(url, clone_dir)

            source_dir = ensure_contained(clone_dir / subpath, clone_dir)
            ensure_not_linked_outside(source_dir, clone_dir)
            if not (source_dir / SKILL_FILE).is_file():
                raise GitCommandError(
                    f"No {SKILL_FILE} found at '{subpath or '.'}' in {url}"
                )
            if source_dir == clone_dir:
                shutil.rmtree(clone_dir / ".git", ignore_errors=True)

            swap_directory(source_dir, destination)

        logger.info("replaced %s from %s", destination, url)
