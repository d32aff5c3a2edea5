"""skillcrate CLI."""

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

from skillcrate.cli.prompts import make_confirmer, make_skill_selector
from skillcrate.env import SKILLCRATE_LOG_LEVEL
from skillcrate.skills.discovery import SkillDirectories, find_all_skills
from skillcrate.skills.git import GitCommandError
from skillcrate.skills.installer import InstallError, SkillInstaller
from skillcrate.skills.render import render_available_skills
from skillcrate.skills.updater import PromptCancelledError, SkillUpdater, UpdateOptions
from skillcrate.validation.errors import SkillValidationError


def setup_argument_parser() -> argparse.ArgumentParser:
    """Setup the argument parser."""
    parser = argparse.ArgumentParser(
        prog="skillcrate", description="Install and update skills."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    install = subparsers.add_parser("install", help="Install skills from a source.")
    install.add_argument(
        "source",
        help="Git URL, owner/repo[/path] shorthand, or local path.",
    )
    install.add_argument(
        "--global",
        action="store_true",
        default=False,
        help="Install into the global skill directory.",
        dest="global_",
    )
    install.add_argument(
        "--overwrite",
        action="store_true",
        default=False,
        help="Replace skills that are already installed.",
    )

    update = subparsers.add_parser("update", help="Update skills installed from git.")
    update.add_argument(
        "--all",
        action="store_true",
        default=False,
        help="Update every updateable skill without asking which.",
        dest="all",
    )
    update.add_argument(
        "-y",
        "--yes",
        action="store_true",
        default=False,
        help="Skip selection and confirmation.",
    )

    list_ = subparsers.add_parser("list", help="List installed skills.")
    list_.add_argument(
        "--xml",
        action="store_true",
        default=False,
        help="Print the <available_skills> block for agent prompts.",
    )
    return parser


async def install_command(args: argparse.Namespace, directories: SkillDirectories) -> int:
    """Run ``skillcrate install``."""
    root = directories.root_for("global" if args.global_ else "project")
    installer = SkillInstaller(root)

    try:
        result = await installer.install(args.source, overwrite=args.overwrite)
    except (SkillValidationError, InstallError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except GitCommandError as e:
        print(f"Error: {e}", file=sys.stderr)
        if e.stderr:
            print(e.stderr, file=sys.stderr)
        return 1

    for name in result.installed:
        print(f"Installed: {name} -> {root / name}")
    for name in result.skipped:
        print(f"Skipped (already installed, use --overwrite): {name}")
    for name in result.failed:
        print(f"Failed: {name}", file=sys.stderr)
    return 1 if result.failed else 0


async def update_command(args: argparse.Namespace, directories: SkillDirectories) -> int:
    """Run ``skillcrate update``."""
    print("Updating skills...\n")
    updater = SkillUpdater(
        directories=directories,
        select=make_skill_selector(),
        confirm=make_confirmer(),
    )

    try:
        summary = await updater.update_skills(UpdateOptions(all=args.all, yes=args.yes))
    except PromptCancelledError:
        print("\n\nCancelled by user")
        return 0

    if summary is None:
        print("Nothing updated.")
        return 0

    failed = f", {summary.fail_count} failed" if summary.fail_count else ""
    print(f"\nUpdate complete: {summary.success_count} updated{failed}")
    return 1 if summary.fail_count else 0


def list_command(args: argparse.Namespace, directories: SkillDirectories) -> int:
    """Run ``skillcrate list``."""
    skills = find_all_skills(directories)
    if args.xml:
        print(render_available_skills(skills))
        return 0

    if not skills:
        print("No skills installed.")
        print("\nInstall skills: skillcrate install <source>")
        return 0

    for skill in skills:
        print(f"{skill.name:<25} [{skill.location}] {skill.description[:60]}")
    return 0


async def run(
    argv: Sequence[str] | None = None, directories: SkillDirectories | None = None
) -> int:
    """skillcrate CLI entrypoint."""
    args = setup_argument_parser().parse_args(argv)
    directories = directories or SkillDirectories()

    if args.command == "install":
        return await install_command(args, directories)
    if args.command == "update":
        return await update_command(args, directories)
    return list_command(args, directories)


def main() -> None:
    """Console script entrypoint."""
    logging.basicConfig(
        level=SKILLCRATE_LOG_LEVEL,
        format="%(levelname)s: %(message)s",
    )
    sys.exit(asyncio.run(run()))
