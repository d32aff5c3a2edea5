"""Interactive prompts used by the CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

from skillcrate.skills.updater import PromptCancelledError

if TYPE_CHECKING:
    from collections.abc import Callable

    from skillcrate.skills.models import Skill

type InputFunc = Callable[[str], str]


def _ask(input_func: InputFunc, message: str) -> str:
    try:
        return input_func(message).strip()
    except (EOFError, KeyboardInterrupt) as e:
        raise PromptCancelledError from e


def _parse_selection(answer: str, count: int) -> list[int] | None:
    """Turn ``"1,3"`` / ``"all"`` / ``"none"`` into zero based indices."""
    lowered = answer.lower()
    if lowered in ("", "a", "all"):
        return list(range(count))
    if lowered in ("n", "none"):
        return []

    indices: list[int] = []
    for part in lowered.replace(" ", ",").split(","):
        if not part:
            continue
        if not part.isdigit() or not 1 <= int(part) <= count:
            return None
        index = int(part) - 1
        if index not in indices:
            indices.append(index)
    return indices


def make_skill_selector(
    input_func: InputFunc = input, output: TextIO | None = None
) -> Callable[[list[Skill]], list[Skill]]:
    """Return a selector that lists skills and reads the chosen numbers."""

    def select(skills: list[Skill]) -> list[Skill]:
        for i, skill in enumerate(skills, start=1):
            tag = f"[{skill.location}]"
            description = skill.description[:60]
            print(f"  {i:>2}. {skill.name:<25} {tag:<10} {description}", file=output)

        while True:
            answer = _ask(
                input_func, "Select skills to update (e.g. 1,3; 'all'; 'none') [all]: "
            )
            indices = _parse_selection(answer, len(skills))
            if indices is not None:
                return [skills[i] for i in indices]
            print(f"Invalid selection: {answer}", file=output)

    return select


def make_confirmer(input_func: InputFunc = input) -> Callable[[str], bool]:
    """Return a yes/no confirmer that defaults to no."""

    def confirm(message: str) -> bool:
        answer = _ask(input_func, f"{message} [y/N]: ")
        return answer.lower() in ("y", "yes")

    return confirm
