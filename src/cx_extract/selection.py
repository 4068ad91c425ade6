from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from typing import Protocol

from .content import ResourceClass, ResourceReference
from .manifest import NAME_RULE_MESSAGE, is_valid_visible_name

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


class SelectionService(Protocol):
    def present_choices(self, items: Sequence[str], *, message: str) -> list[int]:
        """Show ``items`` (all pre-checked) and return the approved indices."""
        ...


class ConsoleSelectionService:
    """Checklist on the terminal.

    Every item starts checked. The operator types item numbers to toggle them
    (comma or space separated), ``a`` to check all, ``n`` to uncheck all, and
    an empty line to accept. End of input accepts the current state.
    """

    def __init__(
        self,
        *,
        input_fn: InputFn = input,
        output_fn: OutputFn = print,
    ) -> None:
        self._input = input_fn
        self._output = output_fn

    def _render(self, items: Sequence[str], checked: list[bool], message: str) -> None:
        self._output(message)
        for idx, (label, on) in enumerate(zip(items, checked), start=1):
            mark = "x" if on else " "
            self._output(f"  [{mark}] {idx:>3}. {label}")

    def present_choices(self, items: Sequence[str], *, message: str) -> list[int]:
        checked = [True] * len(items)
        while True:
            self._render(items, checked, message)
            try:
                answer = self._input(
                    "Toggle numbers (e.g. 1,3), 'a' all, 'n' none, Enter to accept: "
                )
            except EOFError:
                break

            answer = answer.strip().lower()
            if not answer:
                break
            if answer == "a":
                checked = [True] * len(items)
                continue
            if answer == "n":
                checked = [False] * len(items)
                continue

            tokens = [t for t in re.split(r"[,\s]+", answer) if t]
            bad = [t for t in tokens if not t.isdigit() or not 1 <= int(t) <= len(items)]
            if bad:
                self._output(f"Ignoring invalid choice(s): {', '.join(bad)}")
                continue
            for t in tokens:
                checked[int(t) - 1] = not checked[int(t) - 1]

        return [i for i, on in enumerate(checked) if on]


def select_resources(
    references: Sequence[ResourceReference],
    *,
    auto_approve_all: bool,
    service: SelectionService,
    resource_class: ResourceClass | None = None,
) -> list[ResourceReference]:
    """Filter ``references`` down to the operator-approved subset.

    The result always follows discovery order, whatever order (or duplicates)
    the service returns indices in.
    """

    if auto_approve_all or not references:
        return list(references)

    what = f"{resource_class.display} " if resource_class is not None else ""
    chosen = service.present_choices(
        [ref.label for ref in references],
        message=f"Select which {what}resources to include:",
    )
    approved = {i for i in chosen if 0 <= i < len(references)}
    return [ref for i, ref in enumerate(references) if i in approved]


def prompt_visible_name(
    resource_class: ResourceClass,
    *,
    input_fn: InputFn = input,
    output_fn: OutputFn = print,
) -> str:
    default = resource_class.profile.default_name
    question = (
        f"Visible name of the Client Extension ({resource_class.display}) "
        f"[{default}]: "
    )
    while True:
        answer = input_fn(question).strip()
        if not answer:
            return default
        if is_valid_visible_name(answer):
            return answer
        output_fn(NAME_RULE_MESSAGE)
