"""Terminal implementations of the confirmation collaborator."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

from .diffs import render_diff, render_summary

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from rbx_products.domain.diff import ConfirmedChange, ProductDiff

SELECT_HELP = (
    "Commands: <n> toggle diff n, v <n> view diff n, c toggle all, q finish selection"
)


class TerminalConfirmation:
    """Line-oriented prompts on a terminal; end of input counts as "no"."""

    def __init__(
        self,
        *,
        input_func: Callable[[str], str] = input,
        output: TextIO | None = None,
        colour: bool | None = None,
    ) -> None:
        self._input = input_func
        self._output = output or sys.stdout
        self._colour = colour if colour is not None else self._output.isatty()

    def _print(self, text: str = "") -> None:
        print(text, file=self._output)

    def _ask(self, prompt: str) -> str | None:
        try:
            return self._input(prompt).strip()
        except EOFError:
            return None

    def approve(self, prompt: str, *, previews: Sequence[ProductDiff] = ()) -> bool:
        for preview in previews:
            for line in render_diff(preview, colour=self._colour):
                self._print(line)
            self._print()

        while True:
            answer = self._ask(f"{prompt} [y/n] ")
            if answer is None:
                return False
            if answer.lower() in {"y", "yes"}:
                return True
            if answer.lower() in {"n", "no"}:
                return False

    def select_changes(self, diffs: Sequence[ProductDiff]) -> list[ConfirmedChange]:
        confirmed: set[ConfirmedChange] = set()
        while True:
            self._print()
            for index, diff in enumerate(diffs, start=1):
                self._print(render_summary(diff, index=index, confirmed=diff.key in confirmed))
            self._print(SELECT_HELP)

            command = self._ask("> ")
            if command is None or command.lower() == "q":
                break
            if command == "c":
                if len(confirmed) == len(diffs):
                    confirmed.clear()
                else:
                    confirmed = {diff.key for diff in diffs}
                continue
            if command.startswith("v"):
                selected = _parse_index(command[1:], len(diffs))
                if selected is not None:
                    for line in render_diff(diffs[selected], colour=self._colour):
                        self._print(line)
                continue
            selected = _parse_index(command, len(diffs))
            if selected is None:
                continue
            key = diffs[selected].key
            confirmed.symmetric_difference_update({key})

        return [diff.key for diff in diffs if diff.key in confirmed]


class AutoConfirmation:
    """Answers yes to every prompt and accepts every diff."""

    def approve(self, prompt: str, *, previews: Sequence[ProductDiff] = ()) -> bool:  # noqa: ARG002
        return True

    def select_changes(self, diffs: Sequence[ProductDiff]) -> list[ConfirmedChange]:
        return [diff.key for diff in diffs]


def _parse_index(raw: str, count: int) -> int | None:
    try:
        value = int(raw.strip())
    except ValueError:
        return None
    if 1 <= value <= count:
        return value - 1
    return None
