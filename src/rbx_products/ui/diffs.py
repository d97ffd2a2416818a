"""Plain-text rendering of product diffs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rbx_products.domain.diff import ChangeStatus

if TYPE_CHECKING:
    from rbx_products.domain.diff import FieldChange, ProductDiff

RED = "\033[31m"
GREEN = "\033[32m"
RESET = "\033[0m"


def _paint(text: str, colour: str, *, colour_enabled: bool) -> str:
    return f"{colour}{text}{RESET}" if colour_enabled else text


def change_lines(change: FieldChange) -> tuple[str | None, str]:
    """Left (remote) and right (local) lines for one field."""

    label = change.field.label
    if change.status is ChangeStatus.UNCHANGED:
        return f"  {label}: {change.old}", f"  {label}: {change.new}"
    if change.status is ChangeStatus.CHANGED:
        return f"- {label}: {change.old}", f"+ {label}: {change.new}"
    return None, f"+ {label}: {change.new}"


def render_summary(diff: ProductDiff, *, index: int, confirmed: bool) -> str:
    marker = "[x]" if confirmed else "[ ]"
    return f"{index:>3}. {marker} {diff.kind.label}: {diff.name} (ID: {diff.id})"


def render_diff(diff: ProductDiff, *, colour: bool = False, width: int = 38) -> list[str]:
    """Side-by-side view: remote values on the left, local changes on the right."""

    header = f"{'Remote Product':<{width}} | Product Changes"
    lines = [f"{diff.kind.label}: {diff.name} (ID: {diff.id})", header, "-" * len(header)]
    for change in diff.changes:
        left, right = change_lines(change)
        left_text = (left or "")[:width]
        padded = f"{left_text:<{width}}"
        if change.status is not ChangeStatus.UNCHANGED:
            padded = _paint(padded, RED, colour_enabled=colour and left is not None)
            right = _paint(right, GREEN, colour_enabled=colour)
        lines.append(f"{padded} | {right}")
    return lines
