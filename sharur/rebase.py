"""State and display of the rebase message picker and the model picker."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Sequence

from .models import ConversationMessage

_PREVIEW_LEN = 72


@dataclass(frozen=True)
class RebaseItem:
    """One message of a session with its keep and squash choice."""

    index: int
    role: str
    content: str
    checked: bool = True
    squash: bool = False


@dataclass(frozen=True)
class ModelChoice:
    """A model offered for selection."""

    name: str
    provider: str


def build_rebase_items(messages: Iterable[ConversationMessage]) -> list[RebaseItem]:
    """One item per message, all kept, with content cut to a short preview."""
    items = []
    for index, msg in enumerate(messages):
        content = msg.content
        if len(content) > _PREVIEW_LEN:
            content = content[:_PREVIEW_LEN] + "…"
        items.append(RebaseItem(index=index, role=msg.role, content=content))
    return items


def toggle_keep(item: RebaseItem) -> RebaseItem:
    """Flip whether the message is kept; dropping it also clears squash."""
    checked = not item.checked
    return replace(item, checked=checked, squash=item.squash and checked)


def toggle_squash(item: RebaseItem) -> RebaseItem:
    """Flip squashing; squashing a message also keeps it."""
    squash = not item.squash
    return replace(item, squash=squash, checked=squash or item.checked)


def toggle_all(items: Sequence[RebaseItem]) -> list[RebaseItem]:
    """Drop all when most are kept, otherwise keep all."""
    kept = sum(1 for item in items if item.checked)
    new_checked = kept < len(items) // 2 + 1
    return [
        replace(item, checked=new_checked, squash=item.squash and new_checked)
        for item in items
    ]


def checked_indices(items: Iterable[RebaseItem]) -> tuple[list[int], list[int]]:
    """Message indices to keep as they are, and indices to squash."""
    keep: list[int] = []
    squash: list[int] = []
    for item in items:
        if item.squash:
            squash.append(item.index)
        elif item.checked:
            keep.append(item.index)
    return keep, squash


def format_rebase_line(item: RebaseItem, selected: bool) -> str:
    """The picker line for an item, with cursor, check box, number and role."""
    cursor = "› " if selected else "  "
    if item.squash:
        check = "[S]"
    elif item.checked:
        check = "[x]"
    else:
        check = "[ ]"
    return f"{cursor} {check} #{item.index + 1:<3d} {item.role:<9s}: {item.content}"


def model_choices(
    models: Iterable[str], current_model: str
) -> tuple[list[ModelChoice], int]:
    """Turn ``provider/model`` strings into choices and find the current one.

    Returns the choices and the index to start at (the last matching name, or 0).
    """
    choices: list[ModelChoice] = []
    start = 0
    for index, spec in enumerate(models):
        provider, sep, name = spec.partition("/")
        if not sep:
            provider, name = "default", spec
        choices.append(ModelChoice(name=name, provider=provider))
        if name == current_model:
            start = index
    return choices, start