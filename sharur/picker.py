"""Items, @-file fragments and file discovery for the input autocomplete picker."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum, auto

PICKER_PAGE_SIZE = 10

_SKIP_DIRS = frozenset({".git", "node_modules", "vendor", ".cache", "dist", "build"})


class PickerKind(Enum):
    """What kind of value a picker offers."""

    FILE = auto()
    SLASH = auto()
    SESSION = auto()
    SKILL = auto()
    PROMPT = auto()


@dataclass(frozen=True)
class PickerItem:
    """One entry of the picker."""

    kind: PickerKind
    title: str
    description: str = ""
    value: str = ""

    @property
    def filter_value(self) -> str:
        """The text the picker filters on."""
        return self.value


def at_fragment(value: str) -> tuple[str, int] | None:
    """Find an ``@word`` at the end of the last line of value.

    Returns the text after the ``@`` and the index of the ``@`` in value,
    or None when the last line has no ``@`` or the fragment holds a blank.
    """
    line_start = value.rfind("\n") + 1
    line = value[line_start:]
    at = line.rfind("@")
    if at < 0:
        return None
    fragment = line[at + 1:]
    if " " in fragment or "\t" in fragment:
        return None
    return fragment, line_start + at


def replace_at_fragment(value: str, at_index: int, replacement: str) -> str:
    """Replace everything after the ``@`` at at_index with replacement."""
    return value[: at_index + 1] + replacement


def _walk(directory: str, prefix: str, found: list[str]) -> None:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError:
        return
    for entry in entries:
        rel = os.path.join(prefix, entry.name) if prefix else entry.name
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError:
            continue
        if is_dir:
            if entry.name.startswith(".") or entry.name in _SKIP_DIRS:
                continue
            found.append(rel + "/")
            _walk(entry.path, rel, found)
        else:
            found.append(rel)


def discover_files(root: str | os.PathLike[str]) -> list[str]:
    """List files and directories under root as relative paths, in name order.

    Directories carry a trailing ``/``; hidden directories and bulky ones
    such as ``.git`` or ``node_modules`` are skipped.
    """
    root = os.fspath(root)
    try:
        is_dir = os.path.isdir(root) and not os.path.islink(root)
        exists = os.path.lexists(root)
    except OSError:
        return []
    if not exists:
        return []
    if not is_dir:
        return ["."]
    found: list[str] = []
    _walk(root, "", found)
    return found


def picker_height(count: int) -> int:
    """Rows the picker takes for count items: at most one page."""
    return max(0, min(count, PICKER_PAGE_SIZE))