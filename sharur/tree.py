"""Flattening of session trees into indented rows, and their text form."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence

_CONTENT_LIMIT = 80
_ROLE_WIDTH = 11


@dataclass(frozen=True)
class SessionNode:
    """A node of a session tree: a session or a message within one."""

    session_id: str
    name: str = ""
    first_message: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    role: str = ""
    content: str = ""
    is_active: bool = False
    parent_id: str | None = None
    parent_message_index: int | None = None
    merge_source_id: str | None = None
    children: tuple["SessionNode", ...] = ()


@dataclass(frozen=True)
class GutterInfo:
    """A vertical guide line at an indent position, drawn when shown."""

    position: int
    show: bool


@dataclass(frozen=True)
class FlatNode:
    """A tree node placed on its own row, with what is needed to draw its prefix."""

    node: SessionNode
    indent: int = 0
    show_connector: bool = False
    is_last: bool = False
    gutters: tuple[GutterInfo, ...] = field(default_factory=tuple)


def flatten_tree(roots: Sequence[SessionNode]) -> list[FlatNode]:
    """Flatten roots depth-first into rows with indents, connectors and gutters.

    Several roots are drawn as siblings under an implicit top, each with a
    connector line.
    """
    result: list[FlatNode] = []
    multiple_roots = len(roots) > 1

    # Each frame: node, indent, whether its parent branched, is last sibling, gutters.
    stack: list[tuple[SessionNode, int, bool, bool, tuple[GutterInfo, ...]]] = []
    for i in reversed(range(len(roots))):
        indent = 1 if multiple_roots else 0
        gutters: tuple[GutterInfo, ...] = ()
        if multiple_roots and i < len(roots) - 1:
            gutters = (GutterInfo(position=0, show=True),)
        stack.append((roots[i], indent, multiple_roots, i == len(roots) - 1, gutters))

    while stack:
        node, indent, just_branched, is_last, gutters = stack.pop()
        show_connector = just_branched
        result.append(
            FlatNode(
                node=node,
                indent=indent,
                show_connector=show_connector,
                is_last=is_last,
                gutters=gutters,
            )
        )

        children = node.children
        multiple_children = len(children) > 1
        if multiple_children or (just_branched and indent > 0):
            child_indent = indent + 1
        else:
            child_indent = indent

        child_gutters = gutters
        if show_connector and indent - 1 >= 0:
            child_gutters = gutters + (GutterInfo(position=indent - 1, show=not is_last),)

        for i in reversed(range(len(children))):
            stack.append(
                (
                    children[i],
                    child_indent,
                    multiple_children,
                    i == len(children) - 1,
                    child_gutters,
                )
            )
    return result


def tree_prefix(node: FlatNode) -> str:
    """The box-drawing prefix of a row: connector, guide lines and spacing."""
    shown = {g.position for g in node.gutters if g.show}
    connector = node.indent - 1 if node.show_connector else -1
    parts = []
    for level in range(node.indent):
        if level == connector:
            parts.append("└─ " if node.is_last else "├─ ")
        elif level in shown:
            parts.append("│  ")
        else:
            parts.append("   ")
    return "".join(parts)


def tree_line(node: FlatNode, selected: bool) -> str:
    """The text of a row: cursor, prefix, active marker, role and content preview."""
    content = node.node.content.replace("\n", " ")
    if len(content) > _CONTENT_LIMIT:
        content = content[: _CONTENT_LIMIT - 3] + "..."

    role = node.node.role or "record"
    role_part = f"[{role}]".ljust(_ROLE_WIDTH)
    marker = "● " if node.node.is_active else "  "
    cursor = "› " if selected else "  "
    return f"{cursor}{tree_prefix(node)}{marker}{role_part} {content}"