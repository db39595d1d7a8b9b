"""Rendering of chat entries, tool calls and notices as coloured terminal boxes."""

from __future__ import annotations

import re
from typing import Sequence

from .ansi import capitalize, hex_to_true_color_bg, visible_width, wrap_text
from .models import ContentKind, HistoryEntry, ToolCallEntry, ToolCallStatus

RESET = "\x1b[0m"
MSG_WIDTH_RATIO = 0.8
_PAD = 2
_TRUNCATE_LINES = 10
_EXPAND_HINT = " (Ctrl+O to expand)"

_ACCENT = "#7aa2f7"
_TEXT = "#c0caf5"
_MUTED = "#8a8fa3"
_TOOL_FG = "#e0af68"
_USER_BG = "#2f3447"
_ASSISTANT_BG = "#1f2233"
_THINKING_BG = "#1a1c2a"
_TOOL_BG = {
    ToolCallStatus.RUNNING: "#2a2a3a",
    ToolCallStatus.SUCCESS: "#1e3a2a",
    ToolCallStatus.FAILURE: "#3a1e1e",
}
_NOTICE_BG = {
    "error": "#4a1f24",
    "warning": "#4a3b1f",
    "info": "#1f3a4a",
    "success": "#1f4a2c",
    "system": "#2d2d3a",
}
_NOTICE_ROLES = frozenset(_NOTICE_BG)
_ICONS = {
    ToolCallStatus.RUNNING: "◌",
    ToolCallStatus.SUCCESS: "✓",
    ToolCallStatus.FAILURE: "✗",
}

_RESET_RE = re.compile(r"\x1b\[0?m")
_SKILL_RE = re.compile(
    r'<skill name="([^"]+)" location="([^"]+)">\n(.*?)\n</skill>(.*)', re.DOTALL
)
_FILE_RE = re.compile(r'<file path="([^"]+)">\n(.*?)\n</file>(.*)', re.DOTALL)


def _fg(hex_color: str) -> str:
    value = hex_color.lstrip("#")
    r, g, b = (int(value[i:i + 2], 16) for i in (0, 2, 4))
    return f"\x1b[38;2;{r};{g};{b}m"


def _paint(text: str, color: str, *, bold: bool = False, italic: bool = False) -> str:
    if not text:
        return ""
    codes = ("\x1b[1m" if bold else "") + ("\x1b[3m" if italic else "") + _fg(color)
    return f"{codes}{text}{RESET}"


def _render_box(
    lines: Sequence[str],
    chat_width: int,
    msg_width: int,
    align_right: bool,
    background: str = "",
) -> str:
    bg = hex_to_true_color_bg(background) if background else ""
    inner = max(msg_width - 2 * _PAD, 1)
    indent = " " * max(chat_width - msg_width, 0) if align_right else ""
    side = " " * _PAD

    def row(text: str) -> str:
        pad = " " * max(inner - visible_width(text), 0)
        if not bg:
            return f"{indent}{side}{text}{pad}{side}"
        text = _RESET_RE.sub(lambda _: RESET + bg, text)
        return f"{indent}{bg}{side}{text}{bg}{pad}{side}{RESET}"

    rows = [row("")]
    for line in lines:
        rows.extend(row(piece) for piece in wrap_text(line, inner).split("\n"))
    rows.append(row(""))
    return "\n".join(rows)


def render_box(
    lines: Sequence[str], chat_width: int, msg_width: int, align_right: bool
) -> str:
    """Lay lines out in a padded box msg_width wide, with a blank row above and below.

    Long lines wrap; a right-aligned box is indented to end at chat_width.
    """
    return _render_box(lines, chat_width, msg_width, align_right)


def _text_box(
    text: str,
    chat_width: int,
    msg_width: int,
    align_right: bool,
    background: str,
    color: str,
    *,
    italic: bool = False,
) -> str:
    wrapped = wrap_text(text, msg_width - 2 * _PAD)
    lines = [_paint(line, color, italic=italic) for line in wrapped.split("\n")]
    return _render_box(lines, chat_width, msg_width, align_right, background)


def render_tool_call(
    tc: ToolCallEntry, output: str, chat_width: int, expanded: bool
) -> str:
    """A tool call card: status icon, name, arguments and its (possibly cut) output."""
    background = _TOOL_BG[tc.status]
    arg_lines = tc.arg.split("\n")
    header = f"{_ICONS[tc.status]} {tc.name}"
    if arg_lines[0]:
        header += " " + arg_lines[0]
    lines = [_paint(header, _TOOL_FG, bold=True)]
    lines.extend(_paint(line, _MUTED) for line in arg_lines[1:])

    if not output:
        output = tc.streaming_output
    if output:
        out_lines = output.split("\n")
        if not expanded and len(out_lines) > _TRUNCATE_LINES:
            out_lines = out_lines[:_TRUNCATE_LINES] + ["…"]
        lines.extend(_paint(line, _MUTED) for line in out_lines)

    return _render_box(lines, chat_width, chat_width, False, background)


def render_file_attachment(
    path: str, content: str, extra: str, chat_width: int, expanded: bool
) -> str:
    """A card for an attached file, its content shown only when expanded."""
    background = _TOOL_BG[ToolCallStatus.RUNNING]
    lines = [_paint("📎 file: " + path, _ACCENT, bold=True)]
    if expanded:
        lines.extend(_paint(line, _MUTED) for line in content.split("\n"))
    else:
        lines.append(_paint(_EXPAND_HINT, _MUTED))
    result = _render_box(lines, chat_width, chat_width, False, background)
    if extra:
        result += "\n\n" + extra
    return result


def render_skill(
    name: str, args: str, location: str, content: str, chat_width: int, expanded: bool
) -> str:
    """A card for an invoked skill, with location and body when expanded."""
    background = _TOOL_BG[ToolCallStatus.RUNNING]
    header = "skill: " + name
    if args:
        header += " " + args
    lines = [_paint(header, _ACCENT, bold=True)]
    if expanded:
        lines.append(_paint("Location: " + location, _MUTED))
        lines.append("")
        lines.extend(_paint(line, _MUTED) for line in content.split("\n"))
    else:
        lines.append(_paint(_EXPAND_HINT, _MUTED))
    return _render_box(lines, chat_width, chat_width, False, background)


def render_compaction_notice(content: str, chat_width: int) -> str:
    """A card reporting context compaction, ticked once it is complete."""
    background = _TOOL_BG[ToolCallStatus.RUNNING]
    header = "✓ Compaction" if "complete" in content else "◌ Compaction"
    lines = [_paint(header, _TOOL_FG, bold=True), _paint(content, _MUTED)]
    return _render_box(lines, chat_width, chat_width, False, background)


def _render_notice(role: str, text: str, chat_width: int) -> str:
    wrapped = wrap_text(capitalize(text), chat_width - 2 * _PAD)
    lines = [_paint(line, _TEXT, bold=True) for line in wrapped.split("\n")]
    return _render_box(lines, chat_width, chat_width, False, _NOTICE_BG[role])


def _render_user_text(text: str, chat_width: int, msg_width: int, expanded: bool) -> str:
    skill = _SKILL_RE.search(text)
    if skill:
        name, location, body, extra = skill.groups()
        return render_skill(name, extra.strip(), location, body, chat_width, expanded)
    attached = _FILE_RE.search(text)
    if attached:
        path, body, extra = attached.groups()
        return render_file_attachment(path, body, extra.strip(), chat_width, expanded)
    return _text_box(text, chat_width, msg_width, True, _USER_BG, _TEXT)


def render_entry(entry: HistoryEntry, chat_width: int, tool_calls_expanded: bool) -> str:
    """Render all items of a history entry, separated by blank lines, ending in a newline."""
    msg_width = int(chat_width * MSG_WIDTH_RATIO)
    parts: list[str] = []

    for index, item in enumerate(entry.items):
        if item.kind is ContentKind.THINKING:
            parts.append(
                _text_box(
                    item.text, chat_width, msg_width, False, _THINKING_BG, _MUTED,
                    italic=True,
                )
            )
        elif item.kind is ContentKind.TEXT:
            if entry.role == "user":
                parts.append(
                    _render_user_text(item.text, chat_width, msg_width, tool_calls_expanded)
                )
            elif entry.role in _NOTICE_ROLES:
                parts.append(_render_notice(entry.role, item.text, chat_width))
            elif entry.role == "compaction":
                parts.append(render_compaction_notice(item.text, chat_width))
            else:
                parts.append(
                    _text_box(item.text, chat_width, msg_width, False, _ASSISTANT_BG, _TEXT)
                )
        elif item.kind is ContentKind.TOOL_CALL:
            output = ""
            following = entry.items[index + 1] if index + 1 < len(entry.items) else None
            if following is not None and following.kind is ContentKind.TOOL_OUTPUT:
                output = following.out.content
            parts.append(render_tool_call(item.tc, output, chat_width, tool_calls_expanded))
        # Tool outputs are drawn inside the card of their tool call.

    return "\n\n".join(parts) + "\n"