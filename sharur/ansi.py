"""Helpers for ANSI-coloured terminal text: colours, width and wrapping."""

from __future__ import annotations

import re
import string

from wcwidth import wcwidth

_ANSI_PATTERN = (
    r"\x1b\[[0-?]*[ -/]*[@-~]"
    r"|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"
    r"|\x1b[@-Z\\-_]"
)
_ANSI_RE = re.compile(_ANSI_PATTERN)
_TOKEN_RE = re.compile(f"(?:{_ANSI_PATTERN})|.", re.DOTALL)

_FALLBACK_BG = "\x1b[48;2;45;45;45m"


def capitalize(text: str) -> str:
    """Return text with its first character upper-cased."""
    if not text:
        return ""
    first = text[0].upper()
    if len(first) != 1:
        first = text[0]
    return first + text[1:]


def _hex_byte(pair: str) -> int:
    if len(pair) == 2 and all(ch in string.hexdigits for ch in pair):
        return int(pair, 16)
    return 0


def hex_to_true_color_bg(hex_color: str) -> str:
    """Convert ``#rrggbb`` to a true-colour background escape sequence."""
    value = hex_color[1:] if hex_color.startswith("#") else hex_color
    if len(value) != 6:
        return _FALLBACK_BG
    r, g, b = (_hex_byte(value[i:i + 2]) for i in (0, 2, 4))
    return f"\x1b[48;2;{r};{g};{b}m"


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences."""
    return _ANSI_RE.sub("", text)


def _char_width(ch: str) -> int:
    return max(wcwidth(ch), 0)


def _line_width(line: str) -> int:
    return sum(_char_width(ch) for ch in line)


def visible_width(text: str) -> int:
    """Terminal cell width of the widest line, ignoring escape sequences."""
    return max((_line_width(line) for line in strip_ansi(text).split("\n")), default=0)


def _hard_break(word: str, width: int) -> list[str]:
    chunks: list[str] = []
    current = ""
    current_width = 0
    for match in _TOKEN_RE.finditer(word):
        token = match.group(0)
        token_width = 0 if token.startswith("\x1b") else _char_width(token)
        if current_width and current_width + token_width > width:
            chunks.append(current)
            current, current_width = "", 0
        current += token
        current_width += token_width
    chunks.append(current)
    return chunks


def _wrap_line(line: str, width: int) -> list[str]:
    lines: list[str] = []
    current: str | None = None
    after_break = False

    def place(word: str) -> str:
        if visible_width(word) > width:
            chunks = _hard_break(word, width)
            lines.extend(chunks[:-1])
            return chunks[-1]
        return word

    for word in line.split(" "):
        if current is None:
            if after_break and not word:
                continue
            current = place(word)
            continue
        if visible_width(current) + 1 + visible_width(word) <= width:
            current = f"{current} {word}"
            continue
        lines.append(current.rstrip(" "))
        current = None
        after_break = True
        if word:
            current = place(word)

    lines.append(current if current is not None else "")
    return lines


def wrap_text(content: str, width: int) -> str:
    """Word-wrap text to width cells, breaking words that do not fit.

    Existing line breaks are kept; a width below 1 leaves the text unchanged.
    """
    if width < 1:
        return content
    wrapped: list[str] = []
    for line in content.split("\n"):
        wrapped.extend(_wrap_line(line, width))
    return "\n".join(wrapped)