"""Make code blocks in rendered markdown a solid background rectangle."""

from __future__ import annotations

import re

from .ansi import hex_to_true_color_bg, visible_width

RESET = "\x1b[0m"
_RESET_RE = re.compile(r"\x1b\[0?m")


def _strip_resets(line: str) -> str:
    return _RESET_RE.sub("", line)


def fix_code_block_lines(rendered: str, code_bg_hex: str) -> str:
    """Pad each run of code-block lines to a common width on the code background.

    Code-block lines are those holding the true-colour background escape of
    code_bg_hex; a visually empty line between two of them joins the run.
    Resets inside a run are removed so the background stays active, every
    line gets the background escape, and each ends with a single reset.
    """
    bg = hex_to_true_color_bg(code_bg_hex)
    lines = rendered.split("\n")

    i = 0
    while i < len(lines):
        if bg not in lines[i]:
            i += 1
            continue

        start = i
        i += 1
        while i < len(lines):
            if bg in lines[i]:
                i += 1
                continue
            if (
                visible_width(lines[i]) == 0
                and i + 1 < len(lines)
                and bg in lines[i + 1]
            ):
                i += 1
                continue
            break
        end = i

        stripped = [_strip_resets(line) for line in lines[start:end]]
        widest = max(visible_width(s) for s in stripped)
        for offset, text in enumerate(stripped):
            if bg not in text:
                text = bg + text
            pad = max(widest - visible_width(text), 0)
            lines[start + offset] = text + " " * pad + RESET

    return "\n".join(lines)