"""Parsing of slash commands typed into the chat input."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable

from .prompts import Prompt

BASE_SLASH_COMMANDS: tuple[str, ...] = (
    "new",
    "resume",
    "branch",
    "fork",
    "rebase",
    "merge",
    "tree",
    "import",
    "export",
    "model",
    "stats",
    "compact",
    "config",
    "context",
    "exit",
    "quit",
)

_PREFIXED = ("skill:", "prompt:")


@dataclass(frozen=True)
class SlashCommand:
    """A parsed ``/command [args]`` line."""

    name: str
    arg: str
    raw: str


def parse_slash_command(text: str) -> SlashCommand | None:
    """Parse a leading slash command, or return None if text has none."""
    if not text.startswith("/"):
        return None
    name, sep, rest = text[1:].partition(" ")
    if not sep:
        return SlashCommand(name=name, arg="", raw=text)
    return SlashCommand(name=name, arg=rest.strip(), raw=text)


def known_command(name: str) -> bool:
    """Tell whether name is a recognised slash command."""
    return name.startswith(_PREFIXED) or name in BASE_SLASH_COMMANDS


def json_quote(text: str) -> str:
    """Quote text as a JSON string, escaping backslashes, quotes, newlines and tabs."""
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def _template_name(prompt: Prompt) -> str:
    base = os.path.basename(prompt.path)
    return base[: -len(".md")] if base.endswith(".md") else base


def find_prompt_template(prompts: Iterable[Prompt], name: str) -> str:
    """Return the template of the first prompt whose file is named ``<name>.md``.

    Raises LookupError when there is none, or when it is empty.
    """
    content = next((p.template for p in prompts if _template_name(p) == name), "")
    if not content:
        raise LookupError(f'prompt template "{name}" not found')
    return content