"""Discovery, parsing and expansion of prompt template files."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

_UNTRUSTED_CLOSE = "</untrusted_input>"


@dataclass
class Prompt:
    """A parsed prompt template."""

    path: str = ""
    description: str = ""
    argument_hint: str = ""
    template: str = ""


def parse(content: str, path: str) -> Prompt:
    """Parse template text with optional ``---`` front matter."""
    prompt = Prompt(path=str(path))

    if not content.startswith("---"):
        prompt.template = content.strip()
        return prompt

    lines = content.split("\n")
    end = next(
        (i for i, line in enumerate(lines[1:], start=1) if line.strip() == "---"),
        None,
    )
    if end is None:
        prompt.template = content.strip()
        return prompt

    for line in lines[1:end]:
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key = key.strip()
        value = value.strip()
        if key == "description":
            prompt.description = value
        elif key == "argument-hint":
            prompt.argument_hint = value

    prompt.template = "\n".join(lines[end + 1:]).strip()
    return prompt


def load(path: str | os.PathLike[str]) -> Prompt:
    """Read and parse a prompt template file."""
    data = Path(path).read_bytes().decode("utf-8", errors="replace")
    return parse(data, os.fspath(path))


def _is_markdown(name: str) -> bool:
    return name.lower().endswith(".md")


def _walk_dir(directory: str) -> Iterator[Prompt]:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError:
        return
    for entry in entries:
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError:
            continue
        if is_dir:
            yield from _walk_dir(entry.path)
        elif _is_markdown(entry.name):
            try:
                yield load(entry.path)
            except OSError:
                continue


def _walk(root: str) -> Iterator[Prompt]:
    try:
        mode = os.lstat(root).st_mode
    except OSError:
        return
    if stat.S_ISDIR(mode):
        yield from _walk_dir(root)
    elif _is_markdown(os.path.basename(root)):
        try:
            yield load(root)
        except OSError:
            return


def discover(*args: str | os.PathLike[str]) -> list[Prompt]:
    """Find and load every ``.md`` template under the given directories, recursively."""
    found: list[Prompt] = []
    for root in args:
        found.extend(_walk(os.fspath(root)))
    return found


def expand(prompt: Prompt, *args: str) -> str:
    """Substitute ``$1``, ``$2``, ... with arguments wrapped in untrusted-input tags.

    Placeholders without a matching argument get an empty tagged block.
    """
    result = prompt.template

    count = 0
    while f"${count + 1}" in result:
        count += 1

    for number in range(1, count + 1):
        raw = args[number - 1] if number <= len(args) else ""
        raw = raw.replace(_UNTRUSTED_CLOSE, "[REDACTED]")
        tagged = f"<untrusted_input>\n{raw}\n{_UNTRUSTED_CLOSE}"
        result = result.replace(f"${number}", tagged)
    return result.strip()