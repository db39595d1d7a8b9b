"""Print mode: send one prompt to the agent and stream the reply to the terminal."""

from __future__ import annotations

import contextlib
import dataclasses
import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Protocol, Sequence, TextIO

from .models import (
    Abort,
    AgentEnd,
    AgentStart,
    CompactEnd,
    CompactStart,
    ErrorEvent,
    MessageEnd,
    QueueUpdate,
    StateChange,
    TextDelta,
    ThinkingDelta,
    Tokens,
    ToolCallEvent,
    ToolDelta,
    ToolOutputEvent,
)

_EVENT_KEYS: dict[type, str] = {
    AgentStart: "agentStart",
    AgentEnd: "agentEnd",
    Abort: "abort",
    TextDelta: "textDelta",
    ThinkingDelta: "thinkingDelta",
    ToolCallEvent: "toolCall",
    ToolDelta: "toolDelta",
    ToolOutputEvent: "toolOutput",
    MessageEnd: "messageEnd",
    StateChange: "stateChange",
    ErrorEvent: "error",
    Tokens: "tokens",
    CompactStart: "compactStart",
    CompactEnd: "compactEnd",
    QueueUpdate: "queueUpdate",
}

_FIELD_NAMES = {"from_state": "from"}

_NO_PROMPT = "no prompt provided — pass text or pipe stdin"


class _PromptClient(Protocol):
    def configure_session(self, session_id: str, **settings: Any) -> Any: ...

    def prompt(self, session_id: str, message: str) -> Iterable[Any]: ...


@dataclass
class PrintOptions:
    """Startup options for print mode."""

    no_session: bool = False
    preload_session: str = ""
    system_prompt: str = ""
    thinking_level: str = ""
    json_output: bool = False
    dry_run: bool = False


def _is_terminal(stream: Any) -> bool:
    try:
        return bool(stream.isatty())
    except (AttributeError, ValueError, OSError):
        return False


def build_prompt(args: Sequence[str], stdin: TextIO | None = None) -> tuple[str, str]:
    """Split arguments into prompt text and attached data.

    Piped (non-terminal) standard input and ``@path`` arguments become
    attached data; every other argument is prompt text.
    """
    prompt_parts: list[str] = []
    file_parts: list[str] = []

    if stdin is not None and not _is_terminal(stdin):
        lines = stdin.read().split("\n")
        text = "\n".join(line.rstrip("\r") for line in lines).strip()
        if text:
            file_parts.append(text)

    for arg in args:
        if arg.startswith("@"):
            path = arg[1:]
            data = Path(path).read_bytes().decode("utf-8", errors="replace")
            file_parts.append(f"--- {path} ---\n{data}")
        else:
            prompt_parts.append(arg)

    return " ".join(prompt_parts), "\n\n".join(file_parts)


def merge_prompt(prompt: str, file_data: str) -> str:
    """Place attached data before the prompt text."""
    if not file_data:
        return prompt
    if not prompt:
        return file_data
    return f"{file_data}\n\n{prompt}"


def _camel(name: str) -> str:
    if name in _FIELD_NAMES:
        return _FIELD_NAMES[name]
    first, *rest = name.split("_")
    return first + "".join(part.title() for part in rest)


def event_to_json(event: Any) -> str:
    """Encode an agent event as a one-line JSON object keyed by its kind.

    Fields holding their default value are left out.
    """
    key = _EVENT_KEYS.get(type(event))
    if key is None:
        raise TypeError(f"not an agent event: {type(event).__name__}")
    body = {
        _camel(f.name): getattr(event, f.name)
        for f in dataclasses.fields(event)
        if getattr(event, f.name) != f.default
    }
    return json.dumps({key: body}, ensure_ascii=False, separators=(",", ":"))


def write_event(event: Any, out: TextIO, err: TextIO) -> None:
    """Write an event in plain-text form: reply text to out, notices to err."""
    match event:
        case TextDelta(content=content):
            out.write(content)
        case ThinkingDelta():
            pass
        case ToolCallEvent(name=name):
            err.write(f"\n[tool: {name}]\n")
        case ToolOutputEvent(is_error=True, content=content):
            err.write(f"[tool error: {content}]\n")
        case CompactStart():
            err.write("\n[compacting context…]\n")
        case ErrorEvent(message=message):
            err.write(f"\nError: {message}\n")


def _drain(events: Iterable[Any]) -> Iterable[Any]:
    # A broken or closed stream simply ends the reply.
    iterator = iter(events)
    while True:
        try:
            yield next(iterator)
        except StopIteration:
            return
        except Exception:  # noqa: BLE001
            return


@dataclass
class PrintHandler:
    """Runs a single prompt against a session and prints the streamed reply."""

    client: _PromptClient
    session_id: str
    options: PrintOptions = field(default_factory=PrintOptions)
    stdin: TextIO | None = None
    out: TextIO | None = None
    err: TextIO | None = None

    def run(self, args: Sequence[str]) -> None:
        """Send the prompt built from args and stream events until the reply ends."""
        stdin = self.stdin if self.stdin is not None else sys.stdin
        out = self.out if self.out is not None else sys.stdout
        err = self.err if self.err is not None else sys.stderr

        prompt, file_data = build_prompt(args, stdin)
        if not prompt and not file_data:
            raise ValueError(_NO_PROMPT)
        message = merge_prompt(prompt, file_data)

        with contextlib.suppress(Exception):
            self.client.configure_session(
                self.session_id,
                system_prompt=self.options.system_prompt,
                thinking_level=self.options.thinking_level,
                dry_run=self.options.dry_run,
            )

        events = self.client.prompt(self.session_id, message)
        for event in _drain(events):
            if self.options.json_output:
                try:
                    line = event_to_json(event)
                except TypeError:
                    continue
                out.write(line + "\n")
                continue
            write_event(event, out, err)
        out.write("\n")