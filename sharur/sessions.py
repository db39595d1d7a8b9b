"""Session references, branching labels, model specs and context usage."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable

from .models import ConversationMessage

_INT_RE = re.compile(r"[+-]?[0-9]+")
_MIN_PREFIX = 4
_SHORT_ID_LEN = 8


class TreeScope(str, Enum):
    """Which sessions a session tree covers."""

    SESSION = "session"
    PROJECT = "project"
    GLOBAL = "global"


@dataclass(frozen=True)
class SessionSummary:
    """A short description of a stored session."""

    id: str
    name: str = ""
    first_message: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None


def resolve_session_id(summaries: Iterable[SessionSummary], reference: str) -> str:
    """Resolve a full ID, an ID prefix of four or more characters, or a name part.

    An exact ID match wins; otherwise exactly one match is required.
    Raises LookupError when nothing or more than one session matches.
    """
    reference = reference.strip()
    lowered = reference.lower()

    matches: list[str] = []
    for summary in summaries:
        if summary.id == reference:
            return summary.id
        if len(reference) >= _MIN_PREFIX and summary.id.lower().startswith(lowered):
            matches.append(summary.id)
        elif lowered in summary.name.lower():
            matches.append(summary.id)

    quoted = json.dumps(reference, ensure_ascii=False)
    if len(matches) == 1:
        return matches[0]
    if matches:
        raise LookupError(f"ambiguous session reference {quoted}: {len(matches)} matches")
    raise LookupError(f"session {quoted} not found")


def short_id(session_id: str) -> str:
    """The first eight characters of a session ID."""
    return session_id[:_SHORT_ID_LEN]


def parse_branch_index(arg: str) -> int:
    """Parse an optional message index for branching; -1 means the end."""
    text = arg.strip()
    if text and _INT_RE.fullmatch(text):
        return int(text)
    return -1


def branch_label(msg_index: int, new_id: str, parent_id: str) -> str:
    """The notice shown after branching into a new session."""
    if msg_index >= 0:
        return (
            f"Branched at msg #{msg_index + 1} into new session: "
            f"{new_id} (parent: {parent_id})"
        )
    return f"Branched into new session: {new_id} (parent: {parent_id})"


def tree_scope(arg: str) -> TreeScope:
    """Pick the tree scope from ``--global``/``-g`` or ``--project``/``-p`` flags."""
    if "--global" in arg or "-g" in arg:
        return TreeScope.GLOBAL
    if "--project" in arg or "-p" in arg:
        return TreeScope.PROJECT
    return TreeScope.SESSION


def split_model_spec(spec: str, default_provider: str) -> tuple[str, str]:
    """Split ``provider/model`` into its parts; without a slash use the default provider."""
    provider, sep, model = spec.partition("/")
    if not sep:
        return default_provider, spec
    return provider, model


def context_usage_text(
    messages: Iterable[ConversationMessage], context_window: int | None
) -> str:
    """Summarise message counts of a session, with its context window if known."""
    user = assistant = tool_results = tool_calls = 0
    for msg in messages:
        if msg.role == "user":
            user += 1
        elif msg.role == "assistant":
            assistant += 1
            tool_calls += len(msg.tool_calls)
        elif msg.role == "tool":
            tool_results += 1

    text = (
        f"Context usage: {user + assistant + tool_results} messages "
        f"({user} user, {assistant} assistant, {tool_results} tool results, "
        f"{tool_calls} tool calls)"
    )
    if context_window is not None and context_window > 0:
        text += f" — window: {context_window} tokens"
    return text