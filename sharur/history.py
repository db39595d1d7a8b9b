"""Chat history state driven by agent events and conversation syncs."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Iterable

from .models import (
    Abort,
    AgentEnd,
    AgentStart,
    CompactEnd,
    CompactStart,
    ContentItem,
    ContentKind,
    ConversationMessage,
    ErrorEvent,
    HistoryEntry,
    MessageEnd,
    QueueUpdate,
    SessionState,
    StateChange,
    TextDelta,
    ThinkingDelta,
    ToolCallEntry,
    ToolCallEvent,
    ToolCallStatus,
    ToolDelta,
    Tokens,
    ToolOutputEntry,
    ToolOutputEvent,
)

SYNC_HISTORY = "sync_history"
SYNC_STATE = "sync_state"

_NOTICE_ROLES = frozenset({"info", "success", "warning", "error", "system"})
_RUNNING_STATES = frozenset({"thinking", "executing", "compacting"})
_SUMMARY_PREFIXES = ("<!-- sharur-summary -->", "**Turn Context (split turn):**")
_ERROR_PREFIXES = ("Error:", "tool error:")
_FILE_TOOLS = frozenset({"write", "edit", "read"})
_PRIORITY_KEYS = ("path", "filename", "id", "cmd", "command", "name", "url", "query")


def estimate_tokens(text: str) -> int:
    """Rough token estimate: one token per four bytes, rounded up."""
    return (len(text.encode("utf-8")) + 3) // 4


def _as_string(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    return None


def extract_first_argument(tool_name: str, args_json: str) -> str:
    """Summarise a tool call's JSON arguments for display."""
    if not args_json:
        return ""
    try:
        args = json.loads(args_json)
    except ValueError:
        return args_json
    if args is None:
        args = {}
    if not isinstance(args, dict):
        return args_json

    if tool_name in _FILE_TOOLS:
        path = _as_string(args.get("path")) or ""
        content = _as_string(args.get("content")) or ""
        if not content and "replacement" in args:
            content = _as_string(args["replacement"]) or ""
        if path and content:
            return f"{path}\n{content}"
        if path:
            return path
        if content:
            return content

    for key in _PRIORITY_KEYS:
        if key in args:
            text = _as_string(args[key])
            if text is not None:
                return text

    strings = [s for s in map(_as_string, args.values()) if s is not None]
    for text in strings:
        if len(text.encode("utf-8")) < 100:
            return text
    if strings:
        return strings[0]
    return args_json


def _is_error_content(content: str) -> bool:
    return content.startswith(_ERROR_PREFIXES)


@dataclass
class ChatHistory:
    """The conversation as shown to the user, plus agent status."""

    history: list[HistoryEntry] = field(default_factory=list)
    is_running: bool = False
    is_compacting: bool = False
    new_assistant_entry: bool = False
    tokens: int = 0
    prompt_history: list[str] = field(default_factory=list)
    history_index: int = -1
    model_name: str = ""
    provider: str = ""
    thinking: str = ""
    context_window: int = 0

    def _assistant_entries_from_end(self) -> Iterable[HistoryEntry]:
        return (e for e in reversed(self.history) if e.role == "assistant")

    def handle_event(self, event: Any) -> frozenset[str]:
        """Apply an agent event; return the follow-up syncs it asks for."""
        requests: set[str] = set()
        match event:
            case CompactStart():
                self.is_compacting = True
                self.add_notice("compaction", "Compacting context...")
            case CompactEnd(message=message):
                self.is_compacting = False
                for entry in reversed(self.history):
                    if entry.role == "compaction":
                        entry.items[0].text = message
                        break
                requests.update((SYNC_HISTORY, SYNC_STATE))
            case QueueUpdate():
                requests.add(SYNC_STATE)
            case AgentStart():
                self.is_running = True
            case TextDelta(content=content):
                self._append_text(ContentKind.TEXT, content)
            case ToolCallEvent():
                self._add_tool_call(event)
            case ToolDelta(tool_call_id=call_id, content=content):
                if content:
                    for entry in self._assistant_entries_from_end():
                        for item in entry.items:
                            if item.kind is ContentKind.TOOL_CALL and item.tc.id == call_id:
                                if item.tc.status is ToolCallStatus.RUNNING:
                                    item.tc.streaming_output += content
                                break
            case ThinkingDelta(content=content):
                if content:
                    self._append_text(ContentKind.THINKING, content)
            case ToolOutputEvent():
                self._add_tool_output(event)
            case MessageEnd(total_tokens=total):
                self.new_assistant_entry = True
                if total > 0:
                    self.tokens = total
            case StateChange(to=to):
                self.is_running = to in _RUNNING_STATES
            case AgentEnd() | Abort():
                self.is_running = False
            case ErrorEvent(message=message):
                self.is_running = False
                self.add_notice("error", message)
            case Tokens(value=value):
                if value > 0:
                    self.tokens = value
        return frozenset(requests)

    def _append_text(self, kind: ContentKind, content: str) -> None:
        entry = self.ensure_assistant_entry()
        if entry.items and entry.items[-1].kind is kind:
            entry.items[-1].text += content
        else:
            entry.items.append(ContentItem(kind=kind, text=content))
        self.tokens += estimate_tokens(content)

    def _add_tool_call(self, event: ToolCallEvent) -> None:
        if event.id:
            for entry in reversed(self.history):
                if entry.role != "assistant":
                    break
                if any(
                    item.kind is ContentKind.TOOL_CALL and item.tc.id == event.id
                    for item in entry.items
                ):
                    return
        entry = self.ensure_assistant_entry()
        entry.items.append(
            ContentItem(
                kind=ContentKind.TOOL_CALL,
                tc=ToolCallEntry(
                    id=event.id,
                    name=event.name,
                    arg=extract_first_argument(event.name, event.args_json),
                ),
            )
        )

    def _add_tool_output(self, event: ToolOutputEvent) -> None:
        for entry in self._assistant_entries_from_end():
            for index, item in enumerate(entry.items):
                if item.kind is not ContentKind.TOOL_CALL or item.tc.id != event.tool_call_id:
                    continue
                if not event.tool_call_id and item.tc.status is not ToolCallStatus.RUNNING:
                    continue
                failed = event.is_error or _is_error_content(event.content)
                item.tc.status = ToolCallStatus.FAILURE if failed else ToolCallStatus.SUCCESS
                entry.items.insert(
                    index + 1,
                    ContentItem(
                        kind=ContentKind.TOOL_OUTPUT,
                        out=ToolOutputEntry(
                            tool_call_id=event.tool_call_id,
                            tool_name=event.tool_name,
                            content=event.content,
                            is_error=event.is_error,
                        ),
                    ),
                )
                return

    def ensure_assistant_entry(self) -> HistoryEntry:
        """Return the assistant entry that streamed content belongs to, creating one if needed."""
        if self.history and self.history[-1].role == "assistant":
            last = self.history[-1]
            if not last.items or not self.new_assistant_entry:
                self.new_assistant_entry = False
                return last
        if (
            self.new_assistant_entry
            or not self.history
            or self.history[-1].role != "assistant"
        ):
            self.history.append(HistoryEntry(role="assistant"))
            self.new_assistant_entry = False
        return self.history[-1]

    def apply_sync(self, messages: Iterable[ConversationMessage]) -> None:
        """Rebuild the history from fetched messages, keeping trailing notices."""
        messages = list(messages)
        trailing: list[HistoryEntry] = []
        for entry in reversed(self.history):
            in_progress = entry.role == "compaction" and self.is_compacting
            is_notice = entry.role in _NOTICE_ROLES or in_progress
            if (self.is_running and entry.role == "assistant") or is_notice:
                trailing.insert(0, entry)
                continue
            break

        self.history = []
        for msg in messages:
            if msg.content.startswith(_SUMMARY_PREFIXES):
                continue
            if msg.role == "tool":
                self._attach_tool_result(msg)
                continue
            entry = HistoryEntry(role=msg.role)
            if msg.role == "assistant":
                if msg.thinking:
                    entry.items.append(ContentItem(kind=ContentKind.THINKING, text=msg.thinking))
                if msg.content:
                    entry.items.append(ContentItem(kind=ContentKind.TEXT, text=msg.content))
                for call in msg.tool_calls:
                    entry.items.append(
                        ContentItem(
                            kind=ContentKind.TOOL_CALL,
                            tc=ToolCallEntry(
                                id=call.id,
                                name=call.name,
                                arg=extract_first_argument(call.name, call.args_json),
                            ),
                        )
                    )
            else:
                entry.items.append(ContentItem(kind=ContentKind.TEXT, text=msg.content))
            self.history.append(entry)

        self.history.extend(trailing)
        self.new_assistant_entry = True
        self.update_prompt_history(messages)

        total = 0
        for entry in self.history:
            for item in entry.items:
                if item.kind in (ContentKind.TEXT, ContentKind.THINKING):
                    total += estimate_tokens(item.text)
                elif item.kind is ContentKind.TOOL_OUTPUT:
                    total += estimate_tokens(item.out.content)
        self.tokens = total

    def _attach_tool_result(self, msg: ConversationMessage) -> None:
        for entry in self._assistant_entries_from_end():
            for index, item in enumerate(entry.items):
                if item.kind is ContentKind.TOOL_CALL and item.tc.id == msg.tool_call_id:
                    item.tc.status = (
                        ToolCallStatus.FAILURE
                        if _is_error_content(msg.content)
                        else ToolCallStatus.SUCCESS
                    )
                    entry.items.insert(
                        index + 1,
                        ContentItem(
                            kind=ContentKind.TOOL_OUTPUT,
                            out=ToolOutputEntry(
                                tool_call_id=msg.tool_call_id, content=msg.content
                            ),
                        ),
                    )
                    return

    def apply_state(self, state: SessionState) -> None:
        """Take model, provider, thinking level and context window from session state."""
        self.model_name = state.model
        self.provider = state.provider
        self.thinking = state.thinking_level
        if state.context_window is not None:
            self.context_window = state.context_window

    def update_prompt_history(self, messages: Iterable[ConversationMessage]) -> None:
        """Collect distinct user prompts, in order, for input recall."""
        seen: set[str] = set()
        prompts: list[str] = []
        for msg in messages:
            if msg.role == "user" and msg.content and msg.content != "Continue":
                if msg.content not in seen:
                    seen.add(msg.content)
                    prompts.append(msg.content)
        self.prompt_history = prompts
        self.history_index = -1

    def add_notice(self, role: str, text: str) -> None:
        """Append a one-line notice entry."""
        self.history.append(HistoryEntry.notice(role, text))