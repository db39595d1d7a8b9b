"""Data types for chat history, conversation messages and agent events."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union


class ContentKind(Enum):
    """Kind of an ordered piece of a rendered message."""

    THINKING = auto()
    TEXT = auto()
    TOOL_CALL = auto()
    TOOL_OUTPUT = auto()


class ToolCallStatus(Enum):
    """Progress of a tool call."""

    RUNNING = auto()
    SUCCESS = auto()
    FAILURE = auto()


@dataclass
class ToolCallEntry:
    """A tool call as shown in the chat."""

    id: str = ""
    name: str = ""
    arg: str = ""
    status: ToolCallStatus = ToolCallStatus.RUNNING
    streaming_output: str = ""


@dataclass
class ToolOutputEntry:
    """The result of a single tool execution."""

    tool_call_id: str = ""
    tool_name: str = ""
    content: str = ""
    is_error: bool = False


@dataclass
class ContentItem:
    """An ordered piece of a message: thinking, text, tool call or tool output."""

    kind: ContentKind
    text: str = ""
    tc: ToolCallEntry = field(default_factory=ToolCallEntry)
    out: ToolOutputEntry = field(default_factory=ToolOutputEntry)


@dataclass
class HistoryEntry:
    """A single rendered message with its ordered content items."""

    role: str
    items: list[ContentItem] = field(default_factory=list)

    @classmethod
    def notice(cls, role: str, text: str) -> "HistoryEntry":
        """Build an entry holding one text item, as used for notices."""
        return cls(role=role, items=[ContentItem(kind=ContentKind.TEXT, text=text)])


@dataclass(frozen=True)
class ToolCallInfo:
    """A tool call recorded on an assistant message."""

    id: str = ""
    name: str = ""
    args_json: str = ""


@dataclass(frozen=True)
class ConversationMessage:
    """A message of a session's conversation."""

    role: str
    content: str = ""
    thinking: str = ""
    tool_call_id: str = ""
    tool_calls: tuple[ToolCallInfo, ...] = ()


@dataclass(frozen=True)
class SessionState:
    """The current configuration of a session."""

    session_id: str = ""
    model: str = ""
    provider: str = ""
    thinking_level: str = ""
    system_prompt: str = ""
    context_window: int | None = None


@dataclass(frozen=True)
class AgentStart:
    """The agent began a turn."""


@dataclass(frozen=True)
class AgentEnd:
    """The agent finished a turn."""


@dataclass(frozen=True)
class Abort:
    """The agent turn was aborted."""


@dataclass(frozen=True)
class TextDelta:
    """A chunk of assistant text."""

    content: str = ""


@dataclass(frozen=True)
class ThinkingDelta:
    """A chunk of assistant reasoning."""

    content: str = ""


@dataclass(frozen=True)
class ToolCallEvent:
    """The model requested a tool call."""

    id: str = ""
    name: str = ""
    args_json: str = ""


@dataclass(frozen=True)
class ToolDelta:
    """Partial output of a running tool."""

    tool_call_id: str = ""
    content: str = ""


@dataclass(frozen=True)
class ToolOutputEvent:
    """Final output of a tool."""

    tool_call_id: str = ""
    tool_name: str = ""
    content: str = ""
    is_error: bool = False


@dataclass(frozen=True)
class MessageEnd:
    """An assistant message is complete."""

    total_tokens: int = 0


@dataclass(frozen=True)
class StateChange:
    """The agent moved between states."""

    from_state: str = ""
    to: str = ""


@dataclass(frozen=True)
class ErrorEvent:
    """The agent reported an error."""

    message: str = ""


@dataclass(frozen=True)
class Tokens:
    """Updated token count of the context."""

    value: int = 0


@dataclass(frozen=True)
class CompactStart:
    """Context compaction began."""


@dataclass(frozen=True)
class CompactEnd:
    """Context compaction finished."""

    message: str = ""


@dataclass(frozen=True)
class QueueUpdate:
    """The queue of steering and follow-up messages changed."""


AgentEvent = Union[
    AgentStart,
    AgentEnd,
    Abort,
    TextDelta,
    ThinkingDelta,
    ToolCallEvent,
    ToolDelta,
    ToolOutputEvent,
    MessageEnd,
    StateChange,
    ErrorEvent,
    Tokens,
    CompactStart,
    CompactEnd,
    QueueUpdate,
]