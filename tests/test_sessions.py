import pytest

from sharur.models import ConversationMessage, ToolCallInfo
from sharur.sessions import (
    SessionSummary,
    TreeScope,
    branch_label,
    context_usage_text,
    parse_branch_index,
    resolve_session_id,
    short_id,
    split_model_spec,
    tree_scope,
)

SUMMARIES = [
    SessionSummary(id="a1b2c3d4-0000", name="Refactor parser"),
    SessionSummary(id="a1b2ffff-1111", name="Write docs"),
    SessionSummary(id="zzzz9999-2222", name="Parser bugs"),
]


def test_resolve_exact_match():
    assert resolve_session_id(SUMMARIES, "zzzz9999-2222") == "zzzz9999-2222"


def test_resolve_exact_match_with_whitespace():
    assert resolve_session_id(SUMMARIES, "  a1b2ffff-1111 ") == "a1b2ffff-1111"


def test_resolve_unique_prefix():
    assert resolve_session_id(SUMMARIES, "A1B2C") == "a1b2c3d4-0000"


def test_resolve_name_substring():
    assert resolve_session_id(SUMMARIES, "docs") == "a1b2ffff-1111"


def test_resolve_ambiguous_prefix():
    with pytest.raises(LookupError, match="ambiguous"):
        resolve_session_id(SUMMARIES, "a1b2")


def test_resolve_ambiguous_name():
    with pytest.raises(LookupError, match="ambiguous"):
        resolve_session_id(SUMMARIES, "parser")


def test_resolve_not_found():
    with pytest.raises(LookupError, match="not found"):
        resolve_session_id(SUMMARIES, "nothing-like-this")


def test_short_prefix_is_not_used_as_id_prefix():
    with pytest.raises(LookupError, match="not found"):
        resolve_session_id(SUMMARIES, "a1b")


def test_short_id_truncates_long_ids():
    sid = "0123456789abcdef"
    result = short_id(sid)
    assert len(result) == 8
    assert sid.startswith(result)


def test_short_id_keeps_short_ids():
    assert short_id("abc") == "abc"


@pytest.mark.parametrize(
    "arg, expected",
    [("", -1), ("3", 3), (" 5 ", 5), ("abc", -1), ("1_0", -1), ("-1", -1), ("+2", 2)],
)
def test_parse_branch_index(arg, expected):
    assert parse_branch_index(arg) == expected


def test_branch_label_at_end():
    assert branch_label(-1, "new", "old") == "Branched into new session: new (parent: old)"


def test_branch_label_at_message_is_one_based():
    label = branch_label(0, "new", "old")
    assert label.startswith("Branched at msg #1 into new session: new")
    assert label.endswith("(parent: old)")


@pytest.mark.parametrize(
    "arg, expected",
    [
        ("", TreeScope.SESSION),
        ("--global", TreeScope.GLOBAL),
        ("-g", TreeScope.GLOBAL),
        ("--project", TreeScope.PROJECT),
        ("-p", TreeScope.PROJECT),
        ("-p -g", TreeScope.GLOBAL),
    ],
)
def test_tree_scope(arg, expected):
    assert tree_scope(arg) is expected


def test_split_model_spec_with_provider():
    assert split_model_spec("anthropic/claude-opus-4-5", "ollama") == (
        "anthropic",
        "claude-opus-4-5",
    )


def test_split_model_spec_without_provider():
    assert split_model_spec("llama3", "ollama") == ("ollama", "llama3")


def test_split_model_spec_splits_at_first_slash():
    provider, model = split_model_spec("openai/org/model", "x")
    assert provider == "openai"
    assert model == "org/model"


def _conversation():
    return [
        ConversationMessage(role="user", content="hi"),
        ConversationMessage(
            role="assistant",
            content="ok",
            tool_calls=(ToolCallInfo(id="1", name="ls"), ToolCallInfo(id="2", name="read")),
        ),
        ConversationMessage(role="tool", content="out", tool_call_id="1"),
        ConversationMessage(role="user", content="again"),
    ]


def test_context_usage_counts():
    text = context_usage_text(_conversation(), None)
    assert text == (
        "Context usage: 4 messages (2 user, 1 assistant, 1 tool results, 2 tool calls)"
    )


def test_context_usage_with_window():
    text = context_usage_text(_conversation(), 128000)
    assert text.endswith(" — window: 128000 tokens")
    assert text.startswith(context_usage_text(_conversation(), None))


def test_context_usage_zero_window_omitted():
    assert "window" not in context_usage_text([], 0)