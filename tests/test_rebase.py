from sharur.models import ConversationMessage
from sharur.rebase import (
    ModelChoice,
    RebaseItem,
    build_rebase_items,
    checked_indices,
    format_rebase_line,
    model_choices,
    toggle_all,
    toggle_keep,
    toggle_squash,
)


def _messages():
    return [
        ConversationMessage(role="user", content="hello"),
        ConversationMessage(role="assistant", content="x" * 100),
        ConversationMessage(role="tool", content="out"),
    ]


def test_build_items_all_kept_in_order():
    items = build_rebase_items(_messages())
    assert [i.index for i in items] == [0, 1, 2]
    assert [i.role for i in items] == ["user", "assistant", "tool"]
    assert all(i.checked and not i.squash for i in items)


def test_build_items_truncates_long_content():
    items = build_rebase_items(_messages())
    assert items[0].content == "hello"
    assert items[1].content == "x" * 72 + "…"


def test_toggle_keep_round_trip():
    item = RebaseItem(index=0, role="user", content="a")
    assert toggle_keep(toggle_keep(item)) == item
    assert toggle_keep(item).checked is False


def test_toggle_keep_off_clears_squash():
    item = RebaseItem(index=0, role="user", content="a", checked=True, squash=True)
    dropped = toggle_keep(item)
    assert dropped.checked is False
    assert dropped.squash is False


def test_toggle_squash_keeps_message():
    item = RebaseItem(index=0, role="user", content="a", checked=False)
    squashed = toggle_squash(item)
    assert squashed.squash is True
    assert squashed.checked is True
    unsquashed = toggle_squash(squashed)
    assert unsquashed.squash is False
    assert unsquashed.checked is True


def test_toggle_all_drops_when_all_kept():
    items = build_rebase_items(_messages())
    result = toggle_all(items)
    assert not any(i.checked for i in result)


def test_toggle_all_keeps_when_none_kept():
    items = [toggle_keep(i) for i in build_rebase_items(_messages())]
    result = toggle_all(items)
    assert all(i.checked for i in result)


def test_toggle_all_clears_squash_when_dropping():
    items = [toggle_squash(i) for i in build_rebase_items(_messages())]
    result = toggle_all(items)
    assert not any(i.squash or i.checked for i in result)


def test_checked_indices_split():
    items = build_rebase_items(_messages())
    items[0] = toggle_keep(items[0])
    items[2] = toggle_squash(items[2])
    keep, squash = checked_indices(items)
    assert keep == [1]
    assert squash == [2]


def test_checked_indices_empty_when_all_dropped():
    items = toggle_all(build_rebase_items(_messages()))
    assert checked_indices(items) == ([], [])


def test_format_line_unselected():
    item = RebaseItem(index=0, role="user", content="hi")
    assert format_rebase_line(item, False) == "   [x] #1   user     : hi"


def test_format_line_marks():
    item = RebaseItem(index=4, role="assistant", content="text")
    assert format_rebase_line(item, True).startswith("› ")
    assert "[S]" in format_rebase_line(toggle_squash(item), False)
    assert "[ ]" in format_rebase_line(toggle_keep(item), False)
    assert "#5 " in format_rebase_line(item, False)


def test_model_choices_split_and_start():
    choices, start = model_choices(["anthropic/claude", "gpt"], "gpt")
    assert choices == [
        ModelChoice(name="claude", provider="anthropic"),
        ModelChoice(name="gpt", provider="default"),
    ]
    assert start == 1


def test_model_choices_unknown_current_starts_at_zero():
    choices, start = model_choices(["a/b", "c/d"], "zzz")
    assert start == 0
    assert len(choices) == 2