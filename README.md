# sharur

The client-side parts of a terminal coding agent, as a plain Python library.
It covers what sits between an agent service and the person typing:

- **Prompt templates** (`sharur.prompts`): find Markdown templates that may
  start with a front-matter block (`description`, `argument-hint`) and fill
  in their `$1`, `$2`, … placeholders. Each argument is wrapped in
  `<untrusted_input>` tags, and any `</untrusted_input>` inside an argument
  is replaced with `[REDACTED]`. A placeholder with no argument still gets an
  empty tagged block, so no bare `$N` is left in the text.
- **Data types** (`sharur.models`): history entries and content items,
  conversation messages, session state, and one small dataclass per agent
  event (`AgentStart`, `TextDelta`, `ThinkingDelta`, `ToolCallEvent`,
  `ToolDelta`, `ToolOutputEvent`, `MessageEnd`, `StateChange`, `ErrorEvent`,
  `Tokens`, `CompactStart`, `CompactEnd`, `QueueUpdate`, `AgentEnd`, `Abort`).
- **Chat history** (`sharur.history`): `ChatHistory` turns streamed agent
  events into an ordered conversation. It drops repeated tool calls, places
  each tool output straight after its call, marks calls as succeeded or
  failed, keeps trailing notices when the history is rebuilt from fetched
  messages (`apply_sync`), and estimates the token count as text arrives.
- **Print mode** (`sharur.printing`): `PrintHandler` sends one prompt. It
  builds the message from the arguments, from `@path` file references and
  from piped stdin, then writes the reply as plain text or as one JSON
  object per event.
- **Slash commands and sessions** (`sharur.slash`, `sharur.sessions`): parse
  `/command args`, recognise known commands, look up prompt templates by
  name, resolve a session from an exact id, an id prefix or part of its
  name, and build the texts shown after branching or for context usage.
- **Rebase picker and session tree** (`sharur.rebase`, `sharur.tree`): the
  keep/squash toggles used to rebase a conversation, model choices, and a
  flattened, box-drawn view of a tree of sessions.
- **Rendering** (`sharur.ansi`, `sharur.codeblock`, `sharur.render`,
  `sharur.picker`): ANSI-aware width measurement and word wrapping, boxed
  cards for messages, tool calls, attached files, skills and compaction
  notices, solid backgrounds for code blocks, and `@file` completion.

## Prompt templates

```python
from sharur.prompts import parse, expand, discover

prompt = parse(
    "---\ndescription: test prompt\nargument-hint: [text]\n---\nSummarize this: $1\n",
    "summarize.md",
)
print(prompt.description)   # test prompt
print(prompt.argument_hint) # [text]
print(prompt.template)      # Summarize this: $1
print(expand(prompt, "the release notes"))

templates = discover("prompts", "more/prompts")
```

`discover(*dirs)` searches every directory you pass, including
subdirectories, and loads each `.md` file it finds. Directories that do not
exist and files that cannot be read are skipped.

## Following an agent turn

```python
from sharur.history import ChatHistory
from sharur.models import AgentStart, TextDelta, ToolCallEvent, ToolOutputEvent
from sharur.render import render_entry

history = ChatHistory()
for event in [
    AgentStart(),
    TextDelta(content="Let me read that file.\n"),
    ToolCallEvent(id="call_1", name="read", args_json='{"path": "main.go"}'),
    ToolOutputEvent(tool_call_id="call_1", tool_name="read", content="package main\n"),
]:
    requests = history.handle_event(event)

for entry in history.history:
    print(render_entry(entry, 100, False))
```

`handle_event` returns a set of follow-up requests, `"sync_history"` and/or
`"sync_state"` (`sharur.history.SYNC_HISTORY`, `SYNC_STATE`). It is up to
the caller to fetch messages or state and pass them to `apply_sync` or
`apply_state`.

## Print mode

`PrintHandler` works with any client object that has these two methods:

- `configure_session(session_id, **settings)`
- `prompt(session_id, message)`, which returns an iterable of agent events

```python
import io
from sharur.printing import PrintHandler, PrintOptions

handler = PrintHandler(client, "session-1", PrintOptions(json_output=False),
                       stdin=io.StringIO(""))
handler.run(["Explain", "@README.md"])
```

Reply text goes to `out` (stdout by default). Tool calls, tool errors,
compaction and errors go to `err` (stderr by default), and thinking is left
out. With `json_output=True`, each event is written as one line such as
`{"textDelta":{"content":"Hi"}}`. When the arguments and stdin give no text
at all, `run` raises `ValueError`.

## Small helpers

```python
from sharur.slash import parse_slash_command, known_command
from sharur.sessions import SessionSummary, resolve_session_id
from sharur.picker import at_fragment
from sharur.ansi import capitalize

parse_slash_command("/model anthropic/claude")   # SlashCommand(name="model", arg="anthropic/claude", ...)
known_command("skill:review")                    # True
resolve_session_id([SessionSummary(id="abcd1234", name="refactor")], "abcd")  # "abcd1234"
at_fragment("look at @src/ma")                   # ("src/ma", 8)
capitalize("something went wrong")               # "Something went wrong"
```

`resolve_session_id` raises `LookupError` when nothing matches or when more
than one session does; `find_prompt_template` raises `LookupError` for an
unknown name.

## What this package does not do

It is a library only. It has no command-line program, no agent service or
network client, no interactive full-screen interface, no session storage on
disk, no skill discovery and no shell-command execution. The rendering
functions produce ANSI-coloured text with a fixed colour palette. They do
not render Markdown, so assistant text is shown as it was written.

## Requirements

Python 3.10 or later. The only dependency is `wcwidth`, which is used to
measure how wide text appears in the terminal.