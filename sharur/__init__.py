"""Client-side building blocks for a terminal coding agent.

Prompt templates, chat history driven by agent events, print mode, slash
commands, session helpers, rebase and tree views, and ANSI rendering.
"""

__version__ = "0.1.0"

__all__ = [
    "ansi",
    "codeblock",
    "history",
    "models",
    "picker",
    "printing",
    "prompts",
    "rebase",
    "render",
    "sessions",
    "slash",
    "tree",
]