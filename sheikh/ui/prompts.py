"""Line editing for ``sheikh chat``."""

from __future__ import annotations

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import FileHistory
from prompt_toolkit.key_binding import KeyBindings

from sheikh.config import HISTORY_FILE

CHAT_COMMANDS = ["/help", "/search", "/plan", "/skill", "/exit"]


def _chat_bindings() -> KeyBindings:
    kb = KeyBindings()

    @kb.add("escape", "enter")
    def _newline(event):
        event.current_buffer.insert_text("\n")

    return kb


def create_prompt_session() -> PromptSession:
    """Session with persistent history, history suggestions and slash-command completion.

    Enter submits; Esc then Enter inserts a line break.
    """
    HISTORY_FILE.parent.mkdir(parents=True, exist_ok=True)
    return PromptSession(
        history=FileHistory(str(HISTORY_FILE)),
        auto_suggest=AutoSuggestFromHistory(),
        completer=WordCompleter(CHAT_COMMANDS, sentence=True),
        complete_while_typing=False,
        key_bindings=_chat_bindings(),
        enable_history_search=True,
    )


def get_prompt_text(provider: str, model: str) -> str:
    # "llama3.2:latest" -> "llama3.2", "anthropic/claude-x" -> "claude-x"
    short = model.split(":")[0].split("/")[-1]
    return f"{provider}:{short} > "
