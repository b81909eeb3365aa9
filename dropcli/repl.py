"""REPL with prompt_toolkit for user interaction."""

import os
import sys

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import InMemoryHistory

from dropcli.commands import (
    handle_edit,
    handle_get,
    handle_history,
    handle_limits,
    handle_remove,
    handle_send,
    handle_text,
)
from dropcli.constants import (
    COMMANDS,
    HELP_TEXT,
    LOGO,
    PROMPT_TEXT,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
from dropcli.models import (
    EditCommand,
    GetCommand,
    HistoryCommand,
    LimitsCommand,
    RemoveCommand,
    SendCommand,
    TextCommand,
)
from dropcli.parser import ParseError, parse_command

HANDLERS = {
    TextCommand: handle_text,
    SendCommand: handle_send,
    GetCommand: handle_get,
    EditCommand: handle_edit,
    RemoveCommand: handle_remove,
    HistoryCommand: handle_history,
    LimitsCommand: handle_limits,
}


def clear_screen() -> None:
    """Clear the terminal screen (cross-platform)."""
    if sys.platform == "win32":
        os.system("cls")
    else:
        os.system("clear")


def show_welcome() -> None:
    print(LOGO)
    print(WELCOME_TITLE)
    print(WELCOME_HELP)


def dispatch_command(cmd_obj, client=None) -> str:
    """Dispatch parsed command to appropriate handler."""
    handler = HANDLERS.get(type(cmd_obj))
    if handler is None:
        return f"Unknown command type: {type(cmd_obj)}"
    return handler(cmd_obj, client)


def repl_loop() -> None:
    """Start interactive REPL with prompt_toolkit."""
    completer = WordCompleter(COMMANDS, ignore_case=True)
    history = InMemoryHistory()
    session: PromptSession = PromptSession(
        completer=completer, history=history, style=STYLE
    )

    clear_screen()
    show_welcome()

    while True:
        try:
            user_input = session.prompt([("class:prompt", PROMPT_TEXT)])
            stripped = user_input.strip()

            if not stripped:
                continue

            if stripped == "exit":
                print("Goodbye!")
                break

            if stripped == "help":
                print(HELP_TEXT)
                continue

            if stripped == "clear":
                clear_screen()
                show_welcome()
                continue

            cmd_obj = parse_command(user_input)
            print(dispatch_command(cmd_obj))

        except ParseError as e:
            print(f"Error: {e}")
        except KeyboardInterrupt:
            continue
        except EOFError:
            print("\nGoodbye!")
            break
