"""Command parser for CLI input."""

import re
import shlex
from typing import Optional

from dropcli.constants import EXPIRATION_CHOICES
from dropcli.models import (
    CommandRequest,
    EditCommand,
    GetCommand,
    HistoryCommand,
    LimitsCommand,
    RemoveCommand,
    SendCommand,
    TextCommand,
)

CODE_RE = re.compile(r"^\d{4}(?:-\d+)?$")


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object (one of Text/Send/Get/Edit/Remove/History/Limits)

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]
    args = tokens[1:]

    if command_name == "text":
        return _parse_text(args)
    elif command_name == "send":
        return _parse_send(args)
    elif command_name == "get":
        return _parse_get(args)
    elif command_name == "edit":
        return _parse_edit(args)
    elif command_name == "remove":
        return _parse_remove(args)
    elif command_name == "history":
        return HistoryCommand()
    elif command_name == "limits":
        return LimitsCommand()
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _extract_options(args: list[str], allow_editable: bool) -> tuple[list[str], Optional[str], bool]:
    """Split '--expire OPT' and '--editable' out of the positional arguments."""
    positional = []
    expiration = None
    editable = False

    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--expire":
            if i + 1 >= len(args):
                raise ParseError("--expire requires a value")
            expiration = args[i + 1]
            if expiration not in EXPIRATION_CHOICES:
                raise ParseError(
                    f"Invalid expiration '{expiration}'. Choose one of: {', '.join(EXPIRATION_CHOICES)}"
                )
            i += 2
            continue
        if arg == "--editable":
            if not allow_editable:
                raise ParseError("--editable only applies to text shares")
            editable = True
        else:
            positional.append(arg)
        i += 1

    return positional, expiration, editable


def _parse_text(args: list[str]) -> TextCommand:
    """Parse 'text <content> [--expire OPT] [--editable]' command."""
    positional, expiration, editable = _extract_options(args, allow_editable=True)
    content = " ".join(positional)
    if not content.strip():
        raise ParseError("text requires content")
    return TextCommand(content=content, expiration=expiration, editable=editable)


def _parse_send(args: list[str]) -> SendCommand:
    """Parse 'send <file...> [--expire OPT]' command."""
    positional, expiration, _ = _extract_options(args, allow_editable=False)
    if not positional:
        raise ParseError("send requires at least one file")
    return SendCommand(file_list=tuple(positional), expiration=expiration)


def _parse_code(value: str) -> str:
    if not CODE_RE.match(value):
        raise ParseError(f"Invalid code '{value}'. Codes are 4 digits, e.g. 0421")
    return value


def _parse_get(args: list[str]) -> GetCommand:
    """Parse 'get <code> [output_dir]' command."""
    if not args or len(args) > 2:
        raise ParseError("get requires a code and an optional output directory")
    output_dir = args[1] if len(args) == 2 else None
    return GetCommand(code=_parse_code(args[0]), output_dir=output_dir)


def _parse_edit(args: list[str]) -> EditCommand:
    """Parse 'edit <code> <content>' command."""
    if len(args) < 2:
        raise ParseError("edit requires a code and new content")
    return EditCommand(code=_parse_code(args[0]), content=" ".join(args[1:]))


def _parse_remove(args: list[str]) -> RemoveCommand:
    if len(args) != 1:
        raise ParseError("remove requires exactly one code")
    return RemoveCommand(code=_parse_code(args[0]))
