"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class TextCommand:
    """Share a text snippet."""

    content: str
    expiration: str | None = None
    editable: bool = False
    command: Literal["text"] = "text"


@dataclass(frozen=True)
class SendCommand:
    """Share one or more files."""

    file_list: tuple[str, ...]
    expiration: str | None = None
    command: Literal["send"] = "send"


@dataclass(frozen=True)
class GetCommand:
    """Fetch a share by code."""

    code: str
    output_dir: str | None = None
    command: Literal["get"] = "get"


@dataclass(frozen=True)
class EditCommand:
    """Replace the content of an editable text share."""

    code: str
    content: str
    command: Literal["edit"] = "edit"


@dataclass(frozen=True)
class RemoveCommand:
    code: str
    command: Literal["remove"] = "remove"


@dataclass(frozen=True)
class HistoryCommand:
    command: Literal["history"] = "history"


@dataclass(frozen=True)
class LimitsCommand:
    command: Literal["limits"] = "limits"


CommandRequest = (
    TextCommand
    | SendCommand
    | GetCommand
    | EditCommand
    | RemoveCommand
    | HistoryCommand
    | LimitsCommand
)
