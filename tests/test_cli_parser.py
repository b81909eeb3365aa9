"""Tests for the CLI command parser."""

import pytest

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


def test_parse_text():
    cmd = parse_command('text "meeting at 3pm"')
    assert cmd == TextCommand(content="meeting at 3pm")


def test_parse_text_joins_unquoted_words():
    assert parse_command("text hello world").content == "hello world"


def test_parse_text_with_options():
    cmd = parse_command('text "notes" --expire 1hour --editable')

    assert cmd.content == "notes"
    assert cmd.expiration == "1hour"
    assert cmd.editable is True


def test_parse_text_options_before_content():
    cmd = parse_command("text --editable --expire 5min hi")
    assert cmd == TextCommand(content="hi", expiration="5min", editable=True)


def test_parse_text_requires_content():
    with pytest.raises(ParseError):
        parse_command("text --editable")


def test_parse_invalid_expiration():
    with pytest.raises(ParseError, match="Invalid expiration"):
        parse_command("text hi --expire forever")


def test_parse_expire_without_value():
    with pytest.raises(ParseError, match="requires a value"):
        parse_command("text hi --expire")


def test_parse_send():
    cmd = parse_command("send a.png 'my file.pdf' --expire 1day")

    assert isinstance(cmd, SendCommand)
    assert cmd.file_list == ("a.png", "my file.pdf")
    assert cmd.expiration == "1day"


def test_parse_send_rejects_editable():
    with pytest.raises(ParseError, match="only applies to text"):
        parse_command("send a.png --editable")


def test_parse_send_requires_files():
    with pytest.raises(ParseError):
        parse_command("send")


def test_parse_get():
    assert parse_command("get 0421") == GetCommand(code="0421")
    assert parse_command("get 0421 ~/Downloads") == GetCommand(code="0421", output_dir="~/Downloads")


def test_parse_get_composite_code():
    assert parse_command("get 0421-1700000000000").code == "0421-1700000000000"


@pytest.mark.parametrize("line", ["get", "get 421", "get abcd", "get 0421 a b", "remove 12345"])
def test_parse_bad_codes(line):
    with pytest.raises(ParseError):
        parse_command(line)


def test_parse_edit():
    assert parse_command('edit 0421 "new text"') == EditCommand(code="0421", content="new text")


def test_parse_edit_requires_content():
    with pytest.raises(ParseError):
        parse_command("edit 0421")


def test_parse_remove():
    assert parse_command("remove 0421") == RemoveCommand(code="0421")


def test_parse_history_and_limits():
    assert parse_command("history") == HistoryCommand()
    assert parse_command("limits") == LimitsCommand()


def test_parse_empty():
    with pytest.raises(ParseError, match="Empty command"):
        parse_command("   ")


def test_parse_unknown():
    with pytest.raises(ParseError, match="Unknown command"):
        parse_command("upload x")


def test_parse_unbalanced_quotes():
    with pytest.raises(ParseError, match="Invalid syntax"):
        parse_command('text "unterminated')
