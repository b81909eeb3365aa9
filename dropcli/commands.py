"""Command handler functions for CLI operations."""

import time
from pathlib import Path
from typing import Optional

from dropcli.client import DropClient
from dropcli.config import Config
from dropcli.models import (
    EditCommand,
    GetCommand,
    HistoryCommand,
    LimitsCommand,
    RemoveCommand,
    SendCommand,
    TextCommand,
)
from dropcommon.formatting import format_expiration_time
from dropcommon.logging_config import get_logger

logger = get_logger(__name__)


DEFAULT_CONFIG_PATH = Path.home() / '.codedrop' / 'config.json'

_client: Optional[DropClient] = None


def configure_client(config_path: Optional[Path] = None, server_url: Optional[str] = None) -> DropClient:
    """
    Replace the global DropClient.

    Args:
        config_path: Config file to use instead of ~/.codedrop/config.json
        server_url: Server to talk to for this session; the config file is left unchanged

    Returns:
        The new DropClient instance
    """
    global _client
    if _client is not None:
        _client.close()
    config = Config(config_path or DEFAULT_CONFIG_PATH)
    _client = DropClient(config, base_url=server_url)
    return _client


def get_client() -> DropClient:
    """
    Get or create global DropClient instance.

    Returns:
        DropClient instance
    """
    if _client is None:
        logger.debug("Creating new DropClient instance")
        return configure_client()
    return _client


def handle_text(cmd: TextCommand, client: Optional[DropClient] = None) -> str:
    """
    Handle 'text' command.

    Args:
        cmd: TextCommand with content, expiration and editable flag
        client: Optional DropClient for dependency injection (testing)

    Returns:
        Share code message or error message
    """
    if client is None:
        client = get_client()
    return client.share_text(cmd.content, cmd.expiration, cmd.editable)


def handle_send(cmd: SendCommand, client: Optional[DropClient] = None) -> str:
    """
    Handle 'send' command.

    Args:
        cmd: SendCommand with file_list and expiration
        client: Optional DropClient for dependency injection (testing)

    Returns:
        Share code message or error message
    """
    if client is None:
        client = get_client()
    return client.share_files(list(cmd.file_list), cmd.expiration)


def handle_get(cmd: GetCommand, client: Optional[DropClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.fetch(cmd.code, cmd.output_dir)


def handle_edit(cmd: EditCommand, client: Optional[DropClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.edit(cmd.code, cmd.content)


def handle_remove(cmd: RemoveCommand, client: Optional[DropClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.remove(cmd.code)


def handle_limits(cmd: LimitsCommand, client: Optional[DropClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.show_limits()


def handle_history(cmd: HistoryCommand, client: Optional[DropClient] = None) -> str:
    """
    Handle 'history' command.

    Lists codes shared from this machine that have not expired yet.
    """
    if client is None:
        client = get_client()

    now = int(time.time() * 1000)
    entries = client.config.get_history(now)
    if not entries:
        return "No active shares."

    lines = [f"{'CODE':<20} {'EXPIRES IN':<12} CONTENT"]
    for entry in entries:
        remaining = format_expiration_time(entry['expires_at'] - now)
        lines.append(f"{entry['code']:<20} {remaining:<12} {entry['label']}")
    return "\n".join(lines)
