"""Configuration management for CodeDrop CLI."""

import json
import logging
import os
import shutil
import time
from pathlib import Path
from typing import List, Optional

from dropcli.constants import HISTORY_LIMIT
from dropcommon.constants import DEFAULT_EXPIRATION_OPTION, DEFAULT_SERVER_HOST, DEFAULT_SERVER_PORT

logger = logging.getLogger(__name__)


class Config:
    """Manages CLI configuration and share history stored in a JSON file."""

    DEFAULT_CONFIG = {
        "server_host": os.environ.get("DROP_SERVER_HOST", DEFAULT_SERVER_HOST),
        "server_port": int(os.environ.get("DROP_SERVER_PORT", str(DEFAULT_SERVER_PORT))),
        "timeout": 30,
        "max_retries": 3,
        "retry_backoff_multiplier": 2,
        "default_expiration": DEFAULT_EXPIRATION_OPTION,
        "history": [],
    }

    def __init__(self, config_path: Path):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.codedrop/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            import tempfile
            self.config_path = Path(tempfile.gettempdir()) / '.codedrop' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        config = json.loads(json.dumps(self.DEFAULT_CONFIG))

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    config.update(json.load(f))
                return config
            except (json.JSONDecodeError, IOError) as e:
                logger.warning(f"Unreadable config at {self.config_path}: {e}, using defaults")
                backup_path = self.config_path.with_suffix('.json.bak')
                try:
                    shutil.copy(self.config_path, backup_path)
                except OSError:
                    pass
                return config

        try:
            with open(self.config_path, 'w') as f:
                json.dump(config, f, indent=2)
        except IOError as e:
            logger.warning(f"Could not write default config: {e}")
        return config

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except IOError as e:
            logger.warning(f"Could not save config: {e}")

    def get_base_url(self) -> str:
        """
        Get server base URL.

        Returns:
            Base URL string (e.g., "http://localhost:8000")
        """
        host = self.data.get('server_host', DEFAULT_SERVER_HOST)
        port = self.data.get('server_port', DEFAULT_SERVER_PORT)
        return f"http://{host}:{port}"

    def get_timeout(self) -> int:
        return self.data.get('timeout', 30)

    def get_retry_config(self) -> dict:
        """
        Get retry configuration.

        Returns:
            Dictionary with 'max_retries' and 'retry_backoff_multiplier'
        """
        return {
            'max_retries': self.data.get('max_retries', 3),
            'retry_backoff_multiplier': self.data.get('retry_backoff_multiplier', 2),
        }

    def get_default_expiration(self) -> str:
        return self.data.get('default_expiration', DEFAULT_EXPIRATION_OPTION)

    def add_history(self, code: str, label: str, expires_at: int) -> None:
        """
        Record a shared code, newest first, keeping the last HISTORY_LIMIT entries.

        Args:
            code: Share code returned by the server
            label: Short description (text preview or file names)
            expires_at: Expiry as epoch milliseconds
        """
        entry = {
            'code': code,
            'label': label,
            'shared_at': int(time.time() * 1000),
            'expires_at': expires_at,
        }
        history = [h for h in self.data.get('history', []) if h.get('code') != code]
        self.data['history'] = [entry] + history[:HISTORY_LIMIT - 1]
        self.save()

    def get_history(self, now_ms: Optional[int] = None) -> List[dict]:
        """
        Get history entries that have not expired yet.
        """
        now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
        return [h for h in self.data.get('history', []) if h.get('expires_at', 0) >= now_ms]

    def remove_history(self, code: str) -> None:
        self.data['history'] = [h for h in self.data.get('history', []) if h.get('code') != code]
        self.save()
