"""Time-to-live computation and expired-entry sweeping."""

import logging
from typing import Optional

from dropcommon.constants import EXPIRATION_OPTIONS
from dropserver import config

logger = logging.getLogger(__name__)


def is_live(expires_at: int, now: int) -> bool:
    """A record stays live up to and including its expiry instant."""
    return now <= expires_at


def resolve_ttl(option: Optional[str]) -> int:
    """
    Map an expiration option key to a duration in milliseconds.

    Args:
        option: One of EXPIRATION_OPTIONS keys ('5min' ... '30days')

    Returns:
        Duration in ms; unknown or missing keys get the default TTL
    """
    if isinstance(option, str) and option in EXPIRATION_OPTIONS:
        return EXPIRATION_OPTIONS[option]
    return config.DEFAULT_TTL_MS


def sweep(paste_repo, upload_repo, now: int) -> int:
    """
    Remove every expired paste and upload session.

    Returns:
        Number of entries removed
    """
    removed_pastes = paste_repo.purge_expired(now)
    removed_uploads = upload_repo.purge_expired(now)

    if removed_pastes or removed_uploads:
        logger.info(
            f"Swept {removed_pastes} expired pastes and {removed_uploads} expired upload sessions"
        )

    return removed_pastes + removed_uploads
