"""Short code and upload id allocation."""

import logging
import random
from typing import Callable, Optional

from dropcommon.constants import CODE_ALLOCATION_ATTEMPTS, CODE_LENGTH, CODE_SPACE
from dropserver.exceptions import CodeSpaceExhaustedError
from dropserver.utils import generate_uuid

logger = logging.getLogger(__name__)


class CodeAllocator:
    """
    Draws random zero-padded numeric codes not held by a live record.

    The allocator only consults membership; it does not reserve anything.
    Callers claim a code by inserting it with an insert-if-absent operation
    and draw again if the insert loses.
    """

    def __init__(
        self,
        exists: Callable[[str], bool],
        attempts: int = CODE_ALLOCATION_ATTEMPTS,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            exists: Membership check against live codes
            attempts: Draws before giving up
            rng: Random source (injectable for tests)
        """
        self.exists = exists
        self.attempts = attempts
        self.rng = rng or random.SystemRandom()

    def draw(self) -> str:
        return str(self.rng.randrange(CODE_SPACE)).zfill(CODE_LENGTH)

    def allocate(self) -> str:
        """
        Return a code that no live record currently holds.

        Raises:
            CodeSpaceExhaustedError: If every attempt collided
        """
        for attempt in range(self.attempts):
            code = self.draw()
            if not self.exists(code):
                return code
            logger.debug(f"Code collision on {code} (attempt {attempt + 1}/{self.attempts})")

        raise CodeSpaceExhaustedError(
            f"No free code found after {self.attempts} attempts"
        )

    def composite_code(self, now_ms: int) -> str:
        """
        Degraded identifier used when the 4-digit space is saturated.
        """
        return f"{self.draw()}-{now_ms}"


def allocate_upload_id(exists: Callable[[str], bool]) -> str:
    """
    Return an upload id not used by an existing session.
    """
    upload_id = generate_uuid()
    while exists(upload_id):
        logger.warning(f"Upload id collision on {upload_id}")
        upload_id = generate_uuid()
    return upload_id
