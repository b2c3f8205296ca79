import random
import string
from typing import Awaitable, Callable

from loguru import logger

from ..core.exceptions import IdentifierExhaustedError

ID_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
DEFAULT_ID_LENGTH = 6
DEFAULT_MAX_ATTEMPTS = 10


class IdentifierGenerator:
    """Short public identifiers for stored images.

    Identifiers are public and not secrets, so a non-cryptographic source is
    enough; collision resistance comes from the 62**6 space plus an existence
    check against the record store.
    """

    def __init__(
        self,
        length: int = DEFAULT_ID_LENGTH,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        rng: random.Random | None = None,
    ):
        if length < 1:
            raise ValueError("Identifier length must be positive")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self.length = length
        self.max_attempts = max_attempts
        self._rng = rng or random.Random()

    def generate(self) -> str:
        return "".join(self._rng.choice(ID_ALPHABET) for _ in range(self.length))

    async def generate_unique(self, exists: Callable[[str], Awaitable[bool]]) -> str:
        for attempt in range(1, self.max_attempts + 1):
            candidate = self.generate()
            if not await exists(candidate):
                return candidate
            logger.debug(f"Identifier {candidate} already taken (attempt {attempt})")

        logger.error(
            f"Could not find a free identifier after {self.max_attempts} attempts"
        )
        raise IdentifierExhaustedError()
