"""
Short code generation and allocation.

Random codes are drawn from the 62-character alphanumeric alphabet and
checked against storage; collisions are retried a bounded number of times.
Custom aliases are validated and must not already exist.
"""

import logging
import random
import re
import string
from enum import Enum
from typing import Optional
from urllib.parse import urlsplit

from linkstats_app.errors import ConflictError, ShortCodeExhaustedError, ValidationError
from linkstats_app.storage.strategies import StorageStrategy

logger = logging.getLogger(__name__)

ALPHABET = string.ascii_letters + string.digits
ALIAS_PATTERN = re.compile(r"^[A-Za-z0-9_-]{3,20}$")


def generate_short_code(length: int = 6) -> str:
    """Random alphanumeric string (not cryptographically secure)"""
    return "".join(random.choice(ALPHABET) for _ in range(length))


def is_valid_alias(alias: str) -> bool:
    return bool(ALIAS_PATTERN.fullmatch(alias))


def is_valid_url(url: str) -> bool:
    """
    True for any absolute URL with a scheme.

    Any scheme is accepted (ftp://, file://, mailto:...), not only HTTP.
    """
    if not url or any(ch.isspace() for ch in url):
        return False
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    if not parts.scheme or not re.fullmatch(r"[A-Za-z][A-Za-z0-9+.-]*", parts.scheme):
        return False
    # "example.com:8080" parses with scheme "example.com"; require something after the colon
    return bool(parts.netloc or parts.path)


class CollisionPolicy(Enum):
    """What to do when every random attempt collided"""
    PROCEED = "proceed"  # use the last code; the later put overwrites
    FAIL = "fail"


class ShortCodeAllocator:
    """
    Picks the short code for a new link.

    Pros of random codes:
    - Unpredictable
    - No coordination between API instances

    Cons:
    - One storage read per attempt
    - Check-then-put is not atomic, so two concurrent creates can race
    """

    def __init__(
        self,
        length: int = 6,
        max_attempts: int = 5,
        collision_policy: CollisionPolicy = CollisionPolicy.PROCEED
    ):
        self.length = length
        self.max_attempts = max_attempts
        self.collision_policy = CollisionPolicy(collision_policy)

    async def allocate(self, storage: StorageStrategy, alias: Optional[str] = None) -> str:
        """
        Return an alias or a fresh random code.

        Raises:
            ValidationError: alias has the wrong format
            ConflictError: alias already exists
            ShortCodeExhaustedError: every attempt collided under the "fail" policy
        """
        if alias:
            if not is_valid_alias(alias):
                raise ValidationError(
                    "Invalid alias. Must be 3-20 characters and contain only "
                    "letters, numbers, hyphens, and underscores."
                )
            if await storage.get_url(alias):
                raise ConflictError("Alias already exists")
            return alias

        short_code = generate_short_code(self.length)
        for attempt in range(1, self.max_attempts + 1):
            if not await storage.get_url(short_code):
                return short_code
            logger.info("Short code collision on %s (attempt %d)", short_code, attempt)
            if attempt < self.max_attempts:
                short_code = generate_short_code(self.length)

        if self.collision_policy == CollisionPolicy.FAIL:
            raise ShortCodeExhaustedError(
                f"Could not generate unique short code after {self.max_attempts} attempts"
            )

        logger.warning(
            "No free short code after %d attempts; proceeding with %s",
            self.max_attempts,
            short_code,
        )
        return short_code
