"""Resource identity coining for generated documents.

Every resource in a bundle is addressed by a UUID. The Patient resource may
reuse a valid UUID from the source record so that repeated runs for the same
person keep a stable id; every other resource gets a freshly coined one.
Uniqueness is only required within one bundle, so each generation run uses its
own IdentityCoiner.
"""

import logging
import random
import re
import uuid
from typing import Optional

from wellness_record.utils.exceptions import IdentityCoinError


logger = logging.getLogger(__name__)

# Version nibble 1-5 and RFC 4122 variant, case-insensitive
UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

# Maximum attempts to coin a unique identity (collision should be extremely rare)
MAX_COIN_ATTEMPTS = 1000


def is_uuid(value: object) -> bool:
    """Check if a value is a syntactically valid UUID string."""
    return isinstance(value, str) and UUID_PATTERN.match(value) is not None


class IdentityCoiner:
    """Coins identities that are unique within one generation run.

    Example:
        >>> coiner = IdentityCoiner()
        >>> patient_id = coiner.reuse_or_coin(raw_record.get("user_ref_id"))
        >>> observation_id = coiner.new_identity()
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        """Initialize the coiner.

        Args:
            seed: Optional seed for deterministic coining. The same seed gives
                  the same sequence of identities, for reproducible test data.
        """
        self._random = random.Random(seed) if seed is not None else None
        self._issued: set[str] = set()

    @property
    def issued(self) -> frozenset[str]:
        """Identities handed out so far in this run."""
        return frozenset(self._issued)

    def new_identity(self) -> str:
        """Coin a fresh lower-case UUID4 string.

        Returns:
            Identity not previously issued by this coiner

        Raises:
            IdentityCoinError: If no unique identity could be coined after
                MAX_COIN_ATTEMPTS (indicates a broken random source)
        """
        for attempt in range(MAX_COIN_ATTEMPTS):
            if self._random is not None:
                candidate = str(uuid.UUID(int=self._random.getrandbits(128), version=4))
            else:
                candidate = str(uuid.uuid4())

            if candidate not in self._issued:
                self._issued.add(candidate)
                logger.debug(f"Coined identity {candidate}")
                return candidate

            logger.warning(
                f"Identity collision detected for {candidate}. Recoining (attempt {attempt + 1})"
            )

        raise IdentityCoinError(
            f"Unable to coin a unique identity after {MAX_COIN_ATTEMPTS} attempts. "
            "Check the random source or the seed in use."
        )

    def reuse_or_coin(self, seed: Optional[str] = None) -> str:
        """Reuse a valid UUID seed, or coin a fresh identity.

        Args:
            seed: Candidate identity from the source record

        Returns:
            The lower-cased seed if it is a valid UUID not yet issued in this
            run, otherwise a freshly coined identity
        """
        if is_uuid(seed):
            reused = seed.lower()
            if reused not in self._issued:
                self._issued.add(reused)
                logger.debug(f"Reusing source identity {reused}")
                return reused
            logger.warning(f"Source identity {reused} already issued in this run")
        elif seed:
            logger.debug(f"Ignoring invalid identity seed {seed!r}")
        return self.new_identity()


def new_identity() -> str:
    """Coin a fresh identity without run-level collision tracking."""
    return IdentityCoiner().new_identity()


def reuse_or_coin(seed: Optional[str] = None) -> str:
    """Return the lower-cased seed if it is a valid UUID, else a fresh identity."""
    return IdentityCoiner().reuse_or_coin(seed)
