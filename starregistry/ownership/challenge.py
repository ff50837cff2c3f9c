"""
Ownership Challenge Issuer

Produces the message a wallet owner signs to prove control of an address:

    <address>:<unix-seconds>:starRegistry

The issuer keeps no state and applies no expiry; the embedded time is
checked later by the registry.
"""

import logging
from dataclasses import dataclass

from ..clock import Clock, system_clock
from .submission import MalformedChallenge


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

CHALLENGE_TAG = "starRegistry"
SEPARATOR = ":"


@dataclass(frozen=True)
class Challenge:
    """Parsed challenge message."""
    address: str
    timestamp: int
    tag: str


class ChallengeIssuer:
    """Formats time-stamped ownership challenges."""

    def __init__(self, clock: Clock = system_clock, tag: str = CHALLENGE_TAG):
        self._clock = clock
        self._tag = tag

    @property
    def tag(self) -> str:
        return self._tag

    def issue_challenge(self, address: str) -> str:
        """
        Build the message to be signed for address.

        Args:
            address: Wallet address requesting ownership verification

        Returns:
            Challenge message string
        """
        if not address:
            raise ValueError("Address cannot be empty")
        message = f"{address}{SEPARATOR}{self._clock()}{SEPARATOR}{self._tag}"
        logger.info("Issued ownership challenge: %s", message)
        return message


def parse_challenge(message: str) -> Challenge:
    """
    Extract the fields of a challenge message.

    Only the timestamp (second field) is required to parse.

    Raises:
        MalformedChallenge: If there is no integer second field
    """
    if not isinstance(message, str):
        raise MalformedChallenge("Challenge message must be a string")

    parts = message.split(SEPARATOR)
    if len(parts) < 2:
        raise MalformedChallenge(f"Challenge has no timestamp: {message!r}")

    digits = parts[1][1:] if parts[1].startswith("-") else parts[1]
    if not (digits.isascii() and digits.isdigit()):
        raise MalformedChallenge(f"Challenge timestamp is not an integer: {parts[1]!r}")
    timestamp = int(parts[1])

    tag = parts[2] if len(parts) > 2 else ""
    return Challenge(address=parts[0], timestamp=timestamp, tag=tag)
