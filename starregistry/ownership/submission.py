"""
Submission states and rejection reasons.

A submission moves RECEIVED -> TIME_CHECKED -> SIGNATURE_CHECKED ->
APPENDED -> VALIDATED. Any checkpoint may reject it; the exception raised
records the last state the submission reached.
"""

from enum import Enum
from typing import Optional, Sequence


class SubmissionState(Enum):
    """Checkpoints of the submission state machine."""
    RECEIVED = "received"
    TIME_CHECKED = "time_checked"
    SIGNATURE_CHECKED = "signature_checked"
    APPENDED = "appended"
    VALIDATED = "validated"
    REJECTED = "rejected"


class SubmissionError(Exception):
    """Base class for every rejected submission."""

    reason = "rejected"

    def __init__(self, message: str, state: SubmissionState = SubmissionState.RECEIVED):
        super().__init__(message)
        self.state = state


class MalformedChallenge(SubmissionError):
    """Challenge message has no parsable timestamp."""
    reason = "malformed_challenge"


class ChallengeExpired(SubmissionError):
    """Challenge is older than the allowed window."""
    reason = "challenge_expired"

    def __init__(self, message: str, elapsed: int,
                 state: SubmissionState = SubmissionState.RECEIVED):
        super().__init__(message, state)
        self.elapsed = elapsed


class SignatureInvalid(SubmissionError):
    """Signature does not prove ownership of the address."""
    reason = "signature_invalid"


class PostAppendValidationFailed(SubmissionError):
    """
    The block was appended but the chain no longer validates.

    Attributes:
        violations: Every violation reported by the validator
        block: The appended block
        rolled_back: True if the block was removed again
    """
    reason = "post_append_validation_failed"

    def __init__(self, violations: Sequence, block=None,
                 rolled_back: bool = False,
                 state: SubmissionState = SubmissionState.APPENDED):
        self.violations = list(violations)
        self.block = block
        self.rolled_back = rolled_back
        super().__init__(
            f"Chain invalid after append: "
            + "; ".join(v.describe() for v in self.violations),
            state,
        )

    @property
    def error_log(self):
        return [v.describe() for v in self.violations]


def describe_rejection(error: SubmissionError, address: Optional[str] = None) -> str:
    """One-line summary of a rejection for logs."""
    who = f" for {address}" if address else ""
    return f"Submission rejected{who} at {error.state.value}: {error.reason} ({error})"
