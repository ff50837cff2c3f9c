"""
Star Registry (Submission Coordinator)

Admits a new block only after the caller proves ownership of a wallet
address:

1. Parse the timestamp embedded in the signed challenge
2. Reject challenges older than the window (default 5 minutes)
3. Verify the signature against the address
4. Append a block carrying (address, message, signature, star)
5. Re-validate the whole chain

The timing check always runs first; a submission failing both timing and
signature is rejected once, as expired. Rejected submissions never touch the
store and are never retried.
"""

import logging
from dataclasses import dataclass
from typing import Optional, List, Dict, Any, Union

from ..clock import Clock, system_clock
from ..blockchain.ledger import Block, HashChainStore
from ..blockchain.codec import encode_body
from ..blockchain.validator import ValidationReport
from .challenge import ChallengeIssuer, parse_challenge
from .submission import (
    SubmissionState,
    SubmissionError,
    ChallengeExpired,
    SignatureInvalid,
    PostAppendValidationFailed,
    describe_rejection,
)
from .wallet import SignatureVerifier, ECDSAMessageVerifier


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

DEFAULT_CHALLENGE_WINDOW = 300  # seconds


@dataclass(frozen=True)
class SubmissionPolicy:
    """
    Registry policy.

    Attributes:
        window_seconds: Maximum age of a challenge at submission time
        rollback_on_invalid: Remove the appended block when the chain fails
            post-append validation (default keeps it and reports failure)
    """
    window_seconds: int = DEFAULT_CHALLENGE_WINDOW
    rollback_on_invalid: bool = False

    def __post_init__(self):
        if self.window_seconds < 0:
            raise ValueError("window_seconds must be non-negative")


class StarRegistry:
    """
    Ownership-gated front of the hash-chain store.

    All collaborators are injectable: the store, the clock, the signature
    verifier and the challenge issuer.
    """

    def __init__(
        self,
        store: Optional[HashChainStore] = None,
        verifier: Optional[SignatureVerifier] = None,
        clock: Clock = system_clock,
        issuer: Optional[ChallengeIssuer] = None,
        policy: Optional[SubmissionPolicy] = None
    ):
        self._clock = clock
        self._store = store if store is not None else HashChainStore(clock)
        self._verifier = verifier if verifier is not None else ECDSAMessageVerifier()
        self._issuer = issuer if issuer is not None else ChallengeIssuer(clock)
        self._policy = policy or SubmissionPolicy()

    @property
    def store(self) -> HashChainStore:
        return self._store

    @property
    def policy(self) -> SubmissionPolicy:
        return self._policy

    # ========================================================================
    # Challenge
    # ========================================================================

    def request_message_ownership_verification(self, address: str) -> str:
        """Message the owner of address must sign before submitting."""
        return self._issuer.issue_challenge(address)

    # ========================================================================
    # Submission
    # ========================================================================

    def submit_star(
        self,
        address: str,
        message: str,
        signature: str,
        star: Any
    ) -> Block:
        """
        Register star under address.

        Args:
            address: Wallet address claiming ownership
            message: Challenge previously issued for address
            signature: Signature of message by the key behind address
            star: JSON-serializable star record

        Returns:
            The appended block

        Raises:
            MalformedChallenge: Message has no parsable timestamp
            ChallengeExpired: Challenge older than the window
            SignatureInvalid: Signature rejected or verifier failed
            PostAppendValidationFailed: Chain invalid after the append
        """
        try:
            self._check_time(message)
            self._trace(address, SubmissionState.TIME_CHECKED)
            self._check_signature(address, message, signature)
            self._trace(address, SubmissionState.SIGNATURE_CHECKED)
        except SubmissionError as e:
            self._trace(address, SubmissionState.REJECTED)
            logger.warning(describe_rejection(e, address))
            raise

        body = encode_body({
            'address': address,
            'message': message,
            'signature': signature,
            'star': star,
        })

        if self._policy.rollback_on_invalid:
            with self._store.locked():
                block = self._store.append(body)
                self._trace(address, SubmissionState.APPENDED)
                report = self._store.validate()
                if not report.is_valid:
                    self._store.discard_tail(block)
                    self._trace(address, SubmissionState.REJECTED)
                    self._fail_validation(report, block, rolled_back=True)
        else:
            block = self._store.append(body)
            self._trace(address, SubmissionState.APPENDED)
            report = self._store.validate()
            if not report.is_valid:
                self._trace(address, SubmissionState.REJECTED)
                self._fail_validation(report, block, rolled_back=False)

        self._trace(address, SubmissionState.VALIDATED)
        logger.info(
            "Star registered for %s in block %d (%s)",
            address, block.height, block.hash.hex()[:16]
        )
        return block

    @staticmethod
    def _trace(address: str, state: SubmissionState) -> None:
        logger.debug("Submission for %s reached %s", address, state.value)

    def _check_time(self, message: str) -> None:
        challenge = parse_challenge(message)

        elapsed = self._clock() - challenge.timestamp
        if elapsed > self._policy.window_seconds:
            raise ChallengeExpired(
                f"Challenge is {elapsed}s old; limit is {self._policy.window_seconds}s",
                elapsed=elapsed,
                state=SubmissionState.RECEIVED,
            )

    def _check_signature(self, address: str, message: str, signature: str) -> None:
        try:
            verified = self._verifier.verify(message, address, signature)
        except Exception as e:
            raise SignatureInvalid(
                f"Signature verification failed: {e}",
                state=SubmissionState.TIME_CHECKED,
            ) from e

        if verified is not True:
            raise SignatureInvalid(
                "Signature does not match address",
                state=SubmissionState.TIME_CHECKED,
            )

    def _fail_validation(self, report: ValidationReport, block: Block,
                         rolled_back: bool) -> None:
        error = PostAppendValidationFailed(
            report.violations, block=block, rolled_back=rolled_back
        )
        logger.error(
            "Chain invalid after appending block %d (rolled back: %s): %s",
            block.height, rolled_back, "; ".join(report.error_log())
        )
        raise error

    # ========================================================================
    # Queries
    # ========================================================================

    def get_chain_height(self) -> int:
        return self._store.height

    def get_block_by_hash(self, block_hash: Union[bytes, str]) -> Optional[Block]:
        return self._store.get_block_by_hash(block_hash)

    def get_block_by_height(self, height: int) -> Optional[Block]:
        return self._store.get_block_by_height(height)

    def get_blocks_by_wallet_address(self, address: str) -> List[Block]:
        return self._store.all_blocks_by_address(address)

    def get_stars_by_wallet_address(self, address: str) -> List[Dict[str, Any]]:
        """Decoded submissions (address, message, signature, star) by address."""
        return self._store.stars_by_address(address)

    def validate_chain(self) -> ValidationReport:
        return self._store.validate()


# ============================================================================
# Convenience Functions
# ============================================================================

def create_registry(
    clock: Clock = system_clock,
    policy: Optional[SubmissionPolicy] = None
) -> StarRegistry:
    """Create a registry backed by a fresh in-memory store."""
    return StarRegistry(clock=clock, policy=policy)
