# Ownership Module
"""
Proof-of-ownership gate in front of the chain:
- Time-stamped challenge messages bound to a wallet address
- ECDSA (P-256) message signatures
- Submission state machine with distinguishable rejection reasons
"""

from .submission import (
    SubmissionState,
    SubmissionError,
    MalformedChallenge,
    ChallengeExpired,
    SignatureInvalid,
    PostAppendValidationFailed,
)
from .challenge import ChallengeIssuer, Challenge, parse_challenge, CHALLENGE_TAG
from .wallet import WalletKey, SignatureVerifier, ECDSAMessageVerifier
from .registry import (
    StarRegistry,
    SubmissionPolicy,
    create_registry,
    DEFAULT_CHALLENGE_WINDOW,
)

__all__ = [
    'SubmissionState',
    'SubmissionError',
    'MalformedChallenge',
    'ChallengeExpired',
    'SignatureInvalid',
    'PostAppendValidationFailed',
    'ChallengeIssuer',
    'Challenge',
    'parse_challenge',
    'CHALLENGE_TAG',
    'WalletKey',
    'SignatureVerifier',
    'ECDSAMessageVerifier',
    'StarRegistry',
    'SubmissionPolicy',
    'create_registry',
    'DEFAULT_CHALLENGE_WINDOW',
]
