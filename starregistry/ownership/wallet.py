"""
Wallet Keys and Message Signatures

Implements the message-signing scheme used to prove address ownership:
- ECDSA over P-256 with SHA-256
- Address = hex of the compressed SEC1 public point (66 hex chars)
- Signature = base64 of the DER-encoded (r, s) pair
- Signed bytes = MESSAGE_PREFIX + UTF-8 message

The registry only depends on SignatureVerifier, so another scheme can be
plugged in without touching it.
"""

import base64
import binascii
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.backends import default_backend


# Constants
CURVE = ec.SECP256R1()  # P-256 curve
ADDRESS_SIZE = 33       # Compressed point: prefix byte + 32-byte x
MESSAGE_PREFIX = b"\x18Star Registry Signed Message:\n"


def _signing_payload(message: str) -> bytes:
    return MESSAGE_PREFIX + message.encode('utf-8')


@dataclass
class WalletKey:
    """P-256 key pair behind a wallet address."""
    private_key: Optional[ec.EllipticCurvePrivateKey]
    public_key: ec.EllipticCurvePublicKey

    @classmethod
    def generate(cls) -> 'WalletKey':
        """Generate a new P-256 key pair."""
        private_key = ec.generate_private_key(CURVE, default_backend())
        return cls(private_key, private_key.public_key())

    @classmethod
    def from_address(cls, address: str) -> 'WalletKey':
        """Create a public-only key from an address."""
        return cls(None, public_key_from_address(address))

    @property
    def address(self) -> str:
        """Wallet address (compressed public point, hex)."""
        return self.public_key.public_bytes(
            encoding=serialization.Encoding.X962,
            format=serialization.PublicFormat.CompressedPoint
        ).hex()

    def sign_message(self, message: str) -> str:
        """
        Sign a challenge message.

        Returns:
            Base64 DER signature
        """
        if self.private_key is None:
            raise ValueError("Private key required for signing")

        signature = self.private_key.sign(
            _signing_payload(message),
            ec.ECDSA(hashes.SHA256())
        )
        return base64.b64encode(signature).decode('ascii')


def public_key_from_address(address: str) -> ec.EllipticCurvePublicKey:
    """
    Decode an address back into its public key.

    Raises:
        ValueError: If address is not a valid compressed P-256 point
    """
    raw = bytes.fromhex(address)
    if len(raw) != ADDRESS_SIZE:
        raise ValueError(f"Address must be {ADDRESS_SIZE} bytes, got {len(raw)}")
    return ec.EllipticCurvePublicKey.from_encoded_point(CURVE, raw)


class SignatureVerifier(ABC):
    """Decides whether signature was produced by the key behind address."""

    @abstractmethod
    def verify(self, message: str, address: str, signature: str) -> bool:
        """Return True only for a valid signature; never raise on bad input."""


class ECDSAMessageVerifier(SignatureVerifier):
    """
    Verifies P-256 message signatures.

    Malformed addresses or signatures yield False rather than an exception.
    """

    def verify(self, message: str, address: str, signature: str) -> bool:
        try:
            public_key = public_key_from_address(address)
            der = base64.b64decode(signature, validate=True)
        except (ValueError, TypeError, binascii.Error):
            return False

        try:
            public_key.verify(der, _signing_payload(message), ec.ECDSA(hashes.SHA256()))
            return True
        except (InvalidSignature, ValueError):
            return False
