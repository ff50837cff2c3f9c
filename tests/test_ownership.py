"""
Unit tests for ownership challenges and wallet signatures.

Tests:
- Challenge message format and parsing
- ECDSA message signing and verification
- Malformed inputs never raise from the verifier
"""

import base64

import pytest

from starregistry.ownership.challenge import (
    ChallengeIssuer, parse_challenge, CHALLENGE_TAG
)
from starregistry.ownership.submission import MalformedChallenge
from starregistry.ownership.wallet import (
    WalletKey, ECDSAMessageVerifier, public_key_from_address
)
from tests.helpers import FakeClock, START_TIME


class TestChallengeIssuer:
    """Tests for challenge issuance."""

    def test_message_format(self):
        """Message is <address>:<unix-seconds>:starRegistry."""
        issuer = ChallengeIssuer(FakeClock())
        message = issuer.issue_challenge("addr1")
        assert message == f"addr1:{START_TIME}:{CHALLENGE_TAG}"
        assert CHALLENGE_TAG == "starRegistry"

    def test_message_uses_issue_time(self):
        """The embedded timestamp is the clock reading at issuance."""
        clock = FakeClock()
        issuer = ChallengeIssuer(clock)
        clock.advance(42)
        assert parse_challenge(issuer.issue_challenge("a")).timestamp == START_TIME + 42

    def test_empty_address_rejected(self):
        with pytest.raises(ValueError):
            ChallengeIssuer(FakeClock()).issue_challenge("")


class TestParseChallenge:
    """Tests for challenge parsing."""

    def test_parse_fields(self):
        challenge = parse_challenge("addr:1700000000:starRegistry")
        assert challenge.address == "addr"
        assert challenge.timestamp == 1700000000
        assert challenge.tag == "starRegistry"

    def test_only_timestamp_required(self):
        """A message with just address and time still parses."""
        assert parse_challenge("addr:12").timestamp == 12

    @pytest.mark.parametrize("message", [
        "",
        "no-colons-here",
        "addr:not-a-number:starRegistry",
        "addr::starRegistry",
        "addr: 1700000000:starRegistry",
        "addr:+1700000000:starRegistry",
        "addr:1_700_000_000:starRegistry",
        "addr:１７００:starRegistry",
        "addr:-:starRegistry",
        None,
    ])
    def test_malformed(self, message):
        """Messages without an integer second field are malformed."""
        with pytest.raises(MalformedChallenge):
            parse_challenge(message)


class TestWalletSignatures:
    """Tests for ECDSA message signatures."""

    def test_address_format(self, wallet):
        """Address is a 33-byte compressed point in hex."""
        assert len(wallet.address) == 66
        assert wallet.address[:2] in ("02", "03")
        assert public_key_from_address(wallet.address) is not None

    def test_sign_and_verify(self, wallet):
        """A signature by the owner verifies."""
        message = f"{wallet.address}:{START_TIME}:starRegistry"
        signature = wallet.sign_message(message)
        assert ECDSAMessageVerifier().verify(message, wallet.address, signature)

    def test_wrong_address_fails(self, wallet, other_wallet):
        """A valid signature under someone else's address fails."""
        message = "m:1:starRegistry"
        signature = wallet.sign_message(message)
        assert not ECDSAMessageVerifier().verify(message, other_wallet.address, signature)

    def test_modified_message_fails(self, wallet):
        signature = wallet.sign_message("m:1:starRegistry")
        assert not ECDSAMessageVerifier().verify("m:2:starRegistry", wallet.address, signature)

    def test_public_only_key_cannot_sign(self, wallet):
        watch_only = WalletKey.from_address(wallet.address)
        assert watch_only.address == wallet.address
        with pytest.raises(ValueError):
            watch_only.sign_message("m")

    @pytest.mark.parametrize("address", ["", "zz", "02" + "00" * 10, None])
    def test_malformed_address_returns_false(self, wallet, address):
        """Malformed addresses yield False rather than an exception."""
        signature = wallet.sign_message("m")
        assert ECDSAMessageVerifier().verify("m", address, signature) is False

    @pytest.mark.parametrize("signature", [
        "",
        "!!!not base64!!!",
        base64.b64encode(b"not a der signature").decode(),
        None,
    ])
    def test_malformed_signature_returns_false(self, wallet, signature):
        """Malformed signatures yield False rather than an exception."""
        assert ECDSAMessageVerifier().verify("m", wallet.address, signature) is False
