"""
Unit tests for the block body codec.
"""

import pytest

from starregistry.blockchain.codec import (
    encode_body, decode_body, PayloadDecodeError
)


class TestEncodeBody:
    """Tests for encoding payloads."""

    def test_encoding_is_hex_ascii(self):
        """Encoded bodies are hex text."""
        body = encode_body({'data': 'Genesis Block'})
        assert isinstance(body, bytes)
        bytes.fromhex(body.decode('ascii'))

    def test_encoding_is_canonical(self):
        """Key order must not change the body."""
        assert encode_body({'a': 1, 'b': 2}) == encode_body({'b': 2, 'a': 1})

    def test_non_dict_rejected(self):
        with pytest.raises(TypeError):
            encode_body(["not", "a", "dict"])


class TestDecodeBody:
    """Tests for decoding bodies."""

    def test_owner_and_star(self):
        """Owner address and star come back out."""
        star = {'ra': '16h 29m 1.0s', 'dec': "68° 52' 56.9", 'story': 'Test'}
        decoded = decode_body(encode_body({'address': 'addr1', 'star': star}))

        assert decoded.owner_address == 'addr1'
        assert decoded.star == star

    def test_no_owner(self):
        """Genesis-style bodies have no owner."""
        decoded = decode_body(encode_body({'data': 'Genesis Block'}))
        assert decoded.owner_address is None
        assert decoded.star is None

    def test_non_string_owner_ignored(self):
        decoded = decode_body(encode_body({'address': 42}))
        assert decoded.owner_address is None

    @pytest.mark.parametrize("body", [
        b'zz',
        b'\xff\xfe',
        '5b315d'.encode(),  # hex of "[1]"
    ])
    def test_garbage_rejected(self, body):
        """Bodies that are not hex JSON objects raise PayloadDecodeError."""
        with pytest.raises(PayloadDecodeError):
            decode_body(body)
