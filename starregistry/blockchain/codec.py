"""
Block Body Codec

Blocks store their payload as an opaque byte string. This module turns a
star registration (or the genesis marker) into that byte string and back:

    body = hex(compact JSON, keys sorted)

Hashing never looks at the decoded form; only lookups by owner do.
"""

import json
from dataclasses import dataclass, field
from typing import Optional, Dict, Any


class PayloadDecodeError(ValueError):
    """Raised when a block body is not a valid encoded payload."""
    pass


@dataclass(frozen=True)
class DecodedBody:
    """Decoded view of a block body."""
    owner_address: Optional[str]
    raw: bytes
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def star(self) -> Optional[Dict[str, Any]]:
        """Star record carried by the body, if any."""
        return self.data.get('star')


def encode_body(data: Dict[str, Any]) -> bytes:
    """
    Encode a payload dictionary into an opaque block body.

    Args:
        data: JSON-serializable mapping

    Returns:
        ASCII bytes holding the hex encoding of the compact JSON
    """
    if not isinstance(data, dict):
        raise TypeError("Payload must be a dictionary")
    text = json.dumps(data, separators=(',', ':'), sort_keys=True)
    return text.encode('utf-8').hex().encode('ascii')


def decode_body(body: bytes) -> DecodedBody:
    """
    Decode a block body produced by encode_body.

    Raises:
        PayloadDecodeError: If the body is not hex-encoded JSON object
    """
    try:
        text = bytes.fromhex(body.decode('ascii')).decode('utf-8')
        data = json.loads(text)
    except (UnicodeDecodeError, ValueError, AttributeError) as e:
        raise PayloadDecodeError(f"Cannot decode block body: {e}") from e

    if not isinstance(data, dict):
        raise PayloadDecodeError("Block body does not hold a JSON object")

    owner = data.get('address')
    if owner is not None and not isinstance(owner, str):
        owner = None
    return DecodedBody(owner_address=owner, raw=body, data=data)
