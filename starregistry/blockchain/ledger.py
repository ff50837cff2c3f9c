"""
Blockchain Ledger Module

Implements the hash-chain store for the star registry:
- Immutable blocks (frozen dataclass)
- SHA-256 chaining over a canonical block header
- Genesis block synthesized on construction
- Serialized appends behind a single lock

Security features:
- Every block hash is re-derivable from its fields
- previous_hash links each block to the one before it
- Reads return copies taken under the same lock as appends
"""

import hashlib
import json
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import List, Optional, Dict, Any, Iterator, Union

from ..clock import Clock, system_clock
from .codec import encode_body, decode_body, PayloadDecodeError


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

HASH_SIZE = 32  # SHA-256 digest length in bytes
GENESIS_DATA = "Genesis Block"


# ============================================================================
# Block Structure (Immutable)
# ============================================================================

@dataclass(frozen=True)
class Block:
    """
    Immutable block structure for the chain.

    hash is computed once when the block is appended and cached here;
    recompute_hash() re-derives it for validation.
    """
    height: int
    timestamp: int
    previous_hash: Optional[bytes]
    body: bytes
    hash: bytes

    @property
    def is_genesis(self) -> bool:
        return self.height == 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert block to dictionary for serialization."""
        return {
            'height': self.height,
            'timestamp': self.timestamp,
            'previous_hash': self.previous_hash.hex() if self.previous_hash is not None else None,
            'body': self.body.hex(),
            'hash': self.hash.hex(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Block':
        """Create block from dictionary."""
        prev = data['previous_hash']
        return cls(
            height=data['height'],
            timestamp=data['timestamp'],
            previous_hash=bytes.fromhex(prev) if prev is not None else None,
            body=bytes.fromhex(data['body']),
            hash=bytes.fromhex(data['hash']),
        )

    def __str__(self) -> str:
        prev = self.previous_hash.hex()[:16] + '...' if self.previous_hash else 'None'
        return (
            f"Block #{self.height}\n"
            f"  Hash: {self.hash.hex()[:16]}...\n"
            f"  Prev: {prev}\n"
            f"  Time: {self.timestamp}\n"
            f"  Body: {len(self.body)} bytes"
        )


# ============================================================================
# Hashing
# ============================================================================

def compute_block_hash(
    height: int,
    timestamp: int,
    previous_hash: Optional[bytes],
    body: bytes
) -> bytes:
    """
    Compute the SHA-256 digest of a block header.

    Layout: height (8) | timestamp (8) | has_prev (1) | previous_hash (32 or 0)
            | body_len (4) | body
    """
    header = (
        height.to_bytes(8, 'big') +
        timestamp.to_bytes(8, 'big')
    )
    if previous_hash is None:
        header += b'\x00'
    else:
        header += b'\x01' + previous_hash
    header += len(body).to_bytes(4, 'big') + body
    return hashlib.sha256(header).digest()


def recompute_hash(block: Block) -> bytes:
    """Re-derive a block's hash from its fields (never from block.hash)."""
    return compute_block_hash(
        block.height, block.timestamp, block.previous_hash, block.body
    )


# ============================================================================
# Hash-Chain Store
# ============================================================================

class HashChainStore:
    """
    In-memory, append-only chain of blocks.

    Features:
    - Genesis block created on construction
    - Atomic appends (one RLock guards height, tail and the block list)
    - Lookups by hash, height and owner address
    """

    def __init__(self, clock: Clock = system_clock):
        """
        Initialize a new store.

        Args:
            clock: Callable returning unix seconds, used for block timestamps
        """
        self._clock = clock
        self._lock = threading.RLock()
        self._chain: List[Block] = []
        self._height = -1

        self._create_genesis_block()

    def _create_genesis_block(self) -> None:
        """Create the genesis (first) block."""
        with self._lock:
            if self._height != -1:
                return
            genesis = self.append(encode_body({'data': GENESIS_DATA}))
        logger.info("Genesis block created: %s", genesis.hash.hex())

    # ------------------------------------------------------------------
    # Chain state
    # ------------------------------------------------------------------

    @property
    def height(self) -> int:
        """Highest block height."""
        with self._lock:
            return self._height

    def get_chain_height(self) -> int:
        return self.height

    @property
    def length(self) -> int:
        with self._lock:
            return len(self._chain)

    @property
    def chain(self) -> List[Block]:
        """Get the chain (read-only copy)."""
        return self.snapshot()

    @property
    def last_block(self) -> Block:
        with self._lock:
            return self._chain[-1]

    def snapshot(self) -> List[Block]:
        """Consistent copy of the block list."""
        with self._lock:
            return list(self._chain)

    @contextmanager
    def locked(self) -> Iterator['HashChainStore']:
        """
        Hold the store's critical section.

        Appends and reads made by the holder re-enter the lock; other
        threads wait until the block exits.
        """
        with self._lock:
            yield self

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def append(self, body: bytes) -> Block:
        """
        Append a new block carrying body.

        Args:
            body: Opaque encoded payload

        Returns:
            The appended block
        """
        if not isinstance(body, bytes):
            raise TypeError("Block body must be bytes")

        with self._lock:
            height = self._height + 1
            previous_hash = self._chain[-1].hash if self._chain else None
            timestamp = self._clock()

            block = Block(
                height=height,
                timestamp=timestamp,
                previous_hash=previous_hash,
                body=body,
                hash=compute_block_hash(height, timestamp, previous_hash, body),
            )

            self._chain.append(block)
            self._height = height

        logger.debug("Appended block %d (%s)", block.height, block.hash.hex()[:16])
        return block

    def discard_tail(self, block: Block) -> None:
        """
        Remove block if it is still the tail of the chain.

        Raises:
            ValueError: If block is genesis or no longer the tail
        """
        with self._lock:
            if block.height == 0:
                raise ValueError("Genesis block cannot be discarded")
            if not self._chain or self._chain[-1].hash != block.hash:
                raise ValueError(f"Block {block.height} is not the chain tail")
            self._chain.pop()
            self._height -= 1
        logger.warning("Discarded tail block %d", block.height)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_block_by_hash(self, block_hash: Union[bytes, str]) -> Optional[Block]:
        """Find the block with the given hash (bytes or hex string)."""
        if isinstance(block_hash, str):
            try:
                block_hash = bytes.fromhex(block_hash)
            except ValueError:
                return None

        for block in self.snapshot():
            if block.hash == block_hash:
                return block
        return None

    def get_block_by_height(self, height: int) -> Optional[Block]:
        with self._lock:
            if height < 0 or height >= len(self._chain):
                return None
            return self._chain[height]

    def all_blocks_by_address(self, address: str) -> List[Block]:
        """
        Every non-genesis block owned by address, in chain order.

        Blocks whose body cannot be decoded never match.
        """
        owned = []
        for block in self.snapshot():
            if block.is_genesis:
                continue
            try:
                decoded = decode_body(block.body)
            except PayloadDecodeError as e:
                logger.warning("Skipping block %d: %s", block.height, e)
                continue
            if decoded.owner_address == address:
                owned.append(block)
        return owned

    def stars_by_address(self, address: str) -> List[Dict[str, Any]]:
        """
        Decoded submissions registered by address, in chain order.

        Each record holds the address, signed message, signature and star.
        """
        return [
            decode_body(block.body).data
            for block in self.all_blocks_by_address(address)
        ]

    # ------------------------------------------------------------------
    # Validation & serialization
    # ------------------------------------------------------------------

    def validate(self):
        """Validate the whole chain; returns a ValidationReport."""
        from .validator import validate_chain, HeightMismatch

        with self._lock:
            blocks = list(self._chain)
            cached_height = self._height

        report = validate_chain(blocks)
        stale = HeightMismatch(height=len(blocks) - 1, found=cached_height)
        if (blocks and cached_height != len(blocks) - 1
                and stale not in report.violations):
            report = type(report)(
                violations=report.violations + (stale,),
                blocks_checked=report.blocks_checked,
            )
        return report

    def to_json(self) -> str:
        """Serialize the chain to JSON."""
        return json.dumps({
            'height': self.height,
            'chain': [block.to_dict() for block in self.snapshot()],
        }, indent=2)

    @classmethod
    def from_json(cls, json_str: str, clock: Clock = system_clock) -> 'HashChainStore':
        """
        Load a chain exported with to_json.

        The loaded chain is not validated; call validate() on the result.
        The height is always taken from the number of blocks loaded.

        Raises:
            ValueError: If the snapshot holds no blocks
        """
        data = json.loads(json_str)
        if not data.get('chain'):
            raise ValueError("Snapshot has no genesis block")

        store = cls.__new__(cls)
        store._clock = clock
        store._lock = threading.RLock()
        store._chain = [Block.from_dict(block_data) for block_data in data['chain']]
        store._height = len(store._chain) - 1
        if data.get('height', store._height) != store._height:
            logger.warning(
                "Snapshot height %s ignored; loaded %d blocks",
                data.get('height'), len(store._chain)
            )
        return store

    def print_chain(self) -> None:
        """Print the chain."""
        print(f"\nChain (height={self.height})")
        print("=" * 60)
        for block in self.snapshot():
            print(block)
            print("-" * 40)


# ============================================================================
# Convenience Functions
# ============================================================================

def create_store(clock: Clock = system_clock) -> HashChainStore:
    """Create a new store with its genesis block."""
    return HashChainStore(clock)
