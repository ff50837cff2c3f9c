"""
Chain Validator

Re-derives every block hash and cross-checks the linkage of the whole
chain. Validation is not fail-fast: every violation is collected, in chain
order, so a single report shows all the damage.

Violations:
- HashMismatch: stored hash differs from the recomputed digest
- BrokenLink: previous_hash does not match the preceding block's hash
- HeightMismatch: block height does not match its position
- EmptyChain: there is no genesis block at all
"""

from dataclasses import dataclass
from typing import List, Sequence, Optional

from .ledger import Block, recompute_hash


# ============================================================================
# Violations
# ============================================================================

@dataclass(frozen=True)
class Violation:
    """A located integrity failure."""
    height: int

    def describe(self) -> str:
        return f"Violation at block {self.height}"


@dataclass(frozen=True)
class HashMismatch(Violation):
    """Stored hash does not match the block contents."""
    stored: bytes = b''
    computed: bytes = b''

    def describe(self) -> str:
        return (
            f"Block {self.height}: hash mismatch "
            f"(stored {self.stored.hex()[:16]}..., "
            f"computed {self.computed.hex()[:16]}...)"
        )


@dataclass(frozen=True)
class BrokenLink(Violation):
    """previous_hash does not point at the preceding block."""
    expected: Optional[bytes] = None
    found: Optional[bytes] = None

    def describe(self) -> str:
        expected = self.expected.hex()[:16] + '...' if self.expected else 'None'
        found = self.found.hex()[:16] + '...' if self.found else 'None'
        return (
            f"Block {self.height}: broken link "
            f"(expected previous {expected}, found {found})"
        )


@dataclass(frozen=True)
class HeightMismatch(Violation):
    """Block sits at a position that does not match its height."""
    found: int = -1

    def describe(self) -> str:
        return f"Block at position {self.height} reports height {self.found}"


@dataclass(frozen=True)
class EmptyChain(Violation):
    """The chain has no genesis block."""
    height: int = -1

    def describe(self) -> str:
        return "Chain is empty"


class ChainValidationError(Exception):
    """Raised when a chain is required to be valid and is not."""

    def __init__(self, violations: Sequence[Violation]):
        self.violations = list(violations)
        super().__init__(
            f"Chain invalid: {len(self.violations)} violation(s); "
            + "; ".join(v.describe() for v in self.violations)
        )


# ============================================================================
# Report
# ============================================================================

@dataclass(frozen=True)
class ValidationReport:
    """Outcome of a full chain walk."""
    violations: tuple = ()
    blocks_checked: int = 0

    @property
    def is_valid(self) -> bool:
        return not self.violations

    def __bool__(self) -> bool:
        return self.is_valid

    def error_log(self) -> List[str]:
        """Human-readable description of each violation, in order."""
        return [v.describe() for v in self.violations]

    def raise_if_invalid(self) -> None:
        if self.violations:
            raise ChainValidationError(self.violations)


# ============================================================================
# Validation
# ============================================================================

def validate_chain(blocks: Sequence[Block]) -> ValidationReport:
    """
    Validate a full chain.

    Args:
        blocks: Blocks in ascending height order, genesis first

    Returns:
        ValidationReport listing every violation found
    """
    if not blocks:
        return ValidationReport(violations=(EmptyChain(),), blocks_checked=0)

    violations: List[Violation] = []
    expected_prev = blocks[0].hash
    # A link only holds if it matches what the predecessor actually hashes to
    expected_prev_computed = blocks[0].hash

    for position, block in enumerate(blocks):
        if block.height != position:
            violations.append(HeightMismatch(height=position, found=block.height))

        computed = recompute_hash(block)
        if computed != block.hash:
            violations.append(
                HashMismatch(height=position, stored=block.hash, computed=computed)
            )

        if position == 0:
            # Genesis has nothing to link to
            if block.previous_hash is not None:
                violations.append(
                    BrokenLink(height=0, expected=None, found=block.previous_hash)
                )
        elif (block.previous_hash != expected_prev
              or block.previous_hash != expected_prev_computed):
            violations.append(
                BrokenLink(
                    height=position,
                    expected=expected_prev,
                    found=block.previous_hash,
                )
            )

        expected_prev = block.hash
        expected_prev_computed = computed

    return ValidationReport(violations=tuple(violations), blocks_checked=len(blocks))
