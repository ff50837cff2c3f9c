# Blockchain Module
"""
Hash-chain ledger for the star registry:
- Immutable blocks linked by SHA-256
- In-memory store with serialized appends
- Full chain validation collecting every violation
- Block body codec (owner address + star payload)
"""

# Lazy imports to avoid circular import issues between ledger and validator
_EXPORTS = {
    'Block': 'ledger',
    'HashChainStore': 'ledger',
    'compute_block_hash': 'ledger',
    'recompute_hash': 'ledger',
    'create_store': 'ledger',
    'GENESIS_DATA': 'ledger',
    'HASH_SIZE': 'ledger',
    'validate_chain': 'validator',
    'ValidationReport': 'validator',
    'ChainValidationError': 'validator',
    'Violation': 'validator',
    'HashMismatch': 'validator',
    'BrokenLink': 'validator',
    'HeightMismatch': 'validator',
    'EmptyChain': 'validator',
    'encode_body': 'codec',
    'decode_body': 'codec',
    'DecodedBody': 'codec',
    'PayloadDecodeError': 'codec',
}


def __getattr__(name):
    """Lazy import to avoid circular import issues."""
    if name not in _EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    import importlib
    module = importlib.import_module(f".{_EXPORTS[name]}", __name__)
    return getattr(module, name)


__all__ = list(_EXPORTS)
