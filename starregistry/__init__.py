"""
Star Registry - a tamper-evident hash chain gated by wallet ownership proofs.
"""

__version__ = "1.0.0"
