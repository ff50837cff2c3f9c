#!/usr/bin/env python
"""
STAR REGISTRY LIVE DEMO

Walks through the ownership-gated registry:
- Requesting an ownership challenge for a wallet address
- Signing it and registering a star
- Rejections (expired challenge, forged signature)
- Looking up stars by wallet address
- Detecting a tampered block with full chain validation

Time is simulated, so the demo runs instantly.
"""

import dataclasses
import logging
import sys

from starregistry.clock import system_clock
from starregistry.blockchain.ledger import HashChainStore
from starregistry.ownership.registry import StarRegistry
from starregistry.ownership.submission import SubmissionError
from starregistry.ownership.wallet import WalletKey


class DemoClock:
    """Wall clock that can be pushed forward."""

    def __init__(self):
        self.offset = 0

    def __call__(self) -> int:
        return system_clock() + self.offset


def print_header(title):
    """Print a formatted section header"""
    print("\n" + "═" * 70)
    print(f"  {title}")
    print("═" * 70)


def print_step(step_num, description):
    """Print a numbered step"""
    print(f"\n  [{step_num}] {description}")


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="  %(levelname)-7s %(name)s: %(message)s",
    )

    clock = DemoClock()
    store = HashChainStore(clock)
    registry = StarRegistry(store=store, clock=clock)
    alice = WalletKey.generate()
    mallory = WalletKey.generate()

    print_header("PART 1: OWNERSHIP CHALLENGE")

    print_step("1.1", "Alice requests a challenge")
    message = registry.request_message_ownership_verification(alice.address)
    print(f"  Message: {message}")

    print_step("1.2", "Alice signs it with her wallet key")
    signature = alice.sign_message(message)
    print(f"  Signature: {signature[:32]}...")

    print_header("PART 2: REGISTERING STARS")

    print_step("2.1", "Submit within the 5 minute window")
    star = {'ra': '16h 29m 1.0s', 'dec': "68° 52' 56.9", 'story': 'First star'}
    block = registry.submit_star(alice.address, message, signature, star)
    print(block)

    print_step("2.2", "Submit a challenge that is 301 seconds old")
    message = registry.request_message_ownership_verification(alice.address)
    signature = alice.sign_message(message)
    clock.offset += 301
    try:
        registry.submit_star(alice.address, message, signature, star)
    except SubmissionError as e:
        print(f"  [X] Rejected: {e.reason}")

    print_step("2.3", "Mallory signs a challenge for Alice's address")
    message = registry.request_message_ownership_verification(alice.address)
    try:
        registry.submit_star(alice.address, message, mallory.sign_message(message), star)
    except SubmissionError as e:
        print(f"  [X] Rejected: {e.reason}")

    print_step("2.4", "Alice registers a second star")
    message = registry.request_message_ownership_verification(alice.address)
    registry.submit_star(
        alice.address, message, alice.sign_message(message),
        {'ra': '5h 55m 10.3s', 'dec': "7° 24' 25", 'story': 'Betelgeuse'}
    )

    print_header("PART 3: QUERIES")

    print_step("3.1", f"Chain height: {registry.get_chain_height()}")
    print_step("3.2", "Stars owned by Alice")
    for owned in registry.get_stars_by_wallet_address(alice.address):
        print(f"  * {owned['star']}")

    print_header("PART 4: TAMPER DETECTION")

    report = registry.validate_chain()
    print_step("4.1", f"Chain valid: {report.is_valid}")

    print_step("4.2", "Rewrite the body of block 1 behind the store's back")
    store._chain[1] = dataclasses.replace(block, body=b'stolen star')
    report = registry.validate_chain()
    print(f"  Chain valid: {report.is_valid}")
    for line in report.error_log():
        print(f"  [!] {line}")

    store.print_chain()
    return 0 if not report.is_valid else 1


if __name__ == "__main__":
    sys.exit(main())
