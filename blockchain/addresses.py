"""
Address Utilities
Address validation and contract address derivation
"""

import re
import rlp
from eth_utils import keccak, to_bytes, to_checksum_address
from web3 import Web3

from utils.exceptions import InvalidAddressError

ADDRESS_PATTERN = re.compile(r'^0x[0-9a-fA-F]{40}$')


def validate_address(value, field: str = "address") -> str:
    """
    Validate a chain address and return its checksummed form

    All-lowercase and all-uppercase addresses carry no checksum and are
    accepted. Mixed-case addresses must pass EIP-55.

    Args:
        value: Candidate address
        field: Name used in the error message

    Returns:
        EIP-55 checksummed address
    """
    if not isinstance(value, str):
        raise InvalidAddressError(f"{field} must be a string, got {type(value).__name__}")

    if not ADDRESS_PATTERN.match(value):
        digits = len(value) - 2 if value.startswith('0x') else len(value)
        raise InvalidAddressError(
            f"{field} {value!r} is not a valid address "
            f"(expected 0x followed by 40 hex characters, got {digits})"
        )

    body = value[2:]
    is_mixed_case = body != body.lower() and body != body.upper()

    if is_mixed_case and not Web3.is_checksum_address(value):
        raise InvalidAddressError(
            f"{field} {value!r} has an invalid EIP-55 checksum "
            f"(expected {to_checksum_address(value)})"
        )

    return to_checksum_address(value)


def compute_contract_address(sender: str, nonce: int) -> str:
    """
    Address a CREATE transaction from sender at nonce will deploy to

    Args:
        sender: Deployer address
        nonce: Deployer account nonce used by the creation transaction

    Returns:
        Checksummed contract address
    """
    if nonce < 0:
        raise ValueError(f"Nonce must be non-negative, got {nonce}")

    sender_bytes = to_bytes(hexstr=validate_address(sender, "sender"))
    digest = keccak(rlp.encode([sender_bytes, nonce]))

    return to_checksum_address(digest[12:])
