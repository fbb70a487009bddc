"""Helpers for normalizing chain identifiers and validating token addresses."""

from __future__ import annotations

import re
from functools import lru_cache

from eth_utils import is_address, to_checksum_address

from ..core.errors import ValidationError

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

_EVM_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")

# Callers use either spelling to mean the chain's native currency.
_NATIVE_SENTINELS = {"0x0", ZERO_ADDRESS}

_CHAIN_ALIASES = {
    "eth": "ethereum",
    "evm": "ethereum",
    "ethereum": "ethereum",
    "sol": "solana",
    "solana": "solana",
}


def normalize_chain_type(chain_type: str | None) -> str:
    """Collapse user-provided chain type identifiers into canonical slugs."""

    if not chain_type:
        return "ethereum"
    canonical = _CHAIN_ALIASES.get(chain_type.lower().strip())
    return canonical or chain_type.lower().strip()


def is_native(address: str | None) -> bool:
    """True for the native-currency sentinels ``0x0`` and the zero address."""

    if not address:
        return False
    return address.strip().lower() in _NATIVE_SENTINELS


@lru_cache(maxsize=512)
def is_valid_evm_address(address: str) -> bool:
    if not address or not _EVM_ADDRESS_RE.match(address):
        return False
    return is_address(address)


def normalize_address(address: str, field: str = "address") -> str:
    """Checksum an EVM address, raising ValidationError when it is malformed."""

    candidate = (address or "").strip()
    if not is_valid_evm_address(candidate):
        raise ValidationError(f"Invalid {field}: {address!r}", details={"field": field})
    return to_checksum_address(candidate)


def normalize_token(address: str, field: str = "token") -> str:
    """Like normalize_address, but keeps the native sentinel as the zero address."""

    if is_native(address):
        return ZERO_ADDRESS
    return normalize_address(address, field)


def same_address(left: str | None, right: str | None) -> bool:
    if not left or not right:
        return False
    return left.strip().lower() == right.strip().lower()
