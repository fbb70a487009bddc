"""
Calldata encoding for contract calls.

``AbiEncoder`` looks a function up in a JSON ABI, coerces the arguments to
the declared Solidity types and returns ``0x``-prefixed calldata
(4-byte selector followed by the ABI-encoded arguments).
"""

import json
import logging
from decimal import Decimal
from typing import Any, Dict, List, Protocol, Sequence, Tuple, Union

from eth_abi import encode
from eth_abi.exceptions import EncodingError
from eth_utils import is_address, keccak, to_checksum_address

from ..amm.quote import MAX_UINT256
from ..errors import ExternalError


logger = logging.getLogger(__name__)

# Unlimited approval
MAX_UINT256_LABEL = "MAX_UINT256"

AbiSource = Union[str, Sequence[Dict[str, Any]]]


class CallEncoder(Protocol):
    def encode(self, function_name: str, args: Sequence[Any], abi: AbiSource) -> str:
        """Return 0x-prefixed calldata, raising ExternalError on mismatch."""
        ...


def _selector_from_signature(signature: str) -> str:
    return keccak(text=signature)[:4].hex()


def _load_abi(abi: AbiSource) -> List[Dict[str, Any]]:
    if isinstance(abi, str):
        try:
            abi = json.loads(abi)
        except json.JSONDecodeError as e:
            raise ExternalError(f"Invalid ABI JSON: {e}")
    if not isinstance(abi, (list, tuple)):
        raise ExternalError("ABI must be a list of entries")
    return list(abi)


def find_function(function_name: str, abi: AbiSource) -> Dict[str, Any]:
    for entry in _load_abi(abi):
        if entry.get("type", "function") == "function" and entry.get("name") == function_name:
            return entry
    raise ExternalError(
        f"Function {function_name} not found in ABI",
        details={"function": function_name},
    )


def function_signature(entry: Dict[str, Any]) -> str:
    types = ",".join(param["type"] for param in entry.get("inputs", []))
    return f"{entry['name']}({types})"


def _coerce(abi_type: str, value: Any, name: str) -> Any:
    if abi_type.endswith("[]"):
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            raise ExternalError(f"Argument {name} must be a list for {abi_type}", details={"argument": name})
        return [_coerce(abi_type[:-2], item, name) for item in value]

    if abi_type == "address":
        if not isinstance(value, str) or not is_address(value):
            raise ExternalError(f"Argument {name} is not an address: {value!r}", details={"argument": name})
        return to_checksum_address(value)

    if abi_type.startswith(("uint", "int")):
        if isinstance(value, bool) or isinstance(value, float):
            raise ExternalError(f"Argument {name} must be an integer, got {value!r}", details={"argument": name})
        if isinstance(value, Decimal):
            if value != value.to_integral_value():
                raise ExternalError(f"Argument {name} must be an integer, got {value}", details={"argument": name})
            return int(value)
        try:
            return int(value, 0) if isinstance(value, str) else int(value)
        except (TypeError, ValueError):
            raise ExternalError(f"Argument {name} must be an integer, got {value!r}", details={"argument": name})

    if abi_type == "bool":
        if not isinstance(value, bool):
            raise ExternalError(f"Argument {name} must be a bool, got {value!r}", details={"argument": name})
        return value

    return value


class AbiEncoder:
    """Default CallEncoder backed by eth-abi."""

    def encode(self, function_name: str, args: Sequence[Any], abi: AbiSource) -> str:
        entry = find_function(function_name, abi)
        inputs = entry.get("inputs", [])
        if len(args) != len(inputs):
            raise ExternalError(
                f"{function_name} expects {len(inputs)} arguments, got {len(args)}",
                details={"function": function_name},
            )

        types = [param["type"] for param in inputs]
        values = [
            _coerce(param["type"], value, param.get("name") or f"arg{i}")
            for i, (param, value) in enumerate(zip(inputs, args))
        ]

        try:
            payload = encode(types, values)
        except (EncodingError, TypeError, ValueError, OverflowError) as e:
            logger.warning(f"ABI encoding failed for {function_name}: {e}")
            raise ExternalError(
                f"Could not encode {function_name}: {e}",
                details={"function": function_name},
            )

        return "0x" + _selector_from_signature(function_signature(entry)) + payload.hex()


def _display(abi_type: str, value: Any) -> str:
    if abi_type.endswith("[]"):
        return "[" + ", ".join(_display(abi_type[:-2], item) for item in value) + "]"
    if abi_type.startswith("uint") and not isinstance(value, bool):
        if int(value) == MAX_UINT256:
            return MAX_UINT256_LABEL
        return str(int(value))
    return str(value)


def describe_arguments(function_name: str, args: Sequence[Any], abi: AbiSource) -> Tuple[Tuple[str, str], ...]:
    """Ordered (name, value) pairs for the signing page, MAX uint256 shown by name."""
    entry = find_function(function_name, abi)
    return tuple(
        (param.get("name") or f"arg{i}", _display(param["type"], value))
        for i, (param, value) in enumerate(zip(entry.get("inputs", []), args))
    )
