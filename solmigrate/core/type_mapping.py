"""
Type Mapping — Solidity → Rust type conversion and naming helpers.

Shared by the mapping-rule engine and the Anchor skeleton generator.
"""

from __future__ import annotations

import re

SOLIDITY_TO_RUST: dict[str, str] = {
    "address": "Pubkey",
    "address payable": "Pubkey",
    "bool": "bool",
    "string": "String",
    "uint256": "u64",
    "uint128": "u64",
    "uint64": "u64",
    "uint32": "u32",
    "uint16": "u16",
    "uint8": "u8",
    "uint": "u64",
    "int256": "i64",
    "int128": "i64",
    "int64": "i64",
    "int32": "i32",
    "int": "i64",
    "bytes32": "[u8; 32]",
    "bytes": "Vec<u8>",
}

# Serialized size in bytes; dynamic types carry an estimated capacity
RUST_TYPE_SIZES: dict[str, str] = {
    "Pubkey": "32",
    "bool": "1",
    "u64": "8",
    "u32": "4",
    "u16": "2",
    "u8": "1",
    "i64": "8",
    "i32": "4",
    "Vec<u8>": "4 + 256",
    "String": "4 + 200",
    "[u8; 32]": "32",
}

_MAPPING_VALUE_RE = re.compile(r"=>\s*([\w.]+)")


def solidity_type_to_rust(type_name: str) -> str:
    """Convert a Solidity type to its Anchor field type. Unknown types become Vec<u8>."""
    type_name = type_name.strip()
    if type_name.endswith("[]"):
        return f"Vec<{solidity_type_to_rust(type_name[:-2])}>"
    return SOLIDITY_TO_RUST.get(type_name, "Vec<u8>")


def rust_type_size(rust_type: str) -> str:
    if rust_type.startswith("Vec<"):
        return "4 + 256"
    return RUST_TYPE_SIZES.get(rust_type, "32")


def mapping_value_type(type_name: str) -> str:
    """Innermost value type of a (possibly nested) mapping, 'uint256' if unreadable."""
    values = _MAPPING_VALUE_RE.findall(type_name)
    values = [v for v in values if v != "mapping"]
    return values[-1] if values else "uint256"


def to_snake_case(name: str) -> str:
    """`transferFrom` → `transfer_from`, `ERC20Token` → `erc20_token`."""
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    return name.lower().lstrip("_") or name.lower()


def capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def to_pascal_case(name: str) -> str:
    """`_balances` / `token_uri` → `Balances` / `TokenUri`."""
    return "".join(capitalize(part) for part in to_snake_case(name).split("_") if part)


# Names the generated program already defines or imports for itself
RESERVED_HANDLER_NAMES = frozenset({"initialize"})
RESERVED_CONTEXT_NAMES = frozenset(
    {"Initialize", "Mint", "Token", "TokenAccount", "AssociatedToken", "System", "Signer"}
)


def unique_handler_names(function_names: list[str]) -> list[tuple[str, str]]:
    """
    Return (handler, Context struct) names for each function, in order.

    Overloads get a numeric suffix: `safeTransferFrom` twice gives
    `safe_transfer_from` / `SafeTransferFrom`, then `safe_transfer_from_2` /
    `SafeTransferFrom2`. A Context that would shadow a type the program already
    uses gets an `Accounts` suffix (`mint` → `MintAccounts`).
    """
    used_handlers = set(RESERVED_HANDLER_NAMES)
    used_contexts = set(RESERVED_CONTEXT_NAMES)
    names: list[tuple[str, str]] = []
    for function_name in function_names:
        base = to_snake_case(function_name)
        handler, n = base, 1
        while handler in used_handlers:
            n += 1
            handler = f"{base}_{n}"
        context = to_pascal_case(handler)
        while context in used_contexts:
            context += "Accounts"
        used_handlers.add(handler)
        used_contexts.add(context)
        names.append((handler, context))
    return names
