"""
Move type strings — parsing and normalization.

The ledger reports object types as strings like::

    0x0000000000000000000000000000000000000000000000000000000000000002::coin::Coin<0x2::sui::SUI>

while callers usually write the short form (``0x2::sui::SUI``). Every
comparison in this package goes through ``normalize_type()`` so the two
forms compare equal.

Pure, no I/O.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# Addresses are 32 bytes.
ADDRESS_HEX_LEN = 64

# Framework address hosting ``coin::Coin``.
SUI_FRAMEWORK_ADDRESS = "0x2"

_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")
_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def normalize_address(value: str) -> str:
    """Normalize an address or object id to ``0x`` + 64 lowercase hex chars.

    Raises:
        ValueError: If the value is not hex or longer than 32 bytes.
    """
    raw = value[2:] if value.startswith(("0x", "0X")) else value
    if not raw or not _HEX_RE.match(raw) or len(raw) > ADDRESS_HEX_LEN:
        raise ValueError(f"invalid address: {value!r}")
    return "0x" + raw.lower().rjust(ADDRESS_HEX_LEN, "0")


def _split_top_level(params: str) -> list[str]:
    """Split ``A, B<C, D>, E`` on commas that are not nested in ``<>``."""
    parts: list[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(params):
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
            if depth < 0:
                raise ValueError(f"unbalanced type parameters: {params!r}")
        elif ch == "," and depth == 0:
            parts.append(params[start:i].strip())
            start = i + 1
    if depth != 0:
        raise ValueError(f"unbalanced type parameters: {params!r}")
    parts.append(params[start:].strip())
    return parts


@dataclass(frozen=True)
class StructTag:
    """A parsed Move struct type.

    Attributes:
        address: Normalized defining address (``0x`` + 64 hex).
        module: Module name.
        name: Struct name.
        type_params: Normalized type parameter strings.
    """

    address: str
    module: str
    name: str
    type_params: tuple[str, ...] = ()

    @classmethod
    def parse(cls, value: str) -> StructTag:
        """Parse ``address::module::Name<T1, T2>``.

        Raises:
            ValueError: If the string is not a struct type.
        """
        text = value.strip()
        params: tuple[str, ...] = ()
        lt = text.find("<")
        if lt != -1:
            if not text.endswith(">"):
                raise ValueError(f"invalid struct type: {value!r}")
            params = tuple(normalize_type(p) for p in _split_top_level(text[lt + 1 : -1]))
            text = text[:lt]

        pieces = text.split("::")
        if len(pieces) != 3:
            raise ValueError(f"invalid struct type: {value!r}")
        address, module, name = pieces
        if not _IDENT_RE.match(module) or not _IDENT_RE.match(name):
            raise ValueError(f"invalid struct type: {value!r}")

        return cls(
            address=normalize_address(address),
            module=module,
            name=name,
            type_params=params,
        )

    @property
    def key(self) -> str:
        """Grouping key ``module::Name`` (address and type params dropped)."""
        return f"{self.module}::{self.name}"

    def __str__(self) -> str:
        base = f"{self.address}::{self.module}::{self.name}"
        if self.type_params:
            return f"{base}<{', '.join(self.type_params)}>"
        return base


def normalize_type(value: str) -> str:
    """Normalize a Move type string (struct, vector or primitive)."""
    text = value.strip()
    if text.startswith("vector<") and text.endswith(">"):
        return f"vector<{normalize_type(text[len('vector<'):-1])}>"
    if "::" in text:
        return str(StructTag.parse(text))
    return text


def is_coin(tag: StructTag) -> bool:
    """True if ``tag`` is ``0x2::coin::Coin<T>``."""
    return (
        tag.address == normalize_address(SUI_FRAMEWORK_ADDRESS)
        and tag.module == "coin"
        and tag.name == "Coin"
        and len(tag.type_params) == 1
    )


def is_coin_of(tag: StructTag, token_type: str) -> bool:
    """True if ``tag`` is ``Coin<token_type>``, comparing normalized forms."""
    return is_coin(tag) and tag.type_params[0] == normalize_type(token_type)
