"""Domain models for transaction assembly."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

PUBLIC_KEY_LENGTH = 32
SIGNATURE_LENGTH = 64
NETWORK_IDENTIFIER_LENGTH = 32


@dataclass
class TransactionRecord:
    """A transaction as built for a single invocation.

    ``asset`` holds schema-typed values (ints, bytes, strings, nested lists and
    mappings).  ``signatures`` stays empty until the record is signed.
    """

    module_id: int
    asset_id: int
    nonce: int
    fee: int
    sender_public_key: bytes
    asset: dict[str, Any]
    signatures: list[bytes] = field(default_factory=list)

    @property
    def is_signed(self) -> bool:
        return bool(self.signatures)
