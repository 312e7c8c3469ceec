"""Ed25519 key derivation and detached transaction signatures.

Keys are derived deterministically: the SHA-256 digest of the UTF-8
passphrase is the Ed25519 seed.  Transaction signatures cover
``network_identifier || signing_bytes`` so a signature is only valid on the
chain instance the network identifier names.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from .codec import encode_transaction
from .model import NETWORK_IDENTIFIER_LENGTH, PUBLIC_KEY_LENGTH, SIGNATURE_LENGTH, TransactionRecord
from .schema import SchemaDescriptor

logger = logging.getLogger(__name__)

ADDRESS_LENGTH = 20


class SigningError(ValueError):
    """Raised when signing inputs are malformed."""


@dataclass(frozen=True)
class KeyPair:
    public_key: bytes
    private_key: Ed25519PrivateKey

    @property
    def address(self) -> bytes:
        return address_from_public_key(self.public_key)


def keypair_from_passphrase(passphrase: str) -> KeyPair:
    seed = hashlib.sha256(passphrase.encode("utf-8")).digest()
    private_key = Ed25519PrivateKey.from_private_bytes(seed)
    public_key = private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
    return KeyPair(public_key=public_key, private_key=private_key)


def public_key_from_passphrase(passphrase: str) -> bytes:
    return keypair_from_passphrase(passphrase).public_key


def address_from_public_key(public_key: bytes) -> bytes:
    """Return the 20-byte account address for ``public_key``."""

    return hashlib.sha256(public_key).digest()[:ADDRESS_LENGTH]


def _signing_payload(network_identifier: bytes, unsigned_bytes: bytes) -> bytes:
    if len(network_identifier) != NETWORK_IDENTIFIER_LENGTH:
        raise SigningError(
            f"Network identifier must be {NETWORK_IDENTIFIER_LENGTH} bytes, got {len(network_identifier)}"
        )
    return network_identifier + unsigned_bytes


def sign(network_identifier: bytes, unsigned_bytes: bytes, passphrase: str) -> bytes:
    """Return the detached signature of ``unsigned_bytes`` for this network."""

    payload = _signing_payload(network_identifier, unsigned_bytes)
    signature = keypair_from_passphrase(passphrase).private_key.sign(payload)
    logger.debug("Signed %d byte payload", len(payload))
    return signature


def verify(
    network_identifier: bytes, unsigned_bytes: bytes, public_key: bytes, signature: bytes
) -> bool:
    if len(public_key) != PUBLIC_KEY_LENGTH or len(signature) != SIGNATURE_LENGTH:
        return False
    payload = _signing_payload(network_identifier, unsigned_bytes)
    try:
        Ed25519PublicKey.from_public_bytes(public_key).verify(signature, payload)
    except InvalidSignature:
        return False
    return True


def sign_transaction(
    record: TransactionRecord,
    transaction_schema: SchemaDescriptor,
    asset_schema: SchemaDescriptor,
    network_identifier: bytes,
    passphrase: str,
) -> TransactionRecord:
    """Sign ``record`` in place with the sender key and return it.

    Only single-signature accounts are handled, so a record that already
    carries a signature is rejected.
    """

    if record.signatures:
        raise SigningError("Transaction is already signed")
    unsigned = encode_transaction(
        transaction_schema, asset_schema, record, include_signatures=False
    )
    record.signatures.append(sign(network_identifier, unsigned, passphrase))
    return record


def verify_transaction(
    record: TransactionRecord,
    transaction_schema: SchemaDescriptor,
    asset_schema: SchemaDescriptor,
    network_identifier: bytes,
) -> bool:
    """Check the sender signature on ``record``."""

    if len(record.signatures) != 1:
        return False
    unsigned = encode_transaction(
        transaction_schema, asset_schema, record, include_signatures=False
    )
    return verify(network_identifier, unsigned, record.sender_public_key, record.signatures[0])
