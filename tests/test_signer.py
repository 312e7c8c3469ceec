"""Unit tests for passphrase keys and detached signatures."""

from __future__ import annotations

import pytest

from lisk_txkit.codec import decode_transaction
from lisk_txkit.registry import SchemaRegistry
from lisk_txkit.signer import (
    SigningError,
    address_from_public_key,
    keypair_from_passphrase,
    public_key_from_passphrase,
    sign,
    sign_transaction,
    verify,
    verify_transaction,
)

from txdata import (
    NETWORK_IDENTIFIER,
    PASSPHRASE,
    SENDER_PUBLIC_KEY,
    TRANSFER_SIGNATURE_NONCE_1,
    TRANSFER_SIGNED_NONCE_1,
    TRANSFER_UNSIGNED_NONCE_1,
)

NETWORK = bytes.fromhex(NETWORK_IDENTIFIER)
UNSIGNED = bytes.fromhex(TRANSFER_UNSIGNED_NONCE_1)


def test_public_key_is_derived_from_passphrase() -> None:
    assert public_key_from_passphrase(PASSPHRASE).hex() == SENDER_PUBLIC_KEY


def test_address_is_truncated_public_key_digest() -> None:
    keypair = keypair_from_passphrase(PASSPHRASE)

    assert len(keypair.address) == 20
    assert keypair.address == address_from_public_key(keypair.public_key)


def test_sign_matches_known_signature_and_is_deterministic() -> None:
    first = sign(NETWORK, UNSIGNED, PASSPHRASE)
    second = sign(NETWORK, UNSIGNED, PASSPHRASE)

    assert first == second
    assert first.hex() == TRANSFER_SIGNATURE_NONCE_1


def test_verify_accepts_valid_and_rejects_tampered_payloads() -> None:
    public_key = bytes.fromhex(SENDER_PUBLIC_KEY)
    signature = sign(NETWORK, UNSIGNED, PASSPHRASE)

    assert verify(NETWORK, UNSIGNED, public_key, signature)
    assert not verify(NETWORK, UNSIGNED + b"\x00", public_key, signature)
    assert not verify(b"\x00" * 32, UNSIGNED, public_key, signature)
    assert not verify(NETWORK, UNSIGNED, public_key, signature[:-1])


def test_sign_rejects_short_network_identifier() -> None:
    with pytest.raises(SigningError):
        sign(b"\x01" * 31, UNSIGNED, PASSPHRASE)


def test_sign_transaction_appends_single_signature() -> None:
    registry = SchemaRegistry.from_static()
    asset_schema = registry.resolve(2, 0)
    record = decode_transaction(registry.transaction_schema, asset_schema, UNSIGNED)

    sign_transaction(record, registry.transaction_schema, asset_schema, NETWORK, PASSPHRASE)

    assert [s.hex() for s in record.signatures] == [TRANSFER_SIGNATURE_NONCE_1]
    assert verify_transaction(record, registry.transaction_schema, asset_schema, NETWORK)
    with pytest.raises(SigningError):
        sign_transaction(record, registry.transaction_schema, asset_schema, NETWORK, PASSPHRASE)


def test_verify_transaction_on_decoded_signed_bytes() -> None:
    registry = SchemaRegistry.from_static()
    asset_schema = registry.resolve(2, 0)
    record = decode_transaction(
        registry.transaction_schema, asset_schema, bytes.fromhex(TRANSFER_SIGNED_NONCE_1)
    )

    assert verify_transaction(record, registry.transaction_schema, asset_schema, NETWORK)
    record.fee += 1
    assert not verify_transaction(record, registry.transaction_schema, asset_schema, NETWORK)
