from __future__ import annotations

import pytest

from lisk_txkit.schema import FieldKind, parse_schema
from lisk_txkit.static_schemas import (
    DPOS_VOTE_ASSET_SCHEMA,
    KEYS_REGISTER_ASSET_SCHEMA,
    TOKEN_TRANSFER_ASSET_SCHEMA,
)
from lisk_txkit.transform import (
    InvalidFieldError,
    InvalidHexError,
    InvalidNumberError,
    MissingFieldError,
    asset_from_json,
    asset_to_json,
    hex_to_bytes,
    parse_integer,
    transform_asset,
    transform_nested_asset,
)

from txdata import ADDRESS

TRANSFER = parse_schema(TOKEN_TRANSFER_ASSET_SCHEMA)
KEYS = parse_schema(KEYS_REGISTER_ASSET_SCHEMA)
VOTE = parse_schema(DPOS_VOTE_ASSET_SCHEMA)


def test_transform_asset_splits_comma_lists() -> None:
    transformed = transform_asset(
        KEYS, {"numberOfSignatures": "4", "mandatoryKeys": "a,b", "optionalKeys": "c,d"}
    )

    assert transformed == {
        "numberOfSignatures": 4,
        "mandatoryKeys": ["a", "b"],
        "optionalKeys": ["c", "d"],
    }


def test_transform_asset_keeps_duplicates_and_empty_list() -> None:
    transformed = transform_asset(
        KEYS, {"numberOfSignatures": "1", "mandatoryKeys": "a,a", "optionalKeys": ""}
    )

    assert transformed["mandatoryKeys"] == ["a", "a"]
    assert transformed["optionalKeys"] == []


def test_transform_nested_asset_keeps_input_order() -> None:
    transformed = transform_nested_asset(VOTE, [{"votes": "a,100"}, {"votes": "b,300"}])

    assert transformed == {
        "votes": [
            {"delegateAddress": "a", "amount": 100},
            {"delegateAddress": "b", "amount": 300},
        ]
    }


def test_transform_nested_asset_rejects_wrong_arity() -> None:
    with pytest.raises(InvalidFieldError):
        transform_nested_asset(VOTE, [{"votes": "a"}])


def test_transform_rejects_non_numeric_amount() -> None:
    with pytest.raises(InvalidNumberError, match="Cannot convert abc"):
        transform_asset(TRANSFER, {"amount": "abc", "recipientAddress": ADDRESS, "data": ""})


def test_asset_from_json_converts_hex_and_integers() -> None:
    typed = asset_from_json(
        TRANSFER, {"amount": "18446744073709551615", "recipientAddress": ADDRESS, "data": "x"}
    )

    assert typed == {"amount": 2**64 - 1, "recipientAddress": bytes.fromhex(ADDRESS), "data": "x"}


@pytest.mark.parametrize("amount", ["abc", "1.5", True, None, -1, "18446744073709551616"])
def test_asset_from_json_rejects_bad_integers(amount) -> None:
    with pytest.raises(InvalidNumberError):
        asset_from_json(TRANSFER, {"amount": amount, "recipientAddress": ADDRESS, "data": ""})


@pytest.mark.parametrize("address", ["abc", "zz" * 20, 42])
def test_asset_from_json_rejects_bad_hex(address) -> None:
    with pytest.raises(InvalidHexError):
        asset_from_json(TRANSFER, {"amount": 1, "recipientAddress": address, "data": ""})


def test_asset_from_json_enforces_lengths_and_presence() -> None:
    with pytest.raises(InvalidFieldError):
        asset_from_json(TRANSFER, {"amount": 1, "recipientAddress": "ab", "data": ""})
    with pytest.raises(InvalidFieldError):
        asset_from_json(TRANSFER, {"amount": 1, "recipientAddress": ADDRESS, "data": "x" * 65})
    with pytest.raises(MissingFieldError):
        asset_from_json(TRANSFER, {"amount": 1, "data": ""})
    with pytest.raises(InvalidFieldError):
        asset_from_json(TRANSFER, {"amount": 1, "recipientAddress": ADDRESS, "data": "", "memo": ""})


def test_asset_from_json_validates_nested_groups() -> None:
    typed = asset_from_json(VOTE, {"votes": [{"delegateAddress": ADDRESS, "amount": "-50"}]})

    assert typed == {"votes": [{"delegateAddress": bytes.fromhex(ADDRESS), "amount": -50}]}
    with pytest.raises(InvalidFieldError):
        asset_from_json(VOTE, {"votes": []})


def test_asset_to_json_renders_wide_integers_as_strings() -> None:
    typed = {"votes": [{"delegateAddress": bytes.fromhex(ADDRESS), "amount": -50}]}

    assert asset_to_json(VOTE, typed) == {"votes": [{"delegateAddress": ADDRESS, "amount": "-50"}]}
    assert asset_to_json(KEYS, {"numberOfSignatures": 2, "mandatoryKeys": [], "optionalKeys": []}) == {
        "numberOfSignatures": 2,
        "mandatoryKeys": [],
        "optionalKeys": [],
    }


def test_parse_integer_and_hex_helpers() -> None:
    assert parse_integer(" 42 ", "nonce") == 42
    assert parse_integer("-3", "amount", FieldKind.SINT64) == -3
    with pytest.raises(InvalidNumberError):
        parse_integer(2**32, "moduleID", FieldKind.UINT32)
    assert hex_to_bytes("00ff", "value", length=2) == b"\x00\xff"
    with pytest.raises(InvalidHexError):
        hex_to_bytes("00ff", "value", length=3)
