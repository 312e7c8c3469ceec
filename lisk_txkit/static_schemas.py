"""Embedded schema set used when creating transactions offline.

The layout mirrors the ``app:getSchema`` response of a node running the
default module set, so offline and online assembly parse the same shapes.
"""

from __future__ import annotations

import copy
from typing import Any

_ADDRESS = {"dataType": "bytes", "minLength": 20, "maxLength": 20}
_PUBLIC_KEY = {"dataType": "bytes", "minLength": 32, "maxLength": 32}

TRANSACTION_SCHEMA: dict[str, Any] = {
    "$id": "lisk/transaction",
    "type": "object",
    "required": ["moduleID", "assetID", "nonce", "fee", "senderPublicKey", "asset"],
    "properties": {
        "moduleID": {"dataType": "uint32", "fieldNumber": 1, "minimum": 2},
        "assetID": {"dataType": "uint32", "fieldNumber": 2},
        "nonce": {"dataType": "uint64", "fieldNumber": 3},
        "fee": {"dataType": "uint64", "fieldNumber": 4},
        "senderPublicKey": {**_PUBLIC_KEY, "fieldNumber": 5},
        "asset": {"dataType": "bytes", "fieldNumber": 6},
        "signatures": {
            "type": "array",
            "items": {"dataType": "bytes"},
            "fieldNumber": 7,
        },
    },
}

ACCOUNT_SCHEMA: dict[str, Any] = {
    "$id": "lisk/account",
    "type": "object",
    "required": ["address", "token", "sequence", "keys", "dpos"],
    "properties": {
        "address": {"dataType": "bytes", "fieldNumber": 1},
        "token": {
            "type": "object",
            "fieldNumber": 2,
            "properties": {"balance": {"dataType": "uint64", "fieldNumber": 1}},
        },
        "sequence": {
            "type": "object",
            "fieldNumber": 3,
            "properties": {"nonce": {"dataType": "uint64", "fieldNumber": 1}},
        },
        "keys": {
            "type": "object",
            "fieldNumber": 4,
            "properties": {
                "numberOfSignatures": {"dataType": "uint32", "fieldNumber": 1},
                "mandatoryKeys": {
                    "type": "array",
                    "items": {"dataType": "bytes"},
                    "fieldNumber": 2,
                },
                "optionalKeys": {
                    "type": "array",
                    "items": {"dataType": "bytes"},
                    "fieldNumber": 3,
                },
            },
        },
        "dpos": {
            "type": "object",
            "fieldNumber": 5,
            "properties": {
                "delegate": {
                    "type": "object",
                    "fieldNumber": 1,
                    "properties": {
                        "username": {"dataType": "string", "fieldNumber": 1},
                        "pomHeights": {
                            "type": "array",
                            "items": {"dataType": "uint32"},
                            "fieldNumber": 2,
                        },
                        "consecutiveMissedBlocks": {"dataType": "uint32", "fieldNumber": 3},
                        "lastForgedHeight": {"dataType": "uint32", "fieldNumber": 4},
                        "isBanned": {"dataType": "boolean", "fieldNumber": 5},
                        "totalVotesReceived": {"dataType": "uint64", "fieldNumber": 6},
                    },
                },
                "sentVotes": {
                    "type": "array",
                    "fieldNumber": 2,
                    "items": {
                        "type": "object",
                        "properties": {
                            "delegateAddress": {"dataType": "bytes", "fieldNumber": 1},
                            "amount": {"dataType": "uint64", "fieldNumber": 2},
                        },
                    },
                },
                "unlocking": {
                    "type": "array",
                    "fieldNumber": 3,
                    "items": {
                        "type": "object",
                        "properties": {
                            "delegateAddress": {"dataType": "bytes", "fieldNumber": 1},
                            "amount": {"dataType": "uint64", "fieldNumber": 2},
                            "unvoteHeight": {"dataType": "uint32", "fieldNumber": 3},
                        },
                    },
                },
            },
        },
    },
}

TOKEN_TRANSFER_ASSET_SCHEMA: dict[str, Any] = {
    "$id": "lisk/transfer-asset",
    "type": "object",
    "required": ["amount", "recipientAddress", "data"],
    "properties": {
        "amount": {"dataType": "uint64", "fieldNumber": 1},
        "recipientAddress": {**_ADDRESS, "fieldNumber": 2},
        "data": {"dataType": "string", "fieldNumber": 3, "minLength": 0, "maxLength": 64},
    },
}

KEYS_REGISTER_ASSET_SCHEMA: dict[str, Any] = {
    "$id": "lisk/keys/register",
    "type": "object",
    "required": ["numberOfSignatures", "optionalKeys", "mandatoryKeys"],
    "properties": {
        "numberOfSignatures": {"dataType": "uint32", "fieldNumber": 1},
        "mandatoryKeys": {
            "type": "array",
            "items": dict(_PUBLIC_KEY),
            "fieldNumber": 2,
            "minItems": 0,
            "maxItems": 64,
        },
        "optionalKeys": {
            "type": "array",
            "items": dict(_PUBLIC_KEY),
            "fieldNumber": 3,
            "minItems": 0,
            "maxItems": 64,
        },
    },
}

DPOS_REGISTER_ASSET_SCHEMA: dict[str, Any] = {
    "$id": "lisk/dpos/register",
    "type": "object",
    "required": ["username"],
    "properties": {
        "username": {"dataType": "string", "fieldNumber": 1, "minLength": 1, "maxLength": 20},
    },
}

DPOS_VOTE_ASSET_SCHEMA: dict[str, Any] = {
    "$id": "lisk/dpos/vote",
    "type": "object",
    "required": ["votes"],
    "properties": {
        "votes": {
            "type": "array",
            "minItems": 1,
            "maxItems": 20,
            "fieldNumber": 1,
            "items": {
                "type": "object",
                "required": ["delegateAddress", "amount"],
                "properties": {
                    "delegateAddress": {**_ADDRESS, "fieldNumber": 1},
                    "amount": {"dataType": "sint64", "fieldNumber": 2},
                },
            },
        },
    },
}

DPOS_UNLOCK_ASSET_SCHEMA: dict[str, Any] = {
    "$id": "lisk/dpos/unlock",
    "type": "object",
    "required": ["unlockObjects"],
    "properties": {
        "unlockObjects": {
            "type": "array",
            "minItems": 1,
            "maxItems": 20,
            "fieldNumber": 1,
            "items": {
                "type": "object",
                "required": ["delegateAddress", "amount", "unvoteHeight"],
                "properties": {
                    "delegateAddress": {**_ADDRESS, "fieldNumber": 1},
                    "amount": {"dataType": "uint64", "fieldNumber": 2},
                    "unvoteHeight": {"dataType": "uint32", "fieldNumber": 3},
                },
            },
        },
    },
}

LEGACY_RECLAIM_ASSET_SCHEMA: dict[str, Any] = {
    "$id": "lisk/legacyAccount/reclaim",
    "type": "object",
    "required": ["amount"],
    "properties": {
        "amount": {"dataType": "uint64", "fieldNumber": 1},
    },
}

_TRANSACTIONS_ASSETS = [
    {"moduleID": 2, "assetID": 0, "schema": TOKEN_TRANSFER_ASSET_SCHEMA},
    {"moduleID": 4, "assetID": 0, "schema": KEYS_REGISTER_ASSET_SCHEMA},
    {"moduleID": 5, "assetID": 0, "schema": DPOS_REGISTER_ASSET_SCHEMA},
    {"moduleID": 5, "assetID": 1, "schema": DPOS_VOTE_ASSET_SCHEMA},
    {"moduleID": 5, "assetID": 2, "schema": DPOS_UNLOCK_ASSET_SCHEMA},
    {"moduleID": 1000, "assetID": 0, "schema": LEGACY_RECLAIM_ASSET_SCHEMA},
]


def static_schema_set() -> dict[str, Any]:
    """Return a fresh copy of the embedded ``app:getSchema`` payload."""

    return copy.deepcopy(
        {
            "transaction": TRANSACTION_SCHEMA,
            "account": ACCOUNT_SCHEMA,
            "transactionsAssets": _TRANSACTIONS_ASSETS,
        }
    )
