"""Transaction assembly: flag validation, field resolution, signing, output.

The assembler never branches on offline versus online beyond choosing a
:class:`~lisk_txkit.sources.TransactionSource`.  Flag combinations are
checked before the source is touched, so an invalid invocation performs no
prompt, query or signature.
"""

from __future__ import annotations

import getpass
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict

from .codec import decode_transaction, decode_transaction_envelope, encode_transaction
from .model import NETWORK_IDENTIFIER_LENGTH, PUBLIC_KEY_LENGTH, TransactionRecord
from .prompts import Ask, console_ask, prompt_asset, prompt_passphrase
from .registry import SchemaRegistry
from .rpc_client import NodeRPCClient
from .schema import FieldKind, SchemaDescriptor
from .signer import address_from_public_key, public_key_from_passphrase, sign_transaction
from .sources import NodeSource, OfflineSource, TransactionSource
from .transform import (
    InvalidFieldError,
    asset_from_json,
    asset_to_json,
    hex_to_bytes,
    parse_integer,
)

logger = logging.getLogger(__name__)


class FlagError(ValueError):
    """Raised when a combination of flags is not allowed."""


class DataPathNotAllowedOfflineError(FlagError):
    def __init__(self) -> None:
        super().__init__("Flag: --data-path should not be specified while creating transaction offline")


class MissingNetworkIdentifierError(FlagError):
    def __init__(self) -> None:
        super().__init__("Flag: --network-identifier must be specified while creating transaction offline")


class MissingNonceError(FlagError):
    def __init__(self) -> None:
        super().__init__("Flag: --nonce must be specified while creating transaction offline")


class MissingSenderKeyError(FlagError):
    def __init__(self) -> None:
        super().__init__("Sender publickey must be specified when no-signature flags is used")


@dataclass
class CreateOptions:
    """Flags accepted by ``create``; raw strings are parsed by the assembler."""

    module_id: int
    asset_id: int
    fee: str | int
    offline: bool = False
    network_identifier: str | None = None
    nonce: str | int | None = None
    asset: str | None = None
    sender_public_key: str | None = None
    no_signature: bool = False
    passphrase: str | None = None
    data_path: str | None = None
    json_output: bool = False


def validate_options(options: CreateOptions) -> None:
    """Reject flag combinations that break the offline/online rules."""

    if options.offline:
        if options.data_path:
            raise DataPathNotAllowedOfflineError()
        if not options.network_identifier:
            raise MissingNetworkIdentifierError()
        if options.nonce is None:
            raise MissingNonceError()
    if options.no_signature and not options.sender_public_key:
        raise MissingSenderKeyError()


def select_source(
    options: CreateOptions,
    client_factory: Callable[[str | None], NodeRPCClient] = NodeRPCClient.from_data_path,
) -> TransactionSource:
    """Pick the data source once, before any field is resolved."""

    if options.offline:
        network_identifier = None
        if options.network_identifier:
            network_identifier = _network_identifier(options.network_identifier)
        return OfflineSource(network_identifier)
    return NodeSource(client_factory(options.data_path))


def _network_identifier(raw: str) -> bytes:
    return hex_to_bytes(raw, "network-identifier", length=NETWORK_IDENTIFIER_LENGTH)


@dataclass
class AssembledTransaction:
    """A finished record together with the schemas that encode it."""

    record: TransactionRecord
    transaction_schema: SchemaDescriptor
    asset_schema: SchemaDescriptor

    def encode(self) -> bytes:
        return encode_transaction(self.transaction_schema, self.asset_schema, self.record)

    def to_hex(self) -> str:
        return self.encode().hex()

    def to_json(self) -> Dict[str, Any]:
        record = self.record
        return {
            "moduleID": record.module_id,
            "assetID": record.asset_id,
            "nonce": str(record.nonce),
            "fee": str(record.fee),
            "senderPublicKey": record.sender_public_key.hex(),
            "asset": asset_to_json(self.asset_schema, record.asset),
            "signatures": [signature.hex() for signature in record.signatures],
        }

    def render(self, json_output: bool = False) -> Dict[str, Any]:
        if json_output:
            return self.to_json()
        return {"transaction": self.to_hex()}


class TransactionAssembler:
    """Build a transaction from flags, prompts and a data source."""

    def __init__(
        self,
        source: TransactionSource,
        *,
        ask: Ask = console_ask,
        read_secret: Callable[[str], str] = getpass.getpass,
    ) -> None:
        self.source = source
        self.ask = ask
        self.read_secret = read_secret

    def create(self, options: CreateOptions) -> AssembledTransaction:
        validate_options(options)
        module_id = parse_integer(options.module_id, "moduleID", FieldKind.UINT32)
        asset_id = parse_integer(options.asset_id, "assetID", FieldKind.UINT32)
        fee = parse_integer(options.fee, "fee", FieldKind.UINT64)
        # Flag values are parsed before any prompt so a typo fails fast.
        flag_nonce = None
        if options.nonce is not None:
            flag_nonce = parse_integer(options.nonce, "nonce", FieldKind.UINT64)
        flag_network_identifier = None
        if options.network_identifier:
            flag_network_identifier = _network_identifier(options.network_identifier)

        registry = self.source.registry()
        asset_schema = registry.resolve(module_id, asset_id)
        asset = self._resolve_asset(asset_schema, options.asset)

        passphrase = None
        if not options.no_signature:
            passphrase = options.passphrase or prompt_passphrase(self.read_secret)
        sender_public_key = self._resolve_sender_public_key(options, passphrase)

        if flag_nonce is not None:
            nonce = flag_nonce
        else:
            nonce = self.source.account_nonce(address_from_public_key(sender_public_key))

        record = TransactionRecord(
            module_id=module_id,
            asset_id=asset_id,
            nonce=nonce,
            fee=fee,
            sender_public_key=sender_public_key,
            asset=asset,
        )
        logger.info(
            "Assembled transaction moduleID=%s assetID=%s nonce=%s fee=%s",
            module_id,
            asset_id,
            nonce,
            fee,
        )

        if passphrase is not None:
            if flag_network_identifier is not None:
                network_identifier = flag_network_identifier
            else:
                network_identifier = self.source.network_identifier()
            sign_transaction(
                record, registry.transaction_schema, asset_schema, network_identifier, passphrase
            )

        return AssembledTransaction(
            record=record,
            transaction_schema=registry.transaction_schema,
            asset_schema=asset_schema,
        )

    def _resolve_asset(self, asset_schema: SchemaDescriptor, raw: str | None) -> Dict[str, Any]:
        if raw is None:
            return asset_from_json(asset_schema, prompt_asset(asset_schema, self.ask))
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise InvalidFieldError(f"Flag: --asset must be valid JSON: {exc}") from exc
        return asset_from_json(asset_schema, value)

    @staticmethod
    def _resolve_sender_public_key(options: CreateOptions, passphrase: str | None) -> bytes:
        if options.sender_public_key:
            public_key = hex_to_bytes(
                options.sender_public_key, "sender-public-key", length=PUBLIC_KEY_LENGTH
            )
            if passphrase is not None and public_key != public_key_from_passphrase(passphrase):
                # Mismatch is reported but not fatal; the flag value is kept.
                logger.warning("Sender public key does not match the key derived from the passphrase")
            return public_key
        assert passphrase is not None
        return public_key_from_passphrase(passphrase)


def create_transaction(
    options: CreateOptions,
    *,
    source: TransactionSource | None = None,
    ask: Ask = console_ask,
    read_secret: Callable[[str], str] = getpass.getpass,
) -> Dict[str, Any]:
    """Validate flags, assemble and render a transaction in one call."""

    validate_options(options)
    if source is None:
        source = select_source(options)
    assembler = TransactionAssembler(source, ask=ask, read_secret=read_secret)
    return assembler.create(options).render(options.json_output)


def load_transaction(registry: SchemaRegistry, transaction_hex: str) -> AssembledTransaction:
    """Decode a hex transaction using the asset schema named in its envelope."""

    data = hex_to_bytes(transaction_hex, "transaction")
    envelope = decode_transaction_envelope(registry.transaction_schema, data)
    asset_schema = registry.resolve(envelope["moduleID"], envelope["assetID"])
    record = decode_transaction(registry.transaction_schema, asset_schema, data)
    return AssembledTransaction(
        record=record,
        transaction_schema=registry.transaction_schema,
        asset_schema=asset_schema,
    )


def sign_transaction_hex(
    source: TransactionSource,
    transaction_hex: str,
    passphrase: str,
    *,
    network_identifier: str | None = None,
) -> AssembledTransaction:
    """Add the sender signature to an unsigned hex transaction."""

    transaction = load_transaction(source.registry(), transaction_hex)
    if transaction.record.sender_public_key != public_key_from_passphrase(passphrase):
        raise FlagError("Passphrase does not belong to the transaction sender")
    resolved = (
        _network_identifier(network_identifier)
        if network_identifier
        else source.network_identifier()
    )
    sign_transaction(
        transaction.record,
        transaction.transaction_schema,
        transaction.asset_schema,
        resolved,
        passphrase,
    )
    return transaction
