"""Schema-driven transaction assembly and signing for Lisk-style ledgers."""

from .assembler import (
    AssembledTransaction,
    CreateOptions,
    DataPathNotAllowedOfflineError,
    FlagError,
    MissingNetworkIdentifierError,
    MissingNonceError,
    MissingSenderKeyError,
    TransactionAssembler,
    create_transaction,
    load_transaction,
    sign_transaction_hex,
)
from .codec import CodecError, decode, encode
from .model import TransactionRecord
from .prompts import Question, prepare_questions, prompt_asset
from .registry import SchemaRegistry, UnknownAssetError
from .rpc_client import NodeRPCClient, NodeUnreachableError, RPCError
from .schema import FieldKind, FieldSpec, SchemaDescriptor, parse_schema
from .signer import sign, verify
from .sources import NodeSource, OfflineSource
from .transform import (
    InvalidHexError,
    InvalidNumberError,
    asset_from_json,
    transform_asset,
    transform_nested_asset,
)

__all__ = [
    "AssembledTransaction",
    "CreateOptions",
    "DataPathNotAllowedOfflineError",
    "FlagError",
    "MissingNetworkIdentifierError",
    "MissingNonceError",
    "MissingSenderKeyError",
    "TransactionAssembler",
    "create_transaction",
    "load_transaction",
    "sign_transaction_hex",
    "CodecError",
    "decode",
    "encode",
    "TransactionRecord",
    "Question",
    "prepare_questions",
    "prompt_asset",
    "SchemaRegistry",
    "UnknownAssetError",
    "NodeRPCClient",
    "NodeUnreachableError",
    "RPCError",
    "FieldKind",
    "FieldSpec",
    "SchemaDescriptor",
    "parse_schema",
    "sign",
    "verify",
    "NodeSource",
    "OfflineSource",
    "InvalidHexError",
    "InvalidNumberError",
    "asset_from_json",
    "transform_asset",
    "transform_nested_asset",
]
