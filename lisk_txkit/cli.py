"""Command-line interface for lisk-txkit.

The CLI is a thin layer over :mod:`lisk_txkit.assembler`: it maps flags onto
:class:`~lisk_txkit.assembler.CreateOptions`, prints the rendered result as
JSON and turns known errors into ``error: ...`` with exit status 1.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Sequence

from .assembler import (
    CreateOptions,
    DataPathNotAllowedOfflineError,
    FlagError,
    MissingNetworkIdentifierError,
    create_transaction,
    load_transaction,
    sign_transaction_hex,
)
from .codec import CodecError
from .config import ConfigurationError
from .prompts import PromptError, prompt_passphrase
from .registry import UnknownAssetError
from .rpc_client import NodeRPCClient, NodeUnreachableError, RPCError
from .schema import SchemaError
from .signer import SigningError
from .sources import NodeSource, OfflineSource, SourceUnavailableError, TransactionSource
from .transform import AssetInputError

logging.basicConfig(level=logging.WARNING)
logger = logging.getLogger(__name__)

COMPACT_JSON_SEPARATORS = (",", ":")


def _add_source_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Use the embedded schemas and never contact a node",
    )
    parser.add_argument(
        "--data-path",
        default=None,
        help="Node data directory holding config/rpc.yaml (online only)",
    )
    parser.add_argument(
        "--network-identifier",
        default=None,
        help="32-byte hex network identifier (required offline when signing)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create, sign and decode transactions")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    create_parser = subparsers.add_parser(
        "create", help="create a transaction, prompting for missing asset fields"
    )
    create_parser.add_argument("module_id", type=int, help="Registered module ID")
    create_parser.add_argument("asset_id", type=int, help="Registered asset ID")
    create_parser.add_argument("fee", help="Transaction fee in beddows")
    _add_source_flags(create_parser)
    create_parser.add_argument("--nonce", default=None, help="Nonce of the transaction")
    create_parser.add_argument(
        "--asset", default=None, help="Asset as a JSON object; prompts when omitted"
    )
    create_parser.add_argument(
        "--sender-public-key",
        default=None,
        help="Hex public key of the sender (required with --no-signature)",
    )
    create_parser.add_argument(
        "--no-signature",
        action="store_true",
        help="Leave the transaction unsigned",
    )
    create_parser.add_argument(
        "--passphrase", default=None, help="Sender passphrase; prompts when omitted"
    )
    create_parser.add_argument(
        "--json", action="store_true", help="Print the decoded fields instead of hex"
    )

    sign_parser = subparsers.add_parser("sign", help="sign an unsigned hex transaction")
    sign_parser.add_argument("transaction", help="Hex encoded transaction")
    _add_source_flags(sign_parser)
    sign_parser.add_argument(
        "--passphrase", default=None, help="Sender passphrase; prompts when omitted"
    )
    sign_parser.add_argument(
        "--json", action="store_true", help="Print the decoded fields instead of hex"
    )

    decode_parser = subparsers.add_parser("decode", help="decode a hex transaction")
    decode_parser.add_argument("transaction", help="Hex encoded transaction")
    decode_parser.add_argument(
        "--offline",
        action="store_true",
        help="Use the embedded schemas and never contact a node",
    )
    decode_parser.add_argument(
        "--data-path",
        default=None,
        help="Node data directory holding config/rpc.yaml (online only)",
    )
    return parser


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, separators=COMPACT_JSON_SEPARATORS))


def _source_from_args(args: argparse.Namespace) -> TransactionSource:
    if args.offline:
        if args.data_path:
            raise DataPathNotAllowedOfflineError()
        return OfflineSource()
    return NodeSource(NodeRPCClient.from_data_path(args.data_path))


def cmd_create(args: argparse.Namespace) -> None:
    options = CreateOptions(
        module_id=args.module_id,
        asset_id=args.asset_id,
        fee=args.fee,
        offline=args.offline,
        network_identifier=args.network_identifier,
        nonce=args.nonce,
        asset=args.asset,
        sender_public_key=args.sender_public_key,
        no_signature=args.no_signature,
        passphrase=args.passphrase,
        data_path=args.data_path,
        json_output=args.json,
    )
    _print_json(create_transaction(options))


def cmd_sign(args: argparse.Namespace) -> None:
    if args.offline and not args.network_identifier:
        raise MissingNetworkIdentifierError()
    source = _source_from_args(args)
    passphrase = args.passphrase or prompt_passphrase()
    transaction = sign_transaction_hex(
        source,
        args.transaction,
        passphrase,
        network_identifier=args.network_identifier,
    )
    _print_json(transaction.render(args.json))


def cmd_decode(args: argparse.Namespace) -> None:
    source = _source_from_args(args)
    transaction = load_transaction(source.registry(), args.transaction)
    _print_json(transaction.to_json())


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.getLogger("lisk_txkit").setLevel(logging.DEBUG)
    try:
        if args.command == "create":
            cmd_create(args)
        elif args.command == "sign":
            cmd_sign(args)
        elif args.command == "decode":
            cmd_decode(args)
        else:  # pragma: no cover - argparse enforces choices
            parser.error(f"Unknown command: {args.command}")
    except KeyboardInterrupt:  # pragma: no cover - interactive use
        logger.info("Interrupted by user")
        parser.exit(130)
    except (
        AssetInputError,
        CodecError,
        ConfigurationError,
        FlagError,
        NodeUnreachableError,
        PromptError,
        RPCError,
        SchemaError,
        SigningError,
        SourceUnavailableError,
        UnknownAssetError,
    ) as exc:
        parser.exit(1, f"error: {exc}\n")


if __name__ == "__main__":
    main(sys.argv[1:])
