"""Data sources behind offline and online transaction assembly.

The assembler talks to one :class:`TransactionSource`, chosen once from the
``--offline`` flag.  :class:`OfflineSource` serves the embedded schema set and
a caller-supplied network identifier; :class:`NodeSource` asks a running node
and caches what it learns for the rest of the invocation.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Protocol

from .codec import decode
from .registry import SchemaRegistry
from .rpc_client import NodeRPCClient, NodeUnreachableError
from .transform import InvalidHexError, hex_to_bytes
from .model import NETWORK_IDENTIFIER_LENGTH

logger = logging.getLogger(__name__)


class SourceUnavailableError(RuntimeError):
    """Raised when a source cannot provide the requested value."""


class TransactionSource(Protocol):
    """What the assembler needs from wherever chain data comes from."""

    def registry(self) -> SchemaRegistry:
        """Return the schema registry for this invocation."""

    def account_nonce(self, address: bytes) -> int:
        """Return the next nonce for ``address``."""

    def network_identifier(self) -> bytes:
        """Return the 32-byte network identifier."""


class OfflineSource:
    """Static schemas and flag-supplied values; never performs I/O."""

    def __init__(self, network_identifier: bytes | None = None) -> None:
        self._network_identifier = network_identifier
        self._registry: SchemaRegistry | None = None

    def registry(self) -> SchemaRegistry:
        if self._registry is None:
            self._registry = SchemaRegistry.from_static()
        return self._registry

    def account_nonce(self, address: bytes) -> int:
        raise SourceUnavailableError("Account state is not available offline; pass --nonce")

    def network_identifier(self) -> bytes:
        if self._network_identifier is None:
            raise SourceUnavailableError(
                "Network identifier is not available offline; pass --network-identifier"
            )
        return self._network_identifier


class NodeSource:
    """Reads schemas, account state and node info from a running node."""

    def __init__(self, client: NodeRPCClient) -> None:
        self.client = client
        self._registry: SchemaRegistry | None = None
        self._node_info: Dict[str, Any] | None = None

    def registry(self) -> SchemaRegistry:
        if self._registry is None:
            logger.debug("Fetching schema set from node")
            self._registry = SchemaRegistry(self.client.get_schema())
        return self._registry

    def account_nonce(self, address: bytes) -> int:
        account_schema = self.registry().account_schema
        encoded = self.client.get_account(address)
        try:
            account = decode(account_schema, hex_to_bytes(encoded, "account"))
        except InvalidHexError as exc:
            raise NodeUnreachableError("Node returned a malformed account") from exc
        sequence = account.get("sequence")
        if not isinstance(sequence, dict) or "nonce" not in sequence:
            raise SourceUnavailableError("Node account schema does not define sequence.nonce")
        nonce = sequence["nonce"]
        logger.debug("Account %s has nonce %s", address.hex(), nonce)
        return nonce

    def network_identifier(self) -> bytes:
        if self._node_info is None:
            self._node_info = self.client.get_node_info()
        raw = self._node_info.get("networkIdentifier") if isinstance(self._node_info, dict) else None
        try:
            return hex_to_bytes(raw, "networkIdentifier", length=NETWORK_IDENTIFIER_LENGTH)
        except InvalidHexError as exc:
            raise NodeUnreachableError(f"Node returned an invalid network identifier: {exc}") from exc
