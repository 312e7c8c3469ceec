"""JSON-RPC client for querying a running node.

Only the three read actions needed to assemble a transaction are wrapped:
the full schema set, an account's encoded state and the node info carrying
the network identifier.  Connection settings come from
:func:`lisk_txkit.config.load_node_config`.  The client never retries; any
transport failure surfaces as :class:`NodeUnreachableError`.
"""

from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from typing import Any, Dict, Optional

import requests
from requests import RequestException, Response

from .config import NodeConfig, load_node_config

logger = logging.getLogger(__name__)


class RPCError(RuntimeError):
    """Raised when the node responds with a JSON-RPC error."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(f"RPC error {code}: {message}")
        self.code = code
        self.message = message


class NodeUnreachableError(RuntimeError):
    """Raised when the node is unreachable or returns malformed data."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NodeRPCClient:
    """Thin JSON-RPC client; each helper maps to one node action."""

    def __init__(self, config: NodeConfig) -> None:
        self.config = config
        self._session = requests.Session()

    @classmethod
    def from_data_path(cls, data_path: str | Path | None = None) -> "NodeRPCClient":
        """Instantiate a client using the environment or the node's config file."""

        return cls(load_node_config(data_path=data_path))

    def call(self, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Perform a JSON-RPC request."""

        payload = {
            "jsonrpc": "2.0",
            "id": str(uuid.uuid4()),
            "method": method,
            "params": params or {},
        }
        logger.debug("RPC call %s params=%s", method, params)
        try:
            response = self._session.post(
                self.config.base_url,
                data=json.dumps(payload),
                headers={"content-type": "application/json"},
                timeout=self.config.timeout,
            )
        except RequestException as exc:
            logger.error(
                "RPC connection failed: %s",
                exc,
                exc_info=logger.isEnabledFor(logging.DEBUG),
            )
            raise NodeUnreachableError(
                f"Could not reach the node at {self.config.base_url}. Ensure the application is "
                "running, or use --offline with --network-identifier and --nonce."
            ) from exc
        self._raise_for_status(response)
        try:
            result = response.json()
        except ValueError as exc:
            logger.debug("RPC JSON parse error: %s", response.text, exc_info=True)
            raise NodeUnreachableError("Node returned malformed JSON") from exc
        if not isinstance(result, dict):
            raise NodeUnreachableError("Node returned an unexpected JSON-RPC envelope")
        if result.get("error"):
            error = result["error"]
            raise RPCError(error.get("code", -1), error.get("message", "unknown"))
        return result.get("result")

    def _raise_for_status(self, response: Response) -> None:
        if response.ok:
            return
        # JSON-RPC errors may come back as HTTP 500 with a structured body.
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            error = body["error"]
            raise RPCError(error.get("code", -1), error.get("message", "unknown"))
        logger.error("RPC HTTP error %s from %s", response.status_code, response.url)
        raise NodeUnreachableError(
            f"Node returned HTTP {response.status_code}; check the RPC endpoint settings.",
            status_code=response.status_code,
        )

    # Node actions ---------------------------------------------------------

    def get_schema(self) -> Dict[str, Any]:
        """Return ``{"transaction", "account", "transactionsAssets"}`` schemas."""

        return self.call("app:getSchema")

    def get_node_info(self) -> Dict[str, Any]:
        return self.call("app:getNodeInfo")

    def get_account(self, address: bytes) -> str:
        """Return the hex-encoded account state for ``address``."""

        return self.call("app:getAccount", {"address": address.hex()})
