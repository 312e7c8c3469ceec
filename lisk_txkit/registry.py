"""Lookup of transaction, account and asset schemas."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from .schema import SchemaDescriptor, SchemaError, parse_schema
from .static_schemas import static_schema_set

logger = logging.getLogger(__name__)


class UnknownAssetError(LookupError):
    """Raised when no asset schema is registered for a module/asset pair."""

    def __init__(self, module_id: int, asset_id: int) -> None:
        super().__init__(
            f"Transaction moduleID:{module_id} with assetID:{asset_id} is not registered in the application"
        )
        self.module_id = module_id
        self.asset_id = asset_id


class SchemaRegistry:
    """Parsed view over an ``app:getSchema`` style schema set.

    Every schema is parsed once at construction; lookups afterwards never
    touch the raw mappings again.
    """

    def __init__(self, schema_set: Mapping[str, Any]) -> None:
        try:
            self.transaction_schema = parse_schema(schema_set["transaction"])
            self.account_schema = parse_schema(schema_set["account"])
            assets = schema_set["transactionsAssets"]
        except KeyError as exc:
            raise SchemaError(f"Schema set is missing '{exc.args[0]}'") from exc

        self._assets: dict[tuple[int, int], SchemaDescriptor] = {}
        for entry in assets:
            key = (int(entry["moduleID"]), int(entry["assetID"]))
            if key in self._assets:
                raise SchemaError(f"Duplicate asset schema for moduleID:{key[0]} assetID:{key[1]}")
            self._assets[key] = parse_schema(entry["schema"])
        logger.debug("Loaded %d asset schemas", len(self._assets))

    @classmethod
    def from_static(cls) -> "SchemaRegistry":
        return cls(static_schema_set())

    def resolve(self, module_id: int, asset_id: int) -> SchemaDescriptor:
        try:
            return self._assets[(module_id, asset_id)]
        except KeyError:
            raise UnknownAssetError(module_id, asset_id) from None

    @property
    def asset_ids(self) -> list[tuple[int, int]]:
        return sorted(self._assets)
