"""Shared configuration loader for lisk-txkit."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping
from urllib.parse import urlparse

import yaml


class ConfigurationError(RuntimeError):
    """Raised when configuration is invalid."""


DEFAULT_CONFIG_PATH = Path.home() / ".lisk-txkit.yaml"
DATA_PATH_CONFIG = Path("config") / "rpc.yaml"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080


@dataclass
class NodeConfig:
    """Connection details for the node's JSON-RPC endpoint."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    use_https: bool = False
    timeout: float = 30.0

    @property
    def base_url(self) -> str:
        scheme = "https" if self.use_https else "http"
        return f"{scheme}://{self.host}:{self.port}/rpc"


def _load_config_file(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise ConfigurationError(f"Config file not found: {path}")
        return {}

    try:
        loaded = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:  # pragma: no cover - delegated to PyYAML
        raise ConfigurationError(f"Invalid YAML in config file {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigurationError(f"Expected {path} to contain a YAML object with an 'rpc' section")
    return loaded


def _coerce_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "y", "on"}:
            return True
        if normalized in {"0", "false", "no", "n", "off"}:
            return False
    return None


def _coerce_number(raw: Any, *, source: str, cast: type = int) -> Any:
    if raw is None:
        return None
    try:
        return cast(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid value in {source}: {raw}") from exc


def _first_value(*values: Any, default: Any = None) -> Any:
    for value in values:
        if value is not None:
            return value
    return default


def _parse_endpoint(raw: str | None) -> tuple[str | None, int | None, bool | None]:
    if not raw:
        return None, None, None
    parsed = urlparse(raw)
    if not parsed.scheme or not parsed.hostname:
        raise ConfigurationError(f"Invalid RPC endpoint URL: {raw}")
    use_https = parsed.scheme.lower() == "https"
    return parsed.hostname, parsed.port, use_https


def config_path_for(data_path: str | Path | None) -> tuple[Path, bool]:
    """Return the config file to read and whether it must exist."""

    if data_path is not None:
        return Path(data_path).expanduser() / DATA_PATH_CONFIG, True
    return DEFAULT_CONFIG_PATH, False


def load_node_config(
    *,
    data_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> NodeConfig:
    """Load node connection settings from overrides, environment and YAML.

    Precedence is overrides, then ``LISK_RPC_*`` environment variables, then
    the ``rpc`` section of the config file. When ``data_path`` names a node
    data directory its ``config/rpc.yaml`` must exist.
    """

    env_map = os.environ if env is None else env
    path, required = config_path_for(data_path)

    file_config = _load_config_file(path, required=required)
    rpc_section = file_config.get("rpc", {})
    if not isinstance(rpc_section, dict):
        raise ConfigurationError(f"Expected 'rpc' to be a mapping in {path}")

    override_map = dict(overrides or {})

    endpoint_host, endpoint_port, endpoint_use_https = _parse_endpoint(
        _first_value(
            override_map.get("endpoint"),
            env_map.get("LISK_RPC_ENDPOINT"),
            rpc_section.get("endpoint"),
        )
    )

    resolved_host = _first_value(
        override_map.get("host"),
        endpoint_host,
        env_map.get("LISK_RPC_HOST"),
        rpc_section.get("host"),
        default=DEFAULT_HOST,
    )
    resolved_port = _first_value(
        _coerce_number(override_map.get("port"), source="overrides"),
        endpoint_port,
        _coerce_number(env_map.get("LISK_RPC_PORT"), source="environment"),
        _coerce_number(rpc_section.get("port"), source=f"{path} rpc.port"),
        default=DEFAULT_PORT,
    )
    resolved_use_https = _first_value(
        _coerce_bool(override_map.get("use_https")),
        endpoint_use_https,
        _coerce_bool(env_map.get("LISK_RPC_USE_HTTPS")),
        _coerce_bool(rpc_section.get("use_https")),
        default=False,
    )
    resolved_timeout = _first_value(
        _coerce_number(override_map.get("timeout"), source="overrides", cast=float),
        _coerce_number(env_map.get("LISK_RPC_TIMEOUT"), source="environment", cast=float),
        _coerce_number(rpc_section.get("timeout"), source=f"{path} rpc.timeout", cast=float),
        default=30.0,
    )

    return NodeConfig(
        host=resolved_host,
        port=resolved_port,
        use_https=bool(resolved_use_https),
        timeout=resolved_timeout,
    )
