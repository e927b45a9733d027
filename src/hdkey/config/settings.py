"""Library settings loaded from environment variables and config files.

Configuration is loaded from (highest priority first):
1. Environment variables (prefix: ``HDKEY_``)
2. YAML config file (``config_path`` argument or ``HDKEY_CONFIG_PATH`` env var)
3. Defaults defined here

Only the convenience constructors of :class:`hdkey.keys.hd_key.HDKey` consult
these settings; derivation itself always works on explicit parameters.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hdkey.keys.curves import Algorithm
from hdkey.keys.versions import Network, VersionBytes, get_version

DEFAULT_MAX_EXTENDED_KEY_BYTES = 112


def _load_yaml(path: str | Path) -> dict[str, Any]:
    """Read settings from a YAML file.

    Values may sit at the top level or under an ``hdkey:`` section. A missing
    or empty file yields an empty dict.

    Raises:
        ValueError: If the document is not a mapping.
    """
    file = Path(path)
    if not file.is_file():
        return {}
    with file.open(encoding="utf-8") as stream:
        data = yaml.safe_load(stream) or {}
    if not isinstance(data, dict):
        msg = f"Config file {file} must contain a mapping"
        raise ValueError(msg)
    section = data.get("hdkey", data)
    return section if isinstance(section, dict) else {}


class HDKeySettings(BaseSettings):
    """Defaults for root construction and extended-key parsing."""

    model_config = SettingsConfigDict(
        env_prefix="HDKEY_",
        case_sensitive=False,
    )

    network: Network = Field(
        default=Network.BITCOIN_MAIN,
        description="Version profile used when no explicit version is passed",
    )
    algorithm: Algorithm = Field(
        default=Algorithm.SECP256K1,
        description="Algorithm used by HDKey.from_seed when none is passed",
    )
    max_extended_key_bytes: int = Field(
        default=DEFAULT_MAX_EXTENDED_KEY_BYTES,
        ge=82,
        description="Upper bound on the Base58-decoded size of an extended key",
    )
    config_path: str = ""

    @model_validator(mode="before")
    @classmethod
    def _merge_yaml(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Merge YAML config file contents under the env var overrides."""
        config_path = values.get("config_path")
        if not config_path:
            return values
        # Env vars and init kwargs are already in *values* and win over YAML.
        for key, val in _load_yaml(config_path).items():
            if values.get(key) is None:
                values[key] = val
        return values

    @property
    def version(self) -> VersionBytes:
        """Version bytes of the configured network profile."""
        return get_version(self.network)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Construct settings loading defaults from a YAML file.

        Environment variables still override YAML values.
        """
        return cls(config_path=str(path))
