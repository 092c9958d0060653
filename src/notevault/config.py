"""Runtime settings.

Each field is resolved in this order: explicit keyword argument, then a
``NOTEVAULT_*`` environment variable, then the ``[notevault]`` table of a TOML
config file, then the built-in default::

    [notevault]
    data_path = "data/db.json"
    backend   = "json"          # or "duckdb"
    host      = "0.0.0.0"
    port      = 3000
    log_level = "DEBUG"

The config file is taken from the ``config_file`` argument or the
``NOTEVAULT_CONFIG`` environment variable.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from notevault.errors import ValidationError
from notevault.storage.base import StorageBackend

BACKENDS = ("json", "duckdb")
_ENV_PREFIX = "NOTEVAULT_"


@dataclass
class Settings:
    data_path: Path = Path("db.json")
    backend: str = "json"
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.data_path = Path(self.data_path)
        self.backend = str(self.backend).lower()
        if self.backend not in BACKENDS:
            raise ValidationError(
                f"Unknown storage backend {self.backend!r}; expected one of {', '.join(BACKENDS)}.",
                field="backend",
            )
        try:
            self.port = int(self.port)
        except ValueError as exc:
            raise ValidationError(f"Port must be an integer, got {self.port!r}.", field="port") from exc
        self.log_level = str(self.log_level).upper()

    @classmethod
    def load(cls, config_file: Path | str | None = None, **overrides: Any) -> "Settings":
        """Build settings from *overrides*, the environment and a TOML file."""
        values: dict[str, Any] = {}

        path = config_file or os.getenv(f"{_ENV_PREFIX}CONFIG")
        if path:
            try:
                with open(path, "rb") as fh:
                    data = tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError) as exc:
                raise ValidationError(
                    f"Could not read config file {path}: {exc}", field="config_file"
                ) from exc
            values.update(data.get("notevault", data))

        for f in fields(cls):
            env_value = os.getenv(f"{_ENV_PREFIX}{f.name.upper()}")
            if env_value:
                values[f.name] = env_value

        values.update({k: v for k, v in overrides.items() if v is not None})
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in known})

    def build_backend(self) -> StorageBackend:
        if self.backend == "duckdb":
            from notevault.storage.duckdb_store import DuckDBBackend

            return DuckDBBackend(self.data_path)
        from notevault.storage.json_file import JsonFileBackend

        return JsonFileBackend(self.data_path)
