"""Load chain connection settings from TOML (e.g. docgraph.toml).

Config file is looked up in order:
  1. Path in DOCGRAPH_CONFIG env var (if set)
  2. docgraph.toml in the current working directory

Settings live in a ``[chain]`` table:

    [chain]
    endpoint = "https://test.telos.kitchen"
    contract = "docs.hypha"
    timeout = 10.0

DOCGRAPH_ENDPOINT and DOCGRAPH_CONTRACT env vars override the file. If no
file is found, built-in defaults are used.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_ENDPOINT = "http://127.0.0.1:8888"
DEFAULT_CONTRACT = "docs.hypha"
DEFAULT_TIMEOUT = 10.0


class ChainConfig(BaseModel):
    model_config = {"frozen": True}

    endpoint: str = Field(default=DEFAULT_ENDPOINT, description="Base URL of the nodeos HTTP API.")
    contract: str = Field(default=DEFAULT_CONTRACT, description="Account the document graph contract is deployed to.")
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="HTTP timeout in seconds.")


def _default_config_paths() -> list[Path]:
    """Return paths to check for docgraph.toml (first existing wins)."""
    paths: list[Path] = []
    if os.environ.get("DOCGRAPH_CONFIG"):
        paths.append(Path(os.environ["DOCGRAPH_CONFIG"]))
    paths.append(Path.cwd() / "docgraph.toml")
    return paths


def load_chain_config(paths: list[Path] | None = None) -> ChainConfig:
    """Load chain settings from the first config file found, then apply env overrides.

    A file that exists but cannot be parsed is skipped, like a missing one.
    """
    values: dict[str, Any] = {}
    for path in paths if paths is not None else _default_config_paths():
        if not path.is_file():
            continue
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, ValueError):
            continue
        chain = data.get("chain")
        if isinstance(chain, dict):
            values.update({k: chain[k] for k in ("endpoint", "contract", "timeout") if k in chain})
        break
    if os.environ.get("DOCGRAPH_ENDPOINT"):
        values["endpoint"] = os.environ["DOCGRAPH_ENDPOINT"]
    if os.environ.get("DOCGRAPH_CONTRACT"):
        values["contract"] = os.environ["DOCGRAPH_CONTRACT"]
    return ChainConfig(**values)
