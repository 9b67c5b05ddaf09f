# gw2_market/config.py
"""Configuration for API access, item dumps, and price comparisons."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Tuple
from urllib.parse import urlparse

from dotenv import load_dotenv

__all__ = [
    "ConfigurationError",
    "ApiConfig",
    "DumpConfig",
    "PriceConfig",
    "load_api_config",
    "BASE_ENV_VAR",
    "TOKEN_ENV_VAR",
    "MAX_IDS_PER_REQUEST",
    "PRICE_SORT_KEYS",
]

BASE_ENV_VAR = "GW2_API_BASE"
TOKEN_ENV_VAR = "GW2_API_TOKEN"

# The API rejects id lists longer than this
MAX_IDS_PER_REQUEST = 200

PRICE_SORT_KEYS = ("normalized_sells_for", "normalized_buys_for", "sells_for", "buys_for")


class ConfigurationError(RuntimeError):
    """Raised when required settings are missing or invalid."""


@dataclass(frozen=True)
class ApiConfig:
    """Connection settings for the remote API."""

    base_url: str
    token: str

    def __repr__(self) -> str:
        return f"ApiConfig(base_url={self.base_url!r}, token='***')"


def load_api_config(
        env_file: Optional[str | Path] = None,
        environ: Optional[Mapping[str, str]] = None,
) -> ApiConfig:
    """
    Read the API base URL and access token.

    Values already present in the environment win over the ``.env`` file.

    Args:
        env_file: Optional path to a dotenv file (default: search for ``.env``)
        environ: Mapping to read from instead of ``os.environ``

    Returns:
        Validated ApiConfig

    Raises:
        ConfigurationError: If a setting is missing or the base URL is invalid
    """
    if environ is None:
        if env_file is not None and not Path(env_file).is_file():
            raise ConfigurationError(f"Env file not found: {env_file}")
        load_dotenv(dotenv_path=env_file, override=False)
        environ = os.environ

    base_url = (environ.get(BASE_ENV_VAR) or "").strip()
    token = (environ.get(TOKEN_ENV_VAR) or "").strip()

    missing = [name for name, value in ((BASE_ENV_VAR, base_url), (TOKEN_ENV_VAR, token)) if not value]
    if missing:
        raise ConfigurationError(f"Missing required setting(s): {', '.join(missing)}")

    parsed = urlparse(base_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(
            f"{BASE_ENV_VAR} must be an absolute http(s) URL, got {base_url!r}"
        )

    return ApiConfig(base_url=base_url.rstrip("/"), token=token)


@dataclass(frozen=True)
class DumpConfig:
    """Settings for the parallel item dump."""

    # Output
    output_dir: Path = Path("data")
    items_filename: str = "items.json"
    items_map_filename: str = "items.map.json"

    # Parallelism
    chunk_size: int = MAX_IDS_PER_REQUEST
    max_workers: int = 16
    use_threads: bool = False

    # Polling and progress
    poll_interval_s: float = 0.01
    eta_interval_s: float = 1.0

    # Fetching
    strict: bool = False  # Raise on failed chunks instead of recording them empty
    backoff_s: float = 1.0
    request_timeout_s: float = 30.0

    # Shutdown
    join_timeout_s: float = 5.0

    def __post_init__(self) -> None:
        if not 0 < self.chunk_size <= MAX_IDS_PER_REQUEST:
            raise ValueError(
                f"chunk_size must be in 1..{MAX_IDS_PER_REQUEST}, got {self.chunk_size}"
            )
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")
        if self.poll_interval_s <= 0:
            raise ValueError(f"poll_interval_s must be positive, got {self.poll_interval_s}")
        if self.eta_interval_s < 0 or self.backoff_s < 0:
            raise ValueError("eta_interval_s and backoff_s must not be negative")
        if self.request_timeout_s <= 0 or self.join_timeout_s <= 0:
            raise ValueError("request_timeout_s and join_timeout_s must be positive")

    @property
    def items_path(self) -> Path:
        return Path(self.output_dir) / self.items_filename

    @property
    def items_map_path(self) -> Path:
        return Path(self.output_dir) / self.items_map_filename


DEFAULT_SETS: Tuple[str, ...] = (
    "Ice Reaver",
    "Dark Wing",
    "Draconic",
    "Seven Reapers",
    "Endless Ocean",
    "Bioluminescent",
    "Branded",
    "Defiant Glass",
)

DEFAULT_WEAPON_TYPES: Tuple[str, ...] = (
    "Axe",
    "Longbow",
    "Short Bow",
    "Dagger",
    "Focus",
    "Greatsword",
    "Hammer",
    "Mace",
    "Pistol",
    "Rifle",
    "Scepter",
    "Shield",
    "Staff",
    "Sword",
    "Torch",
    "Warhorn",
)

# Sets beyond the listed multipliers fall back to DEFAULT_MULTIPLIER
DEFAULT_SET_MULTIPLIERS: Tuple[int, ...] = (1, 2)
DEFAULT_MULTIPLIER = 3


@dataclass(frozen=True)
class PriceConfig:
    """Settings for the skin price comparison."""

    items_path: Path = Path("data") / "items.json"
    sets: Tuple[str, ...] = DEFAULT_SETS
    weapon_types: Tuple[str, ...] = DEFAULT_WEAPON_TYPES
    set_multipliers: Tuple[int, ...] = DEFAULT_SET_MULTIPLIERS
    default_multiplier: int = DEFAULT_MULTIPLIER
    sort_key: str = "normalized_sells_for"
    color: bool = True
    strict: bool = False
    backoff_s: float = 1.0
    request_timeout_s: float = 30.0

    def __post_init__(self) -> None:
        if self.sort_key not in PRICE_SORT_KEYS:
            raise ValueError(f"sort_key must be one of {PRICE_SORT_KEYS}, got {self.sort_key!r}")
        if self.default_multiplier <= 0 or any(m <= 0 for m in self.set_multipliers):
            raise ValueError("multipliers must be positive")
        if self.request_timeout_s <= 0 or self.backoff_s < 0:
            raise ValueError("request_timeout_s must be positive and backoff_s not negative")

    def multiplier_table(self) -> dict[str, int]:
        """Map each set name to its price multiplier."""
        return {
            name: (self.set_multipliers[i] if i < len(self.set_multipliers) else self.default_multiplier)
            for i, name in enumerate(self.sets)
        }
