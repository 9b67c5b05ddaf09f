"""Item catalog cache and trading-post price comparison for the Guild Wars 2 API."""

from .config import ApiConfig, ConfigurationError, DumpConfig, PriceConfig, load_api_config
from .dump import FetchCoordinator, dump_items
from .io import FetchError, Gw2Api
from .prices import compare_skin_prices

__all__ = [
    "ApiConfig",
    "ConfigurationError",
    "DumpConfig",
    "PriceConfig",
    "load_api_config",
    "FetchCoordinator",
    "dump_items",
    "FetchError",
    "Gw2Api",
    "compare_skin_prices",
]

__version__ = "0.1.0"
