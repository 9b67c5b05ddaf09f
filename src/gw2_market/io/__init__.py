from .api import FetchError, Gw2Api, items_endpoint, prices_endpoint

__all__ = ["FetchError", "Gw2Api", "items_endpoint", "prices_endpoint"]
