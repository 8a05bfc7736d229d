"""Remote index server client."""

from hcenav.client.http import HceClient

__all__ = ["HceClient"]
