"""
Client layer

Typed operations over the Dwolla API and a factory that builds a client
from saved settings.
"""

from .dwolla_client import DwollaClient
from .builder import generate_client

__all__ = [
    "DwollaClient",
    "generate_client",
]
