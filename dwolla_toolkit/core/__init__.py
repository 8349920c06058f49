"""Core components for the Dwolla toolkit."""

from .models import (
    CustomerType,
    CustomerStatus,
    Customer,
    BusinessClassification,
    ClientSettings,
    DwollaError,
    TransportError,
    HttpError,
    AuthenticationError,
    DecodeError,
    MalformedResponseError,
    TokenNotAvailableError,
    ConfigError,
)
from .token_manager import Token, TokenManager, encode_credentials
from .request_builder import RequestDescriptor, base_url_for
from .config_store import (
    get_base_dir,
    save_settings,
    load_settings,
    load_settings_or_default,
    load_credentials,
)

__all__ = [
    "CustomerType",
    "CustomerStatus",
    "Customer",
    "BusinessClassification",
    "ClientSettings",
    "DwollaError",
    "TransportError",
    "HttpError",
    "AuthenticationError",
    "DecodeError",
    "MalformedResponseError",
    "TokenNotAvailableError",
    "ConfigError",
    "Token",
    "TokenManager",
    "encode_credentials",
    "RequestDescriptor",
    "base_url_for",
    "get_base_dir",
    "save_settings",
    "load_settings",
    "load_settings_or_default",
    "load_credentials",
]
