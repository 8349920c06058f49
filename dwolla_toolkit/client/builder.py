"""
Builder module for creating configured Dwolla clients.

This module provides the generate_client function that combines saved
settings and environment credentials into a ready DwollaClient.
"""

import httpx

from ..core.config_store import load_credentials, load_settings_or_default, sandbox_from_env
from ..core.token_manager import TokenManager
from .dwolla_client import DwollaClient


def generate_client(
    sandbox: bool | None = None,
    http_client: httpx.Client | None = None,
) -> DwollaClient:
    """
    Create a DwollaClient from settings and environment.

    Args:
        sandbox: Force sandbox (True) or production (False); when None the
                 DWOLLA_SANDBOX variable and then the saved settings decide
        http_client: Optional httpx client to use instead of a new one

    Returns:
        Configured DwollaClient. The token is not fetched yet.

    Raises:
        ConfigError: If the client id or secret is missing

    Example:
        >>> with generate_client() as client:
        ...     client.refresh_token()
        ...     customers = client.list_customers(limit=10)
    """
    settings = load_settings_or_default()
    client_id, client_secret = load_credentials(settings)

    if sandbox is None:
        sandbox = sandbox_from_env(settings.sandbox)

    return DwollaClient(
        token_manager=TokenManager.from_client_credentials(client_id, client_secret),
        sandbox=sandbox,
        http_client=http_client,
        timeout_seconds=settings.timeout_seconds,
    )
