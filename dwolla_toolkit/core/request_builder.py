"""
Request construction for the Dwolla API.

Every operation is described by a RequestDescriptor before anything goes on
the wire, so URLs, headers and bodies can be inspected without a transport.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any
from urllib.parse import quote

import httpx

from .models import (
    BusinessClassification,
    CustomerStatus,
    CustomerType,
    TransportError,
)

logger = logging.getLogger(__name__)

SANDBOX_BASE_URL = "https://api-sandbox.dwolla.com"
PRODUCTION_BASE_URL = "https://api.dwolla.com"

HAL_JSON = "application/vnd.dwolla.v1.hal+json"

DEFAULT_LIMIT = 30
MAX_LIMIT = 200

BUSINESS_TYPE_SOLE_PROPRIETORSHIP = "soleProprietorship"


@dataclass
class RequestDescriptor:
    """A fully built HTTP request."""
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    json_body: dict[str, Any] | None = None
    form: dict[str, str] | None = None


def base_url_for(sandbox: bool) -> str:
    """Return the API base URL for the selected mode."""
    return SANDBOX_BASE_URL if sandbox else PRODUCTION_BASE_URL


def _join(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def api_headers(token: str) -> dict[str, str]:
    """Headers sent with every bearer-authenticated call."""
    return {
        "Accept": HAL_JSON,
        "Authorization": f"Bearer {token}",
    }


def build_token_request(base_url: str, credentials: str) -> RequestDescriptor:
    """
    Build the client-credentials token request.

    Args:
        base_url: API base URL
        credentials: Base64-encoded "client_id:client_secret"

    Returns:
        RequestDescriptor for POST {base}/token
    """
    return RequestDescriptor(
        method="POST",
        url=_join(base_url, "/token"),
        headers={"Authorization": f"Basic {credentials}"},
        form={"grant_type": "client_credentials"},
    )


def build_list_customers_query(
    offset: int = 0,
    limit: int = DEFAULT_LIMIT,
    search: str = "",
    status: CustomerStatus | None = None,
) -> str:
    """
    Build the query string for listing customers.

    offset and limit are always present; limit is capped at MAX_LIMIT.
    search is only added when non-empty, status only when it is a real
    status (None and UNKNOWN both mean "no filter").

    Raises:
        ValueError: If offset is negative or limit is below 1
    """
    if offset < 0:
        raise ValueError(f"offset must be >= 0, got {offset}")
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")

    limit = min(limit, MAX_LIMIT)

    parts = [f"offset={offset}", f"limit={limit}"]
    if search:
        parts.append(f"search={quote(search, safe='')}")
    if status is not None and status is not CustomerStatus.UNKNOWN:
        parts.append(f"status={status.value.lower()}")

    return "&".join(parts)


def build_list_customers_request(
    base_url: str,
    token: str,
    offset: int = 0,
    limit: int = DEFAULT_LIMIT,
    search: str = "",
    status: CustomerStatus | None = None,
) -> RequestDescriptor:
    """Build GET {base}/customers with paging and filters."""
    query = build_list_customers_query(offset, limit, search, status)
    return RequestDescriptor(
        method="GET",
        url=f"{_join(base_url, '/customers')}?{query}",
        headers=api_headers(token),
    )


def build_business_classifications_request(base_url: str, token: str) -> RequestDescriptor:
    """Build GET {base}/business-classifications."""
    return RequestDescriptor(
        method="GET",
        url=_join(base_url, "/business-classifications"),
        headers=api_headers(token),
    )


def build_create_customer_request(
    base_url: str,
    token: str,
    body: dict[str, Any],
) -> RequestDescriptor:
    """Build POST {base}/customers carrying one of the customer bodies below."""
    headers = api_headers(token)
    headers["Content-Type"] = HAL_JSON
    return RequestDescriptor(
        method="POST",
        url=_join(base_url, "/customers"),
        headers=headers,
        json_body=body,
    )


# ===== CUSTOMER BODIES =====

def receive_only_body(first_name: str, last_name: str, email: str) -> dict[str, Any]:
    return {
        "firstName": first_name,
        "lastName": last_name,
        "email": email,
        "type": CustomerType.RECEIVE_ONLY.value,
    }


def unverified_body(first_name: str, last_name: str, email: str) -> dict[str, Any]:
    # Unverified customers are the API default, so no type is sent.
    return {
        "firstName": first_name,
        "lastName": last_name,
        "email": email,
    }


def verified_personal_body(
    first_name: str,
    last_name: str,
    email: str,
    address1: str,
    address2: str,
    city: str,
    state: str,
    postal_code: str,
    ssn: str,
    date_of_birth: date,
) -> dict[str, Any]:
    return {
        "firstName": first_name,
        "lastName": last_name,
        "email": email,
        "type": CustomerType.PERSONAL.value,
        "address1": address1,
        "address2": address2,
        "city": city,
        "state": state,
        "postalCode": postal_code,
        "ssn": ssn,
        "dateOfBirth": date_of_birth.isoformat(),
    }


def _classification_id(classification: BusinessClassification | str) -> str | None:
    if isinstance(classification, BusinessClassification):
        return classification.id
    return classification


def verified_business_body(
    first_name: str,
    last_name: str,
    email: str,
    address1: str,
    address2: str,
    city: str,
    state: str,
    postal_code: str,
    ssn: str,
    date_of_birth: date,
    business_classification: BusinessClassification | str,
    business_name: str,
    ein: str,
) -> dict[str, Any]:
    """
    Body shared by the sole-proprietorship and business-with-controller variants.

    Both variants send type "business" with businessType "soleProprietorship";
    no controller block is sent.
    """
    body = verified_personal_body(
        first_name, last_name, email, address1, address2,
        city, state, postal_code, ssn, date_of_birth,
    )
    body["type"] = CustomerType.BUSINESS.value
    body["businessClassification"] = _classification_id(business_classification)
    body["businessName"] = business_name
    body["ein"] = ein
    body["businessType"] = BUSINESS_TYPE_SOLE_PROPRIETORSHIP
    return body


# ===== TRANSPORT =====

def send_request(http_client: httpx.Client, request: RequestDescriptor) -> httpx.Response:
    """
    Execute a RequestDescriptor on an httpx client.

    Raises:
        TransportError: If no HTTP response was received
    """
    kwargs: dict[str, Any] = {
        "method": request.method,
        "url": request.url,
        "headers": request.headers,
    }
    if request.json_body is not None:
        kwargs["content"] = json.dumps(request.json_body)
    if request.form is not None:
        kwargs["data"] = request.form

    logger.debug(f"{request.method} {request.url}")
    try:
        return http_client.request(**kwargs)
    except httpx.RequestError as e:
        raise TransportError(f"{request.method} {request.url} failed: {e}") from e


def is_success(response: httpx.Response) -> bool:
    return 200 <= response.status_code < 300
