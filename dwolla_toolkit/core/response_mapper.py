"""Mapping of HAL+JSON response bodies into typed records."""

import json
import logging
import re
from datetime import datetime
from typing import Any

from .models import (
    BusinessClassification,
    Customer,
    DecodeError,
    MalformedResponseError,
    customer_status_from_wire,
    customer_type_from_wire,
)

logger = logging.getLogger(__name__)

# Fractional seconds, followed by an optional UTC offset at the end
_FRACTION = re.compile(r"\.(\d+)(?=[+-]\d\d:\d\d$|$)")


def decode_json(body: str | bytes | None) -> Any:
    """
    Parse a raw response body as JSON.

    Raises:
        DecodeError: If the body is empty or not valid JSON
    """
    if body is None:
        raise DecodeError("API returned an empty response body")
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Response body is not valid UTF-8: {e}") from e
    if not body.strip():
        raise DecodeError("API returned an empty response body")

    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid JSON in API response: {e}") from e


def embedded_items(payload: Any, resource: str) -> list[Any]:
    """
    Return the list stored under _embedded[resource].

    Raises:
        DecodeError: If the envelope does not contain that collection
    """
    if not isinstance(payload, dict):
        raise DecodeError("Expected a JSON object at the top level")

    embedded = payload.get("_embedded")
    if not isinstance(embedded, dict):
        raise DecodeError("Response has no '_embedded' object")

    items = embedded.get(resource)
    if not isinstance(items, list):
        raise DecodeError(f"Response has no '_embedded.{resource}' list")

    return items


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp; a trailing 'Z' means UTC."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeError(f"Invalid timestamp: {value!r}")

    text = value
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # fromisoformat before 3.11 only takes 3 or 6 fraction digits
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text)

    try:
        return datetime.fromisoformat(text)
    except ValueError as e:
        raise DecodeError(f"Invalid timestamp: {value!r}") from e


def decode_customer(item: Any) -> Customer:
    """Build a Customer from one embedded element."""
    if not isinstance(item, dict):
        raise DecodeError(f"Expected a customer object, got {type(item).__name__}")

    return Customer(
        id=item.get("id"),
        first_name=item.get("firstName"),
        last_name=item.get("lastName"),
        email=item.get("email"),
        type=customer_type_from_wire(item.get("type")),
        status=customer_status_from_wire(item.get("status")),
        created=parse_timestamp(item.get("created")),
    )


def decode_customers(body: str | bytes | None) -> list[Customer]:
    """Decode a customer list page, preserving server order."""
    items = embedded_items(decode_json(body), "customers")
    customers = [decode_customer(item) for item in items]
    logger.debug(f"Decoded {len(customers)} customers")
    return customers


def decode_business_classification(item: Any) -> BusinessClassification:
    if not isinstance(item, dict):
        raise DecodeError(
            f"Expected a business classification object, got {type(item).__name__}"
        )
    return BusinessClassification(id=item.get("id"), name=item.get("name"))


def decode_business_classifications(body: str | bytes | None) -> list[BusinessClassification]:
    """Decode the business classification directory."""
    items = embedded_items(decode_json(body), "business-classifications")
    return [decode_business_classification(item) for item in items]


def decode_token(body: str | bytes | None) -> tuple[str, int]:
    """
    Decode a token endpoint body.

    Returns:
        Tuple of (access_token, expires_in seconds)

    Raises:
        MalformedResponseError: If the body is not JSON or a field is missing
    """
    try:
        payload = decode_json(body)
    except DecodeError as e:
        raise MalformedResponseError(f"Invalid token response: {e}") from e

    if not isinstance(payload, dict):
        raise MalformedResponseError("Token response is not a JSON object")

    access_token = payload.get("access_token")
    if not isinstance(access_token, str) or not access_token:
        raise MalformedResponseError("Token response is missing 'access_token'")

    if "expires_in" not in payload or payload["expires_in"] is None:
        raise MalformedResponseError("Token response is missing 'expires_in'")

    expires_in = payload["expires_in"]
    # bool is an int subclass; reject it explicitly
    if isinstance(expires_in, bool):
        raise MalformedResponseError(f"Token response has invalid 'expires_in': {expires_in!r}")
    if isinstance(expires_in, str):
        if not expires_in.strip().isdigit():
            raise MalformedResponseError(f"Token response has invalid 'expires_in': {expires_in!r}")
        expires_in = int(expires_in)
    elif not isinstance(expires_in, (int, float)):
        raise MalformedResponseError(f"Token response has invalid 'expires_in': {expires_in!r}")

    return access_token, int(expires_in)
