"""Core data models for the Dwolla toolkit."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class CustomerType(Enum):
    """Customer tier as reported by the API."""
    UNKNOWN = "unknown"
    UNVERIFIED = "unverified"
    RECEIVE_ONLY = "receive-only"
    PERSONAL = "personal"
    SOLE_PROP = "soleProp"
    BUSINESS = "business"
    BUSINESS_WITH_CONTROLLER = "business-with-controller"
    BUSINESS_WITH_INTERNATIONAL_CONTROLLER = "business-with-international-controller"


class CustomerStatus(Enum):
    """Verification status of a customer."""
    UNKNOWN = "unknown"
    UNVERIFIED = "unverified"
    RETRY = "retry"
    DOCUMENT = "document"
    VERIFIED = "verified"
    SUSPENDED = "suspended"
    DEACTIVATED = "deactivated"


# Wire string <-> enum tables. UNKNOWN is never sent and never matched.
CUSTOMER_TYPES: dict[str, CustomerType] = {
    member.value: member for member in CustomerType if member is not CustomerType.UNKNOWN
}
CUSTOMER_STATUSES: dict[str, CustomerStatus] = {
    member.value: member for member in CustomerStatus if member is not CustomerStatus.UNKNOWN
}


def customer_type_from_wire(value: Any) -> CustomerType:
    """Resolve a wire string to a CustomerType, falling back to UNKNOWN."""
    if not isinstance(value, str):
        return CustomerType.UNKNOWN
    return CUSTOMER_TYPES.get(value, CustomerType.UNKNOWN)


def customer_status_from_wire(value: Any) -> CustomerStatus:
    """Resolve a wire string to a CustomerStatus, falling back to UNKNOWN."""
    if not isinstance(value, str):
        return CustomerStatus.UNKNOWN
    return CUSTOMER_STATUSES.get(value, CustomerStatus.UNKNOWN)


@dataclass(frozen=True)
class Customer:
    """Snapshot of a customer resource."""
    id: str | None
    first_name: str | None
    last_name: str | None
    email: str | None
    type: CustomerType
    status: CustomerStatus
    created: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert Customer to a dictionary."""
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "type": self.type.value,
            "status": self.status.value,
            "created": self.created.isoformat() if self.created else None,
        }


@dataclass(frozen=True)
class BusinessClassification:
    """Industry classification required when creating business customers."""
    id: str | None
    name: str | None


@dataclass
class ClientSettings:
    """Persisted client settings. Secrets are never stored here."""
    client_id: str = ""
    sandbox: bool = True
    timeout_seconds: float = 10.0

    def to_dict(self) -> dict[str, Any]:
        """Convert ClientSettings to a dictionary."""
        return {
            "client_id": self.client_id,
            "sandbox": self.sandbox,
            "timeout_seconds": self.timeout_seconds,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ClientSettings":
        """Create ClientSettings from a dictionary."""
        return cls(
            client_id=data.get("client_id", ""),
            sandbox=bool(data.get("sandbox", True)),
            timeout_seconds=float(data.get("timeout_seconds", 10.0)),
        )


class DwollaError(Exception):
    """Base class for all toolkit errors."""
    pass


class TransportError(DwollaError):
    """Raised when the request never produced an HTTP response."""
    pass


class HttpError(DwollaError):
    """Raised when the API answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        reason: str | None = None,
        body: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.body = body


class AuthenticationError(HttpError):
    """Raised when the token endpoint rejects the client credentials."""
    pass


class DecodeError(DwollaError):
    """Raised when a response body is empty or not the expected JSON."""
    pass


class MalformedResponseError(DecodeError):
    """Raised when the token response lacks access_token or expires_in."""
    pass


class TokenNotAvailableError(DwollaError):
    """Raised when an operation needs a bearer token before any refresh."""
    pass


class ConfigError(DwollaError):
    """Raised when there is an error loading or saving configuration."""
    pass
