"""
Dwolla Client Implementation

Provides typed operations over the Dwolla customers API: token refresh,
customer listing and creation, and the business classification directory.
"""

import logging
from datetime import date

import httpx

from ..core.models import (
    BusinessClassification,
    Customer,
    CustomerStatus,
    HttpError,
)
from ..core.request_builder import (
    DEFAULT_LIMIT,
    RequestDescriptor,
    base_url_for,
    build_business_classifications_request,
    build_create_customer_request,
    build_list_customers_request,
    is_success,
    receive_only_body,
    send_request,
    unverified_body,
    verified_business_body,
    verified_personal_body,
)
from ..core.response_mapper import (
    decode_business_classifications,
    decode_customers,
)
from ..core.token_manager import Token, TokenManager

logger = logging.getLogger(__name__)


class DwollaClient:
    """
    Client for the Dwolla customers API.

    Features:
    - Sandbox/production selection by a single flag
    - Bearer token supplied by a caller-owned TokenManager
    - HAL+JSON responses mapped into Customer / BusinessClassification records

    No call refreshes the token implicitly and nothing is retried.
    """

    def __init__(
        self,
        token_manager: TokenManager,
        sandbox: bool = True,
        http_client: httpx.Client | None = None,
        timeout_seconds: float = 10.0,
    ):
        """
        Initialize the Dwolla client.

        Args:
            token_manager: Holder of the client credentials and bearer token
            sandbox: Use the sandbox API instead of production
            http_client: Optional httpx client (created if None)
            timeout_seconds: Request timeout in seconds
        """
        self.token_manager = token_manager
        self.sandbox = sandbox
        self.timeout_seconds = timeout_seconds

        # Track if we own the HTTP client (for cleanup)
        self._owns_client = http_client is None

        if http_client is None:
            self.http_client = httpx.Client(timeout=timeout_seconds)
        else:
            self.http_client = http_client

    @property
    def base_url(self) -> str:
        return base_url_for(self.sandbox)

    def close(self) -> None:
        """Close the HTTP client if we created it."""
        if self._owns_client and self.http_client:
            self.http_client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _fetch(self, request: RequestDescriptor) -> str:
        """
        Send a request whose failure must be surfaced.

        Returns:
            Response body text

        Raises:
            HttpError: On non-2xx response
            TransportError: On network failure
        """
        response = send_request(self.http_client, request)

        if not is_success(response):
            raise HttpError(
                f"{request.method} {request.url} failed: "
                f"{response.status_code} {response.reason_phrase}\n{response.text}",
                status_code=response.status_code,
                reason=response.reason_phrase,
                body=response.text,
            )

        return response.text

    def _create(self, body: dict) -> bool:
        request = build_create_customer_request(
            self.base_url, self.token_manager.bearer(), body
        )
        response = send_request(self.http_client, request)

        if is_success(response):
            logger.debug(f"Created {body.get('type', 'unverified')} customer")
            return True

        logger.warning(
            f"Customer creation failed: {response.status_code} "
            f"{response.reason_phrase}: {response.text}"
        )
        return False

    # ===== AUTH =====

    def refresh_token(self) -> Token:
        """
        Obtain a new access token for the configured credentials.

        Raises:
            AuthenticationError: If the credentials are rejected
            MalformedResponseError: If the token response is incomplete
        """
        return self.token_manager.refresh(self.http_client, self.base_url)

    # ===== CUSTOMERS =====

    def list_customers(
        self,
        offset: int = 0,
        limit: int = DEFAULT_LIMIT,
        search: str = "",
        status: CustomerStatus | None = None,
    ) -> list[Customer]:
        """
        List one page of customers, sorted by creation date.

        Args:
            offset: How many results to skip
            limit: How many results to return (capped at 200)
            search: Fuzzy search across names and email; ignored when empty
            status: Only return customers with this status

        Returns:
            List of Customer records in server order

        Raises:
            HttpError: On non-2xx response
            DecodeError: If the body cannot be decoded
        """
        request = build_list_customers_request(
            self.base_url,
            self.token_manager.bearer(),
            offset=offset,
            limit=limit,
            search=search,
            status=status,
        )
        customers = decode_customers(self._fetch(request))
        logger.info(f"Listed {len(customers)} customers")
        return customers

    def create_receive_only_user(self, first_name: str, last_name: str, email: str) -> bool:
        """Create a receive-only user. Returns True on a 2xx response."""
        return self._create(receive_only_body(first_name, last_name, email))

    def create_unverified_customer(self, first_name: str, last_name: str, email: str) -> bool:
        """Create an unverified customer. Returns True on a 2xx response."""
        return self._create(unverified_body(first_name, last_name, email))

    def create_verified_personal_customer(
        self,
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
    ) -> bool:
        """
        Create a verified personal customer.

        Args:
            state: Two-letter state abbreviation
            ssn: Last four (or all nine) digits of the SSN
            date_of_birth: Sent as YYYY-MM-DD

        Returns:
            True on a 2xx response, False otherwise
        """
        return self._create(verified_personal_body(
            first_name, last_name, email, address1, address2,
            city, state, postal_code, ssn, date_of_birth,
        ))

    def create_verified_sole_prop_customer(
        self,
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
    ) -> bool:
        """Create a verified sole proprietorship. Returns True on a 2xx response."""
        return self._create(verified_business_body(
            first_name, last_name, email, address1, address2,
            city, state, postal_code, ssn, date_of_birth,
            business_classification, business_name, ein,
        ))

    def create_verified_business_customer_with_controller(
        self,
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
    ) -> bool:
        """
        Create a verified business customer with a controller.

        The request body is the same as create_verified_sole_prop_customer's.
        """
        return self._create(verified_business_body(
            first_name, last_name, email, address1, address2,
            city, state, postal_code, ssn, date_of_birth,
            business_classification, business_name, ein,
        ))

    # ===== BUSINESS CLASSIFICATIONS =====

    def list_business_classifications(self) -> list[BusinessClassification]:
        """
        List the business classification directory.

        Raises:
            HttpError: On non-2xx response
            DecodeError: If the body cannot be decoded
        """
        request = build_business_classifications_request(
            self.base_url, self.token_manager.bearer()
        )
        return decode_business_classifications(self._fetch(request))
