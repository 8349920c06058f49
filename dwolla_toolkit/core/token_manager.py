"""OAuth client-credentials token handling."""

import base64
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import httpx

from .models import AuthenticationError, TokenNotAvailableError
from .request_builder import build_token_request, is_success, send_request
from .response_mapper import decode_token

logger = logging.getLogger(__name__)


def encode_credentials(client_id: str, client_secret: str) -> str:
    """Return base64("client_id:client_secret") for Basic auth."""
    raw = f"{client_id}:{client_secret}".encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


@dataclass(frozen=True)
class Token:
    """An access token and its lifetime."""
    value: str
    expires_in: timedelta
    credentials: str
    obtained_at: datetime

    @property
    def expires_at(self) -> datetime:
        return self.obtained_at + self.expires_in

    def is_expired(self, now: datetime | None = None) -> bool:
        if now is None:
            now = datetime.now(timezone.utc)
        return now >= self.expires_at

    def __repr__(self) -> str:
        return f"Token(expires_at={self.expires_at.isoformat()})"


class TokenManager:
    """
    Holds the bearer token for one set of client credentials.

    The manager never refreshes on its own: callers refresh before the token
    expires (see Token.is_expired). The token request runs outside the lock;
    only the swap of the stored token is locked, so readers never wait on the
    network and see either the old or the new token.
    """

    def __init__(self, credentials: str):
        """
        Initialize the token manager.

        Args:
            credentials: Base64-encoded "client_id:client_secret"
        """
        self.credentials = credentials
        self._token: Token | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_client_credentials(cls, client_id: str, client_secret: str) -> "TokenManager":
        return cls(encode_credentials(client_id, client_secret))

    @property
    def token(self) -> Token | None:
        with self._lock:
            return self._token

    def bearer(self) -> str:
        """
        Return the current access token value.

        Raises:
            TokenNotAvailableError: If refresh() has not succeeded yet
        """
        with self._lock:
            if self._token is None:
                raise TokenNotAvailableError(
                    "No access token available. Call refresh_token() first."
                )
            return self._token.value

    def refresh(self, http_client: httpx.Client, base_url: str) -> Token:
        """
        Exchange the client credentials for a new access token.

        Args:
            http_client: Transport used for the token request
            base_url: API base URL

        Returns:
            The new Token, which also replaces the stored one

        Raises:
            AuthenticationError: If the token endpoint answers non-2xx
            MalformedResponseError: If the body lacks access_token/expires_in
            TransportError: If the request fails at the network level
        """
        request = build_token_request(base_url, self.credentials)
        response = send_request(http_client, request)

        if not is_success(response):
            raise AuthenticationError(
                f"Token request failed with status {response.status_code} "
                f"{response.reason_phrase}: {response.text}",
                status_code=response.status_code,
                reason=response.reason_phrase,
                body=response.text,
            )

        value, expires_in = decode_token(response.text)
        token = Token(
            value=value,
            expires_in=timedelta(seconds=expires_in),
            credentials=self.credentials,
            obtained_at=datetime.now(timezone.utc),
        )

        with self._lock:
            self._token = token
        logger.info(f"Obtained access token, expires in {expires_in}s")
        return token
