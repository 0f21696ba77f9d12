"""
Account metadata client.

Fetches the account id and dashboard display name for an API key. Used by the
login flows to label a freshly stored profile and to confirm the key works.

Usage:
    with AccountClient("https://api.stripe.com") as client:
        account = client.get_account(api_key)
        print(account.display_name)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class AccountClientError(Exception):
    """Raised when account metadata can't be fetched."""

    pass


@dataclass
class Account:
    """Account metadata returned by the remote service."""

    id: str
    display_name: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Account:
        """Create from the ``/v1/account`` response body."""
        settings = data.get("settings") or {}
        dashboard = settings.get("dashboard") or {}
        return cls(
            id=data.get("id", ""),
            display_name=dashboard.get("display_name") or "",
        )


class AccountClient:
    """
    HTTP client for the account endpoint.

    Authenticates each request with the key under test rather than a client
    wide credential, so one client can check several keys.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: API base URL (e.g., 'https://api.stripe.com')
            timeout: Request timeout in seconds
            transport: Optional httpx transport, for tests
        """
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"User-Agent": "stripe-profiles/0.1"},
                transport=self._transport,
            )
        return self._client

    def get_account(self, api_key: str) -> Account:
        """
        Fetch the account that owns a key.

        Raises:
            AccountClientError: On connection failures or non-2xx responses
        """
        try:
            response = self._get_client().get(
                "/v1/account",
                headers={"Authorization": f"Bearer {api_key}"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise AccountClientError(
                f"Account lookup failed with status {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise AccountClientError(f"Failed to connect to {self.base_url}: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise AccountClientError(f"Account lookup returned invalid JSON: {e}") from e

        return Account.from_dict(data)

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self) -> AccountClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
