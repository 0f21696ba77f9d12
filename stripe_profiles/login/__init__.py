"""Login flows that produce and persist profile credentials."""

from .account import Account, AccountClient, AccountClientError
from .api_key_login import login_with_api_key, success_message

__all__ = [
    "Account",
    "AccountClient",
    "AccountClientError",
    "login_with_api_key",
    "success_message",
]
