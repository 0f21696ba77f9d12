"""API key format validation."""

from .models import CredentialValidationError

MIN_KEY_LENGTH = 12
SUPPORTED_KEY_PREFIXES = ("sk", "rk")


def validate_api_key(api_key: str) -> None:
    """
    Check that a key looks like a secret or restricted key.

    Raises:
        CredentialValidationError: If the key is malformed. The message
            describes the problem without echoing the key.
    """
    if not api_key:
        raise CredentialValidationError("you have not configured API keys yet")

    if len(api_key) < MIN_KEY_LENGTH:
        raise CredentialValidationError(
            f"API key is too short, must be at least {MIN_KEY_LENGTH} characters long"
        )

    parts = api_key.split("_")
    if len(parts) < 3:
        raise CredentialValidationError(
            "you are using a legacy-style API key which is unsupported; "
            "generate a new test mode API key"
        )

    if parts[0] not in SUPPORTED_KEY_PREFIXES:
        raise CredentialValidationError("only secret (sk_) or restricted (rk_) keys are supported")
