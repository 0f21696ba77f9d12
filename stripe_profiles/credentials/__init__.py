"""
Profile credentials: models, storage tiers, resolution and env ingestion.

Usage:
    from stripe_profiles.credentials import (
        CredentialResolver,
        KeyringSecureStore,
        Mode,
        ProfileStore,
    )

    secure_store = KeyringSecureStore()
    profile = ProfileStore(path).load("default")
    resolver = CredentialResolver(secure_store)
    live_key = resolver.resolve(profile, Mode.LIVE)
"""

from .dotenv_loader import ALLOWLIST, EnvIngestor, IngestOutcome, IngestStatus
from .expiry import format_expiry, is_stale, parse_expiry
from .models import (
    ColorPreference,
    CredentialError,
    CredentialValidationError,
    DotenvError,
    Mode,
    Profile,
    ProfileNotFoundError,
    ProfileStoreError,
    SecureStoreError,
    key_mode,
)
from .profile_store import ProfileStore
from .redaction import redact_api_key
from .resolver import CredentialResolver
from .storage import InMemorySecureStore, KeyringSecureStore, SecureStore, live_key_name
from .validators import validate_api_key

__all__ = [
    # Models
    "Mode",
    "ColorPreference",
    "Profile",
    "key_mode",
    # Storage
    "SecureStore",
    "KeyringSecureStore",
    "InMemorySecureStore",
    "live_key_name",
    "ProfileStore",
    # Resolution and display
    "CredentialResolver",
    "redact_api_key",
    "parse_expiry",
    "format_expiry",
    "is_stale",
    "validate_api_key",
    # Env ingestion
    "ALLOWLIST",
    "EnvIngestor",
    "IngestOutcome",
    "IngestStatus",
    # Errors
    "CredentialError",
    "CredentialValidationError",
    "ProfileStoreError",
    "ProfileNotFoundError",
    "SecureStoreError",
    "DotenvError",
]
