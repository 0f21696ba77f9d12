"""
Per-profile API credential management for the payments CLI.

Profiles hold a test mode key (plaintext profiles file) and a live mode key
(OS secure store). See ``stripe_profiles.credentials`` for the core API.
"""

__version__ = "0.1.0"
