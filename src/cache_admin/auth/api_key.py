"""
Agent API key generation.

Keys are 32 random bytes, base64url-encoded without padding (43 characters).
They are stored as issued because the agent presents the same value back on
callbacks and this service forwards it to the agent on relayed calls.
"""

import secrets

API_KEY_BYTES = 32


def generate_api_key() -> str:
    """
    Generate a new agent API key.

    Example:
        >>> key = generate_api_key()
        >>> len(key)
        43
    """
    return secrets.token_urlsafe(API_KEY_BYTES)

