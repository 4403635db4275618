"""
Authentication for the cache admin API.

Human callers present a bearer JWT issued by ``/api/auth/login``; agents
present the API key they were issued, checked by the callback middleware.
"""

from cache_admin.auth.api_key import generate_api_key
from cache_admin.auth.passwords import hash_password, verify_password
from cache_admin.auth.schemas import TokenPayload, UserInfo
from cache_admin.auth.tokens import create_access_token, decode_access_token

__all__ = [
    "create_access_token",
    "decode_access_token",
    "generate_api_key",
    "hash_password",
    "verify_password",
    "TokenPayload",
    "UserInfo",
]
