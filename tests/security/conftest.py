"""
Security test fixtures.

Provides helpers to mint tokens that are wrong in exactly one way, so each
test shows which check rejects them.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt
import pytest

from cache_admin.config.settings import Settings


@pytest.fixture
def forge_token(test_settings: Settings) -> Callable[..., str]:
    """
    Build a token from valid claims for ``user`` with overrides applied.

    Usage:
        token = forge_token(user, role="Admin", key="other-secret")
    """

    def _forge(user, key: str | None = None, algorithm: str = "HS256", **overrides) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": user.id,
            "email": user.email,
            "role": user.role,
            "iss": test_settings.jwt_issuer,
            "aud": test_settings.token_audience,
            "iat": now,
            "exp": now + timedelta(hours=1),
        }
        claims.update(overrides)
        claims = {name: value for name, value in claims.items() if value is not None}
        secret = key or test_settings.jwt_secret_key.get_secret_value()
        return jwt.encode(claims, secret, algorithm=algorithm)

    return _forge


@pytest.fixture
def as_bearer() -> Callable[[str], dict]:
    return lambda token: {"Authorization": f"Bearer {token}"}
