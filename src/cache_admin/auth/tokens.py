"""
Issue and verify the HS256 bearer tokens handed out by ``/api/auth/login``.
"""

import logging
from datetime import datetime, timedelta, timezone

import jwt
from pydantic import ValidationError

from cache_admin.auth.schemas import TokenPayload
from cache_admin.config.settings import Settings
from cache_admin.domain.exceptions import TokenExpired, TokenInvalid
from cache_admin.infrastructure.database.models import User

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["sub", "email", "role", "exp", "iat", "iss", "aud"]


def create_access_token(user: User, settings: Settings, now: datetime | None = None) -> str:
    """
    Sign a token for ``user``.

    Claims: sub (user id), email, role, iss, aud, iat and exp. ``now`` is only
    there so tests can mint already-expired tokens.
    """
    issued_at = now or datetime.now(timezone.utc)
    claims = {
        "sub": user.id,
        "email": user.email,
        "role": user.role,
        "iss": settings.jwt_issuer,
        "aud": settings.token_audience,
        "iat": issued_at,
        "exp": issued_at + timedelta(hours=settings.jwt_expire_hours),
    }
    return jwt.encode(
        claims,
        settings.jwt_secret_key.get_secret_value(),
        algorithm=settings.jwt_algorithm,
    )


def decode_access_token(token: str, settings: Settings) -> TokenPayload:
    """
    Verify signature, issuer, audience and expiry.

    Raises:
        TokenExpired: exp is in the past
        TokenInvalid: anything else wrong with the token
    """
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret_key.get_secret_value(),
            algorithms=[settings.jwt_algorithm],
            audience=settings.token_audience,
            issuer=settings.jwt_issuer,
            options={"require": REQUIRED_CLAIMS},
        )
        return TokenPayload.model_validate(claims)
    except jwt.ExpiredSignatureError as e:
        logger.info("Rejected expired token")
        raise TokenExpired() from e
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid token: {e}")
        raise TokenInvalid(details={"reason": str(e)}) from e
    except ValidationError as e:
        logger.warning(f"Token claims failed validation: {e.error_count()} error(s)")
        raise TokenInvalid(details={"reason": "Unexpected claim values"}) from e
