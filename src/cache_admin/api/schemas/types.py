"""Reusable annotated field types."""

from typing import Annotated

from pydantic import AfterValidator, Field, StringConstraints

Email = Annotated[
    str,
    Field(
        pattern=r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9-]+(?:\.[a-zA-Z0-9-]+)*$",
        max_length=254,
    ),
]
"""Email address string type."""

Url = Annotated[
    str,
    Field(pattern=r"^https?://[^\s/$.?#].[^\s]*$", max_length=2048),
]
"""HTTP(S) URL string type."""

# bcrypt refuses more than 72 bytes; passwords are taken as typed
PASSWORD_MAX_BYTES = 72


def _fits_bcrypt(value: str) -> str:
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    return value


Password = Annotated[
    str,
    StringConstraints(strip_whitespace=False, min_length=6, max_length=PASSWORD_MAX_BYTES),
    AfterValidator(_fits_bcrypt),
]
"""Password accepted on create and update."""

LoginPassword = Annotated[
    str,
    StringConstraints(strip_whitespace=False, min_length=1, max_length=PASSWORD_MAX_BYTES),
]
"""Password presented on login."""

ServiceName = Annotated[str, Field(min_length=1, max_length=255)]
"""Service name; services are linked to users by name."""
