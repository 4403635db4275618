"""User roles."""

from enum import Enum, unique


@unique
class Role(str, Enum):
    """
    User roles, stored verbatim on the user document.

    ADMIN: full access, including users and agents
    MANAGER: may create and delete services, scoped to linked services otherwise
    USER: read and relay access to linked services only
    """

    ADMIN = "Admin"
    MANAGER = "Manager"
    USER = "User"
