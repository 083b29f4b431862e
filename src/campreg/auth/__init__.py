from .deps import (
    AuthError,
    actor_for,
    create_access_token,
    get_current_user,
    require_auth,
    require_roles,
)

__all__ = [
    "AuthError",
    "actor_for",
    "create_access_token",
    "get_current_user",
    "require_auth",
    "require_roles",
]
