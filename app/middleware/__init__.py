from app.middleware.identity import (
    UserIdentity,
    UserIdentityMiddleware,
    get_current_user,
    require_identified_user,
)
from app.middleware.path_prefix import PathPrefixMiddleware
from app.middleware.request_id import RequestIDMiddleware

__all__ = [
    "PathPrefixMiddleware",
    "RequestIDMiddleware",
    "UserIdentity",
    "UserIdentityMiddleware",
    "get_current_user",
    "require_identified_user",
]
