"""
ALB path prefix routing.

ALB listener rules forward e.g. /user-data/* to this service without
rewriting the path. PathPrefixMiddleware strips the configured prefix so the
routes see /userdata/books instead of /user-data/userdata/books. Requests
that do not carry the prefix pass through untouched.
"""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


class PathPrefixMiddleware(BaseHTTPMiddleware):

    def __init__(self, app, prefix: str):
        super().__init__(app)
        self.prefix = prefix.rstrip("/")

    def strip(self, path: str) -> str:
        """/user-data/health -> /health, /user-data -> /, /user-database unchanged"""
        if not self.prefix:
            return path
        if path == self.prefix:
            return "/"
        if path.startswith(self.prefix + "/"):
            return path[len(self.prefix):]
        return path

    async def dispatch(self, request: Request, call_next):
        scope = request.scope
        stripped_path = self.strip(scope["path"])

        if stripped_path != scope["path"]:
            scope["path"] = stripped_path
            # raw_path is used by some frameworks for routing
            if "raw_path" in scope:
                scope["raw_path"] = stripped_path.encode("utf-8")

        return await call_next(request)
