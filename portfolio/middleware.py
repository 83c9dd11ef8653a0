from starlette.middleware.base import BaseHTTPMiddleware

ADMIN_PREFIX = "/admin"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if request.url.path.startswith(ADMIN_PREFIX):
            # admin pages must never sit in a shared cache
            response.headers["Cache-Control"] = "no-store, max-age=0"
            response.headers["Permissions-Policy"] = "camera=(), microphone=(), geolocation=()"
        return response
