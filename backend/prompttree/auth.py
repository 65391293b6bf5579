"""Static bearer-token check applied to every router except /health."""

from fastapi import HTTPException, Request

from prompttree.config import Settings


def _settings(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else Settings()


async def require_api_key(request: Request) -> None:
    """Reject the request with 401 unless auth is off, the origin is trusted, or the token matches."""
    settings = _settings(request)
    if not settings.api_key:
        return
    if request.headers.get("origin") in settings.allowed_origins:
        return

    header = request.headers.get("authorization")
    if not header:
        raise HTTPException(
            status_code=401,
            detail="API key required. Use Authorization: Bearer <your-api-key>",
        )
    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise HTTPException(
            status_code=401,
            detail="Invalid authorization format. Use Authorization: Bearer <your-api-key>",
        )
    if parts[1] != settings.api_key:
        raise HTTPException(status_code=401, detail="Invalid API key")
