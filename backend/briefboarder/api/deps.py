from fastapi import HTTPException, Security
from fastapi.security.api_key import APIKeyHeader

from ..core.config import get_settings

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def verify_api_key(api_key: str | None = Security(api_key_header)) -> None:
    """
    Simple header-based API key authentication.

    - In dev, if API_AUTH_KEY is not set, auth is skipped.
    - Otherwise, require X-API-Key == API_AUTH_KEY.
    """
    settings = get_settings()
    expected = settings.API_AUTH_KEY

    if settings.ENV == "dev" and not expected:
        return

    if not expected:
        # Outside dev a missing key is a misconfiguration, not an open door
        raise HTTPException(status_code=401, detail="API key not configured")

    if api_key != expected:
        raise HTTPException(status_code=401, detail="Invalid API key")
