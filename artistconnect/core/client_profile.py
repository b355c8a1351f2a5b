# artistconnect/core/client_profile.py
import uuid

from fastapi import Request, Response

from artistconnect.core.config import get_settings

settings = get_settings()


def _is_https(request: Request) -> bool:
    if settings.PUBLIC_BASE_URL:
        return settings.PUBLIC_BASE_URL.startswith("https://")
    return request.url.scheme == "https"


def get_profile_id(request: Request, response: Response) -> uuid.UUID:
    """
    Identify the client profile (the browser profile) behind a request.

    The id lives in a long-lived cookie. A missing or garbled cookie starts
    a fresh profile, which means a fresh, empty cart. The cookie is
    marked Secure whenever the site is served over https.
    """
    raw = request.cookies.get(settings.PROFILE_COOKIE_NAME)
    if raw:
        try:
            return uuid.UUID(raw)
        except ValueError:
            pass

    profile_id = uuid.uuid4()
    response.set_cookie(
        key=settings.PROFILE_COOKIE_NAME,
        value=str(profile_id),
        max_age=settings.PROFILE_COOKIE_MAX_AGE,
        httponly=True,
        secure=_is_https(request),
        samesite="lax",
    )
    return profile_id


def get_request_origin(request: Request) -> str:
    """
    Origin used to build the payment return URLs.

    PUBLIC_BASE_URL wins when set (deployments behind a proxy); otherwise
    the scheme and host of the current request.
    """
    if settings.PUBLIC_BASE_URL:
        return settings.PUBLIC_BASE_URL.rstrip("/")
    return f"{request.url.scheme}://{request.url.netloc}"
