from __future__ import annotations

import secrets
from typing import Optional

from fastapi import Header, Request

from freesip.core.config import settings
from freesip.core.errors import RateLimitExceeded, Unauthorized

CONTACT_RATE_LIMIT_MESSAGE = "Too many contact form submissions. Please try again later."


def get_client_ip(request: Request) -> Optional[str]:
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    if request.client is not None:
        return request.client.host
    return None


def get_user_agent(request: Request) -> Optional[str]:
    return request.headers.get("user-agent")


def contact_rate_limit(request: Request) -> None:
    limiter = request.app.state.contact_limiter
    result = limiter.hit(get_client_ip(request) or "unknown")
    if not result.allowed:
        raise RateLimitExceeded(CONTACT_RATE_LIMIT_MESSAGE, retry_after=result.retry_after)


def require_admin_key(x_api_key: Optional[str] = Header(default=None)) -> None:
    expected = settings.ADMIN_API_KEY
    if not expected:
        return
    if x_api_key is None or not secrets.compare_digest(x_api_key, expected):
        raise Unauthorized()
