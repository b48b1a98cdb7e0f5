from __future__ import annotations

import hmac
from typing import Optional

from fastapi import HTTPException, status

from pos_analytics.config import get_settings


def _load_api_keys() -> set[str]:
    settings = get_settings()
    keys = set()
    if settings.API_KEYS:
        for value in settings.API_KEYS.split(","):
            value = value.strip()
            if value:
                keys.add(value)
    return keys


def _get_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def _matches_any(candidate: Optional[str], keys: set[str]) -> bool:
    if not candidate:
        return False
    return any(hmac.compare_digest(candidate, key) for key in keys)


def authenticate_request(
    api_key: Optional[str],
    authorization: Optional[str],
    *,
    require_auth: bool = False,
) -> Optional[dict]:
    settings = get_settings()
    keys = _load_api_keys()

    if _matches_any(api_key, keys) or _matches_any(_get_bearer_token(authorization), keys):
        return {"auth_type": "api_key"}

    if keys or (require_auth and settings.AUTH_REQUIRED):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return None
