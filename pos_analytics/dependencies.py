from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from pos_analytics.core.security import authenticate_request
from pos_analytics.database.session import get_db
from pos_analytics.services.data_service import load_display_settings


def require_auth(
    api_key: Optional[str] = Header(None, alias="X-API-Key"),
    api_key_alt: Optional[str] = Header(None, alias="api-key"),
    authorization: Optional[str] = Header(None),
):
    api_key_value = api_key or api_key_alt
    return authenticate_request(
        api_key=api_key_value,
        authorization=authorization,
        require_auth=True,
    )


def get_display_settings(db: Session = Depends(get_db)):
    return load_display_settings(db)


__all__ = ["get_db", "get_display_settings", "require_auth"]
