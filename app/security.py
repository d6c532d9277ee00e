import logging
import secrets
from typing import Optional
from fastapi import Header, HTTPException
from app import config

logger = logging.getLogger(__name__)


def require_admin(api_key: Optional[str] = Header(default=None, alias="x-api-key")) -> None:
    """Admin guard for back-office routes; an unset ADMIN_API_KEY locks them all."""
    expected = config.ADMIN_API_KEY
    if not expected or not api_key or not secrets.compare_digest(api_key, expected):
        logger.warning("Rejected admin request with missing or invalid API key")
        raise HTTPException(status_code=401, detail="Invalid API key")
