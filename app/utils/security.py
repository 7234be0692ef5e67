"""
Admin authentication for the seating chart routes
"""

import logging
import secrets

from fastapi import HTTPException, Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.config import settings

logger = logging.getLogger(__name__)

security = HTTPBearer()

def verify_admin_token(credentials: HTTPAuthorizationCredentials = Depends(security)):
    """Only the couple's admin token may edit the seating chart"""
    if not secrets.compare_digest(credentials.credentials, settings.ADMIN_TOKEN):
        logger.warning("Rejected seating chart request with an invalid admin token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin token"
        )
    return credentials.credentials
