"""
Foodies Backend — Shared FastAPI Dependencies
===============================================

What:  Dependencies injected into authenticated route handlers.
How:   get_current_user reads the Authorization header through HTTPBearer
       with auto_error=False, so a missing header produces our own 401 body
       (AuthError) instead of FastAPI's default 403.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from foodies.database import get_db_session
from foodies.models.user import User
from foodies.services.auth_service import auth_service

bearer_scheme = HTTPBearer(auto_error=False, description="Access token issued by the auth service")


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """Authenticated user for this request; raises AuthError (401) otherwise."""
    token = credentials.credentials if credentials else None
    return await auth_service.authenticate(db, token)
