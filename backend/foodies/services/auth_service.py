"""
Foodies Backend — Access Token Verification
=============================================

What:  Resolves a bearer token to a stored User.
Why:   Every mutating endpoint acts on behalf of a user; ownership checks in
       the services need a trusted user id.
How:   PyJWT decodes and verifies the HS256 signature (and `exp` when the
       issuer set one), the payload's `id` is looked up, and the token must
       equal the user's stored token. Logging out clears the stored token,
       which revokes a still-unexpired JWT.
Who:   Called by foodies.dependencies.get_current_user.

Token issuance (login/register/refresh) belongs to the auth service and is
not part of this API.
"""

import logging
from typing import Any, Dict, Optional

import jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from foodies.config import settings
from foodies.exceptions import AuthError
from foodies.models.user import User

logger = logging.getLogger(__name__)


class AuthService:
    """Stateless token verifier; the secret is read from settings on each call."""

    def decode_token(self, token: str) -> Dict[str, Any]:
        """
        Verify signature and expiry and return the payload.

        Raises:
            AuthError: malformed, tampered, expired, or missing the `id` claim
        """
        try:
            payload = jwt.decode(
                token,
                settings.jwt_secret,
                algorithms=[settings.jwt_algorithm],
            )
        except jwt.ExpiredSignatureError:
            raise AuthError(message="Access token has expired")
        except jwt.InvalidTokenError as e:
            logger.info("Rejected access token: %s", type(e).__name__)
            raise AuthError(message="Invalid access token")

        user_id = payload.get("id")
        if isinstance(user_id, str) and user_id.isdigit():
            user_id = int(user_id)
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise AuthError(message="Invalid access token")
        payload["id"] = user_id
        return payload

    async def authenticate(self, db: AsyncSession, token: Optional[str]) -> User:
        """
        Return the user that owns `token`.

        Raises:
            AuthError: no token, bad token, unknown user, or revoked token
        """
        if not token:
            raise AuthError(message="Not authorized")

        payload = self.decode_token(token)

        result = await db.execute(select(User).where(User.id == payload["id"]))
        user = result.scalar_one_or_none()

        if user is None or user.token != token:
            raise AuthError(message="Not authorized", context={"user_id": payload["id"]})

        return user

    def create_token(self, user_id: int, extra_claims: Optional[Dict[str, Any]] = None) -> str:
        """
        Sign a token in the format authenticate() accepts.

        Used by seed scripts and tests; production tokens come from the auth
        service sharing JWT_SECRET.
        """
        payload: Dict[str, Any] = {"id": user_id}
        if extra_claims:
            payload.update(extra_claims)
        return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


auth_service = AuthService()
