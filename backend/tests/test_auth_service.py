"""
Foodies Backend — Auth Service Unit Tests
===========================================

What:  Token decoding and user resolution in AuthService.
How:   Tokens are signed with the test JWT_SECRET from conftest; the
       database is mocked.
"""

import time
from unittest.mock import AsyncMock, MagicMock

import jwt
import pytest

from foodies.config import settings
from foodies.exceptions import AuthError
from foodies.services.auth_service import AuthService


def _sign(payload, secret=None):
    return jwt.encode(payload, secret or settings.jwt_secret, algorithm=settings.jwt_algorithm)


class TestDecodeToken:

    def setup_method(self):
        self.service = AuthService()

    def test_decode_valid_token(self):
        token = self.service.create_token(7)
        assert self.service.decode_token(token)["id"] == 7

    def test_decode_numeric_string_id(self):
        """Issuers that serialize ids as strings are accepted."""
        payload = self.service.decode_token(_sign({"id": "12"}))
        assert payload["id"] == 12

    def test_decode_expired_token(self):
        token = _sign({"id": 7, "exp": int(time.time()) - 60})
        with pytest.raises(AuthError, match="expired"):
            self.service.decode_token(token)

    def test_decode_wrong_secret(self):
        token = _sign({"id": 7}, secret="another-secret-that-is-long-enough-too")
        with pytest.raises(AuthError, match="Invalid access token"):
            self.service.decode_token(token)

    def test_decode_garbage(self):
        with pytest.raises(AuthError):
            self.service.decode_token("not.a.jwt")

    @pytest.mark.parametrize("payload", [{}, {"id": "abc"}, {"id": True}, {"sub": 7}])
    def test_decode_missing_or_invalid_id(self, payload):
        with pytest.raises(AuthError):
            self.service.decode_token(_sign(payload))


class TestAuthenticate:

    def setup_method(self):
        self.service = AuthService()

    def _user(self, user_id, token):
        user = MagicMock()
        user.id = user_id
        user.token = token
        return user

    def _returning(self, mock_db_session, user):
        result = MagicMock()
        result.scalar_one_or_none.return_value = user
        mock_db_session.execute = AsyncMock(return_value=result)

    @pytest.mark.asyncio
    async def test_authenticate_success(self, mock_db_session):
        token = self.service.create_token(3)
        user = self._user(3, token)
        self._returning(mock_db_session, user)

        assert await self.service.authenticate(mock_db_session, token) is user

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, ""])
    async def test_authenticate_without_token(self, mock_db_session, token):
        with pytest.raises(AuthError, match="Not authorized"):
            await self.service.authenticate(mock_db_session, token)
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_authenticate_unknown_user(self, mock_db_session):
        self._returning(mock_db_session, None)
        with pytest.raises(AuthError):
            await self.service.authenticate(mock_db_session, self.service.create_token(99))

    @pytest.mark.asyncio
    async def test_authenticate_revoked_token(self, mock_db_session):
        """A validly signed token that is no longer the stored one (logout) is rejected."""
        old_token = self.service.create_token(3, {"iat": 1})
        self._returning(mock_db_session, self._user(3, self.service.create_token(3, {"iat": 2})))

        with pytest.raises(AuthError):
            await self.service.authenticate(mock_db_session, old_token)

    @pytest.mark.asyncio
    async def test_authenticate_logged_out_user(self, mock_db_session):
        self._returning(mock_db_session, self._user(3, None))
        with pytest.raises(AuthError):
            await self.service.authenticate(mock_db_session, self.service.create_token(3))
