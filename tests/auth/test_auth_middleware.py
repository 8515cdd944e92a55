"""
Tests for building the identity context from the Authorization header
"""

import uuid

import pytest

from blogexpress.auth.middleware import get_auth_context
from blogexpress.auth.tokens import get_token_service


@pytest.mark.asyncio
class TestGetAuthContext:
    async def test_missing_header(self):
        context = await get_auth_context(None)
        assert context.is_authenticated is False

    async def test_valid_bearer_token(self):
        user_id = uuid.uuid4()
        token = get_token_service().issue_session_token(user_id, "a@example.com", "ADMIN")

        context = await get_auth_context(f"Bearer {token}")

        assert context.is_authenticated is True
        assert context.user_id == user_id
        assert context.role == "ADMIN"
        assert context.is_admin is True
        assert context.email == "a@example.com"
        assert context.token == token

    @pytest.mark.parametrize("header", ["Bearer ", "Token abc", "Bearer not-a-jwt"])
    async def test_unusable_header_is_anonymous(self, header):
        context = await get_auth_context(header)
        assert context.is_authenticated is False
        assert context.user_id is None

    async def test_reset_token_is_not_a_session(self):
        token = get_token_service().issue_reset_token(uuid.uuid4(), "a@example.com")
        context = await get_auth_context(f"Bearer {token}")
        assert context.is_authenticated is False
