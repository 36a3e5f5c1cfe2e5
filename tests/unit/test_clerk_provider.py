from unittest.mock import MagicMock, patch

import jwt
import pytest

from core.auth.clerk_provider import ClerkAuthProvider
from core.auth.interface import AuthUser
from core.errors import AuthenticationError, ErrorCode


@pytest.fixture
def mock_clerk_user():
    user = MagicMock()
    user.id = "user_123"
    user.first_name = "Jane"
    user.last_name = "Doe"
    user.username = "janedoe"
    user.email_addresses = [MagicMock(email_address="jane@example.com")]
    user.public_metadata = {"homeCity": "Lisbon", "trips": 3}
    return user


def _signed_in_state(sub: str = "user_123"):
    state = MagicMock()
    state.is_signed_in = True
    state.payload = {"sub": sub}
    return state


@pytest.mark.asyncio
async def test_verify_token_valid(mock_clerk_user):
    with patch("core.auth.clerk_provider.Clerk") as mock_clerk_class, patch(
        "core.auth.clerk_provider.authenticate_request", return_value=_signed_in_state()
    ) as mock_authenticate:
        mock_client = MagicMock()
        mock_client.users.get.return_value = mock_clerk_user
        mock_clerk_class.return_value = mock_client

        provider = ClerkAuthProvider(secret_key="sk_test_mock")
        token = jwt.encode({"sub": "user_123"}, "secret", algorithm="HS256")

        result = await provider.verify_token(token)

        assert isinstance(result, AuthUser)
        assert result.user_id == "user_123"
        assert result.email == "jane@example.com"
        assert result.name == "Jane Doe"
        request = mock_authenticate.call_args.args[0]
        assert request.headers == {"Authorization": f"Bearer {token}"}
        mock_client.users.get.assert_called_once_with(user_id="user_123")


@pytest.mark.asyncio
async def test_verify_token_signed_out():
    state = MagicMock()
    state.is_signed_in = False
    state.payload = None
    state.message = "token-expired"
    with patch("core.auth.clerk_provider.Clerk"), patch(
        "core.auth.clerk_provider.authenticate_request", return_value=state
    ):
        provider = ClerkAuthProvider(secret_key="sk_test_mock")

        with pytest.raises(AuthenticationError, match="token-expired") as exc_info:
            await provider.verify_token("expired_token")
        assert exc_info.value.code == ErrorCode.INVALID_TOKEN


@pytest.mark.asyncio
async def test_verify_token_sdk_error():
    with patch("core.auth.clerk_provider.Clerk"), patch(
        "core.auth.clerk_provider.authenticate_request", side_effect=Exception("malformed")
    ):
        provider = ClerkAuthProvider(secret_key="sk_test_mock")

        with pytest.raises(AuthenticationError, match="Token verification failed") as exc_info:
            await provider.verify_token("invalid_token")
        assert exc_info.value.code == ErrorCode.INVALID_TOKEN


@pytest.mark.asyncio
async def test_get_user_success(mock_clerk_user):
    with patch("core.auth.clerk_provider.Clerk") as mock_clerk_class:
        mock_client = MagicMock()
        mock_client.users.get.return_value = mock_clerk_user
        mock_clerk_class.return_value = mock_client

        provider = ClerkAuthProvider(secret_key="sk_test_mock")
        result = await provider.get_user("user_123")

        assert result.user_id == "user_123"
        assert result.email == "jane@example.com"
        assert result.name == "Jane Doe"
        assert result.metadata == {"homeCity": "Lisbon", "trips": "3"}


@pytest.mark.asyncio
async def test_get_user_no_email(mock_clerk_user):
    mock_clerk_user.email_addresses = []

    with patch("core.auth.clerk_provider.Clerk") as mock_clerk_class:
        mock_client = MagicMock()
        mock_client.users.get.return_value = mock_clerk_user
        mock_clerk_class.return_value = mock_client

        provider = ClerkAuthProvider(secret_key="sk_test_mock")
        result = await provider.get_user("user_123")

        assert result.email == ""


@pytest.mark.asyncio
async def test_get_user_no_name(mock_clerk_user):
    mock_clerk_user.first_name = None
    mock_clerk_user.last_name = None

    with patch("core.auth.clerk_provider.Clerk") as mock_clerk_class:
        mock_client = MagicMock()
        mock_client.users.get.return_value = mock_clerk_user
        mock_clerk_class.return_value = mock_client

        provider = ClerkAuthProvider(secret_key="sk_test_mock")
        result = await provider.get_user("user_123")

        assert result.name == "janedoe"


@pytest.mark.asyncio
async def test_get_user_api_error():
    with patch("core.auth.clerk_provider.Clerk") as mock_clerk_class:
        mock_client = MagicMock()
        mock_client.users.get.side_effect = Exception("API error")
        mock_clerk_class.return_value = mock_client

        provider = ClerkAuthProvider(secret_key="sk_test_mock")

        with pytest.raises(AuthenticationError, match="Failed to fetch user"):
            await provider.get_user("user_123")
