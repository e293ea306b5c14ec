"""
Unit tests for the session workflow use cases (Register, Login, Logout,
RefreshAccessToken, GetCurrentUser).
"""
from unittest.mock import AsyncMock

import pytest
from account_service.application.dto.auth_dto import UserLoginRequest, UserRegistrationRequest
from account_service.application.use_cases.auth.get_current_user import GetCurrentUserUseCase
from account_service.application.use_cases.auth.login_user import LoginUserUseCase
from account_service.application.use_cases.auth.logout_user import LogoutUserUseCase
from account_service.application.use_cases.auth.refresh_access_token import RefreshAccessTokenUseCase
from account_service.application.use_cases.auth.register_user import RegisterUserUseCase
from account_service.core.exceptions import (
    ConflictError,
    DuplicateUserError,
    InternalError,
    NotFoundError,
    TokenIssuanceError,
    UnauthorizedError,
    ValidationError,
)
from account_service.domain.constants import UserFields
from tests.fakes import StubMediaUploader


def registration(**overrides):
    fields = dict(
        username="alice",
        email="a@x.com",
        full_name="Alice A",
        password="pw123",
        avatar_path="/tmp/avatar.png",
    )
    fields.update(overrides)
    return UserRegistrationRequest(**fields)


async def register_alice(user_store, media_uploader):
    use_case = RegisterUserUseCase(user_store, media_uploader)
    return await use_case.execute(registration())


class TestRegisterUserUseCase:
    """Tests for RegisterUserUseCase"""

    @pytest.mark.asyncio
    async def test_register_success(self, user_store, media_uploader):
        result = await register_alice(user_store, media_uploader)

        assert result.username == "alice"
        assert result.email == "a@x.com"
        assert result.full_name == "Alice A"
        assert result.avatar == "https://cdn.example.com/avatar.png"
        assert result.cover_image == ""
        dumped = result.model_dump(by_alias=True)
        assert "password" not in dumped
        assert "refreshToken" not in dumped

    @pytest.mark.asyncio
    async def test_username_is_lowercased_and_password_hashed(self, user_store, media_uploader):
        use_case = RegisterUserUseCase(user_store, media_uploader)
        result = await use_case.execute(registration(username="AliCe"))

        assert result.username == "alice"
        stored = user_store.stored("alice")
        assert stored[UserFields.PASSWORD] != "pw123"

    @pytest.mark.asyncio
    async def test_cover_image_uploaded_when_present(self, user_store, media_uploader):
        use_case = RegisterUserUseCase(user_store, media_uploader)
        result = await use_case.execute(registration(cover_image_path="/tmp/cover.jpg"))

        assert result.cover_image == "https://cdn.example.com/cover.jpg"
        assert media_uploader.uploaded == ["/tmp/avatar.png", "/tmp/cover.jpg"]

    @pytest.mark.asyncio
    async def test_cover_image_failure_is_not_an_error(self, user_store):
        uploader = StubMediaUploader(failing=["/tmp/cover.jpg"])
        use_case = RegisterUserUseCase(user_store, uploader)
        result = await use_case.execute(registration(cover_image_path="/tmp/cover.jpg"))
        assert result.cover_image == ""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["username", "email", "full_name", "password"])
    @pytest.mark.parametrize("value", [None, "", "   "])
    async def test_blank_field_rejected_without_store_access(self, mock_user_repo, media_uploader, field, value):
        use_case = RegisterUserUseCase(mock_user_repo, media_uploader)

        with pytest.raises(ValidationError, match="All fields are required") as exc_info:
            await use_case.execute(registration(**{field: value}))

        assert exc_info.value.status_code == 400
        mock_user_repo.find_by_identity.assert_not_called()
        mock_user_repo.create.assert_not_called()
        assert media_uploader.uploaded == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "username,email",
        [("alice", "new@x.com"), ("bob", "a@x.com"), ("ALICE", "z@x.com")],
    )
    async def test_duplicate_username_or_email_conflicts(self, user_store, media_uploader, username, email):
        await register_alice(user_store, media_uploader)
        writes_before = user_store.writes
        uploads_before = len(media_uploader.uploaded)

        use_case = RegisterUserUseCase(user_store, media_uploader)
        with pytest.raises(ConflictError) as exc_info:
            await use_case.execute(registration(username=username, email=email))

        assert exc_info.value.status_code == 409
        assert user_store.writes == writes_before
        assert len(user_store.documents) == 1
        assert len(media_uploader.uploaded) == uploads_before

    @pytest.mark.asyncio
    async def test_missing_avatar_rejected(self, user_store, media_uploader):
        use_case = RegisterUserUseCase(user_store, media_uploader)
        with pytest.raises(ValidationError, match="Avatar file is required"):
            await use_case.execute(registration(avatar_path=None))
        assert user_store.writes == 0

    @pytest.mark.asyncio
    async def test_avatar_upload_failure_rejected_with_same_message(self, user_store):
        uploader = StubMediaUploader(failing=["/tmp/avatar.png"])
        use_case = RegisterUserUseCase(user_store, uploader)
        with pytest.raises(ValidationError, match="Avatar file is required"):
            await use_case.execute(registration())
        assert user_store.writes == 0

    @pytest.mark.asyncio
    async def test_avatar_upload_exception_rejected(self, user_store):
        uploader = AsyncMock()
        uploader.upload.side_effect = RuntimeError("storage down")
        use_case = RegisterUserUseCase(user_store, uploader)
        with pytest.raises(ValidationError, match="Avatar file is required"):
            await use_case.execute(registration())

    @pytest.mark.asyncio
    async def test_insert_race_maps_to_conflict(self, mock_user_repo, media_uploader):
        mock_user_repo.find_by_identity.return_value = None
        mock_user_repo.create.side_effect = DuplicateUserError("E11000 duplicate key")
        use_case = RegisterUserUseCase(mock_user_repo, media_uploader)

        with pytest.raises(ConflictError):
            await use_case.execute(registration())

    @pytest.mark.asyncio
    async def test_refetch_failure_is_internal_error(self, mock_user_repo, media_uploader, sample_user):
        mock_user_repo.find_by_identity.return_value = None
        mock_user_repo.create.return_value = sample_user
        mock_user_repo.find_by_id.return_value = None
        use_case = RegisterUserUseCase(mock_user_repo, media_uploader)

        with pytest.raises(InternalError) as exc_info:
            await use_case.execute(registration())
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides,message",
        [({"email": "bob"}, "Invalid email format"), ({"email": "no-at-sign.example.com"}, "Invalid email format")],
    )
    async def test_malformed_fields_rejected_before_upload(self, mock_user_repo, media_uploader, overrides, message):
        use_case = RegisterUserUseCase(mock_user_repo, media_uploader)

        with pytest.raises(ValidationError, match=message) as exc_info:
            await use_case.execute(registration(cover_image_path="/tmp/cover.jpg", **overrides))

        assert exc_info.value.status_code == 400
        assert media_uploader.uploaded == []
        mock_user_repo.find_by_identity.assert_not_called()
        mock_user_repo.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_store_value_error_is_not_shown_to_client(self, mock_user_repo, media_uploader):
        mock_user_repo.find_by_identity.return_value = None
        mock_user_repo.create.side_effect = ValueError("password cannot be longer than 72 bytes")
        use_case = RegisterUserUseCase(mock_user_repo, media_uploader)

        with pytest.raises(InternalError) as exc_info:
            await use_case.execute(registration())

        assert exc_info.value.status_code == 500
        assert "72 bytes" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_long_password_registers_and_logs_in(self, user_store, media_uploader, token_issuer):
        long_password = "p" * 80
        await RegisterUserUseCase(user_store, media_uploader).execute(registration(password=long_password))

        result = await LoginUserUseCase(user_store, token_issuer).execute(
            UserLoginRequest(username="alice", password=long_password)
        )
        assert result.user.username == "alice"


class TestLoginUserUseCase:
    """Tests for LoginUserUseCase"""

    @pytest.mark.asyncio
    async def test_login_success(self, user_store, media_uploader, token_issuer):
        await register_alice(user_store, media_uploader)
        use_case = LoginUserUseCase(user_store, token_issuer)

        result = await use_case.execute(
            UserLoginRequest(username="alice", email="a@x.com", password="pw123")
        )

        assert result.access_token and result.refresh_token
        assert result.access_token != result.refresh_token
        assert result.user.username == "alice"
        assert user_store.stored("alice")[UserFields.REFRESH_TOKEN] == result.refresh_token

    @pytest.mark.asyncio
    @pytest.mark.parametrize("identity", [{"username": "alice"}, {"email": "a@x.com"}, {"username": "ALICE"}])
    async def test_login_with_single_identity(self, user_store, media_uploader, token_issuer, identity):
        await register_alice(user_store, media_uploader)
        use_case = LoginUserUseCase(user_store, token_issuer)

        result = await use_case.execute(UserLoginRequest(password="pw123", **identity))
        assert result.user.email == "a@x.com"

    @pytest.mark.asyncio
    async def test_login_without_identity_rejected(self, mock_user_repo, token_issuer):
        use_case = LoginUserUseCase(mock_user_repo, token_issuer)
        with pytest.raises(ValidationError) as exc_info:
            await use_case.execute(UserLoginRequest(username=" ", password="pw123"))
        assert exc_info.value.status_code == 400
        mock_user_repo.find_by_identity.assert_not_called()

    @pytest.mark.asyncio
    async def test_login_without_password_rejected(self, mock_user_repo, token_issuer):
        use_case = LoginUserUseCase(mock_user_repo, token_issuer)
        with pytest.raises(ValidationError, match="Password is required"):
            await use_case.execute(UserLoginRequest(username="alice"))

    @pytest.mark.asyncio
    async def test_login_user_not_found(self, user_store, token_issuer):
        use_case = LoginUserUseCase(user_store, token_issuer)
        with pytest.raises(NotFoundError) as exc_info:
            await use_case.execute(UserLoginRequest(email="unknown@example.com", password="anypass"))
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_login_wrong_password_keeps_refresh_token(self, user_store, media_uploader, token_issuer):
        await register_alice(user_store, media_uploader)
        use_case = LoginUserUseCase(user_store, token_issuer)
        first = await use_case.execute(UserLoginRequest(username="alice", password="pw123"))

        with pytest.raises(UnauthorizedError) as exc_info:
            await use_case.execute(
                UserLoginRequest(username="alice", email="a@x.com", password="wrong")
            )

        assert exc_info.value.status_code == 401
        assert user_store.stored("alice")[UserFields.REFRESH_TOKEN] == first.refresh_token

    @pytest.mark.asyncio
    async def test_issuance_failure_is_generic_internal_error(self, user_store, media_uploader):
        await register_alice(user_store, media_uploader)
        issuer = AsyncMock()
        issuer.issue_tokens.side_effect = TokenIssuanceError("signing key missing")
        use_case = LoginUserUseCase(user_store, issuer)

        with pytest.raises(InternalError) as exc_info:
            await use_case.execute(UserLoginRequest(username="alice", password="pw123"))
        assert "signing key" not in exc_info.value.message


class TestLogoutUserUseCase:
    """Tests for LogoutUserUseCase"""

    @pytest.mark.asyncio
    async def test_logout_clears_refresh_token_idempotently(self, user_store, media_uploader, token_issuer):
        user = await register_alice(user_store, media_uploader)
        await LoginUserUseCase(user_store, token_issuer).execute(
            UserLoginRequest(username="alice", password="pw123")
        )
        use_case = LogoutUserUseCase(user_store)

        await use_case.execute(user.id)
        assert UserFields.REFRESH_TOKEN not in user_store.stored("alice")

        await use_case.execute(user.id)
        assert UserFields.REFRESH_TOKEN not in user_store.stored("alice")

    @pytest.mark.asyncio
    async def test_logout_uses_targeted_update(self, mock_user_repo):
        await LogoutUserUseCase(mock_user_repo).execute("usr-1")
        mock_user_repo.update_fields.assert_awaited_once_with(
            "usr-1", {"refresh_token": None}, revalidate=False
        )


class TestRefreshAccessTokenUseCase:
    """Tests for RefreshAccessTokenUseCase"""

    @pytest.mark.asyncio
    async def test_refresh_rotates_tokens(self, user_store, media_uploader, token_issuer):
        await register_alice(user_store, media_uploader)
        login = await LoginUserUseCase(user_store, token_issuer).execute(
            UserLoginRequest(username="alice", password="pw123")
        )
        use_case = RefreshAccessTokenUseCase(user_store, token_issuer)

        tokens = await use_case.execute(login.refresh_token)

        assert tokens.refresh_token != login.refresh_token
        assert user_store.stored("alice")[UserFields.REFRESH_TOKEN] == tokens.refresh_token

        with pytest.raises(UnauthorizedError, match="expired or used"):
            await use_case.execute(login.refresh_token)

    @pytest.mark.asyncio
    async def test_refresh_after_logout_rejected(self, user_store, media_uploader, token_issuer):
        user = await register_alice(user_store, media_uploader)
        login = await LoginUserUseCase(user_store, token_issuer).execute(
            UserLoginRequest(username="alice", password="pw123")
        )
        await LogoutUserUseCase(user_store).execute(user.id)

        with pytest.raises(UnauthorizedError):
            await RefreshAccessTokenUseCase(user_store, token_issuer).execute(login.refresh_token)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, "", "garbage"])
    async def test_missing_or_invalid_token_rejected(self, user_store, token_issuer, token):
        with pytest.raises(UnauthorizedError):
            await RefreshAccessTokenUseCase(user_store, token_issuer).execute(token)


class TestGetCurrentUserUseCase:
    """Tests for GetCurrentUserUseCase"""

    @pytest.mark.asyncio
    async def test_get_current_user_success(self, user_store, media_uploader, token_issuer):
        await register_alice(user_store, media_uploader)
        login = await LoginUserUseCase(user_store, token_issuer).execute(
            UserLoginRequest(email="a@x.com", password="pw123")
        )

        result = await GetCurrentUserUseCase(user_store, token_issuer).execute(login.access_token)
        assert result.username == "alice"

    @pytest.mark.asyncio
    async def test_get_current_user_invalid_token_raises(self, user_store, token_issuer):
        with pytest.raises(UnauthorizedError, match="Invalid access token"):
            await GetCurrentUserUseCase(user_store, token_issuer).execute("invalid.jwt.token")

    @pytest.mark.asyncio
    async def test_get_current_user_deleted_user_raises(self, user_store, media_uploader, token_issuer):
        user = await register_alice(user_store, media_uploader)
        login = await LoginUserUseCase(user_store, token_issuer).execute(
            UserLoginRequest(username="alice", password="pw123")
        )
        user_store.documents.pop(user.id)

        with pytest.raises(UnauthorizedError):
            await GetCurrentUserUseCase(user_store, token_issuer).execute(login.access_token)
