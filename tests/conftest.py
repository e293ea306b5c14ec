"""
Shared pytest fixtures for account-service tests.
"""
import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from account_service.application.services.token_issuer import TokenIssuer, TokenSettings
from account_service.domain.models.user import User
from tests.fakes import InMemoryUserRepository, StubMediaUploader


@pytest.fixture
def mock_env():
    """Fixture to set common test environment variables."""
    env_vars = {
        "MONGO_URI": "mongodb://localhost:27017",
        "MONGO_DB_NAME": "test_accounts",
        "ACCESS_TOKEN_SECRET": "test_access_secret_for_testing_only",
        "REFRESH_TOKEN_SECRET": "test_refresh_secret_for_testing_only",
        "COOKIE_SECURE": "true",
    }
    with patch.dict(os.environ, env_vars, clear=False):
        yield env_vars


@pytest.fixture
def mock_settings(tmp_path):
    """Fixture to mock get_settings for tests. Patches all modules that use it."""
    mock = MagicMock()
    mock.mongo_uri = "mongodb://localhost:27017"
    mock.mongo_database_name = "test_db"
    mock.access_token_secret = "test_access_secret"
    mock.access_token_expire_minutes = 60
    mock.refresh_token_secret = "test_refresh_secret"
    mock.refresh_token_expire_days = 10
    mock.jwt_algorithm = "HS256"
    mock.cloudinary_cloud_name = "demo"
    mock.cloudinary_api_key = "key"
    mock.cloudinary_api_secret = "secret"
    mock.upload_temp_dir = str(tmp_path / "temp")
    mock.upload_max_mb = 1
    mock.upload_timeout_seconds = 60.0
    mock.cookie_secure = True
    mock.cors_origins = ["http://localhost:3000"]
    mock.log_level = "INFO"

    # Patch at source and at use sites (modules import get_settings at load time)
    with patch("account_service.core.config.get_settings", return_value=mock), patch(
        "account_service.api.v1.cookies.get_settings", return_value=mock
    ), patch(
        "account_service.api.v1.users_controller.get_settings", return_value=mock
    ), patch(
        "account_service.infrastructure.external.cloudinary_uploader.get_settings", return_value=mock
    ):
        yield mock


@pytest.fixture
def token_settings():
    return TokenSettings(
        access_token_secret="test_access_secret",
        access_token_expire_minutes=15,
        refresh_token_secret="test_refresh_secret",
        refresh_token_expire_days=10,
    )


@pytest.fixture
def mock_user_repo():
    """Mock UserRepository with async methods."""
    return AsyncMock()


@pytest.fixture
def user_store():
    """In-memory UserRepository for workflow-level tests."""
    return InMemoryUserRepository()


@pytest.fixture
def media_uploader():
    return StubMediaUploader()


@pytest.fixture
def token_issuer(user_store, token_settings):
    return TokenIssuer(user_repository=user_store, token_settings=token_settings)


@pytest.fixture
def sample_user():
    return User(
        id="65f0c0ffee0000000000abcd",
        username="alice",
        email="a@x.com",
        full_name="Alice A",
        avatar="https://cdn.example.com/alice.png",
    )
