"""Unit tests for Lambda dependency factory."""

import os
from collections.abc import Iterator
from unittest.mock import MagicMock, Mock, patch

import pytest
from fastapi import FastAPI

import src.lambda_dependencies as deps
from src.lambda_dependencies import (
    get_fastapi_app,
    get_menu_service,
    initialize_lambda_environment,
)


@pytest.fixture(autouse=True)
def reset_cached_dependencies() -> Iterator[None]:
    """Clear module-level caches around each test."""
    deps._menu_service = None
    deps._fastapi_app = None
    yield
    deps._menu_service = None
    deps._fastapi_app = None


@pytest.mark.unit
class TestGetMenuService:
    """Tests for get_menu_service function."""

    @patch.dict(os.environ, {}, clear=True)
    @patch("src.lambda_dependencies.get_dynamodb_resource")
    def test_creates_service_once(self, mock_get_dynamodb: Mock) -> None:
        """Test that the menu service and its cache are reused across calls."""
        mock_get_dynamodb.return_value = MagicMock()

        first = get_menu_service()
        second = get_menu_service()

        assert first is second
        assert first.cache is second.cache
        mock_get_dynamodb.assert_called_once()


@pytest.mark.unit
class TestGetFastAPIApp:
    """Tests for get_fastapi_app function."""

    @patch.dict(os.environ, {"ADMIN_API_KEY": "lambda-key"}, clear=True)
    @patch("src.lambda_dependencies.get_dynamodb_resource")
    def test_creates_app_once(self, mock_get_dynamodb: Mock) -> None:
        """Test that the application is built once and shares the service."""
        mock_get_dynamodb.return_value = MagicMock()

        app = get_fastapi_app()

        assert isinstance(app, FastAPI)
        assert get_fastapi_app() is app
        assert app.state.menu_service is get_menu_service()
        assert app.state.api_key_validator.validate("lambda-key") is True


@pytest.mark.unit
class TestInitializeLambdaEnvironment:
    """Tests for initialize_lambda_environment function."""

    @patch.dict(os.environ, {"LOG_LEVEL": "DEBUG"}, clear=True)
    @patch("src.lambda_dependencies.configure_logging")
    def test_configures_logging(self, mock_configure_logging: Mock) -> None:
        """Test that the configured log level is applied."""
        initialize_lambda_environment()

        mock_configure_logging.assert_called_once_with("DEBUG")
