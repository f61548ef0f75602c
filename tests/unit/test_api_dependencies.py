"""Unit tests for the admin authentication dependency."""

import pytest
from fastapi import HTTPException

from site_menu_service.auth.api_dependencies import get_api_key_from_header
from site_menu_service.auth.api_key_validator import APIKeyValidator


@pytest.fixture
def validator() -> APIKeyValidator:
    """Create a validator accepting one admin key."""
    return APIKeyValidator(api_keys=["admin-key"])


@pytest.mark.unit
class TestGetAPIKeyFromHeader:
    """Test suite for get_api_key_from_header."""

    def test_returns_valid_key(self, validator: APIKeyValidator) -> None:
        """Test that an accepted key is passed through."""
        assert get_api_key_from_header(x_api_key="admin-key", validator=validator) == "admin-key"

    @pytest.mark.parametrize("header", [None, ""])
    def test_missing_key(self, validator: APIKeyValidator, header: str | None) -> None:
        """Test that an absent or empty header is rejected."""
        with pytest.raises(HTTPException) as exc_info:
            get_api_key_from_header(x_api_key=header, validator=validator)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Missing API key"

    def test_invalid_key(self, validator: APIKeyValidator) -> None:
        """Test that an unknown key is rejected."""
        with pytest.raises(HTTPException) as exc_info:
            get_api_key_from_header(x_api_key="guess", validator=validator)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Invalid API key"
