"""Unit tests for admin API key validation."""

import pytest

from site_menu_service.auth.api_key_validator import APIKeyValidator


@pytest.mark.unit
class TestAPIKeyValidator:
    """Test suite for APIKeyValidator."""

    def test_empty_key_list_raises_error(self) -> None:
        """Test that a validator needs at least one key."""
        with pytest.raises(ValueError, match="At least one API key must be provided"):
            APIKeyValidator(api_keys=[])

    def test_blank_keys_are_ignored(self) -> None:
        """Test that blank configuration entries do not count as keys."""
        with pytest.raises(ValueError):
            APIKeyValidator(api_keys=["", ""])

        validator = APIKeyValidator(api_keys=["", "admin-key"])
        assert validator.api_keys == {"admin-key"}

    def test_accepts_any_configured_key(self) -> None:
        """Test that each configured key validates."""
        validator = APIKeyValidator(api_keys=["editor", "publisher"])

        assert validator.validate("editor") is True
        assert validator.validate("publisher") is True
        assert validator.validate("reader") is False

    def test_rejects_empty_key(self) -> None:
        """Test that an empty presented key is rejected."""
        validator = APIKeyValidator(api_keys=["admin-key"])

        assert validator.validate("") is False

    def test_comparison_is_exact(self) -> None:
        """Test that case and surrounding whitespace matter."""
        validator = APIKeyValidator(api_keys=["AdminKey"])

        assert validator.validate("adminkey") is False
        assert validator.validate(" AdminKey") is False
        assert validator.validate("AdminKey ") is False
