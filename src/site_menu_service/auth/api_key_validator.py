"""API key validation for the admin menu endpoints."""

import hmac


class APIKeyValidator:
    """Checks admin API keys against the configured key set.

    Keys come from configuration at start-up; comparison is constant time.
    """

    def __init__(self, api_keys: list[str]) -> None:
        """Initialize validator with the accepted keys.

        Args:
            api_keys: Accepted API key strings; blank entries are ignored

        Raises:
            ValueError: If no non-blank key is provided
        """
        self.api_keys = {key for key in api_keys if key}
        if not self.api_keys:
            raise ValueError("At least one API key must be provided")

    def validate(self, api_key: str) -> bool:
        """Validate an API key.

        Args:
            api_key: The key presented by the caller

        Returns:
            bool: True if the key is one of the accepted keys
        """
        return any(hmac.compare_digest(api_key, key) for key in self.api_keys)
