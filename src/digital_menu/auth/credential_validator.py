"""Admin credential validation for the customer dashboard.

The dashboard uses a single configured username/password pair. Credentials are
compared verbatim; nothing stored in the users table takes part in the decision.
"""

import hmac


class AdminCredentialValidator:
    """Validates dashboard login credentials against the configured pair."""

    def __init__(self, username: str, password: str) -> None:
        """Initialize validator with the configured credentials.

        Args:
            username: Expected username
            password: Expected password

        Raises:
            ValueError: If either value is empty
        """
        if not username or not password:
            raise ValueError("Admin username and password must be provided")

        self.username = username
        self._password = password

    def validate(self, username: str, password: str) -> bool:
        """Check a login attempt.

        Args:
            username: Submitted username
            password: Submitted password

        Returns:
            bool: True if both match exactly, False otherwise
        """
        username_ok = hmac.compare_digest(username.encode(), self.username.encode())
        password_ok = hmac.compare_digest(password.encode(), self._password.encode())
        return username_ok and password_ok
