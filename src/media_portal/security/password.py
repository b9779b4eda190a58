"""Password hashing utilities."""

import secrets

import bcrypt


class PasswordService:
    """Service for password hashing and generation."""

    BCRYPT_ROUNDS = 12
    # Temporary passwords are 8 hex characters
    TEMPORARY_PASSWORD_BYTES = 4

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string
        """
        salt = bcrypt.gensalt(rounds=self.BCRYPT_ROUNDS)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify_password(self, password: str, hashed: str) -> bool:
        """Verify a password against a hash."""
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except (ValueError, UnicodeDecodeError, UnicodeEncodeError):
            # Invalid hash format or encoding issues
            return False

    def generate_temporary_password(self) -> str:
        """Random password emailed to newly approved members."""
        return secrets.token_hex(self.TEMPORARY_PASSWORD_BYTES)


_password_service: PasswordService | None = None


def get_password_service() -> PasswordService:
    """Get the password service singleton."""
    global _password_service
    if _password_service is None:
        _password_service = PasswordService()
    return _password_service
