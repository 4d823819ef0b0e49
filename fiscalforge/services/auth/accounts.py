"""
Account Service

Registration and login on top of account storage.

DESIGN DECISION: A failed login looks the same whether the username is
unknown or the password is wrong. Both return None and both produce the
same audit event, so callers cannot tell which case occurred.
"""

from typing import Optional
from uuid import UUID

from fiscalforge.audit import AuditLogger
from fiscalforge.models.finance import MAX_EMAIL_LENGTH, MAX_USERNAME_LENGTH, User
from fiscalforge.services.auth.hasher import CredentialHasher
from fiscalforge.services.storage import AccountStorageInterface, DuplicateError


class AccountService:
    """Registers users and authenticates them against stored digests."""

    def __init__(
        self,
        storage: AccountStorageInterface,
        hasher: Optional[CredentialHasher] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._hasher = hasher or CredentialHasher()
        self._audit_logger = audit_logger

    def register(
        self,
        username: str,
        password: str,
        email: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> User:
        """
        Create a new account.

        Args:
            username: Login name (surrounding whitespace is stripped)
            password: Plaintext password, hashed before storage
            email: Optional contact address; blank is treated as absent

        Returns:
            The new user

        Raises:
            ValueError: If username or password is empty, or a field is
                longer than its column
            DuplicateError: If the username is taken
            StorageError: If the database write fails
        """
        username = (username or "").strip()
        email = (email or "").strip() or None

        if not username or not password:
            raise ValueError("Username and password are required")
        if len(username) > MAX_USERNAME_LENGTH:
            raise ValueError(f"Username must be at most {MAX_USERNAME_LENGTH} characters")
        if email is not None and len(email) > MAX_EMAIL_LENGTH:
            raise ValueError(f"Email must be at most {MAX_EMAIL_LENGTH} characters")

        try:
            user = self._storage.create_user(
                username=username,
                password_hash=self._hasher.hash(password),
                email=email,
            )
        except DuplicateError:
            if self._audit_logger:
                self._audit_logger.log_registration_rejected(
                    username=username,
                    reason="duplicate username",
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            self._audit_logger.log_user_registered(
                user_id=user.id,
                username=user.username,
                correlation_id=correlation_id,
            )
        return user

    def get_user(self, user_id: int) -> Optional[User]:
        return self._storage.get_user(user_id)

    def authenticate(
        self,
        username: str,
        password: str,
        correlation_id: Optional[UUID] = None,
    ) -> Optional[User]:
        """
        Check credentials.

        Returns:
            The matching user, or None for an unknown username or a
            wrong password alike
        """
        username = (username or "").strip()
        user = None
        if username and password and len(username) <= MAX_USERNAME_LENGTH:
            user = self._storage.find_user_by_credentials(
                username=username,
                password_hash=self._hasher.hash(password),
            )

        if self._audit_logger:
            if user:
                self._audit_logger.log_login_succeeded(
                    user_id=user.id,
                    username=user.username,
                    correlation_id=correlation_id,
                )
            else:
                self._audit_logger.log_login_failed(
                    username=username,
                    correlation_id=correlation_id,
                )
        return user
