"""Authentication services package."""

from fiscalforge.services.auth.accounts import AccountService
from fiscalforge.services.auth.hasher import CredentialHasher, HashingError, hash_password

__all__ = [
    "AccountService",
    "CredentialHasher",
    "HashingError",
    "hash_password",
]
