"""Identity module - accounts and bearer tokens."""

from .service import (
    IdentityService,
    AccountExistsError,
    InvalidCredentialsError,
    get_password_hash,
    verify_password,
)

__all__ = [
    'IdentityService',
    'AccountExistsError',
    'InvalidCredentialsError',
    'get_password_hash',
    'verify_password',
]
