"""
Identity Service - accounts, password hashing and JWT access tokens.

Accounts live in the key-value store next to the application data:

    auth:user:<user_id>   account record (with the bcrypt hash)
    auth:email:<email>    {"userId": <user_id>} lookup index
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Dict, Optional

import bcrypt
from jose import JWTError, jwt

from ..models import TokenData
from ..storage import KeyValueStore

logger = logging.getLogger(__name__)


class AccountExistsError(Exception):
    """Raised when signing up with an e-mail that is already registered."""


class InvalidCredentialsError(Exception):
    """Raised when an e-mail/password pair does not match an account."""


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hashed password."""
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


def get_password_hash(password: str) -> str:
    """Hash a password."""
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class IdentityService:
    """
    Issues and validates bearer tokens for accounts kept in a ``KeyValueStore``.

    One instance is built per application and handed to request handlers
    through FastAPI dependencies; nothing here is process-global.
    """

    def __init__(
        self,
        store: KeyValueStore,
        secret_key: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 60 * 24 * 7,
    ):
        self.store = store
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_token_expire_minutes = access_token_expire_minutes

    @classmethod
    def from_settings(cls, store: KeyValueStore, settings: Any) -> "IdentityService":
        return cls(
            store,
            secret_key=settings.secret_key,
            algorithm=settings.algorithm,
            access_token_expire_minutes=settings.access_token_expire_minutes,
        )

    @staticmethod
    def _account_key(user_id: str) -> str:
        return f"auth:user:{user_id}"

    @staticmethod
    def _email_key(email: str) -> str:
        return f"auth:email:{_normalize_email(email)}"

    async def get_account(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Get an account record by user id."""
        return await self.store.get(self._account_key(user_id))

    async def get_account_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Get an account record by e-mail address."""
        index = await self.store.get(self._email_key(email))
        if index is None:
            return None
        return await self.get_account(index["userId"])

    async def create_account(
        self,
        email: str,
        password: str,
        name: Optional[str] = None,
        on_created: Optional[Callable[[Dict[str, Any]], Awaitable[Any]]] = None,
    ) -> Dict[str, Any]:
        """
        Register a new account.

        The e-mail index is written last: until it exists the account cannot
        sign in and the e-mail is still free, so a failure in an earlier step
        can simply be retried.

        Args:
            email: Login e-mail, compared case-insensitively
            password: Plain text password, stored only as a bcrypt hash
            name: Optional display name
            on_created: Awaited with the account record before the e-mail is
                claimed (e.g. to write the profile)

        Returns:
            Dict: The stored account record

        Raises:
            AccountExistsError: If the e-mail is already registered
        """
        if await self.store.exists(self._email_key(email)):
            raise AccountExistsError(f"A user with email {email} has already been registered")

        user_id = str(uuid.uuid4())
        account = {
            "id": user_id,
            "email": _normalize_email(email),
            "name": name,
            "hashedPassword": get_password_hash(password),
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }

        await self.store.set(self._account_key(user_id), account)
        if on_created is not None:
            await on_created(account)

        if not await self.store.add(self._email_key(email), {"userId": user_id}):
            # Lost a race with a concurrent sign-up for the same e-mail
            raise AccountExistsError(f"A user with email {email} has already been registered")

        logger.info(
            f"Account created: {user_id}",
            extra={"extra_fields": {"user_id": user_id}}
        )
        return account

    async def authenticate(self, email: str, password: str) -> Dict[str, Any]:
        """
        Check an e-mail/password pair.

        Raises:
            InvalidCredentialsError: If the account is unknown or the password is wrong
        """
        account = await self.get_account_by_email(email)
        if account is None or not verify_password(password, account["hashedPassword"]):
            logger.warning("Failed sign-in attempt")
            raise InvalidCredentialsError("Invalid login credentials")
        return account

    def create_access_token(
        self,
        account: Dict[str, Any],
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """
        Create a signed JWT for ``account``.

        Args:
            account: Account record with ``id`` and ``email``
            expires_delta: Optional lifetime override

        Returns:
            str: Encoded JWT token
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=self.access_token_expire_minutes)

        to_encode = {
            "sub": account["id"],
            "email": account["email"],
            "exp": datetime.now(timezone.utc) + expires_delta,
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def decode_access_token(self, token: str) -> Optional[TokenData]:
        """
        Decode and verify a JWT access token.

        Returns:
            Optional[TokenData]: Token data if the signature and expiry are valid
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None

        user_id = payload.get("sub")
        if user_id is None:
            return None
        return TokenData(user_id=user_id, email=payload.get("email"))

    async def get_user(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Resolve a bearer token to its account.

        A well-signed token for an account that no longer exists is rejected.
        """
        token_data = self.decode_access_token(token)
        if token_data is None:
            return None
        return await self.get_account(token_data.user_id)
