"""
Security helpers for authentication and authorisation.

Passwords are hashed with salted scrypt. Access tokens are HS256 JWTs whose
``roles`` claim carries ``ROLE_<name>`` entries joined by commas.
"""

import base64
import hashlib
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Annotated, Callable, Iterable, List, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from agrilink.core.exceptions import ForbiddenException, UnauthorizedException
from agrilink.core.logging_config import get_logger
from agrilink.core.models.domain.enums import UserRole

from .core.config import settings

logger = get_logger(__name__)

ROLE_PREFIX = "ROLE_"

_SALT_BYTES = 16
_KEY_LEN = 32
_SCRYPT_N = 2**14
_SCRYPT_R = 8
_SCRYPT_P = 1

# Order used to pick the single acting role of a multi-role account
_ROLE_PRECEDENCE = (UserRole.ADMIN, UserRole.MANAGER, UserRole.FARMER, UserRole.CUSTOMER, UserRole.BUYER)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(slots=True)
class CurrentUser:
    """Identity resolved from a validated bearer token."""

    id: uuid.UUID
    email: str
    roles: List[str]

    def has_role(self, role: UserRole | str) -> bool:
        name = role.value if isinstance(role, UserRole) else role
        return name in self.roles

    @property
    def primary_role(self) -> Optional[str]:
        for role in _ROLE_PRECEDENCE:
            if role.value in self.roles:
                return role.value
        return self.roles[0] if self.roles else None


def _encode(value: bytes) -> str:
    return base64.urlsafe_b64encode(value).decode("ascii").rstrip("=")


def _decode(value: str) -> bytes:
    padding = "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(value + padding)


def hash_password(password: str) -> str:
    """Hash ``password`` using scrypt with a random salt."""
    if not password:
        raise ValueError("Password must not be empty")

    salt = secrets.token_bytes(_SALT_BYTES)
    key = hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt,
        n=_SCRYPT_N,
        r=_SCRYPT_R,
        p=_SCRYPT_P,
        dklen=_KEY_LEN,
    )
    return f"scrypt${_SCRYPT_N}${_SCRYPT_R}${_SCRYPT_P}${_encode(salt)}${_encode(key)}"


def verify_password(password: str, hashed: str) -> bool:
    """Return ``True`` if ``password`` matches ``hashed``."""
    try:
        _, n_str, r_str, p_str, salt_b64, key_b64 = hashed.split("$", 5)
        salt = _decode(salt_b64)
        expected = _decode(key_b64)
        candidate = hashlib.scrypt(
            password.encode("utf-8"),
            salt=salt,
            n=int(n_str),
            r=int(r_str),
            p=int(p_str),
            dklen=len(expected),
        )
    except (ValueError, TypeError):
        return False

    return secrets.compare_digest(candidate, expected)


def create_access_token(user_id: uuid.UUID, email: str, roles: Iterable[str]) -> str:
    """Return a signed JWT for the supplied identity."""
    jwt_config = settings.jwt
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "roles": ",".join(f"{ROLE_PREFIX}{role}" for role in roles),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=jwt_config.expiration_seconds)).timestamp()),
    }
    return jwt.encode(payload, jwt_config.secret, algorithm=jwt_config.algorithm)


def decode_access_token(token: str) -> CurrentUser:
    """Validate ``token`` and return the identity it carries.

    Raises:
        UnauthorizedException: when the token is expired, tampered with or malformed.
    """
    jwt_config = settings.jwt
    try:
        data = jwt.decode(token, jwt_config.secret, algorithms=[jwt_config.algorithm])
        user_id = uuid.UUID(str(data["sub"]))
    except jwt.ExpiredSignatureError as e:
        raise UnauthorizedException("Token has expired") from e
    except (jwt.InvalidTokenError, KeyError, ValueError) as e:
        raise UnauthorizedException("Invalid authentication token") from e

    roles = [role.removeprefix(ROLE_PREFIX) for role in str(data.get("roles", "")).split(",") if role]
    return CurrentUser(id=user_id, email=str(data.get("email", "")), roles=roles)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    """FastAPI dependency resolving the caller from the ``Authorization: Bearer`` header."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("Authentication required")
    return decode_access_token(credentials.credentials)


CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]


def require_roles(*roles: UserRole) -> Callable:
    """Build a dependency that admits callers holding at least one of ``roles``."""
    allowed = {role.value for role in roles}

    async def _check(user: CurrentUserDep) -> CurrentUser:
        if not allowed.intersection(user.roles):
            logger.warning(
                f"User {user.id} denied: requires one of {sorted(allowed)}",
                extra={"user_id": str(user.id), "roles": user.roles},
            )
            raise ForbiddenException("You do not have permission to perform this action")
        return user

    return _check


FarmerDep = Annotated[CurrentUser, Depends(require_roles(UserRole.FARMER))]
StaffDep = Annotated[CurrentUser, Depends(require_roles(UserRole.MANAGER, UserRole.ADMIN))]
