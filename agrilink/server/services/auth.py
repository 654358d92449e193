"""
Account registration, login and user lookups.
"""

import uuid
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.database.entities import User
from agrilink.core.database.repositories import UserRepository
from agrilink.core.exceptions import BadRequestException, ResourceNotFoundException, UnauthorizedException
from agrilink.core.logging_config import get_logger
from agrilink.core.models.domain.enums import UserRole
from agrilink.core.models.io.auth import AuthResponse, LoginRequest, RegisterRequest, UserRead
from agrilink.server.core.config import settings
from agrilink.server.security import create_access_token, hash_password, verify_password

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def display_name(email: str) -> str:
    """``"jane.doe@example.com"`` -> ``"Jane.doe"``."""
    local = email.split("@", 1)[0]
    return local[:1].upper() + local[1:]


def to_user_read(user: User) -> UserRead:
    return UserRead(
        id=user.id,
        email=user.email,
        phone=user.phone,
        name=display_name(user.email),
        roles=user.role_list(),
        enabled=user.enabled,
        created_at=user.created_at,
    )


def parse_roles(raw_roles: List[str]) -> List[str]:
    """Upper-case and validate role names; an empty list means CUSTOMER."""
    roles: List[str] = []
    for raw in raw_roles:
        try:
            role = UserRole(raw.strip().upper()).value
        except ValueError:
            raise BadRequestException(f"Invalid role: {raw}") from None
        if role not in roles:
            roles.append(role)
    return roles or [UserRole.CUSTOMER.value]


class AuthService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.users = UserRepository(session)

    async def register(self, request: RegisterRequest) -> User:
        email = request.email.strip().lower()
        if await self.users.exists_by_email(email):
            raise BadRequestException("Email is already registered")
        if request.phone and await self.users.exists_by_phone(request.phone):
            raise BadRequestException("Phone number is already registered")

        roles = parse_roles(request.roles)
        user = User(
            email=email,
            phone=request.phone,
            password_hash=hash_password(request.password),
            roles=",".join(roles),
            enabled=True,
        )
        user = await self.users.create(user)
        await self.session.commit()
        logger.info(
            f"Registered user {user.id} with roles {roles}",
            extra={"user_id": str(user.id), "roles": roles},
        )
        return user

    async def login(self, request: LoginRequest) -> AuthResponse:
        user = await self.users.get_by_email(request.email.strip().lower())
        if user is None or not user.enabled or not verify_password(request.password, user.password_hash):
            logger.info("Failed login attempt", extra={"email": request.email})
            raise UnauthorizedException(INVALID_CREDENTIALS)

        roles = user.role_list()
        token = create_access_token(user.id, user.email, roles)
        logger.info(f"User {user.id} logged in", extra={"user_id": str(user.id)})
        return AuthResponse(
            access_token=token,
            token_type="Bearer",
            expires_in=settings.jwt.expiration_seconds,
            user_id=user.id,
            email=user.email,
            name=display_name(user.email),
            roles=roles,
        )

    async def get_current_user(self, user_id: uuid.UUID) -> User:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("User", "id", user_id)
        return user

    async def get_farmers(self) -> List[User]:
        return await self.users.find_enabled_by_role(UserRole.FARMER.value)

    async def get_farmer_ids(self) -> List[uuid.UUID]:
        return [user.id for user in await self.get_farmers()]
