import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.auth.models import UserProfile
from app.auth.schemas import (
    AuthResponse,
    RegisterRequest,
    TokenResponse,
    UpdateProfileRequest,
    UserResponse,
)
from app.auth.security import (
    create_access_token,
    hash_password,
    needs_rehash,
    verify_password,
)
from app.common.exceptions import (
    InvalidCredentialsException,
    UserExistsException,
    UserNotFoundException,
)
from app.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def _create_tokens(self, user: UserProfile) -> TokenResponse:
        access_token = create_access_token(user.id, user.token_version, user.role.value)
        return TokenResponse(
            access_token=access_token,
            expires_in=settings.access_token_expire_minutes * 60,
        )

    def _build_auth_response(self, user: UserProfile) -> AuthResponse:
        return AuthResponse(
            user=UserResponse.model_validate(user),
            tokens=self._create_tokens(user),
        )

    def _find_user_by_email(self, email: str) -> UserProfile | None:
        stmt = select(UserProfile).where(UserProfile.email == email.lower())
        return self.db.execute(stmt).scalar_one_or_none()

    def get_user_by_id(self, user_id: int) -> UserProfile | None:
        return self.db.get(UserProfile, user_id)

    def register(self, data: RegisterRequest) -> AuthResponse:
        email = data.email.lower()

        if self._find_user_by_email(email):
            raise UserExistsException()

        user = UserProfile(
            email=email,
            display_name=data.display_name,
            password_hash=hash_password(data.password),
            points=0,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Registered user {user.id}")

        return self._build_auth_response(user)

    def login(self, email: str, password: str) -> AuthResponse:
        user = self._find_user_by_email(email)
        if not user or not user.password_hash:
            raise InvalidCredentialsException()

        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsException()

        # Rehash password if needed (Argon2 parameter upgrade)
        if needs_rehash(user.password_hash):
            user.password_hash = hash_password(password)
            self.db.commit()

        return self._build_auth_response(user)

    def get_me(self, user_id: int) -> UserResponse:
        user = self.get_user_by_id(user_id)
        if not user:
            raise UserNotFoundException()
        return UserResponse.model_validate(user)

    def update_profile(self, user_id: int, data: UpdateProfileRequest) -> UserResponse:
        user = self.get_user_by_id(user_id)
        if not user:
            raise UserNotFoundException()

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(user, field, value)

        self.db.commit()
        self.db.refresh(user)
        return UserResponse.model_validate(user)

    def logout_all(self, user_id: int) -> None:
        """Invalidate every access token issued so far."""
        user = self.get_user_by_id(user_id)
        if not user:
            raise UserNotFoundException()
        user.token_version += 1
        self.db.commit()
