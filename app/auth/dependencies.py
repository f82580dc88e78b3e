from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.auth.models import UserProfile, UserRole
from app.auth.security import decode_access_token
from app.auth.service import AuthService
from app.common.exceptions import (
    ForbiddenException,
    InvalidTokenException,
    NotAuthenticatedException,
)
from app.database import get_db

security = HTTPBearer(auto_error=False)

# Role hierarchy: admin > user
ROLE_HIERARCHY = {
    UserRole.ADMIN: 2,
    UserRole.USER: 1,
}


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserProfile:
    if credentials is None:
        raise NotAuthenticatedException()

    payload = decode_access_token(credentials.credentials)
    if not payload:
        raise InvalidTokenException()

    user = auth_service.get_user_by_id(int(payload["sub"]))
    if not user:
        raise InvalidTokenException()

    # Check token version (for logout-all functionality)
    if user.token_version != payload.get("tv", 0):
        raise InvalidTokenException()

    return user


def require_role(required_role: UserRole):
    """Factory function to create role-checking dependency"""
    def role_checker(user: UserProfile = Depends(get_current_user)) -> UserProfile:
        # Role comes from the database row, not the token claim
        required_level = ROLE_HIERARCHY.get(required_role, 0)
        user_level = ROLE_HIERARCHY.get(user.role, 0)

        if user_level < required_level:
            raise ForbiddenException(
                f"This endpoint requires {required_role.value} role or higher"
            )

        return user

    return role_checker


# Type aliases for cleaner route signatures
CurrentUser = Annotated[UserProfile, Depends(get_current_user)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]

# Role-based dependencies
RequireAdmin = Annotated[UserProfile, Depends(require_role(UserRole.ADMIN))]
