from fastapi import HTTPException, status


class AppException(HTTPException):
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)


class BadRequestException(AppException):
    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class UnauthorizedException(AppException):
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class ForbiddenException(AppException):
    def __init__(self, detail: str = "Forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFoundException(AppException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictException(AppException):
    def __init__(self, detail: str = "Conflict"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


# ============ Auth ============

class NotAuthenticatedException(UnauthorizedException):
    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(detail=detail)


class InvalidCredentialsException(UnauthorizedException):
    def __init__(self):
        super().__init__(detail="Invalid email or password")


class InvalidTokenException(NotAuthenticatedException):
    def __init__(self):
        super().__init__(detail="Invalid or expired token")


class UserExistsException(ConflictException):
    def __init__(self):
        super().__init__(detail="User with this email already exists")


class UserNotFoundException(NotFoundException):
    def __init__(self):
        super().__init__(detail="User not found")


# ============ Cart / checkout ============

class EmptyCartException(BadRequestException):
    def __init__(self):
        super().__init__(detail="Cart is empty")


class InvalidStatusTransitionException(ConflictException):
    def __init__(self, current: str, requested: str):
        super().__init__(
            detail=f"Cannot change purchase status from '{current}' to '{requested}'"
        )


# ============ Points side channel ============
# Never surfaced over HTTP: callers catch, log and carry on.

class LedgerWriteFailure(Exception):
    """Recording a points transaction failed after the business record was saved."""

    def __init__(self, user_id: int, points_change: int, reason: str):
        self.user_id = user_id
        self.points_change = points_change
        self.reason = reason
        super().__init__(
            f"Failed to record {points_change:+d} points for user {user_id}: {reason}"
        )


class DiscountBoundsViolation(Exception):
    """Requested discount is above what the balance or the purchase cap allows."""

    def __init__(self, requested, allowed):
        self.requested = requested
        self.allowed = allowed
        super().__init__(f"Requested discount {requested} exceeds maximum {allowed}")
