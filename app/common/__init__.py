from app.common.exceptions import (
    AppException,
    BadRequestException,
    ConflictException,
    DiscountBoundsViolation,
    EmptyCartException,
    ForbiddenException,
    LedgerWriteFailure,
    NotAuthenticatedException,
    NotFoundException,
    UnauthorizedException,
)

__all__ = [
    "AppException",
    "BadRequestException",
    "UnauthorizedException",
    "NotAuthenticatedException",
    "ForbiddenException",
    "NotFoundException",
    "ConflictException",
    "EmptyCartException",
    "LedgerWriteFailure",
    "DiscountBoundsViolation",
]
