"""FastAPI dependencies for the intake module."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.intake.service import IntakeService


def get_intake_service(db: Session = Depends(get_db)) -> IntakeService:
    return IntakeService(db)


IntakeServiceDep = Annotated[IntakeService, Depends(get_intake_service)]
