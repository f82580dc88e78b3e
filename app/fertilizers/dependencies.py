"""FastAPI dependencies for the fertilizer catalog."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.fertilizers.service import FertilizerService


def get_fertilizer_service(db: Session = Depends(get_db)) -> FertilizerService:
    return FertilizerService(db)


FertilizerServiceDep = Annotated[FertilizerService, Depends(get_fertilizer_service)]
