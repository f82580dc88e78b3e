"""FastAPI dependencies for the eco-points module."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.points.service import PointsService


def get_points_service(db: Session = Depends(get_db)) -> PointsService:
    return PointsService(db)


PointsServiceDep = Annotated[PointsService, Depends(get_points_service)]
