"""FastAPI dependencies for the complaints module."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from app.complaints.service import ComplaintService
from app.database import get_db


def get_complaint_service(db: Session = Depends(get_db)) -> ComplaintService:
    return ComplaintService(db)


ComplaintServiceDep = Annotated[ComplaintService, Depends(get_complaint_service)]
