"""Business logic for the fertilizer catalog."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.common.exceptions import NotFoundException
from app.fertilizers.models import Fertilizer
from app.fertilizers.schemas import FertilizerCreateRequest, FertilizerUpdateRequest

logger = logging.getLogger(__name__)


class FertilizerService:
    def __init__(self, db: Session):
        self.db = db

    def list_fertilizers(self, include_unavailable: bool = False) -> list[Fertilizer]:
        stmt = select(Fertilizer).order_by(Fertilizer.created_at.desc(), Fertilizer.id.desc())
        if not include_unavailable:
            stmt = stmt.where(Fertilizer.available.is_(True))
        return list(self.db.execute(stmt).scalars().all())

    def get_fertilizer(self, fertilizer_id: int) -> Fertilizer:
        fertilizer = self.db.get(Fertilizer, fertilizer_id)
        if fertilizer is None:
            raise NotFoundException("Fertilizer not found")
        return fertilizer

    def add_fertilizer(self, data: FertilizerCreateRequest) -> Fertilizer:
        fertilizer = Fertilizer(**data.model_dump())
        self.db.add(fertilizer)
        self.db.commit()
        self.db.refresh(fertilizer)
        logger.info(f"Fertilizer {fertilizer.id} '{fertilizer.name}' added")
        return fertilizer

    def update_fertilizer(self, fertilizer_id: int, data: FertilizerUpdateRequest) -> Fertilizer:
        """Update catalog fields. Items already in carts keep their price snapshot."""
        fertilizer = self.get_fertilizer(fertilizer_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(fertilizer, field, value)
        self.db.commit()
        self.db.refresh(fertilizer)
        return fertilizer

    def delete_fertilizer(self, fertilizer_id: int) -> None:
        fertilizer = self.get_fertilizer(fertilizer_id)
        self.db.delete(fertilizer)
        self.db.commit()
        logger.info(f"Fertilizer {fertilizer_id} deleted")
