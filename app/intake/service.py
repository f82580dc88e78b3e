"""Business logic for recycle pickups and waste submissions.

Creating either record is the trigger for eco-points accrual. The record is
committed first; accrual runs afterwards and cannot undo or fail it.
"""

import logging
from collections.abc import Iterable, Mapping
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.common.exceptions import ConflictException, NotFoundException
from app.intake.models import IntakeStatus, RecyclePickup, WasteSubmission
from app.intake.schemas import (
    PickupCreateRequest,
    PickupUpdateRequest,
    WasteCreateRequest,
    WasteUpdateRequest,
)
from app.points.rules import normalize_material
from app.points.service import PointsService

logger = logging.getLogger(__name__)

# LKR paid per kg of sorted recyclables
RECYCLE_PRICES_PER_KG = {
    "metal": Decimal("20"),
    "paper": Decimal("15"),
    "glass": Decimal("10"),
    "cardboard": Decimal("12"),
    "plastic": Decimal("18"),
    "electronic": Decimal("25"),
}

# Optional waste fields a user may clear by sending null
WASTE_CLEARABLE_FIELDS = frozenset({"special_instructions", "image_url"})


def calculate_recycle_payout(
    materials: Iterable[str], quantities: Mapping[str, float]
) -> Decimal:
    """LKR paid for a pickup; materials without a price pay nothing."""
    total = Decimal("0")
    for material in dict.fromkeys(materials):
        kg = Decimal(str(quantities.get(material, 0) or 0))
        if kg <= 0:
            continue
        key = material.strip().lower()
        # cardboard has its own price even though it earns points as paper
        price = RECYCLE_PRICES_PER_KG.get(key) or RECYCLE_PRICES_PER_KG.get(
            normalize_material(key), Decimal("0")
        )
        total += kg * price
    return total.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class IntakeService:
    def __init__(self, db: Session):
        self.db = db
        self.points = PointsService(db)

    def _record_points_awarded(self, record: RecyclePickup | WasteSubmission, points: int) -> None:
        """Store the accrued points on the record; failure leaves it at 0."""
        try:
            record.points_awarded = points
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning(
                f"Could not store points_awarded={points} on {record.__tablename__} {record.id}",
                exc_info=True,
            )
        self.db.refresh(record)

    def _get_owned(self, model, user_id: int, record_id: int, label: str):
        record = self.db.get(model, record_id)
        if record is None or record.user_id != user_id:
            raise NotFoundException(f"{label} not found")
        return record

    def _require_scheduled(self, record, label: str) -> None:
        if record.status != IntakeStatus.SCHEDULED:
            raise ConflictException(f"{label} is already {record.status.value}")

    def _apply_updates(self, record, updates: dict) -> None:
        for field, value in updates.items():
            setattr(record, field, value)
        self.db.commit()
        self.db.refresh(record)

    # ========== Recycle pickups ==========

    def create_pickup(self, user_id: int, data: PickupCreateRequest) -> RecyclePickup:
        """Save a pickup request, then credit pickup points for it."""
        pickup = RecyclePickup(
            user_id=user_id,
            materials=list(data.materials),
            quantities=dict(data.quantities),
            total_amount=calculate_recycle_payout(data.materials, data.quantities),
            payment_method=data.payment_method,
            pickup_date=data.pickup_date,
            pickup_time=data.pickup_time,
            pickup_address=data.pickup_address,
            status=IntakeStatus.SCHEDULED,
        )
        self.db.add(pickup)
        self.db.commit()
        self.db.refresh(pickup)
        logger.info(f"Pickup {pickup.id} scheduled for user {user_id}")

        points = self.points.award_pickup_points(
            user_id, pickup.materials, pickup.quantities, pickup.id
        )
        if points:
            self._record_points_awarded(pickup, points)
        return pickup

    def list_user_pickups(self, user_id: int) -> list[RecyclePickup]:
        result = self.db.execute(
            select(RecyclePickup)
            .where(RecyclePickup.user_id == user_id)
            .order_by(RecyclePickup.created_at.desc(), RecyclePickup.id.desc())
        )
        return list(result.scalars().all())

    def get_pickup(self, user_id: int, pickup_id: int) -> RecyclePickup:
        return self._get_owned(RecyclePickup, user_id, pickup_id, "Pickup")

    def update_pickup(
        self, user_id: int, pickup_id: int, data: PickupUpdateRequest
    ) -> RecyclePickup:
        """Reschedule a pickup that has not been completed or cancelled."""
        pickup = self.get_pickup(user_id, pickup_id)
        self._require_scheduled(pickup, "Pickup")
        self._apply_updates(pickup, data.model_dump(exclude_unset=True, exclude_none=True))
        return pickup

    def cancel_pickup(self, user_id: int, pickup_id: int) -> RecyclePickup:
        pickup = self.get_pickup(user_id, pickup_id)
        self._require_scheduled(pickup, "Pickup")
        # Accrued points are kept; reversal on cancellation is undefined business behavior
        self._apply_updates(pickup, {"status": IntakeStatus.CANCELLED})
        logger.info(
            f"Pickup {pickup.id} cancelled; {pickup.points_awarded} points left in place"
        )
        return pickup

    def delete_pickup(self, user_id: int, pickup_id: int) -> None:
        pickup = self.get_pickup(user_id, pickup_id)
        self.db.delete(pickup)
        self.db.commit()

    # ========== Waste submissions ==========

    def create_waste_submission(self, user_id: int, data: WasteCreateRequest) -> WasteSubmission:
        """Save a waste submission, then credit waste points for it."""
        submission = WasteSubmission(
            user_id=user_id,
            waste_type=data.waste_type,
            materials=list(data.materials),
            quantities=dict(data.quantities),
            pickup_date=data.pickup_date,
            time_slot=data.time_slot,
            special_instructions=data.special_instructions,
            image_url=data.image_url,
            status=IntakeStatus.SCHEDULED,
        )
        self.db.add(submission)
        self.db.commit()
        self.db.refresh(submission)
        logger.info(f"Waste submission {submission.id} saved for user {user_id}")

        points = self.points.award_waste_points(
            user_id, submission.materials, submission.quantities, submission.id
        )
        if points:
            self._record_points_awarded(submission, points)
        return submission

    def list_user_waste(self, user_id: int) -> list[WasteSubmission]:
        result = self.db.execute(
            select(WasteSubmission)
            .where(WasteSubmission.user_id == user_id)
            .order_by(WasteSubmission.created_at.desc(), WasteSubmission.id.desc())
        )
        return list(result.scalars().all())

    def get_waste_submission(self, user_id: int, waste_id: int) -> WasteSubmission:
        return self._get_owned(WasteSubmission, user_id, waste_id, "Waste submission")

    def update_waste_submission(
        self, user_id: int, waste_id: int, data: WasteUpdateRequest
    ) -> WasteSubmission:
        submission = self.get_waste_submission(user_id, waste_id)
        self._require_scheduled(submission, "Waste submission")
        updates = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field in WASTE_CLEARABLE_FIELDS
        }
        self._apply_updates(submission, updates)
        return submission

    def cancel_waste_submission(self, user_id: int, waste_id: int) -> WasteSubmission:
        submission = self.get_waste_submission(user_id, waste_id)
        self._require_scheduled(submission, "Waste submission")
        self._apply_updates(submission, {"status": IntakeStatus.CANCELLED})
        logger.info(
            f"Waste submission {submission.id} cancelled; "
            f"{submission.points_awarded} points left in place"
        )
        return submission

    def delete_waste_submission(self, user_id: int, waste_id: int) -> None:
        submission = self.get_waste_submission(user_id, waste_id)
        self.db.delete(submission)
        self.db.commit()

    # ========== Admin ==========

    def list_all_pickups(self, status: IntakeStatus | None = None) -> list[RecyclePickup]:
        stmt = select(RecyclePickup).order_by(
            RecyclePickup.created_at.desc(), RecyclePickup.id.desc()
        )
        if status is not None:
            stmt = stmt.where(RecyclePickup.status == status)
        return list(self.db.execute(stmt).scalars().all())

    def list_all_waste(self, status: IntakeStatus | None = None) -> list[WasteSubmission]:
        stmt = select(WasteSubmission).order_by(
            WasteSubmission.created_at.desc(), WasteSubmission.id.desc()
        )
        if status is not None:
            stmt = stmt.where(WasteSubmission.status == status)
        return list(self.db.execute(stmt).scalars().all())

    def admin_update_pickup_status(self, pickup_id: int, status: IntakeStatus) -> RecyclePickup:
        pickup = self.db.get(RecyclePickup, pickup_id)
        if pickup is None:
            raise NotFoundException("Pickup not found")
        self._apply_updates(pickup, {"status": status})
        logger.info(f"Pickup {pickup_id} set to {status.value} by admin")
        return pickup

    def admin_update_waste_status(self, waste_id: int, status: IntakeStatus) -> WasteSubmission:
        submission = self.db.get(WasteSubmission, waste_id)
        if submission is None:
            raise NotFoundException("Waste submission not found")
        self._apply_updates(submission, {"status": status})
        logger.info(f"Waste submission {waste_id} set to {status.value} by admin")
        return submission
