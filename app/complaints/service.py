"""Business logic for complaints.

Users file, edit and withdraw their own complaints; admins mark them
resolved. Editing a complaint puts it back to pending so it is reviewed
again.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.common.exceptions import NotFoundException
from app.complaints.models import Complaint, ComplaintStatus
from app.complaints.schemas import ComplaintCreateRequest, ComplaintUpdateRequest

logger = logging.getLogger(__name__)


class ComplaintService:
    def __init__(self, db: Session):
        self.db = db

    def create_complaint(self, user_id: int, data: ComplaintCreateRequest) -> Complaint:
        complaint = Complaint(
            user_id=user_id,
            complaint=data.complaint,
            image_url=data.image_url,
            status=ComplaintStatus.PENDING,
        )
        self.db.add(complaint)
        self.db.commit()
        self.db.refresh(complaint)
        logger.info(f"Complaint {complaint.id} filed by user {user_id}")
        return complaint

    def list_user_complaints(self, user_id: int) -> list[Complaint]:
        """A user's complaints, newest first."""
        result = self.db.execute(
            select(Complaint)
            .where(Complaint.user_id == user_id)
            .order_by(Complaint.created_at.desc(), Complaint.id.desc())
        )
        return list(result.scalars().all())

    def get_complaint(self, user_id: int, complaint_id: int) -> Complaint:
        complaint = self.db.get(Complaint, complaint_id)
        if complaint is None or complaint.user_id != user_id:
            raise NotFoundException("Complaint not found")
        return complaint

    def update_complaint(
        self, user_id: int, complaint_id: int, data: ComplaintUpdateRequest
    ) -> Complaint:
        complaint = self.get_complaint(user_id, complaint_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            # The text is required; image_url may be cleared
            if field == "complaint" and value is None:
                continue
            setattr(complaint, field, value)
        complaint.status = ComplaintStatus.PENDING
        self.db.commit()
        self.db.refresh(complaint)
        return complaint

    def delete_complaint(self, user_id: int, complaint_id: int) -> None:
        complaint = self.get_complaint(user_id, complaint_id)
        self.db.delete(complaint)
        self.db.commit()

    # ========== Admin ==========

    def list_all_complaints(self, status: ComplaintStatus | None = None) -> list[Complaint]:
        stmt = select(Complaint).order_by(Complaint.created_at.desc(), Complaint.id.desc())
        if status is not None:
            stmt = stmt.where(Complaint.status == status)
        return list(self.db.execute(stmt).scalars().all())

    def admin_update_status(self, complaint_id: int, status: ComplaintStatus) -> Complaint:
        complaint = self.db.get(Complaint, complaint_id)
        if complaint is None:
            raise NotFoundException("Complaint not found")
        complaint.status = status
        self.db.commit()
        self.db.refresh(complaint)
        logger.info(f"Complaint {complaint_id} set to {status.value} by admin")
        return complaint
