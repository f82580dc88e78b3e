"""Eco-points ledger.

Every change to a user's points is one `PointsTransaction` row plus an
update of the cached `UserProfile.points`, written in the same commit.

Accrual and redemption are a side channel of the action that triggers them:
the waste submission, pickup or purchase is already committed when the
ledger runs, so `award_*` and `redeem_points` log ledger failures and return
instead of raising.
"""

import logging
from collections.abc import Iterable, Mapping

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth.models import UserProfile
from app.common.exceptions import LedgerWriteFailure, UserNotFoundException
from app.points.models import PointsTransaction, PointsTransactionType
from app.points.rules import calculate_pickup_points, calculate_waste_points

logger = logging.getLogger(__name__)


class PointsService:
    def __init__(self, db: Session):
        self.db = db

    def _get_or_create_profile(self, user_id: int) -> UserProfile:
        """Profile to credit or debit; a zero-balance one is created if missing."""
        profile = self.db.get(UserProfile, user_id)
        if profile is None:
            profile = UserProfile(id=user_id, points=0)
            self.db.add(profile)
            self.db.flush()
            self._sync_profile_id_sequence()
            logger.info(f"Created zero-balance profile for user {user_id}")
        return profile

    def _sync_profile_id_sequence(self) -> None:
        """Move the PostgreSQL id sequence past explicitly inserted profile ids.

        Without this, the next registration would draw an id that a
        placeholder profile already holds. SQLite assigns max(id) + 1 on its own.
        """
        if self.db.get_bind().dialect.name != "postgresql":
            return
        self.db.execute(
            text(
                "SELECT setval(pg_get_serial_sequence('user_profiles', 'id'), "
                "(SELECT MAX(id) FROM user_profiles))"
            )
        )

    def _apply_balance_change(self, profile: UserProfile, points_change: int) -> int:
        """Read-modify-write of the cached balance, floored at 0.

        Concurrent writers for the same user may lose an update here; the
        transaction log stays complete and `reconcile_balance` repairs the
        cache.
        """
        profile.points = max(0, (profile.points or 0) + points_change)
        return profile.points

    # ========== Ledger ==========

    def add_points_transaction(
        self,
        user_id: int,
        points_change: int,
        transaction_type: PointsTransactionType,
        description: str,
        related_id: str | int | None = None,
    ) -> int:
        """Append a ledger entry and update the cached balance.

        Returns the new transaction id. Raises LedgerWriteFailure if either
        write fails; nothing is persisted in that case.
        """
        try:
            profile = self._get_or_create_profile(user_id)
            balance_after = self._apply_balance_change(profile, points_change)
            entry = PointsTransaction(
                user_id=user_id,
                points_change=points_change,
                type=PointsTransactionType(transaction_type),
                description=description,
                related_id=str(related_id) if related_id is not None else None,
                balance_after=balance_after,
            )
            self.db.add(entry)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise LedgerWriteFailure(user_id, points_change, str(e)) from e

        logger.info(
            f"Points {points_change:+d} ({entry.type.value}) for user {user_id}, "
            f"balance now {balance_after}"
        )
        return entry.id

    def get_user_points(self, user_id: int) -> int:
        """Cached balance. A missing profile, or a failed read, counts as 0."""
        try:
            profile = self.db.get(UserProfile, user_id)
        except SQLAlchemyError:
            logger.exception(f"Failed to read points for user {user_id}")
            return 0
        if profile is None:
            return 0
        return profile.points or 0

    def get_user_points_history(
        self, user_id: int, limit: int | None = None
    ) -> list[PointsTransaction]:
        """User's transactions, newest first."""
        stmt = (
            select(PointsTransaction)
            .where(PointsTransaction.user_id == user_id)
            .order_by(PointsTransaction.created_at.desc(), PointsTransaction.id.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def reconcile_balance(self, user_id: int) -> int:
        """Rebuild the cached balance from the transaction log.

        Replays entries oldest first with the same 0 floor that
        `_apply_balance_change` uses.
        """
        stmt = (
            select(PointsTransaction.points_change)
            .where(PointsTransaction.user_id == user_id)
            .order_by(PointsTransaction.created_at.asc(), PointsTransaction.id.asc())
        )
        balance = 0
        for points_change in self.db.execute(stmt).scalars():
            balance = max(0, balance + points_change)

        profile = self.db.get(UserProfile, user_id)
        if profile is None:
            raise UserNotFoundException()
        if profile.points != balance:
            logger.warning(
                f"Points drift for user {user_id}: cached {profile.points}, ledger {balance}"
            )
        profile.points = balance
        self.db.commit()
        return balance

    # ========== Accrual ==========

    def award_waste_points(
        self,
        user_id: int,
        materials: Iterable[str],
        quantities: Mapping[str, float],
        waste_id: str | int,
    ) -> int:
        """Credit points for a waste submission. Returns the points recorded."""
        points = calculate_waste_points(materials, quantities)
        if points <= 0:
            return 0

        try:
            self.add_points_transaction(
                user_id,
                points,
                PointsTransactionType.EARNED_WASTE,
                f"Earned {points} points for waste submission",
                related_id=waste_id,
            )
        except LedgerWriteFailure as e:
            logger.warning(f"Waste points not awarded for submission {waste_id}: {e}")
            return 0
        return points

    def award_pickup_points(
        self,
        user_id: int,
        materials: Iterable[str],
        quantities: Mapping[str, float],
        pickup_id: str | int,
    ) -> int:
        """Credit points, including the scheduling bonus, for a recycle pickup."""
        points = calculate_pickup_points(materials, quantities)
        if points <= 0:
            return 0

        try:
            self.add_points_transaction(
                user_id,
                points,
                PointsTransactionType.EARNED_RECYCLE,
                f"Earned {points} points for scheduled recycle pickup",
                related_id=pickup_id,
            )
        except LedgerWriteFailure as e:
            logger.warning(f"Pickup points not awarded for pickup {pickup_id}: {e}")
            return 0
        return points

    # ========== Redemption ==========

    def redeem_points(
        self,
        user_id: int,
        points: int,
        description: str,
        related_id: str | int | None = None,
    ) -> int | None:
        """Debit points spent on a discount.

        Returns the transaction id, or None if nothing was recorded.
        """
        if points <= 0:
            return None

        try:
            return self.add_points_transaction(
                user_id,
                -points,
                PointsTransactionType.SPENT_DISCOUNT,
                description,
                related_id=related_id,
            )
        except LedgerWriteFailure as e:
            logger.warning(f"Points redemption not recorded for {related_id}: {e}")
            return None
