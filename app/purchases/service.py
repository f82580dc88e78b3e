"""Business logic for checkout and fertilizer purchases.

Checkout turns the cart into purchase rows in one commit, applying an
eco-points discount. Debiting the points and clearing the cart happen after
that commit and are best effort: a placed order is never rolled back because
either follow-up failed. A direct "buy now" purchase of one catalog item
follows the same discount and debit rules without touching the cart.
"""

import logging
from datetime import date
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.cart.service import CartService, line_total
from app.common.exceptions import (
    DiscountBoundsViolation,
    EmptyCartException,
    InvalidStatusTransitionException,
    NotFoundException,
)
from app.fertilizers.models import Fertilizer
from app.points.rules import distribute_discount, points_for_discount, validate_discount
from app.points.service import PointsService
from app.purchases.models import FertilizerPurchase, PurchaseStatus
from app.purchases.schemas import CustomerInfo, PurchaseUpdateRequest

logger = logging.getLogger(__name__)

# delivered and cancelled are terminal; admins can still force a status with override
ALLOWED_STATUS_TRANSITIONS: dict[PurchaseStatus, frozenset[PurchaseStatus]] = {
    PurchaseStatus.PENDING: frozenset({PurchaseStatus.CONFIRMED, PurchaseStatus.CANCELLED}),
    PurchaseStatus.CONFIRMED: frozenset({PurchaseStatus.DELIVERED}),
    PurchaseStatus.DELIVERED: frozenset(),
    PurchaseStatus.CANCELLED: frozenset(),
}

# Contact fields an admin may clear by sending null; the rest are required
PURCHASE_CLEARABLE_FIELDS = frozenset({"customer_email"})


def can_transition(current: PurchaseStatus, new: PurchaseStatus) -> bool:
    return new in ALLOWED_STATUS_TRANSITIONS[current]


def _apply_status(purchase: FertilizerPurchase, new: PurchaseStatus, override: bool = False) -> None:
    if not override and not can_transition(purchase.status, new):
        raise InvalidStatusTransitionException(purchase.status.value, new.value)
    purchase.status = new


class CheckoutService:
    def __init__(self, db: Session):
        self.db = db
        self.cart = CartService(db)
        self.points = PointsService(db)

    def _resolve_discount(self, user_id: int, requested: Decimal, purchase_amount: Decimal) -> Decimal:
        """Requested discount, clamped to what the balance and the 50% cap allow."""
        available_points = self.points.get_user_points(user_id)
        try:
            return validate_discount(requested, available_points, purchase_amount)
        except DiscountBoundsViolation as e:
            logger.warning(f"Clamping discount for user {user_id}: {e}")
            return e.allowed

    def _redeem_discount(self, user_id: int, discount: Decimal, purchase_id: int) -> None:
        if discount > 0:
            points = points_for_discount(discount)
            self.points.redeem_points(
                user_id,
                points,
                f"Redeemed {points} points for LKR {discount} discount",
                related_id=purchase_id,
            )

    def purchase_cart_items(
        self,
        user_id: int,
        customer_info: CustomerInfo,
        points_discount_requested: Decimal = Decimal("0"),
    ) -> list[int]:
        """Check out the user's cart. Returns the new purchase ids.

        Raises EmptyCartException without side effects when the cart is empty.
        If the purchase rows cannot be committed, none are kept and the error
        propagates.
        """
        items = self.cart.get_user_cart_items(user_id)
        if not items:
            raise EmptyCartException()

        line_totals = [item.total_amount for item in items]
        total_original_amount = sum(line_totals, Decimal("0.00"))
        discount = self._resolve_discount(user_id, points_discount_requested, total_original_amount)
        line_discounts = distribute_discount(line_totals, discount)

        checkout_id = uuid4().hex
        purchase_date = date.today()
        purchases = [
            FertilizerPurchase(
                user_id=user_id,
                checkout_id=checkout_id,
                fertilizer_id=item.fertilizer_id,
                fertilizer_name=item.fertilizer_name,
                quantity=item.quantity,
                original_amount=item.total_amount,
                points_discount=line_discount,
                total_amount=item.total_amount - line_discount,
                purchase_date=purchase_date,
                status=PurchaseStatus.PENDING,
                delivery_address=customer_info.delivery_address,
                customer_name=customer_info.customer_name,
                customer_phone=customer_info.customer_phone,
                customer_email=customer_info.customer_email,
            )
            for item, line_discount in zip(items, line_discounts)
        ]

        try:
            self.db.add_all(purchases)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Checkout {checkout_id} failed for user {user_id}")
            raise

        purchase_ids = [purchase.id for purchase in purchases]
        logger.info(
            f"Checkout {checkout_id}: {len(purchase_ids)} purchases for user {user_id}, "
            f"total {total_original_amount}, discount {discount}"
        )

        self._redeem_discount(user_id, discount, purchase_ids[0])

        try:
            self.cart.clear_cart(user_id)
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning(
                f"Cart not cleared after checkout {checkout_id} for user {user_id}",
                exc_info=True,
            )

        return purchase_ids

    def purchase_fertilizer(
        self,
        user_id: int,
        fertilizer_id: int,
        quantity: int,
        customer_info: CustomerInfo,
        points_discount_requested: Decimal = Decimal("0"),
    ) -> int:
        """Buy one catalog item directly, bypassing the cart. Returns the purchase id.

        The price comes from the catalog at the time of purchase. The discount
        is clamped and debited the same way as a cart checkout, and the cart
        is left untouched.
        """
        fertilizer = self.db.get(Fertilizer, fertilizer_id)
        if fertilizer is None or not fertilizer.available:
            raise NotFoundException("Fertilizer not found")

        original_amount = line_total(fertilizer.price, quantity)
        discount = self._resolve_discount(user_id, points_discount_requested, original_amount)
        checkout_id = uuid4().hex
        purchase = FertilizerPurchase(
            user_id=user_id,
            checkout_id=checkout_id,
            fertilizer_id=fertilizer.id,
            fertilizer_name=fertilizer.name,
            quantity=quantity,
            original_amount=original_amount,
            points_discount=discount,
            total_amount=original_amount - discount,
            purchase_date=date.today(),
            status=PurchaseStatus.PENDING,
            delivery_address=customer_info.delivery_address,
            customer_name=customer_info.customer_name,
            customer_phone=customer_info.customer_phone,
            customer_email=customer_info.customer_email,
        )

        try:
            self.db.add(purchase)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Direct purchase {checkout_id} failed for user {user_id}")
            raise

        logger.info(
            f"Direct purchase {purchase.id} ({checkout_id}) for user {user_id}: "
            f"{quantity} x {fertilizer.name}, total {original_amount}, discount {discount}"
        )
        self._redeem_discount(user_id, discount, purchase.id)
        return purchase.id

    def get_purchases_by_ids(self, user_id: int, purchase_ids: list[int]) -> list[FertilizerPurchase]:
        if not purchase_ids:
            return []
        result = self.db.execute(
            select(FertilizerPurchase).where(
                FertilizerPurchase.user_id == user_id,
                FertilizerPurchase.id.in_(purchase_ids),
            )
        )
        by_id = {p.id: p for p in result.scalars().all()}
        return [by_id[i] for i in purchase_ids if i in by_id]

    def get_user_purchases(self, user_id: int) -> list[FertilizerPurchase]:
        """All purchases for a user, newest first."""
        result = self.db.execute(
            select(FertilizerPurchase)
            .where(FertilizerPurchase.user_id == user_id)
            .order_by(FertilizerPurchase.created_at.desc(), FertilizerPurchase.id.desc())
        )
        return list(result.scalars().all())

    def get_purchase(self, user_id: int, purchase_id: int) -> FertilizerPurchase:
        purchase = self.db.get(FertilizerPurchase, purchase_id)
        if purchase is None or purchase.user_id != user_id:
            raise NotFoundException("Purchase not found")
        return purchase

    def cancel_purchase(self, user_id: int, purchase_id: int) -> FertilizerPurchase:
        """Cancel a pending purchase. Redeemed points are not refunded."""
        purchase = self.get_purchase(user_id, purchase_id)
        _apply_status(purchase, PurchaseStatus.CANCELLED)
        self.db.commit()
        self.db.refresh(purchase)
        logger.info(f"Purchase {purchase_id} cancelled by user {user_id}")
        return purchase


class PurchaseAdminService:
    def __init__(self, db: Session):
        self.db = db

    def _get(self, purchase_id: int) -> FertilizerPurchase:
        purchase = self.db.get(FertilizerPurchase, purchase_id)
        if purchase is None:
            raise NotFoundException("Purchase not found")
        return purchase

    def list_all_purchases(self, status: PurchaseStatus | None = None) -> list[FertilizerPurchase]:
        stmt = select(FertilizerPurchase).order_by(
            FertilizerPurchase.created_at.desc(), FertilizerPurchase.id.desc()
        )
        if status is not None:
            stmt = stmt.where(FertilizerPurchase.status == status)
        return list(self.db.execute(stmt).scalars().all())

    def update_purchase_status(
        self, purchase_id: int, status: PurchaseStatus, override: bool = False
    ) -> FertilizerPurchase:
        """Move a purchase along its lifecycle.

        Without `override`, only pending -> confirmed|cancelled and
        confirmed -> delivered are accepted.
        """
        purchase = self._get(purchase_id)
        previous = purchase.status
        _apply_status(purchase, status, override=override)
        self.db.commit()
        self.db.refresh(purchase)
        logger.info(
            f"Purchase {purchase_id} status {previous.value} -> {status.value}"
            + (" (override)" if override else "")
        )
        return purchase

    def update_purchase(self, purchase_id: int, data: PurchaseUpdateRequest) -> FertilizerPurchase:
        purchase = self._get(purchase_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field not in PURCHASE_CLEARABLE_FIELDS:
                continue
            setattr(purchase, field, value)
        self.db.commit()
        self.db.refresh(purchase)
        return purchase

    def delete_purchase(self, purchase_id: int) -> None:
        purchase = self._get(purchase_id)
        self.db.delete(purchase)
        self.db.commit()
        logger.info(f"Purchase {purchase_id} deleted by admin")
