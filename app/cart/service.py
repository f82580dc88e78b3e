"""Business logic for the fertilizer cart."""

import logging
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.cart.models import CartItem
from app.common.exceptions import NotFoundException
from app.fertilizers.models import Fertilizer

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def line_total(unit_price: Decimal, quantity: int) -> Decimal:
    return (Decimal(unit_price) * quantity).quantize(CENT, rounding=ROUND_HALF_UP)


class CartService:
    def __init__(self, db: Session):
        self.db = db

    def _get_owned_item(self, user_id: int, cart_item_id: int) -> CartItem:
        item = self.db.get(CartItem, cart_item_id)
        if item is None or item.user_id != user_id:
            raise NotFoundException("Cart item not found")
        return item

    def add_to_cart(self, user_id: int, fertilizer_id: int, quantity: int) -> CartItem:
        """Add a new line for a fertilizer, snapshotting its current price."""
        fertilizer = self.db.get(Fertilizer, fertilizer_id)
        if fertilizer is None or not fertilizer.available:
            raise NotFoundException("Fertilizer not found")

        item = CartItem(
            user_id=user_id,
            fertilizer_id=fertilizer.id,
            fertilizer_name=fertilizer.name,
            fertilizer_unit_price=fertilizer.price,
            fertilizer_unit=fertilizer.unit,
            quantity=quantity,
            total_amount=line_total(fertilizer.price, quantity),
        )
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        logger.debug(f"Cart item {item.id} added for user {user_id}")
        return item

    def get_user_cart_items(self, user_id: int) -> list[CartItem]:
        """Cart items, most recently added first."""
        result = self.db.execute(
            select(CartItem)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.created_at.desc(), CartItem.id.desc())
        )
        return list(result.scalars().all())

    def update_cart_item_quantity(
        self, user_id: int, cart_item_id: int, quantity: int
    ) -> CartItem | None:
        """Set quantity and recompute the line total.

        A quantity of zero or less removes the item and returns None.
        """
        item = self._get_owned_item(user_id, cart_item_id)
        if quantity <= 0:
            self.db.delete(item)
            self.db.commit()
            logger.debug(f"Cart item {cart_item_id} removed by zero quantity")
            return None

        item.quantity = quantity
        item.total_amount = line_total(item.fertilizer_unit_price, quantity)
        self.db.commit()
        self.db.refresh(item)
        return item

    def remove_from_cart(self, user_id: int, cart_item_id: int) -> None:
        item = self._get_owned_item(user_id, cart_item_id)
        self.db.delete(item)
        self.db.commit()

    def clear_cart(self, user_id: int) -> int:
        """Delete every cart item of the user in one commit. Returns the count."""
        result = self.db.execute(delete(CartItem).where(CartItem.user_id == user_id))
        self.db.commit()
        logger.debug(f"Cleared {result.rowcount} cart items for user {user_id}")
        return result.rowcount

