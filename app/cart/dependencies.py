"""FastAPI dependencies for the cart module."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from app.cart.service import CartService
from app.database import get_db


def get_cart_service(db: Session = Depends(get_db)) -> CartService:
    return CartService(db)


CartServiceDep = Annotated[CartService, Depends(get_cart_service)]
