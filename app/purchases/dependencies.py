"""FastAPI dependencies for the purchases module."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.purchases.service import CheckoutService, PurchaseAdminService


def get_checkout_service(db: Session = Depends(get_db)) -> CheckoutService:
    return CheckoutService(db)


def get_purchase_admin_service(db: Session = Depends(get_db)) -> PurchaseAdminService:
    return PurchaseAdminService(db)


CheckoutServiceDep = Annotated[CheckoutService, Depends(get_checkout_service)]
PurchaseAdminServiceDep = Annotated[PurchaseAdminService, Depends(get_purchase_admin_service)]
