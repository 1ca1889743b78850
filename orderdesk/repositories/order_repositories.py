from __future__ import annotations

from typing import List, NamedTuple

from sqlalchemy import insert, select, update
from sqlalchemy.orm import Session

from orderdesk.models.order_models import Order, OrderStatus
from orderdesk.schemas.order_schemas import OrderCreate


class InsertOutcome(NamedTuple):
    order_id: int
    affected_rows: int


class OrderRepository:
    """Data Access Layer for the Order model."""

    def __init__(self, db: Session):
        self.db = db

    def list(self) -> List[Order]:
        """All orders, unfiltered, in storage order."""
        return list(self.db.scalars(select(Order)))

    # ---------- CREATE ----------
    def create(self, order_in: OrderCreate) -> InsertOutcome:
        """
        Single INSERT; id and timestamp are assigned by the storage layer.
        Returns the new id with the driver's affected-row count.
        """
        result = self.db.execute(
            insert(Order).values(
                buyer_id=order_in.buyer_id,
                product1_quantity=order_in.product1_quantity,
                product2_quantity=order_in.product2_quantity,
                total_price=order_in.total_price,
                status=int(OrderStatus.PENDING),
            )
        )
        outcome = InsertOutcome(result.inserted_primary_key[0], result.rowcount)
        self.db.commit()
        return outcome

    # ---------- UPDATE ----------
    def update_status(self, order_id: int, status: int) -> int:
        """
        Single UPDATE statement on `status` only.
        Returns the number of matched rows (0 when the id is unknown).
        """
        result = self.db.execute(
            update(Order)
            .where(Order.id == order_id)
            .values(status=status)
            .execution_options(synchronize_session=False)
        )
        matched = result.rowcount
        self.db.commit()
        return matched
