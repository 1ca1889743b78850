# orderdesk/services/order_services.py
from __future__ import annotations

import logging
from typing import Any, List

from sqlalchemy.exc import SQLAlchemyError

from orderdesk.models.order_models import Order, OrderStatus
from orderdesk.repositories.order_repositories import InsertOutcome, OrderRepository
from orderdesk.schemas.order_schemas import OrderCreate
from orderdesk.services.errors import (
    InvalidInputError,
    NotFoundError,
    StorageUnavailableError,
)

logger = logging.getLogger(__name__)

VALID_STATUSES = frozenset(int(s) for s in OrderStatus)


def validate_status(value: Any) -> OrderStatus:
    """Accepts only the integers 1, 2 and 3 (no strings, floats or booleans)."""
    if isinstance(value, bool) or not isinstance(value, int) or value not in VALID_STATUSES:
        raise InvalidInputError(f"Invalid status: {value!r}")
    return OrderStatus(value)


def parse_order_id(value: Any) -> int:
    """Ids arrive as path text; one that is not an integer matches no order."""
    try:
        return int(value)
    except (TypeError, ValueError):
        raise NotFoundError(f"Order {value!r} not found")


class OrderService:
    """
    Business layer for orders.
    - Storage errors surface as StorageUnavailableError after a rollback.
    - Status is the only mutable field.
    """

    def __init__(self, repository: OrderRepository):
        self.repository = repository

    # ==========================================================
    # === Read =================================================
    # ==========================================================

    def get_all_orders(self) -> List[Order]:
        try:
            return self.repository.list()
        except SQLAlchemyError as e:
            logger.exception("[order.list] query failed")
            raise StorageUnavailableError("Could not fetch orders") from e

    # ==========================================================
    # === Create ===============================================
    # ==========================================================

    def create_order(self, order_in: OrderCreate) -> InsertOutcome:
        try:
            outcome = self.repository.create(order_in)
        except SQLAlchemyError as e:
            self.repository.db.rollback()
            logger.exception("[order.create] insert failed")
            raise StorageUnavailableError("Could not create order") from e

        logger.info("order created", extra={"order_id": outcome.order_id, "buyer_id": order_in.buyer_id})
        return outcome

    # ==========================================================
    # === Status update ========================================
    # ==========================================================

    def update_order_status(self, order_id: Any, new_status: Any) -> OrderStatus:
        status = validate_status(new_status)
        order_id = parse_order_id(order_id)

        try:
            matched = self.repository.update_status(order_id, int(status))
        except SQLAlchemyError as e:
            self.repository.db.rollback()
            logger.exception("[order.status] update failed", extra={"order_id": order_id})
            raise StorageUnavailableError("Could not update order status") from e

        if matched == 0:
            logger.debug("order not found", extra={"order_id": order_id})
            raise NotFoundError(f"Order {order_id} not found")

        logger.info("order status updated", extra={"order_id": order_id, "to": int(status)})
        return status
