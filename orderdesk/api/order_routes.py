from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from orderdesk.core.database import get_db
from orderdesk.repositories.order_repositories import OrderRepository
from orderdesk.schemas.order_schemas import (
    MessageResponse,
    OrderCreate,
    OrderCreatedResponse,
    OrderResponse,
    OrderStatusUpdate,
)
from orderdesk.services.errors import (
    InvalidInputError,
    NotFoundError,
    StorageUnavailableError,
)
from orderdesk.services.order_services import OrderService

router = APIRouter(tags=["orders"])
logger = logging.getLogger(__name__)


# ---------- Dependency injection ----------
def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    """Builds an OrderService on the request's session."""
    return OrderService(OrderRepository(db))


# ---------- Endpoints ----------

@router.get("/api/orders", response_model=List[OrderResponse])
def list_orders(svc: OrderService = Depends(get_order_service)):
    """List every order, unfiltered."""
    try:
        return svc.get_all_orders()
    except StorageUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.put("/api/orders/{order_id}", response_model=MessageResponse)
def update_order_status(
    order_id: str,
    status_update: OrderStatusUpdate,
    svc: OrderService = Depends(get_order_service),
):
    """Set the status (1 pending, 2 fulfilled, 3 bad debt) of an order."""
    try:
        svc.update_order_status(order_id, status_update.status)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StorageUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return {"message": "Status updated"}


@router.post("/receive", response_model=OrderCreatedResponse)
def receive_order(order_in: OrderCreate, svc: OrderService = Depends(get_order_service)):
    """Record a new order coming from a sales channel."""
    logger.info("Receiving order for buyer %s", order_in.buyer_id)
    try:
        outcome = svc.create_order(order_in)
    except StorageUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return {
        "message": "Order received",
        "results": {"insertId": outcome.order_id, "affectedRows": outcome.affected_rows},
    }
