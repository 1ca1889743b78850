from __future__ import annotations

from datetime import datetime
from enum import IntEnum
from typing import Optional

from sqlalchemy import DateTime, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from orderdesk.core.database import Base


class OrderStatus(IntEnum):
    PENDING = 1
    FULFILLED = 2
    BAD_DEBT = 3


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    buyer_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    product1_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    product2_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_price: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=False, default=0
    )
    # Plain integer column: the 1..3 domain is checked by OrderService.
    status: Mapped[int] = mapped_column(
        Integer, nullable=False, default=int(OrderStatus.PENDING)
    )
    # 1 = cashier channel; NULL or anything else = mobile channel
    cashier: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    timestamp: Mapped[datetime] = mapped_column(
        DateTime, default=func.now(), nullable=False, index=True
    )
