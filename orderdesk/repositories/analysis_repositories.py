from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from sqlalchemy import ColumnElement, case, extract, func, or_, select
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

from orderdesk.models.order_models import Order, OrderStatus


class Product(str, Enum):
    ALL = "all"
    PRODUCT1 = "product1"
    PRODUCT2 = "product2"


# Token -> quantity column. Columns are only ever picked from here.
PRODUCT_COLUMNS = {
    Product.PRODUCT1: Order.product1_quantity,
    Product.PRODUCT2: Order.product2_quantity,
}


@dataclass(frozen=True)
class ProductFilter:
    product: Product

    def clause(self) -> ColumnElement[bool]:
        return PRODUCT_COLUMNS[self.product] != 0


@dataclass(frozen=True)
class DateRangeFilter:
    name: str
    start: datetime
    end: datetime

    def clause(self) -> ColumnElement[bool]:
        return (Order.timestamp >= self.start) & (Order.timestamp < self.end)


@dataclass(frozen=True)
class AnalysisFilters:
    """
    Ordered set of typed filter clauses for the analytics queries.
    An unset product/date_range means "all" and contributes no clause.
    """

    product: Product = Product.ALL
    date_range: Optional[DateRangeFilter] = None

    def filters(self) -> List[Union[ProductFilter, DateRangeFilter]]:
        filters: List[Union[ProductFilter, DateRangeFilter]] = []
        if self.product is not Product.ALL:
            filters.append(ProductFilter(self.product))
        if self.date_range is not None:
            filters.append(self.date_range)
        return filters

    def clauses(self) -> List[ColumnElement[bool]]:
        return [f.clause() for f in self.filters()]

    def units(self) -> ColumnElement:
        """Quantity expression summed into totalSales."""
        if self.product is Product.ALL:
            return Order.product1_quantity + Order.product2_quantity
        return PRODUCT_COLUMNS[self.product]


def _count_if(condition: ColumnElement[bool]) -> ColumnElement:
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


class AnalysisRepository:
    """Aggregate read queries over orders."""

    def __init__(self, db: Session):
        self.db = db

    def totals(self, filters: AnalysisFilters) -> Row:
        stmt = select(
            func.count(Order.id).label("total_orders"),
            func.coalesce(func.sum(filters.units()), 0).label("total_sales"),
            func.coalesce(func.sum(Order.total_price), 0).label("total_revenue"),
            _count_if(Order.status == int(OrderStatus.BAD_DEBT)).label("bad_debt_orders"),
            _count_if(Order.cashier == 1).label("cashier_orders"),
            _count_if(or_(Order.cashier.is_(None), Order.cashier != 1)).label("mobile_orders"),
        ).where(*filters.clauses())
        return self.db.execute(stmt).one()

    def hourly(self, filters: AnalysisFilters) -> List[Row]:
        """(hour, total_orders) for every hour that has at least one order, ascending."""
        hour = extract("hour", Order.timestamp).label("hour")
        stmt = (
            select(hour, func.count(Order.id).label("total_orders"))
            .where(*filters.clauses())
            .group_by(hour)
            .order_by(hour)
        )
        return list(self.db.execute(stmt).all())
