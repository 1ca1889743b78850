# orderdesk/services/analysis_services.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Mapping, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from orderdesk.repositories.analysis_repositories import (
    AnalysisFilters,
    AnalysisRepository,
    DateRangeFilter,
    Product,
)
from orderdesk.schemas.analysis_schemas import AnalysisResult, HourlyOrders
from orderdesk.services.errors import InvalidInputError, StorageUnavailableError

logger = logging.getLogger(__name__)

ALL = "all"


def percentage(part: int, total: int) -> float:
    """part/total*100, or exactly 0 when there is nothing to divide by."""
    if total == 0:
        return 0.0
    return part / total * 100


class AnalysisService:
    """
    Sales analytics over the orders table.
    One code path serves every product/date combination: the tokens are parsed
    into AnalysisFilters, then a totals query and an hourly query run in the
    same session.
    """

    def __init__(
        self,
        repository: AnalysisRepository,
        date_ranges: Mapping[str, Tuple[datetime, datetime]],
    ):
        self.repository = repository
        self.date_ranges: Dict[str, Tuple[datetime, datetime]] = dict(date_ranges)

    def build_filters(self, product: Optional[str] = ALL, date: Optional[str] = ALL) -> AnalysisFilters:
        product = product or ALL
        date = date or ALL

        try:
            selected = Product(product)
        except ValueError:
            raise InvalidInputError(
                f"Unknown product {product!r}; expected one of {[p.value for p in Product]}"
            )

        date_range = None
        if date != ALL:
            if date not in self.date_ranges:
                raise InvalidInputError(
                    f"Unknown date range {date!r}; expected one of {[ALL, *self.date_ranges]}"
                )
            start, end = self.date_ranges[date]
            date_range = DateRangeFilter(name=date, start=start, end=end)

        return AnalysisFilters(product=selected, date_range=date_range)

    def analyze(self, product: Optional[str] = ALL, date: Optional[str] = ALL) -> AnalysisResult:
        filters = self.build_filters(product, date)

        try:
            totals = self.repository.totals(filters)
            hourly = self.repository.hourly(filters)
        except SQLAlchemyError as e:
            self.repository.db.rollback()
            logger.exception(
                "[analysis] query failed",
                extra={"product": filters.product.value, "date": date or ALL},
            )
            raise StorageUnavailableError("Could not compute analytics") from e

        # MySQL returns DECIMAL for SUM(); normalise before deriving rates.
        total_orders = int(totals.total_orders or 0)
        cashier_orders = int(totals.cashier_orders or 0)
        mobile_orders = int(totals.mobile_orders or 0)
        bad_debt_orders = int(totals.bad_debt_orders or 0)

        result = AnalysisResult(
            product=filters.product.value,
            date=filters.date_range.name if filters.date_range else ALL,
            total_orders=total_orders,
            total_sales=int(totals.total_sales or 0),
            total_revenue=float(totals.total_revenue or 0),
            bad_debt_orders=bad_debt_orders,
            cashier_orders=cashier_orders,
            mobile_orders=mobile_orders,
            cashier_percentage=percentage(cashier_orders, total_orders),
            mobile_percentage=percentage(mobile_orders, total_orders),
            bad_debt_rate=percentage(bad_debt_orders, total_orders),
            hourly_orders=[
                HourlyOrders(hour=int(row.hour), total_orders=int(row.total_orders))
                for row in hourly
            ],
        )
        logger.debug(
            "analysis computed",
            extra={"product": result.product, "date": result.date, "total_orders": total_orders},
        )
        return result
