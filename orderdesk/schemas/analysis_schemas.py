from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class HourlyOrders(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    hour: int = Field(..., ge=0, le=23)
    total_orders: int = Field(..., alias="totalOrders")


class AnalysisResult(BaseModel):
    """Composite analytics object returned by the analysis endpoints."""

    model_config = ConfigDict(populate_by_name=True)

    product: str
    date: str

    total_orders: int = Field(..., alias="totalOrders")
    total_sales: int = Field(..., alias="totalSales")
    total_revenue: float = Field(..., alias="totalRevenue")
    bad_debt_orders: int = Field(..., alias="badDebtOrders")
    cashier_orders: int = Field(..., alias="cashierOrders")
    mobile_orders: int = Field(..., alias="mobileOrders")

    cashier_percentage: float = Field(..., alias="cashierPercentage")
    mobile_percentage: float = Field(..., alias="mobilePercentage")
    bad_debt_rate: float = Field(..., alias="badDebtRate")

    hourly_orders: List[HourlyOrders] = Field(default_factory=list, alias="hourlyOrders")
