import pytest
from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock
from sqlalchemy.exc import OperationalError

from orderdesk.repositories.analysis_repositories import Product
from orderdesk.services.analysis_services import AnalysisService, percentage
from orderdesk.services.errors import InvalidInputError, StorageUnavailableError

RANGES = {
    "week1": (datetime(2024, 10, 14), datetime(2024, 10, 21)),
    "week2": (datetime(2024, 10, 21), datetime(2024, 10, 28)),
}


def _totals(**overrides):
    values = dict(
        total_orders=0,
        total_sales=0,
        total_revenue=0,
        bad_debt_orders=0,
        cashier_orders=0,
        mobile_orders=0,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.fixture
def repo():
    repo = MagicMock()
    repo.totals.return_value = _totals()
    repo.hourly.return_value = []
    return repo


@pytest.fixture
def service(repo):
    return AnalysisService(repo, RANGES)


# ==========================================================
# percentage
# ==========================================================

def test_percentage_zero_total_is_exactly_zero():
    assert percentage(0, 0) == 0
    assert percentage(5, 0) == 0


def test_percentage_ratio():
    assert percentage(1, 4) == 25.0


# ==========================================================
# build_filters
# ==========================================================

def test_build_filters_defaults_to_all(service):
    filters = service.build_filters()
    assert filters.product is Product.ALL
    assert filters.date_range is None
    assert filters.filters() == []


def test_build_filters_none_means_all(service):
    filters = service.build_filters(None, None)
    assert filters.product is Product.ALL
    assert filters.date_range is None


def test_build_filters_named_range(service):
    filters = service.build_filters("product2", "week2")
    assert filters.product is Product.PRODUCT2
    assert filters.date_range.name == "week2"
    assert (filters.date_range.start, filters.date_range.end) == RANGES["week2"]


def test_build_filters_unknown_product(service):
    with pytest.raises(InvalidInputError):
        service.build_filters("product3", "all")


def test_build_filters_unknown_date_is_rejected(service):
    with pytest.raises(InvalidInputError) as e:
        service.build_filters("all", "week9")
    assert "week9" in str(e.value)


# ==========================================================
# analyze
# ==========================================================

def test_analyze_empty_result_has_zero_rates(service):
    result = service.analyze("product1", "week1")

    assert result.total_orders == 0
    assert result.cashier_percentage == 0
    assert result.mobile_percentage == 0
    assert result.bad_debt_rate == 0
    assert result.hourly_orders == []


def test_analyze_derives_rates_and_normalises_decimals(service, repo):
    repo.totals.return_value = _totals(
        total_orders=4,
        total_sales=Decimal("9"),
        total_revenue=Decimal("120.50"),
        bad_debt_orders=Decimal("1"),
        cashier_orders=Decimal("3"),
        mobile_orders=Decimal("1"),
    )
    repo.hourly.return_value = [
        SimpleNamespace(hour=9, total_orders=1),
        SimpleNamespace(hour=14, total_orders=3),
    ]

    result = service.analyze()

    assert result.total_sales == 9
    assert result.total_revenue == 120.5
    assert result.cashier_percentage == 75.0
    assert result.mobile_percentage == 25.0
    assert result.bad_debt_rate == 25.0
    assert [(h.hour, h.total_orders) for h in result.hourly_orders] == [(9, 1), (14, 3)]


def test_analyze_echoes_filters_and_serialises_camel_case(service):
    payload = service.analyze("product2", "week1").model_dump(by_alias=True)

    assert payload["product"] == "product2"
    assert payload["date"] == "week1"
    for key in (
        "totalOrders", "totalSales", "totalRevenue", "badDebtOrders", "cashierOrders",
        "mobileOrders", "cashierPercentage", "mobilePercentage", "badDebtRate", "hourlyOrders",
    ):
        assert key in payload


def test_analyze_invalid_token_runs_no_query(service, repo):
    with pytest.raises(InvalidInputError):
        service.analyze("all", "yesterday")
    repo.totals.assert_not_called()
    repo.hourly.assert_not_called()


def test_analyze_storage_error_returns_nothing_partial(service, repo):
    repo.hourly.side_effect = OperationalError("SELECT", {}, Exception("lost connection"))

    with pytest.raises(StorageUnavailableError):
        service.analyze()
    repo.db.rollback.assert_called_once()
