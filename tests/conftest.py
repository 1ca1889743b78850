import os
from datetime import datetime

os.environ.setdefault("LOG_FORMAT", "console")
os.environ.setdefault("SQLITE_PATH", "data/test-orders.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from orderdesk.core.database import Database
from orderdesk.main import create_app
from orderdesk.models.order_models import Order


@pytest.fixture
def database():
    db = Database("sqlite://", poolclass=StaticPool)
    db.init_db()
    yield db
    db.dispose()


@pytest.fixture
def db_session(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def make_order(database):
    """Inserts an order with an explicit timestamp and channel."""

    def _make(
        product1_quantity=0,
        product2_quantity=0,
        total_price=0.0,
        status=1,
        cashier=None,
        timestamp=datetime(2024, 10, 15, 10, 30),
        buyer_id="buyer-1",
    ):
        order = Order(
            buyer_id=buyer_id,
            product1_quantity=product1_quantity,
            product2_quantity=product2_quantity,
            total_price=total_price,
            status=status,
            cashier=cashier,
            timestamp=timestamp,
        )
        with database.session() as session:
            session.add(order)
            session.commit()
            session.refresh(order)
            session.expunge(order)
        return order

    return _make


@pytest.fixture
def app(database):
    return create_app(database=database)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
