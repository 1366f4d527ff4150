"""
Pytest fixtures for stall ledger backend tests.

Provides the Flask app on an in-memory database, a test client, and fresh
in-memory ledger state for service-level tests.
"""

from datetime import datetime

import pytest

from stallpos import create_app
from stallpos.extensions import db
from stallpos.models import Snapshot, ORIGIN_INTERNAL, PAYMENT_CASH
from stallpos.services import sales_service, snapshot_service
from stallpos.services.identifier_service import IdGenerator
from stallpos.services.sales_service import CartLineRequest


# 2026-10-19 11:00 in Kuala Lumpur
SALE_TIME = datetime(2026, 10, 19, 3, 0, 0)


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'STALL_TIMEZONE': 'Asia/Kuala_Lumpur',
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def db_session(app):
    """Empty snapshot table and unloaded state for each test."""
    with app.app_context():
        db.session.query(Snapshot).delete()
        db.session.commit()
        snapshot_service.forget_state()

        yield db.session

        # Cleanup after test
        db.session.rollback()
        snapshot_service.forget_state()


@pytest.fixture(scope='function')
def client(app, db_session):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def state():
    """Fresh seeded catalog (five internal items) with empty histories."""
    return snapshot_service.new_state(ids=IdGenerator())


@pytest.fixture
def mee_sup(state):
    """Vendor item: Mee Tarik's Mee Sup, RM 8.00 sell / RM 4.00 cost, 10 in stock."""
    return state.catalog.add_item(
        vendor_name="Mee Tarik",
        name="Mee Sup",
        selling_price_cents=800,
        cost_price_cents=400,
        stock_count=10,
        category="Makanan",
    )


@pytest.fixture
def sell(state):
    """
    Commit a sale against the ``state`` fixture.

    lines: (item_id, quantity) or (item_id, quantity, unit_price_cents)
    Cash sales default to exact payment.
    """
    def _sell(lines, *, payment_method=PAYMENT_CASH, origin=None, received=None, now=SALE_TIME):
        cart = [CartLineRequest(*line) for line in lines]
        if origin is None:
            first = state.catalog.get(cart[0].item_id)
            origin = first.origin if first is not None else ORIGIN_INTERNAL
        if received is None and payment_method == PAYMENT_CASH:
            draft = sales_service.preview_sale(
                state.catalog, cart, payment_method=payment_method, origin=origin, amount_received_cents=10**8,
            )
            received = draft.total_cents
        return sales_service.commit_sale(
            state.catalog,
            state.sales,
            cart,
            payment_method=payment_method,
            origin=origin,
            amount_received_cents=received,
            ids=state.ids,
            now=now,
        )

    return _sell

