"""
Pytest fixtures for Dishooom backend tests.

Provides application setup (empty or seeded stores), the test client, and
bare store registries for service-level tests.
"""

from datetime import datetime

import pytest

from dishooom import create_app
from dishooom.services.store_service import StoreRegistry


class FixedClock:
    """Deterministic clock for stores; advance() moves it forward."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta) -> None:
        self.now = self.now + delta


@pytest.fixture(scope='function')
def app(tmp_path):
    """Application with empty stores; fresh per test since state is in memory."""
    app = create_app({
        'TESTING': True,
        'SEED_ON_STARTUP': False,
        'SETTINGS_PATH': str(tmp_path / 'settings.json'),
    })
    yield app


@pytest.fixture(scope='function')
def seeded_app(tmp_path):
    """Application loaded from the packaged seed JSON."""
    app = create_app({
        'TESTING': True,
        'SETTINGS_PATH': str(tmp_path / 'settings.json'),
    })
    yield app


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def seeded_client(seeded_app):
    return seeded_app.test_client()


@pytest.fixture(scope='function')
def app_stores(app):
    """The registry owned by the app fixture."""
    with app.app_context():
        from dishooom.extensions import stores
        yield stores.registry


@pytest.fixture(scope='function')
def clock():
    return FixedClock(datetime(2026, 10, 15, 9, 30, 0))


@pytest.fixture(scope='function')
def registry(clock):
    """Empty stores driven by the fixed clock."""
    return StoreRegistry.create(clock=clock)


def make_order(customer_id=1, total=100.0, order_date=None, items=None, **extra):
    """Helper to build a sales order payload."""
    payload = {
        'customerId': customer_id,
        'customerName': f'Customer {customer_id}',
        'items': items if items is not None else [
            {'productId': 1, 'productName': 'Widget', 'quantity': 1, 'unitPrice': total, 'total': total}
        ],
        'totalAmount': total,
    }
    if order_date is not None:
        payload['orderDate'] = order_date
    payload.update(extra)
    return payload
