# tests/conftest.py
import os
import sys

import pytest
from fastapi.testclient import TestClient

# ensure project root is importable
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from app.config import Settings  # noqa: E402
from app.database import CartStorage, InMemoryKV  # noqa: E402
from app.main import create_app  # noqa: E402
from app.services.cart import CartStore  # noqa: E402
from app.services.catalog import Catalog  # noqa: E402


class RecordingNotifier:
    """Collects (level, message) pairs instead of showing toasts."""

    def __init__(self):
        self.sent = []

    def notify(self, message, level="info"):
        self.sent.append((level, message))

    @property
    def messages(self):
        return [m for _, m in self.sent]


@pytest.fixture
def settings(tmp_path):
    """Isolated settings: temp data dir, bundled catalog, no artificial latency."""
    return Settings(
        DATA_DIR=tmp_path / "data",
        SIMULATE_LATENCY=False,
        CART_ADD_DELAY_MS=0,
    )


@pytest.fixture
def kv():
    return InMemoryKV()


@pytest.fixture
def storage(kv, settings):
    return CartStorage(kv, settings.CART_STORAGE_KEY)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def cart_store(storage, notifier):
    return CartStore(storage, notifier=notifier)


@pytest.fixture
def catalog(settings):
    return Catalog.load(settings.products_path, settings.categories_path, simulate_latency=False)


@pytest.fixture
def widget():
    """A product shaped the way the storefront UI hands it over."""
    return {"Id": 1, "name": "Widget", "price": 10, "images": ["x"]}


@pytest.fixture
def client(settings, kv):
    with TestClient(create_app(settings, kv=kv)) as c:
        yield c
