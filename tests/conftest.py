import pytest
from fastapi.testclient import TestClient

from relay import create_app
from relay.cache import TokenStore
from relay.config import Settings
from relay.state import AppState
from relay.upstream import UpstreamResult


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubCatalog:
    """Catalog double: returns a fixed result or raises."""

    def __init__(self, result=None, exc=None):
        self.result = result if result is not None else UpstreamResult.ok(None)
        self.exc = exc
        self.calls = []

    def find_product_by_sku(self, sku):
        self.calls.append(sku)
        if self.exc is not None:
            raise self.exc
        return self.result


class StubDirectory:
    def __init__(self, result=None, exc=None):
        self.result = result if result is not None else UpstreamResult.not_configured()
        self.exc = exc
        self.calls = 0

    def list_live_streams(self):
        self.calls += 1
        if self.exc is not None:
            raise self.exc
        return self.result


def in_stock_product(**overrides):
    product = {
        "id": 42,
        "sku": "0002",
        "name": "Tour Shirt",
        "type": "simple",
        "stock_status": "instock",
        "price": "19.99",
        "short_description": "<p>Soft <b>cotton</b> shirt</p>",
        "images": [{"src": "https://shop.example/shirt.jpg"}],
    }
    product.update(overrides)
    return product


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return Settings(
        shop_base="https://shop.example/shop",
        short_token_ttl_sec=1800,
        offer_ttl_sec=25,
        currency="USD",
        public_base_url="https://relay.example",
    )


@pytest.fixture
def catalog():
    return StubCatalog(UpstreamResult.ok(in_stock_product()))


@pytest.fixture
def directory():
    return StubDirectory()


@pytest.fixture
def state(settings, catalog, directory, clock):
    return AppState(
        settings,
        sku_map={"colleenanthony": "0002", "nosku": ""},
        store=TokenStore(ttl_seconds=settings.short_token_ttl_sec, clock=clock),
        catalog=catalog,
        directory=directory,
    )


@pytest.fixture
def client(state):
    return TestClient(create_app(state))
