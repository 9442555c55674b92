"""Tests for relay/offer.py — offer resolution and its degrade paths."""

import requests

from relay.offer import OfferResolver
from relay.upstream import UpstreamResult

from conftest import in_stock_product

BASE = "https://relay.example"


def test_no_artist_means_no_offer(state, catalog):
    decision = OfferResolver(state).resolve(BASE)
    assert not decision.visible
    assert decision.ttl_sec == 25
    assert catalog.calls == []


def test_artist_without_sku_means_no_offer(state, catalog):
    state.now_playing.update("unknown-artist")
    assert not OfferResolver(state).resolve(BASE).visible
    state.now_playing.update("nosku")
    assert not OfferResolver(state).resolve(BASE).visible
    assert catalog.calls == []


def test_variable_product_means_no_offer(state, catalog):
    catalog.result = UpstreamResult.ok(in_stock_product(type="variable"))
    state.now_playing.update("colleenanthony")
    assert not OfferResolver(state).resolve(BASE).visible
    assert len(state.store) == 0


def test_out_of_stock_means_no_offer(state, catalog):
    catalog.result = UpstreamResult.ok(in_stock_product(stock_status="outofstock"))
    state.now_playing.update("colleenanthony")
    assert not OfferResolver(state).resolve(BASE).visible


def test_empty_catalog_result_means_no_offer(state, catalog):
    catalog.result = UpstreamResult.ok(None)
    state.now_playing.update("colleenanthony")
    assert not OfferResolver(state).resolve(BASE).visible


def test_catalog_failure_means_no_offer(state, catalog):
    catalog.result = UpstreamResult.failed("timeout")
    state.now_playing.update("colleenanthony")
    assert not OfferResolver(state).resolve(BASE).visible


def test_catalog_not_configured_means_no_offer(state, catalog):
    catalog.result = UpstreamResult.not_configured()
    state.now_playing.update("colleenanthony")
    assert not OfferResolver(state).resolve(BASE).visible


def test_catalog_exception_does_not_propagate(state, catalog):
    catalog.exc = requests.Timeout("read timed out")
    state.now_playing.update("colleenanthony")
    assert not OfferResolver(state).resolve(BASE).visible


def test_offer_snapshot(state, catalog):
    state.now_playing.update("colleenanthony", "Colleen Anthony")
    decision = OfferResolver(state).resolve(BASE)

    assert decision.visible
    assert catalog.calls == ["0002"]
    assert decision.artist == {"id": "colleenanthony", "name": "Colleen Anthony"}
    product = decision.product
    assert product["id"] == 42
    assert product["price"] == {"amount": 19.99, "currency": "USD", "formatted": "$19.99"}
    assert product["description"] == "Soft cotton shirt"
    assert product["image"] == "https://shop.example/shirt.jpg"
    assert product["buy_url"] == "https://shop.example/shop/?add-to-cart=42&quantity=1"
    assert product["short_url"] == f"{BASE}/b/{decision.token}"
    assert product["qr_png"] == f"{BASE}/qr/{decision.token}.png"

    link = state.store.get(decision.token)
    assert link.product_id == 42
    assert link.artist_id == "colleenanthony"


def test_each_resolution_mints_a_new_token(state):
    state.now_playing.update("colleenanthony")
    first = OfferResolver(state).resolve(BASE)
    second = OfferResolver(state).resolve(BASE)
    assert first.token != second.token
    assert len(state.store) == 2


def test_price_falls_back_to_regular_price_then_zero(state, catalog):
    state.now_playing.update("colleenanthony")
    catalog.result = UpstreamResult.ok(in_stock_product(price="", regular_price="25"))
    assert OfferResolver(state).resolve(BASE).product["price"]["amount"] == 25.0

    catalog.result = UpstreamResult.ok(in_stock_product(price="n/a"))
    assert OfferResolver(state).resolve(BASE).product["price"]["amount"] == 0.0

    catalog.result = UpstreamResult.ok(in_stock_product(price=None))
    price = OfferResolver(state).resolve(BASE).product["price"]
    assert price["amount"] == 0.0
    assert price["formatted"] == "$0.00"


def test_description_is_cut_to_160_chars(state, catalog):
    state.now_playing.update("colleenanthony")
    catalog.result = UpstreamResult.ok(
        in_stock_product(short_description="<p>" + "x" * 300 + "</p>", images=[])
    )
    product = OfferResolver(state).resolve(BASE).product
    assert product["description"] == "x" * 160
    assert product["image"] is None


def test_artist_name_defaults_to_id(state):
    state.now_playing.update("colleenanthony")
    decision = OfferResolver(state).resolve(BASE)
    assert decision.artist["name"] == "colleenanthony"


def test_non_dict_product_means_no_offer(state, catalog):
    catalog.result = UpstreamResult.ok("oops")
    state.now_playing.update("colleenanthony")
    assert not OfferResolver(state).resolve(BASE).visible
    assert len(state.store) == 0
