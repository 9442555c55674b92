"""Decide whether the current artist has a product worth showing, and mint its short link."""

import logging
from dataclasses import dataclass
from typing import Optional

from relay.state import AppState, ShortLink
from relay.upstream import UpstreamResult
from relay.utils import format_price, parse_price, strip_html

logger = logging.getLogger(__name__)


@dataclass
class OfferDecision:
    """Outcome of one resolution: ``product`` is None when there is no offer."""
    ttl_sec: int
    artist: Optional[dict] = None
    product: Optional[dict] = None
    token: Optional[str] = None

    @property
    def visible(self) -> bool:
        return self.product is not None


def buy_url(shop_base: str, product_id) -> str:
    return f"{shop_base}/?add-to-cart={product_id}&quantity=1"


def _sellable(product: Optional[dict]) -> bool:
    if not isinstance(product, dict) or not product.get("id"):
        return False
    if product.get("type") == "variable":
        return False
    return product.get("stock_status") == "instock"


def _first_image(product: dict) -> Optional[str]:
    images = product.get("images") or []
    if images and isinstance(images[0], dict):
        return images[0].get("src") or None
    return None


class OfferResolver:
    def __init__(self, state: AppState) -> None:
        self._state = state
        self._settings = state.settings

    def _no_offer(self) -> OfferDecision:
        return OfferDecision(ttl_sec=self._settings.offer_ttl_sec)

    def resolve(self, base_url: str) -> OfferDecision:
        """Blocking: may call the catalog. Run in a threadpool from async code."""
        now_playing = self._state.now_playing.current()
        artist_id = now_playing.artist_id
        if not artist_id:
            return self._no_offer()

        sku = self._state.sku_map.get(artist_id)
        if not sku:
            logger.debug("No SKU mapped for artist %s", artist_id)
            return self._no_offer()

        try:
            lookup = self._state.catalog.find_product_by_sku(sku)
        except Exception as e:
            lookup = UpstreamResult.failed(str(e) or type(e).__name__)
        if not lookup.is_ok:
            logger.info("No offer for %s: catalog %s (%s)", artist_id, lookup.status.value, lookup.reason)
            return self._no_offer()
        product = lookup.value
        if not _sellable(product):
            logger.debug("Product for sku %s is missing, variable or out of stock", sku)
            return self._no_offer()

        token = self._state.store.mint(ShortLink(product_id=product["id"], artist_id=artist_id))
        logger.debug("Minted token %s for product %s", token, product["id"])

        amount = parse_price(product.get("price") or product.get("regular_price"))
        currency = self._settings.currency
        return OfferDecision(
            ttl_sec=self._settings.offer_ttl_sec,
            token=token,
            artist={"id": artist_id, "name": now_playing.artist_name or artist_id},
            product={
                "id": product["id"],
                "sku": product.get("sku"),
                "name": product.get("name"),
                "description": strip_html(product.get("short_description")),
                "price": {
                    "amount": amount,
                    "currency": currency,
                    "formatted": format_price(amount, currency),
                },
                "image": _first_image(product),
                "buy_url": buy_url(self._settings.shop_base, product["id"]),
                "short_url": f"{base_url}/b/{token}",
                "qr_png": f"{base_url}/qr/{token}.png",
            },
        )
