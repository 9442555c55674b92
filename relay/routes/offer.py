"""
Offer, short link and QR routes for the stream offer relay
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool

from relay.models import OfferResponse
from relay.offer import OfferResolver, buy_url
from relay.qr import render_png
from relay.state import AppState, get_state

logger = logging.getLogger(__name__)

router = APIRouter()

_REDIRECT_PAGE = (
    '<!doctype html><meta http-equiv="refresh" content="0;url={cart}">'
    "<script>setTimeout(function(){{location.replace('{checkout}')}},500)</script>"
)


@router.get(
    "/offer/active",
    response_model=OfferResponse,
    response_model_exclude_unset=True,
    tags=["Offers"],
)
async def get_active_offer(request: Request, state: AppState = Depends(get_state)):
    """
    Product to promote for the current artist

    The overlay is hidden whenever anything on the way fails.
    """
    resolver = OfferResolver(state)
    decision = await run_in_threadpool(resolver.resolve, state.public_base_url(request))

    overlay = {"visible": decision.visible, "ttl_sec": decision.ttl_sec}
    if not decision.visible:
        return OfferResponse(overlay=overlay)
    return OfferResponse(overlay=overlay, artist=decision.artist, product=decision.product)


@router.get("/b/{token}", tags=["Offers"])
async def redeem_short_link(token: str, state: AppState = Depends(get_state)):
    """Send the buyer to the cart with the product added, then on to checkout"""
    link = state.store.get(token)
    if link is None:
        return PlainTextResponse("Expired", status_code=404)

    shop_base = state.settings.shop_base
    page = _REDIRECT_PAGE.format(
        cart=buy_url(shop_base, link.product_id),
        checkout=f"{shop_base}/checkout",
    )
    return HTMLResponse(page)


@router.get("/qr/{token}.png", tags=["Offers"])
async def short_link_qr(token: str, request: Request, state: AppState = Depends(get_state)):
    """PNG QR code pointing at the short link"""
    if state.store.get(token) is None:
        return PlainTextResponse("Expired", status_code=404)

    short_url = f"{state.public_base_url(request)}/b/{token}"
    try:
        png = await run_in_threadpool(render_png, short_url)
    except Exception as e:
        logger.error("QR render failed for %s: %s", token, e)
        return PlainTextResponse("QR error", status_code=500)
    return Response(content=png, media_type="image/png")
