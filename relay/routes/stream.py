"""
Stream routes for the stream offer relay
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends
from starlette.concurrency import run_in_threadpool

from relay.models import ResolveStreamBody, StreamResolveResponse
from relay.state import AppState, get_state
from relay.stream import InvalidStreamUrl, correlate, parse_playlist_url
from relay.upstream import UpstreamResult

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/resolve/stream", response_model=StreamResolveResponse, tags=["Streams"])
async def resolve_stream(
    body: Optional[ResolveStreamBody] = Body(None),
    state: AppState = Depends(get_state),
):
    """
    Resolve a playlist URL to its app id and stream key

    - **m3u8**: e.g. https://host/live_cdn/<appId>/<streamKey>/index.m3u8

    When a Livepush token is configured the provider stream id is looked up too.
    """
    m3u8 = body.m3u8 if body else None
    if not m3u8:
        raise InvalidStreamUrl("m3u8 required")

    reference = parse_playlist_url(m3u8)

    try:
        lookup = await run_in_threadpool(state.directory.list_live_streams)
    except Exception as e:
        logger.warning("Stream directory lookup raised: %s", e)
        lookup = UpstreamResult.failed(str(e) or type(e).__name__)
    resolution = correlate(reference, lookup)

    return StreamResolveResponse(
        app_id=resolution.app_id,
        stream_key=resolution.stream_key,
        stream_id=resolution.stream_id,
        raw=resolution.raw,
    )
