"""
Now-playing routes for the stream offer relay
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from relay.models import NowPlayingBody, NowPlayingModel, NowPlayingResponse
from relay.state import AppState, get_state

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/nowplaying", response_model=NowPlayingResponse, tags=["Now Playing"])
async def set_now_playing(
    body: Optional[NowPlayingBody] = Body(None),
    state: AppState = Depends(get_state),
):
    """
    Replace the now-playing artist

    - **artist_id**: key into the artist -> SKU map
    - **artist_name**: display name, defaults to artist_id
    """
    if body is None or not body.artist_id:
        raise HTTPException(status_code=400, detail="artist_id required")

    current = state.now_playing.update(body.artist_id, body.artist_name)
    logger.info("Now playing: %s", current.artist_id)
    return NowPlayingResponse(ok=True, nowPlaying=NowPlayingModel(**current.to_dict()))


@router.get("/nowplaying", response_model=NowPlayingModel, tags=["Now Playing"])
async def get_now_playing(state: AppState = Depends(get_state)):
    """Current now-playing state"""
    return NowPlayingModel(**state.now_playing.current().to_dict())
