"""
Root and health routes for the stream offer relay
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from relay.config import Config

router = APIRouter()


@router.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {Config.TITLE}",
        "version": Config.VERSION,
        "docs": Config.DOCS_URL,
        "endpoints": {
            "resolve_stream": "POST /resolve/stream",
            "now_playing": "POST /nowplaying",
            "offer": "/offer/active",
            "short_link": "/b/{token}",
            "qr": "/qr/{token}.png",
        }
    }


@router.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {"ok": True, "ts": datetime.now(timezone.utc).isoformat()}
