"""
Pydantic models for the stream offer relay
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any, Dict, Optional


class CamelModel(BaseModel):
    """Serialized with camelCase keys, built with snake_case names"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResolveStreamBody(BaseModel):
    """Body for POST /resolve/stream"""
    m3u8: Optional[str] = None


class StreamResolveResponse(CamelModel):
    """Model for a resolved playlist URL"""
    app_id: str
    stream_key: str
    stream_id: Optional[Any] = None
    raw: Dict[str, Any] = {}


class NowPlayingBody(BaseModel):
    """Body for POST /nowplaying"""
    artist_id: Optional[str] = None
    artist_name: Optional[str] = None


class NowPlayingModel(BaseModel):
    """Model for the now-playing state"""
    artist_id: Optional[str] = None
    artist_name: Optional[str] = None
    ts: int = 0


class NowPlayingResponse(BaseModel):
    ok: bool
    nowPlaying: NowPlayingModel


class OverlayModel(CamelModel):
    visible: bool
    ttl_sec: int


class ArtistModel(BaseModel):
    id: str
    name: Optional[str] = None


class PriceModel(BaseModel):
    amount: float
    currency: str
    formatted: str


class ProductModel(CamelModel):
    """Model for the promoted product"""
    id: Any
    sku: Optional[str] = None
    name: Optional[str] = None
    description: str = ""
    price: PriceModel
    image: Optional[str] = None
    buy_url: str
    short_url: str
    qr_png: str


class OfferResponse(BaseModel):
    """Model for GET /offer/active; artist and product only when visible"""
    overlay: OverlayModel
    artist: Optional[ArtistModel] = None
    product: Optional[ProductModel] = None


class ErrorResponse(BaseModel):
    """Model for error responses"""
    detail: str
    error_type: str
