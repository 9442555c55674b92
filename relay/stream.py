"""Playlist URL parsing and provider stream correlation.

Playlist URLs look like ``https://host/live_cdn/<appId>/<streamKey>/index.m3u8``.
Some CDNs append one or more ``-`` to the stream key, so keys are compared
after stripping that suffix.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple
from urllib.parse import urlsplit

from relay.upstream import UpstreamResult, UpstreamStatus

LIVE_CDN_MARKER = "live_cdn"
LOOKUP_FAILED = "lookup_failed"

_TRAILING_DASHES = re.compile(r"-+$")


class StreamUrlError(ValueError):
    """Base class for playlist URLs we cannot use."""

    error_type = "StreamUrlError"


class InvalidStreamUrl(StreamUrlError):
    error_type = "InvalidUrl"


class UnrecognizedLayout(StreamUrlError):
    error_type = "UnrecognizedLayout"

    def __init__(self, message: str, app_id: Optional[str] = None, stream_key: Optional[str] = None):
        super().__init__(message)
        self.app_id = app_id
        self.stream_key = stream_key

    @property
    def parsed(self) -> Dict[str, Optional[str]]:
        return {"appId": self.app_id, "streamKey": self.stream_key}


@dataclass(frozen=True)
class StreamReference:
    app_id: str
    stream_key: str


@dataclass
class StreamResolution:
    app_id: str
    stream_key: str
    stream_id: Optional[Any] = None
    raw: Dict[str, Any] = field(default_factory=dict)


def normalize_stream_key(key: str) -> str:
    """Strip the trailing run of dashes some CDNs add."""
    return _TRAILING_DASHES.sub("", key or "")


def parse_playlist_url(url: str) -> StreamReference:
    """Extract (appId, streamKey) from a playlist URL.

    Raises InvalidStreamUrl for anything that is not an absolute URL and
    UnrecognizedLayout when the path has no usable ``live_cdn`` section.
    """
    if not url or not url.strip():
        raise InvalidStreamUrl("m3u8 required")
    try:
        parts = urlsplit(url.strip())
    except ValueError as e:
        raise InvalidStreamUrl(f"invalid m3u8 url: {e}") from e
    if not parts.scheme or not parts.netloc:
        raise InvalidStreamUrl("invalid m3u8 url")

    segments = [s for s in parts.path.split("/") if s]
    try:
        idx = segments.index(LIVE_CDN_MARKER)
    except ValueError:
        raise UnrecognizedLayout("could not parse appId/streamKey from m3u8") from None

    app_id = segments[idx + 1] if len(segments) > idx + 1 else None
    if len(segments) < idx + 3:
        raise UnrecognizedLayout("could not parse appId/streamKey from m3u8", app_id=app_id)

    stream_key = normalize_stream_key(segments[idx + 2])
    if not app_id or not stream_key:
        raise UnrecognizedLayout(
            "could not parse appId/streamKey from m3u8",
            app_id=app_id or None,
            stream_key=stream_key or None,
        )
    return StreamReference(app_id=app_id, stream_key=stream_key)


def match_stream(stream_key: str, records: Iterable[Any]) -> Tuple[Optional[dict], int]:
    """Return the first directory record whose normalized key equals stream_key, plus the record count."""
    found = None
    total = 0
    for record in records:
        total += 1
        if found is not None or not isinstance(record, dict):
            continue
        if normalize_stream_key(str(record.get("streamKey") or "")) == stream_key:
            found = record
    return found, total


def correlate(reference: StreamReference, lookup: UpstreamResult[List[Any]]) -> StreamResolution:
    """Attach the provider stream id to a parsed reference when the directory lookup allows it."""
    out = StreamResolution(app_id=reference.app_id, stream_key=reference.stream_key)
    if lookup.status is UpstreamStatus.NOT_CONFIGURED:
        return out
    if lookup.status is UpstreamStatus.FAILED or not isinstance(lookup.value, list):
        out.raw["error"] = LOOKUP_FAILED
        return out

    found, total = match_stream(reference.stream_key, lookup.value)
    out.raw["streamsCount"] = total
    if found is not None:
        out.stream_id = found.get("id") or None
        out.raw["match"] = found
    return out
