"""Result type for best-effort calls to upstream services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class UpstreamStatus(str, Enum):
    OK = "ok"
    NOT_CONFIGURED = "not_configured"
    FAILED = "upstream_failed"


@dataclass(frozen=True)
class UpstreamResult(Generic[T]):
    status: UpstreamStatus
    value: Optional[T] = None
    reason: Optional[str] = None

    @classmethod
    def ok(cls, value: Optional[T]) -> "UpstreamResult[T]":
        return cls(UpstreamStatus.OK, value=value)

    @classmethod
    def not_configured(cls) -> "UpstreamResult[T]":
        return cls(UpstreamStatus.NOT_CONFIGURED)

    @classmethod
    def failed(cls, reason: str) -> "UpstreamResult[T]":
        return cls(UpstreamStatus.FAILED, reason=reason)

    @property
    def is_ok(self) -> bool:
        return self.status is UpstreamStatus.OK
