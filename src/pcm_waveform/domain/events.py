"""Domain event contracts for sample loading workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True, slots=True)
class DomainEvent:
    """Base domain event emitted by application services."""

    correlation_id: str
    payload_summary: dict[str, Any]
    occurred_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


@dataclass(frozen=True, slots=True)
class FormatValidated(DomainEvent):
    """The container's format descriptor passed validation."""


@dataclass(frozen=True, slots=True)
class SampleSetDecoded(DomainEvent):
    """A PCM payload was decoded into an audio sample set."""


@dataclass(frozen=True, slots=True)
class SampleLoadFailed(DomainEvent):
    """Reading, validating or decoding a file failed."""
