"""Port for publishing sample loading events."""

from __future__ import annotations

from typing import Protocol

from pcm_waveform.domain.events import DomainEvent


class EventPublisher(Protocol):
    def publish(self, event: DomainEvent) -> None:
        """Deliver one event to its subscribers."""


class NullEventPublisher:
    """Publisher that drops every event; the default for library callers."""

    def publish(self, event: DomainEvent) -> None:  # noqa: ARG002
        return None
