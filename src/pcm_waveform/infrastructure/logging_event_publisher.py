"""Logging-backed event publisher."""

from __future__ import annotations

import logging

from pcm_waveform.domain.events import DomainEvent, SampleLoadFailed

LOGGER = logging.getLogger("pcm_waveform.events")


class LoggingEventPublisher:
    """Write each event and its payload summary to the ``pcm_waveform.events`` logger."""

    def publish(self, event: DomainEvent) -> None:
        level = logging.WARNING if isinstance(event, SampleLoadFailed) else logging.INFO
        LOGGER.log(
            level,
            "sample_event_emitted",
            extra={
                "event_name": type(event).__name__,
                "correlation_id": event.correlation_id,
                "payload_summary": event.payload_summary,
                "occurred_at": event.occurred_at.isoformat(),
            },
        )
