"""Application layer ports. The use case lives in :mod:`pcm_waveform.application.sample_service`."""

from .container_reader import AudioContainerReader, ReadFailureError
from .event_publisher import EventPublisher, NullEventPublisher

__all__ = ["AudioContainerReader", "ReadFailureError", "EventPublisher", "NullEventPublisher"]
