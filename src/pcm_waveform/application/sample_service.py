"""Application service that turns an audio file into a decoded sample set."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable
from uuid import uuid4

from pcm_waveform.application.container_reader import AudioContainerReader, ReadFailureError
from pcm_waveform.application.event_publisher import EventPublisher, NullEventPublisher
from pcm_waveform.decoder import TruncatedBufferError, decode_pcm
from pcm_waveform.domain.events import FormatValidated, SampleLoadFailed, SampleSetDecoded
from pcm_waveform.domain.models import AudioSampleSet
from pcm_waveform.domain.policies import DEFAULT_DECODE_POLICY, DecodePolicy
from pcm_waveform.format_validation import UnsupportedFormatError, validate_format
from pcm_waveform.infrastructure.container_readers import select_reader

ReaderFactory = Callable[[Path], AudioContainerReader]


def _failure_summary(path: Path, exc: Exception) -> dict[str, object]:
    if isinstance(exc, (UnsupportedFormatError, TruncatedBufferError, ReadFailureError)):
        summary: dict[str, object] = dict(exc.as_dict())
    else:
        summary = {"code": "load_failed", "message": str(exc)}
    summary["source"] = str(path)
    return summary


@dataclass(slots=True)
class LoadAudioSample:
    """Use case: read a container, validate its format and decode its PCM payload.

    The format header is validated before the payload is read, so unsupported
    files are rejected without buffering the whole stream.
    """

    decode_policy: DecodePolicy = DEFAULT_DECODE_POLICY
    reader_factory: ReaderFactory = select_reader
    event_publisher: EventPublisher = field(default_factory=NullEventPublisher)

    def load(self, path: Path, correlation_id: str | None = None) -> AudioSampleSet:
        run_correlation_id = correlation_id or str(uuid4())
        try:
            reader = self.reader_factory(path)
            descriptor = validate_format(reader.read_format(path), self.decode_policy.format_policy)
            self.event_publisher.publish(
                FormatValidated(
                    correlation_id=run_correlation_id,
                    payload_summary={"source": str(path), **descriptor.as_dict()},
                )
            )

            sample_set = decode_pcm(reader.read_pcm(path), descriptor, self.decode_policy)
        except Exception as exc:
            self.event_publisher.publish(
                SampleLoadFailed(
                    correlation_id=run_correlation_id,
                    payload_summary=_failure_summary(path, exc),
                )
            )
            raise

        self.event_publisher.publish(
            SampleSetDecoded(
                correlation_id=run_correlation_id,
                payload_summary={
                    "source": str(path),
                    "frame_count": sample_set.frame_count,
                    "channel_count": sample_set.channel_count,
                    "biggest_sample": sample_set.biggest_sample,
                    "duration_seconds": sample_set.duration_seconds,
                },
            )
        )
        return sample_set
