"""CLI-facing handlers that delegate to the sample loading service."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import asdict
from pathlib import Path
from typing import Any
from uuid import uuid4
import json

from pydantic import ValidationError

from pcm_waveform.application.container_reader import ReadFailureError
from pcm_waveform.application.sample_service import LoadAudioSample
from pcm_waveform.decoder import TruncatedBufferError
from pcm_waveform.domain.policies import DEFAULT_RENDER_POLICY, RenderPolicy
from pcm_waveform.format_validation import UnsupportedFormatError
from pcm_waveform.infrastructure.logging_event_publisher import LoggingEventPublisher
from pcm_waveform.scaling import DegenerateSampleSetError, compute_scale, waveform_points
from pcm_waveform.utils.config import load_viewer_config

RECOVERABLE_ERRORS = (UnsupportedFormatError, TruncatedBufferError, ReadFailureError, DegenerateSampleSetError)
CONFIG_ERRORS = (ValidationError, OSError, ValueError)

_event_publisher = LoggingEventPublisher()
sample_loader = LoadAudioSample(event_publisher=_event_publisher)


def _resolve_services(config_path: Path | None) -> tuple[LoadAudioSample, RenderPolicy]:
    if config_path is None:
        return sample_loader, DEFAULT_RENDER_POLICY
    config = load_viewer_config(config_path)
    loader = LoadAudioSample(decode_policy=config.to_decode_policy(), event_publisher=_event_publisher)
    return loader, config.to_render_policy()


def inspect_path(path: Path, correlation_id: str, config_path: Path | None = None) -> dict[str, Any]:
    loader, _render_policy = _resolve_services(config_path)
    sample_set = loader.load(path, correlation_id=correlation_id)
    return sample_set.summary()


def inspect_paths(
    paths: list[Path],
    concurrency_limit: int,
    config_path: Path | None = None,
) -> tuple[list[dict[str, Any]], dict[str, int]]:
    """Inspect several files; unsupported or unreadable files become failed records."""

    if not paths:
        raise ValueError("No audio files were given.")
    loader, _render_policy = _resolve_services(config_path)

    def _process(path: Path, item_index: int) -> dict[str, Any]:
        correlation_id = str(uuid4())
        try:
            summary = loader.load(path, correlation_id=correlation_id).summary()
        except RECOVERABLE_ERRORS as error:
            return {
                "index": item_index,
                "source": str(path),
                "status": "failed",
                "correlation_id": correlation_id,
                "error": error.as_dict(),
            }
        return {
            "index": item_index,
            "source": str(path),
            "status": "succeeded",
            "correlation_id": correlation_id,
            "summary": summary,
        }

    results: list[dict[str, Any]] = []
    with ThreadPoolExecutor(max_workers=max(1, concurrency_limit)) as executor:
        futures = [executor.submit(_process, path, idx) for idx, path in enumerate(paths, start=1)]
        for future in as_completed(futures):
            results.append(future.result())

    results.sort(key=lambda item: item["index"])
    success_count = sum(1 for item in results if item["status"] == "succeeded")
    summary = {
        "total": len(results),
        "succeeded": success_count,
        "failed": len(results) - success_count,
    }
    return results, summary


def scale_for_path(path: Path, width: int, height: int, config_path: Path | None = None) -> dict[str, Any]:
    loader, render_policy = _resolve_services(config_path)
    sample_set = loader.load(path)
    scale = compute_scale(sample_set, width, height, render_policy)
    return {"source": str(path), "frame_count": sample_set.frame_count, **asdict(scale)}


def points_for_path(
    path: Path,
    width: int,
    height: int,
    channel: int,
    output: Path | None = None,
    config_path: Path | None = None,
) -> list[tuple[int, int]]:
    loader, render_policy = _resolve_services(config_path)
    sample_set = loader.load(path)
    points = waveform_points(sample_set, channel, width, height, render_policy)
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "source": str(path),
            "channel": channel,
            "width": width,
            "height": height,
            "points": [list(point) for point in points],
        }
        output.write_text(json.dumps(payload, indent=2))
    return points
