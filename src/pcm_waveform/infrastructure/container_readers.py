"""Reader selection by container signature."""

from __future__ import annotations

from pathlib import Path

from pcm_waveform.application.container_reader import AudioContainerReader, ReadFailureError
from pcm_waveform.infrastructure import riff_aiff_reader
from pcm_waveform.infrastructure.riff_aiff_reader import RiffAiffReader
from pcm_waveform.infrastructure.soundfile_reader import SoundFileReader


def select_reader(path: Path) -> AudioContainerReader:
    """Use the native chunk parser for WAV/AIFF and libsndfile for everything else."""

    if not path.exists() or not path.is_file():
        raise ReadFailureError(str(path), "Audio file not found.")
    try:
        with path.open("rb") as handle:
            header = handle.read(12)
    except OSError as exc:
        raise ReadFailureError(str(path), "Audio file is unreadable.") from exc

    if not header:
        raise ReadFailureError(str(path), "Audio file is empty.")
    if riff_aiff_reader.recognizes(header):
        return RiffAiffReader()
    return SoundFileReader()
