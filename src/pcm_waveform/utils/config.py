from __future__ import annotations

from pathlib import Path
from typing import Literal

import json

from pydantic import BaseModel, Field, field_validator

from pcm_waveform.domain.policies import DecodePolicy, FormatPolicy, RenderPolicy, TruncationMode
from pcm_waveform.format_contract import DEFAULT_HEADROOM, MAX_BITS_PER_SAMPLE, MAX_CHANNEL_COUNT, EncodingKind


class FormatConfig(BaseModel):
    max_channel_count: int = Field(MAX_CHANNEL_COUNT, ge=1, le=MAX_CHANNEL_COUNT)
    max_bits_per_sample: int = Field(MAX_BITS_PER_SAMPLE, ge=8, le=MAX_BITS_PER_SAMPLE)
    companded_encodings: list[EncodingKind] = Field(
        default_factory=lambda: [EncodingKind.ULAW, EncodingKind.ALAW]
    )

    @field_validator("companded_encodings")
    @classmethod
    def _validate_companded(cls, value: list[EncodingKind]) -> list[EncodingKind]:
        linear = {EncodingKind.PCM_SIGNED, EncodingKind.PCM_UNSIGNED}
        if linear.intersection(value):
            raise ValueError("companded_encodings may only list non-linear encodings.")
        return value


class DecodeConfig(BaseModel):
    truncation: Literal["clamp", "strict"] = "clamp"
    detect_8bit_signedness: bool = True


class RenderConfig(BaseModel):
    headroom: float = Field(DEFAULT_HEADROOM, gt=0.0, le=10.0)


class ViewerConfig(BaseModel):
    format: FormatConfig = Field(default_factory=FormatConfig)
    decode: DecodeConfig = Field(default_factory=DecodeConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)

    def to_format_policy(self) -> FormatPolicy:
        return FormatPolicy(
            max_channel_count=self.format.max_channel_count,
            max_bits_per_sample=self.format.max_bits_per_sample,
            companded_encodings=frozenset(self.format.companded_encodings),
        )

    def to_decode_policy(self) -> DecodePolicy:
        return DecodePolicy(
            truncation=TruncationMode(self.decode.truncation),
            detect_8bit_signedness=self.decode.detect_8bit_signedness,
            format_policy=self.to_format_policy(),
        )

    def to_render_policy(self) -> RenderPolicy:
        return RenderPolicy(headroom=self.render.headroom)


def load_viewer_config(path: Path) -> ViewerConfig:
    data = _load_config_data(path)
    return ViewerConfig.model_validate(data)


def _load_config_data(path: Path) -> dict:
    if path.suffix.lower() in {".yaml", ".yml"}:
        import yaml

        with path.open("r", encoding="utf-8") as handle:
            try:
                return yaml.safe_load(handle) or {}
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)
