# smartvideo/services/schemas/metadata.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from smartvideo.domain.entities.metadata import CanonicalVideoMetadata


class VideoMetadataSchema(BaseModel):
    """Wire form of CanonicalVideoMetadata (camelCase keys)."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    width: int = Field(..., ge=0, examples=[1920])
    height: int = Field(..., ge=0, examples=[1080])
    duration: int = Field(..., ge=0, description="Milliseconds", examples=[5000])
    codec: str = Field(..., examples=["avc1", "hevc", "unknown"])
    bitrate: int = Field(..., ge=0, description="Bits/second, 0 if unavailable")
    fps: float = Field(..., ge=0, examples=[29.97])
    rotation: int = Field(..., examples=[0, 90, 180, 270])
    container: str = Field(..., examples=["mp4", ""])
    audio_codec: Optional[str] = Field(None, alias="audioCodec", examples=["mp4a"])
    sample_rate: Optional[int] = Field(None, alias="sampleRate", ge=0, examples=[44100])
    channels: Optional[int] = Field(None, ge=0, examples=[2])
    has_audio: bool = Field(..., alias="hasAudio")
    has_subtitles: bool = Field(..., alias="hasSubtitles")
    stream_count: int = Field(..., alias="streamCount", ge=0)

    @model_validator(mode="after")
    def _audio_fields_follow_has_audio(self) -> "VideoMetadataSchema":
        if self.has_audio and self.audio_codec is None:
            raise ValueError("audioCodec is required when hasAudio is true")
        if not self.has_audio and (
            self.audio_codec is not None or self.sample_rate is not None or self.channels is not None
        ):
            raise ValueError("audioCodec, sampleRate and channels require hasAudio")
        return self

    @classmethod
    def from_domain(cls, md: CanonicalVideoMetadata) -> "VideoMetadataSchema":
        return cls(**md.as_dict())

    def to_domain(self) -> CanonicalVideoMetadata:
        return CanonicalVideoMetadata(**self.model_dump())


class MetadataEnvelope(BaseModel):
    success: bool = True
    data: VideoMetadataSchema

    def to_json(self) -> str:
        # optional audio fields are dropped, never sent as null
        return self.model_dump_json(by_alias=True, exclude_none=True)

    @classmethod
    def for_metadata(cls, md: CanonicalVideoMetadata) -> "MetadataEnvelope":
        return cls(data=VideoMetadataSchema.from_domain(md))


def metadata_to_json(md: CanonicalVideoMetadata) -> str:
    return MetadataEnvelope.for_metadata(md).to_json()


def metadata_from_json(text: str) -> CanonicalVideoMetadata:
    return MetadataEnvelope.model_validate_json(text).data.to_domain()
