# smartvideo/domain/entities/metadata.py
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Union

from smartvideo.domain.enums.error_kind import ErrorKind

_OPTIONAL_AUDIO = ("audio_codec", "sample_rate", "channels")


@dataclass(frozen=True)
class CanonicalVideoMetadata:
    """
    Normalized, framework-free metadata record. Every backend produces this
    exact shape. The audio trio is None when unknown and is dropped on
    serialization rather than sent as null.
    """
    width: int
    height: int
    duration: int
    codec: str
    bitrate: int
    fps: float
    rotation: int
    container: str
    has_audio: bool
    has_subtitles: bool
    stream_count: int
    audio_codec: Optional[str] = None
    sample_rate: Optional[int] = None
    channels: Optional[int] = None

    def __post_init__(self) -> None:
        if self.has_audio and self.audio_codec is None:
            raise ValueError("audio_codec is required when has_audio is set")
        if not self.has_audio and any(getattr(self, name) is not None for name in _OPTIONAL_AUDIO):
            raise ValueError("audio fields are only allowed when has_audio is set")

    def as_dict(self) -> Dict[str, Any]:
        """snake_case dict with absent optional fields omitted."""
        out: Dict[str, Any] = {}
        for f in fields(self):
            val = getattr(self, f.name)
            if f.name in _OPTIONAL_AUDIO and val is None:
                continue
            out[f.name] = val
        return out


@dataclass(frozen=True)
class ExtractionSuccess:
    source: str
    metadata: CanonicalVideoMetadata

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class ExtractionFailure:
    source: Optional[str]
    kind: ErrorKind
    message: str

    @property
    def ok(self) -> bool:
        return False


ExtractionResult = Union[ExtractionSuccess, ExtractionFailure]
