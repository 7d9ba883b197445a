# smartvideo/domain/entities/descriptor.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

# int: packed big-endian four-char code; bytes/str: raw tag text
CodecTag = Union[int, bytes, str, None]


@dataclass(frozen=True)
class AffineTransform:
    """
    2x3 affine matrix as stored in container track headers:

        | a  b  0 |
        | c  d  0 |
        | tx ty 1 |
    """
    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    tx: float = 0.0
    ty: float = 0.0

    @classmethod
    def identity(cls) -> "AffineTransform":
        return cls()


@dataclass(frozen=True)
class VideoTrackDescriptor:
    width: int = 0
    height: int = 0
    transform: AffineTransform = field(default_factory=AffineTransform.identity)
    fps: float = 0.0
    codec_tag: CodecTag = None
    bitrate: int = 0


@dataclass(frozen=True)
class AudioTrackDescriptor:
    codec_tag: CodecTag = None
    sample_rate: Optional[int] = None
    channels: Optional[int] = None


@dataclass(frozen=True)
class MediaTrackDescriptor:
    """
    Raw, per-call output of a MediaProbePort adapter. Nothing here is
    normalized yet; see MetadataAssembler.
    """
    source: str
    video: Optional[VideoTrackDescriptor] = None
    audio: Optional[AudioTrackDescriptor] = None
    duration_ms: float = 0
    has_subtitles: bool = False
    stream_count: int = 0
