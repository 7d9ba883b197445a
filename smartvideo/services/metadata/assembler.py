# smartvideo/services/metadata/assembler.py
from __future__ import annotations

import math
from numbers import Real
from typing import Any, Callable, Optional

from smartvideo.common.logging import get_logger
from smartvideo.domain.entities.descriptor import (
    AffineTransform,
    AudioTrackDescriptor,
    MediaTrackDescriptor,
)
from smartvideo.domain.entities.metadata import (
    CanonicalVideoMetadata,
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
)
from smartvideo.domain.errors import (
    MalformedDescriptorError,
    MetadataError,
    NoVideoTrackError,
    SourceUnreadableError,
)
from smartvideo.domain.policies.codec import identify_codec
from smartvideo.domain.policies.container import container_from_source
from smartvideo.domain.policies.rotation import normalize_rotation
from smartvideo.domain.ports.probe import MediaProbePort

logger = get_logger(__name__)


class MetadataAssembler:
    """
    Compose probe output into a CanonicalVideoMetadata.

    `assemble()` is pure; `extract()` calls the probe first. The probe is
    obtained from a factory per call so each request gets a fresh adapter.
    """

    def __init__(self, probe: Optional[Callable[[], MediaProbePort]] = None) -> None:
        if probe is None:
            from smartvideo.services.probe.ffprobe_adapter import FFprobeAdapter  # default adapter
            probe = FFprobeAdapter
        self.probe_factory: Callable[[], MediaProbePort] = probe

    # ---- public API -----------------------------------------------------------
    def extract(self, source: str) -> CanonicalVideoMetadata:
        prober = self.probe_factory()
        try:
            descriptor = prober.probe(source)
        except MetadataError:
            raise
        except OSError as e:
            raise SourceUnreadableError(f"Could not read {source}: {e}", source=source) from e
        except Exception as e:
            # a port that trips over its own native output has produced no usable descriptor
            raise MalformedDescriptorError(f"Malformed track descriptor: {e}", source=source) from e
        return self.assemble(descriptor)

    def try_extract(self, source: str) -> ExtractionResult:
        """Like extract(), but failures come back as an ExtractionFailure."""
        try:
            return ExtractionSuccess(source=source, metadata=self.extract(source))
        except MetadataError as e:
            logger.warning("metadata extraction failed for %s: [%s] %s", source, e.kind.value, e.message)
            return ExtractionFailure(source=source, kind=e.kind, message=e.message)

    def assemble(self, descriptor: MediaTrackDescriptor) -> CanonicalVideoMetadata:
        if not isinstance(descriptor, MediaTrackDescriptor):
            raise MalformedDescriptorError(
                f"expected MediaTrackDescriptor, got {type(descriptor).__name__}"
            )
        source = descriptor.source
        video = descriptor.video
        if video is None:
            raise NoVideoTrackError("No video track found", source=source)

        try:
            transform = video.transform if video.transform is not None else AffineTransform.identity()
            if not isinstance(transform, AffineTransform):
                raise TypeError(f"transform must be AffineTransform, got {type(transform).__name__}")
            has_audio = descriptor.audio is not None
            audio = _audio_fields(descriptor.audio) if has_audio else {}

            return CanonicalVideoMetadata(
                # natural size as reported; rotation is metadata, not applied
                width=_count(video.width, "width"),
                height=_count(video.height, "height"),
                duration=int(round(_number(descriptor.duration_ms, "duration_ms"))),
                codec=identify_codec(video.codec_tag, source),
                bitrate=_count(video.bitrate or 0, "bitrate"),
                fps=float(_number(video.fps or 0.0, "fps")),
                rotation=normalize_rotation(transform),
                container=container_from_source(source),
                has_audio=has_audio,
                has_subtitles=bool(descriptor.has_subtitles),
                stream_count=_count(descriptor.stream_count, "stream_count"),
                **audio,
            )
        except (TypeError, ValueError, AttributeError) as e:
            raise MalformedDescriptorError(f"Malformed track descriptor: {e}", source=source) from e


# ---- field helpers ---------------------------------------------------------------

def _audio_fields(audio: Any) -> dict:
    if not isinstance(audio, AudioTrackDescriptor):
        raise TypeError(f"audio must be AudioTrackDescriptor, got {type(audio).__name__}")
    out: dict = {"audio_codec": identify_codec(audio.codec_tag)}
    # omit rather than guess: no 44100 Hz / stereo defaults
    if audio.sample_rate:
        out["sample_rate"] = _count(audio.sample_rate, "sample_rate")
    if audio.channels:
        out["channels"] = _count(audio.channels, "channels")
    return out


def _number(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise TypeError(f"{name} must be a number, got {type(value).__name__}")
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"{name} must be a finite non-negative number, got {value!r}")
    return value


def _count(value: Any, name: str) -> int:
    return int(_number(value, name))
