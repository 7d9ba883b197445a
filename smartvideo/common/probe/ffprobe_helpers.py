# smartvideo/common/probe/ffprobe_helpers.py
from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Optional

from smartvideo.domain.entities.descriptor import (
    AffineTransform,
    AudioTrackDescriptor,
    MediaTrackDescriptor,
    VideoTrackDescriptor,
)
from smartvideo.domain.errors import MalformedDescriptorError
from smartvideo.domain.policies.rotation import transform_for_rotation

# ffprobe prints non-printable tag bytes as "[27]"
_BRACKETED_BYTE = re.compile(r"\[\d+\]")
_FIXED_16_16 = 65536.0


def build_ffprobe_cmd(
    source: str,
    *,
    ffprobe_bin: str = "ffprobe",
    log_level: str = "error",
    extra_args: Iterable[str] | None = None,
) -> List[str]:
    """
    Build a robust ffprobe command that emits JSON we can parse consistently.
    """
    base = [
        ffprobe_bin,
        "-v", log_level,
        "-print_format", "json",
        "-show_format",
        "-show_streams",
    ]
    if extra_args:
        base += list(extra_args)
    # Stop option parsing in case of weird filenames
    return base + ["--", str(source)]


def parse_ffprobe(data: Any, source: str) -> MediaTrackDescriptor:
    """
    Turn ffprobe JSON (`-show_format -show_streams`) into a raw
    MediaTrackDescriptor. Safe to call in unit tests with fixture JSON.
    Raises MalformedDescriptorError when the payload does not have the
    expected shape.
    """
    if not isinstance(data, dict):
        raise MalformedDescriptorError("ffprobe output is not a JSON object", source=source)
    fmt = data.get("format") or {}
    streams = data.get("streams") or []
    if not isinstance(fmt, dict) or not isinstance(streams, list):
        raise MalformedDescriptorError("ffprobe output has unexpected format/streams types", source=source)
    if not all(isinstance(s, dict) for s in streams):
        raise MalformedDescriptorError("ffprobe stream entries must be objects", source=source)

    try:
        vstreams = [s for s in streams if s.get("codec_type") == "video" and not _disposition(s, "attached_pic")]
        astreams = [s for s in streams if s.get("codec_type") == "audio"]
        sstreams = [s for s in streams if s.get("codec_type") == "subtitle"]

        vstream = next((s for s in vstreams if _disposition(s, "default")), None)
        if vstream is None and vstreams:
            vstream = vstreams[0]
        astream = astreams[0] if astreams else None

        video = _video_track(vstream) if vstream is not None else None
        audio = _audio_track(astream) if astream is not None else None
        duration_ms = _duration_ms(fmt, streams)
        stream_count = _int(fmt.get("nb_streams"), default=len(streams))
    except (TypeError, ValueError, AttributeError) as e:
        raise MalformedDescriptorError(f"ffprobe field has unexpected value: {e}", source=source) from e

    return MediaTrackDescriptor(
        source=source,
        video=video,
        audio=audio,
        duration_ms=duration_ms,
        has_subtitles=bool(sstreams),
        stream_count=stream_count,
    )


# ---- stream parsing ----------------------------------------------------------

def _video_track(s: Dict[str, Any]) -> VideoTrackDescriptor:
    return VideoTrackDescriptor(
        width=_int(s.get("width")),
        height=_int(s.get("height")),
        transform=stream_transform(s),
        fps=parse_rate(s.get("avg_frame_rate")) or parse_rate(s.get("r_frame_rate")) or 0.0,
        codec_tag=stream_codec_tag(s),
        bitrate=_int(s.get("bit_rate"), default=None) or _int(_get_tag(s, "BPS"), default=0),
    )


def _audio_track(s: Dict[str, Any]) -> AudioTrackDescriptor:
    return AudioTrackDescriptor(
        codec_tag=stream_codec_tag(s),
        sample_rate=_int(s.get("sample_rate"), default=None) or None,
        channels=_int(s.get("channels"), default=None) or None,
    )


def _duration_ms(fmt: Dict[str, Any], streams: List[Dict[str, Any]]) -> float:
    # prefer format.duration, else the longest stream
    duration = _float(fmt.get("duration"))
    if duration is None:
        candidates = [_float(s.get("duration")) for s in streams]
        candidates = [d for d in candidates if d is not None]
        duration = max(candidates) if candidates else 0.0
    return max(0.0, duration) * 1000.0


def stream_codec_tag(s: Dict[str, Any]) -> Optional[str]:
    """Printable four-char tag when the container stores one, else ffprobe's codec_name."""
    tag = s.get("codec_tag_string")
    if isinstance(tag, str) and tag.strip() and not _BRACKETED_BYTE.search(tag):
        return tag
    name = s.get("codec_name")
    return str(name) if name else None


def stream_transform(s: Dict[str, Any]) -> AffineTransform:
    """
    Track transform from the display matrix side data, else from a rotation
    angle (side data is counter-clockwise, the legacy `rotate` tag clockwise).
    """
    rotation = None
    for sd in s.get("side_data_list") or []:
        if not isinstance(sd, dict):
            continue
        matrix = parse_display_matrix(sd.get("displaymatrix"))
        if matrix is not None:
            return matrix
        if rotation is None and sd.get("rotation") is not None:
            rotation = -float(sd["rotation"])

    if rotation is None:
        tag = _get_tag(s, "rotate")
        rotation = float(tag) if tag is not None else None
    if rotation is None:
        return AffineTransform.identity()
    return transform_for_rotation(rotation)


def parse_display_matrix(text: Any) -> Optional[AffineTransform]:
    """
    Parse ffprobe's textual 3x3 display matrix:

        00000000:            0       65536           0
        00000001:      -65536           0           0
        00000002:            0           0  1073741824
    """
    if not isinstance(text, str):
        return None
    values: List[int] = []
    for line in text.strip().splitlines():
        _, _, row = line.partition(":")
        values += [int(v) for v in row.split()]
    if len(values) != 9:
        return None
    a, b, _, c, d, _, tx, ty, _ = values
    return AffineTransform(
        a=a / _FIXED_16_16,
        b=b / _FIXED_16_16,
        c=c / _FIXED_16_16,
        d=d / _FIXED_16_16,
        tx=tx / _FIXED_16_16,
        ty=ty / _FIXED_16_16,
    )


# ---- tiny parse helpers ------------------------------------------------------

def _disposition(s: Dict[str, Any], key: str) -> bool:
    disp = s.get("disposition")
    if disp is None:
        return False
    if not isinstance(disp, dict):
        raise TypeError(f"disposition must be an object, got {type(disp).__name__}")
    return disp.get(key) == 1


def _int(x: Any, default: Optional[int] = 0) -> Optional[int]:
    if x is None or x == "" or x == "N/A":
        return default
    return int(float(x))


def _float(x: Any) -> Optional[float]:
    if x is None or x == "" or x == "N/A":
        return None
    try:
        return float(x)
    except (TypeError, ValueError):
        return None


def parse_rate(rate: Optional[str]) -> Optional[float]:
    """ "30000/1001" -> 29.97; "0/0" and garbage -> None."""
    if not rate:
        return None
    if "/" not in str(rate):
        return _float(rate) or None
    n, d = str(rate).split("/", 1)
    num, den = _float(n), _float(d)
    if not num or not den:
        return None
    return num / den


def _get_tag(obj: Dict[str, Any] | None, key: str) -> Optional[str]:
    if not obj:
        return None
    tags = obj.get("tags") or {}
    if not isinstance(tags, dict):
        return None
    val = tags.get(key)
    return str(val) if val is not None else None
