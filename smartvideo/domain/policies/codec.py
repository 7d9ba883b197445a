# smartvideo/domain/policies/codec.py
from __future__ import annotations

from typing import Optional

from smartvideo.domain.entities.descriptor import CodecTag
from smartvideo.domain.enums.file_format import VideoFormats
from smartvideo.domain.policies.container import container_from_source

UNKNOWN_CODEC = "unknown"


def fourcc_to_string(code: int) -> str:
    """
    Unpack a big-endian four-char code ('avc1' == 0x61766331) into text.
    Returns "" for out-of-range values or non-printable bytes.
    """
    if not isinstance(code, int) or isinstance(code, bool) or not 0 <= code <= 0xFFFFFFFF:
        return ""
    return _decode_tag(code.to_bytes(4, "big"))


def _decode_tag(raw: bytes) -> str:
    raw = raw.split(b"\x00", 1)[0]
    if any(byte < 0x20 or byte > 0x7E for byte in raw):
        return ""
    return raw.decode("ascii").strip()


def tag_to_string(tag: CodecTag) -> str:
    """Best-effort text of a raw codec tag; "" when absent or garbage."""
    if tag is None:
        return ""
    if isinstance(tag, int):
        return fourcc_to_string(tag)
    if isinstance(tag, (bytes, bytearray)):
        return _decode_tag(bytes(tag))
    if isinstance(tag, str):
        try:
            return _decode_tag(tag.encode("ascii"))
        except UnicodeEncodeError:
            return ""
    return ""


def codec_from_extension(source: Optional[str]) -> Optional[str]:
    ext = container_from_source(source)
    try:
        return VideoFormats(ext).default_codec
    except ValueError:
        return None


def identify_codec(tag: CodecTag, source: Optional[str] = None) -> str:
    """
    Normalized codec name for a raw tag. When the tag is missing or garbage,
    fall back to the source extension (mp4/m4v -> h264, webm -> vp8,
    ogv -> theora), then to "unknown". Never raises.
    """
    name = tag_to_string(tag)
    if name:
        return name
    return codec_from_extension(source) or UNKNOWN_CODEC
