# smartvideo/domain/enums/file_format.py
from __future__ import annotations

from enum import StrEnum


class VideoFormats(StrEnum):
    """Container extensions with a known default video codec."""
    MP4 = "mp4"
    M4V = "m4v"
    WEBM = "webm"
    OGV = "ogv"

    @property
    def default_codec(self) -> str:
        return _DEFAULT_CODECS[self]


_DEFAULT_CODECS = {
    VideoFormats.MP4: "h264",
    VideoFormats.M4V: "h264",
    VideoFormats.WEBM: "vp8",
    VideoFormats.OGV: "theora",
}
