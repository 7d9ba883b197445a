from smartvideo.domain.enums.error_kind import ChannelCode, ErrorKind
from smartvideo.domain.enums.file_format import VideoFormats

__all__ = [
    "ChannelCode",
    "ErrorKind",
    "VideoFormats",
]
