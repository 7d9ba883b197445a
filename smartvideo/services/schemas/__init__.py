from smartvideo.services.schemas.channel import (
    BatchRequest,
    ChannelRequest,
    ChannelResponse,
    ErrorBody,
    InfoRequest,
)
from smartvideo.services.schemas.metadata import (
    MetadataEnvelope,
    VideoMetadataSchema,
    metadata_from_json,
    metadata_to_json,
)

__all__ = [
    "BatchRequest",
    "ChannelRequest",
    "ChannelResponse",
    "ErrorBody",
    "InfoRequest",
    "MetadataEnvelope",
    "VideoMetadataSchema",
    "metadata_from_json",
    "metadata_to_json",
]
