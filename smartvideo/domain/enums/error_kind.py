from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    invalid_argument = "invalid_argument"
    no_video_track = "no_video_track"
    source_unreadable = "source_unreadable"
    malformed_descriptor = "malformed_descriptor"
    unsupported_operation = "unsupported_operation"
    timeout = "timeout"


class ChannelCode(StrEnum):
    """Error codes surfaced to the host across the channel boundary."""
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    METADATA_ERROR = "METADATA_ERROR"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"

    @classmethod
    def for_kind(cls, kind: ErrorKind) -> "ChannelCode":
        if kind is ErrorKind.invalid_argument:
            return cls.INVALID_ARGUMENT
        if kind is ErrorKind.unsupported_operation:
            return cls.NOT_IMPLEMENTED
        return cls.METADATA_ERROR
