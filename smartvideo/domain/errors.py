# smartvideo/domain/errors.py
from __future__ import annotations

from typing import Optional

from smartvideo.domain.enums.error_kind import ErrorKind


class MetadataError(RuntimeError):
    """Base class for every terminal extraction/dispatch failure."""
    kind: ErrorKind = ErrorKind.malformed_descriptor

    def __init__(self, message: str, *, source: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.source = source

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r}, source={self.source!r})"


class InvalidArgumentError(MetadataError):
    kind = ErrorKind.invalid_argument


class NoVideoTrackError(MetadataError):
    kind = ErrorKind.no_video_track


class SourceUnreadableError(MetadataError):
    kind = ErrorKind.source_unreadable


class MalformedDescriptorError(MetadataError):
    kind = ErrorKind.malformed_descriptor


class UnsupportedOperationError(MetadataError):
    kind = ErrorKind.unsupported_operation


class ProbeTimeoutError(MetadataError):
    kind = ErrorKind.timeout


class RequestCancelled(Exception):
    """Raised inside a worker when the host detached while the request was running."""
