from __future__ import annotations

from typing import Protocol

from smartvideo.domain.entities.descriptor import MediaTrackDescriptor


class MediaProbePort(Protocol):
    """
    Inspect a local path or URL and return its raw track descriptor.

    Implementations raise SourceUnreadableError, MalformedDescriptorError or
    ProbeTimeoutError; a source without video is returned with video=None.
    """
    def probe(self, source: str) -> MediaTrackDescriptor: ...
