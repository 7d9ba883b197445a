# smartvideo/services/api/deps.py
from __future__ import annotations

from fastapi import Request

from smartvideo.services.channel.host import VideoInfoHost


def get_host(request: Request) -> VideoInfoHost:
    """
    The VideoInfoHost attached for this app's lifetime (see app.lifespan).
    Override in tests via app.dependency_overrides or by passing a host to create_app().
    """
    return request.app.state.host
