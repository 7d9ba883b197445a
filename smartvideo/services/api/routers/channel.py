# smartvideo/services/api/routers/channel.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from smartvideo.common.settings import get_settings
from smartvideo.services.api.deps import get_host
from smartvideo.services.channel.host import VideoInfoHost
from smartvideo.services.schemas.channel import ChannelRequest, ChannelResponse

cfg = get_settings()
router = APIRouter(prefix=f"{cfg.api.prefix}/channel", tags=["channel"])


@router.post("", response_model=ChannelResponse, response_model_exclude_none=True)
def call_channel(req: ChannelRequest, host: VideoInfoHost = Depends(get_host)) -> ChannelResponse:
    """
    Raw method-channel passthrough: always 200, the outcome is in `status`.
    """
    return host.handle(req.method, req.arguments).result()
