# smartvideo/services/api/routers/videos.py
from __future__ import annotations

import json
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from smartvideo.common.settings import get_settings
from smartvideo.services.api.deps import get_host
from smartvideo.services.api.routers._responses import raise_for_response
from smartvideo.services.channel.dispatcher import GET_BATCH, GET_INFO
from smartvideo.services.channel.host import VideoInfoHost
from smartvideo.services.schemas.channel import BatchRequest, InfoRequest

cfg = get_settings()
router = APIRouter(prefix=f"{cfg.api.prefix}/videos", tags=["videos"])


# Sync handlers: FastAPI runs them in its threadpool, and the extraction
# itself happens on the host's workers.

@router.post("/info")
def get_info(payload: InfoRequest, host: VideoInfoHost = Depends(get_host)) -> Dict[str, Any]:
    resp = host.handle(GET_INFO, payload.model_dump()).result()
    raise_for_response(resp)
    return json.loads(resp.payload)


@router.post("/batch")
def get_batch(payload: BatchRequest, host: VideoInfoHost = Depends(get_host)) -> List[Dict[str, Any]]:
    resp = host.handle(GET_BATCH, payload.model_dump()).result()
    raise_for_response(resp)
    return [json.loads(item) for item in resp.payload]
