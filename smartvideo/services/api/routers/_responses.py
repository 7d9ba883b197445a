# smartvideo/services/api/routers/_responses.py
from __future__ import annotations

from http import HTTPStatus

from fastapi import HTTPException

from smartvideo.domain.enums.error_kind import ChannelCode
from smartvideo.services.schemas.channel import ChannelResponse, ErrorBody

_STATUS_FOR_CODE = {
    ChannelCode.INVALID_ARGUMENT: HTTPStatus.BAD_REQUEST,
    ChannelCode.METADATA_ERROR: HTTPStatus.UNPROCESSABLE_ENTITY,
    ChannelCode.NOT_IMPLEMENTED: HTTPStatus.NOT_IMPLEMENTED,
}


def raise_for_response(resp: ChannelResponse) -> None:
    """Turn a non-success channel answer into an HTTPException with an ErrorBody detail."""
    if resp.ok:
        return
    code = resp.code or ChannelCode.METADATA_ERROR
    raise HTTPException(
        status_code=_STATUS_FOR_CODE.get(code, HTTPStatus.INTERNAL_SERVER_ERROR),
        detail=ErrorBody(code=code, message=resp.message or "").model_dump(mode="json"),
    )
