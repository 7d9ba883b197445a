# smartvideo/services/schemas/channel.py
from __future__ import annotations

from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from smartvideo.domain.enums.error_kind import ChannelCode


class ChannelResponse(BaseModel):
    """
    One answer on the host channel: a success payload (JSON text for getInfo,
    list of JSON texts for getBatch), an error, or not-implemented.
    """
    status: Literal["success", "error", "not_implemented"]
    payload: Optional[Union[str, List[str]]] = None
    code: Optional[ChannelCode] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, payload: Union[str, List[str]]) -> "ChannelResponse":
        return cls(status="success", payload=payload)

    @classmethod
    def error(cls, code: ChannelCode, message: str) -> "ChannelResponse":
        return cls(status="error", code=code, message=message)

    @classmethod
    def not_implemented(cls, method: str) -> "ChannelResponse":
        return cls(
            status="not_implemented",
            code=ChannelCode.NOT_IMPLEMENTED,
            message=f"Method {method!r} is not implemented",
        )

    @property
    def ok(self) -> bool:
        return self.status == "success"


class ChannelRequest(BaseModel):
    method: str = Field(..., examples=["getInfo", "getBatch"])
    arguments: Any = Field(None, examples=[{"path": "/videos/clip.mp4"}])


class InfoRequest(BaseModel):
    path: str = Field(..., examples=["/videos/clip.mp4", "https://cdn.example.com/clip.webm"])


class BatchRequest(BaseModel):
    paths: List[str] = Field(..., examples=[["/videos/a.mp4", "/videos/b.mov"]])


class ErrorBody(BaseModel):
    code: ChannelCode
    message: str
