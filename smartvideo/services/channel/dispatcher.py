# smartvideo/services/channel/dispatcher.py
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from smartvideo.common.logging import get_logger
from smartvideo.domain.entities.metadata import ExtractionFailure
from smartvideo.domain.enums.error_kind import ChannelCode
from smartvideo.domain.errors import InvalidArgumentError, UnsupportedOperationError
from smartvideo.services.metadata.assembler import MetadataAssembler
from smartvideo.services.metadata.batch import BatchOrchestrator
from smartvideo.services.schemas.channel import ChannelResponse
from smartvideo.services.schemas.metadata import metadata_to_json

logger = get_logger(__name__)

GET_INFO = "getInfo"
GET_BATCH = "getBatch"


class RequestDispatcher:
    """
    Boundary between the host channel and extraction. Knows the two
    supported operations and their argument shapes; does no extraction itself.

    Usage:
        call = dispatcher.prepare("getInfo", {"path": "/videos/a.mp4"})
        response = call()   # blocking; run it on a worker thread
    """

    def __init__(self, assembler: MetadataAssembler, orchestrator: BatchOrchestrator) -> None:
        self.assembler = assembler
        self.orchestrator = orchestrator
        self._operations: Dict[str, Callable[[Any], Callable[[], ChannelResponse]]] = {
            GET_INFO: self._prepare_info,
            GET_BATCH: self._prepare_batch,
        }

    @property
    def operations(self) -> List[str]:
        return list(self._operations)

    def prepare(self, method: str, arguments: Any) -> Callable[[], ChannelResponse]:
        """
        Validate a call and return the deferred extraction.
        Raises UnsupportedOperationError / InvalidArgumentError before any probe runs.
        """
        op = self._operations.get(method)
        if op is None:
            raise UnsupportedOperationError(f"Method {method!r} is not implemented")
        return op(arguments)

    def dispatch(self, method: str, arguments: Any) -> ChannelResponse:
        """Validate and run a call on the current thread."""
        try:
            call = self.prepare(method, arguments)
        except UnsupportedOperationError:
            return ChannelResponse.not_implemented(method)
        except InvalidArgumentError as e:
            return ChannelResponse.error(ChannelCode.INVALID_ARGUMENT, e.message)
        return call()

    # ---- operations -------------------------------------------------------------
    def _prepare_info(self, arguments: Any) -> Callable[[], ChannelResponse]:
        path = _require_path(_require_mapping(arguments), "path", "Path is required")

        def _run() -> ChannelResponse:
            res = self.assembler.try_extract(path)
            if isinstance(res, ExtractionFailure):
                return _failure_response(res)
            return ChannelResponse.success(metadata_to_json(res.metadata))

        return _run

    def _prepare_batch(self, arguments: Any) -> Callable[[], ChannelResponse]:
        args = _require_mapping(arguments)
        paths = args.get("paths")
        if paths is None:
            raise InvalidArgumentError("Paths list is required")
        if not isinstance(paths, (list, tuple)) or not paths:
            raise InvalidArgumentError("Paths must be a non-empty list")
        for i, p in enumerate(paths):
            if not isinstance(p, str) or not p.strip():
                raise InvalidArgumentError(f"Paths[{i}] must be a non-empty string")
        sources = list(paths)

        def _run() -> ChannelResponse:
            outcome = self.orchestrator.process_batch(sources)
            if isinstance(outcome, ExtractionFailure):
                return _failure_response(outcome)
            return ChannelResponse.success([metadata_to_json(r.metadata) for r in outcome])

        return _run


# ---- validation helpers ------------------------------------------------------------

def _require_mapping(arguments: Any) -> dict:
    if not isinstance(arguments, dict):
        raise InvalidArgumentError("Arguments must be a map")
    return arguments


def _require_path(args: dict, key: str, missing_msg: str) -> str:
    value: Optional[Any] = args.get(key)
    if value is None:
        raise InvalidArgumentError(missing_msg)
    if not isinstance(value, str):
        raise InvalidArgumentError(f"{key.capitalize()} must be a string")
    if not value.strip():
        raise InvalidArgumentError(missing_msg)
    return value


def _failure_response(failure: ExtractionFailure) -> ChannelResponse:
    return ChannelResponse.error(ChannelCode.for_kind(failure.kind), failure.message)
