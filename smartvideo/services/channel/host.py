# smartvideo/services/channel/host.py
from __future__ import annotations

from concurrent.futures import Future
from typing import Any, Callable, Optional

from smartvideo.common.concurrency.thread_manager import ThreadManager
from smartvideo.common.logging import get_logger
from smartvideo.common.settings import Settings, get_settings
from smartvideo.domain.enums.error_kind import ChannelCode
from smartvideo.domain.errors import (
    InvalidArgumentError,
    RequestCancelled,
    UnsupportedOperationError,
)
from smartvideo.domain.ports.probe import MediaProbePort
from smartvideo.services.channel.dispatcher import RequestDispatcher
from smartvideo.services.metadata.assembler import MetadataAssembler
from smartvideo.services.metadata.batch import BatchOrchestrator
from smartvideo.services.schemas.channel import ChannelResponse

logger = get_logger(__name__)

ResultCallback = Callable[[ChannelResponse], None]


class VideoInfoHost:
    """
    Attach point for a host application. Requests are validated on the
    calling thread and extracted on a ThreadManager worker; `detach()` cancels
    queued work and stops running batches at the next item. A detached (or
    cancelled) caller never receives a result.
    """

    def __init__(
        self,
        *,
        probe: Optional[Callable[[], MediaProbePort]] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        cfg = settings or get_settings()
        self.cfg = cfg
        self.workers: ThreadManager = ThreadManager(
            name="smartvideo-request",
            max_workers=cfg.concurrency.request_workers,
            max_queue=cfg.concurrency.thread_queue_maxsize,
        )
        self.fanout: Optional[ThreadManager] = None
        if cfg.concurrency.batch_fanout_workers > 0:
            self.fanout = ThreadManager(
                name="smartvideo-fanout",
                max_workers=cfg.concurrency.batch_fanout_workers,
            )

        assembler = MetadataAssembler(probe)
        orchestrator = BatchOrchestrator(
            assembler,
            fanout=self.fanout,
            cancel_event=self.workers.stop_event,
        )
        self.dispatcher = RequestDispatcher(assembler, orchestrator)

    @property
    def attached(self) -> bool:
        return not self.workers.closed

    def handle(
        self,
        method: str,
        arguments: Any,
        on_result: Optional[ResultCallback] = None,
    ) -> Future[ChannelResponse]:
        """
        Submit a channel call. Invalid arguments and unknown methods resolve
        immediately; extraction completes on a worker.
        If `on_result` is given it is invoked once, only while still attached.
        """
        if not self.attached:
            raise RuntimeError("VideoInfoHost: handle() after detach")

        try:
            call = self.dispatcher.prepare(method, arguments)
        except UnsupportedOperationError:
            return self._resolved(ChannelResponse.not_implemented(method), on_result)
        except InvalidArgumentError as e:
            return self._resolved(ChannelResponse.error(ChannelCode.INVALID_ARGUMENT, e.message), on_result)

        fut = self.workers.submit(self._guarded(call))
        if on_result is not None:
            fut.add_done_callback(lambda f: self._deliver(f, on_result))
        return fut

    def detach(self) -> None:
        """Cancel all outstanding work. Safe to call more than once."""
        if not self.attached:
            return
        stats = self.workers.stats()
        logger.info("detaching: cancelling %d in-flight request(s)", stats.in_flight)
        cancel = self.cfg.concurrency.cancel_on_exit
        # the stop event is set first so running batches stop at their next item
        self.workers.shutdown(wait=False, cancel_futures=cancel)
        if self.fanout is not None:
            self.fanout.shutdown(wait=False, cancel_futures=cancel)

    def __enter__(self) -> "VideoInfoHost":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.detach()

    # ---- delivery -------------------------------------------------------------------
    @staticmethod
    def _guarded(call: Callable[[], ChannelResponse]) -> Callable[[], ChannelResponse]:
        """Turn an unexpected worker failure into a terminal METADATA_ERROR answer."""
        def _run() -> ChannelResponse:
            try:
                return call()
            except RequestCancelled:
                raise
            except Exception as e:
                logger.exception("request failed unexpectedly")
                return ChannelResponse.error(ChannelCode.METADATA_ERROR, str(e))

        return _run

    def _resolved(self, response: ChannelResponse, on_result: Optional[ResultCallback]) -> Future[ChannelResponse]:
        fut: Future[ChannelResponse] = Future()
        fut.set_result(response)
        if on_result is not None:
            on_result(response)
        return fut

    def _deliver(self, fut: Future[ChannelResponse], on_result: ResultCallback) -> None:
        if fut.cancelled() or not self.attached:
            logger.info("dropping result for a cancelled request")
            return
        if fut.exception() is not None:
            # RequestCancelled; every other failure already resolved as METADATA_ERROR
            logger.info("dropping result for a cancelled request")
            return
        on_result(fut.result())
