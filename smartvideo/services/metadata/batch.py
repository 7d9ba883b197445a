# smartvideo/services/metadata/batch.py
from __future__ import annotations

import threading
from typing import List, Optional, Sequence, Union

from smartvideo.common.concurrency.thread_manager import ThreadManager
from smartvideo.common.logging import get_logger
from smartvideo.domain.entities.metadata import (
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
)
from smartvideo.domain.enums.error_kind import ErrorKind
from smartvideo.domain.errors import RequestCancelled
from smartvideo.services.metadata.assembler import MetadataAssembler

logger = get_logger(__name__)

BatchOutcome = Union[List[ExtractionSuccess], ExtractionFailure]


class BatchOrchestrator:
    """
    Fail-fast batch extraction.

    Items are handled in input order. The first failure (in input order) is
    returned on its own and any successes already computed are dropped; a
    fully successful batch returns one ExtractionSuccess per input, same order.

    With a `fanout` ThreadManager the items are probed concurrently; results
    are still collected in input order, so the same failure wins as in the
    sequential run.
    """

    def __init__(
        self,
        assembler: MetadataAssembler,
        *,
        fanout: Optional[ThreadManager] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self.assembler = assembler
        self.fanout = fanout
        self.cancel_event = cancel_event

    def process_batch(self, items: Sequence[str]) -> BatchOutcome:
        if not items:
            return ExtractionFailure(
                source=None,
                kind=ErrorKind.invalid_argument,
                message="Paths must be a non-empty list",
            )

        sources = list(items)
        if self.fanout is not None and len(sources) > 1:
            return _fail_fast(self.fanout.map(self._extract_one, sources))

        results: List[ExtractionResult] = []
        for source in sources:
            res = self._extract_one(source)
            results.append(res)
            if isinstance(res, ExtractionFailure):
                break
        return _fail_fast(results, total=len(sources))

    def _extract_one(self, source: str) -> ExtractionResult:
        self._check_cancelled()
        return self.assembler.try_extract(source)

    def _check_cancelled(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise RequestCancelled("batch cancelled")


def _fail_fast(results: Sequence[ExtractionResult], total: Optional[int] = None) -> BatchOutcome:
    total = total if total is not None else len(results)
    successes: List[ExtractionSuccess] = []
    for i, res in enumerate(results):
        if isinstance(res, ExtractionFailure):
            logger.info("batch aborted at item %d/%d (%s): %s", i + 1, total, res.source, res.kind.value)
            return res
        successes.append(res)
    return successes
