"""
Parallel verification runner.

Fans checksum records out to a fixed pool of worker threads and fans
their outcomes back into a single stream.

Layout:
    work queue    records, all enqueued before any worker starts
    W workers     dequeue, verify, push an Outcome
    coordinator   waits for every worker, then closes the result stream
    consumer      iterates outcomes as they arrive (any order)
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass, field
from typing import Iterator, Sequence

from sfverify.checksum.verifier import verify
from sfverify.config import VerifyConfig
from sfverify.errors import FileAccessError
from sfverify.manifest.record import ChecksumRecord
from sfverify.pipelines.outcome import Outcome

logger = logging.getLogger(__name__)

# Marks the end of the result stream
_DONE = object()


def verify_record(record: ChecksumRecord, config: VerifyConfig) -> Outcome:
    """
    Verify one record and wrap the result in an Outcome.

    Access failures become ACCESS_ERROR outcomes rather than exceptions.
    """
    try:
        matched, computed = verify(record, config.polynomial, config.buffer_size)
    except FileAccessError as e:
        return Outcome.access_error(record, e)
    if matched:
        return Outcome.match(record, computed)
    return Outcome.mismatch(record, computed)


class _WorkerGroup:
    """Counts live workers; wait() blocks until all have called done()."""

    def __init__(self) -> None:
        self._count = 0
        self._cond = threading.Condition()

    def add(self, n: int = 1) -> None:
        with self._cond:
            self._count += n

    def done(self) -> None:
        with self._cond:
            self._count -= 1
            if self._count <= 0:
                self._cond.notify_all()

    def wait(self) -> None:
        with self._cond:
            while self._count > 0:
                self._cond.wait()


@dataclass
class VerificationPipeline:
    """
    Verifies a sequence of records across a worker pool.

    Each record is verified by exactly one worker exactly once. Outcomes
    are yielded in completion order, not manifest order. There is no
    cancellation: once started, every record is verified.
    """

    records: Sequence[ChecksumRecord]
    config: VerifyConfig = field(default_factory=VerifyConfig)

    # Runtime state
    _work: queue.Queue = field(init=False, repr=False)
    _results: queue.Queue = field(init=False, repr=False)
    _group: _WorkerGroup = field(init=False, repr=False)
    _crashes: list[BaseException] = field(init=False, default_factory=list, repr=False)
    _started: bool = field(init=False, default=False)

    def __post_init__(self) -> None:
        count = len(self.records)
        # Sized to the record count so neither side ever blocks on put()
        self._work = queue.Queue(maxsize=max(count, 1))
        self._results = queue.Queue(maxsize=max(count, 1) + 1)
        self._group = _WorkerGroup()

    @property
    def worker_count(self) -> int:
        """Number of worker threads actually started."""
        return min(self.config.workers, max(len(self.records), 1))

    def start(self) -> None:
        """Enqueue every record, then start the workers and the coordinator."""
        if self._started:
            raise RuntimeError("pipeline already started")
        self._started = True

        for record in self.records:
            self._work.put_nowait(record)

        workers = self.worker_count
        self._group.add(workers)
        logger.debug(
            "Starting %d workers for %d records (%s, %d byte buffers)",
            workers,
            len(self.records),
            self.config.polynomial.value,
            self.config.buffer_size,
        )
        for i in range(workers):
            threading.Thread(
                target=self._worker, name=f"sfverify-worker-{i}", daemon=True
            ).start()

        threading.Thread(target=self._coordinate, name="sfverify-coordinator", daemon=True).start()

    def _worker(self) -> None:
        try:
            while True:
                try:
                    record = self._work.get_nowait()
                except queue.Empty:
                    # The queue was filled before any worker started
                    return
                self._results.put(verify_record(record, self.config))
        except BaseException as e:
            self._crashes.append(e)
        finally:
            self._group.done()

    def _coordinate(self) -> None:
        self._group.wait()
        logger.debug("All workers finished")
        self._results.put(_DONE)

    def outcomes(self) -> Iterator[Outcome]:
        """
        Yield every outcome as it is produced.

        Starts the pipeline if needed. The iterator ends once all workers
        have terminated and the result stream is drained.

        Raises:
            RuntimeError: If a worker died on an unexpected exception.
        """
        if not self._started:
            self.start()
        while True:
            item = self._results.get()
            if item is _DONE:
                break
            yield item

        if self._crashes:
            raise RuntimeError("verification worker failed") from self._crashes[0]

    def __iter__(self) -> Iterator[Outcome]:
        return self.outcomes()


def run_pipeline(
    records: Sequence[ChecksumRecord],
    config: VerifyConfig | None = None,
) -> Iterator[Outcome]:
    """
    Verify records in parallel.

    Args:
        records: Records to verify.
        config: Run configuration. Defaults to VerifyConfig().

    Returns:
        Iterator over outcomes in completion order.
    """
    return VerificationPipeline(records=records, config=config or VerifyConfig()).outcomes()
