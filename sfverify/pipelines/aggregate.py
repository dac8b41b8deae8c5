"""
Outcome aggregation.

Consumes the outcome stream exactly once, forwards progress and failure
reports to a sink, and decides the run's final status.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Protocol

from sfverify.pipelines.outcome import Outcome, OutcomeStatus

logger = logging.getLogger(__name__)


class OutcomeSink(Protocol):
    """Receives progress ticks and failure reports."""

    def advance(self) -> None:
        """One more record has been processed."""
        ...

    def report(self, outcome: Outcome, message: str) -> None:
        """A record failed. message is the one-line diagnostic."""
        ...


class NullSink:
    """Sink that discards everything."""

    def advance(self) -> None:
        pass

    def report(self, outcome: Outcome, message: str) -> None:
        pass


@dataclass
class CollectingSink:
    """Sink that keeps reports in memory."""

    ticks: int = 0
    messages: list[str] = field(default_factory=list)

    def advance(self) -> None:
        self.ticks += 1

    def report(self, outcome: Outcome, message: str) -> None:
        self.messages.append(message)


@dataclass
class RunSummary:
    """Aggregated result of a verification run."""

    total: int = 0
    matched: int = 0
    mismatched: int = 0
    access_errors: int = 0
    failures: list[Outcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True if and only if every outcome matched."""
        return self.matched == self.total

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


@dataclass
class Aggregator:
    """Classifies outcomes and accumulates a RunSummary."""

    sink: OutcomeSink = field(default_factory=NullSink)
    summary: RunSummary = field(default_factory=RunSummary)

    def add(self, outcome: Outcome) -> None:
        """Account for a single outcome."""
        self.sink.advance()
        self.summary.total += 1

        if outcome.status is OutcomeStatus.MATCH:
            self.summary.matched += 1
            return

        if outcome.status is OutcomeStatus.MISMATCH:
            self.summary.mismatched += 1
        else:
            self.summary.access_errors += 1
        self.summary.failures.append(outcome)

        message = outcome.describe()
        logger.debug("Failed %s: %s", outcome.record.filename, message)
        self.sink.report(outcome, message)

    def consume(self, outcomes: Iterable[Outcome]) -> RunSummary:
        """
        Drain an outcome stream.

        The returned summary is final only because the stream has been
        fully consumed.
        """
        for outcome in outcomes:
            self.add(outcome)
        logger.debug(
            "Run finished: %d total, %d mismatched, %d access errors",
            self.summary.total,
            self.summary.mismatched,
            self.summary.access_errors,
        )
        return self.summary


def aggregate(outcomes: Iterable[Outcome], sink: OutcomeSink | None = None) -> RunSummary:
    """Consume outcomes into a RunSummary."""
    return Aggregator(sink=sink or NullSink()).consume(outcomes)
