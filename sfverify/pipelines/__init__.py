"""Verification pipeline: outcomes, worker pool, and aggregation."""

from sfverify.pipelines.aggregate import (
    Aggregator,
    CollectingSink,
    NullSink,
    OutcomeSink,
    RunSummary,
    aggregate,
)
from sfverify.pipelines.outcome import Outcome, OutcomeStatus
from sfverify.pipelines.runner import VerificationPipeline, run_pipeline, verify_record

__all__ = [
    # Outcomes
    "Outcome",
    "OutcomeStatus",
    # Runner
    "VerificationPipeline",
    "run_pipeline",
    "verify_record",
    # Aggregation
    "Aggregator",
    "CollectingSink",
    "NullSink",
    "OutcomeSink",
    "RunSummary",
    "aggregate",
]
