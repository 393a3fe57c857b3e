"""Run lifecycle: configuration, test status reconciliation, and sessions."""

from specwatch.lifecycle.config import SpecwatchConfig
from specwatch.lifecycle.session import (
    NullObserver,
    RunSession,
    SessionController,
    SessionObserver,
    TranscriptLine,
)
from specwatch.lifecycle.status import StatusReconciler, TestCase, TestStatus, match_score

__all__ = [
    "NullObserver",
    "RunSession",
    "SessionController",
    "SessionObserver",
    "SpecwatchConfig",
    "StatusReconciler",
    "TestCase",
    "TestStatus",
    "TranscriptLine",
    "match_score",
]
