"""Sync engine for SiteSync - publish a local directory to a container."""

from .comparator import (
    FileComparator,
    SyncAction,
    SyncDecision,
    SyncPlan,
    compute_orphans,
)
from .engine import SyncEngine
from .operations import SyncOperations
from .report import OperationOutcome, ResultReporter, SyncReport
from .scanner import DirectoryScanner, LocalFile, is_hidden_path

__all__ = [
    "SyncEngine",
    "SyncOperations",
    "DirectoryScanner",
    "LocalFile",
    "is_hidden_path",
    "FileComparator",
    "SyncAction",
    "SyncDecision",
    "SyncPlan",
    "compute_orphans",
    "OperationOutcome",
    "ResultReporter",
    "SyncReport",
]
