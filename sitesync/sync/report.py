"""Per-item outcomes of a sync run and their presentation."""

import threading
from dataclasses import dataclass
from typing import Optional

from ..exceptions import SiteSyncError
from ..output import OutputFormatter
from ..storage import FailureCause, describe_result
from ..utils import join_remote_names
from .comparator import SyncAction


@dataclass(frozen=True)
class OperationOutcome:
    """Result of one upload or delete attempt."""

    action: SyncAction
    """Which kind of operation was attempted"""

    name: str
    """Remote object name (the local relative path)"""

    cause: Optional[FailureCause] = None
    """Why the operation failed; None on success"""

    @property
    def ok(self) -> bool:
        return self.cause is None

    def describe(self) -> str:
        """One-line, human-readable description of the outcome."""
        if self.action == SyncAction.UPLOAD:
            done, verb = "Uploaded", "uploading"
        else:
            done, verb = "Deleted", "deleting"
        if self.cause is None:
            return f"{done} {self.name}"
        return f"Error {verb} {self.name}: {describe_result(self.cause)}"


class SyncReport:
    """Append-only collection of outcomes, safe for concurrent writers."""

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run
        self.planned_uploads = 0
        self.planned_deletions = 0
        self._outcomes: list[OperationOutcome] = []
        self._lock = threading.Lock()

    def record(self, outcome: OperationOutcome) -> None:
        with self._lock:
            self._outcomes.append(outcome)

    @property
    def outcomes(self) -> list[OperationOutcome]:
        with self._lock:
            return list(self._outcomes)

    def _count(self, action: SyncAction, ok: bool) -> int:
        return sum(1 for o in self.outcomes if o.action == action and o.ok == ok)

    @property
    def uploaded(self) -> int:
        return self._count(SyncAction.UPLOAD, True)

    @property
    def upload_failures(self) -> int:
        return self._count(SyncAction.UPLOAD, False)

    @property
    def deleted(self) -> int:
        return self._count(SyncAction.DELETE_REMOTE, True)

    @property
    def delete_failures(self) -> int:
        return self._count(SyncAction.DELETE_REMOTE, False)

    @property
    def failures(self) -> list[OperationOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)

    def to_dict(self) -> dict:
        """Convert report to a dictionary for JSON output."""
        return {
            "dry_run": self.dry_run,
            "planned_uploads": self.planned_uploads,
            "planned_deletions": self.planned_deletions,
            "uploaded": self.uploaded,
            "upload_failures": self.upload_failures,
            "deleted": self.deleted,
            "delete_failures": self.delete_failures,
            "failures": [
                {
                    "action": o.action.value,
                    "name": o.name,
                    "error": describe_result(o.cause) if o.cause else None,
                }
                for o in self.failures
            ],
        }


class ResultReporter:
    """Presents outcomes and fatal errors, one line each.

    The reporter only displays; it never changes what was recorded.
    """

    def __init__(self, output: Optional[OutputFormatter] = None):
        """Initialize the reporter.

        Args:
            output: Output formatter for displaying results
        """
        self.output = output or OutputFormatter()

    def report(self, outcome: OperationOutcome) -> None:
        if outcome.ok:
            self.output.success(outcome.describe())
        else:
            self.output.error(outcome.describe())

    def fatal(self, error: SiteSyncError) -> None:
        self.output.error(str(error))

    def plan(self, uploads: int, deletions: list[str], dry_run: bool) -> None:
        """Display the sync plan before execution."""
        if self.output.quiet or self.output.json_output:
            return

        self.output.info("Sync plan:")
        self.output.info(f"  ↑ Upload: {uploads} file(s)")
        self.output.info(f"  ✗ Delete remote: {len(deletions)} file(s)")
        if deletions:
            self.output.info(f"      {join_remote_names(deletions)}")
        if dry_run:
            self.output.info("Dry run: No changes will be made")
        self.output.print("")

    def summary(self, report: SyncReport) -> None:
        """Display the rolled-up result of a run."""
        if self.output.json_output:
            self.output.output_json(report.to_dict())
            return
        if self.output.quiet:
            return

        self.output.print("")
        if report.dry_run:
            self.output.success("Dry run complete!")
            return

        self.output.success("Sync complete!")
        self.output.info(f"  Uploaded: {report.uploaded}")
        self.output.info(f"  Deleted remotely: {report.deleted}")
        if report.has_failures:
            self.output.warning(
                f"  Failed: {report.upload_failures} upload(s), "
                f"{report.delete_failures} delete(s)"
            )
