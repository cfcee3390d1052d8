"""File comparison logic for sync operations."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .scanner import LocalFile


class SyncAction(str, Enum):
    """Actions that can be taken during sync."""

    UPLOAD = "upload"
    """Upload local file to remote"""

    DELETE_REMOTE = "delete_remote"
    """Delete remote object"""


@dataclass(frozen=True)
class SyncDecision:
    """Represents a decision about how to sync a file."""

    action: SyncAction
    """Action to take"""

    reason: str
    """Human-readable reason for this decision"""

    relative_path: str
    """Relative path of the file (the remote object name)"""

    local_file: Optional[LocalFile] = None
    """Local file (uploads only)"""


@dataclass
class SyncPlan:
    """Uploads and deletions for one run, in execution order."""

    uploads: list[SyncDecision] = field(default_factory=list)
    deletions: list[SyncDecision] = field(default_factory=list)

    @property
    def decisions(self) -> list[SyncDecision]:
        return self.uploads + self.deletions


def compute_orphans(
    remote_names: Iterable[str], local_paths: Iterable[str]
) -> set[str]:
    """Return remote names that have no matching local path.

    Names are compared exactly; no normalization is applied.

    Examples:
        >>> sorted(compute_orphans({"old.html", "index.html"}, {"index.html"}))
        ['old.html']
    """
    return set(remote_names) - set(local_paths)


class FileComparator:
    """Compares the local file set with the remote object set.

    Every local file is uploaded, whether or not an identical object
    already exists; every remote object without a local file is deleted.
    """

    def build_plan(
        self,
        local_files: dict[str, LocalFile],
        remote_names: set[str],
    ) -> SyncPlan:
        """Determine the sync actions for a run.

        Args:
            local_files: Dictionary mapping relative_path to LocalFile
            remote_names: Names of the objects currently in the container

        Returns:
            SyncPlan with uploads and deletions sorted by path
        """
        plan = SyncPlan()

        for path in sorted(local_files):
            if path in remote_names:
                reason = "Replace remote object"
            else:
                reason = "New local file"
            plan.uploads.append(
                SyncDecision(
                    action=SyncAction.UPLOAD,
                    reason=reason,
                    relative_path=path,
                    local_file=local_files[path],
                )
            )

        for path in sorted(compute_orphans(remote_names, local_files)):
            plan.deletions.append(
                SyncDecision(
                    action=SyncAction.DELETE_REMOTE,
                    reason="File deleted locally",
                    relative_path=path,
                )
            )

        return plan
