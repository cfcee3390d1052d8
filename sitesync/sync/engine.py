"""Core sync engine for reconciling a local directory with a container."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Optional

from rich.progress import Progress, SpinnerColumn, TextColumn

from ..content_types import ContentTypeResolver
from ..exceptions import DirectoryNotFoundError, ListingFailedError
from ..output import OutputFormatter
from ..storage import InvalidArgument, ObjectStoreClient, Ok
from ..utils import DEFAULT_CONTAINER
from .comparator import FileComparator, SyncAction, SyncDecision
from .operations import SyncOperations
from .report import OperationOutcome, ResultReporter, SyncReport
from .scanner import DirectoryScanner, LocalFile

logger = logging.getLogger(__name__)


class SyncEngine:
    """Makes a container hold exactly the files of a local directory.

    A run has three phases that never interleave:

    1. Discover: scan the local tree, then list the container. Either
       failing aborts the run before anything is changed.
    2. Upload every local file, each independently.
    3. Delete every remote object that had no local file in phase 1.
       A file whose upload failed is still "local" and is not deleted.
    """

    def __init__(
        self,
        store: ObjectStoreClient,
        container: str = DEFAULT_CONTAINER,
        output: Optional[OutputFormatter] = None,
        reporter: Optional[ResultReporter] = None,
        content_types: Optional[ContentTypeResolver] = None,
        scanner: Optional[DirectoryScanner] = None,
    ):
        """Initialize sync engine.

        Args:
            store: Object store client (already authenticated)
            container: Name of the target container
            output: Output formatter for displaying progress/status
            reporter: Reporter for outcomes; defaults to one using ``output``
            content_types: Content-type resolver for uploads
            scanner: Local directory scanner
        """
        self.store = store
        self.container = container
        self.output = output or OutputFormatter()
        self.reporter = reporter or ResultReporter(self.output)
        self.scanner = scanner or DirectoryScanner()
        self.operations = SyncOperations(
            store, container, content_types or ContentTypeResolver()
        )

    def sync(
        self,
        root: Path,
        dry_run: bool = False,
        max_workers: int = 1,
    ) -> SyncReport:
        """Reconcile the container with a local directory.

        Args:
            root: Local directory to publish
            dry_run: If True, only show what would be done
            max_workers: Number of parallel workers within each phase

        Returns:
            SyncReport with one outcome per attempted operation

        Raises:
            DirectoryNotFoundError: If ``root`` is missing or unreadable
            ListingFailedError: If the container cannot be listed

        Examples:
            >>> engine = SyncEngine(store, "$web")
            >>> report = engine.sync(Path("html"), dry_run=True)
            >>> print(f"Would upload {report.planned_uploads} files")
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")

        start_time = time.time()
        local_files, remote_names = self._discover(root)

        plan = FileComparator().build_plan(local_files, remote_names)
        report = SyncReport(dry_run=dry_run)
        report.planned_uploads = len(plan.uploads)
        report.planned_deletions = len(plan.deletions)
        self._safe_report(
            self.reporter.plan,
            len(plan.uploads),
            [d.relative_path for d in plan.deletions],
            dry_run,
        )

        if not dry_run:
            self._execute_phase(plan.uploads, report, max_workers)
            # Every upload has completed and been recorded at this point
            self._execute_phase(plan.deletions, report, max_workers)

        self._safe_report(self.reporter.summary, report)
        logger.debug(
            f"Sync of {root} to {self.container} took {time.time() - start_time:.2f}s"
        )
        return report

    def list_remote(self) -> list[str]:
        """Return the sorted names of all objects in the container.

        Raises:
            ListingFailedError: If the container cannot be listed
        """
        return sorted(self.store.list(self.container))

    def _discover(self, root: Path) -> tuple[dict[str, LocalFile], set[str]]:
        """Scan the local tree and list the container.

        Args:
            root: Local directory to scan

        Returns:
            Tuple of (local files by relative path, remote object names)
        """
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
            disable=self.output.quiet or self.output.json_output,
        ) as progress:
            task = progress.add_task("Scanning local directory...", total=None)
            scan_start = time.time()
            try:
                local_files = {
                    f.relative_path: f for f in self.scanner.scan_local(root)
                }
            except DirectoryNotFoundError as e:
                self._safe_report(self.reporter.fatal, e)
                raise
            progress.update(
                task, description=f"Found {len(local_files)} local file(s)"
            )
            logger.debug(
                f"Local scan took {time.time() - scan_start:.2f}s "
                f"for {len(local_files)} files"
            )

            task = progress.add_task("Listing remote container...", total=None)
            try:
                remote_names = set(self.store.list(self.container))
            except ListingFailedError as e:
                self._safe_report(self.reporter.fatal, e)
                raise
            progress.update(
                task, description=f"Found {len(remote_names)} remote object(s)"
            )

        return local_files, remote_names

    def _execute_phase(
        self,
        decisions: list[SyncDecision],
        report: SyncReport,
        max_workers: int,
    ) -> None:
        """Execute one phase, recording an outcome for every decision.

        Returns only after every operation of the phase has finished.

        Args:
            decisions: Decisions of a single phase
            report: Report to record outcomes into
            max_workers: Number of parallel workers
        """
        if max_workers > 1 and len(decisions) > 1:
            logger.debug(
                f"Executing {len(decisions)} actions with {max_workers} workers"
            )
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                futures = [
                    executor.submit(self._execute_single_decision, decision)
                    for decision in decisions
                ]
                for future in as_completed(futures):
                    self._record(report, future.result())
        else:
            for decision in decisions:
                self._record(report, self._execute_single_decision(decision))

    def _execute_single_decision(self, decision: SyncDecision) -> OperationOutcome:
        """Execute a single sync decision.

        Never raises: store failures arrive as results from SyncOperations,
        and anything raised before the store is reached (such as resolving
        the content type) is recorded as an InvalidArgument.

        Args:
            decision: Sync decision to execute

        Returns:
            Outcome of the operation
        """
        action_start = time.time()

        try:
            if decision.action == SyncAction.DELETE_REMOTE:
                result = self.operations.delete_remote(decision.relative_path)
            elif decision.local_file is not None:
                result = self.operations.upload_file(decision.local_file)
            else:
                result = InvalidArgument(message="No local file to upload")
        except Exception as e:
            logger.debug(
                f"{decision.action.value} of {decision.relative_path} failed",
                exc_info=True,
            )
            result = InvalidArgument(message=f"{type(e).__name__}: {e}")

        logger.debug(
            f"{decision.action.value} of {decision.relative_path} "
            f"took {time.time() - action_start:.2f}s"
        )
        return OperationOutcome(
            action=decision.action,
            name=decision.relative_path,
            cause=None if isinstance(result, Ok) else result,
        )

    def _record(self, report: SyncReport, outcome: OperationOutcome) -> None:
        report.record(outcome)
        self._safe_report(self.reporter.report, outcome)

    def _safe_report(self, func: Callable, *args) -> None:
        """Call a reporter method; a display failure never affects the run."""
        try:
            func(*args)
        except Exception:
            logger.error("Failed to report sync result", exc_info=True)

