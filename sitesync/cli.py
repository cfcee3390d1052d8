"""CLI interface for SiteSync."""

import logging
from pathlib import Path
from typing import Any, Optional

import click

from . import __version__
from .config import config
from .exceptions import ListingFailedError, SiteSyncConfigError, SiteSyncError
from .output import OutputFormatter
from .storage import AzureBlobStore
from .sync import SyncEngine

logger = logging.getLogger(__name__)

# Exit status when --strict is given and some files failed
EXIT_PARTIAL_FAILURE = 2


def require_connection_string(ctx: Any, out: OutputFormatter) -> str:
    """Return the configured connection string or exit with an error."""
    try:
        connection_string = (
            ctx.obj.get("connection_string") or config.connection_string
        )
    except SiteSyncConfigError as e:
        out.error(str(e))
        ctx.exit(1)
        raise  # Unreachable, but helps type checker
    if not connection_string:
        out.error(
            "Azure Storage connection string not configured. "
            "Set AZURE_STORAGE_CONNECTION_STRING or run 'sitesync init'."
        )
        ctx.exit(1)
    return connection_string


def create_store(ctx: Any, out: OutputFormatter) -> AzureBlobStore:
    """Build the Azure store from configuration or exit with an error."""
    connection_string = require_connection_string(ctx, out)
    try:
        return AzureBlobStore.from_connection_string(
            connection_string, timeout=config.timeout
        )
    except (SiteSyncConfigError, ValueError) as e:
        out.error(f"Cannot create storage client: {e}")
        ctx.exit(1)
        raise  # Unreachable, but helps type checker


@click.group()
@click.option(
    "--connection-string",
    "-k",
    envvar="AZURE_STORAGE_CONNECTION_STRING",
    help="Azure Storage connection string",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(version=__version__)
@click.pass_context
def main(
    ctx: Any,
    connection_string: Optional[str],
    quiet: bool,
    json: bool,
    verbose: bool,
) -> None:
    """SiteSync - Publish a static site directory to Azure Blob Storage."""
    # Store settings in context for subcommands to access
    ctx.ensure_object(dict)
    ctx.obj["connection_string"] = connection_string
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)
    ctx.obj["verbose"] = verbose

    # Configure logging based on verbose flag
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("sitesync").setLevel(logging.DEBUG)
    else:
        # Set default logging level to WARNING to suppress debug/info messages
        logging.basicConfig(level=logging.WARNING)
        # The Azure SDK logs every HTTP request at INFO
        logging.getLogger("azure").setLevel(logging.WARNING)


@main.command()
@click.option(
    "--connection-string",
    "-k",
    "conn_str",
    prompt="Enter your Azure Storage connection string",
    hide_input=True,
    help="Azure Storage connection string",
)
@click.option(
    "--source-dir",
    "-s",
    default=None,
    help="Directory holding the generated site",
)
@click.option("--container", "-c", default=None, help="Target container name")
@click.pass_context
def init(
    ctx: Any,
    conn_str: str,
    source_dir: Optional[str],
    container: Optional[str],
) -> None:
    """Initialize SiteSync configuration.

    Stores the connection string (and optionally the source directory and
    container) in ~/.config/sitesync/config.json for future use.
    """
    out: OutputFormatter = ctx.obj["out"]
    try:
        target = container or config.container
        timeout = config.timeout
    except SiteSyncConfigError as e:
        out.error(str(e))
        ctx.exit(1)
        return

    out.info("Validating connection string...")
    try:
        store = AzureBlobStore.from_connection_string(conn_str, timeout=timeout)
        try:
            count = len(store.list(target))
        finally:
            store.close()
        out.success(f"✓ Container {target} is reachable ({count} object(s))")
    except (ValueError, ListingFailedError) as e:
        out.error(f"Connection check failed: {e}")
        if not click.confirm("Save configuration anyway?", default=False):
            out.warning("Configuration cancelled.")
            ctx.exit(1)

    try:
        config_path = config.save(
            connection_string=conn_str,
            source_dir=source_dir,
            container=container,
        )
    except (OSError, SiteSyncConfigError) as e:
        out.error(f"Initialization failed: {e}")
        ctx.exit(1)
        return

    out.print_summary(
        "Initialization Complete",
        [
            ("Status", "✓ Configuration saved successfully"),
            ("Config file", str(config_path)),
            ("Source directory", source_dir or config.source_dir),
            ("Container", target),
        ],
    )


@main.command()
@click.argument("source", type=str, required=False, default=None)
@click.option("--container", "-c", default=None, help="Target container name")
@click.option(
    "--dry-run", is_flag=True, help="Show what would be synced without syncing"
)
@click.option(
    "--workers",
    "-j",
    type=int,
    default=1,
    help="Number of parallel workers for uploads/deletes (default: 1)",
)
@click.option(
    "--strict",
    is_flag=True,
    help=f"Exit with status {EXIT_PARTIAL_FAILURE} if any file failed to sync",
)
@click.pass_context
def sync(
    ctx: Any,
    source: Optional[str],
    container: Optional[str],
    dry_run: bool,
    workers: int,
    strict: bool,
) -> None:
    """Sync a local directory to the container.

    Every file under SOURCE is uploaded with a content type matching its
    extension, then every object in the container without a matching
    local file is deleted. Hidden files and directories are skipped.

    SOURCE defaults to the configured source directory.

    Examples:
        sitesync sync                      # Sync the configured directory
        sitesync sync ./public             # Sync ./public to $web
        sitesync sync ./public -c preview  # Sync to another container
        sitesync sync --dry-run            # Preview changes
        sitesync sync -j 8                 # Use 8 parallel workers
    """
    out: OutputFormatter = ctx.obj["out"]

    if workers < 1:
        out.error("Workers must be at least 1")
        ctx.exit(1)

    try:
        source_dir = Path(source or config.source_dir)
        target = container or config.container
    except SiteSyncConfigError as e:
        out.error(str(e))
        ctx.exit(1)
        return

    store = create_store(ctx, out)
    engine = SyncEngine(store, target, output=out)

    out.info(f"Syncing: {source_dir} -> {target}")
    logger.debug(f"Sync of {source_dir} to {target} with {workers} worker(s)")
    try:
        report = engine.sync(source_dir, dry_run=dry_run, max_workers=workers)
    except SiteSyncError:
        # Fatal errors are reported by the engine
        ctx.exit(1)
        return
    except KeyboardInterrupt:
        out.warning("\nSync cancelled by user")
        ctx.exit(130)  # Standard exit code for SIGINT
        return
    finally:
        store.close()

    if strict and report.has_failures:
        ctx.exit(EXIT_PARTIAL_FAILURE)


@main.command()
@click.option("--container", "-c", default=None, help="Container to list")
@click.pass_context
def ls(ctx: Any, container: Optional[str]) -> None:
    """List the objects currently in the container."""
    out: OutputFormatter = ctx.obj["out"]
    try:
        target = container or config.container
    except SiteSyncConfigError as e:
        out.error(str(e))
        ctx.exit(1)
        return

    store = create_store(ctx, out)
    engine = SyncEngine(store, target, output=out)

    try:
        names = engine.list_remote()
    except ListingFailedError as e:
        out.error(str(e))
        ctx.exit(1)
        return
    finally:
        store.close()

    if out.json_output:
        out.output_json(names)
        return

    for name in names:
        out.print(name)
    out.info(f"{len(names)} object(s) in {target}")
