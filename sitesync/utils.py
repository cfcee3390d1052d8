"""Utility functions and defaults for SiteSync."""

# =============================================================================
# Defaults
# =============================================================================

# Azure serves static websites from this container
DEFAULT_CONTAINER: str = "$web"

# Where the static site generator writes its output
DEFAULT_SOURCE_DIR: str = "../html"

# Per-call timeout for storage operations (seconds)
DEFAULT_TIMEOUT: int = 60

# Content type used when an extension is not recognised
FALLBACK_CONTENT_TYPE: str = "application/octet-stream"


# =============================================================================
# Display helpers
# =============================================================================


def join_remote_names(names: list[str], limit: int = 10) -> str:
    """Join object names for display, truncating long lists.

    Args:
        names: Object names
        limit: Maximum number of names to show

    Returns:
        Comma separated names, with a "(+N more)" suffix when truncated

    Examples:
        >>> join_remote_names(["a.html", "b.html"])
        'a.html, b.html'
        >>> join_remote_names(["a", "b", "c"], limit=2)
        'a, b (+1 more)'
    """
    shown = ", ".join(names[:limit])
    if len(names) > limit:
        shown += f" (+{len(names) - limit} more)"
    return shown
