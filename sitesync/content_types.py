"""Extension based content-type lookup.

Content types are derived from the file extension only. File contents are
never inspected, so the same file name always gets the same type.
"""

import mimetypes
from pathlib import PurePosixPath
from typing import Optional

from .utils import FALLBACK_CONTENT_TYPE

# Web asset types missing from, or inconsistent across, Python's built-in table
WEB_CONTENT_TYPES: dict[str, str] = {
    "avif": "image/avif",
    "ico": "image/vnd.microsoft.icon",
    "js": "text/javascript",
    "json": "application/json",
    "map": "application/json",
    "mjs": "text/javascript",
    "otf": "font/otf",
    "svg": "image/svg+xml",
    "ttf": "font/ttf",
    "txt": "text/plain",
    "wasm": "application/wasm",
    "webmanifest": "application/manifest+json",
    "webp": "image/webp",
    "woff": "font/woff",
    "woff2": "font/woff2",
    "xml": "application/xml",
}


def normalize_extension(extension: str) -> str:
    """Normalize an extension for lookup: lowercase, no leading dot.

    Examples:
        >>> normalize_extension(".HTML")
        'html'
        >>> normalize_extension("css")
        'css'
    """
    return extension.strip().lstrip(".").lower()


def extension_of(path: str) -> str:
    """Return the text after the last dot of the file name, or "".

    Examples:
        >>> extension_of("css/site.min.css")
        'css'
        >>> extension_of("LICENSE")
        ''
    """
    name = PurePosixPath(path).name
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1]


class ContentTypeResolver:
    """Maps file extensions to MIME types with a generic fallback.

    Examples:
        >>> resolver = ContentTypeResolver()
        >>> resolver.resolve("html")
        'text/html'
        >>> resolver.resolve("xyz123")
        'application/octet-stream'
    """

    def __init__(
        self,
        overrides: Optional[dict[str, str]] = None,
        fallback: str = FALLBACK_CONTENT_TYPE,
    ):
        """Initialize the resolver.

        Args:
            overrides: Extra extension -> type mappings, applied last
            fallback: Type returned for unknown extensions
        """
        self.fallback = fallback
        # A fresh MimeTypes() holds only the built-in defaults; the host's
        # mime.types files are not consulted.
        builtin = mimetypes.MimeTypes()
        table: dict[str, str] = {}
        for types_map in (builtin.types_map[False], builtin.types_map[True]):
            for ext, content_type in types_map.items():
                table[normalize_extension(ext)] = content_type
        table.update(WEB_CONTENT_TYPES)
        for ext, content_type in (overrides or {}).items():
            table[normalize_extension(ext)] = content_type
        self._types = table

    def resolve(self, extension: str) -> str:
        """Return the content type for an extension.

        Args:
            extension: Extension with or without the leading dot, any case

        Returns:
            MIME type string, or the fallback when unknown
        """
        ext = normalize_extension(extension)
        if not ext:
            return self.fallback
        return self._types.get(ext, self.fallback)

    def resolve_path(self, path: str) -> str:
        """Return the content type for a relative file path."""
        return self.resolve(extension_of(path))
