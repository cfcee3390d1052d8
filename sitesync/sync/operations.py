"""Sync operations wrapper around an object store."""

import logging

from ..content_types import ContentTypeResolver
from ..storage import InvalidArgument, ObjectStoreClient, ServiceError, StoreResult
from .scanner import LocalFile

logger = logging.getLogger(__name__)


class SyncOperations:
    """Single-object upload and delete, always returning a StoreResult.

    Nothing raised while handling one object escapes from here. A local
    file that cannot be opened becomes InvalidArgument, and anything
    unexpected from the store becomes a ServiceError tagged with the
    exception type.
    """

    def __init__(
        self,
        store: ObjectStoreClient,
        container: str,
        content_types: ContentTypeResolver,
    ):
        """Initialize sync operations.

        Args:
            store: Object store client
            container: Target container name
            content_types: Resolver used to tag uploads
        """
        self.store = store
        self.container = container
        self.content_types = content_types

    def upload_file(self, local_file: LocalFile) -> StoreResult:
        """Upload a local file, creating or overwriting the remote object.

        Args:
            local_file: Local file to upload

        Returns:
            Result of the upload
        """
        content_type = self.content_types.resolve_path(local_file.relative_path)
        logger.debug(f"Uploading {local_file.relative_path} as {content_type}")
        try:
            stream = open(local_file.path, "rb")
        except OSError as e:
            return InvalidArgument(message=f"Cannot read {local_file.path}: {e}")

        with stream:
            try:
                return self.store.put(
                    self.container, local_file.relative_path, stream, content_type
                )
            except Exception as e:
                logger.debug("Unexpected upload error", exc_info=True)
                return ServiceError(code=type(e).__name__, message=str(e))

    def delete_remote(self, name: str) -> StoreResult:
        """Delete a remote object.

        Args:
            name: Object name

        Returns:
            Result of the delete
        """
        logger.debug(f"Deleting {name}")
        try:
            return self.store.delete(self.container, name)
        except Exception as e:
            logger.debug("Unexpected delete error", exc_info=True)
            return ServiceError(code=type(e).__name__, message=str(e))
