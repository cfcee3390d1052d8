"""Object store abstraction and the Azure Blob Storage adapter.

Store operations that act on a single object return a :data:`StoreResult`
instead of raising, so the sync engine can tell a service failure from a
local one without knowing any SDK exception hierarchy. Listing is the
exception: a failed listing leaves nothing safe to do, so it raises
:class:`~sitesync.exceptions.ListingFailedError`.
"""

import logging
from dataclasses import dataclass
from typing import BinaryIO, Optional, Protocol, Union

from azure.core.exceptions import AzureError, HttpResponseError
from azure.storage.blob import BlobServiceClient, ContainerClient, ContentSettings

from .exceptions import ListingFailedError
from .utils import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ok:
    """The store operation succeeded."""


@dataclass(frozen=True)
class ServiceError:
    """The storage service rejected or failed the request."""

    code: str
    """Service-provided error code (or HTTP status)"""

    message: str
    """Service-provided error message"""


@dataclass(frozen=True)
class InvalidArgument:
    """The request could not be made (unreadable file, malformed name, ...)."""

    message: str


FailureCause = Union[ServiceError, InvalidArgument]
StoreResult = Union[Ok, ServiceError, InvalidArgument]


class ObjectStoreClient(Protocol):
    """Capabilities the sync engine needs from a flat object store."""

    def list(self, container: str) -> list[str]:
        """Return the names of all objects in the container.

        Raises:
            ListingFailedError: If the container cannot be listed
        """
        ...

    def put(
        self, container: str, name: str, stream: BinaryIO, content_type: str
    ) -> StoreResult:
        """Create or overwrite an object with the given content type."""
        ...

    def delete(self, container: str, name: str) -> StoreResult:
        """Delete an object."""
        ...


def _error_details(error: AzureError) -> tuple[str, str]:
    """Extract (code, message) from an Azure SDK error."""
    # The SDK message repeats code and headers on the following lines
    message = (error.message or str(error)).splitlines()
    text = message[0] if message else ""
    if isinstance(error, HttpResponseError):
        error_code = getattr(error, "error_code", None)
        if error_code:
            return str(error_code), text or (error.reason or "")
        if error.status_code:
            return str(error.status_code), text or (error.reason or "")
    return type(error).__name__, text


def result_from_exception(error: Exception) -> StoreResult:
    """Translate an Azure SDK (or local) exception into a store result.

    Args:
        error: Exception raised by an Azure call

    Returns:
        ServiceError for service-side failures, InvalidArgument otherwise
    """
    if isinstance(error, AzureError):
        code, message = _error_details(error)
        return ServiceError(code=code, message=message)
    return InvalidArgument(message=str(error))


class AzureBlobStore:
    """ObjectStoreClient backed by Azure Blob Storage.

    Every call carries a server-side timeout and the underlying transport
    uses connection and read timeouts, so a hung request fails the single
    item instead of stalling the run forever.

    Examples:
        >>> store = AzureBlobStore.from_connection_string(conn_str)
        >>> store.list("$web")
        ['index.html', 'css/site.css']
    """

    def __init__(self, service: BlobServiceClient, timeout: int = DEFAULT_TIMEOUT):
        """Initialize the store.

        Args:
            service: Authenticated blob service client
            timeout: Per-call timeout in seconds
        """
        self.service = service
        self.timeout = timeout

    @classmethod
    def from_connection_string(
        cls, connection_string: str, timeout: int = DEFAULT_TIMEOUT
    ) -> "AzureBlobStore":
        """Create a store from an Azure Storage connection string.

        Args:
            connection_string: Account connection string
            timeout: Per-call timeout in seconds

        Returns:
            AzureBlobStore instance
        """
        service = BlobServiceClient.from_connection_string(
            connection_string,
            connection_timeout=timeout,
            read_timeout=timeout,
        )
        return cls(service, timeout=timeout)

    def _container(self, container: str) -> ContainerClient:
        return self.service.get_container_client(container)

    def list(self, container: str) -> list[str]:
        # Pages are fetched lazily, so errors surface while iterating
        try:
            blobs = self._container(container).list_blobs(timeout=self.timeout)
            names = [blob.name for blob in blobs]
        except AzureError as e:
            code, message = _error_details(e)
            raise ListingFailedError(container, message, code=code) from e
        logger.debug(f"Listed {len(names)} blob(s) in {container}")
        return names

    def put(
        self, container: str, name: str, stream: BinaryIO, content_type: str
    ) -> StoreResult:
        try:
            self._container(container).upload_blob(
                name,
                stream,
                overwrite=True,
                content_settings=ContentSettings(content_type=content_type),
                timeout=self.timeout,
            )
        except (AzureError, ValueError, TypeError, OSError) as e:
            logger.debug(f"Upload of {name} failed: {e!r}")
            return result_from_exception(e)
        return Ok()

    def delete(self, container: str, name: str) -> StoreResult:
        try:
            self._container(container).delete_blob(name, timeout=self.timeout)
        except (AzureError, ValueError, TypeError) as e:
            logger.debug(f"Delete of {name} failed: {e!r}")
            return result_from_exception(e)
        return Ok()

    def close(self) -> None:
        """Close the underlying transport."""
        self.service.close()


def describe_result(result: StoreResult) -> Optional[str]:
    """Describe a failed result for display, or None for Ok.

    Examples:
        >>> describe_result(ServiceError("BlobNotFound", "gone"))
        'Service Error BlobNotFound: gone'
        >>> describe_result(InvalidArgument("bad name"))
        'Invalid Argument: bad name'
    """
    if isinstance(result, ServiceError):
        return f"Service Error {result.code}: {result.message}"
    if isinstance(result, InvalidArgument):
        return f"Invalid Argument: {result.message}"
    return None
