"""SiteSync - publish a static site directory to Azure Blob Storage."""

__version__ = "0.1.0"

from .content_types import ContentTypeResolver
from .exceptions import (
    DirectoryNotFoundError,
    ListingFailedError,
    SiteSyncConfigError,
    SiteSyncError,
)
from .storage import (
    AzureBlobStore,
    InvalidArgument,
    ObjectStoreClient,
    Ok,
    ServiceError,
    StoreResult,
)
from .sync import SyncEngine, SyncReport, is_hidden_path

__all__ = [
    "AzureBlobStore",
    "ContentTypeResolver",
    "DirectoryNotFoundError",
    "InvalidArgument",
    "ListingFailedError",
    "ObjectStoreClient",
    "Ok",
    "ServiceError",
    "SiteSyncConfigError",
    "SiteSyncError",
    "StoreResult",
    "SyncEngine",
    "SyncReport",
    "is_hidden_path",
]
