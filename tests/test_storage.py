"""Tests for the store result types and the Azure Blob Storage adapter."""

import io
from unittest.mock import MagicMock, Mock, patch

import pytest
from azure.core.exceptions import (
    HttpResponseError,
    ResourceNotFoundError,
    ServiceRequestError,
)

from sitesync.exceptions import ListingFailedError
from sitesync.storage import (
    AzureBlobStore,
    InvalidArgument,
    Ok,
    ServiceError,
    describe_result,
    result_from_exception,
)


def _http_error(message, status_code=None, error_code=None, cls=HttpResponseError):
    error = cls(message=message)
    error.status_code = status_code
    error.error_code = error_code
    return error


@pytest.fixture
def container_client():
    return MagicMock()


@pytest.fixture
def azure_store(container_client):
    service = Mock()
    service.get_container_client.return_value = container_client
    return AzureBlobStore(service, timeout=15)


class TestResultFromException:
    """Tests for translating SDK exceptions into store results."""

    def test_http_error_uses_service_error_code(self):
        error = _http_error(
            "The specified container does not exist.\nRequestId:abc",
            status_code=404,
            error_code="ContainerNotFound",
        )

        result = result_from_exception(error)

        assert result == ServiceError(
            code="ContainerNotFound",
            message="The specified container does not exist.",
        )

    def test_http_error_without_code_uses_status(self):
        error = _http_error("Server busy", status_code=503)

        assert result_from_exception(error) == ServiceError(
            code="503", message="Server busy"
        )

    def test_http_error_subclass(self):
        error = _http_error(
            "gone",
            status_code=404,
            error_code="BlobNotFound",
            cls=ResourceNotFoundError,
        )

        assert result_from_exception(error) == ServiceError("BlobNotFound", "gone")

    def test_transport_error_uses_class_name(self):
        error = ServiceRequestError(message="Connection refused")

        assert result_from_exception(error) == ServiceError(
            code="ServiceRequestError", message="Connection refused"
        )

    def test_local_error_is_invalid_argument(self):
        assert result_from_exception(ValueError("bad name")) == InvalidArgument(
            "bad name"
        )


class TestDescribeResult:
    def test_service_error(self):
        assert (
            describe_result(ServiceError("503", "Server busy"))
            == "Service Error 503: Server busy"
        )

    def test_invalid_argument(self):
        assert describe_result(InvalidArgument("oops")) == "Invalid Argument: oops"

    def test_ok(self):
        assert describe_result(Ok()) is None


class TestAzureBlobStore:
    """Tests for AzureBlobStore against a mocked SDK client."""

    def test_from_connection_string_sets_timeouts(self):
        with patch("sitesync.storage.BlobServiceClient") as mock_service_class:
            store = AzureBlobStore.from_connection_string("conn", timeout=20)

        mock_service_class.from_connection_string.assert_called_once_with(
            "conn", connection_timeout=20, read_timeout=20
        )
        assert store.timeout == 20

    def test_list_returns_names(self, azure_store, container_client):
        blob_a, blob_b = Mock(), Mock()
        blob_a.name = "index.html"
        blob_b.name = "css/site.css"
        container_client.list_blobs.return_value = iter([blob_a, blob_b])

        assert azure_store.list("$web") == ["index.html", "css/site.css"]
        azure_store.service.get_container_client.assert_called_with("$web")
        container_client.list_blobs.assert_called_once_with(timeout=15)

    def test_list_failure_raises(self, azure_store, container_client):
        container_client.list_blobs.side_effect = _http_error(
            "Service unavailable", status_code=503
        )

        with pytest.raises(ListingFailedError) as exc_info:
            azure_store.list("$web")

        assert exc_info.value.code == "503"
        assert exc_info.value.container == "$web"
        assert "Service unavailable" in str(exc_info.value)

    def test_list_failure_while_paging_raises(self, azure_store, container_client):
        blob = Mock()
        blob.name = "index.html"

        def pages():
            yield blob
            raise ServiceRequestError(message="Connection reset")

        container_client.list_blobs.return_value = pages()

        with pytest.raises(ListingFailedError, match="Connection reset"):
            azure_store.list("$web")

    def test_put_uploads_with_content_type(self, azure_store, container_client):
        stream = io.BytesIO(b"<html></html>")

        result = azure_store.put("$web", "index.html", stream, "text/html")

        assert result == Ok()
        args, kwargs = container_client.upload_blob.call_args
        assert args == ("index.html", stream)
        assert kwargs["overwrite"] is True
        assert kwargs["content_settings"].content_type == "text/html"
        assert kwargs["timeout"] == 15

    def test_put_service_failure(self, azure_store, container_client):
        container_client.upload_blob.side_effect = _http_error(
            "Server busy", status_code=503, error_code="ServerBusy"
        )

        result = azure_store.put("$web", "a.html", io.BytesIO(b""), "text/html")

        assert result == ServiceError("ServerBusy", "Server busy")

    def test_put_invalid_argument(self, azure_store, container_client):
        container_client.upload_blob.side_effect = ValueError("Invalid blob name")

        result = azure_store.put("$web", "", io.BytesIO(b""), "text/html")

        assert result == InvalidArgument("Invalid blob name")

    def test_delete(self, azure_store, container_client):
        assert azure_store.delete("$web", "old.html") == Ok()
        container_client.delete_blob.assert_called_once_with("old.html", timeout=15)

    def test_delete_failure(self, azure_store, container_client):
        container_client.delete_blob.side_effect = _http_error(
            "The specified blob does not exist.",
            status_code=404,
            error_code="BlobNotFound",
        )

        result = azure_store.delete("$web", "old.html")

        assert isinstance(result, ServiceError)
        assert result.code == "BlobNotFound"

    def test_close(self, azure_store):
        azure_store.close()

        azure_store.service.close.assert_called_once_with()
