"""Basic unit tests for omf-ingress package."""

from omf_ingress import (
    AsyncIngressClient,
    IngressClient,
    OmfIngressError,
    AuthError,
    UnsupportedCompressionError,
    IngestionError,
    TransportError,
    CancellationError,
    MessageType,
    MessageCompression,
    MessageAction,
    MessageFormat,
    __version__,
)


def test_version():
    assert __version__ == "0.1.0"


def test_public_exports():
    assert IngressClient is not None
    assert AsyncIngressClient is not None


def test_error_hierarchy():
    for cls in (AuthError, UnsupportedCompressionError, IngestionError, TransportError, CancellationError):
        assert issubclass(cls, OmfIngressError)
    assert not issubclass(CancellationError, TransportError)


def test_error_attributes():
    err = OmfIngressError(code="test_code", message="something broke")
    assert err.code == "test_code"
    assert str(err) == "something broke"
    assert err.details is None

    ingestion = IngestionError(500, "boom")
    assert ingestion.code == "ingestion_error"
    assert ingestion.status_code == 500
    assert ingestion.body == "boom"
    assert ingestion.details == {"status_code": 500, "body": "boom"}

    unsupported = UnsupportedCompressionError("Deflate")
    assert unsupported.compression == "Deflate"
    assert "Deflate" in str(unsupported)


def test_header_values_are_wire_strings():
    assert MessageType.DATA == "Data"
    assert MessageType.CONTAINER == "Container"
    assert MessageType.TYPE == "Type"
    assert MessageFormat.JSON == "JSON"
    assert MessageCompression.GZIP == "GZip"
    assert MessageCompression.NONE == "None"
    assert MessageAction.DELETE == "Delete"
