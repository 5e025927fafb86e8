# tests/core/test_error_handling.py

import json
from unittest import mock

import pytest
from botocore.exceptions import ClientError
from PIL import UnidentifiedImageError

from media_transform.core.error_handling import (
    classify_error,
    error_response,
    is_not_found_error,
    is_unsupported_input_error,
    with_error_handling,
)
from media_transform.core.exceptions import (
    AnimatedSourceUnsupportedError,
    DimensionExceededError,
    ErrorKind,
    ImageProcessingError,
    MissingObjectKeyError,
    ObjectNotFoundError,
    S3Error,
    UnsupportedInputFormatError,
    UnsupportedOutputFormatError,
)
from media_transform.testing.fakes import no_such_key_error


class _ShapedError(Exception):
    """Exception carrying arbitrary attributes, like a JS-style SDK error."""

    def __init__(self, message="boom", **fields):
        super().__init__(message)
        for name, value in fields.items():
            setattr(self, name, value)


def _client_error(code, status=400):
    return ClientError(
        {"Error": {"Code": code, "Message": code}, "ResponseMetadata": {"HTTPStatusCode": status}},
        "GetObject",
    )


# --- Not-found heuristics ---

@pytest.mark.parametrize(
    "error",
    [
        {"name": "NoSuchKey"},
        {"Code": "NoSuchKey"},
        {"code": "NoSuchKey"},
        {"$metadata": {"httpStatusCode": 404}},
        Exception({"$metadata": {"httpStatusCode": 404}}),
        _ShapedError(name="NoSuchKey"),
        _ShapedError(Code="NoSuchKey"),
        no_such_key_error("missing.jpg"),
        _client_error("404", 404),
        _client_error("AccessDenied", 404),
        Exception("The object was Not Found"),
        Exception("nosuchkey: gone"),
        ObjectNotFoundError("gone"),
    ],
)
def test_is_not_found_error_recognizes_shapes(error):
    assert is_not_found_error(error)


@pytest.mark.parametrize(
    "error",
    [
        {"name": "AccessDenied"},
        {"$metadata": {"httpStatusCode": 403}},
        _client_error("AccessDenied", 403),
        Exception("timeout"),
        None,
    ],
)
def test_is_not_found_error_rejects_other_failures(error):
    assert not is_not_found_error(error)


def test_not_found_class_name():
    NoSuchKey = type("NoSuchKey", (Exception,), {})

    assert is_not_found_error(NoSuchKey("An error occurred"))


@pytest.mark.parametrize(
    "error",
    [
        UnidentifiedImageError("cannot identify image file"),
        Exception("Input buffer contains unsupported image format"),
        UnsupportedInputFormatError("bad"),
    ],
)
def test_is_unsupported_input_error(error):
    assert is_unsupported_input_error(error)


# --- classify_error ---

@pytest.mark.parametrize(
    "error,kind,status",
    [
        (MissingObjectKeyError("x"), ErrorKind.MISSING_OBJECT_KEY, 400),
        (DimensionExceededError("x", 10, 20), ErrorKind.DIMENSION_EXCEEDED, 400),
        (ObjectNotFoundError("x"), ErrorKind.OBJECT_NOT_FOUND, 404),
        (UnsupportedOutputFormatError("x"), ErrorKind.UNSUPPORTED_OUTPUT_FORMAT, 400),
        (AnimatedSourceUnsupportedError("x"), ErrorKind.ANIMATED_SOURCE_UNSUPPORTED, 400),
        (UnsupportedInputFormatError("x"), ErrorKind.UNSUPPORTED_INPUT_FORMAT, 400),
        (ImageProcessingError("x"), ErrorKind.INTERNAL_ERROR, 500),
        (S3Error("x"), ErrorKind.INTERNAL_ERROR, 500),
        (_ShapedError(name="NoSuchKey"), ErrorKind.OBJECT_NOT_FOUND, 404),
        (UnidentifiedImageError("x"), ErrorKind.UNSUPPORTED_INPUT_FORMAT, 400),
        (RuntimeError("segfault in libvips"), ErrorKind.INTERNAL_ERROR, 500),
    ],
)
def test_classify_error(error, kind, status):
    classified = classify_error(error)

    assert classified.kind is kind
    assert classified.status_code == status


def test_classify_dimension_error_carries_bounds():
    classified = classify_error(DimensionExceededError("too big", 3000, 2000))

    assert classified.to_body() == {
        "error": "Image dimensions exceed maximum allowed size",
        "maxWidth": 3000,
        "maxHeight": 2000,
    }


def test_internal_error_hides_details():
    classified = classify_error(RuntimeError("secret path /opt/lib.so"))
    response = error_response(classified)

    assert response["statusCode"] == 500
    assert json.loads(response["body"]) == {"error": "Internal server error"}
    assert "secret" not in response["body"]


def test_error_response_has_no_cache_header():
    response = error_response(classify_error(ObjectNotFoundError("x")))

    assert response["headers"] == {"Content-Type": "application/json"}
    assert json.loads(response["body"]) == {"error": "Image not found"}


# --- Tests for @with_error_handling decorator ---

@pytest.fixture
def mock_logger():
    """The decorator logs through logging.getLogger(module.func)."""
    with mock.patch('media_transform.core.error_handling.logging') as mock_logging:
        mock_log_instance = mock.Mock()
        mock_logging.getLogger.return_value = mock_log_instance
        yield mock_log_instance


def test_with_error_handling_passes_typed_errors(mock_logger):
    @with_error_handling
    def func():
        raise AnimatedSourceUnsupportedError("animated")

    with pytest.raises(AnimatedSourceUnsupportedError):
        func()
    mock_logger.error.assert_not_called()


def test_with_error_handling_maps_not_found(mock_logger):
    @with_error_handling
    def fetch():
        raise no_such_key_error("k")

    with pytest.raises(ObjectNotFoundError) as exc_info:
        fetch()
    assert isinstance(exc_info.value.__cause__, ClientError)


def test_with_error_handling_maps_other_client_errors(mock_logger):
    @with_error_handling
    def fetch():
        raise _client_error("AccessDenied", 403)

    with pytest.raises(S3Error):
        fetch()
    args, kwargs = mock_logger.error.call_args
    assert kwargs.get('exc_info') is True


def test_with_error_handling_maps_unidentified_image(mock_logger):
    @with_error_handling
    def decode():
        raise UnidentifiedImageError("cannot identify image file")

    with pytest.raises(UnsupportedInputFormatError):
        decode()


def test_with_error_handling_maps_value_error(mock_logger):
    @with_error_handling
    def crop():
        raise ValueError("Bad extract area")

    with pytest.raises(ImageProcessingError):
        crop()


def test_with_error_handling_reraises_unknown(mock_logger):
    @with_error_handling
    def func():
        raise KeyError("Body")

    with pytest.raises(KeyError):
        func()


def test_with_error_handling_preserves_metadata():
    @with_error_handling
    def documented():
        """Docstring."""
        return 42

    assert documented() == 42
    assert documented.__name__ == "documented"
    assert documented.__doc__ == "Docstring."
