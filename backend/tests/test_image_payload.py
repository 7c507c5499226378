"""
Tests for the ImagePayload value object and language helpers
"""

import base64

import pytest

from pill_identifier.domain.value_objects.image_payload import ImagePayload
from pill_identifier.domain.value_objects.language import (
    SUPPORTED_LANGUAGES,
    DEFAULT_LANGUAGE_CODE,
    describe_language,
    get_language,
    split_language_tag,
)


def test_from_bytes_builds_data_uri(png_bytes):
    payload = ImagePayload.from_bytes(png_bytes, "image/png")

    assert payload.data_uri.startswith("data:image/png;base64,")
    assert payload.bytes == png_bytes
    assert payload.size == len(png_bytes)


@pytest.mark.parametrize("length", [1, 2, 3, 4, 5, 1000])
def test_size_matches_decoded_length(length):
    payload = ImagePayload.from_bytes(b"x" * length, "image/jpeg")
    assert payload.size == length


def test_from_data_uri_parses_mime_type(png_bytes):
    encoded = base64.b64encode(png_bytes).decode()
    payload = ImagePayload.from_data_uri(f"data:IMAGE/PNG;base64,{encoded}")

    assert payload.mime_type == "image/png"
    assert payload.bytes == png_bytes


@pytest.mark.parametrize("data_uri", [
    "",
    "image/png;base64,AAAA",
    "data:image/png;base64",
    "data:image/png,AAAA",
    "data:;base64,AAAA",
    "data:image/png;base64,not base64!",
])
def test_from_data_uri_rejects_malformed(data_uri):
    with pytest.raises(ValueError):
        ImagePayload.from_data_uri(data_uri)


def test_from_file_uses_extension(tmp_path, png_bytes):
    path = tmp_path / "sheet.webp"
    path.write_bytes(png_bytes)

    payload = ImagePayload.from_file(str(path))

    assert payload.mime_type == "image/webp"
    assert payload.source == str(path.absolute())


def test_from_file_missing():
    with pytest.raises(FileNotFoundError):
        ImagePayload.from_file("/nonexistent/sheet.png")


def test_supported_languages():
    codes = [language.code for language in SUPPORTED_LANGUAGES]
    assert codes == ["en", "es", "fr", "de", "hi", "ja", "ar", "pt", "ru", "zh", "te"]
    assert DEFAULT_LANGUAGE_CODE == "te"
    assert get_language("TE").english_name == "Telugu"
    assert get_language("en").english_name == "English"
    assert get_language("xx") is None


def test_split_language_tag():
    assert split_language_tag("en-US") == ("en", "US")
    assert split_language_tag("pt_BR") == ("pt", "BR")
    assert split_language_tag("te") == ("te", None)


def test_describe_language():
    assert describe_language("te") == "Telugu (te)"
    assert describe_language("sw") == "sw"
