"""
Tests for the identification service and the command line
"""

import pytest

from pill_identifier import cli
from pill_identifier.application.services import MedicineIdentificationService
from pill_identifier.config.settings import UploadConfig
from pill_identifier.domain.exceptions import (
    InvalidImageError,
    InvalidInputError,
    UnsupportedImageTypeError,
)

from fakes import FakeGenerativeModel, make_image_bytes


# =============================================================================
# Service
# =============================================================================

def test_identify_from_file(tmp_path, identified_output):
    path = tmp_path / "sheet.jpg"
    path.write_bytes(make_image_bytes("JPEG"))
    model = FakeGenerativeModel(identified_output)

    result = MedicineIdentificationService(model).identify_from_file(str(path), "en")

    assert result.medicine_name == "Paracetamol 500mg"
    assert model.calls[0]["image"].mime_type == "image/jpeg"


def test_identify_from_missing_file(identified_output):
    service = MedicineIdentificationService(FakeGenerativeModel(identified_output))

    with pytest.raises(InvalidImageError):
        service.identify_from_file("/nonexistent/sheet.png", "en")


def test_identify_from_bytes_normalizes_mime_type(png_bytes, identified_output):
    model = FakeGenerativeModel(identified_output)

    MedicineIdentificationService(model).identify_from_bytes(png_bytes, "Image/PNG; charset=binary", "te")

    assert model.calls[0]["image"].mime_type == "image/png"


def test_identify_sends_the_detected_image_type(identified_output):
    model = FakeGenerativeModel(identified_output)

    MedicineIdentificationService(model).identify_from_bytes(make_image_bytes("JPEG"), "image/png", "en")

    image = model.calls[0]["image"]
    assert image.mime_type == "image/jpeg"
    assert image.bytes.startswith(b"\xff\xd8\xff")


def test_identify_from_unreadable_file(tmp_path, identified_output):
    folder = tmp_path / "sheet.png"
    folder.mkdir()
    model = FakeGenerativeModel(identified_output)

    with pytest.raises(InvalidImageError, match="Failed to read image file"):
        MedicineIdentificationService(model).identify_from_file(str(folder), "en")
    assert model.calls == []


def test_identify_from_bytes_requires_data(identified_output):
    service = MedicineIdentificationService(FakeGenerativeModel(identified_output))

    with pytest.raises(InvalidImageError, match="Image is required."):
        service.identify_from_bytes(b"", "image/png", "te")


def test_identify_requires_language(png_payload, identified_output):
    service = MedicineIdentificationService(FakeGenerativeModel(identified_output))

    with pytest.raises(InvalidInputError):
        service.identify(png_payload, " ")


def test_upload_config_is_respected(png_bytes, identified_output):
    config = UploadConfig(allowed_mime_types=frozenset({"image/jpeg"}))
    service = MedicineIdentificationService(FakeGenerativeModel(identified_output), config)

    with pytest.raises(UnsupportedImageTypeError):
        service.identify_from_bytes(png_bytes, "image/png", "te")


def test_translate_requires_medicine_name(identified_output):
    service = MedicineIdentificationService(FakeGenerativeModel(identified_output))

    with pytest.raises(InvalidInputError):
        service.translate("", "Relieves pain", "es")


def test_translate_rejects_oversized_uses(identified_output):
    service = MedicineIdentificationService(FakeGenerativeModel(identified_output))

    with pytest.raises(InvalidInputError, match="Text too long"):
        service.translate("Paracetamol", "x" * 5001, "es")


# =============================================================================
# CLI
# =============================================================================

@pytest.fixture
def dummy_env(monkeypatch, tmp_path):
    monkeypatch.setenv("PILL_IDENTIFIER_LLM_TYPE", "dummy")
    monkeypatch.delenv("PILL_IDENTIFIER_DEFAULT_LANGUAGE", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_cli_identify_with_dummy_model(dummy_env, capsys):
    path = dummy_env / "sheet.png"
    path.write_bytes(make_image_bytes("PNG"))

    exit_code = cli.main(["identify", str(path), "--language", "en"])

    assert exit_code == 0
    assert "Identification Unsuccessful" in capsys.readouterr().out


def test_cli_rejects_unsupported_file(dummy_env, capsys):
    path = dummy_env / "sheet.gif"
    path.write_bytes(make_image_bytes("GIF"))

    exit_code = cli.main(["identify", str(path)])

    assert exit_code == 1
    assert "Only .jpg, .png, .webp formats are supported." in capsys.readouterr().err


def test_cli_missing_file(dummy_env, capsys):
    assert cli.main(["identify", str(dummy_env / "nope.png")]) == 1
    assert "Image file not found" in capsys.readouterr().err


def test_cli_missing_api_key(monkeypatch, tmp_path, capsys):
    monkeypatch.setenv("PILL_IDENTIFIER_LLM_TYPE", "groq")
    monkeypatch.delenv("PILL_IDENTIFIER_LLM_API_KEY", raising=False)
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "sheet.png"
    path.write_bytes(make_image_bytes("PNG"))

    assert cli.main(["identify", str(path)]) == 2
    assert "GROQ_API_KEY" in capsys.readouterr().err


def test_cli_unreadable_image_prints_error(dummy_env, capsys):
    (dummy_env / "sheet.png").mkdir()

    assert cli.main(["identify", str(dummy_env / "sheet.png")]) == 1


@pytest.mark.parametrize("name", ["sheet.jfif", "sheet"])
def test_cli_detects_type_of_unknown_extension(dummy_env, capsys, name):
    path = dummy_env / name
    path.write_bytes(make_image_bytes("JPEG"))

    assert cli.main(["identify", str(path), "--language", "en"]) == 0
    assert "Identification Unsuccessful" in capsys.readouterr().out


def test_cli_unknown_extension_with_non_image(dummy_env, capsys):
    path = dummy_env / "notes"
    path.write_bytes(b"shopping list")

    assert cli.main(["identify", str(path)]) == 1
    assert "Only .jpg, .png, .webp formats are supported." in capsys.readouterr().err
