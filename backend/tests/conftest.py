import pytest

from pill_identifier.domain.value_objects.image_payload import ImagePayload

from fakes import make_image_bytes


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG")


@pytest.fixture
def png_payload(png_bytes) -> ImagePayload:
    return ImagePayload.from_bytes(png_bytes, "image/png", source="tablets.png")


@pytest.fixture
def identified_output() -> dict:
    return {
        "isIdentified": True,
        "medicineName": "Paracetamol 500mg",
        "uses": "Relieves mild to moderate pain and reduces fever.",
    }


@pytest.fixture
def unidentified_output() -> dict:
    # Model ignores the instruction and still fills in uses
    return {
        "isIdentified": False,
        "medicineName": "Image does not appear to be a medicine",
        "uses": "Some stray text",
    }
