"""
Identify Medicine Flow

Identifies a medicine from a photo of a tablet sheet and describes its
uses in the requested language.

- identify_medicine: entry point, with credential error categorization
- identify_medicine_flow: the single model call
"""

from typing import Optional
import logging
import uuid

from ...domain.ports.generative_model import GenerativeModelPort
from ...domain.schemas import IdentifyMedicineInput, IdentifyMedicineOutput
from ...domain.value_objects.image_payload import ImagePayload
from ...domain.value_objects.language import describe_language
from ...domain.exceptions import InvalidImageError, ModelProviderError
from ...cross_cutting.logging import FlowLogger
from .errors import credential_flow_error


logger = logging.getLogger(__name__)

FLOW_NAME = "identify_medicine"


IDENTIFY_MEDICINE_PROMPT = """You are an expert pharmacist. You will identify the medicine \
from the image and provide its uses in the specified language.

The user will upload a picture of the medicine.
- If you can clearly identify a medicine in the image:
  - Set 'isIdentified' to true.
  - Set 'medicineName' to the name of the identified medicine.
  - Provide the 'uses' of the medicine in the following language: {language}.
- If you cannot identify a medicine, or if the image does not appear to show a medicine, \
or if the image is of poor quality:
  - Set 'isIdentified' to false.
  - Set 'medicineName' to a concise explanation (e.g., "No medicine identified due to poor \
image quality", "Image does not appear to be a medicine", "Could not identify medicine").
  - Set 'uses' to an empty string.

The image is attached.
Language: {language}
"""


def render_identify_prompt(language: str) -> str:
    return IDENTIFY_MEDICINE_PROMPT.format(language=describe_language(language))


def identify_medicine_flow(
    model: GenerativeModelPort,
    flow_input: IdentifyMedicineInput,
) -> IdentifyMedicineOutput:
    """
    Ask the model to identify the medicine in the photo.

    A result that is not identified never carries uses.

    Raises:
        InvalidImageError: If the photo is not a base64 data URI
        ModelProviderError: If the model call fails
    """
    try:
        image = ImagePayload.from_data_uri(flow_input.photo_data_uri)
    except ValueError as e:
        raise InvalidImageError(str(e)) from e

    output = model.generate_structured(
        render_identify_prompt(flow_input.language),
        IdentifyMedicineOutput,
        image=image,
    )
    return output.normalized()


def identify_medicine(
    model: GenerativeModelPort,
    flow_input: IdentifyMedicineInput,
    request_id: Optional[str] = None,
) -> IdentifyMedicineOutput:
    """
    Identify a medicine from a photo.

    Args:
        model: Generative model
        flow_input: Photo data URI and result language
        request_id: Optional id used to tag log lines

    Returns:
        IdentifyMedicineOutput; `uses` is empty whenever `is_identified` is False

    Raises:
        FlowError: category "invalid_credential" when the API key is invalid
            or missing
        ModelProviderError: Any other provider failure, unchanged
        InvalidImageError: If the photo is not a base64 data URI
    """
    flow_logger = FlowLogger(FLOW_NAME, request_id or uuid.uuid4().hex)
    flow_logger.stage_start("identify")

    try:
        result = identify_medicine_flow(model, flow_input)
    except ModelProviderError as e:
        flow_logger.stage_error("identify", e)
        flow_logger.stage_end("identify", success=False)
        flow_error = credential_flow_error(e, FLOW_NAME)
        if flow_error is not None:
            raise flow_error from e
        raise

    flow_logger.stage_end("identify")

    result = result.normalized()
    if result.is_identified:
        logger.info(f"Identified medicine: {result.medicine_name}")
    else:
        logger.info(f"No medicine identified: {result.medicine_name}")
    return result
