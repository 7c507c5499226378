"""
Translate Medicine Info Flow

Translates a medicine name and its uses into another language.
"""

from typing import Optional
import uuid

from ...domain.ports.generative_model import GenerativeModelPort
from ...domain.schemas import TranslateMedicineInfoInput, TranslateMedicineInfoOutput
from ...domain.value_objects.language import describe_language
from ...domain.exceptions import ModelProviderError
from ...cross_cutting.logging import FlowLogger
from .errors import credential_flow_error


FLOW_NAME = "translate_medicine_info"


TRANSLATE_MEDICINE_INFO_PROMPT = """You are a translation expert. Translate the medicine name \
and its uses to the specified language.

Medicine Name: {medicine_name}
Uses: {uses}
Language: {language}

Ensure that the translated name and uses are medically accurate and appropriate for the \
target audience.

Output in JSON format.
"""


def translate_medicine_info(
    model: GenerativeModelPort,
    flow_input: TranslateMedicineInfoInput,
    request_id: Optional[str] = None,
) -> TranslateMedicineInfoOutput:
    """
    Translate medicine information.

    Raises:
        FlowError: category "invalid_credential" when the API key is invalid
            or missing
        ModelProviderError: Any other provider failure, unchanged
    """
    flow_logger = FlowLogger(FLOW_NAME, request_id or uuid.uuid4().hex)
    flow_logger.stage_start("translate")

    prompt = TRANSLATE_MEDICINE_INFO_PROMPT.format(
        medicine_name=flow_input.medicine_name,
        uses=flow_input.uses,
        language=describe_language(flow_input.language),
    )

    try:
        result = model.generate_structured(prompt, TranslateMedicineInfoOutput)
    except ModelProviderError as e:
        flow_logger.stage_error("translate", e)
        flow_logger.stage_end("translate", success=False)
        flow_error = credential_flow_error(e, FLOW_NAME)
        if flow_error is not None:
            raise flow_error from e
        raise

    flow_logger.stage_end("translate")
    return result
