"""
Presentation

Chooses what the result area shows and how failures are worded.

Priority: loading > error > identified > unsuccessful > empty. A result
only counts as identified when it also carries non-blank uses.
"""

from enum import Enum
from typing import Callable, Optional, Tuple
import logging
import threading

from ..domain.schemas import ContractModel, IdentifyMedicineOutput
from ..domain.value_objects.language import DEFAULT_LANGUAGE_CODE
from ..domain.exceptions import (
    DomainException,
    FlowError,
    InvalidApiKeyError,
    MissingApiKeyError,
    ModelUnavailableError,
    ModelTimeoutError,
    InvalidModelRequestError,
    ValidationError,
)


logger = logging.getLogger(__name__)


UNSUCCESSFUL_HINT = (
    "Please ensure the image is clear, well-lit, and focuses on the medicine or its "
    "packaging. Try uploading a different image if the problem persists."
)


class ResultViewState(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    IDENTIFIED = "identified"
    UNSUCCESSFUL = "unsuccessful"
    EMPTY = "empty"


class ResultView(ContractModel):
    """What the result area renders."""

    state: ResultViewState
    title: str
    message: str = ""
    medicine_name: Optional[str] = None
    uses: Optional[str] = None
    hint: Optional[str] = None
    can_speak: bool = False


def select_result_view(
    result: Optional[IdentifyMedicineOutput],
    is_loading: bool = False,
    error: Optional[str] = None,
) -> ResultView:
    """
    Select the view for the current page state.

    Args:
        result: Last identification result, if any
        is_loading: Whether a submission is in flight
        error: User-facing error message of the last submission, if any

    Returns:
        ResultView
    """
    if is_loading:
        return ResultView(
            state=ResultViewState.LOADING,
            title="Identifying Medicine",
            message="Analyzing the image...",
        )

    if error:
        return ResultView(
            state=ResultViewState.ERROR,
            title="Error Identifying Medicine",
            message=error,
        )

    if result is not None:
        if result.is_successfully_identified:
            return ResultView(
                state=ResultViewState.IDENTIFIED,
                title="Medicine Identified",
                medicine_name=result.medicine_name or "Name not available",
                uses=result.uses,
                can_speak=True,
            )

        return ResultView(
            state=ResultViewState.UNSUCCESSFUL,
            title="Identification Unsuccessful",
            message=result.medicine_name or "Could not identify medicine from the provided image.",
            hint=UNSUCCESSFUL_HINT,
        )

    return ResultView(
        state=ResultViewState.EMPTY,
        title="Get Started",
        message=(
            "Upload an image of a tablet sheet and select your preferred language. "
            "Click \"Identify Medicine\" to see its name and uses."
        ),
    )


def _raw_message(error: BaseException) -> str:
    if isinstance(error, DomainException):
        return error.message
    return str(error) or "An unknown error occurred during identification."


def describe_identification_error(error: BaseException) -> Tuple[str, str]:
    """
    Word a failed submission for the user.

    Returns:
        Tuple of (title, message); the message ends with the original error
    """
    raw = _raw_message(error)

    is_credential = isinstance(error, (InvalidApiKeyError, MissingApiKeyError)) or (
        isinstance(error, FlowError) and error.category == FlowError.INVALID_CREDENTIAL
    )

    if is_credential:
        return (
            "API Key Error",
            "The AI service reported an invalid API key. Please ensure the API key in your "
            ".env file or environment is correct and active. Restart your server after .env "
            f"changes. Original error: {raw}",
        )

    if isinstance(error, ModelUnavailableError):
        return (
            "AI Service Busy",
            "The AI service is currently overloaded or temporarily unavailable. Please try "
            f"again in a few moments. Original error: {raw}",
        )

    if isinstance(error, ModelTimeoutError):
        return (
            "Request Timeout",
            "The request to the AI service timed out. This could be due to a temporary "
            "network issue or the service being busy. Please try again. If the issue "
            f"persists, the image might be too complex. Original error: {raw}",
        )

    if isinstance(error, (InvalidModelRequestError, ValidationError)):
        return (
            "Invalid Input",
            "There was an issue with the uploaded image or selected language. Please check "
            f"your input and try again. Original error: {raw}",
        )

    return "Identification Error", raw


class IdentifierPageState:
    """
    State of one identifier page: the language, the last result and error,
    and whether a submission is in flight.

    Usage:
        page = IdentifierPageState()
        view = page.submit(lambda: service.identify_from_file(path, "te"), "te")
    """

    def __init__(self, language: str = DEFAULT_LANGUAGE_CODE):
        self.language = language
        self.is_loading = False
        self.result: Optional[IdentifyMedicineOutput] = None
        self.error: Optional[str] = None
        self.error_title: Optional[str] = None
        self._lock = threading.Lock()

    def begin_submission(self, language: str) -> bool:
        """
        Start a submission. Refused while another one is in flight.

        Returns:
            True if the submission may proceed
        """
        with self._lock:
            if self.is_loading:
                return False
            self.is_loading = True
            self.result = None
            self.error = None
            self.error_title = None
            self.language = language
            return True

    def complete(self, result: IdentifyMedicineOutput) -> None:
        with self._lock:
            self.result = result
            self.is_loading = False

    def fail(self, error: BaseException) -> Tuple[str, str]:
        title, message = describe_identification_error(error)
        logger.error(f"Error identifying medicine: {error!r}")
        with self._lock:
            self.error = message
            self.error_title = title
            self.is_loading = False
        return title, message

    @property
    def view(self) -> ResultView:
        return select_result_view(self.result, self.is_loading, self.error)

    def submit(
        self,
        action: Callable[[], IdentifyMedicineOutput],
        language: str,
    ) -> Optional[ResultView]:
        """
        Run one submission and return the resulting view.

        Returns:
            The new view, or None if a submission was already in flight
        """
        if not self.begin_submission(language):
            return None

        try:
            self.complete(action())
        except Exception as e:
            self.fail(e)
        finally:
            with self._lock:
                self.is_loading = False

        return self.view
