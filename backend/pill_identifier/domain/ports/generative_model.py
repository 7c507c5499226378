"""
Generative Model Port

Abstract interface for the hosted generative model used for
identification and translation.
"""

from abc import ABC, abstractmethod
from typing import Optional, Type, TypeVar

from pydantic import BaseModel

from ..value_objects.image_payload import ImagePayload


T = TypeVar("T", bound=BaseModel)


class GenerativeModelPort(ABC):
    """
    Port (interface) for structured generation.

    Implementations send a prompt (and optionally an image) to the model,
    request JSON output matching `output_schema`, and return the validated
    model instance.

    Implementations must translate provider SDK exceptions into the
    `ModelProviderError` hierarchy before they leave the adapter.
    """

    @abstractmethod
    def generate_structured(
        self,
        prompt: str,
        output_schema: Type[T],
        image: Optional[ImagePayload] = None,
    ) -> T:
        """
        Generate output validated against a schema.

        Args:
            prompt: Rendered prompt text
            output_schema: Pydantic model the output must satisfy
            image: Optional image attached to the prompt

        Returns:
            Validated instance of `output_schema`

        Raises:
            ModelProviderError: If the provider call fails or the output
                does not match the schema
        """
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the name of the model."""
        pass

    def close(self) -> None:
        """Release provider resources. Default: nothing to release."""
        return None
