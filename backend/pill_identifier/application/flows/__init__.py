"""
Flows

Single model round trips for identification and translation.
"""

from .identify_medicine import identify_medicine, identify_medicine_flow, render_identify_prompt
from .translate_medicine_info import translate_medicine_info
from .errors import credential_flow_error

__all__ = [
    "identify_medicine",
    "identify_medicine_flow",
    "render_identify_prompt",
    "translate_medicine_info",
    "credential_flow_error",
]
