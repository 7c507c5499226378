"""
Pill Identifier

Identify a medicine from a photo of its tablet sheet, translate the result
and read its uses aloud.
Pipeline: IMAGE → VALIDATION → LLM → NORMALIZATION → (TRANSLATION) → SPEECH
"""

__version__ = "1.0.0"
__author__ = "Pill Identifier Team"
