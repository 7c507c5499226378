"""
Application Services

High-level services for external consumers.
"""

from .identification_service import MedicineIdentificationService

__all__ = [
    "MedicineIdentificationService",
]
