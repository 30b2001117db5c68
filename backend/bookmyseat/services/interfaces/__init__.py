"""
Admission gate interfaces; the Redis gate lives in admission_service.
"""

from .admission import AdmissionStrategy
from .optimistic_admission import OptimisticAdmission

__all__ = ['AdmissionStrategy', 'OptimisticAdmission']
