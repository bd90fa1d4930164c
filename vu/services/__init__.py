"""Service orchestration: per-service processing and the concurrent batch."""

from vu.services.batch import process_services, run_services
from vu.services.processor import (
    ERROR_TAG,
    NOT_FOUND_TAG,
    RATE_LIMITED_TAG,
    ProcessorState,
    ResultStatus,
    ServiceProcessor,
    ServiceResult,
    substitute_version,
)

__all__ = [
    "ERROR_TAG",
    "NOT_FOUND_TAG",
    "RATE_LIMITED_TAG",
    "ProcessorState",
    "ResultStatus",
    "ServiceProcessor",
    "ServiceResult",
    "process_services",
    "run_services",
    "substitute_version",
]
