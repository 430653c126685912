"""Translation of pipeline errors into HTTP errors."""

import logging

from fastapi import HTTPException

from utils.errors import (
    InvalidClipDuration,
    InvalidVideoUrl,
    MalformedTimecode,
    MomentNotFound,
    PipelineTimeout,
    RecordValidationError,
    ViralCutError,
)

logger = logging.getLogger(__name__)

# Caller-input errors are surfaced immediately and never retried
STATUS_CODES = {
    InvalidVideoUrl: 400,
    MalformedTimecode: 400,
    InvalidClipDuration: 400,
    RecordValidationError: 400,
    MomentNotFound: 422,
    PipelineTimeout: 504,
}


def to_http_exception(error: ViralCutError) -> HTTPException:
    """Map a pipeline error to an HTTPException carrying its payload."""
    status_code = 500
    for error_type, code in STATUS_CODES.items():
        if isinstance(error, error_type):
            status_code = code
            break

    if status_code >= 500:
        logger.error(f"Request failed: {error.message}")
    else:
        logger.info(f"Request rejected ({status_code}): {error.message}")
    return HTTPException(status_code=status_code, detail=error.to_dict())
