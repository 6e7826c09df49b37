from .exceptions import (
    ScanError,
    FetchError,
    RenderingUnavailableError,
    InvalidBatchError,
    ReportGenerationError
)

__all__ = [
    'ScanError',
    'FetchError',
    'RenderingUnavailableError',
    'InvalidBatchError',
    'ReportGenerationError'
]
