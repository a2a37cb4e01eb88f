"""Shared utilities for percent encoding.

This module provides configuration objects, result types, error types and
logging helpers used across the package.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    EncoderConfig,
    LoggingConfig,
    PercentEncoderConfig,
)
from .errors import (
    EncodingError,
    InvalidSurrogatePairError,
    MalformedInputError,
    TranscoderOverflowError,
    UnmappableCharacterError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    EncodingMetrics,
    TranscodeOutcome,
    TranscodeResult,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "EncoderConfig",
    "LoggingConfig",
    "PercentEncoderConfig",
    "EncodingError",
    "InvalidSurrogatePairError",
    "MalformedInputError",
    "TranscoderOverflowError",
    "UnmappableCharacterError",
    "CorrelationLogger",
    "get_logger",
    "EncodingMetrics",
    "TranscodeOutcome",
    "TranscodeResult",
]
