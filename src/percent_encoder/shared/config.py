"""Configuration classes for percent encoding.

This module provides validated configuration objects for the encoder engine
and its logging, plus presets and JSON serialization for the CLI.
"""

import codecs
import json
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Union

if TYPE_CHECKING:
    from percent_encoder.character.encoder import PercentEncoder
    from percent_encoder.character.safe_chars import SafeCharacterSet

# Each pending run must hold at least one surrogate pair
MIN_ENCODE_LOOPS_PER_BUFFER = 1
DEFAULT_ENCODE_LOOPS_PER_BUFFER = 16

VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Built-in codec error handlers whose replacement length per character is
# bounded, so the byte buffer can be sized up front
BOUNDED_ERROR_HANDLERS = (
    "strict",
    "ignore",
    "replace",
    "backslashreplace",
    "xmlcharrefreplace",
    "namereplace",
    "surrogateescape",
    "surrogatepass",
)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass
class EncoderConfig:
    """Configuration for the encoder engine and its transcoder.

    Attributes:
        charset: Codec name used to turn unsafe characters into bytes
        errors: Codec error handler; ``strict`` reports malformed and
            unmappable input, anything else substitutes
        encode_loops_per_buffer: Surrogate pairs the pending buffer can hold
            before it must be flushed
        max_bytes_per_char: Override for the probed bytes-per-character bound
        presize_output: Pre-size the string sink to the input length
        enable_metrics: Collect per-call EncodingMetrics
    """

    charset: str = "utf-8"
    errors: str = "strict"
    encode_loops_per_buffer: int = DEFAULT_ENCODE_LOOPS_PER_BUFFER
    max_bytes_per_char: Optional[int] = None
    presize_output: bool = True
    enable_metrics: bool = True

    def __post_init__(self) -> None:
        """Validate encoder configuration."""
        try:
            codecs.lookup(self.charset)
        except LookupError:
            raise ValueError(f"Unknown charset: {self.charset}") from None
        try:
            codecs.lookup_error(self.errors)
        except LookupError:
            raise ValueError(f"Unknown error handler: {self.errors}") from None
        if self.errors not in BOUNDED_ERROR_HANDLERS:
            raise ValueError(
                f"Error handler {self.errors} has no known output bound; "
                f"use one of {list(BOUNDED_ERROR_HANDLERS)}"
            )
        if self.encode_loops_per_buffer < MIN_ENCODE_LOOPS_PER_BUFFER:
            raise ValueError(
                f"encode_loops_per_buffer must be >= {MIN_ENCODE_LOOPS_PER_BUFFER}"
            )
        if self.max_bytes_per_char is not None and self.max_bytes_per_char <= 0:
            raise ValueError("max_bytes_per_char must be > 0 or None")

    @property
    def pending_capacity(self) -> int:
        """Capacity of the pending-character buffer in UTF-16 code units."""
        return 2 * self.encode_loops_per_buffer

    @property
    def reports_errors(self) -> bool:
        return self.errors == "strict"


@dataclass
class LoggingConfig:
    """Logging and correlation settings."""

    logging_level: str = "WARNING"
    enable_correlation_tracking: bool = True
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate logging configuration."""
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ValueError(f"logging_level must be one of {VALID_LOGGING_LEVELS}")

    @property
    def effective_correlation_id(self) -> Optional[str]:
        if not self.enable_correlation_tracking:
            return None
        return self.correlation_id


_COMPONENTS = ("encoder", "logging")


@dataclass(frozen=True)
class PercentEncoderConfig:
    """Complete configuration for a percent encoder.

    Immutable; use ``override`` to derive variants.
    """

    encoder: EncoderConfig = field(default_factory=EncoderConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    version: str = "1.0.0"
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Re-validate components, since they are mutable dataclasses."""
        try:
            self.encoder.__post_init__()
            self.logging.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

        if (
            self.encoder.max_bytes_per_char is not None
            and self.encoder.errors == "xmlcharrefreplace"
            and self.encoder.max_bytes_per_char < len("&#1114111;")
        ):
            raise ConfigValidationError(
                "max_bytes_per_char is too small for xmlcharrefreplace output",
                field_name="encoder.max_bytes_per_char",
                suggestions=["Leave max_bytes_per_char unset to probe the codec"],
            )

    def override(self, **kwargs: Any) -> "PercentEncoderConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Field overrides; ``component__field`` keys reach into
                the ``encoder`` and ``logging`` components

        Returns:
            New PercentEncoderConfig instance with overrides applied

        Example:
            >>> config = PercentEncoderConfig()
            >>> latin1 = config.override(encoder__charset="latin-1")
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=[f"Use one of {list(_COMPONENTS)}"],
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        try:
            for component in _COMPONENTS:
                current = getattr(self, component)
                if isinstance(nested_overrides.get(component), dict):
                    new_fields[component] = replace(
                        current, **nested_overrides.pop(component)
                    )
            new_fields.update(nested_overrides)
            return replace(self, **new_fields)
        except ConfigValidationError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""

        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            return obj

        result = _dataclass_to_dict(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PercentEncoderConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected rather than silently dropped.
        """
        components = {"encoder": EncoderConfig, "logging": LoggingConfig}
        field_values: Dict[str, Any] = {}

        for key, value in data.items():
            if key not in cls.__dataclass_fields__:
                raise ConfigValidationError(
                    f"Unknown configuration field: {key}", field_name=key
                )
            if key in components:
                if not isinstance(value, dict):
                    raise ConfigValidationError(
                        f"Configuration component {key} must be an object",
                        field_name=key,
                    )
                try:
                    field_values[key] = components[key](**value)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            else:
                field_values[key] = value

        return cls(**field_values)

    @classmethod
    def from_json(cls, json_str: str) -> "PercentEncoderConfig":
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    def create_encoder(
        self,
        safe_chars: Union["SafeCharacterSet", Iterable[Union[str, int]]],
    ) -> "PercentEncoder":
        """Build an encoder for ``safe_chars`` using this configuration."""
        from percent_encoder.character.encoder import PercentEncoder

        return PercentEncoder.from_config(
            safe_chars,
            self.encoder,
            correlation_id=self.logging.effective_correlation_id,
        )

    # Preset factory methods
    @classmethod
    def strict(cls) -> "PercentEncoderConfig":
        """UTF-8 with malformed and unmappable input reported as errors."""
        return cls(
            encoder=EncoderConfig(charset="utf-8", errors="strict"),
            name="strict",
            description="UTF-8 encoding that rejects malformed input",
        )

    @classmethod
    def lenient(cls) -> "PercentEncoderConfig":
        """UTF-8 with unencodable input replaced instead of reported."""
        return cls(
            encoder=EncoderConfig(charset="utf-8", errors="replace"),
            name="lenient",
            description="UTF-8 encoding that substitutes unencodable input",
        )

    @classmethod
    def legacy_latin1(cls) -> "PercentEncoderConfig":
        """Latin-1 for legacy form encodings, with XML character references."""
        return cls(
            encoder=EncoderConfig(charset="latin-1", errors="xmlcharrefreplace"),
            name="legacy_latin1",
            description=(
                "Latin-1 encoding writing unmappable characters as numeric "
                "character references"
            ),
        )

    @classmethod
    def preset(cls, name: str) -> "PercentEncoderConfig":
        """Look up a preset by name."""
        presets = {
            "strict": cls.strict,
            "lenient": cls.lenient,
            "legacy_latin1": cls.legacy_latin1,
        }
        if name not in presets:
            raise ConfigValidationError(
                f"Unknown preset: {name}",
                field_name="preset",
                suggestions=sorted(presets),
            )
        return presets[name]()
