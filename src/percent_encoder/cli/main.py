"""Main CLI entry point for the percent-encoder command-line tool.

Encodes text given as arguments or read line by line from standard input,
and reports how an encoder configuration sizes its buffers.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, TextIO

from percent_encoder import __version__
from percent_encoder.character.encoder import PercentEncoder
from percent_encoder.character.safe_chars import SafeCharacterSet
from percent_encoder.character.sink import StreamSink
from percent_encoder.shared.config import ConfigError, PercentEncoderConfig
from percent_encoder.shared.errors import EncodingError
from percent_encoder.shared.logging import configure_logging, get_logger

SAFE_PRESETS = {
    "unreserved": SafeCharacterSet.unreserved,
    "alphanumeric": SafeCharacterSet.alphanumeric,
}


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self) -> None:
        self.encoder_config = PercentEncoderConfig()
        self.safe_preset = "unreserved"
        self.extra_safe = ""
        self.output_format = "text"

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load encoder configuration from a JSON file.

        Raises:
            ConfigError: if the file cannot be read or is not a valid
                configuration
        """
        config = cls()
        try:
            text = config_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not read config file {config_path}: {e}") from e
        config.encoder_config = PercentEncoderConfig.from_json(text)
        return config

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "CLIConfig":
        """Build configuration from a config file, a preset and option overrides."""
        if args.config:
            config = cls.from_file(args.config)
        else:
            config = cls()
            config.encoder_config = PercentEncoderConfig.preset(args.preset)

        overrides: Dict[str, Any] = {}
        if args.charset:
            overrides["encoder__charset"] = args.charset
        if args.errors:
            overrides["encoder__errors"] = args.errors
        if args.correlation_id:
            overrides["logging__correlation_id"] = args.correlation_id
        if overrides:
            config.encoder_config = config.encoder_config.override(**overrides)

        config.safe_preset = args.safe_preset
        config.extra_safe = args.safe or ""
        config.output_format = getattr(args, "format", config.output_format)
        return config

    def build_safe_set(self) -> SafeCharacterSet:
        safe_chars = SAFE_PRESETS[self.safe_preset]()
        if self.extra_safe:
            safe_chars = safe_chars.union(self.extra_safe)
        return safe_chars

    def build_encoder(self) -> PercentEncoder:
        return self.encoder_config.create_encoder(self.build_safe_set())


class EncodingProcessor:
    """Core encoding logic for CLI operations."""

    def __init__(self, config: CLIConfig) -> None:
        self.config = config
        self.encoder = config.build_encoder()
        self.logger = get_logger(
            __name__,
            config.encoder_config.logging.effective_correlation_id,
            "cli_processor",
        )

    def process_text(self, text: str, include_metrics: bool = False) -> Dict[str, Any]:
        """Encode one input and describe the outcome."""
        try:
            output = self.encoder.encode(text)
        except EncodingError as e:
            self.logger.info(
                "Input could not be encoded",
                extra={"error_type": type(e).__name__},
            )
            return {
                "input": text,
                "success": False,
                "error_type": type(e).__name__,
                "error": str(e),
            }

        result: Dict[str, Any] = {"input": text, "success": True, "output": output}
        if include_metrics and self.encoder.last_metrics is not None:
            result["metrics"] = self.encoder.last_metrics.to_dict()
        return result

    def stream_text(self, text: str, stream: TextIO) -> bool:
        """Encode one input straight to ``stream``, followed by a newline.

        Output already written before a failure stays in the stream.
        """
        sink = StreamSink(stream)
        try:
            self.encoder.encode(text, sink)
        except EncodingError as e:
            stream.write("\n")
            print(f"Error: {e}", file=sys.stderr)
            return False
        stream.write("\n")
        return True

    def describe(self) -> Dict[str, Any]:
        """Summarise the charset and buffer sizing of the configured encoder."""
        transcoder = self.encoder.transcoder
        return {
            "charset": transcoder.charset,
            "errors": transcoder.errors,
            "max_bytes_per_char": transcoder.max_bytes_per_char,
            "pending_capacity": self.encoder.pending_capacity,
            "byte_capacity": self.encoder.byte_capacity,
            "safe_characters": len(self.encoder.safe_chars),
        }


def iter_inputs(texts: List[str], stdin: TextIO) -> Iterator[str]:
    """Yield command-line texts, or stdin lines without their line endings."""
    if texts:
        yield from texts
        return
    for line in stdin:
        yield line.rstrip("\r\n")


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="percent-encoder",
        description="Percent-encode text for use in URL components",
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    encoder_options = argparse.ArgumentParser(add_help=False)
    encoder_options.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file (JSON, as written by PercentEncoderConfig.to_json)",
    )
    encoder_options.add_argument(
        "--preset",
        choices=["strict", "lenient", "legacy_latin1"],
        default="strict",
        help="Encoder configuration preset (default: strict)",
    )
    encoder_options.add_argument("--charset", help="Charset for escaped characters")
    encoder_options.add_argument("--errors", help="Codec error handler")
    encoder_options.add_argument(
        "--safe-preset",
        choices=sorted(SAFE_PRESETS),
        default="unreserved",
        help="Base set of characters left unescaped (default: unreserved)",
    )
    encoder_options.add_argument(
        "--safe",
        help="Additional characters to leave unescaped",
    )
    encoder_options.add_argument(
        "--correlation-id",
        help="Correlation ID attached to log records",
    )

    # Encode command
    encode_parser = subparsers.add_parser(
        "encode", parents=[encoder_options], help="Percent-encode text"
    )
    encode_parser.add_argument(
        "text",
        nargs="*",
        help="Text to encode (default: read lines from stdin)",
    )
    encode_parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    encode_parser.add_argument(
        "--stream",
        action="store_true",
        help="Write output as it is produced instead of building strings",
    )
    encode_parser.add_argument(
        "--metrics",
        action="store_true",
        help="Include encoding metrics (json format only)",
    )

    # Info command
    info_parser = subparsers.add_parser(
        "info", parents=[encoder_options], help="Show encoder charset and buffer sizing"
    )
    info_parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output",
    )

    return parser


def setup_logging(args: argparse.Namespace, config: CLIConfig) -> None:
    """Apply --verbose/--quiet, falling back to the configured level."""
    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        configure_logging(config.encoder_config.logging.logging_level)


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format encoding results for output."""
    if format_type == "json":
        return json.dumps(results, indent=2, ensure_ascii=False)

    lines = []
    for result in results:
        if result["success"]:
            lines.append(result["output"])
        else:
            lines.append(f"Error: {result['error']}")
    return "\n".join(lines)


def cmd_encode(args: argparse.Namespace) -> int:
    """Handle encode command."""
    config = CLIConfig.from_args(args)
    setup_logging(args, config)
    processor = EncodingProcessor(config)

    if args.stream:
        if args.format != "text":
            print("--stream only supports text output", file=sys.stderr)
            return 1
        succeeded = True
        for text in iter_inputs(args.text, sys.stdin):
            succeeded = processor.stream_text(text, sys.stdout) and succeeded
        return 0 if succeeded else 1

    results = [
        processor.process_text(text, include_metrics=args.metrics)
        for text in iter_inputs(args.text, sys.stdin)
    ]

    if args.format == "text":
        for result in results:
            if result["success"]:
                print(result["output"])
            else:
                print(f"Error: {result['error']}", file=sys.stderr)
    else:
        print(format_results(results, args.format))

    return 0 if all(r["success"] for r in results) else 1


def cmd_info(args: argparse.Namespace) -> int:
    """Handle info command."""
    config = CLIConfig.from_args(args)
    setup_logging(args, config)
    processor = EncodingProcessor(config)
    details = processor.describe()

    if args.format == "json":
        print(json.dumps(details, indent=2))
    else:
        width = max(len(key) for key in details)
        for key, value in details.items():
            print(f"{key.ljust(width)}  {value}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        if args.command == "encode":
            return cmd_encode(args)
        if args.command == "info":
            return cmd_info(args)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    except (ConfigError, LookupError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
