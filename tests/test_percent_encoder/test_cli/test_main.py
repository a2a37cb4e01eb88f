"""Tests for the CLI main module."""

import io
import json
from unittest.mock import patch

import pytest

from percent_encoder.cli.main import (
    CLIConfig,
    EncodingProcessor,
    create_argument_parser,
    format_results,
    iter_inputs,
    main,
)
from percent_encoder.shared.config import ConfigError, PercentEncoderConfig


class TestCLIConfig:
    """Test CLI configuration management."""

    def test_default_config(self):
        config = CLIConfig()

        assert config.encoder_config == PercentEncoderConfig()
        assert config.safe_preset == "unreserved"
        assert config.extra_safe == ""
        assert config.output_format == "text"

    def test_config_from_file(self, tmp_path):
        config_path = tmp_path / "encoder.json"
        config_path.write_text(PercentEncoderConfig.legacy_latin1().to_json())

        config = CLIConfig.from_file(config_path)

        assert config.encoder_config.encoder.charset == "latin-1"
        assert config.encoder_config.name == "legacy_latin1"

    def test_config_from_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Could not read config file"):
            CLIConfig.from_file(tmp_path / "missing.json")

    def test_from_args_applies_overrides(self):
        args = create_argument_parser().parse_args(
            ["encode", "--preset", "lenient", "--charset", "latin-1",
             "--safe-preset", "alphanumeric", "--safe", "/", "--correlation-id", "r1"]
        )

        config = CLIConfig.from_args(args)

        assert config.encoder_config.encoder.charset == "latin-1"
        assert config.encoder_config.encoder.errors == "replace"
        assert config.encoder_config.logging.correlation_id == "r1"
        assert config.safe_preset == "alphanumeric"
        safe = config.build_safe_set()
        assert "/" in safe
        assert "-" not in safe


class TestEncodingProcessor:
    """Test the processing layer behind the commands."""

    def test_process_text(self):
        processor = EncodingProcessor(CLIConfig())

        result = processor.process_text("a b", include_metrics=True)

        assert result["success"] is True
        assert result["output"] == "a%20b"
        assert result["metrics"]["escaped_bytes"] == 1

    def test_process_text_failure(self):
        processor = EncodingProcessor(CLIConfig())

        result = processor.process_text("\ud800")

        assert result["success"] is False
        assert result["error_type"] == "InvalidSurrogatePairError"
        assert "output" not in result

    def test_stream_text(self):
        processor = EncodingProcessor(CLIConfig())
        stream = io.StringIO()

        assert processor.stream_text("a/b", stream) is True
        assert stream.getvalue() == "a%2Fb\n"

    def test_stream_text_failure_keeps_partial_output(self, capsys):
        processor = EncodingProcessor(CLIConfig())
        stream = io.StringIO()

        assert processor.stream_text("ab\ud800", stream) is False
        assert stream.getvalue() == "ab\n"
        assert "Error:" in capsys.readouterr().err

    def test_describe(self):
        details = EncodingProcessor(CLIConfig()).describe()

        assert details == {
            "charset": "utf-8",
            "errors": "strict",
            "max_bytes_per_char": 4,
            "pending_capacity": 32,
            "byte_capacity": 160,
            "safe_characters": 66,
        }


class TestHelpers:
    """Test input iteration and result formatting."""

    def test_iter_inputs_prefers_arguments(self):
        assert list(iter_inputs(["x"], io.StringIO("y\n"))) == ["x"]

    def test_iter_inputs_strips_line_endings(self):
        assert list(iter_inputs([], io.StringIO("a b\r\nc\n\n"))) == ["a b", "c", ""]

    def test_format_results_text(self):
        results = [
            {"input": "a b", "success": True, "output": "a%20b"},
            {"input": "\ud800", "success": False, "error": "bad"},
        ]

        assert format_results(results, "text") == "a%20b\nError: bad"

    def test_format_results_json(self):
        results = [{"input": "é", "success": True, "output": "%C3%A9"}]

        assert json.loads(format_results(results, "json")) == results


class TestMain:
    """Test the command-line entry point."""

    def test_encode_arguments(self, capsys):
        exit_code = main(["encode", "a b", "c/d"])

        assert exit_code == 0
        assert capsys.readouterr().out == "a%20b\nc%2Fd\n"

    def test_encode_stdin(self, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("é\nx y\n"))

        exit_code = main(["encode"])

        assert exit_code == 0
        assert capsys.readouterr().out == "%C3%A9\nx%20y\n"

    def test_encode_safe_preset(self, capsys):
        assert main(["encode", "--safe-preset", "alphanumeric", "a-b"]) == 0
        assert capsys.readouterr().out == "a%2Db\n"

    def test_encode_json_with_metrics(self, capsys):
        exit_code = main(["encode", "--format", "json", "--metrics", "a b"])

        results = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert results[0]["output"] == "a%20b"
        assert results[0]["metrics"]["safe_characters"] == 2

    def test_encode_failure_exit_code(self, capsys):
        exit_code = main(["encode", "ok", "\ud800"])

        captured = capsys.readouterr()
        assert exit_code == 1
        assert captured.out == "ok\n"
        assert "Invalid UTF-16" in captured.err

    def test_encode_stream(self, capsys):
        assert main(["encode", "--stream", "a b"]) == 0
        assert capsys.readouterr().out == "a%20b\n"

    def test_stream_requires_text_format(self, capsys):
        assert main(["encode", "--stream", "--format", "json", "x"]) == 1
        assert "--stream only supports text output" in capsys.readouterr().err

    def test_encode_with_config_file(self, capsys, tmp_path):
        config_path = tmp_path / "encoder.json"
        config_path.write_text(PercentEncoderConfig.legacy_latin1().to_json())

        exit_code = main(["encode", "--config", str(config_path), "é€"])

        assert exit_code == 0
        assert capsys.readouterr().out == "%E9%26%23%38%33%36%34%3B\n"

    def test_unknown_charset(self, capsys):
        exit_code = main(["encode", "--charset", "no-such-charset", "x"])

        assert exit_code == 1
        assert "Configuration error" in capsys.readouterr().err

    def test_text_to_text_codec_rejected(self, capsys):
        assert main(["encode", "--charset", "rot13", "x"]) == 1
        assert "not a text-to-bytes encoding" in capsys.readouterr().err

    @pytest.mark.parametrize("charset", ["base64", "hex"])
    def test_bytes_to_bytes_codec_rejected(self, capsys, charset):
        assert main(["encode", "--charset", charset, "a b"]) == 1
        assert "Configuration error" in capsys.readouterr().err

    def test_info_json(self, capsys):
        exit_code = main(["info", "--format", "json", "--charset", "utf-16"])

        details = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert details["charset"] == "utf-16"
        assert details["max_bytes_per_char"] == 6
        assert details["byte_capacity"] == 7 * 32

    def test_info_text(self, capsys):
        assert main(["info"]) == 0

        output = capsys.readouterr().out
        assert "charset" in output
        assert "utf-8" in output

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage:" in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert "0.1.0" in capsys.readouterr().out

    def test_keyboard_interrupt(self, capsys):
        with patch("percent_encoder.cli.main.cmd_encode", side_effect=KeyboardInterrupt):
            assert main(["encode", "x"]) == 130

        assert "interrupted" in capsys.readouterr().err
