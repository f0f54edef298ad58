"""Integration tests for the promdecode command line."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest
from typer.testing import CliRunner

from promdecode import __version__
from promdecode.cli import create_app
from promdecode.core.models import WriteRequest

runner = CliRunner()


@pytest.fixture
def input_file(
    tmp_path: Path,
    sample_request: WriteRequest,
    make_payload: Callable[[WriteRequest], bytes],
    make_record_json: Callable[..., bytes],
) -> Path:
    """An input file with two valid records."""
    path = tmp_path / "records.json"
    record = make_record_json(make_payload(sample_request))
    path.write_bytes(record + b"\n" + record)
    return path


class TestCli:
    """Tests for the promdecode command."""

    @pytest.mark.integration
    @pytest.mark.tier(2)
    @pytest.mark.tra("Cli.OutputFile")
    def test_writes_documents_to_output_file(
        self, input_file: Path, tmp_path: Path
    ) -> None:
        """Documents go to --output and the summary is reported."""
        output = tmp_path / "out.txt"

        result = runner.invoke(
            create_app(), ["--input", str(input_file), "--output", str(output)]
        )

        assert result.exit_code == 0, result.output
        text = output.read_text(encoding="utf-8")
        assert text.count("# Object ") == 2
        assert '\n  "timeseries": [' in text
        assert "Successfully processed 2 records" in result.output

    @pytest.mark.integration
    @pytest.mark.tier(2)
    @pytest.mark.tra("Cli.Stdout")
    def test_defaults_to_stdout(self, input_file: Path) -> None:
        """Without --output the documents are written to stdout."""
        result = runner.invoke(create_app(), ["--input", str(input_file)])

        assert result.exit_code == 0, result.output
        assert "# Object 1" in result.output
        assert "# Object 2" in result.output

    @pytest.mark.integration
    @pytest.mark.tier(2)
    @pytest.mark.tra("Cli.Compact")
    def test_no_pretty_writes_compact_json(
        self, input_file: Path, tmp_path: Path
    ) -> None:
        """--no-pretty writes one JSON document per line."""
        output = tmp_path / "out.txt"

        result = runner.invoke(
            create_app(),
            ["-i", str(input_file), "-o", str(output), "--no-pretty"],
        )

        assert result.exit_code == 0, result.output
        lines = output.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "# Object 1"
        assert json.loads(lines[1])["timeseries"][1]["labels"] == {"__name__": "up"}

    @pytest.mark.integration
    @pytest.mark.tier(2)
    @pytest.mark.tra("Cli.HumanTime")
    def test_human_time_in_local_zone(
        self, input_file: Path, tmp_path: Path, utc_local_time: None
    ) -> None:
        """--human-time adds calendar timestamps before each document."""
        output = tmp_path / "out.txt"

        result = runner.invoke(
            create_app(),
            ["-i", str(input_file), "-o", str(output), "--human-time"],
        )

        assert result.exit_code == 0, result.output
        text = output.read_text(encoding="utf-8")
        assert "# Object 1: Human-readable timestamps for series 0:" in text
        assert "#   Sample 0: 2023-11-14T22:13:20.123000000Z" in text

    @pytest.mark.integration
    @pytest.mark.tier(2)
    @pytest.mark.tra("Cli.HumanTime.Env")
    def test_human_time_from_environment(
        self, input_file: Path, tmp_path: Path, utc_local_time: None
    ) -> None:
        """PROMDECODE_HUMAN_TIME turns the annotation on."""
        output = tmp_path / "out.txt"

        result = runner.invoke(
            create_app(),
            ["-i", str(input_file), "-o", str(output)],
            env={"PROMDECODE_HUMAN_TIME": "1"},
        )

        assert result.exit_code == 0, result.output
        assert "Human-readable timestamps" in output.read_text(encoding="utf-8")

    @pytest.mark.integration
    @pytest.mark.tier(2)
    @pytest.mark.tra("Cli.BadTimezone")
    def test_unknown_timezone_is_usage_error(self, input_file: Path) -> None:
        """An unknown --timezone is rejected before reading input."""
        result = runner.invoke(
            create_app(),
            ["-i", str(input_file), "--human-time", "--timezone", "Nowhere/Special"],
        )

        assert result.exit_code == 2

    @pytest.mark.integration
    @pytest.mark.tier(2)
    @pytest.mark.tra("Cli.MissingInput")
    def test_missing_input_option_fails(self) -> None:
        """--input is required."""
        result = runner.invoke(create_app(), [])

        assert result.exit_code != 0

    @pytest.mark.integration
    @pytest.mark.tier(2)
    @pytest.mark.tra("Cli.UnreadableInput")
    def test_nonexistent_input_file_exits_1(self, tmp_path: Path) -> None:
        """A missing input file is a fatal setup error."""
        result = runner.invoke(
            create_app(), ["--input", str(tmp_path / "does-not-exist.json")]
        )

        assert result.exit_code == 1
        assert "Error opening input file" in result.output

    @pytest.mark.integration
    @pytest.mark.tier(2)
    @pytest.mark.tra("Cli.UnwritableOutput")
    def test_uncreatable_output_file_exits_1(
        self, input_file: Path, tmp_path: Path
    ) -> None:
        """An output path in a missing directory is a fatal setup error."""
        output = tmp_path / "missing" / "out.txt"

        result = runner.invoke(
            create_app(), ["--input", str(input_file), "--output", str(output)]
        )

        assert result.exit_code == 1
        assert "Error creating output file" in result.output
        assert not output.exists()

    @pytest.mark.integration
    @pytest.mark.tier(2)
    @pytest.mark.tra("Cli.Halted")
    def test_truncated_input_exits_1(self, tmp_path: Path) -> None:
        """A framing error still reports the count, then exits non-zero."""
        path = tmp_path / "records.json"
        path.write_bytes(b'{"b": [1, 2')

        result = runner.invoke(create_app(), ["--input", str(path)])

        assert result.exit_code == 1
        assert "Successfully processed 0 records" in result.output

    @pytest.mark.integration
    @pytest.mark.tier(2)
    @pytest.mark.tra("Cli.LogLevelFloor")
    def test_quiet_log_level_keeps_diagnostics_and_count(
        self,
        tmp_path: Path,
        sample_request: WriteRequest,
        make_payload: Callable[[WriteRequest], bytes],
        make_record_json: Callable[..., bytes],
        corrupt_payload: bytes,
    ) -> None:
        """Skip diagnostics and the final count survive --log-level ERROR."""
        path = tmp_path / "records.json"
        path.write_bytes(
            make_record_json(make_payload(sample_request))
            + make_record_json(corrupt_payload)
        )
        output = tmp_path / "out.txt"

        result = runner.invoke(
            create_app(),
            ["-i", str(path), "-o", str(output), "--log-level", "ERROR"],
        )

        assert result.exit_code == 0, result.output
        assert "Skipping record #2: decompression error" in result.output
        assert result.output.splitlines()[-1] == "Successfully processed 1 records"

    @pytest.mark.integration
    @pytest.mark.tier(2)
    @pytest.mark.tra("Cli.BadLogLevel")
    def test_unknown_log_level_is_rejected(self, input_file: Path) -> None:
        """A level name logging does not know is a usage error."""
        result = runner.invoke(
            create_app(), ["--input", str(input_file), "--log-level", "verbose"]
        )

        assert result.exit_code == 2
        assert "Successfully processed" not in result.output

    @pytest.mark.integration
    @pytest.mark.tier(2)
    @pytest.mark.tra("Cli.Version")
    def test_version(self) -> None:
        """--version prints the version without needing --input."""
        result = runner.invoke(create_app(), ["--version"])

        assert result.exit_code == 0
        assert f"promdecode {__version__}" in result.output
