"""
Tests for the command-line entrypoint.
"""

import json
import logging

import pytest

from file_finder.cli import EXIT_FAILED, EXIT_OK, EXIT_RULE_ERRORS, main
from file_finder.logging_utils import configure_logging


@pytest.fixture(autouse=True)
def reset_finder_logger():
    """Drop handlers bound to captured streams between tests."""
    yield
    logger = logging.getLogger("file_finder")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def write_config(path, matching):
    path.write_text(json.dumps({"matching": matching}), encoding="utf-8")
    return str(path)


class TestCli:
    """Test CLI workflow and exit codes."""

    def test_prints_report_to_stdout(self, tmp_path, rotated_logs, capsys):
        """Without --output the JSON report goes to stdout."""
        config = write_config(
            tmp_path / "finder_config.json",
            {
                "include": [str(tmp_path / "app.log.*")],
                "ordering_criteria": {
                    "regex": r"app\.log\.(?P<n>\d+)",
                    "sort_by": [{"sort_type": "numeric", "regex_key": "n"}],
                },
            },
        )

        code = main(["--config", config, "--log-level", "ERROR"])

        report = json.loads(capsys.readouterr().out)
        assert code == EXIT_OK
        assert report["files"] == [str(tmp_path / "app.log.10")]

    def test_writes_report_file(self, tmp_path, rotated_logs, capsys):
        """--output writes the report and prints a summary."""
        config = write_config(tmp_path / "finder_config.json", {"include": [str(tmp_path / "*")]})
        output = tmp_path / "out" / "report.json"

        code = main(["--config", config, "--output", str(output), "--log-level", "ERROR"])

        assert code == EXIT_OK
        report = json.loads(output.read_text(encoding="utf-8"))
        assert report["stats"]["selected"] == 4
        assert "Selected: 4" in capsys.readouterr().out

    def test_include_override(self, tmp_path, make_files, capsys):
        """--include replaces the configured patterns."""
        make_files("other.txt")
        wanted = make_files("wanted.log")
        config = write_config(tmp_path / "finder_config.json", {"include": [str(tmp_path / "*.txt")]})

        main(["--config", config, "--include", str(tmp_path / "*.log"), "--log-level", "ERROR"])

        assert json.loads(capsys.readouterr().out)["files"] == wanted

    def test_strict_mode_fails_on_rule_errors(self, tmp_path, rotated_logs, capsys):
        """--strict turns per-rule errors into a non-zero exit."""
        config = write_config(
            tmp_path / "finder_config.json",
            {
                "include": [str(tmp_path / "app.log.*")],
                "ordering_criteria": {
                    "regex": r"app\.log\.(?P<n>\d+)",
                    "sort_by": [{"sort_type": "numeric", "regex_key": "missing"}],
                },
            },
        )

        relaxed = main(["--config", config, "--log-level", "ERROR"])
        strict = main(["--config", config, "--strict", "--log-level", "ERROR"])

        assert relaxed == EXIT_OK
        assert strict == EXIT_RULE_ERRORS

    def test_missing_config_fails(self, tmp_path, capsys):
        """A missing config file is reported and exits non-zero."""
        code = main(["--config", str(tmp_path / "nope.json"), "--log-level", "ERROR"])

        assert code == EXIT_FAILED
        assert "Failed to load config" in capsys.readouterr().err

    def test_invalid_criteria_fail(self, tmp_path, capsys):
        """Config validation errors exit non-zero with a message."""
        config = write_config(tmp_path / "finder_config.json", {"include": []})

        code = main(["--config", config, "--log-level", "ERROR"])

        assert code == EXIT_FAILED
        assert "at least one glob" in capsys.readouterr().err

    def test_unwritable_output_fails(self, tmp_path, make_files, capsys):
        """A report path that cannot be created exits non-zero with a message."""
        make_files("app.log")
        (tmp_path / "file.txt").write_text("", encoding="utf-8")
        config = write_config(tmp_path / "finder_config.json", {"include": [str(tmp_path / "*.log")]})
        output = tmp_path / "file.txt" / "report.json"

        code = main(["--config", config, "--output", str(output), "--log-level", "ERROR"])

        assert code == EXIT_FAILED
        assert "Failed to write report" in capsys.readouterr().err

    def test_non_object_output_section_fails(self, tmp_path, capsys):
        """A config whose output section is not an object is rejected cleanly."""
        config = tmp_path / "finder_config.json"
        config.write_text(json.dumps({"matching": {"include": ["/tmp/*"]}, "output": "x"}), encoding="utf-8")

        code = main(["--config", str(config), "--log-level", "ERROR"])

        assert code == EXIT_FAILED
        assert "Failed to load config" in capsys.readouterr().err

    def test_init_config(self, tmp_path, capsys):
        """--init-config writes a starter file once and refuses to overwrite."""
        target = tmp_path / "starter.json"

        assert main(["--init-config", str(target), "--log-level", "ERROR"]) == EXIT_OK
        assert "matching" in json.loads(target.read_text(encoding="utf-8"))
        assert main(["--init-config", str(target), "--log-level", "ERROR"]) == EXIT_FAILED


class TestConfigureLogging:
    """Test logger setup."""

    def test_configures_single_handler(self):
        """Repeated configuration should not stack handlers."""
        logger = configure_logging("DEBUG")
        configure_logging("WARNING")

        assert logger.name == "file_finder"
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING
        assert logger.propagate is False

    def test_unknown_level_falls_back_to_info(self):
        assert configure_logging("chatty").level == logging.INFO

    def test_log_file_receives_debug_records(self, tmp_path):
        """A log file gets DEBUG records even when the console is quieter."""
        log_file = tmp_path / "logs" / "finder.log"
        logger = configure_logging("ERROR", log_file)

        logger.debug("Pattern matched 3 file(s)")
        for handler in logger.handlers:
            handler.flush()

        assert "Pattern matched 3 file(s)" in log_file.read_text(encoding="utf-8")
        assert len(logger.handlers) == 2
        assert len(configure_logging("ERROR", log_file).handlers) == 2
