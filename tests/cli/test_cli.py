"""Tests for the command line interface."""

import json

import pytest
from typer.testing import CliRunner

from smell_sentinel import __version__
from smell_sentinel.cli import app
from smell_sentinel.rules import RULES

NULL_RETURN = """\
class Users {
    User find(String id) {
        return null;
    }
}
"""

CLEAN = """\
class Users {
    Optional<User> find(String id) {
        return Optional.empty();
    }
}
"""


@pytest.fixture
def runner():
    return CliRunner()


def _invoke(runner, *args):
    return runner.invoke(app, list(args), env={"COLUMNS": "200"})


class TestGlobalOptions:
    def test_version(self, runner):
        result = _invoke(runner, "--version")
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_rules_lists_every_rule(self, runner):
        result = _invoke(runner, "rules")
        assert result.exit_code == 0
        for rule in RULES:
            assert rule.rule_id in result.output


class TestCheckCommand:
    """Test the check command's output and exit status."""

    def test_json_report(self, runner, isolated_config, write_java):
        path = write_java("Users.java", NULL_RETURN)
        result = _invoke(runner, "check", str(path), "--format", "json", "--quiet")
        assert result.exit_code == 1
        records = json.loads(result.stdout)
        assert [(r["rule_id"], r["line"]) for r in records] == [("nullable-return", 3)]

    def test_text_report(self, runner, isolated_config, write_java):
        path = write_java("Users.java", NULL_RETURN)
        result = _invoke(runner, "check", str(path), "-f", "text", "-q")
        assert result.exit_code == 1
        assert f"{path.as_posix()}:3: [warning] nullable-return:" in result.stdout

    def test_clean_exit(self, runner, isolated_config, write_java):
        path = write_java("Users.java", CLEAN)
        result = _invoke(runner, "check", str(path), "-f", "text", "-q")
        assert result.exit_code == 0
        assert result.stdout.strip() == ""

    def test_min_severity(self, runner, isolated_config, write_java):
        path = write_java("Users.java", NULL_RETURN)
        result = _invoke(runner, "check", str(path), "--min-severity", "error", "-q")
        assert result.exit_code == 0

    def test_rule_selection(self, runner, isolated_config, write_java):
        path = write_java("Users.java", NULL_RETURN)
        result = _invoke(runner, "check", str(path), "--rules", "flag-parameter", "-q")
        assert result.exit_code == 0

    def test_output_file(self, runner, isolated_config, write_java, tmp_path):
        path = write_java("Users.java", NULL_RETURN)
        report = tmp_path / "out" / "report.json"
        result = _invoke(runner, "check", str(path), "-f", "json", "-o", str(report), "-q")
        assert result.exit_code == 1
        assert json.loads(report.read_text())[0]["rule_id"] == "nullable-return"

    def test_malformed_file_is_reported(self, runner, isolated_config, write_java):
        path = write_java("Broken.java", "class Broken { void f() { int x = ; } }\n")
        result = _invoke(runner, "check", str(path), "-f", "json", "-q")
        assert result.exit_code == 1
        records = json.loads(result.stdout)
        assert records[0]["rule_id"] == "internal/parse-failure"

    def test_config_file(self, runner, isolated_config, write_java, tmp_path):
        path = write_java("Users.java", NULL_RETURN)
        config = tmp_path / "strict.toml"
        config.write_text('min-severity = "error"\n')
        result = _invoke(runner, "check", str(path), "--config", str(config), "-q")
        assert result.exit_code == 0

    def test_log_file_records_info_even_when_quiet(
        self, runner, isolated_config, write_java, tmp_path
    ):
        path = write_java("Broken.java", "class Broken { void f() { int x = ; } }\n")
        log = tmp_path / "run.log"
        result = _invoke(runner, "check", str(path), "-q", "--log-file", str(log))
        assert result.exit_code == 1
        lines = log.read_text().splitlines()
        assert any(" - INFO - " in line and "Analyzing 1 files" in line for line in lines)
        assert any(" - WARNING - " in line and "Cannot parse" in line for line in lines)
        assert not any(" - DEBUG - " in line for line in lines)

    def test_log_file_in_missing_directory(self, runner, isolated_config, write_java, tmp_path):
        path = write_java("Users.java", NULL_RETURN)
        log = tmp_path / "missing" / "run.log"
        result = _invoke(runner, "check", str(path), "--log-file", str(log))
        assert result.exit_code == 2
        assert "cannot open log file" in result.output


class TestUsageErrors:
    """Runs that cannot start exit with status 2."""

    def test_missing_path(self, runner, isolated_config, tmp_path):
        result = _invoke(runner, "check", str(tmp_path / "nope"))
        assert result.exit_code == 2

    def test_unknown_rule(self, runner, isolated_config, write_java):
        path = write_java("Users.java", NULL_RETURN)
        result = _invoke(runner, "check", str(path), "--rules", "no-such-rule")
        assert result.exit_code == 2

    def test_bad_format_choice(self, runner, isolated_config, write_java):
        path = write_java("Users.java", NULL_RETURN)
        result = _invoke(runner, "check", str(path), "--format", "xml")
        assert result.exit_code == 2

    def test_bad_severity_choice(self, runner, isolated_config, write_java):
        path = write_java("Users.java", NULL_RETURN)
        result = _invoke(runner, "check", str(path), "--min-severity", "bogus")
        assert result.exit_code == 2

    def test_choices_are_case_insensitive(self, runner, isolated_config, write_java):
        path = write_java("Users.java", NULL_RETURN)
        result = _invoke(
            runner, "check", str(path), "--format", "JSON", "--min-severity", "Error", "-q"
        )
        assert result.exit_code == 0
        assert json.loads(result.stdout)[0]["rule_id"] == "nullable-return"

    def test_no_sources(self, runner, isolated_config, tmp_path):
        (tmp_path / "notes.txt").write_text("hi")
        result = _invoke(runner, "check", str(tmp_path / "notes.txt"))
        assert result.exit_code == 2
