import json
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from breaking_change_detect.cli import main
from breaking_change_detect.errors import FetchError

FIXTURES = Path(__file__).parent / "fixtures"
OLD = str(FIXTURES / "books_v1.yaml")
NEW = str(FIXTURES / "books_v2.yaml")


class TestCliCompare:
    def test_breaking_changes_fail(self):
        runner = CliRunner()
        result = runner.invoke(main, ["compare", OLD, NEW])

        assert result.exit_code == 1
        assert "RESPONSE_FIELD_REMOVED" in result.output
        assert "REQUIRED_PARAM_ADDED" in result.output
        assert "/api/books GET" in result.output
        assert "2 breaking change(s) detected." in result.output

    def test_no_changes_pass(self):
        runner = CliRunner()
        result = runner.invoke(main, ["compare", OLD, OLD])

        assert result.exit_code == 0
        assert "No breaking changes detected." in result.output

    def test_no_fail_on_breaking(self):
        runner = CliRunner()
        result = runner.invoke(main, ["compare", OLD, NEW, "--no-fail-on-breaking"])

        assert result.exit_code == 0

    def test_json_output(self):
        runner = CliRunner()
        result = runner.invoke(main, ["compare", OLD, NEW, "--format", "json"])

        assert result.exit_code == 1
        assert json.loads(result.output) == [
            {"kind": "RESPONSE_FIELD_REMOVED", "entry": "ENDPOINT", "endpoint": "/api/books GET"},
            {"kind": "REQUIRED_PARAM_ADDED", "entry": "ENDPOINT", "endpoint": "/api/books GET"},
        ]

    def test_format_from_env(self):
        runner = CliRunner()
        result = runner.invoke(main, ["compare", OLD, OLD], env={"BCD_FORMAT": "json"})

        assert result.exit_code == 0
        assert json.loads(result.output) == []

    @patch("breaking_change_detect.cli.compare_sources")
    def test_timeout_passed_through(self, mock_compare):
        mock_compare.return_value = []
        runner = CliRunner()
        result = runner.invoke(main, ["compare", "http://a/docs", "http://b/docs", "--timeout", "2.5"])

        assert result.exit_code == 0
        mock_compare.assert_called_once_with("http://a/docs", "http://b/docs", timeout=2.5)

    @patch("breaking_change_detect.cli.compare_sources")
    def test_fetch_error_exit_code(self, mock_compare):
        mock_compare.side_effect = FetchError("http://a/docs", "status code 500", status_code=500)
        runner = CliRunner()
        result = runner.invoke(main, ["compare", "http://a/docs", "http://b/docs"])

        assert result.exit_code == 2
        assert "status code 500" in result.output

    def test_missing_file_exit_code(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["compare", OLD, str(tmp_path / "nope.yaml")])

        assert result.exit_code == 2


class TestCliEndpoints:
    def test_lists_endpoints(self):
        runner = CliRunner()
        result = runner.invoke(main, ["endpoints", OLD])

        assert result.exit_code == 0
        assert "Found 4 endpoints." in result.output
        assert "/api/books POST: 2 request field(s), 5 response field(s), 0 parameter(s)" in result.output

    def test_json_output(self):
        runner = CliRunner()
        result = runner.invoke(main, ["endpoints", str(FIXTURES / "petstore.json"), "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["/pets GET"]["parameters"][0]["name"] == "limit"
        assert data["/pets/{petId} GET"]["response_fields"][".owner.address.city"] == "string"

    def test_parse_error_exit_code(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("paths: {}\n", encoding="utf-8")
        runner = CliRunner()
        result = runner.invoke(main, ["endpoints", str(bad)])

        assert result.exit_code == 2
        assert "openapi" in result.output


class TestCliMalformedDocument:
    def test_malformed_parameter_exit_code(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text(
            "openapi: 3.0.0\npaths:\n  /things:\n    get:\n      parameters: [limit]\n",
            encoding="utf-8",
        )
        runner = CliRunner()
        result = runner.invoke(main, ["compare", OLD, str(bad)])

        assert result.exit_code == 2
        assert "GET /things" in result.output

    @patch("breaking_change_detect.cli.fetch_document")
    def test_endpoints_shares_timeout_option(self, mock_fetch):
        mock_fetch.side_effect = FetchError("http://a/docs", "timed out")
        runner = CliRunner()
        result = runner.invoke(main, ["endpoints", "http://a/docs", "--timeout", "1.5"])

        assert result.exit_code == 2
        mock_fetch.assert_called_once_with("http://a/docs", timeout=1.5)
