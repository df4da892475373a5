"""Tests for CLI commands."""

import json
import os

import pytest
from click.testing import CliRunner

from apianalyzer.cli import cli
from apianalyzer.registry_client import RegistryError

from helpers.fakes import RESOURCE_ID, make_diagnostic


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def in_temp_dir(temp_dir):
    original_dir = os.getcwd()
    os.chdir(temp_dir)
    try:
        yield temp_dir
    finally:
        os.chdir(original_dir)


def test_cli_help(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "analyze" in result.output
    assert "check" in result.output


def test_analyze_runs_workflow(cli_runner, in_temp_dir, monkeypatch):
    calls = []

    def fake_analyze(request, client, compiler, logger=None):
        calls.append((request, client, compiler))

    monkeypatch.setattr("apianalyzer.analysis.analyze_and_upload", fake_analyze)

    result = cli_runner.invoke(cli, ["analyze", RESOURCE_ID])

    assert result.exit_code == 0, result.output
    assert "uploaded" in result.output
    (request, client, compiler), = calls
    assert request.api_definition.api_name == "petstore"
    assert request.ruleset_path is None
    assert client.resource == request.api_definition
    assert compiler.analyzer_name == "typespec"


def test_analyze_passes_ruleset(cli_runner, in_temp_dir, monkeypatch):
    calls = []
    monkeypatch.setattr(
        "apianalyzer.analysis.analyze_and_upload",
        lambda request, client, compiler, logger=None: calls.append(request),
    )
    ruleset = in_temp_dir / "tspconfig.yaml"
    ruleset.write_text("linter:\n  extends: []\n")

    result = cli_runner.invoke(cli, ["analyze", RESOURCE_ID, "--ruleset", str(ruleset)])

    assert result.exit_code == 0, result.output
    assert calls[0].ruleset_path == ruleset


def test_analyze_failure_exits_nonzero(cli_runner, in_temp_dir, monkeypatch):
    def failing(request, client, compiler, logger=None):
        raise RegistryError("registry unavailable", status_code=503)

    monkeypatch.setattr("apianalyzer.analysis.analyze_and_upload", failing)

    result = cli_runner.invoke(cli, ["analyze", RESOURCE_ID])

    assert result.exit_code == 1
    assert "registry unavailable" in result.output


def test_analyze_rejects_bad_resource_id(cli_runner, in_temp_dir):
    result = cli_runner.invoke(cli, ["analyze", "/subscriptions/x"])

    assert result.exit_code == 2
    assert "Not an API definition resource id" in result.output


def test_check_json_output(cli_runner, in_temp_dir, monkeypatch):
    spec = in_temp_dir / "main.tsp"
    spec.write_text("model A {}")
    monkeypatch.setattr(
        "apianalyzer.compiler.TypeSpecCompiler.compile_from_file",
        lambda self, content, ruleset_path=None: [make_diagnostic()],
    )

    result = cli_runner.invoke(cli, ["check", str(spec), "--format", "json"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["results"][0]["analyzerRuleName"] == "no-unused"
    assert data["results"][0]["details"]["range"] == {"start": "2:0", "end": "2:10"}


def test_check_human_output_fails_on_errors(cli_runner, in_temp_dir, monkeypatch):
    spec = in_temp_dir / "main.tsp"
    spec.write_text("model A is B {}")
    monkeypatch.setattr(
        "apianalyzer.compiler.TypeSpecCompiler.compile_from_file",
        lambda self, content, ruleset_path=None: [
            make_diagnostic(message="Unknown identifier B", code="unknown-identifier", severity="error")
        ],
    )

    result = cli_runner.invoke(cli, ["check", str(spec)])

    assert result.exit_code == 1
    assert "unknown-identifier" in result.output


def test_check_no_diagnostics(cli_runner, in_temp_dir, monkeypatch):
    spec = in_temp_dir / "main.tsp"
    spec.write_text("model A {}")
    monkeypatch.setattr(
        "apianalyzer.compiler.TypeSpecCompiler.compile_from_file",
        lambda self, content, ruleset_path=None: [],
    )

    result = cli_runner.invoke(cli, ["check", str(spec)])

    assert result.exit_code == 0
    assert "No diagnostics" in result.output


def test_check_non_utf8_file_exits_with_error(cli_runner, in_temp_dir):
    spec = in_temp_dir / "main.tsp"
    spec.write_bytes(b"model \xff\xfe A {}")

    result = cli_runner.invoke(cli, ["check", str(spec)])

    assert result.exit_code == 1
    assert "Cannot check main.tsp" in result.output
    assert not isinstance(result.exception, UnicodeDecodeError)
