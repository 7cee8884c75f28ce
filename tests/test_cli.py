"""Tests for the command-line interface."""

from typer.testing import CliRunner

from fluxo_ia import __version__
from fluxo_ia.cli import app

runner = CliRunner()


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_check_recognized_flow(tmp_path, github_flow):
    flow_file = tmp_path / "fluxo.txt"
    flow_file.write_text(github_flow, encoding="utf-8")

    result = runner.invoke(app, ["check", str(flow_file)])

    assert result.exit_code == 0
    assert "All steps recognized" in result.output


def test_check_reports_unknown_steps(tmp_path):
    flow_file = tmp_path / "fluxo.txt"
    flow_file.write_text("# A\n1. Faça algo mágico\n", encoding="utf-8")

    result = runner.invoke(app, ["check", str(flow_file)])

    assert result.exit_code == 1
    assert "could not be interpreted" in result.output


def test_check_empty_flow(tmp_path):
    flow_file = tmp_path / "fluxo.txt"
    flow_file.write_text("sem passos\n", encoding="utf-8")

    result = runner.invoke(app, ["check", str(flow_file)])

    assert result.exit_code == 1
