"""Tests for report building and rendering."""

import json
from datetime import datetime, timezone

import pytest

from fluxo_ia.core.report import ReportBuilder, screenshot_link
from fluxo_ia.core.state import (
    LogEntry,
    ReportFormat,
    ResultsAggregate,
    StepRecord,
    StepStatus,
)


@pytest.fixture
def results() -> ResultsAggregate:
    aggregate = ResultsAggregate()
    aggregate.append(StepRecord(group="A", description="Volte", status=StepStatus.SUCCESS, duration_ms=12))
    aggregate.append(
        StepRecord(
            group="A",
            description='Clique no botão "<b>Enviar</b>"',
            status=StepStatus.FAILURE,
            duration_ms=30,
            error='Nenhum elemento encontrado para "<b>Enviar</b>"',
        )
    )
    aggregate.total_duration_ms = 42
    return aggregate


@pytest.fixture
def builder() -> ReportBuilder:
    return ReportBuilder()


def build(builder, results, **kwargs):
    defaults = dict(
        results=results,
        logs=[LogEntry(type="log", text="pronto")],
        screenshots=["screenshot_0.png"],
        page_title="Página",
        page_url="https://example.com",
        timestamp=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
    )
    defaults.update(kwargs)
    return builder.build(**defaults)


def test_status_reflects_failures(builder, results):
    assert build(builder, results).status == "Falha"
    assert build(builder, ResultsAggregate()).status == "Sucesso"


def test_json_uses_portuguese_keys(builder, results):
    data = json.loads(builder.to_json(build(builder, results)))

    assert data["titulo"] == "Página"
    assert data["duracao"] == 42
    assert data["sucessos"] == 1
    assert data["falhas"] == 1
    assert data["status"] == "Falha"
    assert data["passos"][1]["grupo"] == "A"
    assert data["passos"][1]["status"] == "falha"
    assert data["passos"][1]["erro"].startswith("Nenhum elemento")
    assert data["screenshots"] == ["screenshot_0.png"]


def test_json_keeps_non_ascii(builder, results):
    assert "Página" in builder.to_json(build(builder, results))


def test_html_sections(builder, results):
    html = builder.to_html(build(builder, results))

    assert 'class="sumario"' in html
    assert html.count("passo-sucesso") >= 1
    assert "passo-falha" in html
    assert "Screenshots" in html
    assert "Logs do Console" in html
    assert "pronto" in html


def test_html_escapes_step_text(builder, results):
    html = builder.to_html(build(builder, results))

    assert "<b>Enviar</b>" not in html
    assert "&lt;b&gt;Enviar&lt;/b&gt;" in html


def test_html_omits_empty_sections(builder, results):
    html = builder.to_html(build(builder, results, logs=[], screenshots=[]))

    assert "Logs do Console" not in html
    assert "<h2>Screenshots</h2>" not in html


def test_render_dispatches_on_format(builder, results):
    document = build(builder, results)

    assert builder.render(document, ReportFormat.HTML).startswith("<!DOCTYPE html>")
    assert json.loads(builder.render(document, "json"))["url"] == "https://example.com"


def test_document_is_a_snapshot(builder, results):
    document = build(builder, results)
    results.append(StepRecord(description="Atualize", status=StepStatus.SUCCESS))

    assert len(document.steps) == 2


def test_screenshot_links_relative_to_report_dir(builder, results, tmp_path):
    shot = tmp_path / "shots" / "screenshot_0.png"
    document = build(builder, results, screenshots=[str(shot)])

    html = builder.to_html(document, base_dir=tmp_path / "a" / "b")

    assert 'src="../../shots/screenshot_0.png"' in html


def test_screenshot_links_without_report_dir_are_absolute(builder, results, tmp_path):
    shot = tmp_path / "screenshot_0.png"

    assert screenshot_link(str(shot)) == shot.resolve().as_uri()


def test_render_passes_report_dir_to_html(builder, results, tmp_path):
    document = build(builder, results, screenshots=[str(tmp_path / "s.png")])

    html = builder.render(document, ReportFormat.HTML, base_dir=tmp_path / "relatorios")

    assert 'src="../s.png"' in html
