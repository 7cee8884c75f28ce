"""
Fluxo-IA Report Builder

Turns a finished run into a ``ReportDocument`` and renders it as JSON or
as a self-contained HTML page. Writing the result anywhere is the job of
``fluxo_ia.core.storage.ReportStorage``.
"""

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from jinja2 import Environment

from fluxo_ia.core.state import (
    LogEntry,
    NetworkRequest,
    ReportDocument,
    ReportFormat,
    ResultsAggregate,
    StepStatus,
    utc_now,
)

logger = logging.getLogger(__name__)

STATUS_SUCCESS = "Sucesso"
STATUS_FAILURE = "Falha"


def screenshot_link(reference: str, base_dir: Optional[Union[str, Path]] = None) -> str:
    """
    Link to a screenshot from a report written in ``base_dir``.

    Relative to ``base_dir`` when given, otherwise an absolute file URI.
    """
    path = Path(reference).resolve()
    if base_dir is None:
        return path.as_uri()
    try:
        return Path(os.path.relpath(path, Path(base_dir).resolve())).as_posix()
    except ValueError:
        # Screenshot on another drive than the report
        return path.as_uri()


class ReportBuilder:
    """Builds and renders run reports."""

    def build(
        self,
        results: ResultsAggregate,
        logs: list[LogEntry],
        screenshots: list[str],
        page_title: str,
        page_url: str,
        requests: Optional[list[NetworkRequest]] = None,
        extractions: Optional[dict[str, str]] = None,
        timestamp: Optional[datetime] = None,
    ) -> ReportDocument:
        """
        Snapshot a run into a report document.

        Args:
            results: The run's aggregate
            logs: Console messages captured during the session
            screenshots: Screenshot references in capture order
            page_title: Title of the page when the run ended
            page_url: URL of the page when the run ended
            requests: Captured network requests, if any
            extractions: Values read by "Extraia" steps, if any
            timestamp: Report time; now when omitted

        Returns:
            ReportDocument; status is "Sucesso" iff no step failed
        """
        return ReportDocument(
            timestamp=timestamp or utc_now(),
            title=page_title,
            url=page_url,
            duration_ms=results.total_duration_ms,
            steps=list(results.steps),
            success_count=results.success_count,
            failure_count=results.failure_count,
            logs=list(logs),
            screenshots=list(screenshots),
            requests=list(requests or []),
            extractions=dict(extractions or {}),
            status=STATUS_SUCCESS if results.failure_count == 0 else STATUS_FAILURE,
        )

    def to_json(self, document: ReportDocument) -> str:
        """Serialize with the report's Portuguese keys."""
        data = document.model_dump(mode="json", by_alias=True)
        return json.dumps(data, indent=2, ensure_ascii=False)

    def to_html(
        self,
        document: ReportDocument,
        base_dir: Optional[Union[str, Path]] = None,
    ) -> str:
        """
        Render a self-contained HTML page. Values are autoescaped.

        Screenshot links are relative to ``base_dir``, the directory the
        page will be written to.
        """
        env = Environment(autoescape=True)
        template = env.from_string(HTML_TEMPLATE)
        return template.render(
            report=document,
            timestamp=document.timestamp.isoformat(),
            success=StepStatus.SUCCESS,
            screenshots=[
                (reference, screenshot_link(reference, base_dir))
                for reference in document.screenshots
            ],
        )

    def render(
        self,
        document: ReportDocument,
        report_format: ReportFormat,
        base_dir: Optional[Union[str, Path]] = None,
    ) -> str:
        """Serialize in the requested format; ``base_dir`` only matters for HTML."""
        logger.debug(f"Rendering {ReportFormat(report_format).value} report ({len(document.steps)} steps)")
        if ReportFormat(report_format) == ReportFormat.HTML:
            return self.to_html(document, base_dir)
        return self.to_json(document)


HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="pt-BR">
<head>
  <meta charset="UTF-8">
  <title>Relatório de Testes - {{ timestamp }}</title>
  <style>
    body { font-family: Arial, sans-serif; margin: 0; padding: 20px; line-height: 1.6; }
    h1 { color: #333; border-bottom: 1px solid #eee; padding-bottom: 10px; }
    .sumario { background: #f5f5f5; padding: 15px; border-radius: 5px; margin-bottom: 20px; }
    .sucesso { color: green; }
    .falha { color: red; }
    .passo { margin-bottom: 10px; padding: 10px; border: 1px solid #ddd; border-radius: 4px; }
    .passo-sucesso { border-left: 4px solid green; }
    .passo-falha { border-left: 4px solid red; background: #fff0f0; }
    .screenshot { max-width: 100%; border: 1px solid #ddd; margin-top: 10px; }
    .logs { max-height: 200px; overflow: auto; background: #f0f0f0; padding: 10px; font-family: monospace; }
  </style>
</head>
<body>
  <h1>Relatório de Testes</h1>

  <div class="sumario">
    <p><strong>URL:</strong> {{ report.url }}</p>
    <p><strong>Título:</strong> {{ report.title }}</p>
    <p><strong>Data:</strong> {{ timestamp }}</p>
    <p><strong>Duração:</strong> {{ report.duration_ms }}ms</p>
    <p class="{{ 'sucesso' if report.passed else 'falha' }}">
      <strong>Status:</strong> {{ report.status }}
      ({{ report.success_count }} sucesso(s), {{ report.failure_count }} falha(s))
    </p>
  </div>

  <h2>Passos Executados</h2>
  {% for step in report.steps %}
  <div class="passo {{ 'passo-sucesso' if step.status == success else 'passo-falha' }}">
    <p><strong>Passo {{ loop.index }}:</strong> {{ step.description }}</p>
    <p><strong>Grupo:</strong> {{ step.group }}</p>
    <p><strong>Duração:</strong> {{ step.duration_ms }}ms</p>
    <p><strong>Status:</strong> {{ step.status.value }}</p>
    {% if step.error %}<p><strong>Erro:</strong> {{ step.error }}</p>{% endif %}
  </div>
  {% endfor %}

  {% if report.screenshots %}
  <h2>Screenshots</h2>
  {% for screenshot, link in screenshots %}
  <div>
    <p><strong>{{ screenshot }}</strong></p>
    <img src="{{ link }}" class="screenshot" alt="{{ screenshot }}">
  </div>
  {% endfor %}
  {% endif %}

  {% if report.logs %}
  <h2>Logs do Console</h2>
  <div class="logs">
    {% for log in report.logs %}
    <div><strong>[{{ log.type }}]</strong> {{ log.text }}</div>
    {% endfor %}
  </div>
  {% endif %}
</body>
</html>
"""
