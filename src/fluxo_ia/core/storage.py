"""
Fluxo-IA Report Storage

Persists rendered reports under a directory with a timestamp-derived
filename (``relatorio-2024-05-01T12-30-00.html``).
"""

import logging
from pathlib import Path
from typing import Union

from fluxo_ia.core.state import ReportDocument, ReportFormat

logger = logging.getLogger(__name__)

REPORT_PREFIX = "relatorio"


def report_filename(document: ReportDocument, report_format: ReportFormat) -> str:
    """Filename for a report: ISO timestamp to the second, ``:`` replaced by ``-``."""
    stamp = document.timestamp.replace(microsecond=0, tzinfo=None).isoformat()
    return f"{REPORT_PREFIX}-{stamp.replace(':', '-')}.{ReportFormat(report_format).value}"


class ReportStorage:
    """Writes reports into a directory, creating it if needed."""

    def __init__(self, report_dir: Union[str, Path]):
        self.report_dir = Path(report_dir)

    def save(
        self,
        document: ReportDocument,
        content: str,
        report_format: ReportFormat,
    ) -> Path:
        """
        Write a rendered report.

        Args:
            document: The report the content was rendered from
            content: Serialized report
            report_format: Format of ``content``

        Returns:
            Path of the written file
        """
        self.report_dir.mkdir(parents=True, exist_ok=True)
        path = self.report_dir / report_filename(document, report_format)
        path.write_text(content, encoding="utf-8")
        logger.info(f"Report written: {path}")
        return path
