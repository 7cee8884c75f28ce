"""
Fluxo-IA Flow Parser

Splits a flow into named groups of steps:

    # Verificação de Perfil
    1. Verifique se o título contém "Lucasdoreac"
    2. Capture screenshot

Headings start with ``#``; steps start with an integer and a period.
Any other line is prose and is ignored.
"""

import logging
import re

from fluxo_ia.core.state import DEFAULT_GROUP, Group, RawStep

logger = logging.getLogger(__name__)

STEP_PATTERN = re.compile(r"^\d+\.")
HEADING_MARKER = "#"


class FlowParser:
    """Parses flow text into ordered groups."""

    def parse(self, flow_text: str) -> list[Group]:
        """
        Parse a flow into groups in order of first appearance.

        Args:
            flow_text: Raw multi-line flow

        Returns:
            Non-empty groups; steps without a preceding heading go to "Geral"
        """
        lines = [line.strip() for line in flow_text.splitlines()]
        groups: dict[str, Group] = {}

        current = DEFAULT_GROUP
        buffer: list[RawStep] = []

        for line in lines:
            if not line:
                continue
            if line.startswith(HEADING_MARKER):
                self._flush(groups, current, buffer)
                buffer = []
                current = line.lstrip(HEADING_MARKER).strip() or DEFAULT_GROUP
            elif STEP_PATTERN.match(line):
                buffer.append(RawStep(line))

        self._flush(groups, current, buffer)

        logger.debug(
            f"Parsed {len(groups)} group(s), "
            f"{sum(len(g.steps) for g in groups.values())} step(s)"
        )
        return list(groups.values())

    @staticmethod
    def _flush(groups: dict[str, Group], name: str, buffer: list[RawStep]) -> None:
        if not buffer:
            return
        # A repeated heading extends the group where it first appeared
        groups.setdefault(name, Group(name=name)).steps.extend(buffer)


def parse_flow(flow_text: str) -> list[Group]:
    """Convenience wrapper around FlowParser.parse."""
    return FlowParser().parse(flow_text)
