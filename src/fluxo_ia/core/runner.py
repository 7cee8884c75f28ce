"""
Fluxo-IA Test Runner

Main entry point for running a natural-language flow against a browser
session: parses the flow, executes every step in order, applies the
stop-on-failure and inter-step delay options, then builds and stores the
report.
"""

import logging
import time
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, Union

from fluxo_ia.core.config import RunOptions
from fluxo_ia.core.driver import BrowserDriver
from fluxo_ia.core.exceptions import DriverError, SessionError
from fluxo_ia.core.executor import StepExecutor
from fluxo_ia.core.parser import FlowParser
from fluxo_ia.core.report import ReportBuilder
from fluxo_ia.core.session import FlowSession
from fluxo_ia.core.state import ReportDocument, ResultsAggregate
from fluxo_ia.core.storage import ReportStorage

logger = logging.getLogger(__name__)

OptionsLike = Union[RunOptions, dict[str, Any], None]


def _coerce_options(options: OptionsLike) -> RunOptions:
    if options is None:
        return RunOptions()
    if isinstance(options, RunOptions):
        return options
    return RunOptions.model_validate(options)


async def close_quietly(session: FlowSession) -> None:
    """Close a session while another error is propagating; that error wins."""
    try:
        await session.close()
    except Exception as e:
        logger.warning(f"Browser close failed after an aborted run: {e}")


class TestRunner:
    """
    Runs flows on a single session.

    Steps run strictly one after another; the session's browser is the
    shared mutable resource and belongs to this runner for the whole run.
    """

    __test__ = False  # not a pytest test class

    def __init__(
        self,
        session: FlowSession,
        executor: Optional[StepExecutor] = None,
        parser: Optional[FlowParser] = None,
        report_builder: Optional[ReportBuilder] = None,
        storage: Optional[ReportStorage] = None,
    ):
        self.session = session
        self.executor = executor or StepExecutor(session)
        self.parser = parser or FlowParser()
        self.report_builder = report_builder or ReportBuilder()
        self.storage = storage
        self.report: Optional[ReportDocument] = None
        self.report_path: Optional[Path] = None

    async def run(self, flow_text: str, options: OptionsLike = None) -> ResultsAggregate:
        """
        Execute a flow.

        Args:
            flow_text: The natural-language flow
            options: RunOptions, or a dict using either snake_case or the
                camelCase option names

        Returns:
            The session's ResultsAggregate

        Raises:
            SessionStateError: The session already ran a flow without reset
            SessionError: The browser session died mid-run
        """
        options = _coerce_options(options)
        self.session.begin_run()

        logger.info("Executing test flow")
        started = time.perf_counter()
        results = self.session.results

        try:
            for group in self.parser.parse(flow_text):
                logger.info(f"Executing group: {group.name}")

                for step in group.steps:
                    record = await self.executor.execute(step, group.name, options)
                    results.append(record)

                    if not record.succeeded:
                        if options.parar_na_falha:
                            # Only the rest of this group is skipped
                            logger.warning(
                                f"Stopping group '{group.name}' after failure"
                            )
                            break
                        continue

                    if options.tempo_espera:
                        await self._delay(options.tempo_espera)

            results.total_duration_ms = int((time.perf_counter() - started) * 1000)
            logger.info(
                f"Flow finished: {results.success_count} succeeded, "
                f"{results.failure_count} failed in {results.total_duration_ms}ms"
            )

            self.report = await self._build_report(options)
            self.report_path = self._store_report(self.report, options)
        except BaseException:
            if not options.manter_aberto:
                await close_quietly(self.session)
            raise

        if not options.manter_aberto:
            await self.session.close()
        return results

    async def _delay(self, ms: int) -> None:
        try:
            await self.session.driver.wait(ms)
        except SessionError:
            raise
        except DriverError as e:
            logger.warning(f"Delay between steps skipped: {e.message}")

    async def _read_page(self, read: Callable[[], Awaitable[str]], what: str) -> str:
        """Page title or URL for the report; empty when the page cannot answer."""
        try:
            return await read()
        except SessionError:
            raise
        except DriverError as e:
            logger.warning(f"Could not read page {what} for the report: {e.message}")
            return ""

    async def _build_report(self, options: RunOptions) -> ReportDocument:
        driver = self.session.driver
        return self.report_builder.build(
            results=self.session.results,
            logs=self.session.logs if options.capture_logs else [],
            screenshots=self.session.screenshots,
            page_title=await self._read_page(driver.get_title, "title"),
            page_url=await self._read_page(driver.get_url, "URL"),
            requests=self.session.requests if options.capture_network else None,
            extractions=self.session.extractions,
        )

    def _store_report(self, report: ReportDocument, options: RunOptions) -> Path:
        storage = self.storage or ReportStorage(options.report_dir)
        content = self.report_builder.render(
            report, options.report_format, base_dir=storage.report_dir
        )
        return storage.save(report, content, options.report_format)


async def run_flow(
    driver: BrowserDriver,
    flow_text: str,
    url: Optional[str] = None,
    options: OptionsLike = None,
) -> tuple[ResultsAggregate, TestRunner]:
    """
    Start a session on ``driver``, open ``url`` and run ``flow_text``.

    Returns:
        The results and the runner (for its report and report path)
    """
    options = _coerce_options(options)
    session = FlowSession(driver)
    try:
        await session.start(url, capture_network=options.capture_network)
    except BaseException:
        await close_quietly(session)
        raise
    runner = TestRunner(session)
    results = await runner.run(flow_text, options)
    return results, runner
