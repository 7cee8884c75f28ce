"""
Fluxo-IA Session

A ``FlowSession`` owns everything one logical test session mutates: the
browser driver, the console-log list, the screenshot list, captured
requests and extracted values, and the results aggregate. Components get
the session passed in; nothing is module-level, so independent sessions
can run side by side in one process.
"""

import logging
import time
from typing import Optional

from fluxo_ia.core.driver import BrowserDriver
from fluxo_ia.core.exceptions import SessionStateError
from fluxo_ia.core.state import (
    DEFAULT_GROUP,
    LogEntry,
    NetworkRequest,
    ResultsAggregate,
    StepRecord,
    StepStatus,
)

logger = logging.getLogger(__name__)


class FlowSession:
    """
    Explicit session state for one browser and one run.

    The session listens to the driver's console and request events from
    construction until ``close()``.
    """

    def __init__(self, driver: BrowserDriver):
        self.driver = driver
        self.logs: list[LogEntry] = []
        self.screenshots: list[str] = []
        self.requests: list[NetworkRequest] = []
        self.extractions: dict[str, str] = {}
        self.results = ResultsAggregate()
        self.capture_network = False
        self._started = False
        self._closed = False
        self._used = False

        self._listen()

    def _listen(self) -> None:
        self.driver.on_console(self._on_console)
        self.driver.on_request(self._on_request)

    @property
    def is_open(self) -> bool:
        return self._started and not self._closed

    @property
    def has_run(self) -> bool:
        return self._used

    def _on_console(self, msg_type: str, text: str) -> None:
        self.logs.append(LogEntry(type=msg_type, text=text))

    def _on_request(self, url: str, method: str, resource_type: str) -> None:
        if self.capture_network:
            self.requests.append(
                NetworkRequest(url=url, method=method, resource_type=resource_type)
            )

    async def start(self, url: Optional[str] = None, capture_network: bool = False) -> None:
        """
        Launch the browser and optionally load a start page.

        Loading the start page is recorded as a successful step in the
        default group.

        Args:
            url: Page to open once the browser is up
            capture_network: Record outgoing requests
        """
        self.capture_network = capture_network
        logger.info(f"Starting browser session{f' at {url}' if url else ''}")
        await self.driver.start()
        if self._closed:
            self._listen()
        self._started = True
        self._closed = False

        if url:
            started = time.perf_counter()
            await self.driver.navigate(url)
            self.results.append(
                StepRecord(
                    group=DEFAULT_GROUP,
                    description=f"Navegou para {url}",
                    status=StepStatus.SUCCESS,
                    duration_ms=int((time.perf_counter() - started) * 1000),
                )
            )

    def begin_run(self) -> None:
        """
        Claim the session for a run.

        Raises:
            SessionStateError: A run already used this session; call
                ``reset()`` or use a new session
        """
        if self._used:
            raise SessionStateError(
                "Session already ran a flow; call reset() before running again"
            )
        self._used = True

    def reset(self) -> None:
        """Forget logs, screenshots, requests, extractions and results."""
        self.logs.clear()
        self.screenshots.clear()
        self.requests.clear()
        self.extractions.clear()
        self.results = ResultsAggregate()
        self._used = False

    async def close(self) -> None:
        """Stop listening to the driver and close the browser. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self.driver.off_console(self._on_console)
        self.driver.off_request(self._on_request)
        await self.driver.close()
        logger.info("Browser session closed")

    async def __aenter__(self) -> "FlowSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
