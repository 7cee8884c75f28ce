"""
Fluxo-IA Step Executor

Runs one step: strips its ordinal, classifies the sentence, calls the
matching browser-driver operation and times the whole thing.

Failures never leave this module as exceptions. Classification,
extraction, verification and driver errors all become a failed
``StepRecord`` carrying the error message; whether a failure stops
anything is the runner's decision. The only exception that propagates is
``SessionError``, which means the browser itself is gone.
"""

import logging
import time
from typing import Awaitable, Callable, Optional, Union

from fluxo_ia.core.classifier import ClassifiedAction, CommandClassifier
from fluxo_ia.core.config import RunOptions
from fluxo_ia.core.exceptions import (
    FluxoError,
    PatternExtractionError,
    SessionError,
    VerificationFailed,
)
from fluxo_ia.core.selectors import SelectorCandidates
from fluxo_ia.core.session import FlowSession
from fluxo_ia.core.state import (
    DEFAULT_GROUP,
    ActionKind,
    RawStep,
    StepRecord,
    StepStatus,
    VerifyMode,
    VerifyTarget,
)

logger = logging.getLogger(__name__)

Handler = Callable[[ClassifiedAction, RunOptions], Awaitable[None]]


def _error_message(error: Exception) -> str:
    if isinstance(error, FluxoError):
        return error.message
    return str(error) or type(error).__name__


class StepExecutor:
    """Executes classified steps against a session's driver."""

    def __init__(
        self,
        session: FlowSession,
        classifier: Optional[CommandClassifier] = None,
    ):
        self.session = session
        self.classifier = classifier or CommandClassifier()
        self._handlers: dict[ActionKind, Handler] = {
            ActionKind.NAVIGATE: self._navigate,
            ActionKind.GO_BACK: self._go_back,
            ActionKind.RELOAD: self._reload,
            ActionKind.WAIT: self._wait,
            ActionKind.CLICK: self._click,
            ActionKind.FILL: self._fill,
            ActionKind.SELECT: self._select,
            ActionKind.CHECK: self._check,
            ActionKind.UNCHECK: self._uncheck,
            ActionKind.KEY_PRESS: self._press_key,
            ActionKind.SCROLL: self._scroll,
            ActionKind.VERIFY: self._verify,
            ActionKind.SCREENSHOT: self._screenshot,
            ActionKind.CAPTURE_LOGS: self._capture_logs,
            ActionKind.EXTRACT: self._extract,
        }

    @property
    def driver(self):
        return self.session.driver

    async def execute(
        self,
        step: Union[RawStep, str],
        group: str = DEFAULT_GROUP,
        options: Optional[RunOptions] = None,
    ) -> StepRecord:
        """
        Execute a single step.

        Args:
            step: The raw step line (ordinal prefix optional)
            group: Name of the group the step belongs to
            options: Run options; defaults when omitted

        Returns:
            StepRecord with status, duration and error message if any

        Raises:
            SessionError: The browser session is unusable
        """
        options = options or RunOptions()
        if isinstance(step, str):
            step = RawStep(step)
        sentence = step.sentence

        logger.info(f"  - {sentence}")
        started = time.perf_counter()

        try:
            action = self.classifier.classify(sentence)
            handler = self._handlers.get(action.kind)
            if handler is None:
                raise PatternExtractionError(
                    sentence, f"Ação sem executor registrado: {action.kind.value}"
                )
            await handler(action, options)
        except SessionError:
            raise
        except Exception as e:
            message = _error_message(e)
            logger.error(f"Step failed in '{group}': {sentence} -> {message}")
            return StepRecord(
                group=group,
                description=sentence,
                status=StepStatus.FAILURE,
                duration_ms=self._elapsed(started),
                error=message,
            )

        return StepRecord(
            group=group,
            description=sentence,
            status=StepStatus.SUCCESS,
            duration_ms=self._elapsed(started),
        )

    @staticmethod
    def _elapsed(started: float) -> int:
        return int((time.perf_counter() - started) * 1000)

    @staticmethod
    def _candidates(action: ClassifiedAction) -> SelectorCandidates:
        if action.selectors is None:
            raise PatternExtractionError(action.sentence)
        return action.selectors

    # === Navigation ===

    async def _navigate(self, action: ClassifiedAction, options: RunOptions) -> None:
        await self.driver.navigate(action.args["url"])

    async def _go_back(self, action: ClassifiedAction, options: RunOptions) -> None:
        await self.driver.go_back()

    async def _reload(self, action: ClassifiedAction, options: RunOptions) -> None:
        await self.driver.reload()

    async def _wait(self, action: ClassifiedAction, options: RunOptions) -> None:
        await self.driver.wait(int(action.args["ms"]))

    # === Interaction ===

    async def _click(self, action: ClassifiedAction, options: RunOptions) -> None:
        await self.driver.click(self._candidates(action))

    async def _fill(self, action: ClassifiedAction, options: RunOptions) -> None:
        await self.driver.fill(self._candidates(action), action.args["value"])

    async def _select(self, action: ClassifiedAction, options: RunOptions) -> None:
        await self.driver.select_option(self._candidates(action), action.args["value"])

    async def _check(self, action: ClassifiedAction, options: RunOptions) -> None:
        await self.driver.check(self._candidates(action))

    async def _uncheck(self, action: ClassifiedAction, options: RunOptions) -> None:
        await self.driver.uncheck(self._candidates(action))

    async def _press_key(self, action: ClassifiedAction, options: RunOptions) -> None:
        await self.driver.press_key(action.args["key"])

    async def _scroll(self, action: ClassifiedAction, options: RunOptions) -> None:
        if action.selectors is not None:
            await self.driver.scroll_into_view(action.selectors)
        else:
            await self.driver.scroll_to_bottom()

    # === Verification ===

    async def _verify(self, action: ClassifiedAction, options: RunOptions) -> None:
        subject = action.verify_subject
        if subject == VerifyTarget.TITLE:
            await self._verify_title(action)
        elif subject == VerifyTarget.ELEMENT:
            await self._verify_element(action)
        elif subject == VerifyTarget.URL:
            await self._verify_url(action)
        elif subject == VerifyTarget.LOG:
            self._verify_log(action)
        else:
            raise PatternExtractionError(action.sentence)

    async def _verify_title(self, action: ClassifiedAction) -> None:
        expected = action.args["expected"]
        title = await self.driver.get_title()

        if action.verify_mode == VerifyMode.CONTAINS:
            if expected not in title:
                raise VerificationFailed(
                    f'Título não contém "{expected}". Título atual: "{title}"',
                    expected=expected,
                    actual=title,
                )
        elif title != expected:
            raise VerificationFailed(
                f'Título não é "{expected}". Título atual: "{title}"',
                expected=expected,
                actual=title,
            )

    async def _verify_element(self, action: ClassifiedAction) -> None:
        candidates = self._candidates(action)
        label = candidates.label
        mode = action.verify_mode

        if mode == VerifyMode.VISIBLE:
            if not await self.driver.is_visible(candidates):
                raise VerificationFailed(
                    f'Elemento "{label}" não está visível',
                    expected="visível",
                    actual="não visível",
                )
        elif mode == VerifyMode.EXISTS:
            if not await self.driver.exists(candidates):
                raise VerificationFailed(
                    f'Elemento "{label}" não existe',
                    expected="existe",
                    actual="não encontrado",
                )
        else:
            expected = action.args["expected"]
            text = await self.driver.text_content(candidates) or ""
            if expected not in text:
                raise VerificationFailed(
                    f'Elemento "{label}" não contém "{expected}". Texto atual: "{text}"',
                    expected=expected,
                    actual=text,
                )

    async def _verify_url(self, action: ClassifiedAction) -> None:
        expected = action.args["expected"]
        url = await self.driver.get_url()

        if action.verify_mode == VerifyMode.CONTAINS:
            if expected not in url:
                raise VerificationFailed(
                    f'URL não contém "{expected}". URL atual: "{url}"',
                    expected=expected,
                    actual=url,
                )
        elif url != expected:
            raise VerificationFailed(
                f'URL não é "{expected}". URL atual: "{url}"',
                expected=expected,
                actual=url,
            )

    def _verify_log(self, action: ClassifiedAction) -> None:
        expected = action.args["expected"]
        if not any(expected in entry.text for entry in self.session.logs):
            raise VerificationFailed(
                f'Log "{expected}" não encontrado',
                expected=expected,
                actual=f"{len(self.session.logs)} log(s) capturado(s)",
            )

    # === Capture ===

    async def _screenshot(self, action: ClassifiedAction, options: RunOptions) -> None:
        if not options.capture_screenshots:
            logger.info("Screenshot capture disabled, skipping")
            return
        reference = await self.driver.screenshot()
        self.session.screenshots.append(reference)
        logger.info(f"Screenshot saved: {reference}")

    async def _capture_logs(self, action: ClassifiedAction, options: RunOptions) -> None:
        # Console messages are collected continuously by the session
        logger.info(f"Logs captured so far: {len(self.session.logs)}")

    async def _extract(self, action: ClassifiedAction, options: RunOptions) -> None:
        if action.selectors is None:
            logger.info(f"Extracting data: {action.args.get('description', action.sentence)}")
            return
        text = await self.driver.text_content(action.selectors)
        self.session.extractions[action.selectors.label] = text or ""
        logger.info(f"Extracted '{action.selectors.label}': {text!r}")
