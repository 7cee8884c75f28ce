"""
Fluxo-IA Browser Tool

Playwright-based implementation of the browser-driver collaborator.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Locator,
    Page,
    Playwright,
    async_playwright,
)

from fluxo_ia.core.config import Settings, settings as default_settings
from fluxo_ia.core.driver import BrowserDriver, ConsoleCallback, RequestCallback
from fluxo_ia.core.exceptions import DriverError, FluxoError, SessionError
from fluxo_ia.core.selectors import SelectorCandidates

logger = logging.getLogger(__name__)


class PlaywrightDriver(BrowserDriver):
    """
    Browser driver backed by Playwright's async API (Chromium).

    Element operations try each selector candidate in order and act on
    the first one that matches at least one element.
    """

    def __init__(self, config: Optional[Settings] = None, headless: Optional[bool] = None):
        self.config = config or default_settings
        self.headless = self.config.headless if headless is None else headless
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None
        self._console_callbacks: list[ConsoleCallback] = []
        self._request_callbacks: list[RequestCallback] = []
        self._screenshot_count = 0

    # === Lifecycle ===

    async def start(self) -> None:
        """Launch Chromium and open a page with the configured viewport."""
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self.headless,
            slow_mo=self.config.slow_mo,
        )
        self._context = await self._browser.new_context(
            viewport={
                "width": self.config.viewport_width,
                "height": self.config.viewport_height,
            },
            record_video_dir=self.config.video_dir if self.config.record_video else None,
        )
        page = await self._context.new_page()
        page.set_default_timeout(self.config.default_timeout * 1000)

        page.on("console", self._dispatch_console)
        page.on("request", self._dispatch_request)

        self._page = page
        logger.info(f"Chromium launched (headless={self.headless})")

    async def close(self) -> None:
        """
        Close context, browser and Playwright; skips whatever never started.

        Each stage runs even when an earlier one raised.
        """
        context, browser, playwright = self._context, self._browser, self._playwright
        self._context = self._browser = self._playwright = self._page = None

        try:
            if context is not None:
                await context.close()
        finally:
            try:
                if browser is not None:
                    await browser.close()
            finally:
                if playwright is not None:
                    await playwright.stop()

    # === Subscriptions ===

    def on_console(self, callback: ConsoleCallback) -> None:
        self._console_callbacks.append(callback)

    def on_request(self, callback: RequestCallback) -> None:
        self._request_callbacks.append(callback)

    def off_console(self, callback: ConsoleCallback) -> None:
        if callback in self._console_callbacks:
            self._console_callbacks.remove(callback)

    def off_request(self, callback: RequestCallback) -> None:
        if callback in self._request_callbacks:
            self._request_callbacks.remove(callback)

    def _dispatch_console(self, message) -> None:
        for callback in self._console_callbacks:
            callback(message.type, message.text)

    def _dispatch_request(self, request) -> None:
        for callback in self._request_callbacks:
            callback(request.url, request.method, request.resource_type)

    # === Helpers ===

    def _require_page(self) -> Page:
        if self._page is None or self._page.is_closed():
            raise SessionError("Navegador não iniciado ou já encerrado")
        return self._page

    @asynccontextmanager
    async def _guard(self, operation: str) -> AsyncIterator[Page]:
        """Translate Playwright errors into driver errors."""
        page = self._require_page()
        try:
            yield page
        except FluxoError:
            raise
        except PlaywrightError as e:
            if page.is_closed():
                raise SessionError(f"Página encerrada durante {operation}: {e.message}") from e
            raise DriverError(f"Falha em {operation}: {e.message}") from e

    async def _find(self, page: Page, candidates: SelectorCandidates) -> Optional[Locator]:
        """First candidate that matches an element, or None."""
        for selector in candidates.selectors():
            locator = page.locator(selector)
            try:
                if await locator.count() > 0:
                    logger.debug(f"'{candidates.label}' resolved by {selector}")
                    return locator.first
            except PlaywrightError:
                # Invalid selector for this page; try the next one
                continue
        return None

    async def _resolve(self, page: Page, candidates: SelectorCandidates) -> Locator:
        locator = await self._find(page, candidates)
        if locator is None:
            raise DriverError(
                f'Nenhum elemento encontrado para "{candidates.label}"',
                selectors=candidates.selectors(),
            )
        return locator

    # === Navigation ===

    async def navigate(self, url: str) -> None:
        async with self._guard(f"navegar para {url}") as page:
            await page.goto(url)

    async def go_back(self) -> None:
        async with self._guard("voltar") as page:
            await page.go_back()

    async def reload(self) -> None:
        async with self._guard("atualizar") as page:
            await page.reload()

    async def wait(self, ms: int) -> None:
        async with self._guard("aguardar") as page:
            await page.wait_for_timeout(ms)

    # === Interaction ===

    async def click(self, candidates: SelectorCandidates) -> None:
        async with self._guard(f'clicar em "{candidates.label}"') as page:
            await (await self._resolve(page, candidates)).click()

    async def fill(self, candidates: SelectorCandidates, value: str) -> None:
        async with self._guard(f'preencher "{candidates.label}"') as page:
            await (await self._resolve(page, candidates)).fill(value)

    async def select_option(self, candidates: SelectorCandidates, value: str) -> None:
        async with self._guard(f'selecionar em "{candidates.label}"') as page:
            await (await self._resolve(page, candidates)).select_option(value)

    async def check(self, candidates: SelectorCandidates) -> None:
        async with self._guard(f'marcar "{candidates.label}"') as page:
            await (await self._resolve(page, candidates)).check()

    async def uncheck(self, candidates: SelectorCandidates) -> None:
        async with self._guard(f'desmarcar "{candidates.label}"') as page:
            await (await self._resolve(page, candidates)).uncheck()

    async def press_key(self, key: str) -> None:
        async with self._guard(f"pressionar {key}") as page:
            await page.keyboard.press(key)

    async def scroll_to_bottom(self) -> None:
        async with self._guard("rolar a página") as page:
            await page.evaluate("() => window.scrollTo(0, document.body.scrollHeight)")

    async def scroll_into_view(self, candidates: SelectorCandidates) -> None:
        async with self._guard(f'rolar até "{candidates.label}"') as page:
            await (await self._resolve(page, candidates)).scroll_into_view_if_needed()

    # === Inspection ===

    async def get_title(self) -> str:
        async with self._guard("ler o título") as page:
            return await page.title()

    async def get_url(self) -> str:
        return self._require_page().url

    async def is_visible(self, candidates: SelectorCandidates) -> bool:
        async with self._guard(f'verificar "{candidates.label}"') as page:
            locator = await self._find(page, candidates)
            return locator is not None and await locator.is_visible()

    async def exists(self, candidates: SelectorCandidates) -> bool:
        async with self._guard(f'verificar "{candidates.label}"') as page:
            return await self._find(page, candidates) is not None

    async def text_content(self, candidates: SelectorCandidates) -> str:
        async with self._guard(f'ler o texto de "{candidates.label}"') as page:
            return await (await self._resolve(page, candidates)).text_content() or ""

    async def screenshot(self) -> str:
        """Save ``screenshot_<n>.png`` in the configured directory."""
        async with self._guard("capturar screenshot") as page:
            directory = Path(self.config.screenshot_dir)
            directory.mkdir(parents=True, exist_ok=True)
            path = directory / f"screenshot_{self._screenshot_count}.png"
            await page.screenshot(path=str(path))
            self._screenshot_count += 1
            return str(path)
