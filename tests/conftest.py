"""Pytest fixtures for Fluxo-IA tests."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import pytest

from fluxo_ia.core.config import RunOptions
from fluxo_ia.core.driver import BrowserDriver
from fluxo_ia.core.exceptions import DriverError, SessionError
from fluxo_ia.core.selectors import SelectorCandidates
from fluxo_ia.core.session import FlowSession


class FakeDriver(BrowserDriver):
    """
    In-memory browser driver.

    Records every call as ``(operation, *args)`` in ``calls``. Element
    operations on a label listed in ``missing`` raise DriverError, the way
    a real driver does when no candidate resolves.
    """

    def __init__(
        self,
        title: str = "Lucasdoreac (Lucas Dórea Cardoso) · GitHub",
        url: str = "https://github.com/Lucasdoreac",
        visible: Optional[set[str]] = None,
        existing: Optional[set[str]] = None,
        texts: Optional[dict[str, str]] = None,
        missing: Optional[set[str]] = None,
    ):
        self.title = title
        self.url = url
        self.visible = set(visible or ())
        self.existing = set(existing or ()) | self.visible
        self.texts = dict(texts or {})
        self.missing = set(missing or ())
        self.calls: list[tuple] = []
        self.started = False
        self.closed = False
        self.dead = False
        self.screenshot_count = 0
        self._console_callbacks = []
        self._request_callbacks = []

    # Test helpers

    def emit_console(self, msg_type: str, text: str) -> None:
        for callback in self._console_callbacks:
            callback(msg_type, text)

    def emit_request(self, url: str, method: str = "GET", resource_type: str = "document") -> None:
        for callback in self._request_callbacks:
            callback(url, method, resource_type)

    def operations(self) -> list[str]:
        return [call[0] for call in self.calls]

    def _record(self, operation: str, *args) -> None:
        if self.dead:
            raise SessionError("Navegador não iniciado ou já encerrado")
        self.calls.append((operation, *args))

    def _element(self, operation: str, candidates: SelectorCandidates, *args) -> None:
        self._record(operation, candidates.label, *args)
        if candidates.label in self.missing:
            raise DriverError(
                f'Nenhum elemento encontrado para "{candidates.label}"',
                selectors=candidates.selectors(),
            )

    # BrowserDriver

    async def start(self) -> None:
        self.started = True

    async def close(self) -> None:
        self.closed = True

    def on_console(self, callback) -> None:
        self._console_callbacks.append(callback)

    def on_request(self, callback) -> None:
        self._request_callbacks.append(callback)

    def off_console(self, callback) -> None:
        self._console_callbacks.remove(callback)

    def off_request(self, callback) -> None:
        self._request_callbacks.remove(callback)

    async def navigate(self, url: str) -> None:
        self._record("navigate", url)
        self.url = url

    async def go_back(self) -> None:
        self._record("go_back")

    async def reload(self) -> None:
        self._record("reload")

    async def wait(self, ms: int) -> None:
        self._record("wait", ms)

    async def click(self, candidates: SelectorCandidates) -> None:
        self._element("click", candidates)

    async def fill(self, candidates: SelectorCandidates, value: str) -> None:
        self._element("fill", candidates, value)

    async def select_option(self, candidates: SelectorCandidates, value: str) -> None:
        self._element("select_option", candidates, value)

    async def check(self, candidates: SelectorCandidates) -> None:
        self._element("check", candidates)

    async def uncheck(self, candidates: SelectorCandidates) -> None:
        self._element("uncheck", candidates)

    async def press_key(self, key: str) -> None:
        self._record("press_key", key)

    async def scroll_to_bottom(self) -> None:
        self._record("scroll_to_bottom")

    async def scroll_into_view(self, candidates: SelectorCandidates) -> None:
        self._element("scroll_into_view", candidates)

    async def get_title(self) -> str:
        return self.title

    async def get_url(self) -> str:
        return self.url

    async def is_visible(self, candidates: SelectorCandidates) -> bool:
        self._record("is_visible", candidates.label)
        return candidates.label in self.visible

    async def exists(self, candidates: SelectorCandidates) -> bool:
        self._record("exists", candidates.label)
        return candidates.label in self.existing

    async def text_content(self, candidates: SelectorCandidates) -> str:
        self._element("text_content", candidates)
        return self.texts.get(candidates.label, "")

    async def screenshot(self) -> str:
        self._record("screenshot")
        path = f"screenshot_{self.screenshot_count}.png"
        self.screenshot_count += 1
        return path


@pytest.fixture
def driver() -> FakeDriver:
    """Fake driver with the GitHub profile page loaded."""
    return FakeDriver(
        visible={"Repositories"},
        texts={"Bio": "Desenvolvedor Python"},
        missing={"Inexistente"},
    )


@pytest.fixture
def session(driver: FakeDriver) -> FlowSession:
    return FlowSession(driver)


@pytest.fixture
def report_dir(tmp_path: Path) -> Path:
    return tmp_path / "relatorios"


@pytest.fixture
def options(report_dir: Path) -> RunOptions:
    """Run options writing JSON reports into a temporary directory."""
    return RunOptions(report_dir=report_dir, report_format="json")


@pytest.fixture
def github_flow() -> str:
    return '''
Fluxo de teste do perfil

# Verificação de Perfil
1. Verifique se o título contém "Lucasdoreac"
2. Capture screenshot

# Navegação para Repositórios
1. Clique no elemento "Repositories"
2. Aguarde 2 segundos
3. Verifique se a URL contém "tab=repositories"
'''
