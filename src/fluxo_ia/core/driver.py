"""
Fluxo-IA Browser Driver Interface

The interpreter core never talks to a browser directly. It calls a
``BrowserDriver``; ``fluxo_ia.tools.browser.PlaywrightDriver`` is the
production implementation.

Every method taking ``candidates`` receives the ordered list built by
``SelectorSynthesizer``: the driver tries each strategy in order, uses the
first that resolves, and raises ``DriverError`` only when none do.
"""

from abc import ABC, abstractmethod
from typing import Callable

from fluxo_ia.core.selectors import SelectorCandidates

# (type, text)
ConsoleCallback = Callable[[str, str], None]
# (url, method, resource_type)
RequestCallback = Callable[[str, str, str], None]


class BrowserDriver(ABC):
    """Abstract browser-driver collaborator."""

    # Lifecycle

    @abstractmethod
    async def start(self) -> None:
        """Launch the browser and open a page."""

    @abstractmethod
    async def close(self) -> None:
        """Release the browser. Safe to call more than once."""

    # Subscriptions

    @abstractmethod
    def on_console(self, callback: ConsoleCallback) -> None:
        """Deliver every console message to ``callback``."""

    @abstractmethod
    def on_request(self, callback: RequestCallback) -> None:
        """Deliver every outgoing request to ``callback``."""

    @abstractmethod
    def off_console(self, callback: ConsoleCallback) -> None:
        """Stop delivering console messages to ``callback``."""

    @abstractmethod
    def off_request(self, callback: RequestCallback) -> None:
        """Stop delivering requests to ``callback``."""

    # Navigation

    @abstractmethod
    async def navigate(self, url: str) -> None: ...

    @abstractmethod
    async def go_back(self) -> None: ...

    @abstractmethod
    async def reload(self) -> None: ...

    @abstractmethod
    async def wait(self, ms: int) -> None: ...

    # Interaction

    @abstractmethod
    async def click(self, candidates: SelectorCandidates) -> None: ...

    @abstractmethod
    async def fill(self, candidates: SelectorCandidates, value: str) -> None: ...

    @abstractmethod
    async def select_option(self, candidates: SelectorCandidates, value: str) -> None: ...

    @abstractmethod
    async def check(self, candidates: SelectorCandidates) -> None: ...

    @abstractmethod
    async def uncheck(self, candidates: SelectorCandidates) -> None: ...

    @abstractmethod
    async def press_key(self, key: str) -> None: ...

    @abstractmethod
    async def scroll_to_bottom(self) -> None: ...

    @abstractmethod
    async def scroll_into_view(self, candidates: SelectorCandidates) -> None: ...

    # Inspection

    @abstractmethod
    async def get_title(self) -> str: ...

    @abstractmethod
    async def get_url(self) -> str: ...

    @abstractmethod
    async def is_visible(self, candidates: SelectorCandidates) -> bool:
        """False when no candidate resolves."""

    @abstractmethod
    async def exists(self, candidates: SelectorCandidates) -> bool:
        """False when no candidate resolves."""

    @abstractmethod
    async def text_content(self, candidates: SelectorCandidates) -> str: ...

    @abstractmethod
    async def screenshot(self) -> str:
        """Capture the page and return an opaque reference (a file path)."""
