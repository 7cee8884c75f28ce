"""
Fluxo-IA Tools Module

Contains integrations with browser tooling:
- Playwright: Browser driver for flow execution
"""

from fluxo_ia.tools.browser import PlaywrightDriver

__all__ = [
    "PlaywrightDriver",
]
