"""
Fluxo-IA Selector Synthesis

Turns a human-readable label ("Valor Inicial") into an ordered list of
element-location strategies. The same concept may be implemented as
visible text, a placeholder, an aria-label, a name or an id depending on
the page markup, so the driver tries each candidate in order and uses the
first one that resolves.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

_WHITESPACE = re.compile(r"\s+")


class StrategyKind(str, Enum):
    """Ways of locating an element from a label."""

    TEXT = "text"
    PLACEHOLDER = "placeholder"
    ARIA_LABEL = "aria-label"
    NAME = "name"
    LABEL_FOR = "label"
    ID = "id"


def slugify(label: str) -> str:
    """Lowercase the label and collapse whitespace runs into single hyphens."""
    return _WHITESPACE.sub("-", label.strip().lower())


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


@dataclass(frozen=True)
class LocatorStrategy:
    """A single candidate: a strategy kind and the value it matches."""

    kind: StrategyKind
    value: str
    control: str = ""  # tag following a <label>, only for LABEL_FOR

    @property
    def selector(self) -> str:
        """Render as a Playwright selector string."""
        value = _quote(self.value)
        if self.kind == StrategyKind.TEXT:
            return f'text="{value}"'
        if self.kind == StrategyKind.LABEL_FOR:
            return f'label:has-text("{value}") + {self.control}'
        return f'[{self.kind.value}="{value}"]'


@dataclass(frozen=True)
class SelectorCandidates:
    """Ordered, immutable list of strategies for one label."""

    label: str
    strategies: tuple[LocatorStrategy, ...]

    def __iter__(self) -> Iterator[LocatorStrategy]:
        return iter(self.strategies)

    def __len__(self) -> int:
        return len(self.strategies)

    def __getitem__(self, index: int) -> LocatorStrategy:
        return self.strategies[index]

    @property
    def first(self) -> LocatorStrategy:
        return self.strategies[0]

    def selectors(self) -> list[str]:
        """Selector strings in trial order."""
        return [strategy.selector for strategy in self.strategies]

    def __str__(self) -> str:
        return ", ".join(self.selectors())


class SelectorSynthesizer:
    """
    Builds candidate lists from labels.

    Never resolves anything against a live page and never fails: the
    slugified id fallback is always present.
    """

    FIELD_CONTROLS = ("input", "select", "textarea")

    def synthesize(self, label: str) -> SelectorCandidates:
        """
        Candidates for a general element (link, button, tab, text).

        Order: exact visible text, placeholder, aria-label, name, id slug.
        """
        return SelectorCandidates(
            label=label,
            strategies=(
                LocatorStrategy(StrategyKind.TEXT, label),
                LocatorStrategy(StrategyKind.PLACEHOLDER, label),
                LocatorStrategy(StrategyKind.ARIA_LABEL, label),
                LocatorStrategy(StrategyKind.NAME, label),
                LocatorStrategy(StrategyKind.ID, slugify(label)),
            ),
        )

    def synthesize_field(self, label: str) -> SelectorCandidates:
        """
        Candidates for a form control addressed by its label.

        Order: placeholder, aria-label, name, control following a
        <label> with that text, id slug.
        """
        strategies = [
            LocatorStrategy(StrategyKind.PLACEHOLDER, label),
            LocatorStrategy(StrategyKind.ARIA_LABEL, label),
            LocatorStrategy(StrategyKind.NAME, label),
        ]
        strategies.extend(
            LocatorStrategy(StrategyKind.LABEL_FOR, label, control)
            for control in self.FIELD_CONTROLS
        )
        strategies.append(LocatorStrategy(StrategyKind.ID, slugify(label)))
        return SelectorCandidates(label=label, strategies=tuple(strategies))
