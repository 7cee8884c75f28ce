"""Tests for selector candidate synthesis."""

from fluxo_ia.core.selectors import SelectorSynthesizer, StrategyKind, slugify


def test_slugify():
    assert slugify("Valor Inicial") == "valor-inicial"
    assert slugify("  Taxa   de Juros ") == "taxa-de-juros"


def test_element_candidates_order():
    candidates = SelectorSynthesizer().synthesize("Repositories")

    assert [s.kind for s in candidates] == [
        StrategyKind.TEXT,
        StrategyKind.PLACEHOLDER,
        StrategyKind.ARIA_LABEL,
        StrategyKind.NAME,
        StrategyKind.ID,
    ]
    assert candidates.selectors() == [
        'text="Repositories"',
        '[placeholder="Repositories"]',
        '[aria-label="Repositories"]',
        '[name="Repositories"]',
        '[id="repositories"]',
    ]


def test_field_candidates_include_label_controls():
    candidates = SelectorSynthesizer().synthesize_field("Valor Inicial")
    selectors = candidates.selectors()

    assert candidates.first.kind == StrategyKind.PLACEHOLDER
    assert 'label:has-text("Valor Inicial") + input' in selectors
    assert 'label:has-text("Valor Inicial") + select' in selectors
    assert 'label:has-text("Valor Inicial") + textarea' in selectors
    assert selectors[-1] == '[id="valor-inicial"]'
    assert not any(s.startswith("text=") for s in selectors)


def test_quotes_are_escaped():
    candidates = SelectorSynthesizer().synthesize('Diga "oi"')

    assert candidates.first.selector == 'text="Diga \\"oi\\""'


def test_candidates_are_never_empty():
    candidates = SelectorSynthesizer().synthesize("x")

    assert len(candidates) > 0
    assert candidates.label == "x"
    assert str(candidates).startswith('text="x"')
