"""
Fluxo-IA Command Classifier

Maps one step sentence to a semantic action and its arguments.

Classification is a data-driven table of ``CommandRule`` entries tested in
order by prefix match on the sentence's leading verb. The first matching
prefix wins; its extractor then pulls the quoted labels and numeric
literals out of the sentence. A sentence that matches no prefix raises
``UnrecognizedCommandError``; a sentence whose prefix matched but whose
arguments could not be extracted raises ``PatternExtractionError``.
Matching is case- and accent-sensitive: there is no guessing.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Optional

from fluxo_ia.core.exceptions import PatternExtractionError, UnrecognizedCommandError
from fluxo_ia.core.selectors import SelectorCandidates, SelectorSynthesizer
from fluxo_ia.core.state import ActionKind, VerifyMode, VerifyTarget

logger = logging.getLogger(__name__)

# Argument names the classifier turns into selector candidates
TARGET_ARG = "target"
FIELD_ARG = "field"

DEFAULT_WAIT_SECONDS = 1

# Extractor: sentence -> arguments; raises PatternExtractionError
Extractor = Callable[[str], dict[str, str]]


@dataclass(frozen=True)
class ClassifiedAction:
    """A sentence resolved to an action kind plus its arguments."""

    kind: ActionKind
    args: dict[str, str] = field(default_factory=dict)
    selectors: Optional[SelectorCandidates] = None
    sentence: str = ""

    @property
    def verify_subject(self) -> Optional[VerifyTarget]:
        subject = self.args.get("subject")
        return VerifyTarget(subject) if subject else None

    @property
    def verify_mode(self) -> Optional[VerifyMode]:
        mode = self.args.get("mode")
        return VerifyMode(mode) if mode else None


@dataclass(frozen=True)
class CommandRule:
    """Table entry: sentence prefix, action kind and argument extractor."""

    prefix: str
    kind: ActionKind
    extractor: Optional[Extractor] = None

    def matches(self, sentence: str) -> bool:
        return sentence.startswith(self.prefix)

    def extract(self, sentence: str) -> dict[str, str]:
        if self.extractor is None:
            return {}
        return self.extractor(sentence)


# === Patterns ===

NAVIGATE_PATTERN = re.compile(r'^Vá para\s+"?(?P<url>[^"]+?)"?\s*$')
NUMBER_PATTERN = re.compile(r"\d+")
CLICK_PATTERN = re.compile(
    r'Clique (?:no|na|em) (?:botão|link|aba|elemento|checkbox) "(?P<target>[^"]+)"'
)
FILL_PATTERN = re.compile(
    r'Digite "(?P<value>[^"]+)" (?:no|na|em) (?:campo|input|textarea|caixa) "(?P<field>[^"]+)"'
)
SELECT_PATTERN = re.compile(
    r'Selecione "(?P<value>[^"]+)" (?:no|na|em|do) (?:dropdown|select|campo|seletor) "(?P<field>[^"]+)"'
)
CHECK_PATTERN = re.compile(
    r'(?:Marque|Desmarque) (?:a|o) (?:checkbox|caixa) "(?P<target>[^"]+)"'
)
KEY_PATTERN = re.compile(r'^Pressione\s+(?:a tecla\s+)?"?(?P<key>[^"]+?)"?\s*$')
SCROLL_TO_PATTERN = re.compile(
    r'Role até (?:o|a) (?:elemento|seção|secção|div|tabela) "(?P<target>[^"]+)"'
)
QUOTED_PATTERN = re.compile(r'"(?P<target>[^"]+)"')

TITLE_PATTERN = re.compile(
    r'Verifique se o (?:título|title) (?P<op>é|contém) "(?P<expected>[^"]+)"'
)
ELEMENT_PATTERN = re.compile(
    r'Verifique se (?:o|a) (?:elemento|element) "(?P<target>[^"]+)" '
    r'(?:(?P<visible>está visível)|(?P<exists>existe)|contém "(?P<expected>[^"]+)")'
)
URL_PATTERN = re.compile(r'Verifique se a URL (?P<op>é|contém) "(?P<expected>[^"]+)"')
LOG_PATTERN = re.compile(r'Verifique se existe (?:o|um) log "(?P<expected>[^"]+)"')


# === Extractors ===


def _search(pattern: re.Pattern, sentence: str) -> dict[str, str]:
    match = pattern.search(sentence)
    if not match:
        raise PatternExtractionError(sentence)
    return {k: v for k, v in match.groupdict().items() if v is not None}


def extract_navigate(sentence: str) -> dict[str, str]:
    return _search(NAVIGATE_PATTERN, sentence)


def extract_wait(sentence: str) -> dict[str, str]:
    """First integer in the sentence, in seconds; 1 second when absent."""
    match = NUMBER_PATTERN.search(sentence)
    seconds = int(match.group()) if match else DEFAULT_WAIT_SECONDS
    return {"ms": str(seconds * 1000)}


def extract_click(sentence: str) -> dict[str, str]:
    return _search(CLICK_PATTERN, sentence)


def extract_fill(sentence: str) -> dict[str, str]:
    return _search(FILL_PATTERN, sentence)


def extract_select(sentence: str) -> dict[str, str]:
    return _search(SELECT_PATTERN, sentence)


def extract_check(sentence: str) -> dict[str, str]:
    return _search(CHECK_PATTERN, sentence)


def extract_key(sentence: str) -> dict[str, str]:
    return _search(KEY_PATTERN, sentence)


def extract_scroll(sentence: str) -> dict[str, str]:
    """Scroll to a named element with "até", otherwise to the bottom."""
    if "até" in sentence:
        return _search(SCROLL_TO_PATTERN, sentence)
    return {}


def extract_extract(sentence: str) -> dict[str, str]:
    args = {"description": sentence}
    match = QUOTED_PATTERN.search(sentence)
    if match:
        args[TARGET_ARG] = match.group("target")
    return args


def _comparison(op: str) -> VerifyMode:
    return VerifyMode.CONTAINS if op == "contém" else VerifyMode.EQUALS


def _verify_title(sentence: str) -> dict[str, str]:
    args = _search(TITLE_PATTERN, sentence)
    return {"mode": _comparison(args["op"]).value, "expected": args["expected"]}


def _verify_element(sentence: str) -> dict[str, str]:
    args = _search(ELEMENT_PATTERN, sentence)
    if "visible" in args:
        mode = VerifyMode.VISIBLE
    elif "exists" in args:
        mode = VerifyMode.EXISTS
    else:
        mode = VerifyMode.CONTAINS_TEXT
    result = {"mode": mode.value, TARGET_ARG: args[TARGET_ARG]}
    if "expected" in args:
        result["expected"] = args["expected"]
    return result


def _verify_url(sentence: str) -> dict[str, str]:
    args = _search(URL_PATTERN, sentence)
    return {"mode": _comparison(args["op"]).value, "expected": args["expected"]}


def _verify_log(sentence: str) -> dict[str, str]:
    args = _search(LOG_PATTERN, sentence)
    return {"mode": VerifyMode.CONTAINS.value, "expected": args["expected"]}


# Keywords tested in this order, outside quotes; the first one present
# decides the subject
VERIFY_SUBJECTS: tuple[tuple[tuple[str, ...], VerifyTarget, Extractor], ...] = (
    (("título", "title"), VerifyTarget.TITLE, _verify_title),
    (("elemento", "element"), VerifyTarget.ELEMENT, _verify_element),
    (("URL",), VerifyTarget.URL, _verify_url),
    (("log",), VerifyTarget.LOG, _verify_log),
)


def extract_verify(sentence: str) -> dict[str, str]:
    # Quoted labels and values never decide the subject
    unquoted = QUOTED_PATTERN.sub('""', sentence)
    for keywords, subject, extractor in VERIFY_SUBJECTS:
        if any(keyword in unquoted for keyword in keywords):
            args = extractor(sentence)
            args["subject"] = subject.value
            return args
    raise PatternExtractionError(
        sentence,
        f"Verificação sem alvo reconhecido (título, elemento, URL ou log): {sentence}",
    )


DEFAULT_RULES: tuple[CommandRule, ...] = (
    CommandRule("Vá para", ActionKind.NAVIGATE, extract_navigate),
    CommandRule("Volte", ActionKind.GO_BACK),
    CommandRule("Atualize", ActionKind.RELOAD),
    CommandRule("Aguarde", ActionKind.WAIT, extract_wait),
    CommandRule("Clique", ActionKind.CLICK, extract_click),
    CommandRule("Digite", ActionKind.FILL, extract_fill),
    CommandRule("Selecione", ActionKind.SELECT, extract_select),
    CommandRule("Marque", ActionKind.CHECK, extract_check),
    CommandRule("Desmarque", ActionKind.UNCHECK, extract_check),
    CommandRule("Pressione", ActionKind.KEY_PRESS, extract_key),
    CommandRule("Role", ActionKind.SCROLL, extract_scroll),
    CommandRule("Verifique", ActionKind.VERIFY, extract_verify),
    CommandRule("Capture screenshot", ActionKind.SCREENSHOT),
    CommandRule("Capture os logs", ActionKind.CAPTURE_LOGS),
    CommandRule("Extraia", ActionKind.EXTRACT, extract_extract),
)


class CommandClassifier:
    """
    Classifies step sentences using an ordered rule table.

    New verbs are added with ``register`` without touching the dispatch
    logic.
    """

    def __init__(
        self,
        rules: Optional[tuple[CommandRule, ...]] = None,
        synthesizer: Optional[SelectorSynthesizer] = None,
    ):
        self._rules: list[CommandRule] = list(DEFAULT_RULES if rules is None else rules)
        self.synthesizer = synthesizer or SelectorSynthesizer()

    @property
    def rules(self) -> tuple[CommandRule, ...]:
        return tuple(self._rules)

    def register(self, rule: CommandRule, before: Optional[str] = None) -> None:
        """
        Add a rule to the table.

        Args:
            rule: The rule to add
            before: Prefix of an existing rule to insert ahead of;
                appended at the end when omitted
        """
        if before is None:
            self._rules.append(rule)
            return
        for index, existing in enumerate(self._rules):
            if existing.prefix == before:
                self._rules.insert(index, rule)
                return
        raise KeyError(f"No rule with prefix: {before}")

    def match(self, sentence: str) -> Optional[CommandRule]:
        """Return the first rule whose prefix the sentence starts with."""
        for rule in self._rules:
            if rule.matches(sentence):
                return rule
        return None

    def classify(self, sentence: str) -> ClassifiedAction:
        """
        Classify a step sentence.

        Args:
            sentence: Step text without its ordinal marker

        Returns:
            ClassifiedAction with arguments and, for element actions,
            selector candidates

        Raises:
            UnrecognizedCommandError: No rule prefix matched
            PatternExtractionError: Prefix matched but arguments are missing
        """
        sentence = sentence.strip()
        rule = self.match(sentence)
        if rule is None:
            raise UnrecognizedCommandError(sentence)

        args = rule.extract(sentence)

        selectors = None
        if TARGET_ARG in args:
            selectors = self.synthesizer.synthesize(args[TARGET_ARG])
        elif FIELD_ARG in args:
            selectors = self.synthesizer.synthesize_field(args[FIELD_ARG])

        logger.debug(f"Classified '{sentence}' as {rule.kind.value} {args}")
        return ClassifiedAction(
            kind=rule.kind,
            args=args,
            selectors=selectors,
            sentence=sentence,
        )
