"""
Fluxo-IA State Schema

Defines the data that flows between the parser, the executor, the
runner and the report builder.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_GROUP = "Geral"

ORDINAL_PATTERN = re.compile(r"^(\d+)\.\s*")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StepStatus(str, Enum):
    """Outcome of a single step."""

    SUCCESS = "sucesso"
    FAILURE = "falha"


class ReportFormat(str, Enum):
    """Serialized report formats."""

    JSON = "json"
    HTML = "html"


class ActionKind(str, Enum):
    """Semantic action a step sentence resolves to."""

    NAVIGATE = "navigate"
    GO_BACK = "go_back"
    RELOAD = "reload"
    WAIT = "wait"
    CLICK = "click"
    FILL = "fill"
    SELECT = "select"
    CHECK = "check"
    UNCHECK = "uncheck"
    KEY_PRESS = "key_press"
    SCROLL = "scroll"
    VERIFY = "verify"
    SCREENSHOT = "screenshot"
    CAPTURE_LOGS = "capture_logs"
    EXTRACT = "extract"


class VerifyTarget(str, Enum):
    """What a Verify step inspects."""

    TITLE = "title"
    ELEMENT = "element"
    URL = "url"
    LOG = "log"


class VerifyMode(str, Enum):
    """How a Verify step compares."""

    EQUALS = "equals"
    CONTAINS = "contains"
    VISIBLE = "visible"
    EXISTS = "exists"
    CONTAINS_TEXT = "contains_text"


@dataclass(frozen=True)
class RawStep:
    """One ordinal-prefixed line of a flow."""

    line: str

    @property
    def sentence(self) -> str:
        """The step text without its leading ``N.`` marker."""
        return ORDINAL_PATTERN.sub("", self.line, count=1).strip()

    @property
    def ordinal(self) -> Optional[int]:
        match = ORDINAL_PATTERN.match(self.line)
        return int(match.group(1)) if match else None


@dataclass
class Group:
    """A named, ordered run of steps."""

    name: str
    steps: list[RawStep] = field(default_factory=list)


class StepRecord(BaseModel):
    """Result of executing one step. Immutable once created."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    group: str = Field(default=DEFAULT_GROUP, alias="grupo")
    description: str = Field(alias="descricao")
    status: StepStatus
    duration_ms: int = Field(default=0, alias="duracao")
    error: Optional[str] = Field(default=None, alias="erro")
    timestamp: datetime = Field(default_factory=utc_now)

    @property
    def succeeded(self) -> bool:
        return self.status == StepStatus.SUCCESS


class ResultsAggregate(BaseModel):
    """Append-only collection of step records with running counters."""

    model_config = ConfigDict(populate_by_name=True)

    steps: list[StepRecord] = Field(default_factory=list, alias="passos")
    success_count: int = Field(default=0, alias="sucessos")
    failure_count: int = Field(default=0, alias="falhas")
    total_duration_ms: int = Field(default=0, alias="duracao")

    def append(self, record: StepRecord) -> None:
        """Append a record and bump the matching counter."""
        self.steps.append(record)
        if record.succeeded:
            self.success_count += 1
        else:
            self.failure_count += 1


class LogEntry(BaseModel):
    """A console message captured from the page."""

    type: str
    text: str
    time: datetime = Field(default_factory=utc_now)


class NetworkRequest(BaseModel):
    """A request issued by the page, captured when network capture is on."""

    model_config = ConfigDict(populate_by_name=True)

    url: str
    method: str
    resource_type: str = Field(alias="resourceType")


class ReportDocument(BaseModel):
    """Read-only snapshot of a finished run."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: datetime = Field(default_factory=utc_now)
    title: str = Field(default="", alias="titulo")
    url: str = ""
    duration_ms: int = Field(default=0, alias="duracao")
    steps: list[StepRecord] = Field(default_factory=list, alias="passos")
    success_count: int = Field(default=0, alias="sucessos")
    failure_count: int = Field(default=0, alias="falhas")
    logs: list[LogEntry] = Field(default_factory=list)
    screenshots: list[str] = Field(default_factory=list)
    requests: list[NetworkRequest] = Field(default_factory=list, alias="requisicoes")
    extractions: dict[str, str] = Field(default_factory=dict, alias="extracoes")
    status: str = "Sucesso"

    @property
    def passed(self) -> bool:
        return self.failure_count == 0
