"""
Fluxo-IA Core Module

Contains the flow interpreter: parser, command classifier, selector
synthesis, step executor, runner, session and report builder.
"""

from fluxo_ia.core.config import settings, Settings, RunOptions
from fluxo_ia.core.state import (
    ActionKind,
    Group,
    LogEntry,
    RawStep,
    ReportDocument,
    ReportFormat,
    ResultsAggregate,
    StepRecord,
    StepStatus,
    VerifyMode,
    VerifyTarget,
)
from fluxo_ia.core.parser import FlowParser, parse_flow
from fluxo_ia.core.selectors import (
    LocatorStrategy,
    SelectorCandidates,
    SelectorSynthesizer,
    StrategyKind,
)
from fluxo_ia.core.classifier import ClassifiedAction, CommandClassifier, CommandRule
from fluxo_ia.core.driver import BrowserDriver
from fluxo_ia.core.session import FlowSession
from fluxo_ia.core.executor import StepExecutor
from fluxo_ia.core.report import ReportBuilder
from fluxo_ia.core.storage import ReportStorage, report_filename
from fluxo_ia.core.runner import TestRunner, run_flow
from fluxo_ia.core.exceptions import (
    FluxoError,
    FlowError,
    UnrecognizedCommandError,
    PatternExtractionError,
    VerificationFailed,
    DriverError,
    SessionError,
    SessionStateError,
)

__all__ = [
    # Config
    "settings",
    "Settings",
    "RunOptions",
    # State
    "ActionKind",
    "Group",
    "LogEntry",
    "RawStep",
    "ReportDocument",
    "ReportFormat",
    "ResultsAggregate",
    "StepRecord",
    "StepStatus",
    "VerifyMode",
    "VerifyTarget",
    # Interpreter
    "FlowParser",
    "parse_flow",
    "LocatorStrategy",
    "SelectorCandidates",
    "SelectorSynthesizer",
    "StrategyKind",
    "ClassifiedAction",
    "CommandClassifier",
    "CommandRule",
    "BrowserDriver",
    "FlowSession",
    "StepExecutor",
    "ReportBuilder",
    "ReportStorage",
    "report_filename",
    "TestRunner",
    "run_flow",
    # Exceptions
    "FluxoError",
    "FlowError",
    "UnrecognizedCommandError",
    "PatternExtractionError",
    "VerificationFailed",
    "DriverError",
    "SessionError",
    "SessionStateError",
]
