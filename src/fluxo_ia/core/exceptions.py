"""
Fluxo-IA Custom Exceptions

Provides a hierarchy of exceptions for flow interpretation,
verification and browser-driver failures.
"""

from typing import Any, Optional


class FluxoError(Exception):
    """Base exception for all Fluxo-IA errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# Flow interpretation errors
class FlowError(FluxoError):
    """Base exception for errors interpreting a flow sentence."""

    def __init__(
        self,
        message: str,
        sentence: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.sentence = sentence


class UnrecognizedCommandError(FlowError):
    """No classifier rule matched the sentence."""

    def __init__(self, sentence: str, details: Optional[dict[str, Any]] = None):
        super().__init__(f"Comando não reconhecido: {sentence}", sentence, details)


class PatternExtractionError(FlowError):
    """A rule prefix matched but its arguments could not be extracted."""

    def __init__(
        self,
        sentence: str,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message or f"Não foi possível extrair os argumentos do comando: {sentence}",
            sentence,
            details,
        )


# Assertion errors
class VerificationFailed(FluxoError):
    """An assertion's actual value did not satisfy the expected value."""

    def __init__(
        self,
        message: str,
        expected: Optional[str] = None,
        actual: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.expected = expected
        self.actual = actual


# Driver errors
class DriverError(FluxoError):
    """The browser-driver collaborator failed."""

    def __init__(
        self,
        message: str,
        selectors: Optional[list[str]] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.selectors = selectors or []


class SessionError(DriverError):
    """
    The browser session itself is gone or unusable.

    Unlike other driver errors this is fatal: it aborts the whole run
    instead of failing a single step.
    """
    pass


class SessionStateError(FluxoError):
    """A session was used in a state that does not allow the operation."""
    pass
