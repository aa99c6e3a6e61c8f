"""Error types raised by the security gate."""


class SecGateError(Exception):
    """Base class for gate errors."""


class MalformedPolicy(SecGateError, ValueError):
    """A policy rule could not be understood."""

    def __init__(self, message: str, line: int = 0):
        self.line = line
        if line:
            message = f"line {line}: {message}"
        super().__init__(message)


class MalformedFinding(SecGateError, ValueError):
    """A finding carries an unrecognized severity or category."""


class ReportParseError(MalformedFinding):
    """A scanner report is not valid JSON or has an unexpected shape."""


class SourceUnavailable(SecGateError):
    """A live findings source (ZAP, SonarQube) could not be reached."""


class NotificationError(SecGateError):
    """Verdict notification could not be delivered."""
