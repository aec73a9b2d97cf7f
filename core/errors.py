"""
    Error taxonomy for host assessment.

    TargetError subclasses end the pipeline for one host (no record).
    DiagnosticError subclasses only degrade the record.
"""


class AssessmentError(Exception):
    """Base class for every assessment failure."""


class TransportError(AssessmentError):
    """The query/process transport could not complete a request."""


class TargetError(AssessmentError):
    def __init__(self, target: str, message: str):
        super().__init__(f"{target}: {message}")
        self.target = target


class Unreachable(TargetError):
    def __init__(self, target: str):
        super().__init__(target, "host did not answer the reachability check")


class QueryError(TargetError):
    def __init__(self, target: str, query: str, detail: str = ""):
        message = f"fact query '{query}' failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(target, message)
        self.query = query


class DiagnosticError(AssessmentError):
    """The diagnostic step failed; the assessment continues without it."""


class InvocationRejected(DiagnosticError):
    def __init__(self, target: str, return_value: int | None, detail: str = ""):
        message = f"{target}: diagnostic tool launch rejected (result={return_value})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.target = target
        self.return_value = return_value


class InvocationTimeout(DiagnosticError):
    def __init__(self, target: str, path: str, timeout: float):
        super().__init__(
            f"{target}: diagnostic output {path} did not appear within {timeout:g}s"
        )
        self.target = target
        self.path = path
        self.timeout = timeout


class MalformedOutput(DiagnosticError):
    """The diagnostic report could not be parsed."""
