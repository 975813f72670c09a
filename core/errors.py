"""
Audit failure taxonomy.

None of these ever leave the core: the executor turns the first two into a
failed CommandResult, the probes turn the last two into an omitted metric.
"""


class AuditError(Exception):
    def __init__(self, message: str = "", rc: int | None = None):
        super().__init__(message)
        self.rc = rc


class CommandUnavailable(AuditError):
    """Binary missing, not permitted, or exited non-zero."""


class CommandTimeout(AuditError):
    """Command exceeded its allotted time."""


class ParseFailure(AuditError):
    """Output present but not in the expected shape."""


class UnsupportedMetric(AuditError):
    """Metric cannot be obtained on this platform at all."""
