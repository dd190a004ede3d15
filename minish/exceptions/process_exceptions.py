"""
Process Exceptions

Exceptions related to launching external programs and classifying
how they ended.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any


class ProcessException(Exception):
    """
    Base exception for all process-related errors.

    Attributes:
        message: Human-readable error description
        pid: Process ID associated with the error (if applicable)
        error_code: Numeric error code for programmatic handling
    """

    def __init__(
        self,
        message: str,
        pid: Optional[int] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.pid = pid
        self.error_code = error_code or 2000
        self.context = context or {}
        if pid is not None:
            self.context["pid"] = pid

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.pid is not None:
            base = f"{base} (pid={self.pid})"
        return base


class WaitStatusError(ProcessException):
    """
    A blocking wait returned a status that is neither exited nor signaled.

    Without ``WUNTRACED`` this cannot happen, so it is treated as an
    internal inconsistency.
    """

    def __init__(self, pid: int, status: int) -> None:
        super().__init__(
            message=(
                "waitpid should have waited for the process termination, "
                "but it didn't"
            ),
            pid=pid,
            error_code=2004,
            context={"status": status}
        )
        self.status = status
