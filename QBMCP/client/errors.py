"""Typed failures raised by the QuickBase client."""

from typing import Any, Optional


class QuickBaseError(Exception):
    """Base class for client failures."""
    pass


class QuickBaseAPIError(QuickBaseError):
    """The service answered with an error status."""
    
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        method: Optional[str] = None,
        path: Optional[str] = None,
        details: Optional[Any] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.method = method
        self.path = path
        self.details = details
        super().__init__(message)
    
    def __str__(self) -> str:
        where = f" on {self.method} {self.path}" if self.method and self.path else ""
        status = f" {self.status_code}" if self.status_code is not None else ""
        return f"QuickBase API error{status}{where}: {self.message}"


class QuickBaseNotFoundError(QuickBaseAPIError):
    """HTTP 404: the named app, table, field or report does not exist."""
    pass


class QuickBaseConnectionError(QuickBaseError):
    """The request could not be completed at the transport level."""
    pass
