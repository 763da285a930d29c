"""Domain-specific exceptions"""

from typing import List, Optional


class DebtEngineError(Exception):
    """Base exception for the debt modeling engine"""

    pass


class InvalidAccountError(DebtEngineError, ValueError):
    """Account record is malformed (missing fields, non-numeric or negative money)"""

    def __init__(
        self, message: str, creditor: Optional[str] = None, errors: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.creditor = creditor
        self.errors = errors or []


class InvalidClientError(DebtEngineError, ValueError):
    """Client record is malformed"""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []
