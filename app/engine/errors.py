"""
Error taxonomy for checkout operations.

  - InvalidRequestError: missing or malformed request fields (HTTP 400).
  - ProcessorError: any failure reported by the payment processor (HTTP 500).

Neither is retried. Polling failures and timeouts are reported as poll
outcomes rather than raised.
"""

from typing import Optional


class ServiceError(Exception):
    """Base exception for failures surfaced over HTTP."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequestError(ServiceError):
    """Required request fields are missing or malformed."""

    status_code = 400


class ProcessorError(ServiceError):
    """The payment processor rejected or failed a call."""

    status_code = 500

    def __init__(self, message: str, error_type: Optional[str] = None):
        super().__init__(message)
        self.error_type = error_type
