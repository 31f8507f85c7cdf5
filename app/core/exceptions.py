# app/core/exceptions.py

from typing import Dict, List
import logging

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base exception for storefront errors mapped to an HTTP response."""

    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_response(self) -> dict:
        return {"message": self.message}


class ValidationFailed(StoreError):
    """Input rejected before any write, reported per field."""

    status_code = 422

    def __init__(self, errors: Dict[str, List[str]], message: str = "The given data was invalid."):
        self.errors = errors
        super().__init__(message)

    def to_response(self) -> dict:
        return {"message": self.message, "errors": self.errors}


class NotFound(StoreError):
    """Identifier does not resolve, or resolves outside the caller's ownership."""

    status_code = 404


class TransactionFailed(StoreError):
    """A multi-row write failed and was rolled back."""

    status_code = 500

    def __init__(self, action: str, error: Exception):
        self.action = action
        self.error = error
        logger.error(f"Error {action}: {error}")
        super().__init__(f"Error {action}: {error}")
