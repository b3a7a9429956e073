"""
Exception types raised by puffstore.

ValidationError and DecodeError are local and raised synchronously while
building or decoding expressions. ApiError and TransportError come from the
HTTP layer and are surfaced to the caller untranslated.
"""


class PuffstoreError(Exception):
    """Base exception for all puffstore errors."""

    pass


class ValidationError(PuffstoreError, ValueError):
    """A filter, rank expression, row or request was constructed with invalid arguments."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DecodeError(PuffstoreError, ValueError):
    """A wire value could not be decoded into a filter or rank expression."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnknownOperatorError(DecodeError):
    """The wire value used an operator token the client does not know."""

    def __init__(self, operator):
        self.operator = operator
        super().__init__(f"Unknown operator: {operator!r}")


class ArityMismatchError(DecodeError):
    """An operator was given the wrong number or shape of operands."""

    def __init__(self, operator, expected: str, actual):
        self.operator = operator
        self.expected = expected
        self.actual = actual
        super().__init__(f"{operator} expects {expected}, got {actual!r}")


class ApiError(PuffstoreError):
    """The service answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"API error {status_code}: {message}")


class TransportError(PuffstoreError):
    """The request never produced an HTTP response (connection, TLS, timeout)."""

    def __init__(self, url: str, original_error: Exception):
        self.url = url
        self.original_error = original_error
        super().__init__(f"Request to {url} failed: {original_error}")
