from typing import Optional


class StreamAPIError(Exception):
    """Base class for failures talking to the streaming endpoint."""


class EncodingError(StreamAPIError):
    """The request payload could not be serialized to JSON."""


class TransportError(StreamAPIError):
    """The HTTP call itself failed (connection, DNS, TLS, ...)."""


class UnexpectedStatusError(StreamAPIError):
    """The API answered with a status code the call site does not accept.

    Args:
        status_code: HTTP status code of the response.
        operation: Name of the CRUD operation that rejected the code, or None
            when the generic 2xx check of the adapter rejected it.
    """

    def __init__(self, status_code: int, operation: Optional[str] = None) -> None:
        self.status_code = status_code
        self.operation = operation
        if operation:
            message = f"failed to {operation} stream, response code {status_code}"
        else:
            message = f"Failed call API endpoint. HTTP response code: {status_code}."
        super().__init__(message)


class DecodingError(StreamAPIError):
    """The response body did not decode into a stream."""

    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(f"Could not decode JSON response: {cause}")
