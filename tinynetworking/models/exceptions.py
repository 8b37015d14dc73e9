from typing import Optional

import httpx


class EndpointError(Exception):
    """Base class for errors raised while loading an endpoint."""

    def __init__(self, message: str = "Endpoint request failed") -> None:
        self.message = message
        super().__init__(self.message)


class ConfigurationError(EndpointError):
    """Raised when the environment holds an invalid configuration value."""


class RequestCancelledError(EndpointError):
    """Raised when a dispatch is cancelled through its task before it completes."""

    def __init__(self, description: str = "") -> None:
        message = f"Request {description} was cancelled" if description else "Request was cancelled"
        super().__init__(message)


class SessionClosedError(EndpointError):
    """Raised when an endpoint is loaded through a session that was closed."""

    def __init__(self, description: str = "") -> None:
        message = (
            f"Cannot load {description}: session is closed"
            if description
            else "Session is closed"
        )
        super().__init__(message)


class MalformedResponseError(EndpointError):
    """The response could not be interpreted as an HTTP response."""

    def __init__(self, message: str = "Response was not a valid HTTP response") -> None:
        super().__init__(message)


class WrongStatusCodeError(EndpointError):
    """Signals that a response's status code was rejected by the validator.

    The response and its body are kept for diagnostics.
    """

    def __init__(
        self,
        status_code: int,
        response: Optional[httpx.Response] = None,
        response_body: Optional[bytes] = None,
    ) -> None:
        self.status_code = status_code
        self.response = response
        self.response_body = response_body

        try:
            url = str(response.request.url) if response is not None else "Unknown"
        except RuntimeError:
            # responses built without a request have no URL
            url = "Unknown"
        response_content = (
            response_body.decode("utf-8", errors="replace")
            if response_body
            else "No content"
        )

        super().__init__(
            f"Unexpected status code {status_code}"
            f"\nRequest URL: {url}"
            f"\nResponse Content: {response_content}"
        )


class EmptyResponseExpectedError(EndpointError):
    """The body was not empty although an empty response was expected."""

    def __init__(self, message: str = "Expected an empty response") -> None:
        super().__init__(message)


class DecodeError(EndpointError):
    """The response body could not be decoded.

    The decoder's exception is available as ``error`` and as ``__cause__``.
    """

    def __init__(self, error: Exception) -> None:
        self.error = error
        super().__init__(f"Could not decode response: {error}")


class NoDataError(EndpointError):
    """Signals that a response's data was unexpectedly missing."""

    def __init__(self, message: str = "Response contained no data") -> None:
        super().__init__(message)
