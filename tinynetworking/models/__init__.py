from .exceptions import (
    ConfigurationError,
    DecodeError,
    EmptyResponseExpectedError,
    EndpointError,
    MalformedResponseError,
    NoDataError,
    RequestCancelledError,
    SessionClosedError,
    WrongStatusCodeError,
)

__all__ = [
    "ConfigurationError",
    "DecodeError",
    "EmptyResponseExpectedError",
    "EndpointError",
    "MalformedResponseError",
    "NoDataError",
    "RequestCancelledError",
    "SessionClosedError",
    "WrongStatusCodeError",
]
