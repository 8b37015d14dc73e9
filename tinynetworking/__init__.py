"""Typed HTTP endpoints on top of httpx.

An :class:`Endpoint` pairs a request with a validator and a parser. Loading it
sends the request once and routes the response through validate, then parse,
then the completion handler.

Example:
```python
    from pydantic import BaseModel

    from tinynetworking import Endpoint, RequestSpec

    class Todo(BaseModel):
        id: int
        title: str

    endpoint = Endpoint.json(
        Todo, RequestSpec.build("GET", "https://jsonplaceholder.typicode.com/todos/1")
    )
    todo = await endpoint.load_async()
```
"""

from ._config import Config
from ._endpoint import Endpoint, decode_response, discard_body
from ._expectations import (
    ResponseClass,
    empty_response,
    expect_status,
    expect_success,
    ignore_response,
    success_status_code,
    validate_status_code,
)
from ._result import Result
from ._session import Session, shared_session
from ._task import DataTask
from ._utils import RequestSpec, setup_logging
from .models import (
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
    "Config",
    "ConfigurationError",
    "DataTask",
    "DecodeError",
    "EmptyResponseExpectedError",
    "Endpoint",
    "EndpointError",
    "MalformedResponseError",
    "NoDataError",
    "RequestCancelledError",
    "RequestSpec",
    "ResponseClass",
    "Result",
    "Session",
    "SessionClosedError",
    "WrongStatusCodeError",
    "decode_response",
    "discard_body",
    "empty_response",
    "expect_status",
    "expect_success",
    "ignore_response",
    "setup_logging",
    "shared_session",
    "success_status_code",
    "validate_status_code",
]
