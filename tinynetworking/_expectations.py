"""Response validators.

A validator receives the response body and the response, and raises when the
response must not be parsed. Every function here matches
``Callable[[Optional[bytes], httpx.Response], None]``.

The default validator, :func:`success_status_code`, checks the status code
against the range 200-299. :data:`expect_success` classifies the status code
into a :class:`ResponseClass` first and is kept separate so callers pick one
policy explicitly.
"""

from enum import Enum
from http import HTTPStatus
from typing import Callable, Iterable, Optional, Union

import httpx

from .models.exceptions import EmptyResponseExpectedError, WrongStatusCodeError

ValidateFunction = Callable[[Optional[bytes], httpx.Response], None]


class ResponseClass(str, Enum):
    INFORMATIONAL = "informational"
    SUCCESS = "success"
    REDIRECTION = "redirection"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    UNDEFINED = "undefined"

    @classmethod
    def from_status_code(cls, status_code: int) -> "ResponseClass":
        """Classify a status code by its hundreds digit.

        >>> ResponseClass.from_status_code(204)
        <ResponseClass.SUCCESS: 'success'>
        >>> ResponseClass.from_status_code(99)
        <ResponseClass.UNDEFINED: 'undefined'>
        """
        if 100 <= status_code < 200:
            return cls.INFORMATIONAL
        if 200 <= status_code < 300:
            return cls.SUCCESS
        if 300 <= status_code < 400:
            return cls.REDIRECTION
        if 400 <= status_code < 500:
            return cls.CLIENT_ERROR
        if 500 <= status_code < 600:
            return cls.SERVER_ERROR
        return cls.UNDEFINED


def _known_status(status_code: int) -> Optional[HTTPStatus]:
    try:
        return HTTPStatus(status_code)
    except ValueError:
        return None


def success_status_code(data: Optional[bytes], response: httpx.Response) -> None:
    code = response.status_code
    if not 200 <= code < 300:
        raise WrongStatusCodeError(code, response=response, response_body=data)


def validate_status_code(predicate: Callable[[int], bool]) -> ValidateFunction:
    """Build a validator that accepts the status codes ``predicate`` accepts.

    Args:
        predicate (Callable[[int], bool]): Returns True for acceptable status codes.

    Returns:
        ValidateFunction: A validator raising ``WrongStatusCodeError`` otherwise.
    """

    def validate(data: Optional[bytes], response: httpx.Response) -> None:
        code = response.status_code
        if not predicate(code):
            raise WrongStatusCodeError(code, response=response, response_body=data)

    return validate


def expect_status(
    expected: Union[ResponseClass, HTTPStatus, int, Iterable[Union[HTTPStatus, int]]],
) -> ValidateFunction:
    """Build a validator from a response class, a single status or a set of statuses.

    Status codes that are not registered in :class:`http.HTTPStatus` never match
    an exact status or a status set.

    Examples:
        >>> validate = expect_status(ResponseClass.SUCCESS)
        >>> validate = expect_status([HTTPStatus.OK, HTTPStatus.CREATED])
        >>> validate = expect_status(HTTPStatus.NO_CONTENT)
    """
    if isinstance(expected, ResponseClass):
        return validate_status_code(
            lambda code: ResponseClass.from_status_code(code) == expected
        )

    if isinstance(expected, int):
        single = HTTPStatus(expected)
        return validate_status_code(lambda code: _known_status(code) == single)

    allowed = frozenset(HTTPStatus(value) for value in expected)
    return validate_status_code(lambda code: _known_status(code) in allowed)


expect_success: ValidateFunction = expect_status(ResponseClass.SUCCESS)


def empty_response(data: Optional[bytes], response: httpx.Response) -> None:
    if data is None:
        return
    if len(data) != 0:
        raise EmptyResponseExpectedError()


def ignore_response(data: Optional[bytes], response: httpx.Response) -> None:
    pass
