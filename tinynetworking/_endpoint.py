from dataclasses import dataclass, field, replace
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Generic,
    Optional,
    TypeVar,
)

import httpx
from pydantic import TypeAdapter

from ._expectations import ValidateFunction, success_status_code
from ._result import Result
from ._utils import RequestSpec
from ._utils.constants import CONTENT_TYPE_JSON, HEADER_ACCEPT
from .models.exceptions import DecodeError, EndpointError, NoDataError

if TYPE_CHECKING:
    from ._session import Session
    from ._task import DataTask

A = TypeVar("A")
B = TypeVar("B")

ParseFunction = Callable[[Optional[bytes], httpx.Response], Optional[A]]


def decode_response(
    model: Any, decoder: Optional[Callable[[bytes], Any]] = None
) -> ParseFunction:
    """Build a parser that decodes a JSON body into ``model``.

    Args:
        model (Any): The target type, e.g. a pydantic model or ``list[Todo]``.
        decoder (Optional[Callable[[bytes], Any]]): Replaces the pydantic
            ``TypeAdapter`` used by default.

    Returns:
        ParseFunction: Raises ``NoDataError`` when there is no body and
        ``DecodeError`` when decoding fails, including for an empty body.
    """
    decode = decoder if decoder is not None else TypeAdapter(model).validate_json

    def parse(data: Optional[bytes], response: httpx.Response) -> Any:
        if data is None:
            raise NoDataError()
        try:
            return decode(data)
        except EndpointError:
            raise
        except Exception as e:
            raise DecodeError(e) from e

    return parse


def discard_body(data: Optional[bytes], response: httpx.Response) -> bool:
    return True


@dataclass(frozen=True)
class Endpoint(Generic[A]):
    """Describes an endpoint returning ``A`` values.

    An endpoint pairs a :class:`RequestSpec` with a validator, which accepts or
    rejects the response (by default on its status code), and a parser, which
    turns the body into an ``A``. A parser returns ``None`` when there is no
    value, and loading the endpoint then fails with ``NoDataError``.

    Endpoints never change after construction and hold no connection state.
    The same endpoint can be loaded any number of times, also concurrently.

    Examples:
        ```python
        from tinynetworking import Endpoint, RequestSpec

        todos = Endpoint.json(
            list[Todo],
            RequestSpec.build("GET", "https://jsonplaceholder.typicode.com/todos/"),
        )
        titles = todos.map(lambda items: [todo.title for todo in items])

        titles.load(lambda result: print(result.unwrap()))
        ```

    Args:
        request (RequestSpec): The request for this endpoint.
        parse (ParseFunction): Converts the body and response into an ``A``.
        validate (ValidateFunction): Checks the response before it is parsed.
        session (Optional[Session]): The session used by :meth:`load`. The
            shared session is used when omitted.
    """

    request: RequestSpec
    parse: ParseFunction
    validate: ValidateFunction = success_status_code
    session: Optional["Session"] = field(default=None, compare=False, repr=False)

    @classmethod
    def json(
        cls,
        model: Any,
        request: RequestSpec,
        validate: ValidateFunction = success_status_code,
        decoder: Optional[Callable[[bytes], Any]] = None,
        session: Optional["Session"] = None,
    ) -> "Endpoint[Any]":
        """Creates an endpoint for a request that returns JSON.

        The ``Accept`` header is forced to ``application/json`` on a copy of
        ``request``, replacing any ``Accept`` header it already had.
        """
        json_request = request.with_headers({HEADER_ACCEPT: CONTENT_TYPE_JSON})
        return cls(
            json_request,
            decode_response(model, decoder),
            validate=validate,
            session=session,
        )

    @classmethod
    def raw(
        cls,
        request: RequestSpec,
        validate: ValidateFunction = success_status_code,
        session: Optional["Session"] = None,
    ) -> "Endpoint[bytes]":
        return cls(
            request,
            lambda data, response: data,
            validate=validate,
            session=session,
        )

    @classmethod
    def text(
        cls,
        request: RequestSpec,
        validate: ValidateFunction = success_status_code,
        encoding: Optional[str] = None,
        session: Optional["Session"] = None,
    ) -> "Endpoint[str]":
        def parse(data: Optional[bytes], response: httpx.Response) -> Optional[str]:
            if data is None:
                return None
            try:
                return data.decode(encoding or response.encoding or "utf-8")
            except (UnicodeDecodeError, LookupError) as e:
                raise DecodeError(e) from e

        return cls(request, parse, validate=validate, session=session)

    def map(self, transform: Callable[[A], B]) -> "Endpoint[B]":
        """Transforms the result.

        ``transform`` is only called when the parser produced a value.
        """
        parse = self.parse

        def mapped(data: Optional[bytes], response: httpx.Response) -> Optional[B]:
            value = parse(data, response)
            if value is None:
                return None
            return transform(value)

        return Endpoint(self.request, mapped, validate=self.validate, session=self.session)

    def compact_map(self, transform: Callable[[A], Optional[B]]) -> "Endpoint[B]":
        """Transforms the result with a function that may fail.

        An exception raised by ``transform`` becomes the load error as is.
        Returning ``None`` makes the load fail with ``NoDataError``.
        """
        parse = self.parse

        def compact_mapped(
            data: Optional[bytes], response: httpx.Response
        ) -> Optional[B]:
            value = parse(data, response)
            if value is None:
                return None
            return transform(value)

        return Endpoint(
            self.request, compact_mapped, validate=self.validate, session=self.session
        )

    def with_session(self, session: "Session") -> "Endpoint[A]":
        return replace(self, session=session)

    def load(self, on_complete: Callable[[Result[A]], None]) -> "DataTask[A]":
        """Loads the endpoint in the background. See :meth:`Session.load`."""
        return self._session().load(self, on_complete)

    async def load_async(self) -> A:
        """Loads the endpoint and returns its value. See :meth:`Session.load_async`."""
        return await self._session().load_async(self)

    def _session(self) -> "Session":
        if self.session is not None:
            return self.session

        from ._session import shared_session

        return shared_session()

    @property
    def description(self) -> str:
        return f"[{self.request.method} {self.request.url}]"

    def describe(self, include_body: bool = False) -> str:
        """Describe the request for logs, optionally with its body."""
        if not include_body or not self.request.content:
            return self.description

        try:
            body = self.request.content.decode("utf-8")
        except UnicodeDecodeError:
            body = f"<{len(self.request.content)} bytes>"

        return f"[{self.request.method} {self.request.url} {body}]"

    def __str__(self) -> str:
        return self.description
