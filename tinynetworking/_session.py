import threading
from concurrent.futures import ThreadPoolExecutor
from logging import getLogger
from typing import TYPE_CHECKING, Any, Callable, Optional, TypeVar

from httpx import (
    AsyncBaseTransport,
    AsyncClient,
    BaseTransport,
    Client,
    Headers,
    Response,
)

from ._config import Config
from ._result import Result
from ._task import DataTask
from ._utils import get_httpx_client_kwargs, header_user_agent, setup_logging
from .models.exceptions import MalformedResponseError, NoDataError, SessionClosedError
from .tracing import set_span_attributes, traced

if TYPE_CHECKING:
    from ._endpoint import Endpoint

A = TypeVar("A")


class Session:
    """Loads endpoints through httpx.

    A session owns a synchronous ``httpx.Client`` with a small worker pool for
    callback-style loads, and an ``httpx.AsyncClient`` for ``await``-style
    loads. Connection pooling, TLS, redirects and timeouts are left to httpx.
    A load sends exactly one request; nothing is retried.

    Examples:
        ```python
        from tinynetworking import Endpoint, RequestSpec, Session

        with Session() as session:
            endpoint = Endpoint.json(Todo, RequestSpec.build("GET", url))
            task = session.load(endpoint, on_complete)
            task.wait()
        ```

    Args:
        config (Optional[Config]): Client settings. Read from the environment when omitted.
        transport (Optional[BaseTransport]): Custom httpx transport, e.g. ``httpx.MockTransport``.
            Also used for async loads when it supports them and ``async_transport`` is omitted.
        async_transport (Optional[AsyncBaseTransport]): Custom transport for async loads.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        *,
        transport: Optional[BaseTransport] = None,
        async_transport: Optional[AsyncBaseTransport] = None,
    ) -> None:
        self._logger = getLogger("tinynetworking")
        self._config = config if config is not None else Config.from_env()
        if self._config.debug:
            setup_logging(True)

        client_kwargs = {
            **get_httpx_client_kwargs(self._config),
            "headers": Headers(self.default_headers),
        }

        if async_transport is None and isinstance(transport, AsyncBaseTransport):
            async_transport = transport

        self._client = Client(**client_kwargs, transport=transport)
        self._client_async = AsyncClient(**client_kwargs, transport=async_transport)
        self._executor = ThreadPoolExecutor(
            max_workers=self._config.max_workers, thread_name_prefix="tinynetworking"
        )
        self._lock = threading.Lock()
        self._pending: set[DataTask[Any]] = set()
        self._closed = False

    @property
    def config(self) -> Config:
        return self._config

    @property
    def default_headers(self) -> dict[str, str]:
        return {**header_user_agent()}

    def load(
        self, endpoint: "Endpoint[A]", on_complete: Callable[[Result[A]], None]
    ) -> DataTask[A]:
        """Loads an endpoint on a worker thread.

        The returned task is already running. ``on_complete`` receives a
        :class:`Result` holding either the parsed value or the error:

        - httpx transport errors (connect, timeout, TLS, protocol) as raised by httpx.
        - ``MalformedResponseError`` when the response is not a valid HTTP response.
        - the validator's error, e.g. ``WrongStatusCodeError``.
        - the parser's error, or ``NoDataError`` when it produced no value.
        - ``RequestCancelledError`` when the task or the session is closed first.
        - ``SessionClosedError`` when the session was already closed.

        Args:
            endpoint (Endpoint[A]): The endpoint.
            on_complete (Callable[[Result[A]], None]): The completion handler.
                It runs on the worker thread, or on the cancelling thread.

        Returns:
            DataTask[A]: The handle for the running load.
        """
        self._logger.debug(f"Loading {endpoint.description}")

        task: DataTask[A] = DataTask(endpoint.description, on_complete)
        with self._lock:
            if not self._closed:
                self._pending.add(task)
                task._attach(self._executor.submit(self._run, endpoint, task))
                return task

        task._finish(Result.failure(SessionClosedError(endpoint.description)))
        return task

    @traced(name="endpoint_load_async", span_type="http_request")
    async def load_async(self, endpoint: "Endpoint[A]") -> A:
        """Loads an endpoint and returns its parsed value.

        Raises the same errors :meth:`load` delivers. Cancelling the awaiting
        task raises ``asyncio.CancelledError`` as usual.
        """
        self._logger.debug(f"Loading {endpoint.description}")
        self._trace_request(endpoint)

        request = endpoint.request.to_httpx(self._client_async)
        response = await self._client_async.send(request)

        return self._handle_response(endpoint, response)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Closes the session.

        Loads that have not completed yet are cancelled, so their completion
        handlers receive ``RequestCancelledError``.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            pending = list(self._pending)
            self._pending.clear()

        for task in pending:
            task._abort()

        self._executor.shutdown(wait=False, cancel_futures=True)
        self._client.close()

    async def aclose(self) -> None:
        self.close()
        await self._client_async.aclose()

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    async def __aenter__(self) -> "Session":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    def _run(self, endpoint: "Endpoint[A]", task: DataTask[A]) -> None:
        try:
            if task.done:
                return
            value = self._send(endpoint)
        except Exception as e:
            self._logger.debug(f"Loading {endpoint.description} failed: {e!r}")
            task._finish(Result.failure(e))
        else:
            task._finish(Result.success(value))
        finally:
            with self._lock:
                self._pending.discard(task)

    @traced(name="endpoint_load", span_type="http_request")
    def _send(self, endpoint: "Endpoint[A]") -> A:
        self._trace_request(endpoint)

        request = endpoint.request.to_httpx(self._client)
        response = self._client.send(request)

        return self._handle_response(endpoint, response)

    def _handle_response(self, endpoint: "Endpoint[A]", response: Any) -> A:
        if not isinstance(response, Response) or not 100 <= response.status_code < 600:
            raise MalformedResponseError(
                f"Response for {endpoint.description} was not a valid HTTP response"
            )

        data = response.content
        self._logger.debug(
            f"Got response for {endpoint.description} - {len(data)} bytes"
        )
        set_span_attributes(**{"http.status_code": response.status_code})

        endpoint.validate(data, response)
        result = endpoint.parse(data, response)
        if result is None:
            raise NoDataError()

        return result

    def _trace_request(self, endpoint: "Endpoint[Any]") -> None:
        set_span_attributes(
            **{
                "http.method": endpoint.request.method,
                "http.url": endpoint.request.url,
            }
        )


_shared_session: Optional[Session] = None
_shared_lock = threading.Lock()


def shared_session() -> Session:
    """Returns the session used by endpoints that are not bound to one."""
    global _shared_session
    with _shared_lock:
        if _shared_session is None:
            _shared_session = Session()
        return _shared_session
