"""Tests for loading endpoints through a Session."""

import asyncio
import threading

import httpx
import pytest
from pydantic import BaseModel, Field

from tinynetworking import (
    DecodeError,
    Endpoint,
    MalformedResponseError,
    NoDataError,
    RequestCancelledError,
    RequestSpec,
    Session,
    SessionClosedError,
    WrongStatusCodeError,
    discard_body,
    empty_response,
    shared_session,
)


class ExampleArgs(BaseModel):
    name: str


class RequestHeaders(BaseModel):
    accept: str = Field(alias="Accept")


class GetRequestResult(BaseModel):
    args: ExampleArgs
    headers: RequestHeaders


def echo(request: httpx.Request) -> httpx.Response:
    """Answer like httpbin's /get: echo the query and the Accept header."""
    return httpx.Response(
        200,
        json={
            "args": dict(request.url.params),
            "headers": {"Accept": request.headers.get("Accept", "")},
        },
    )


def get_endpoint(session: Session) -> Endpoint[GetRequestResult]:
    spec = RequestSpec.build(
        "GET", "https://httpbin.org/get", params={"name": "hellö ABC"}
    )
    return Endpoint.json(GetRequestResult, spec, session=session)


class TestLoad:
    def test_get_json(self, make_session, load_and_wait):
        session = make_session(echo)

        results = load_and_wait(session, get_endpoint(session))

        assert len(results) == 1
        result = results[0].unwrap()
        assert result.args.name == "hellö ABC"
        assert result.headers.accept == "application/json"

    def test_endpoint_load_uses_bound_session(self, make_session):
        session = make_session(echo)
        results = []

        task = get_endpoint(session).load(results.append)

        assert task.wait(5)
        assert results[0].ok
        assert task.result is results[0]
        assert task.done and not task.cancelled

    def test_map_is_applied(self, make_session, load_and_wait):
        session = make_session(echo)
        endpoint = get_endpoint(session).map(lambda result: result.args.name.upper())

        results = load_and_wait(session, endpoint)

        assert results[0].unwrap() == "HELLÖ ABC"

    def test_compact_map_error_is_forwarded(self, make_session, load_and_wait):
        session = make_session(echo)
        failure = LookupError("no such todo")

        def reject(result):
            raise failure

        results = load_and_wait(session, get_endpoint(session).compact_map(reject))

        assert results[0].error is failure
        assert not isinstance(results[0].error, DecodeError)

    def test_compact_map_none_is_no_data(self, make_session, load_and_wait):
        session = make_session(echo)
        endpoint = get_endpoint(session).compact_map(lambda result: None)

        results = load_and_wait(session, endpoint)

        assert isinstance(results[0].error, NoDataError)

    def test_wrong_status_code(self, make_session, load_and_wait):
        session = make_session(lambda request: httpx.Response(404, content=b"gone"))

        results = load_and_wait(session, get_endpoint(session))

        error = results[0].error
        assert isinstance(error, WrongStatusCodeError)
        assert error.status_code == 404
        assert error.response_body == b"gone"

    def test_validator_runs_before_parser(self, make_session, load_and_wait):
        session = make_session(lambda request: httpx.Response(500, content=b"{not json"))

        results = load_and_wait(session, get_endpoint(session))

        assert isinstance(results[0].error, WrongStatusCodeError)

    def test_decode_error(self, make_session, load_and_wait):
        session = make_session(lambda request: httpx.Response(200, content=b"{not json"))

        results = load_and_wait(session, get_endpoint(session))

        assert isinstance(results[0].error, DecodeError)

    def test_empty_json_body_is_decode_error(self, make_session, load_and_wait):
        session = make_session(lambda request: httpx.Response(200))

        results = load_and_wait(session, get_endpoint(session))

        assert isinstance(results[0].error, DecodeError)

    def test_parser_returning_none_is_no_data(self, make_session, load_and_wait):
        session = make_session(echo)
        endpoint = Endpoint(
            RequestSpec.build("GET", "https://httpbin.org/get"),
            lambda data, response: None,
        )

        results = load_and_wait(session, endpoint)

        assert isinstance(results[0].error, NoDataError)

    def test_transport_error_is_passed_through(self, make_session, load_and_wait):
        raised = []

        def refuse(request):
            error = httpx.ConnectError("connection refused", request=request)
            raised.append(error)
            raise error

        session = make_session(refuse)

        results = load_and_wait(session, get_endpoint(session))

        assert results[0].error is raised[0]
        with pytest.raises(httpx.ConnectError):
            results[0].unwrap()

    def test_malformed_response(self, make_session, load_and_wait):
        session = make_session(lambda request: httpx.Response(42))

        results = load_and_wait(session, get_endpoint(session))

        assert isinstance(results[0].error, MalformedResponseError)

    def test_delete_with_empty_body(self, make_session, load_and_wait):
        session = make_session(lambda request: httpx.Response(204))
        endpoint = Endpoint(
            RequestSpec.build("DELETE", "https://jsonplaceholder.typicode.com/todos/1"),
            discard_body,
            validate=empty_response,
        )

        results = load_and_wait(session, endpoint)

        assert results[0].unwrap() is True

    def test_one_request_per_load(self, make_session, load_and_wait):
        requests = []

        def count(request):
            requests.append(request)
            return httpx.Response(503)

        session = make_session(count)

        load_and_wait(session, get_endpoint(session))

        assert len(requests) == 1

    def test_endpoint_can_be_loaded_repeatedly(self, make_session, load_and_wait):
        session = make_session(echo)
        endpoint = get_endpoint(session)

        first = load_and_wait(session, endpoint)
        second = load_and_wait(session, endpoint)

        assert first[0].unwrap() == second[0].unwrap()

    def test_sends_user_agent(self, make_session, load_and_wait):
        seen = []

        def record(request):
            seen.append(request.headers["User-Agent"])
            return httpx.Response(200, content=b"ok")

        session = make_session(record)
        endpoint = Endpoint.raw(RequestSpec.build("GET", "http://example.com"))

        load_and_wait(session, endpoint)

        assert seen[0].startswith("TinyNetworking.Python/")

    def test_request_user_agent_wins(self, make_session, load_and_wait):
        seen = []

        def record(request):
            seen.append(request.headers["User-Agent"])
            return httpx.Response(200, content=b"ok")

        session = make_session(record)
        spec = RequestSpec.build(
            "GET", "http://example.com", headers={"User-Agent": "custom/1.0"}
        )

        load_and_wait(session, Endpoint.raw(spec))

        assert seen == ["custom/1.0"]

    def test_failing_completion_handler_still_completes(self, make_session):
        session = make_session(echo)

        def explode(result):
            raise RuntimeError("handler bug")

        task = session.load(get_endpoint(session), explode)

        assert task.wait(5)
        assert task.result.ok


class TestCancel:
    def test_cancel_delivers_cancellation_once(self, make_session, load_and_wait):
        release = threading.Event()

        def slow(request):
            release.wait(5)
            return echo(request)

        session = make_session(slow)
        results = []

        task = session.load(get_endpoint(session), results.append)
        assert task.cancel() is True
        release.set()

        # the session has a single worker, so this load runs after the
        # cancelled one has finished
        load_and_wait(session, get_endpoint(session))

        assert len(results) == 1
        assert isinstance(results[0].error, RequestCancelledError)
        assert task.cancelled
        assert task.wait(0)

    def test_cancel_after_completion_is_a_no_op(self, make_session):
        session = make_session(echo)
        results = []

        task = session.load(get_endpoint(session), results.append)
        assert task.wait(5)

        assert task.cancel() is False
        assert len(results) == 1
        assert results[0].ok
        assert not task.cancelled

    def test_second_cancel_is_a_no_op(self, make_session):
        release = threading.Event()

        def slow(request):
            release.wait(5)
            return echo(request)

        session = make_session(slow)
        results = []

        task = session.load(get_endpoint(session), results.append)
        assert task.cancel() is True
        assert task.cancel() is False
        release.set()

        assert len(results) == 1


class TestClose:
    def test_close_cancels_running_and_queued_loads(self, make_session):
        release = threading.Event()

        def slow(request):
            release.wait(5)
            return echo(request)

        session = make_session(slow)
        running, queued = [], []

        running_task = session.load(get_endpoint(session), running.append)
        queued_task = session.load(get_endpoint(session), queued.append)
        session.close()
        release.set()
        session._executor.shutdown(wait=True)

        assert queued_task.wait(0)
        assert len(queued) == 1
        assert isinstance(queued[0].error, RequestCancelledError)
        assert running_task.wait(0)
        assert len(running) == 1
        assert isinstance(running[0].error, RequestCancelledError)

    def test_close_keeps_completed_results(self, make_session, load_and_wait):
        session = make_session(echo)

        results = load_and_wait(session, get_endpoint(session))
        session.close()

        assert len(results) == 1
        assert results[0].ok

    def test_load_after_close_fails_once(self, make_session):
        session = make_session(echo)
        session.close()
        results = []

        task = session.load(get_endpoint(session), results.append)

        assert task.wait(0)
        assert len(results) == 1
        assert isinstance(results[0].error, SessionClosedError)
        assert task.cancel() is False

    def test_close_is_idempotent(self, make_session):
        session = make_session(echo)

        session.close()
        session.close()

        assert session.closed


class TestLoadAsync:
    @pytest.mark.asyncio
    async def test_get_json(self, make_session):
        session = make_session(echo)

        result = await get_endpoint(session).load_async()

        assert result.args.name == "hellö ABC"
        assert result.headers.accept == "application/json"

    @pytest.mark.asyncio
    async def test_errors_are_raised(self, make_session):
        session = make_session(lambda request: httpx.Response(401, content=b"denied"))

        with pytest.raises(WrongStatusCodeError) as exc_info:
            await session.load_async(get_endpoint(session))

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_concurrent_loads(self, make_session):
        session = make_session(echo)
        endpoint = get_endpoint(session).map(lambda result: result.args.name)

        names = await asyncio.gather(*(endpoint.load_async() for _ in range(5)))

        assert names == ["hellö ABC"] * 5

    @pytest.mark.asyncio
    async def test_cancellation(self, make_session):
        async def slow(request):
            await asyncio.sleep(10)
            return echo(request)

        session = make_session(slow)

        task = asyncio.create_task(get_endpoint(session).load_async())
        await asyncio.sleep(0.05)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

    @pytest.mark.asyncio
    async def test_async_context_manager(self, config):
        transport = httpx.MockTransport(echo)

        async with Session(config, transport=transport) as session:
            result = await get_endpoint(session).load_async()

        assert result.args.name == "hellö ABC"


class TestSharedSession:
    def test_shared_session_is_reused(self):
        assert shared_session() is shared_session()

    def test_unbound_endpoint_uses_shared_session(self):
        endpoint = Endpoint.raw(RequestSpec.build("GET", "http://example.com"))
        assert endpoint._session() is shared_session()
