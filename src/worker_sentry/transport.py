import dataclasses
import logging
from concurrent.futures import Executor, Future
from typing import Any, Callable, Protocol, TypeVar

import requests
from requests import HTTPError, PreparedRequest

logger = logging.getLogger(__name__)

_R_co = TypeVar("_R_co", covariant=True)


class Transport(Protocol[_R_co]):
    def __call__(self, request: PreparedRequest) -> _R_co: ...


@dataclasses.dataclass
class RequestsTransport:
    """
    Sends requests with a `requests.Session`.  Responses are returned as is, whatever their status.
    """

    timeout: float | None = None
    session: requests.Session = dataclasses.field(default_factory=requests.Session)

    def __call__(self, request: PreparedRequest) -> requests.Response:
        logger.debug(f"Sending {request.method} {request.url}")
        return self.session.send(request, timeout=self.timeout)


def executor_transport(
    executor: Executor, transport: Callable[[PreparedRequest], Any] | None = None
) -> Callable[[PreparedRequest], Future]:
    """
    Wraps `transport` so that each request is submitted to `executor` and a future of the result
    is returned immediately.
    """
    send = transport if transport is not None else RequestsTransport()

    def submit(request: PreparedRequest) -> Future:
        return executor.submit(send, request)

    return submit


@dataclasses.dataclass
class FakeHttpResponse:
    status_code: int
    content: bytes = b""

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")

    @property
    def ok(self) -> bool:
        return self.status_code < 400


@dataclasses.dataclass
class DummyTransport:
    """
    A transport that records every request instead of sending it, and answers with a fake
    response.

    Use `force_failure_status` to make every request fail with an HTTPError carrying that status,
    or `raise_error` to make every request raise the given exception.
    """

    status_code: int = 200
    force_failure_status: int | None = None
    raise_error: BaseException | None = None
    invocations: list[PreparedRequest] = dataclasses.field(default_factory=list)

    def __call__(self, request: PreparedRequest) -> FakeHttpResponse:
        logger.debug(f"Request to {request.url} handled by DummyTransport")
        self.invocations.append(request)

        if self.raise_error is not None:
            raise self.raise_error

        if self.force_failure_status:
            raise HTTPError(
                response=FakeHttpResponse(status_code=self.force_failure_status)  # type: ignore[arg-type]
            )

        return FakeHttpResponse(status_code=self.status_code)
