import logging
from typing import Any, Mapping, cast

import requests
from requests import PreparedRequest

from worker_sentry.configuration import DEFAULT_CLIENT_NAME, Dsn, load_from_environment
from worker_sentry.exceptions import InvalidExceptionError
from worker_sentry.models import CaptureOptions
from worker_sentry.schemas import Event
from worker_sentry.stacktrace import TraceSource, get_error_stack
from worker_sentry.transport import RequestsTransport, Transport
from worker_sentry.utils import exception_formatter, json_dumps

logger = logging.getLogger(__name__)

EVENT_LOGGER = "worker"
EVENT_PLATFORM = "javascript"
SENTRY_PROTOCOL_VERSION = 7


def _given(options: CaptureOptions, *fields: str) -> dict[str, Any]:
    return {field: getattr(options, field) for field in fields if options.given(field)}


class Sentry:
    """
    Sends exceptions to the sentry store endpoint named by a DSN, one request per exception.

    The transport is called exactly once per captured exception and whatever it returns (a
    response, a future, ...) is handed back to the caller untouched.  Nothing is retried,
    buffered or logged on failure; transport errors propagate as raised.
    """

    def __init__(
        self,
        dsn: str | Dsn,
        transport: Transport | None = None,
        client_name: str = DEFAULT_CLIENT_NAME,
    ):
        self.dsn = dsn if isinstance(dsn, Dsn) else Dsn.parse(dsn)
        self.transport: Transport = transport if transport is not None else RequestsTransport()
        self.client_name = client_name

    @classmethod
    def from_environment(
        cls, environ: dict[str, str] | None = None, transport: Transport | None = None
    ) -> "Sentry":
        config = load_from_environment(environ)
        if transport is None:
            transport = RequestsTransport(timeout=config.SENTRY_TRANSPORT_TIMEOUT)
        return cls(config.dsn, transport=transport, client_name=config.SENTRY_CLIENT_NAME)

    @property
    def store_url(self) -> str:
        return self.dsn.store_url

    @property
    def auth_header(self) -> str:
        return (
            f"Sentry sentry_version={SENTRY_PROTOCOL_VERSION}, "
            f"sentry_client={self.client_name}, sentry_key={self.dsn.public_key}"
        )

    def capture_exception(
        self,
        error: BaseException,
        options: CaptureOptions | Mapping[str, Any] | None = None,
        trace_source: TraceSource | None = None,
        **kwargs: Any,
    ) -> Any:
        """
        Sends `error` to sentry and returns the transport's result.

        `options` and any keyword arguments are merged into one `CaptureOptions`, keyword
        arguments winning.  Nothing is sent if the options are invalid or the stack cannot be
        extracted.
        """
        if not isinstance(error, BaseException):
            raise InvalidExceptionError(
                f"Expected an exception instance, got {type(error).__qualname__}"
            )

        capture_options = self._resolve_options(options, kwargs)
        event = self.build_event(error, capture_options, trace_source=trace_source)
        request = self.build_request(event)

        logger.debug(f"Capturing {exception_formatter(error)} to {self.store_url}")
        return self.transport(request)

    def build_event(
        self,
        error: BaseException,
        options: CaptureOptions | None = None,
        trace_source: TraceSource | None = None,
    ) -> Event:
        if options is None:
            options = CaptureOptions()

        frames = get_error_stack(error, source=trace_source)

        event = {
            "logger": EVENT_LOGGER,
            "platform": EVENT_PLATFORM,
            **_given(options, "level", "extra", "fingerprint"),
            "exception": {
                "values": [
                    {
                        "type": type(error).__name__,
                        "value": str(error),
                        "stacktrace": {"frames": [frame.to_sentry() for frame in frames]},
                    }
                ]
            },
            **_given(options, "tags"),
            "user": options.dump_user(),
            "request": options.dump_request(),
            **_given(
                options,
                "breadcrumbs",
                "server_name",
                "transaction",
                "release",
                "dist",
                "environment",
            ),
        }
        return cast(Event, event)

    def build_request(self, event: Event) -> PreparedRequest:
        body = json_dumps(event, separators=(",", ":")).encode("utf-8")
        return requests.Request(
            method="POST",
            url=self.store_url,
            headers={
                "Content-Type": "application/json",
                "User-Agent": self.client_name,
                "X-Sentry-Auth": self.auth_header,
            },
            data=body,
        ).prepare()

    @staticmethod
    def _resolve_options(
        options: CaptureOptions | Mapping[str, Any] | None, overrides: dict[str, Any]
    ) -> CaptureOptions:
        if isinstance(options, CaptureOptions):
            if not overrides:
                return options
            options = options.model_dump(exclude_unset=True)

        if not overrides:
            return CaptureOptions.model_validate(options or {})
        return CaptureOptions.model_validate({**(options or {}), **overrides})
