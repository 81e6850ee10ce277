from worker_sentry.client import Sentry
from worker_sentry.configuration import Dsn, SentryConfig, load_from_environment
from worker_sentry.exceptions import InvalidDsnError, InvalidExceptionError, WorkerSentryError
from worker_sentry.models import CaptureOptions, Level, RequestDetails, UserDetails
from worker_sentry.stacktrace import StackFrame, get_error_stack
from worker_sentry.transport import DummyTransport, RequestsTransport, executor_transport

__all__ = [
    "CaptureOptions",
    "DummyTransport",
    "Dsn",
    "InvalidDsnError",
    "InvalidExceptionError",
    "Level",
    "RequestDetails",
    "RequestsTransport",
    "Sentry",
    "SentryConfig",
    "StackFrame",
    "UserDetails",
    "WorkerSentryError",
    "executor_transport",
    "get_error_stack",
    "load_from_environment",
]
