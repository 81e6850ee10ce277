class WorkerSentryError(Exception):
    """Base exception for worker_sentry errors"""


class InvalidDsnError(WorkerSentryError, ValueError):
    """Raised when a DSN is missing its host or public key"""


class InvalidExceptionError(WorkerSentryError, TypeError):
    """Raised when something other than an exception instance is reported"""
