import logging
import os
from typing import Annotated
from urllib.parse import unquote, urlsplit

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from worker_sentry.exceptions import InvalidDsnError

logger = logging.getLogger(__name__)

DEFAULT_CLIENT_NAME = "worker-sentry/1.0"


def parse_optional_float_from_env(data: str | float | None) -> float | None:
    if data is None or data == "":
        return None
    return float(data)


ParseOptionalFloat = Annotated[float | None, BeforeValidator(parse_optional_float_from_env)]


class Dsn(BaseModel):
    """
    The parts of a sentry DSN (`https://<public_key>@<host>/<project path>`) the client needs.
    """

    model_config = ConfigDict(frozen=True)

    scheme: str
    host: str
    port: int | None = None
    path: str
    public_key: str

    @classmethod
    def parse(cls, dsn: str) -> "Dsn":
        parts = urlsplit(dsn)
        if not parts.hostname:
            raise InvalidDsnError(f"DSN {dsn!r} has no host")
        if not parts.username:
            raise InvalidDsnError(f"DSN {dsn!r} has no public key")
        try:
            port = parts.port
        except ValueError as e:
            raise InvalidDsnError(f"DSN {dsn!r} has an invalid port") from e

        return cls(
            scheme=parts.scheme,
            host=parts.hostname,
            port=port,
            path=parts.path,
            public_key=unquote(parts.username),
        )

    @property
    def netloc(self) -> str:
        if self.port is None:
            return self.host
        return f"{self.host}:{self.port}"

    @property
    def store_url(self) -> str:
        return f"https://{self.netloc}/api{self.path}/store/"


class SentryConfig(BaseModel):
    SENTRY_DSN: str
    SENTRY_CLIENT_NAME: str = DEFAULT_CLIENT_NAME
    # Only applied by the default requests transport.
    SENTRY_TRANSPORT_TIMEOUT: ParseOptionalFloat = Field(default=None)

    @property
    def dsn(self) -> Dsn:
        return Dsn.parse(self.SENTRY_DSN)

    def do_validation(self):
        Dsn.parse(self.SENTRY_DSN)
        if self.SENTRY_TRANSPORT_TIMEOUT is None:
            logger.debug("SENTRY_TRANSPORT_TIMEOUT is not set, requests will not time out")


def load_from_environment(environ: dict[str, str] | None = None) -> SentryConfig:
    config = SentryConfig.model_validate(environ if environ is not None else os.environ)
    config.do_validation()
    return config
