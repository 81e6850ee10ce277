from enum import StrEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Level(StrEnum):
    FATAL = "fatal"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    DEBUG = "debug"


class UserDetails(BaseModel):
    # Keys beyond the known ones (name, segment, data, ...) are forwarded as given.
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str | int] = None
    email: Optional[str] = None
    username: Optional[str] = None
    ip: Optional[str] = Field(default=None, alias="ip_address")


class RequestDetails(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    url: Optional[str] = None
    method: Optional[str] = None
    headers: Optional[dict[str, str]] = None
    query: Optional[str | dict[str, Any]] = Field(default=None, alias="query_string")
    cookies: Optional[str | dict[str, str]] = None
    env: Optional[dict[str, Any]] = None


class CaptureOptions(BaseModel):
    """
    Metadata attached to a captured exception.  Every field is optional; only the fields that
    were explicitly given end up in the event, explicit `None` included.
    """

    model_config = ConfigDict(extra="forbid")

    level: Optional[Level] = None
    extra: Optional[dict[str, Any]] = None
    tags: Optional[dict[str, str]] = None
    release: Optional[str] = None
    dist: Optional[str] = None
    environment: Optional[str] = None
    server_name: Optional[str] = None
    transaction: Optional[str] = None
    user: Optional[UserDetails] = None
    fingerprint: Optional[list[str]] = None
    request: Optional[RequestDetails] = None
    breadcrumbs: Optional[list[dict[str, Any]]] = None

    def given(self, field: str) -> bool:
        return field in self.model_fields_set

    def dump_user(self) -> dict[str, Any]:
        if self.user is None:
            return {}
        return {
            **self.user.model_dump(mode="json", by_alias=True, exclude_unset=True),
            **(self.user.model_extra or {}),
        }

    def dump_request(self) -> dict[str, Any]:
        if self.request is None:
            return {}
        return self.request.model_dump(mode="json", by_alias=True, exclude_unset=True)
