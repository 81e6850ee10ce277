import typing

#  The subset of the sentry v7 event structure accepted by the store endpoint that this
#  client emits.  Keys are declared in the order they are serialized.
Event = typing.TypedDict(
    "Event",
    {
        "logger": str,
        "platform": str,
        "level": typing.Union["Level", None],
        "extra": typing.Mapping[str, typing.Any],
        "fingerprint": typing.Union["Fingerprint", None],
        "exception": "ExceptionValues",
        "tags": typing.Union["Tags", None],
        "user": "User",
        "request": "Request",
        "breadcrumbs": typing.List["Breadcrumb"],
        "server_name": str,
        "transaction": str,
        "release": str,
        "dist": str,
        "environment": str,
    },
    total=False,
)

#  The breadcrumbs interface specifies a series of application events that occurred before
#  an event.  Entries are ordered from oldest to newest and are forwarded verbatim.
Breadcrumb = typing.Mapping[str, typing.Any]

#  A single exception.
#
#  `type` is the class name of the exception, `value` its string representation.
Exception = typing.TypedDict(
    "Exception",
    {
        "type": str,
        "value": typing.Union[str, None],
        "stacktrace": "Stacktrace",
    },
)

#  The exception interface; one value per reported exception.
ExceptionValues = typing.TypedDict(
    "ExceptionValues",
    {
        "values": typing.List[Exception],
    },
)

#  A fingerprint value.
Fingerprint = typing.List[str]

#  Holds information about a single stacktrace frame.
#
#  Each object should contain **at least** a `filename` or `function` attribute.
#  `vars` only ever carries the frame's receiver, under the key `this`.
Frame = typing.TypedDict(
    "Frame",
    {
        # format: uint64
        "colno": typing.Union[int, None],
        "filename": typing.Union[str, None],
        "function": typing.Union[str, None],
        "in_app": bool,
        # format: uint64
        "lineno": typing.Union[int, None],
        "vars": "FrameVars",
    },
    total=False,
)

#  Frame local variables.
FrameVars = typing.Mapping[str, typing.Any]

Level = str

#  Http request information.
#
#  All keys are optional; the object itself is always present in events built by this client.
Request = typing.TypedDict(
    "Request",
    {
        "url": str,
        "method": str,
        "headers": typing.Union[typing.Mapping[str, str], None],
        "query_string": typing.Union[str, typing.Mapping[str, typing.Any], None],
        "cookies": typing.Union[str, typing.Mapping[str, str], None],
        "env": typing.Mapping[str, typing.Any],
    },
    total=False,
)

#  Frames ordered from the outermost call to the frame that raised.
Stacktrace = typing.TypedDict(
    "Stacktrace",
    {
        "frames": typing.List[Frame],
    },
)

#  Manual key/value tag pairs.
Tags = typing.Mapping[str, str]

#  Information about the user who triggered an event.
User = typing.TypedDict(
    "User",
    {
        "id": str,
        "email": str,
        "username": str,
        "ip_address": typing.Union[str, None],
    },
    total=False,
)
