import json
from enum import Enum

from pydantic_core import to_jsonable_python


class EventJSONEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, Enum):
            return obj.value
        # datetimes, UUIDs, decimals, models... serialized the way pydantic does in json mode.
        return to_jsonable_python(obj)


def json_dumps(data, **kwargs) -> str:
    return json.dumps(data, cls=EventJSONEncoder, **kwargs)


def exception_formatter(exception: BaseException) -> str:
    return f"{type(exception).__module__}.{type(exception).__qualname__}: {exception}"
