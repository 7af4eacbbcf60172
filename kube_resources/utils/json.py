import json
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel
from pydantic.main import IncEx

from kube_resources.utils.datetime_util import to_utc_microseconds_iso_format

JSON_COMPACT_SEPARATORS = (",", ":")


def pydantic_encoder(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json", by_alias=True, exclude_none=True)

    if isinstance(obj, datetime):
        return to_utc_microseconds_iso_format(obj)

    if isinstance(obj, Enum):
        return obj.value

    raise TypeError(
        f"Object of type '{obj.__class__.__name__}' is not JSON serializable"
    )


def json_dumps(
    data: Any,
    *,
    compact: bool = False,
    indent: int | None = None,
    cls: type[json.JSONEncoder] | None = None,
    defaults: Callable[[Any], Any] | None = pydantic_encoder,
    # BaseModel dump parameters
    by_alias: bool = True,
    exclude_none: bool = True,
    exclude: IncEx | None = None,
    mode: Literal["json", "python"] = "json",
) -> str:
    """
    Serialize `data` to a consistent JSON formatted `str` with dict keys sorted.

    Pydantic models are dumped by their wire names with unset optional
    fields omitted, the way the kubernetes API expects them.

    Args:
        data: The data to serialize.
        compact: If True, use compact separators (no spaces after commas or colons).
        indent: If specified, pretty-print the JSON with this many spaces of indentation.
        cls: A custom JSONEncoder subclass to use for serialization.
        defaults: Default function for objects json can not serialize natively.
    Returns:
        A JSON formatted string.
    """
    if isinstance(data, BaseModel):
        data = data.model_dump(
            mode=mode, by_alias=by_alias, exclude_none=exclude_none, exclude=exclude
        )
    separators = JSON_COMPACT_SEPARATORS if compact else None
    return json.dumps(
        data,
        indent=indent,
        separators=separators,
        sort_keys=True,
        cls=cls,
        default=defaults,
    )


def _reject_duplicate_keys(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise ValueError(f"duplicate key '{key}'")
        result[key] = value
    return result


def json_loads(data: str | bytes, *, strict: bool = False) -> Any:
    """Deserialize JSON text to a Python object.

    Args:
        data: JSON formatted text.
        strict: Reject objects that repeat a key instead of keeping the last value.

    Raises:
        json.JSONDecodeError: If data is not valid JSON.
        ValueError: If strict is set and an object repeats a key.
    """
    if strict:
        return json.loads(data, object_pairs_hook=_reject_duplicate_keys)
    return json.loads(data)
