"""
JSON and YAML (de)serialization of kubernetes resource models.

Resources are written with camelCase wire names and without unset optional
fields. Reading is lenient by default: unknown fields are dropped and
repeated YAML keys keep their last value. With ``strict=True`` both are
errors.
"""

import io
import logging
from collections.abc import Mapping
from typing import IO, Any, TypeVar

from pydantic import BaseModel, ValidationError
from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.error import YAMLError
from ruamel.yaml.scalarstring import LiteralScalarString

from kube_resources.exceptions import ResourceDeserializationError
from kube_resources.utils.json import json_dumps, json_loads
from kube_resources.utils.ruamel import create_ruamel_instance

ModelT = TypeVar("ModelT", bound=BaseModel)


def to_dict(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def _read(data: str | bytes | IO[str]) -> str | bytes:
    if isinstance(data, str | bytes):
        return data
    return data.read()


def _validate(
    model_cls: type[ModelT], data: Any, strict: bool, source: str
) -> ModelT:
    if not isinstance(data, Mapping):
        raise ResourceDeserializationError(
            f"expected a {source} mapping for {model_cls.__name__}, "
            f"got {type(data).__name__}"
        )
    try:
        return model_cls.model_validate(data, context={"strict": strict})
    except ValidationError as e:
        raise ResourceDeserializationError(e) from e


def json_serialize(value: BaseModel | None, indent: int | None = None) -> str:
    if value is None:
        return "null"
    return json_dumps(value, indent=indent)


def json_deserialize(
    model_cls: type[ModelT],
    data: str | bytes | IO[str],
    strict: bool = False,
) -> ModelT:
    try:
        loaded = json_loads(_read(data), strict=strict)
    except ValueError as e:
        # json.JSONDecodeError is a ValueError as well
        raise ResourceDeserializationError(e) from e
    return _validate(model_cls, loaded, strict, "json")


def _fits_literal_block(data: str) -> bool:
    # block scalars normalize line breaks, \r and other non printable
    # characters only survive in a double quoted scalar
    return "\n" in data and all(c in "\n\t" or c.isprintable() for c in data)


def _to_yaml_document(data: Any) -> Any:
    if isinstance(data, dict):
        return CommentedMap(
            (k, _to_yaml_document(v)) for k, v in data.items()
        )
    if isinstance(data, list):
        return [_to_yaml_document(i) for i in data]
    if isinstance(data, str) and _fits_literal_block(data):
        return LiteralScalarString(data)
    return data


def yaml_serialize(value: BaseModel | None) -> str:
    if value is None:
        return ""
    ruamel_instance = create_ruamel_instance(explicit_start=True)
    ruamel_instance.indent(mapping=2, sequence=4, offset=2)
    stream = io.StringIO()
    ruamel_instance.dump(_to_yaml_document(to_dict(value)), stream)
    return stream.getvalue()


def yaml_deserialize(
    model_cls: type[ModelT],
    data: str | bytes | IO[str],
    strict: bool = False,
) -> ModelT:
    ruamel_instance = create_ruamel_instance(
        preserve_quotes=False, allow_duplicate_keys=not strict
    )
    try:
        loaded = ruamel_instance.load(_read(data))
    except YAMLError as e:
        raise ResourceDeserializationError(e) from e
    logging.debug(f"loaded yaml document for {model_cls.__name__}")
    return _validate(model_cls, loaded, strict, "yaml")


def clone(model: ModelT) -> ModelT:
    return json_deserialize(type(model), json_serialize(model))


def equals(a: BaseModel | None, b: BaseModel | None) -> bool:
    return json_serialize(a) == json_serialize(b)
