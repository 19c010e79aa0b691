"""
JSON to dataclass mapping.

Wire keys are kebab-case (`cash-balance`) and map onto snake_case dataclass
fields (`cash_balance`). A field can name its wire key explicitly with
`field(metadata={"json": "..."})`. Unknown keys are ignored and missing keys
keep the field default, so every model field carries a default.

`decode_records` is for the handful of list endpoints that answer with a
bare array on one day and an enveloped one on the next.
"""

from __future__ import annotations

import dataclasses
import json
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from typing import Any, Dict, List, Type, TypeVar, Union, get_args, get_origin, get_type_hints

from .errors import DecodeError
from .models import ListResponse

T = TypeVar("T")

_NONE_TYPE = type(None)


def parse_json(raw: Union[bytes, bytearray, str]) -> Any:
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"response is not valid JSON: {e}") from e


def from_json(shape: Any, value: Any) -> Any:
    """Map an already-parsed JSON value onto `shape`."""
    if shape is Any or isinstance(shape, TypeVar):
        return value

    origin = get_origin(shape)
    if origin is Union:
        args = [a for a in get_args(shape) if a is not _NONE_TYPE]
        if value is None:
            return None
        if value == "" and Decimal in args:
            return None
        if len(args) == 1:
            return from_json(args[0], value)
        for arg in args:
            try:
                return from_json(arg, value)
            except DecodeError:
                continue
        raise DecodeError(f"value {value!r} matches none of {args}")

    if origin in (list, List):
        if not isinstance(value, list):
            raise DecodeError(f"expected array, got {type(value).__name__}")
        (item_shape,) = get_args(shape) or (Any,)
        return [from_json(item_shape, v) for v in value]

    if origin in (dict, Dict) or shape is dict:
        if not isinstance(value, dict):
            raise DecodeError(f"expected object, got {type(value).__name__}")
        return dict(value)

    if dataclasses.is_dataclass(shape):
        return _decode_dataclass(shape, value)

    if shape is Decimal:
        return _to_decimal(value)
    if shape is bool:
        if isinstance(value, bool):
            return value
        raise DecodeError(f"expected boolean, got {value!r}")
    if shape is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise DecodeError(f"expected integer, got {value!r}")
    if shape is float:
        if isinstance(value, bool):
            raise DecodeError(f"expected number, got {value!r}")
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            try:
                return float(value)
            except ValueError as e:
                raise DecodeError(f"expected number, got {value!r}") from e
        raise DecodeError(f"expected number, got {value!r}")
    if shape is str:
        if isinstance(value, str):
            return value
        raise DecodeError(f"expected string, got {value!r}")

    raise DecodeError(f"unsupported target shape {shape!r}")


def to_json(value: Any) -> Any:
    """
    Inverse of `from_json` for request bodies: dataclasses become objects
    keyed by their wire names, None fields are left out, Decimals go out as
    numbers.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        out: Dict[str, Any] = {}
        for name, key, _ in _field_plan(type(value)):
            v = getattr(value, name)
            if v is None:
                continue
            out[key] = to_json(v)
        return out
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items() if v is not None}
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise DecodeError(f"expected decimal, got {value!r}")
    if isinstance(value, (int, str)):
        text = value.replace(",", "") if isinstance(value, str) else value
        try:
            return Decimal(text)
        except InvalidOperation as e:
            raise DecodeError(f"expected decimal, got {value!r}") from e
    if isinstance(value, float):
        return Decimal(repr(value))
    raise DecodeError(f"expected decimal, got {value!r}")


@lru_cache(maxsize=None)
def _field_plan(cls: type) -> tuple:
    hints = get_type_hints(cls)
    plan = []
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        key = f.metadata.get("json", f.name.replace("_", "-"))
        plan.append((f.name, key, hints[f.name]))
    return tuple(plan)


def _decode_dataclass(cls: Type[T], value: Any) -> T:
    if not isinstance(value, dict):
        raise DecodeError(f"expected object for {cls.__name__}, got {type(value).__name__}")
    kwargs: Dict[str, Any] = {}
    for name, key, shape in _field_plan(cls):
        if key not in value:
            continue
        raw = value[key]
        if raw is None and get_origin(shape) is not Union:
            # null for a non-optional field behaves like an absent key
            continue
        try:
            kwargs[name] = from_json(shape, raw)
        except DecodeError as e:
            raise DecodeError(f"{cls.__name__}.{name}: {e}") from e
    return cls(**kwargs)


def decode_records(payload: Any, item_type: Type[T]) -> ListResponse[T]:
    """
    Normalize a list-of-records payload, first match wins:

    1. {"data": [...]}
    2. {"data": {...}}        wrapped as a one-element list, unless it is
                              itself an {"items": [...]} container
    3. {"items": [...]}
    4. [...]                  bare array
    5. {"data": [...], "context": ...} envelope (absent or null data -> empty list)
    6. the whole payload as list[item_type]

    A top-level string `context` is carried over whichever branch matched.
    Raw bytes/str are parsed first; a failure anywhere raises DecodeError.
    """
    if isinstance(payload, (bytes, bytearray, str)):
        payload = parse_json(payload)

    shape = List[item_type]
    context = ""
    if isinstance(payload, dict) and isinstance(payload.get("context"), str):
        context = payload["context"]

    data = payload.get("data") if isinstance(payload, dict) else None
    if isinstance(data, list):
        items = from_json(shape, data)
    elif isinstance(data, dict) and isinstance(data.get("items"), list):
        items = from_json(shape, data["items"])
    elif isinstance(data, dict):
        items = from_json(shape, [data])
    elif isinstance(payload, dict) and isinstance(payload.get("items"), list):
        items = from_json(shape, payload["items"])
    elif isinstance(payload, list):
        items = from_json(shape, payload)
    elif isinstance(payload, dict):
        items = from_json(shape, payload.get("data") or [])
    else:
        items = from_json(shape, payload)

    return ListResponse(items=items, context=context)
