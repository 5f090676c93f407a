"""
Structural decoding of Horizon JSON objects into frozen dataclasses.

A resource class declares its fields with `jfield`, naming the JSON key when
it differs from the attribute name. `decode_structure` maps a parsed JSON
object onto such a class, checking presence and primitive types, so the
resource modules stay pure declarations.
"""

import types
from dataclasses import MISSING, dataclass, field, fields
from datetime import datetime
from typing import Any, Callable, TypeVar, Union, get_args, get_origin

from horizon_client.core.exceptions import MalformedResponseError
from horizon_client.core.models import Link

T = TypeVar("T")

_PRIMITIVES = (str, int, float, bool, list, dict)


def jfield(
    key: str | None = None,
    *,
    parse: Callable[[Any], Any] | None = None,
    default: Any = MISSING,
    default_factory: Any = MISSING,
):
    """Declare a dataclass field decoded from the JSON key `key`."""
    metadata = {"json_key": key, "parse": parse}
    if default is not MISSING:
        return field(default=default, metadata=metadata)
    if default_factory is not MISSING:
        return field(default_factory=default_factory, metadata=metadata)
    return field(metadata=metadata)


def optional(key: str | None = None, *, parse: Callable[[Any], Any] | None = None):
    """Shortcut for a field that Horizon may omit or send as null."""
    return jfield(key, parse=parse, default=None)


def parse_datetime(value: Any) -> datetime:
    if not isinstance(value, str):
        raise MalformedResponseError(f"expected an ISO 8601 date, got {value!r}")
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise MalformedResponseError(f"invalid date {value!r}") from e


def parse_links(value: Any) -> dict[str, Link]:
    if not isinstance(value, dict):
        raise MalformedResponseError("_links must be an object")
    links = {}
    for name, payload in value.items():
        link = Link.from_json(payload) if isinstance(payload, dict) else None
        if link is not None:
            links[name] = link
    return links


def _expected_type(annotation: Any) -> type | None:
    if isinstance(annotation, type) and annotation in _PRIMITIVES:
        return annotation
    origin = get_origin(annotation)
    if origin in (Union, types.UnionType):
        candidates = [a for a in get_args(annotation) if a is not type(None)]
        if len(candidates) == 1:
            return _expected_type(candidates[0])
        return None
    if origin in (list, dict):
        return origin
    return None


def _check_type(cls: type, key: str, value: Any, expected: type | None) -> None:
    if expected is None:
        return
    if expected is float and isinstance(value, int) and not isinstance(value, bool):
        return
    if expected is int and isinstance(value, bool):
        raise MalformedResponseError(f"{cls.__name__}.{key}: expected int, got bool")
    if not isinstance(value, expected):
        raise MalformedResponseError(
            f"{cls.__name__}.{key}: expected {expected.__name__}, got {type(value).__name__}"
        )


def decode_structure(cls: type[T], payload: Any) -> T:
    """Build `cls` from a parsed JSON object.

    Raises:
        MalformedResponseError: when a required key is missing, a value has
            the wrong primitive type, or the payload is not an object.
    """
    if not isinstance(payload, dict):
        raise MalformedResponseError(f"{cls.__name__}: expected a JSON object")
    kwargs = {}
    for f in fields(cls):
        if not f.init:
            continue
        key = f.metadata.get("json_key") or f.name
        value = payload.get(key)
        if value is None:
            if f.default is MISSING and f.default_factory is MISSING:
                raise MalformedResponseError(f"{cls.__name__}: missing field '{key}'")
            continue
        parse = f.metadata.get("parse")
        if parse is not None:
            try:
                value = parse(value)
            except (TypeError, ValueError) as e:
                raise MalformedResponseError(f"{cls.__name__}.{key}: {e}") from e
        else:
            _check_type(cls, key, value, _expected_type(f.type))
        kwargs[f.name] = value
    return cls(**kwargs)


@dataclass(frozen=True, kw_only=True)
class Resource:
    """One decoded domain object. Every resource can serve as a cursor."""

    id: str = jfield()
    paging_token: str = jfield()
    links: dict[str, Link] = jfield("_links", parse=parse_links, default_factory=dict)

    def __post_init__(self):
        if not self.paging_token:
            raise MalformedResponseError(f"{type(self).__name__}: empty paging_token")

    @property
    def kind(self) -> Any:
        return type(self).__name__


@dataclass(frozen=True, kw_only=True)
class AssetFields:
    asset_type: str = jfield()
    asset_code: str | None = optional()
    asset_issuer: str | None = optional()


@dataclass(frozen=True, kw_only=True)
class SponsorshipChange:
    new_sponsor: str = jfield()
    former_sponsor: str = jfield()
