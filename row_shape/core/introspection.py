"""Accessor tables for target and key-bearing classes.

Each class gets a table of named accessors computed once from its
declarations: properties, explicit ``get_<name>`` / ``set_<name>`` methods,
dataclass and Pydantic fields, plain annotations and ``__slots__``. A plain
class declaring none of the fields falls back to its ``__init__`` parameters.
Getters and setters are resolved independently by walking the MRO from
the most-derived class; the first class declaring one wins.
"""

from __future__ import annotations

import dataclasses
import inspect
import operator
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Any, ClassVar, get_origin

from pydantic import BaseModel
from sqlalchemy.orm import DeclarativeBase, QueryableAttribute

from row_shape.core.config import ShapeConfig, resolve_config
from row_shape.core.exceptions import (
    AccessorInvocationError,
    ArgumentMissingError,
    MissingAccessorError,
)

Getter = Callable[[Any], Any]
Setter = Callable[[Any, Any], None]

# Framework bases whose own members are never treated as properties.
_STOP_CLASSES: frozenset[type] = frozenset({object, BaseModel, DeclarativeBase})


@dataclass(frozen=True)
class Accessor:
    """A named property slot on a class."""

    name: str
    getter: Getter | None = None
    setter: Setter | None = None

    @property
    def readable(self) -> bool:
        return self.getter is not None

    @property
    def writable(self) -> bool:
        return self.setter is not None


def _field_setter(name: str) -> Setter:
    def _set(obj: Any, value: Any) -> None:
        setattr(obj, name, value)

    return _set


def _is_frozen(cls: type) -> bool:
    """Return True for frozen dataclasses and frozen Pydantic models."""
    params = getattr(cls, "__dataclass_params__", None)
    if params is not None and params.frozen:
        return True
    if issubclass(cls, BaseModel):
        return bool(cls.model_config.get("frozen", False))
    return False


def _is_class_var(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.startswith(("ClassVar", "typing.ClassVar"))
    return annotation is ClassVar or get_origin(annotation) is ClassVar


def _declared_fields(klass: type) -> list[str]:
    """Field names declared directly on *klass* (not inherited)."""
    names: list[str] = []
    for name, annotation in inspect.get_annotations(klass).items():
        if not _is_class_var(annotation):
            names.append(name)

    slots = vars(klass).get("__slots__", ())
    if isinstance(slots, str):
        slots = (slots,)
    names.extend(slot for slot in slots if slot not in names)

    if dataclasses.is_dataclass(klass):
        # InitVar pseudo-fields are annotated but never stored
        stored = {f.name for f in dataclasses.fields(klass)}
        names = [n for n in names if n in stored or n in slots]
    return [n for n in names if not n.startswith("_")]


def _init_parameters(klass: type) -> list[str]:
    """Named ``__init__`` parameters declared directly on *klass*."""
    init = vars(klass).get("__init__")
    if not inspect.isfunction(init):
        return []
    try:
        sig = inspect.signature(init)
    except (ValueError, TypeError):
        return []
    return [
        name
        for name, param in list(sig.parameters.items())[1:]
        if param.kind in (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY)
        and not name.startswith("_")
    ]


def _declared_accessors(
    klass: type,
    getter_prefix: str,
    setter_prefix: str,
    writable_fields: bool,
) -> tuple[dict[str, Getter], dict[str, Setter]]:
    getters: dict[str, Getter] = {}
    setters: dict[str, Setter] = {}

    fields = _declared_fields(klass)
    if not fields and not dataclasses.is_dataclass(klass):
        # Plain class: constructor parameters not already exposed another way
        fields = [
            name
            for name in _init_parameters(klass)
            if not hasattr(klass, name)
            and not hasattr(klass, getter_prefix + name)
            and not hasattr(klass, setter_prefix + name)
        ]

    for name in fields:
        getters[name] = operator.attrgetter(name)
        if writable_fields:
            setters[name] = _field_setter(name)

    for attr_name, member in vars(klass).items():
        if isinstance(member, property):
            if attr_name.startswith("_"):
                continue
            if member.fget is not None:
                getters[attr_name] = member.fget
            if member.fset is not None:
                setters[attr_name] = member.fset
        elif isinstance(member, QueryableAttribute):
            # Mapped ORM columns declared without annotations
            if not attr_name.startswith("_") and attr_name not in getters:
                getters[attr_name] = operator.attrgetter(attr_name)
                setters[attr_name] = _field_setter(attr_name)
        elif inspect.isfunction(member):
            # Explicit accessor methods take precedence within a class
            if attr_name.startswith(getter_prefix) and len(attr_name) > len(getter_prefix):
                getters[attr_name[len(getter_prefix) :]] = member
            elif attr_name.startswith(setter_prefix) and len(attr_name) > len(setter_prefix):
                setters[attr_name[len(setter_prefix) :]] = member

    return getters, setters


@lru_cache(maxsize=256)
def _build_table(cls: type, getter_prefix: str, setter_prefix: str) -> Mapping[str, Accessor]:
    writable_fields = not _is_frozen(cls)
    getters: dict[str, Getter] = {}
    setters: dict[str, Setter] = {}

    for klass in cls.__mro__:
        if klass in _STOP_CLASSES:
            continue
        declared_getters, declared_setters = _declared_accessors(
            klass, getter_prefix, setter_prefix, writable_fields
        )
        for name, getter in declared_getters.items():
            getters.setdefault(name, getter)
        for name, setter in declared_setters.items():
            setters.setdefault(name, setter)

    table = {
        name: Accessor(name=name, getter=getters.get(name), setter=setters.get(name))
        for name in [*getters, *(n for n in setters if n not in getters)]
    }
    return MappingProxyType(table)


def accessor_table(cls: type, config: ShapeConfig | None = None) -> Mapping[str, Accessor]:
    """Return the read-only accessor table for *cls*."""
    if not isinstance(cls, type):
        raise TypeError(f"Expected a class, got {cls!r}")
    cfg = resolve_config(config)
    return _build_table(cls, cfg.getter_prefix, cfg.setter_prefix)


def writable_properties(cls: type, config: ShapeConfig | None = None) -> dict[str, Accessor]:
    """Return the accessors of *cls* that have a setter, by name."""
    return {name: acc for name, acc in accessor_table(cls, config).items() if acc.writable}


def find_getter(cls: type, name: str, config: ShapeConfig | None = None) -> Getter | None:
    """Resolve the getter for *name* on *cls* or its bases, or None."""
    accessor = accessor_table(cls, config).get(name)
    return accessor.getter if accessor is not None else None


def find_setter(cls: type, name: str, config: ShapeConfig | None = None) -> Setter | None:
    """Resolve the setter for *name* on *cls* or its bases, or None."""
    accessor = accessor_table(cls, config).get(name)
    return accessor.setter if accessor is not None else None


def get_property(obj: Any, name: str, config: ShapeConfig | None = None) -> Any:
    """Read property *name* from *obj* through its resolved getter."""
    if obj is None:
        raise ArgumentMissingError("obj")
    cls = type(obj)
    getter = find_getter(cls, name, config)
    if getter is None:
        raise MissingAccessorError(cls.__name__, name, "getter")
    try:
        return getter(obj)
    except Exception as e:
        raise AccessorInvocationError(cls.__name__, name, str(e)) from e


def set_property(obj: Any, name: str, value: Any, config: ShapeConfig | None = None) -> None:
    """Write *value* to property *name* of *obj* through its resolved setter."""
    if obj is None:
        raise ArgumentMissingError("obj")
    cls = type(obj)
    setter = find_setter(cls, name, config)
    if setter is None:
        raise MissingAccessorError(cls.__name__, name, "setter")
    try:
        setter(obj, value)
    except Exception as e:
        raise AccessorInvocationError(cls.__name__, name, str(e)) from e
