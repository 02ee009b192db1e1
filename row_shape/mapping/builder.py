"""One-to-many mapping DSL builder.

Provides a fluent builder for defining one-to-many grouping plans.
Property names are resolved through the accessor tables of the one-side
and many-side classes when the plan is built.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from row_shape.core.config import ShapeConfig
from row_shape.core.exceptions import PlanCompilationError
from row_shape.core.introspection import find_getter, find_setter
from row_shape.mapping.plan import OneToManyPlan

KeySpec = str | Callable[[Any], Any]


def one_to_many(
    one_class: type,
    many_class: type,
    *,
    one: Any = 0,
    many: Any = 1,
    config: ShapeConfig | None = None,
) -> OneToManyBuilder:
    """Entry point for the one-to-many mapping DSL.

    Args:
        one_class: The one-side (parent) class.
        many_class: The many-side (child) class.
        one: Row index, row key or extractor for the one-side object.
        many: Row index, row key or extractor for the many-side object.
        config: Accessor naming configuration.

    Returns:
        A builder for chaining mapping declarations.
    """
    return OneToManyBuilder(one_class, many_class, one=one, many=many, config=config)


class OneToManyBuilder:
    """Fluent builder for one-to-many grouping definitions."""

    def __init__(
        self,
        one_class: type,
        many_class: type,
        *,
        one: Any = 0,
        many: Any = 1,
        config: ShapeConfig | None = None,
    ) -> None:
        self._one_class = one_class
        self._many_class = many_class
        self._one = one
        self._many = many
        self._config = config
        self._one_key: KeySpec | None = None
        self._many_key: KeySpec | None = None
        self._collection_getter: KeySpec | None = None
        self._collection_setter: Callable[[Any, Any], None] | None = None

    def key(self, key: KeySpec) -> OneToManyBuilder:
        """Set the identity key of the one-side class (property name or function)."""
        self._one_key = key
        return self

    def many_key(self, key: KeySpec) -> OneToManyBuilder:
        """Set the identity key of the many-side class (property name or function)."""
        self._many_key = key
        return self

    def collection(
        self,
        getter: KeySpec,
        setter: Callable[[Any, Any], None] | None = None,
    ) -> OneToManyBuilder:
        """Declare the collection holding many-side objects.

        Pass a property name to resolve both accessors, or a getter and
        setter function pair.
        """
        self._collection_getter = getter
        self._collection_setter = setter
        return self

    def _resolve_getter(self, cls: type, spec: KeySpec, role: str) -> Callable[[Any], Any]:
        if callable(spec):
            return spec
        getter = find_getter(cls, spec, self._config)
        if getter is None:
            raise PlanCompilationError(f"{cls.__name__} has no readable property '{spec}' for {role}")
        return getter

    def build(self) -> OneToManyPlan:
        """Compile and validate the mapping into a OneToManyPlan."""
        if self._one_key is None:
            raise PlanCompilationError("One-side class must have a key set via .key()")
        if self._many_key is None:
            raise PlanCompilationError("Many-side class must have a key set via .many_key()")
        if self._collection_getter is None:
            raise PlanCompilationError("Collection must be declared via .collection()")
        if self._one is None or self._many is None:
            raise PlanCompilationError("Both row parts (one, many) must be set")

        one_key_of = self._resolve_getter(self._one_class, self._one_key, "key")
        many_key_of = self._resolve_getter(self._many_class, self._many_key, "many_key")
        many_list_of = self._resolve_getter(
            self._one_class, self._collection_getter, "collection"
        )

        set_many_list = self._collection_setter
        if set_many_list is None:
            if callable(self._collection_getter):
                raise PlanCompilationError(
                    "A collection getter function needs a matching setter function"
                )
            set_many_list = find_setter(self._one_class, self._collection_getter, self._config)
            if set_many_list is None:
                raise PlanCompilationError(
                    f"{self._one_class.__name__} has no writable property "
                    f"'{self._collection_getter}' for collection"
                )

        return OneToManyPlan(
            one_key_of=one_key_of,
            many_key_of=many_key_of,
            many_list_of=many_list_of,
            set_many_list=set_many_list,
            one=self._one,
            many=self._many,
        )
