"""One-to-many grouping plan.

Frozen dataclass representing a compiled, validated grouping plan.
Used by OneToManyMapper at execution time.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class OneToManyPlan:
    """Compiled plan for grouping joined ``(one, many)`` rows."""

    one_key_of: Callable[[Any], Any]
    many_key_of: Callable[[Any], Any]
    many_list_of: Callable[[Any], Any]
    set_many_list: Callable[[Any, Any], None]
    one: Any = 0  # row index, row key or extractor for the one side
    many: Any = 1  # row index, row key or extractor for the many side
