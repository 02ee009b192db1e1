"""Repository layer - DDD repository pattern."""

from __future__ import annotations

from row_shape.repository.base import Repository

__all__ = [
    "Repository",
]
