"""Library configuration.

ShapeConfig is a frozen Pydantic model. Functions that accept a config
fall back to ``DEFAULT_CONFIG`` when none is given.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ShapeConfig(BaseModel):
    """Defaults for paging and accessor naming."""

    model_config = ConfigDict(frozen=True)

    default_page_size: int = Field(default=20, gt=0)
    max_page_size: int = Field(default=1000, gt=0)
    count_by_default: bool = True
    getter_prefix: str = Field(default="get_", min_length=1)
    setter_prefix: str = Field(default="set_", min_length=1)

    @model_validator(mode="after")
    def check_page_sizes(self) -> ShapeConfig:
        if self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size must not exceed max_page_size")
        return self


DEFAULT_CONFIG = ShapeConfig()


def resolve_config(config: ShapeConfig | None) -> ShapeConfig:
    """Return *config*, or the library default when it is None."""
    return DEFAULT_CONFIG if config is None else config
