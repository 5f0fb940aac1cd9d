"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, digraphctl.toml only contains
overrides.  An empty file is a valid configuration.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from digraphctl.domain.types import Direction

GraphFormat = Literal["json", "mermaid"]


class OutputConfig(BaseModel):
    """[output] section."""

    model_config = {"frozen": True}

    format: GraphFormat = "json"
    include_decorators: bool = False


class FilterConfig(BaseModel):
    """[filter] section."""

    model_config = {"frozen": True}

    direction: Direction = Direction.DOWNSTREAM
    entries: list[str] = Field(default_factory=list)


class CyclesConfig(BaseModel):
    """[cycles] section."""

    model_config = {"frozen": True}

    unique: bool = False


class DigraphConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    output: OutputConfig = Field(default_factory=OutputConfig)
    filter: FilterConfig = Field(default_factory=FilterConfig)
    cycles: CyclesConfig = Field(default_factory=CyclesConfig)
