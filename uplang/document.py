"""Top-level UP document container."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from .nodes import NodeContainer, UpNode


class UpDocument(NodeContainer, BaseModel):
    """The ordered top-level nodes produced by one successful parse."""

    model_config = ConfigDict(frozen=True)

    nodes: tuple[UpNode, ...] = ()

    @model_validator(mode="after")
    def _validate_keys(self) -> UpDocument:
        self._check_unique_keys()
        return self

    def to_python(self) -> dict[str, Any]:
        return self._nodes_to_python()
