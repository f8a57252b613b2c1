"""Node definitions for the UP document tree."""

from typing import Annotated, Any, Iterable, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import DuplicateKeyError


def find_duplicate_key(keys: Iterable[str]) -> str | None:
    seen: set[str] = set()
    for key in keys:
        if key in seen:
            return key
        seen.add(key)
    return None


class UpScalar(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["scalar"] = "scalar"
    text: str

    def to_python(self) -> str:
        return self.text


class UpMultiline(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["multiline"] = "multiline"
    text: str

    def to_python(self) -> str:
        return self.text


class UpList(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["list"] = "list"
    items: tuple["UpValue", ...] = ()

    def to_python(self) -> list[Any]:
        return [item.to_python() for item in self.items]


class UpTable(BaseModel):
    """Rows of text cells under a fixed, ordered set of column names."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["table"] = "table"
    columns: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...] = ()

    @model_validator(mode="after")
    def _check_shape(self) -> "UpTable":
        duplicate = find_duplicate_key(self.columns)
        if duplicate is not None:
            raise DuplicateKeyError(duplicate)
        for index, row in enumerate(self.rows):
            if len(row) != len(self.columns):
                raise ValueError(f"Row {index} has {len(row)} cells, expected {len(self.columns)}")
        return self

    def row(self, index: int) -> dict[str, str]:
        return dict(zip(self.columns, self.rows[index]))

    def records(self) -> list[dict[str, str]]:
        return [dict(zip(self.columns, row)) for row in self.rows]

    def column(self, name: str) -> list[str] | None:
        if name not in self.columns:
            return None
        position = self.columns.index(name)
        return [row[position] for row in self.rows]

    def to_python(self) -> list[dict[str, str]]:
        return self.records()


class UpNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1)
    annotation: str | None = None
    value: "UpValue"


class NodeContainer:
    """Keyed lookups shared by blocks and documents.

    Every typed getter returns ``None`` both when the key is missing and when
    it holds a different kind of value. Lookups scan ``nodes`` in order, so
    iteration order is never affected.
    """

    def get_node(self, key: str) -> UpNode | None:
        for node in self.nodes:
            if node.key == key:
                return node
        return None

    def get(self, key: str) -> "UpValue | None":
        node = self.get_node(key)
        return node.value if node is not None else None

    def get_annotation(self, key: str) -> str | None:
        node = self.get_node(key)
        return node.annotation if node is not None else None

    def get_scalar(self, key: str) -> str | None:
        value = self.get(key)
        return value.text if isinstance(value, UpScalar) else None

    def get_multiline(self, key: str) -> str | None:
        value = self.get(key)
        return value.text if isinstance(value, UpMultiline) else None

    def get_block(self, key: str) -> "UpBlock | None":
        value = self.get(key)
        return value if isinstance(value, UpBlock) else None

    def get_list(self, key: str) -> "tuple[UpValue, ...] | None":
        value = self.get(key)
        return value.items if isinstance(value, UpList) else None

    def get_table(self, key: str) -> UpTable | None:
        value = self.get(key)
        return value if isinstance(value, UpTable) else None

    def resolve(self, *keys: str) -> "UpValue | None":
        """Follow ``keys`` through nested blocks, e.g. ``resolve("server", "port")``."""
        container: NodeContainer | None = self
        value = None
        for key in keys:
            if container is None:
                return None
            value = container.get(key)
            container = value if isinstance(value, UpBlock) else None
        return value

    def keys(self) -> list[str]:
        return [node.key for node in self.nodes]

    def __contains__(self, key: object) -> bool:
        return any(node.key == key for node in self.nodes)

    def _check_unique_keys(self) -> None:
        duplicate = find_duplicate_key(node.key for node in self.nodes)
        if duplicate is not None:
            raise DuplicateKeyError(duplicate)

    def _nodes_to_python(self) -> dict[str, Any]:
        return {node.key: node.value.to_python() for node in self.nodes}


class UpBlock(NodeContainer, BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["block"] = "block"
    nodes: tuple[UpNode, ...] = ()

    @model_validator(mode="after")
    def _validate_keys(self) -> "UpBlock":
        self._check_unique_keys()
        return self

    def to_python(self) -> dict[str, Any]:
        return self._nodes_to_python()


UpValue = Annotated[
    Union[UpScalar, UpMultiline, UpBlock, UpList, UpTable],
    Field(discriminator="kind"),
]

UpList.model_rebuild()
UpNode.model_rebuild()
UpBlock.model_rebuild()
