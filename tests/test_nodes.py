"""Tests for the document model and its accessors."""

import pytest
from pydantic import ValidationError

from uplang import parse
from uplang.document import UpDocument
from uplang.errors import DuplicateKeyError
from uplang.nodes import UpBlock, UpList, UpMultiline, UpNode, UpScalar, UpTable

SOURCE = """\
name Alice
age!int 30
bio ```
  Writes parsers.
  ```
server {
  host localhost
  port!int 8080
}
tags [a, b]
people!table {
  columns [id, name]
  rows {
    [1, Alice]
    [2, Bob]
  }
}
"""


@pytest.fixture
def doc():
    return parse(SOURCE)


# ---------------------------------------------------------------------------
# Typed accessors
# ---------------------------------------------------------------------------

def test_get_scalar(doc):
    assert doc.get_scalar("name") == "Alice"
    assert doc.get_scalar("age") == "30"


def test_get_block(doc):
    server = doc.get_block("server")
    assert server.get_scalar("host") == "localhost"
    assert server.get_annotation("port") == "int"


def test_get_list(doc):
    assert doc.get_list("tags") == (UpScalar(text="a"), UpScalar(text="b"))


def test_get_multiline(doc):
    assert doc.get_multiline("bio") == "Writes parsers."


def test_get_table(doc):
    table = doc.get_table("people")
    assert table.records() == [{"id": "1", "name": "Alice"}, {"id": "2", "name": "Bob"}]
    assert table.row(1) == {"id": "2", "name": "Bob"}
    assert table.column("name") == ["Alice", "Bob"]
    assert table.column("email") is None


@pytest.mark.parametrize(
    "getter, key",
    [
        ("get_scalar", "server"),
        ("get_scalar", "bio"),
        ("get_multiline", "name"),
        ("get_block", "name"),
        ("get_block", "people"),
        ("get_list", "server"),
        ("get_table", "tags"),
    ],
)
def test_mismatched_kind_is_absent(doc, getter, key):
    assert getattr(doc, getter)(key) is None


@pytest.mark.parametrize("getter", ["get_scalar", "get_multiline", "get_block", "get_list", "get_table", "get"])
def test_missing_key_is_absent(doc, getter):
    assert getattr(doc, getter)("missing") is None


def test_get_node_and_annotation(doc):
    assert doc.get_node("age") == UpNode(key="age", annotation="int", value=UpScalar(text="30"))
    assert doc.get_annotation("name") is None
    assert doc.get_annotation("missing") is None


def test_keys_and_membership(doc):
    assert doc.keys() == ["name", "age", "bio", "server", "tags", "people"]
    assert "server" in doc
    assert "host" not in doc
    assert "host" in doc.get_block("server")


def test_resolve(doc):
    assert doc.resolve("server", "port") == UpScalar(text="8080")
    assert doc.resolve("server") == doc.get("server")
    assert doc.resolve("name", "first") is None
    assert doc.resolve("server", "missing") is None
    assert doc.resolve() is None


# ---------------------------------------------------------------------------
# Construction by hand
# ---------------------------------------------------------------------------

def test_block_rejects_duplicate_keys():
    with pytest.raises(DuplicateKeyError) as info:
        UpBlock(nodes=[UpNode(key="a", value=UpScalar(text="1")), UpNode(key="a", value=UpScalar(text="2"))])
    assert info.value.key == "a"
    assert info.value.line == 0


def test_document_rejects_duplicate_keys():
    with pytest.raises(DuplicateKeyError):
        UpDocument(nodes=[UpNode(key="a", value=UpScalar(text="1")), UpNode(key="a", value=UpBlock())])


def test_table_rejects_duplicate_columns():
    with pytest.raises(DuplicateKeyError):
        UpTable(columns=("id", "id"))


def test_table_rejects_ragged_rows():
    with pytest.raises(ValidationError):
        UpTable(columns=("id", "name"), rows=(("1",),))


def test_node_key_must_not_be_empty():
    with pytest.raises(ValidationError):
        UpNode(key="", value=UpScalar(text="x"))


def test_values_validate_from_plain_data():
    node = UpNode.model_validate(
        {"key": "tags", "value": {"kind": "list", "items": [{"kind": "scalar", "text": "x"}, {"kind": "list"}]}}
    )
    assert node.value == UpList(items=(UpScalar(text="x"), UpList()))


def test_lists_become_tuples():
    block = UpBlock(nodes=[UpNode(key="a", value=UpMultiline(text="x"))])
    assert isinstance(block.nodes, tuple)


def test_documents_are_immutable(doc):
    with pytest.raises(ValidationError):
        doc.nodes = ()
    with pytest.raises(ValidationError):
        doc.nodes[0].key = "renamed"


# ---------------------------------------------------------------------------
# Plain Python conversion
# ---------------------------------------------------------------------------

def test_to_python(doc):
    assert doc.to_python() == {
        "name": "Alice",
        "age": "30",
        "bio": "Writes parsers.",
        "server": {"host": "localhost", "port": "8080"},
        "tags": ["a", "b"],
        "people": [{"id": "1", "name": "Alice"}, {"id": "2", "name": "Bob"}],
    }
