"""Parse the example files in tests/examples."""

from uplang import parse
from uplang.nodes import UpBlock, UpList, UpMultiline, UpScalar


def test_example_01_basic_scalars(read_example):
    doc = parse(read_example("01-basic-scalars.up"))
    assert len(doc.nodes) == 19
    assert doc.get_scalar("name") == "Alice Smith"
    assert doc.get_scalar("nickname") == ""
    assert doc.get_scalar("path") == "C:\\Users\\alice"
    assert doc.get_node("created").annotation == "ts"


def test_example_02_blocks(read_example):
    doc = parse(read_example("02-blocks.up"))
    assert len(doc.nodes) == 4
    assert doc.resolve("server", "tls", "cert") == UpScalar(text="/etc/ssl/server.pem")
    assert doc.get_block("features") == UpBlock()


def test_example_03_lists(read_example):
    doc = parse(read_example("03-lists.up"))
    assert len(doc.nodes) >= 5
    assert doc.get_list("fruits") == (
        UpScalar(text="apple"),
        UpScalar(text="banana"),
        UpScalar(text="cherry pie, with cream"),
    )
    servers = doc.get_list("servers")
    assert [server.get_scalar("host") for server in servers] == ["alpha", "beta"]
    assert doc.get_list("nested")[1] == UpList(items=(UpScalar(text="c"), UpScalar(text="d")))


def test_example_04_multiline(read_example):
    doc = parse(read_example("04-multiline.up"))
    assert len(doc.nodes) >= 5
    assert doc.get_multiline("script") == '#!/bin/sh\nif [ -f config.up ]; then\n    echo "found"\nfi'
    assert doc.get_multiline("query") == "SELECT id, name\nFROM users\n\nWHERE active = true"
    assert doc.get_list("notes") == (UpMultiline(text="first note"), UpScalar(text="plain note"))


def test_example_05_tables(read_example):
    doc = parse(read_example("05-tables.up"))
    users = doc.get_table("users")
    assert users.columns == ("id", "name", "email")
    assert len(users.rows) == 3
    assert users.row(2)["email"] == "carol@example.com"
    assert doc.get_table("regions").rows == ()


def test_example_06_comments(read_example):
    doc = parse(read_example("06-comments.up"))
    assert len(doc.nodes) == 6
    assert doc.get_scalar("url") == "https://example.com/#anchor"
    assert doc.get_list("items") == (UpScalar(text="one"), UpScalar(text="two"))
    assert doc.get_multiline("note") == "# not a comment inside a multiline string"
