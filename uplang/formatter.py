"""Writers for UP documents: canonical UP text and a readable tree outline."""

from __future__ import annotations

import textwrap
from dataclasses import dataclass

from .document import UpDocument
from .lexer import ANNOTATION_RE, FENCE, KEY_RE, is_structural
from .nodes import UpBlock, UpList, UpMultiline, UpNode, UpScalar, UpTable, UpValue
from .parser import TABLE_ANNOTATION


@dataclass
class UpFormatter:
    """Writes documents back as UP text that parses to an equal document.

    UP has no escapes, so values without a UP spelling (a scalar containing
    a newline, a scalar that reads like ``{`` or ``[a]``, ...) raise
    ``ValueError`` instead of being written ambiguously.
    """

    indent: str = "  "
    inline_lists: bool = True
    max_inline_items: int = 8

    def format_document(self, document: UpDocument) -> str:
        lines: list[str] = []
        for node in document.nodes:
            lines.extend(self.format_node(node, level=0))
        return "\n".join(lines) + "\n" if lines else ""

    def format_node(self, node: UpNode, level: int) -> list[str]:
        if (node.annotation == TABLE_ANNOTATION) != isinstance(node.value, UpTable):
            raise ValueError(f"Node '{node.key}': only tables may be annotated '{TABLE_ANNOTATION}'")
        head = self._format_head(node)
        value = node.value
        if isinstance(value, UpScalar):
            if not value.text:
                return [f"{self._indent(level)}{head}"]
            if not self._is_entry_text(value.text):
                raise ValueError(f"Node '{node.key}': scalar {value.text!r} cannot be written as UP")
            return [f"{self._indent(level)}{head} {value.text}"]
        if isinstance(value, UpTable):
            return self._format_table(f"{head} ", value, level)
        return self._format_value(f"{head} ", value, level)

    def _format_value(self, prefix: str, value: UpValue, level: int) -> list[str]:
        if isinstance(value, UpBlock):
            return self._format_block(prefix, value, level)
        if isinstance(value, UpList):
            return self._format_list(prefix, value, level)
        if isinstance(value, UpMultiline):
            return self._format_multiline(prefix, value, level)
        if isinstance(value, UpTable):
            raise ValueError("Tables can only be written as node values")
        # scalar list item
        if not self._is_item_text(value.text):
            raise ValueError(f"List item {value.text!r} cannot be written on its own line")
        return [f"{self._indent(level)}{value.text}"]

    def _format_block(self, prefix: str, block: UpBlock, level: int) -> list[str]:
        if not block.nodes:
            return [f"{self._indent(level)}{prefix}{{}}"]
        lines = [f"{self._indent(level)}{prefix}{{"]
        for node in block.nodes:
            lines.extend(self.format_node(node, level + 1))
        lines.append(f"{self._indent(level)}}}")
        return lines

    def _format_list(self, prefix: str, value: UpList, level: int) -> list[str]:
        if not value.items:
            return [f"{self._indent(level)}{prefix}[]"]
        if self.inline_lists and self._can_inline_list(value):
            return [f"{self._indent(level)}{prefix}{self._format_inline_list(value)}"]

        lines = [f"{self._indent(level)}{prefix}["]
        for item in value.items:
            lines.extend(self._format_value("", item, level + 1))
        lines.append(f"{self._indent(level)}]")
        return lines

    def _format_multiline(self, prefix: str, value: UpMultiline, level: int) -> list[str]:
        text = value.text
        body = text.split("\n") if text else []
        if textwrap.dedent(text) != text or any(line.strip() in {FENCE, FENCE + ","} for line in body):
            raise ValueError(f"Multiline text {text!r} cannot be written between fences")
        lines = [f"{self._indent(level)}{prefix}{FENCE}"]
        lines.extend(f"{self._indent(level + 1)}{line}" if line else "" for line in body)
        lines.append(f"{self._indent(level)}{FENCE}")
        return lines

    def _format_table(self, prefix: str, table: UpTable, level: int) -> list[str]:
        cells = [*table.columns, *(cell for row in table.rows for cell in row)]
        if not all(self._is_inline_text(cell) for cell in cells):
            raise ValueError("Table cells cannot contain ',', '[', ']' or surrounding whitespace")
        lines = [
            f"{self._indent(level)}{prefix}{{",
            f"{self._indent(level + 1)}columns [{', '.join(table.columns)}]",
        ]
        if table.rows:
            lines.append(f"{self._indent(level + 1)}rows {{")
            lines.extend(f"{self._indent(level + 2)}[{', '.join(row)}]" for row in table.rows)
            lines.append(f"{self._indent(level + 1)}}}")
        lines.append(f"{self._indent(level)}}}")
        return lines

    # Helpers -----------------------------------------------------------------
    def _format_head(self, node: UpNode) -> str:
        if not KEY_RE.fullmatch(node.key) or node.key.startswith("#"):
            raise ValueError(f"Key {node.key!r} cannot be written as UP")
        if node.annotation is None:
            return node.key
        if not ANNOTATION_RE.fullmatch(node.annotation):
            raise ValueError(f"Annotation {node.annotation!r} cannot be written as UP")
        return f"{node.key}!{node.annotation}"

    def _format_inline_list(self, value: UpList) -> str:
        parts = [
            self._format_inline_list(item) if isinstance(item, UpList) else item.text
            for item in value.items
        ]
        return f"[{', '.join(parts)}]"

    def _can_inline_list(self, value: UpList) -> bool:
        if len(value.items) > self.max_inline_items:
            return False
        for item in value.items:
            if isinstance(item, UpList):
                if not self._can_inline_list(item):
                    return False
            elif not isinstance(item, UpScalar) or not self._is_inline_text(item.text):
                return False
        return True

    def _is_inline_text(self, text: str) -> bool:
        return bool(text) and text == text.strip() and not any(ch in ",[]\n" for ch in text)

    def _is_entry_text(self, text: str) -> bool:
        return text == text.strip() and "\n" not in text and not is_structural(text)

    def _is_item_text(self, text: str) -> bool:
        return (
            bool(text)
            and self._is_entry_text(text)
            and text[0] not in "#}]"
            and not text.endswith(",")
        )

    def _indent(self, level: int) -> str:
        return "" if level <= 0 else self.indent * level


def format_tree(document: UpDocument) -> str:
    """Render an indented outline of ``document``, one line per value."""
    lines = ["Document"]
    for node in document.nodes:
        label = node.key if node.annotation is None else f"{node.key}!{node.annotation}"
        _outline(label, node.value, 1, lines)
    return "\n".join(lines)


def _outline(label: str, value: UpValue, level: int, lines: list[str]) -> None:
    pad = "  " * level
    if isinstance(value, UpScalar):
        lines.append(f"{pad}Scalar: {label} = {value.text}" if label else f"{pad}Scalar: {value.text}")
    elif isinstance(value, UpMultiline):
        lines.append(f"{pad}Multiline: {label}".rstrip())
        lines.extend(f"{pad}  | {line}".rstrip() for line in value.text.split("\n"))
    elif isinstance(value, UpBlock):
        lines.append(f"{pad}Block: {label}".rstrip())
        for node in value.nodes:
            child = node.key if node.annotation is None else f"{node.key}!{node.annotation}"
            _outline(child, node.value, level + 1, lines)
    elif isinstance(value, UpList):
        lines.append(f"{pad}List: {label}".rstrip())
        for item in value.items:
            _outline("", item, level + 1, lines)
    elif isinstance(value, UpTable):
        lines.append(f"{pad}Table: {label} [{', '.join(value.columns)}]")
        lines.extend(f"{pad}  Row: {' | '.join(row)}" for row in value.rows)


__all__ = ["UpFormatter", "format_tree"]
