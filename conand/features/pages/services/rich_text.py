"""
Rich-text documents: parsing editor JSON into nodes and flattening to plain text.

Editor documents look like {"root": {"type": "root", "children": [...]}} where
leaves carry "text" and containers carry "children".
"""

from __future__ import annotations

from typing import Any

from conand.models.entities import ElementNode, RichText, TextNode

# Containers that sit inside a line of text rather than starting a new block
INLINE_TYPES = frozenset({"link", "autolink", "mark", "hashtag"})


def parse_node(raw: Any):
    """Parse one editor node. Anything unrecognised becomes None."""
    if not isinstance(raw, dict):
        return None
    text = raw.get("text")
    if isinstance(text, str):
        return TextNode(text=text, type=str(raw.get("type") or "text"))
    if raw.get("type") == "linebreak":
        return TextNode(text="\n", type="linebreak")
    children = raw.get("children")
    if isinstance(children, list):
        parsed = tuple(node for node in (parse_node(c) for c in children) if node is not None)
        return ElementNode(type=str(raw.get("type") or "element"), children=parsed)
    return None


def parse_rich_text(raw: Any) -> RichText:
    """Parse a stored rich-text value. Plain strings pass through; malformed input is None."""
    if raw is None:
        return None
    if isinstance(raw, str):
        return raw
    if isinstance(raw, ElementNode):
        return raw
    if isinstance(raw, dict) and isinstance(raw.get("root"), dict):
        root = parse_node(raw["root"])
        if isinstance(root, ElementNode):
            return root
    return None


def _blocks(node: ElementNode) -> list[str]:
    """Flatten a container into its block-level strings."""
    blocks: list[str] = []
    line = ""
    for child in node.children:
        if isinstance(child, TextNode):
            line += child.text
        elif child.type in INLINE_TYPES:
            line += "".join(_blocks(child))
        else:
            if line:
                blocks.append(line)
                line = ""
            blocks.extend(_blocks(child))
    if line:
        blocks.append(line)
    return blocks


def extract_plain_text(value: Any, separator: str = " ") -> str:
    """
    Flatten rich text to a plain string.

    Block-level groups (paragraphs, headings, list items) are joined with
    `separator`: "\\n\\n" where paragraphs matter, " " for one-line previews.
    Plain strings come back unchanged (trimmed); None or malformed input gives "".
    """
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, TextNode):
        return value.text.strip()
    if not isinstance(value, ElementNode):
        value = parse_rich_text(value)
        if isinstance(value, str):
            return value.strip()
        if value is None:
            return ""

    parts = [block.strip() for block in _blocks(value)]
    if "\n" not in separator:
        # One-line context: line breaks inside a block become single spaces
        parts = [" ".join(part.split()) for part in parts]
    return separator.join(part for part in parts if part).strip()


def split_paragraphs(text: str) -> list[str]:
    """Split flattened text into paragraphs on blank lines and newlines."""
    return [p.strip() for p in text.replace("\r\n", "\n").split("\n") if p.strip()]
