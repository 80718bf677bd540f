"""
Readers for feed fields whose shape varies between publishers.

A field value is one of:
- text: a str, number or bool
- node: a mapping with text under `value`/`_`/`#text`/`text` and attributes either
  flat or nested under `$` (the xml2js convention)
- node collection: a list or tuple of the above
- missing: None
"""
from __future__ import annotations

from typing import Any, List, Mapping

_TEXT_KEYS = ("value", "_", "#text", "text")
_ATTR_KEYS = ("term", "url", "href")


def node_list(value: Any) -> List[Any]:
    """Always-a-list view of a field: None -> [], collection -> list, single -> [value]."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def node_attr(node: Any, name: str) -> str:
    """Read attribute `name` from a node, looking at flat keys then under `$`."""
    if not isinstance(node, Mapping):
        return ""
    val = node.get(name)
    if val is None:
        attrs = node.get("$")
        if isinstance(attrs, Mapping):
            val = attrs.get(name)
    if isinstance(val, str):
        return val.strip()
    if isinstance(val, (int, float)) and not isinstance(val, bool):
        return str(val)
    return ""


def _text_of(node: Mapping) -> str:
    for key in _TEXT_KEYS:
        val = node.get(key)
        if isinstance(val, str):
            return val
        if isinstance(val, Mapping):
            inner = _text_of(val)
            if inner:
                return inner
    for key in _ATTR_KEYS:
        val = node_attr(node, key)
        if val:
            return val
    return ""


def normalize_field(value: Any) -> str:
    """
    Reduce any field value to a plain string.

    Strings pass through, scalars are stringified, collections use their first element,
    nodes yield their text content (or a term/url attribute). As a last resort the node
    itself is stringified. None yields "".
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        return normalize_field(value[0]) if value else ""
    if isinstance(value, Mapping):
        text = _text_of(value)
        if text:
            return text
        return str(value)
    return str(value)


def category_label(value: Any) -> str:
    """
    Like `normalize_field`, but for category labels.

    Returns "" (drop the category) instead of stringifying a node with no textual form.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (list, tuple)):
        return category_label(value[0]) if value else ""
    if isinstance(value, Mapping):
        return _text_of(value).strip()
    return ""


def category_labels(value: Any) -> List[str]:
    """All non-empty category labels of an item, in feed order."""
    out = []
    for node in node_list(value):
        label = category_label(node)
        if label:
            out.append(label)
    return out
