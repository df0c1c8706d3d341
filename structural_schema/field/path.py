"""Field paths used to attribute validation errors.

A path is a chain of immutable elements. Each element is a field name, an
index into a list, or a key into a map:

    FieldPath.new("spec").child("versions").index(0).child("schema")
        -> "spec.versions[0].schema"

The same chain can be rendered as a JSON pointer so that errors can be
mapped back to line/column positions in the source YAML.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


def jp_escape(token: str) -> str:
    """Escape one JSON pointer reference token (RFC 6901)."""
    return token.replace("~", "~0").replace("/", "~1")


@dataclass(frozen=True)
class FieldPath:
    name: Optional[str] = None
    index_value: Optional[int] = None
    key_value: Optional[str] = None
    parent: Optional["FieldPath"] = None

    @classmethod
    def new(cls, *names: str) -> "FieldPath":
        path = cls()
        for name in names:
            path = path.child(name)
        return path

    def child(self, name: str, *more: str) -> "FieldPath":
        path = FieldPath(name=name, parent=self)
        for extra in more:
            path = FieldPath(name=extra, parent=path)
        return path

    def index(self, index: int) -> "FieldPath":
        return FieldPath(index_value=index, parent=self)

    def key(self, key: str) -> "FieldPath":
        return FieldPath(key_value=key, parent=self)

    def root(self) -> "FieldPath":
        path = self
        while path.parent is not None:
            path = path.parent
        return path

    def _elements(self) -> List["FieldPath"]:
        elements = []
        path: Optional[FieldPath] = self
        while path is not None:
            if path.name is not None or path.index_value is not None or path.key_value is not None:
                elements.append(path)
            path = path.parent
        elements.reverse()
        return elements

    def __str__(self) -> str:
        parts: List[str] = []
        for elem in self._elements():
            if elem.index_value is not None:
                parts.append(f"[{elem.index_value}]")
            elif elem.key_value is not None:
                parts.append(f"[{elem.key_value}]")
            else:
                if parts:
                    parts.append(".")
                parts.append(elem.name)
        return "".join(parts)

    def to_json_pointer(self) -> str:
        tokens = []
        for elem in self._elements():
            if elem.index_value is not None:
                tokens.append(str(elem.index_value))
            elif elem.key_value is not None:
                tokens.append(jp_escape(elem.key_value))
            else:
                tokens.append(jp_escape(elem.name))
        if not tokens:
            return ""
        return "/" + "/".join(tokens)
